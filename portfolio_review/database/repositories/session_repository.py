from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from portfolio_review.config.settings import Settings
from portfolio_review.database.connection import open_pool
from portfolio_review.insights.models import Insight
from portfolio_review.insights.validator import validate_and_build
from portfolio_review.sessions.base import BaseSessionStore
from portfolio_review.sessions.exceptions import (
    DuplicateSessionError,
    SessionNotFoundError,
    SessionStateError,
)
from portfolio_review.sessions.models import (
    UPDATABLE_FIELDS,
    Session,
    SessionStage,
    SessionStatus,
)

_COLUMNS = sql.SQL(
    "id, source_ref, status, stage, progress, result, error, "
    "phone_verified, created_at, updated_at"
)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS analysis_sessions (
    id TEXT PRIMARY KEY,
    source_ref TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending', 'processing', 'completed', 'failed')),
    stage TEXT
        CHECK (stage IS NULL OR (status = 'processing'
               AND stage IN ('parsing', 'analyzing', 'generating'))),
    progress INTEGER NOT NULL DEFAULT 0 CHECK (progress BETWEEN 0 AND 100),
    result JSONB CHECK ((status = 'completed') = (result IS NOT NULL)),
    error TEXT CHECK ((status = 'failed') = (error IS NOT NULL AND error <> '')),
    phone_verified BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


class PostgresSessionStore(BaseSessionStore):
    """Session store on the analysis_sessions table.

    Every mutation is a single ``UPDATE ... RETURNING`` statement, which gives
    per-record atomicity without explicit locking.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    @classmethod
    async def connect(cls, settings: Settings) -> "PostgresSessionStore":
        """Open a pool from settings and make sure the table exists."""
        store = cls(await open_pool(settings))
        await store.ensure_schema()
        return store

    async def ensure_schema(self) -> None:
        async with self._pool.connection() as conn:
            await conn.execute(SCHEMA_SQL)
            await conn.commit()

    async def close(self) -> None:
        await self._pool.close()

    async def create(self, session_id: str, source_ref: str) -> Session:
        query = sql.SQL(
            """
            INSERT INTO analysis_sessions (id, source_ref)
            VALUES (%s, %s)
            ON CONFLICT (id) DO NOTHING
            RETURNING {columns}
            """
        ).format(columns=_COLUMNS)
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(query, (session_id, source_ref))
                row = await cur.fetchone()
            await conn.commit()

        if row is None:
            raise DuplicateSessionError(f"Session {session_id} already exists")
        return _row_to_session(row)

    async def get(self, session_id: str) -> Session | None:
        query = sql.SQL(
            "SELECT {columns} FROM analysis_sessions WHERE id = %s"
        ).format(columns=_COLUMNS)
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(query, (session_id,))
                row = await cur.fetchone()

        if row is None:
            return None
        return _row_to_session(row)

    async def update(
        self,
        session_id: str,
        *,
        expected_status: SessionStatus | None = None,
        **fields: Any,
    ) -> Session:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown session fields: {sorted(unknown)}")

        assignments = [
            sql.SQL("{} = %s").format(sql.Identifier(name)) for name in fields
        ]
        assignments.append(sql.SQL("updated_at = NOW()"))
        params: list[Any] = [_to_db_value(value) for value in fields.values()]
        params.append(session_id)

        condition = sql.SQL("id = %s")
        if expected_status is not None:
            condition = sql.SQL("id = %s AND status = %s")
            params.append(expected_status.value)

        query = sql.SQL(
            "UPDATE analysis_sessions SET {assignments} WHERE {condition} RETURNING {columns}"
        ).format(
            assignments=sql.SQL(", ").join(assignments),
            condition=condition,
            columns=_COLUMNS,
        )
        try:
            async with self._pool.connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(query, params)
                    row = await cur.fetchone()
                await conn.commit()
        except psycopg.errors.CheckViolation as exc:
            raise ValueError(f"Session {session_id} update violates invariants: {exc}") from exc

        if row is not None:
            return _row_to_session(row)

        current = await self.get(session_id)
        if current is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        raise SessionStateError(
            f"Session {session_id} is {current.status.value}, "
            f"expected {expected_status.value if expected_status else 'any'}"
        )


def _to_db_value(value: Any) -> Any:
    if isinstance(value, (SessionStatus, SessionStage)):
        return value.value
    if isinstance(value, Insight):
        return Jsonb(value.to_dict())
    return value


def _row_to_session(row: dict[str, Any]) -> Session:
    return Session(
        id=row["id"],
        source_ref=row["source_ref"],
        status=SessionStatus(row["status"]),
        stage=SessionStage(row["stage"]) if row["stage"] is not None else None,
        progress=row["progress"],
        result=validate_and_build(row["result"]) if row["result"] is not None else None,
        error=row["error"],
        phone_verified=row["phone_verified"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
