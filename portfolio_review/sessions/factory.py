from portfolio_review.config.settings import Settings
from portfolio_review.database.repositories.session_repository import PostgresSessionStore
from portfolio_review.sessions.base import BaseSessionStore
from portfolio_review.sessions.memory_store import InMemorySessionStore


class SessionStoreFactory:
    """Creates the session store backend selected in settings."""

    BACKENDS = ("memory", "postgres")

    @classmethod
    async def create(cls, settings: Settings) -> BaseSessionStore:
        backend = settings.session_store_backend.lower()
        if backend == "memory":
            return InMemorySessionStore()
        if backend == "postgres":
            return await PostgresSessionStore.connect(settings)
        raise ValueError(
            f"Unknown session store backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
