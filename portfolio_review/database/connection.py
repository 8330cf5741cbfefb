from psycopg_pool import AsyncConnectionPool

from portfolio_review.config.settings import Settings


def build_conninfo(settings: Settings) -> str:
    """Build a libpq connection string from settings."""
    return (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )


async def open_pool(
    settings: Settings,
    min_size: int = 1,
    max_size: int = 10,
) -> AsyncConnectionPool:
    """Open an async connection pool. The caller owns it and must close it."""
    pool = AsyncConnectionPool(
        build_conninfo(settings),
        min_size=min_size,
        max_size=max_size,
        open=False,
    )
    await pool.open(wait=True)
    return pool
