from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    Enable SQLite foreign key enforcement for every DBAPI connection.
    """

    @event.listens_for(engine.sync_engine.pool, "connect")  # pragma: no cover
    def _set_sqlite_pragma(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(
    database_url: str,
    *,
    echo: bool = False,
    **engine_kwargs: Any,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """
    Create an asynchronous SQLAlchemy engine and its session factory.

    Nothing is kept at module level; the caller owns both objects and
    passes the engine back to `create_all()` and `close_db()`.

    Args:
        database_url: The connection URL (e.g., 'sqlite+aiosqlite:///inkwell.db').
        echo: If True, SQLAlchemy will log all emitted SQL.
        **engine_kwargs: Additional keyword arguments passed to `create_async_engine`.

    Returns:
        The engine and a session factory bound to it.

    Example:
        >>> engine, factory = init_db("sqlite+aiosqlite:///inkwell.db")
        >>> async with factory() as db:
        ...     await Article.objects.all().count(db)
    """
    is_sqlite = database_url.startswith("sqlite")

    options: dict[str, Any] = {
        "echo": echo,
        **engine_kwargs,
    }

    if is_sqlite:
        # SQLite does not support pooling options
        options.pop("pool_size", None)
        options.pop("max_overflow", None)
        options.pop("pool_pre_ping", None)
        options.setdefault("connect_args", {"check_same_thread": False})
        if ":memory:" in database_url:
            # One shared connection, or each session sees an empty database
            options.setdefault("poolclass", StaticPool)
    else:
        options.setdefault("pool_pre_ping", True)

    engine = create_async_engine(database_url, **options)

    if is_sqlite:
        _enable_sqlite_foreign_keys(engine)

    session_factory = async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )
    return engine, session_factory


async def create_all(engine: AsyncEngine) -> None:
    """
    Create every table registered on `Model.metadata`.

    Example:
        >>> await create_all(engine)
    """
    from .models import Model

    async with engine.begin() as conn:
        await conn.run_sync(Model.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """
    Dispose of the engine's connection pool.

    Example:
        >>> await close_db(engine)
    """
    await engine.dispose()
