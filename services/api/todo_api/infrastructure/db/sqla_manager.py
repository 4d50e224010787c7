import todo_api.infrastructure.exceptions as exc
import todo_api.infrastructure.interfaces as mgrs
import todo_api.infrastructure.models  # noqa: F401 registers tables in SQLModel.metadata

import typing as t
import sqlalchemy as sa
import sqlmodel as sqlm

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

import asyncio
import contextlib
import logging

logger = logging.getLogger('app.storage')

__all__ = ['SQLAlchemySessionManager']


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    #SQLite ignores REFERENCES clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SQLAlchemySessionManager(mgrs.SessionManagerInterface[AsyncConnection, AsyncSession]):
    """Owns the async engine of the todo database and hands out sessions and connections.

    Sessions are rolled back when the block raises and always closed afterwards.
    After `close()` every entry point raises `StorageNotInitialized`.
    """

    def __init__(self, host: str, engine_kwargs: dict[str, t.Any] | None = None):
        self._engine: AsyncEngine | None = create_async_engine(host, **(engine_kwargs or {}))
        if self._engine.dialect.name == 'sqlite':
            sa.event.listen(self._engine.sync_engine, 'connect', _enable_sqlite_foreign_keys)
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = async_sessionmaker(bind=self._engine, expire_on_commit=False)

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise exc.StorageNotInitialized("[DB Manager] Engine has been disposed or was never created")
        return self._engine

    async def close(self) -> None:
        await self.engine.dispose()
        self._engine = None
        self._sessionmaker = None

    @contextlib.asynccontextmanager
    async def connect(self) -> t.AsyncIterator[AsyncConnection]:
        """Connection inside a transaction: committed on exit, rolled back on an exception"""
        async with self.engine.begin() as connection:
            yield connection

    @contextlib.asynccontextmanager
    async def session(self, **kwargs) -> t.AsyncIterator[AsyncSession]:
        """`kwargs` build a one-off AsyncSession instead of using the shared factory"""
        if self._sessionmaker is None:
            raise exc.StorageNotInitialized("[DB Manager] Session factory has been disposed or was never created")
        session = AsyncSession(**kwargs) if kwargs else self._sessionmaker()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def _ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(sqlm.text("SELECT 1"))

    async def wait_for_startup(self, attempts: int = 5, interval_sec: int = 5):
        """Pings the database with SELECT 1 until it answers, at most `attempts` times"""
        for attempt in range(1, attempts + 1):
            try:
                await self._ping()
                logger.info("[WAIT FOR DB] SELECT 1 Executed -> Database is up and running!")
                return
            except exc.StorageNotInitialized:
                raise
            except Exception as e:
                logger.info(f"[WAIT FOR DB] Database is not ready yet ({attempt}/{attempts}): {e}")
                if attempt < attempts:
                    await asyncio.sleep(interval_sec)
        logger.error(f"[WAIT FOR DB] Database is not available after {attempts} attempts.")
        raise exc.StorageBootError(f"Database failed to boot within {attempts*interval_sec}sec!")

    async def initialize_data_structures(self):
        logger.info('[INIT DB] Creating tables users, todos (if missing)...')
        async with self.engine.begin() as conn:
            await conn.run_sync(sqlm.SQLModel.metadata.create_all)

    async def flush_data(self):
        logger.info('[DB] Dropping all tables.')
        async with self.engine.begin() as conn:
            await conn.run_sync(sqlm.SQLModel.metadata.drop_all)
