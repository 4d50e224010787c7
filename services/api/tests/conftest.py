import os

#Must be set before the app modules read Config
os.environ.setdefault("DB_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-used-only-by-the-test-suite-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JSON_LOGS", "0")
os.environ.pop("OTEL_GRPC_ENDPOINT", None)

import pytest, typing as t, httpx
import pytest_asyncio as pytestaio
from sqlalchemy.ext.asyncio import AsyncSession
import todo_api.infrastructure.dependencies as ideps
import todo_api.main as main
from todo_api.common.config import Config

import logging
logger = logging.getLogger('app')

#
# Every test gets its own SQLite file, so nothing is shared between event loops
#

def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytestaio.fixture(scope='function')
async def database_manager(tmp_path) -> t.AsyncGenerator[ideps.DatabaseManagerType, None]:
    mgr = ideps.DatabaseManagerType(sqlite_url(tmp_path), Config.DB_KWARGS)
    await mgr.initialize_data_structures()
    yield mgr
    await mgr.close()

@pytestaio.fixture(scope="function")
async def db_session(database_manager: ideps.DatabaseManagerType) -> t.AsyncGenerator[AsyncSession, None]:
    async with database_manager.session() as session:
        yield session

@pytestaio.fixture(scope="function")
async def uow(db_session: AsyncSession) -> t.AsyncIterator[ideps.UnitOfWork]:
    yield ideps.UnitOfWork(db_session)

@pytestaio.fixture(scope="function")
async def user_repo(uow: ideps.UnitOfWork) -> ideps.UserRepository:
    return ideps.UserRepository(uow)

@pytestaio.fixture(scope="function")
async def todo_repo(uow: ideps.UnitOfWork) -> ideps.TodoRepository:
    return ideps.TodoRepository(uow)


@pytestaio.fixture(scope='function')
async def async_client(uow: ideps.UnitOfWork):

    async def override_get_uow():
        async with uow:
            yield uow

    main.app.dependency_overrides[ideps.get_uow] = override_get_uow

    transport = httpx.ASGITransport(app=main.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://app:8000/api") as client:
        yield client

    del main.app.dependency_overrides[ideps.get_uow]
