from fastapi import Depends
import typing as t

import todo_api.infrastructure.db as db
from todo_api.infrastructure.db.sqla_manager import SQLAlchemySessionManager
import todo_api.infrastructure.repositories as repos
import todo_api.infrastructure.security as security
import todo_api.infrastructure.adapters as adap
from todo_api.common.config import Config

from sqlalchemy.ext.asyncio import AsyncSession


#Auth infrastructure choices
AuthStrategyType = security.JWTAuthStrategy

_PasswordHasherType = security.BCryptHasher
PasswordHasherType = lambda: adap.AsyncHasher(_PasswordHasherType())


#####################################
#             Databases             #
#####################################

DatabaseManagerType = SQLAlchemySessionManager
DatabaseSessionType = AsyncSession
DatabaseManager = DatabaseManagerType(Config.DB_URL, Config.DB_KWARGS)

UnitOfWork = db.SQLAlchemyUnitOfWork

async def get_db_session():
    async with DatabaseManager.session() as session:
        yield session

DatabaseDependency = t.Annotated[DatabaseSessionType, Depends(get_db_session)]

async def get_uow(session: DatabaseDependency) -> t.AsyncIterable[UnitOfWork]:
    #Commits on success, rolls back when the endpoint raises
    async with UnitOfWork(session) as uow:
        yield uow
UoWDependency = t.Annotated[UnitOfWork, Depends(get_uow)]


#####################################
#            Repositories           #
#####################################

UserRepository = repos.SQLAUserRepository
TodoRepository = repos.SQLATodoRepository

async def get_user_repo(uow: UoWDependency):
    return UserRepository(uow)

async def get_todo_repo(uow: UoWDependency):
    return TodoRepository(uow)

UserRepoDependency = t.Annotated[UserRepository, Depends(get_user_repo)]
TodoRepoDependency = t.Annotated[TodoRepository, Depends(get_todo_repo)]
