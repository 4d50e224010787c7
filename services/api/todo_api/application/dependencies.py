from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
import typing as t

import todo_api.infrastructure.dependencies as ideps
import todo_api.application.services as services
import todo_api.application.models as mapp
import todo_api.application.exceptions as appexc

async def get_auth_service(user_repo: ideps.UserRepoDependency):
    #use a matching service here
    strategy = ideps.AuthStrategyType(user_repo, ideps.PasswordHasherType())
    return services.JWTAuthService(strategy)

async def get_user_service(user_repo: ideps.UserRepoDependency):
    return services.UserService(user_repo, ideps.PasswordHasherType())

async def get_todo_service(todo_repo: ideps.TodoRepoDependency, user_repo: ideps.UserRepoDependency):
    return services.TodoService(todo_repo, user_repo)

UserServiceDependency = t.Annotated[services.UserService, Depends(get_user_service)]
AuthServiceDependency = t.Annotated[services.JWTAuthService, Depends(get_auth_service)]
TodoServiceDependency = t.Annotated[services.TodoService, Depends(get_todo_service)]

OAuthFormData = t.Annotated[OAuth2PasswordRequestForm, Depends()]
OAuthToken = t.Annotated[str, Depends(OAuth2PasswordBearer(tokenUrl='/api/auth/login'))]

async def get_current_user(token: OAuthToken, auth_service: AuthServiceDependency) -> mapp.UserResult:
    return await auth_service.authenticate({"token": token})

CurrentUserDependency = t.Annotated[mapp.UserResult, Depends(get_current_user)]

async def get_initialized_user(user: CurrentUserDependency) -> mapp.UserResult:
    """Accounts with a temporary password may only initialize it"""
    if not user.password_initialized:
        raise appexc.PasswordNotInitialized("Initialize your password before using this endpoint")
    return user

InitializedUserDependency = t.Annotated[mapp.UserResult, Depends(get_initialized_user)]
