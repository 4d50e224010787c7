#Fastapi
from fastapi import APIRouter, Query, Path, Response, status
#Project files
import todo_api.application.dependencies as deps
import todo_api.application.models as mapp
import todo_api.domain.repositories as repos
import todo_api.presentation.schemas as schemas
#Pydantic/Typing
import typing as t
import uuid

import logging
logger = logging.getLogger('app')


########################################
#                Setup                 #
########################################

router = APIRouter(
    prefix="/users",
    tags = ["users"],
    responses={404: {"description": "Requested resource is not found"}}
    )

UserId = t.Annotated[uuid.UUID, Path(description='User identifier')]


def _to_dto(user: mapp.UserResult) -> schemas.UserDTO:
    return schemas.UserDTO.model_validate(user, from_attributes=True)


########################################
#          SIGNUP & OWN PROFILE        #
########################################

@router.post("/register", status_code=status.HTTP_201_CREATED, responses={
    201: {"description": "Created successfully"},
    409: {"description": "User already exists"},
    })
async def register(
        user_service: deps.UserServiceDependency,
        new_user: schemas.PublicUserCreationModel,
    ) -> schemas.ApiResponse[schemas.UserDTO]:
    user = await user_service.register(mapp.RegisterUserCommand.model_validate(new_user.model_dump()))
    return schemas.ApiResponse.ok(_to_dto(user), message="User registered")


@router.get("/me", description="Available with a temporary password too")
async def whoami(current_user: deps.CurrentUserDependency) -> schemas.ApiResponse[schemas.UserDTO]:
    return schemas.ApiResponse.ok(_to_dto(current_user))


@router.patch("/me", description="Names are replaced as a whole, email changes only when sent")
async def update_profile(
        user_service: deps.UserServiceDependency,
        current_user: deps.InitializedUserDependency,
        edited: schemas.ProfileUpdateModel,
    ) -> schemas.ApiResponse[schemas.UserDTO]:
    command = mapp.UpdateProfileCommand(**edited.model_dump(exclude_unset=True))
    user = await user_service.update_profile(current_user, command)
    return schemas.ApiResponse.ok(_to_dto(user), message="Profile updated")


@router.post("/me/password/initialize", responses={
    409: {"description": "Password has already been initialized"},
    422: {"description": "New password is too short or equals the temporary one"},
    })
async def initialize_password(
        user_service: deps.UserServiceDependency,
        current_user: deps.CurrentUserDependency,
        body: schemas.PasswordInitializeModel,
    ) -> schemas.ApiResponse[schemas.UserDTO]:
    user = await user_service.initialize_password(current_user, body.new_password)
    return schemas.ApiResponse.ok(_to_dto(user), message="Password initialized")


@router.post("/me/password", responses={422: {"description": "Old password is invalid or equals the new one"}})
async def change_password(
        user_service: deps.UserServiceDependency,
        current_user: deps.InitializedUserDependency,
        body: schemas.PasswordChangeModel,
    ) -> schemas.ApiResponse[schemas.UserDTO]:
    user = await user_service.change_password(current_user, body.old_password, body.new_password)
    return schemas.ApiResponse.ok(_to_dto(user), message="Password changed")


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_me(
        user_service: deps.UserServiceDependency,
        current_user: deps.InitializedUserDependency,
    ):
    await user_service.delete(current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


########################################
#          STAFF: USER CRUD            #
########################################

@router.get('', responses={403: {"description": "Returned when a regular user accesses this endpoint"}})
async def get_users(
        user_service: deps.UserServiceDependency,
        current_user: deps.InitializedUserDependency,
        limit: t.Annotated[int, Query(ge=1, le=100)] = 100,
        offset: t.Annotated[int, Query(ge=0)] = 0,
        filter_mode: t.Annotated[t.Literal["and","or"], Query()] = "and",
        username: str | None = Query(None),
        email: str | None = Query(None),
        role: schemas.RoleInput | None = Query(None),
    ) -> schemas.ApiResponse[list[schemas.UserDTO]]:
    filters = repos.UserFilter(username=username, email=email, role=role)
    users = await user_service.list(current_user, limit, offset, filters, filter_mode)
    return schemas.ApiResponse.ok([_to_dto(u) for u in users])


@router.get('/{user_id}')
async def get_user(
        user_service: deps.UserServiceDependency,
        current_user: deps.InitializedUserDependency,
        user_id: UserId,
    ) -> schemas.ApiResponse[schemas.UserDTO]:
    '''Returns a user specified by user_id'''
    return schemas.ApiResponse.ok(_to_dto(await user_service.get_user(user_id)))


@router.post("", responses= {
        201: {"description":"Created successfully"},
        409: {"description":"User already exists"},
        403: {"description":"Returned when a regular user accesses this endpoint"},
    },status_code=status.HTTP_201_CREATED,
)
async def create_user_for_staff(
        user_service: deps.UserServiceDependency,
        current_user: deps.InitializedUserDependency,
        new_user_data: schemas.PrivateUserCreationModel,
    ) -> schemas.ApiResponse[schemas.UserDTO]:
    command = mapp.AdminCreateUserCommand.model_validate(new_user_data, from_attributes=True)
    user = await user_service.admin_create(current_user, command)
    return schemas.ApiResponse.ok(_to_dto(user), message="User created")


@router.patch('/{user_id}/role', responses={403: {"description": "Admins only, own role cannot be changed"}})
async def change_role(
        user_service: deps.UserServiceDependency,
        current_user: deps.InitializedUserDependency,
        user_id: UserId,
        body: schemas.RoleChangeModel,
    ) -> schemas.ApiResponse[schemas.UserDTO]:
    user = await user_service.change_role(current_user, user_id, body.role)
    return schemas.ApiResponse.ok(_to_dto(user), message="Role changed")


@router.post('/{user_id}/password/reset', responses={403: {"description": "Admins only"}})
async def reset_password(
        user_service: deps.UserServiceDependency,
        current_user: deps.InitializedUserDependency,
        user_id: UserId,
        body: schemas.PasswordResetModel,
    ) -> schemas.ApiResponse[schemas.UserDTO]:
    user = await user_service.admin_reset_password(current_user, user_id, body.new_password)
    return schemas.ApiResponse.ok(_to_dto(user), message="Temporary password set")


@router.delete('/{user_id}', status_code=status.HTTP_204_NO_CONTENT, response_class=Response, responses= {
    403: {"description": "Admins only, own account cannot be deleted here"},
})
async def delete_user(
    user_service: deps.UserServiceDependency,
    current_user: deps.InitializedUserDependency,
    user_id: UserId,
    ):
    await user_service.admin_delete(current_user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
