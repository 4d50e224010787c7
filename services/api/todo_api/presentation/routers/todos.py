#Fastapi
from fastapi import APIRouter, Query, Path, Response, status
#Project files
import todo_api.application.dependencies as deps
import todo_api.application.models as mapp
import todo_api.presentation.schemas as schemas
#Pydantic/Typing
import typing as t
import uuid


########################################
#                Setup                 #
########################################

router = APIRouter(
    prefix="/todos",
    tags = ["todos"],
    responses={
        401: {"description": "Missing, invalid or expired token"},
        403: {"description": "Password is not initialized yet or the todo belongs to someone else"},
        404: {"description": "Requested resource is not found"},
    }
    )

TodoId = t.Annotated[uuid.UUID, Path(description='Todo identifier')]


def _to_response(result: mapp.TodoResult) -> schemas.TodoResponse:
    return schemas.TodoResponse.model_validate(result, from_attributes=True)


########################################
#             TODO CRUD                #
########################################

@router.post("", status_code=status.HTTP_201_CREATED, responses={
    201: {"description": "Created successfully"},
    422: {"description": "Title is empty or too long, descriptions too long"},
    })
async def create_todo(
        todo_service: deps.TodoServiceDependency,
        current_user: deps.InitializedUserDependency,
        todo: schemas.TodoCreateRequest,
    ) -> schemas.ApiResponse[schemas.TodoResponse]:
    command = mapp.CreateTodoCommand(user_id=current_user.id, title=todo.title, descriptions=todo.descriptions)
    result = await todo_service.create(command)
    return schemas.ApiResponse.ok(_to_response(result), message="Todo created")


@router.get("", description="Lists todos of the current user, oldest first")
async def list_todos(
        todo_service: deps.TodoServiceDependency,
        current_user: deps.InitializedUserDependency,
        completed: t.Annotated[bool | None, Query(description='Filter by completion')] = None,
        search: t.Annotated[str | None, Query(max_length=128, description='Case-insensitive substring of title or descriptions')] = None,
        page: t.Annotated[int, Query(ge=1)] = 1,
        per_page: t.Annotated[int, Query(ge=1, le=100)] = 20,
    ) -> schemas.ApiResponse[schemas.PagedData[schemas.TodoResponse]]:
    command = mapp.ListTodosCommand(
        user_id=current_user.id,
        completed=completed,
        search=search or None,
        limit=per_page,
        offset=(page - 1) * per_page,
    )
    result = await todo_service.list(command)
    paged = schemas.PagedData[schemas.TodoResponse](
        data=[_to_response(item) for item in result.items],
        total=result.total,
        page=page,
        per_page=per_page,
    )
    return schemas.ApiResponse.ok(paged)


@router.get("/stats", description="Completion summary of the current user's todos")
async def todo_stats(
        todo_service: deps.TodoServiceDependency,
        current_user: deps.InitializedUserDependency,
    ) -> schemas.ApiResponse[schemas.TodoStatsResponse]:
    stats = await todo_service.stats(current_user.id)
    return schemas.ApiResponse.ok(schemas.TodoStatsResponse.model_validate(stats, from_attributes=True))


@router.get("/{todo_id}")
async def get_todo(
        todo_service: deps.TodoServiceDependency,
        current_user: deps.InitializedUserDependency,
        todo_id: TodoId,
    ) -> schemas.ApiResponse[schemas.TodoResponse]:
    result = await todo_service.get(mapp.TodoActionCommand(todo_id=todo_id, user_id=current_user.id))
    return schemas.ApiResponse.ok(_to_response(result))


@router.patch("/{todo_id}", description="Provide only the fields that need to be changed", responses={
    409: {"description": "Todo is deleted or has been changed concurrently"},
    })
async def update_todo(
        todo_service: deps.TodoServiceDependency,
        current_user: deps.InitializedUserDependency,
        todo_id: TodoId,
        edited: schemas.TodoUpdateRequest,
    ) -> schemas.ApiResponse[schemas.TodoResponse]:
    command = mapp.UpdateTodoCommand(
        todo_id=todo_id,
        user_id=current_user.id,
        **edited.model_dump(exclude_unset=True),
    )
    result = await todo_service.update(command)
    return schemas.ApiResponse.ok(_to_response(result), message="Todo updated")


@router.post("/{todo_id}/complete", responses={409: {"description": "Todo is already completed"}})
async def complete_todo(
        todo_service: deps.TodoServiceDependency,
        current_user: deps.InitializedUserDependency,
        todo_id: TodoId,
    ) -> schemas.ApiResponse[schemas.TodoResponse]:
    result = await todo_service.complete(mapp.TodoActionCommand(todo_id=todo_id, user_id=current_user.id))
    return schemas.ApiResponse.ok(_to_response(result), message="Todo completed")


@router.post("/{todo_id}/incomplete", responses={409: {"description": "Todo is not completed"}})
async def incomplete_todo(
        todo_service: deps.TodoServiceDependency,
        current_user: deps.InitializedUserDependency,
        todo_id: TodoId,
    ) -> schemas.ApiResponse[schemas.TodoResponse]:
    result = await todo_service.incomplete(mapp.TodoActionCommand(todo_id=todo_id, user_id=current_user.id))
    return schemas.ApiResponse.ok(_to_response(result), message="Todo marked as incomplete")


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_todo(
        todo_service: deps.TodoServiceDependency,
        current_user: deps.InitializedUserDependency,
        todo_id: TodoId,
    ):
    await todo_service.delete(mapp.TodoActionCommand(todo_id=todo_id, user_id=current_user.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
