import todo_api.domain.repositories as repos
import todo_api.domain.models as domain
import todo_api.domain.services as domsvc
import todo_api.domain.exceptions as domexc
import todo_api.application.models as mapp

import uuid
import logging

logger = logging.getLogger('app')

__all__ = ['TodoService']


class TodoService:
    """Todo use cases. Stateless apart from the injected repositories:
    load entity -> call its mutator -> persist -> map to a result."""

    def __init__(self, todo_repo: repos.ITodoRepository, user_repo: repos.IUserRepository) -> None:
        self.todo_repo = todo_repo
        self.user_repo = user_repo

    async def _get_owned(self, todo_id: uuid.UUID, user_id: uuid.UUID) -> domain.Todo:
        todo = await self.todo_repo.get_by_id(todo_id)
        if todo is None:
            raise domexc.TodoDoesNotExist(f"Todo with id={todo_id} does not exist")
        domsvc.ensure_owner(todo, user_id)
        return todo

    @staticmethod
    def _to_result(todo: domain.Todo) -> mapp.TodoResult:
        return mapp.TodoResult.model_validate(todo, from_attributes=True)

    async def create(self, command: mapp.CreateTodoCommand) -> mapp.TodoResult:
        if not await self.user_repo.exists(command.user_id):
            raise domexc.UserDoesNotExist(f"User with id={command.user_id} does not exist")
        todo = domain.Todo.create(
            title=command.title,
            descriptions=command.descriptions,
            user_id=command.user_id,
        )
        saved = await self.todo_repo.save(todo)
        logger.info(f'[TODOS] Created todo id={saved.id} for user id={saved.user_id}')
        return self._to_result(saved)

    async def update(self, command: mapp.UpdateTodoCommand) -> mapp.TodoResult:
        todo = await self._get_owned(command.todo_id, command.user_id)
        if not (command.should_update_title() or command.should_update_descriptions()):
            return self._to_result(todo)

        if command.should_update_title():
            todo.update_title(command.title)
        if command.should_update_descriptions():
            todo.update_descriptions(command.descriptions)

        saved = await self.todo_repo.save(todo)
        logger.info(f'[TODOS] Updated todo id={saved.id}')
        return self._to_result(saved)

    async def complete(self, command: mapp.TodoActionCommand) -> mapp.TodoResult:
        todo = await self._get_owned(command.todo_id, command.user_id)
        todo.mark_as_completed()
        saved = await self.todo_repo.save(todo)
        logger.info(f'[TODOS] Todo id={saved.id} marked as completed')
        return self._to_result(saved)

    async def incomplete(self, command: mapp.TodoActionCommand) -> mapp.TodoResult:
        todo = await self._get_owned(command.todo_id, command.user_id)
        todo.mark_as_incomplete()
        saved = await self.todo_repo.save(todo)
        logger.info(f'[TODOS] Todo id={saved.id} marked as incomplete')
        return self._to_result(saved)

    async def delete(self, command: mapp.TodoActionCommand) -> None:
        todo = await self._get_owned(command.todo_id, command.user_id)
        todo.delete()
        await self.todo_repo.save(todo)
        logger.info(f'[TODOS] Todo id={todo.id} deleted')

    async def get(self, command: mapp.TodoActionCommand) -> mapp.TodoResult:
        todo = await self._get_owned(command.todo_id, command.user_id)
        return self._to_result(todo)

    async def list(self, command: mapp.ListTodosCommand) -> mapp.TodoPage:
        filters = repos.TodoFilter(completed=command.completed, search=command.search)
        todos = await self.todo_repo.list_by_owner(command.user_id, filters, command.limit, command.offset)
        total = await self.todo_repo.count_by_owner(command.user_id, filters)
        return mapp.TodoPage(
            items=[self._to_result(todo) for todo in todos],
            total=total,
            limit=command.limit,
            offset=command.offset,
        )

    async def stats(self, user_id: uuid.UUID) -> mapp.TodoStatsResult:
        todos = await self.todo_repo.list_by_owner(user_id, limit=None)
        summary = domsvc.summarize(todos)
        return mapp.TodoStatsResult(user_id=user_id, **summary.model_dump())
