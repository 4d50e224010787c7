import typing as t
import uuid
import pydantic as p

import todo_api.domain.exceptions as domexc
from todo_api.domain.models.todos import Todo

__all__ = ['TodoStats', 'ensure_owner', 'completion_rate', 'summarize']


class TodoStats(p.BaseModel):
    total: int
    completed: int
    incomplete: int
    completion_rate: float


def ensure_owner(todo: Todo, user_id: uuid.UUID) -> None:
    if not todo.is_owned_by(user_id):
        raise domexc.NotResourceOwner("You are not allowed to access this todo")


def completion_rate(todos: t.Iterable[Todo]) -> float:
    """Share of completed todos among the non-deleted ones, 0.0 when there are none."""
    active = [todo for todo in todos if not todo.deleted]
    if not active:
        return 0.0
    return sum(1 for todo in active if todo.completed) / len(active)


def summarize(todos: t.Iterable[Todo]) -> TodoStats:
    active = [todo for todo in todos if not todo.deleted]
    completed = sum(1 for todo in active if todo.completed)
    return TodoStats(
        total=len(active),
        completed=completed,
        incomplete=len(active) - completed,
        completion_rate=completion_rate(active),
    )
