from abc import abstractmethod, ABC
import todo_api.domain.models as domain
import pydantic as p
import uuid

__all__ = ['TodoFilter', 'ITodoRepository']


class TodoFilter(p.BaseModel):
    """Read filter for todo listings. Unset fields do not restrict the result."""
    completed: bool | None = None
    search: str | None = p.Field(default=None, description='Case-insensitive substring of title or descriptions')


class ITodoRepository(ABC):
    """Abstract base for TodoRepository. Specific implementations must inherit this base class.

    Finders never return logically deleted todos unless `include_deleted` is set.
    Listings are ordered by creation time, oldest first.
    """

    @abstractmethod
    async def get_by_id(self, todo_id: uuid.UUID, include_deleted: bool = False) -> domain.Todo | None: ...

    @abstractmethod
    async def list_by_owner(self, user_id: uuid.UUID, filters: TodoFilter | None = None, limit: int | None = 100, offset: int = 0) -> list[domain.Todo]:
        """`limit=None` returns every matching todo"""

    @abstractmethod
    async def count_by_owner(self, user_id: uuid.UUID, filters: TodoFilter | None = None) -> int: ...

    @abstractmethod
    async def save(self, todo: domain.Todo) -> domain.Todo:
        """Inserts a new todo or updates the stored one with the same id. Returns the persisted state."""

    @abstractmethod
    async def delete(self, todo_id: uuid.UUID) -> None:
        """Logical delete: flips the deleted flag of the stored todo."""
