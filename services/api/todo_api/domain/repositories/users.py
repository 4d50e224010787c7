from abc import abstractmethod, ABC
import todo_api.domain.models as domain
import todo_api.domain.services as domsvc
import pydantic as p
import typing as t
import uuid

__all__ = ['UserFilter', 'IUserRepository']


class UserFilter(p.BaseModel):
    username: str|None = p.Field(default=None)
    email: str|None = p.Field(default=None)
    role: domain.UserRole|None = p.Field(default=None)


class IUserRepository(ABC):
    """Abstract base for UserRepository. Specific implementations must inherit this base class."""

    @abstractmethod
    async def get_by_id(self, user_id: uuid.UUID, include_deleted: bool = False) -> domain.User | None: ...

    @abstractmethod
    async def get_by_username(self, username: str) -> domain.User | None: ...

    @abstractmethod
    async def exists(self, user_id: uuid.UUID) -> bool: ...

    @abstractmethod
    async def list(self, limit: int = 100, offset: int = 0, filters: UserFilter | None = None, filter_mode: t.Literal["and","or"] = "and") -> list[domain.User]: ...

    @abstractmethod
    async def save(self, user: domain.User) -> domain.User: ...

    @abstractmethod
    async def delete(self, user_id: uuid.UUID) -> None: ...

    @abstractmethod
    async def ensure_admin_exists(self, hasher: domsvc.IPasswordHasherAsync) -> None:
        """Creates the default admin with a temporary password when no admin account is left"""
