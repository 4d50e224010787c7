from abc import ABC, abstractmethod
import pydantic as p
import uuid

from todo_api.domain.models.roles import UserRole

__all__ = ['TokenClaims', 'ITokenService']


class TokenClaims(p.BaseModel):
    user_id: uuid.UUID
    username: str
    role: UserRole


class ITokenService(ABC):
    """Token collaborator. Format and expiry policy are owned by the implementation."""

    @abstractmethod
    def issue(self, user_id: uuid.UUID, username: str, role_code: int) -> str: ...

    @abstractmethod
    def decode(self, token: str) -> TokenClaims:
        """Returns claims of a valid token, raises otherwise"""

    @abstractmethod
    def is_valid(self, token: str) -> bool: ...
