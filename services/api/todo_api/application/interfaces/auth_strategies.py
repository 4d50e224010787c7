import abc
import typing as t

from todo_api.domain.models import User
import todo_api.application.models as mapp

__all__ = ['IAuthStrategy', 'ILoginMixin', 'ITokenMixin']


class IAuthStrategy(abc.ABC):
    """Resolves the caller of a request from its credentials."""

    @abc.abstractmethod
    async def authenticate(self, credentials: dict) -> User:
        """`credentials` carries whatever the strategy reads, e.g. {'token': ...}.
        Raises an `unauthorized` error when the caller cannot be resolved."""


class ILoginMixin(abc.ABC):
    @abc.abstractmethod
    async def login(self, credentials: dict) -> t.Any:
        """Exchanges {'username', 'password'} for whatever grants access"""


class ITokenMixin(abc.ABC):
    @abc.abstractmethod
    async def refresh(self, refresh_token: str) -> mapp.TokenResponse:
        """Issues a fresh access/refresh pair for a valid refresh token"""
