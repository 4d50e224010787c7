import todo_api.application.interfaces as iapp
import todo_api.application.models as mapp
import typing as t

__all__ = ['AuthService', 'LoginMixin', 'TokenServiceMixin', 'JWTAuthService']

TLoginReturn = t.TypeVar("TLoginReturn")

class AuthService:
    def __init__(self, auth_strategy: iapp.IAuthStrategy):
        self.auth_strategy = auth_strategy

    async def authenticate(self, credentials: dict) -> mapp.UserResult:
        user = await self.auth_strategy.authenticate(credentials)
        return mapp.UserResult.model_validate(user, from_attributes=True)


class LoginMixin(t.Generic[TLoginReturn]):
    async def login(self, credentials: dict) -> TLoginReturn:
        return await self.auth_strategy.login(credentials)


class TokenServiceMixin:
    async def refresh(self, refresh_token:str) -> mapp.TokenResponse:
        return await self.auth_strategy.refresh(refresh_token)


class JWTAuthService(
    AuthService,
    LoginMixin[mapp.TokenResponse],
    TokenServiceMixin
):
    """Stateless bearer-token auth: password login, access/refresh JWT pair."""
