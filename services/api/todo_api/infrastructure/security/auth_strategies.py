import todo_api.application.interfaces as iapp
import todo_api.application.exceptions as appexc
import todo_api.application.models as mapp
import todo_api.domain.repositories as repos
import todo_api.domain.models as mdom
import todo_api.domain.services as domsvc
from todo_api.infrastructure.security.tokens import JWTTokenService
from todo_api.infrastructure.telemetry.traces import TracerType
from todo_api.common.config import Config

import datetime as dt
import typing as t
import logging

logger = logging.getLogger('app')

__all__ = ['JWTAuthStrategy']


class JWTAuthStrategy(iapp.IAuthStrategy, iapp.ILoginMixin, iapp.ITokenMixin):
    """Stateless strategy: a password login issues an access/refresh JWT pair,
    every request is authenticated by decoding the access token and reloading its user."""

    def __init__(
        self,
        user_repo: repos.IUserRepository,
        password_hasher: domsvc.IPasswordHasherAsync,
        *,
        access_tokens: t.Optional[JWTTokenService] = None,
        refresh_tokens: t.Optional[JWTTokenService] = None,
    ):
        self.user_repo = user_repo
        self._hasher = password_hasher
        self.access_tokens = access_tokens or JWTTokenService(
            Config.JWT_SECRET, Config.ALGORITHM, dt.timedelta(minutes=Config.ACCESS_TOKEN_EXPIRE_MINUTES), 'access'
        )
        self.refresh_tokens = refresh_tokens or JWTTokenService(
            Config.REFRESH_SECRET, Config.ALGORITHM, dt.timedelta(hours=Config.REFRESH_TOKEN_EXPIRE_HOURS), 'refresh'
        )

    def _create_a_pair_of_tokens(self, user: mdom.User) -> mapp.TokenResponse:
        issued_at = dt.datetime.now(dt.timezone.utc)
        return mapp.TokenResponse(
            access_token=self.access_tokens.issue(user.id, user.username, user.role.code, issued_at=issued_at),
            refresh_token=self.refresh_tokens.issue(user.id, user.username, user.role.code, issued_at=issued_at),
            access_expires=self.access_tokens.expiration_for(issued_at).timestamp(),
            refresh_expires=self.refresh_tokens.expiration_for(issued_at).timestamp(),
        )

    async def _load_token_owner(self, claims: domsvc.TokenClaims) -> mdom.User:
        user = await self.user_repo.get_by_id(claims.user_id)
        if user is None:
            raise appexc.InvalidTokenError("Token is valid, yet its user does not exist anymore")
        return user

    async def login(self, credentials: dict) -> mapp.TokenResponse:
        username = credentials.get('username')
        password = credentials.get('password')

        if not (username and password):
            raise appexc.CredentialsException("Field missing! Both username and password must be provided.")

        user = await self.user_repo.get_by_username(username)
        if not user:
            raise appexc.CredentialsException("Incorrect username or password")

        with TracerType.start_span('login_password_verifying'):
            if not await self._hasher.verify(password, user.password_hash):
                raise appexc.CredentialsException("Incorrect username or password")

        logger.info(f'[AUTH] User id={user.id} logged in')
        return self._create_a_pair_of_tokens(user)

    async def authenticate(self, credentials: dict) -> mdom.User:
        token = credentials.get('token')
        if not token:
            raise appexc.CredentialsException("Token is missing")
        claims = self.access_tokens.decode(token)
        return await self._load_token_owner(claims)

    async def refresh(self, refresh_token: str) -> mapp.TokenResponse:
        if not refresh_token:
            raise appexc.CredentialsException("Refresh token is missing")
        claims = self.refresh_tokens.decode(refresh_token)
        user = await self._load_token_owner(claims)
        logger.info(f'[AUTH] Tokens refreshed for user id={user.id}')
        return self._create_a_pair_of_tokens(user)
