import todo_api.application.exceptions as appexc
import todo_api.domain.services as domsvc
import todo_api.domain.exceptions as domexc
from todo_api.infrastructure.telemetry.traces import TracerType

import datetime as dt
import typing as t
import uuid
import jwt

__all__ = ['JWTTokenService']


class JWTTokenService(domsvc.ITokenService):
    """Signs and checks JWTs carrying `(user_id, username, role_code)`.

    Claims: `sub` (user id), `username`, `role` (integer code), `type`, `iat`, `exp`.
    Access and refresh tokens are told apart by `token_type` and should use different secrets.
    """

    def __init__(self, secret: str, algorithm: str, expires_delta: dt.timedelta, token_type: t.Literal['access', 'refresh'] = 'access'):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_delta = expires_delta
        self.token_type = token_type

    def expiration_for(self, issued_at: dt.datetime) -> dt.datetime:
        return issued_at + self.expires_delta

    @TracerType.traced
    def issue(self, user_id: uuid.UUID, username: str, role_code: int, issued_at: dt.datetime | None = None) -> str:
        issued_at = issued_at or dt.datetime.now(dt.timezone.utc)
        payload = {
            "sub": str(user_id),
            "username": username,
            "role": int(role_code),
            "type": self.token_type,
            "iat": int(issued_at.timestamp()),
            "exp": self.expiration_for(issued_at).timestamp(),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def _payload(self, token: str) -> dict[str, t.Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm], options={"require": ["sub", "exp"]})
        except jwt.ExpiredSignatureError as e:
            raise appexc.TokenExpiredException("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise appexc.InvalidTokenError("Could not validate token") from e

    def decode(self, token: str) -> domsvc.TokenClaims:
        data = self._payload(token)
        if data.get("type", self.token_type) != self.token_type:
            raise appexc.InvalidTokenError(f"Expected a {self.token_type} token")
        try:
            return domsvc.TokenClaims(user_id=data["sub"], username=data["username"], role=data["role"])
        except (KeyError, ValueError, domexc.DomainLayerException) as e:
            raise appexc.InvalidTokenError("Token carries malformed claims") from e

    def is_valid(self, token: str) -> bool:
        try:
            self.decode(token)
            return True
        except appexc.AuthBaseException:
            return False
