import datetime as dt
import typing as t
import uuid
import pydantic as p
from todo_api.domain.models import UserRole, USERNAME_MAX_LENGTH, NAME_MAX_LENGTH, EMAIL_MAX_LENGTH
from todo_api.common.config import Config

__all__ = [
    'RoleInput', 'UserDTO', 'PublicUserCreationModel', 'PrivateUserCreationModel',
    'ProfileUpdateModel', 'PasswordInitializeModel', 'PasswordChangeModel', 'PasswordResetModel', 'RoleChangeModel',
]

#bcrypt only looks at the first 72 bytes
PASSWORD_MAX_LENGTH = 72

Username = t.Annotated[str, p.Field(min_length=3, max_length=USERNAME_MAX_LENGTH, pattern=r'^[A-Za-z0-9_.-]+$', description='A unique username used for logging in')]
Password = t.Annotated[str, p.Field(min_length=Config.MIN_PASSWORD_LENGTH, max_length=PASSWORD_MAX_LENGTH)]
Name = t.Annotated[str | None, p.Field(max_length=NAME_MAX_LENGTH)]


def _role_from_input(v: t.Any):
    """Roles are accepted by name ("admin") or by code (0)"""
    if isinstance(v, str) and not v.isdigit():
        try:
            return UserRole[v.upper()]
        except KeyError:
            raise ValueError(f"Unknown role '{v}'. Use one of: {[r.name.lower() for r in UserRole]}") from None
    return v

RoleInput = t.Annotated[UserRole, p.BeforeValidator(_role_from_input), p.PlainSerializer(lambda r: r.name.lower(), return_type=str)]


class UserDTO(p.BaseModel):
    model_config = p.ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str | None = None
    first_name: str | None = None
    first_name_ruby: str | None = None
    last_name: str | None = None
    last_name_ruby: str | None = None
    role: RoleInput
    password_initialized: bool
    created_at: dt.datetime
    updated_at: dt.datetime


class PublicUserCreationModel(p.BaseModel):
    model_config = p.ConfigDict(extra='forbid')

    username: Username
    password: Password = p.Field(description='User password')
    email: str | None = p.Field(default=None, max_length=EMAIL_MAX_LENGTH)
    first_name: Name = None
    first_name_ruby: Name = None
    last_name: Name = None
    last_name_ruby: Name = None


class PrivateUserCreationModel(PublicUserCreationModel):
    """This model is used for CREATING users BY STAFF ONLY. It, in addition, allows to set a role.
    The password is temporary: the new user has to initialize it on first login."""
    role: RoleInput = p.Field(default=UserRole.USER, description='Role identifier: admin, manager or user')


class ProfileUpdateModel(p.BaseModel):
    """Names are replaced as a whole. Email changes only when present in the body."""
    model_config = p.ConfigDict(extra='forbid')

    first_name: Name = None
    first_name_ruby: Name = None
    last_name: Name = None
    last_name_ruby: Name = None
    email: str | None = p.Field(default=None, max_length=EMAIL_MAX_LENGTH)

    @p.field_validator('first_name', 'first_name_ruby', 'last_name', 'last_name_ruby', 'email', mode='before')
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PasswordInitializeModel(p.BaseModel):
    new_password: Password


class PasswordChangeModel(p.BaseModel):
    old_password: str = p.Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)
    new_password: Password


class PasswordResetModel(p.BaseModel):
    """Temporary password set by an admin"""
    new_password: Password


class RoleChangeModel(p.BaseModel):
    role: RoleInput
