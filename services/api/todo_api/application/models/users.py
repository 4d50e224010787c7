import datetime as dt
import uuid
import pydantic as p
from todo_api.domain.models import UserRole

__all__ = [
    'UserResult', 'RegisterUserCommand', 'AdminCreateUserCommand', 'UpdateProfileCommand',
]


class UserResult(p.BaseModel):
    model_config = p.ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str | None = None
    first_name: str | None = None
    first_name_ruby: str | None = None
    last_name: str | None = None
    last_name_ruby: str | None = None
    role: UserRole
    password_initialized: bool
    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def is_admin(self) -> bool:
        return self.role.has_admin_privilege()

    @property
    def is_manager(self) -> bool:
        return self.role.has_manager_privilege()


class RegisterUserCommand(p.BaseModel):
    username: str
    password: str
    email: str | None = None
    first_name: str | None = None
    first_name_ruby: str | None = None
    last_name: str | None = None
    last_name_ruby: str | None = None


class AdminCreateUserCommand(RegisterUserCommand):
    """Account created by staff. `password` is a temporary one the owner has to replace."""
    role: UserRole = UserRole.USER


class UpdateProfileCommand(p.BaseModel):
    """Profile names are replaced as a whole; email only when passed explicitly."""
    first_name: str | None = None
    first_name_ruby: str | None = None
    last_name: str | None = None
    last_name_ruby: str | None = None
    email: str | None = None

    def should_update_email(self) -> bool:
        return 'email' in self.model_fields_set
