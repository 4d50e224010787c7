import datetime as dt
import typing as t
import uuid

import pydantic as p

import todo_api.domain.exceptions as domexc
from todo_api.domain.models.roles import UserRole
from todo_api.domain.models.common import utcnow, ensure_utc, coerce_uuid, check_optional_length

__all__ = ['User', 'USERNAME_MAX_LENGTH', 'NAME_MAX_LENGTH', 'EMAIL_MAX_LENGTH', 'PASSWORD_HASH_LENGTH']

USERNAME_MAX_LENGTH = 50
NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 254
PASSWORD_HASH_LENGTH = 60 #bcrypt digest


class User(p.BaseModel):
    """Account owning todos.

    The password lifecycle is a two-state machine: accounts start with a temporary
    (uninitialized) password that the owner must replace via `initialize_password`.
    Admin resets move the account back to the uninitialized state.
    The entity never sees raw passwords, only hashes produced by a password hasher.
    """
    model_config = p.ConfigDict(validate_assignment=True)

    IMMUTABLE_FIELDS: t.ClassVar[frozenset[str]] = frozenset({'id', 'created_at'})

    id: uuid.UUID
    username: str
    email: str | None = None
    first_name: str | None = None
    first_name_ruby: str | None = None
    last_name: str | None = None
    last_name_ruby: str | None = None
    password_hash: str
    role: UserRole
    password_initialized: bool = False
    created_at: dt.datetime
    updated_at: dt.datetime
    deleted: bool = False
    version: int | None = None

    def __setattr__(self, name: str, value: t.Any) -> None:
        if name in self.IMMUTABLE_FIELDS:
            raise domexc.UserStateError(f"User field '{name}' cannot be changed")
        super().__setattr__(name, value)

    @p.field_validator('id', mode='before')
    @classmethod
    def id_must_be_uuid(cls, v: t.Any):
        return coerce_uuid(v, "User id", domexc.UserValueError)

    @p.field_validator('username', mode='before')
    @classmethod
    def username_must_fit(cls, v: t.Any):
        if not isinstance(v, str) or not v.strip():
            raise domexc.UserValueError("Username is required")
        if len(v) > USERNAME_MAX_LENGTH:
            raise domexc.UserValueError(f"Username must be at most {USERNAME_MAX_LENGTH} characters long")
        return v

    @p.field_validator('first_name', 'first_name_ruby', 'last_name', 'last_name_ruby', mode='before')
    @classmethod
    def names_must_fit(cls, v: t.Any, info: p.ValidationInfo):
        return check_optional_length(v, NAME_MAX_LENGTH, info.field_name, domexc.UserValueError)

    @p.field_validator('email', mode='before')
    @classmethod
    def email_must_be_valid(cls, v: t.Any):
        v = check_optional_length(v, EMAIL_MAX_LENGTH, "Email", domexc.UserValueError)
        if v is None:
            return None
        local, sep, domain = v.partition('@')
        if not (sep and local and domain) or '@' in domain:
            raise domexc.UserValueError(f"Given email '{v}' is not a valid email address")
        return v

    @p.field_validator('password_hash', mode='before')
    @classmethod
    def password_hash_must_fit(cls, v: t.Any):
        if not isinstance(v, str) or not v.strip():
            raise domexc.UserValueError("Password hash is required")
        if len(v) != PASSWORD_HASH_LENGTH:
            raise domexc.UserValueError(f"Password hash has invalid length: expected {PASSWORD_HASH_LENGTH}, got {len(v)}")
        return v

    @p.field_validator('role', mode='before')
    @classmethod
    def role_must_be_known(cls, v: t.Any):
        if v is None:
            raise domexc.UserValueError("Role is required")
        if isinstance(v, UserRole):
            return v
        if isinstance(v, str):
            try:
                return UserRole[v.upper()]
            except KeyError:
                raise domexc.UserValueError(f"Given role '{v}' is not a valid role!") from None
        return UserRole.from_code(v)

    @p.field_validator('created_at', 'updated_at', mode='before')
    @classmethod
    def timestamp_required(cls, v: t.Any, info: p.ValidationInfo):
        if v is None:
            raise domexc.UserValueError(f"{info.field_name} is required")
        return v

    @p.field_validator('created_at', 'updated_at')
    @classmethod
    def timestamps_to_utc(cls, v: dt.datetime):
        return ensure_utc(v)

    ### Factories

    @classmethod
    def _build(cls, **fields) -> "User":
        try:
            return cls(**fields)
        except p.ValidationError as e:
            raise domexc.UserValueError(f"Invalid user data: {e.errors(include_url=False)}") from e

    @classmethod
    def create(
        cls,
        username: str,
        password_hash: str,
        role: UserRole,
        *,
        email: str | None = None,
        first_name: str | None = None,
        first_name_ruby: str | None = None,
        last_name: str | None = None,
        last_name_ruby: str | None = None,
        password_initialized: bool = False,
    ) -> "User":
        now = utcnow()
        return cls._build(
            id=uuid.uuid4(),
            username=username,
            email=email,
            first_name=first_name,
            first_name_ruby=first_name_ruby,
            last_name=last_name,
            last_name_ruby=last_name_ruby,
            password_hash=password_hash,
            role=role,
            password_initialized=password_initialized,
            created_at=now,
            updated_at=now,
            deleted=False,
        )

    @classmethod
    def reconstruct(cls, **fields) -> "User":
        """Rehydrates a stored user. Takes every field of the model, nothing is generated."""
        missing = {'id', 'username', 'password_hash', 'role', 'created_at', 'updated_at'} - fields.keys()
        if missing:
            raise domexc.UserValueError(f"Cannot reconstruct user, missing fields: {sorted(missing)}")
        return cls._build(**fields)

    ### Privileges

    @property
    def is_admin(self) -> bool:
        return self.role.has_admin_privilege()

    @property
    def is_manager(self) -> bool:
        return self.role.has_manager_privilege()

    ### Mutators

    def _ensure_not_deleted(self, action: str):
        if self.deleted:
            raise domexc.UserStateError(f"Deleted user cannot {action}")

    def _touch(self):
        now = utcnow()
        if now > self.updated_at:
            self.updated_at = now

    def update_profile(
        self,
        first_name: str | None,
        first_name_ruby: str | None,
        last_name: str | None,
        last_name_ruby: str | None,
    ):
        self._ensure_not_deleted("update profile")
        #Validate all before assigning any, so a failure leaves the profile untouched
        for field, value in (('first_name', first_name), ('first_name_ruby', first_name_ruby),
                             ('last_name', last_name), ('last_name_ruby', last_name_ruby)):
            check_optional_length(value, NAME_MAX_LENGTH, field, domexc.UserValueError)
        self.first_name = first_name
        self.first_name_ruby = first_name_ruby
        self.last_name = last_name
        self.last_name_ruby = last_name_ruby
        self._touch()

    def update_email(self, email: str | None):
        self._ensure_not_deleted("update email")
        self.email = email
        self._touch()

    def initialize_password(self, new_hash: str):
        self._ensure_not_deleted("initialize password")
        if self.password_initialized:
            raise domexc.UserStateError("Password has already been initialized")
        self.password_hash = new_hash
        self.password_initialized = True
        self._touch()

    def change_password(self, new_hash: str):
        self._ensure_not_deleted("change password")
        if not self.password_initialized:
            raise domexc.UserStateError("Password must be initialized before it can be changed")
        self.password_hash = new_hash
        self._touch()

    def reset_password(self, new_hash: str):
        """Administrative reset: sets a temporary password the owner has to initialize again."""
        self._ensure_not_deleted("reset password")
        self.password_hash = new_hash
        self.password_initialized = False
        self._touch()

    def change_role(self, new_role: UserRole | int):
        self._ensure_not_deleted("change role")
        self.role = new_role
        self._touch()

    def delete(self):
        if self.deleted:
            raise domexc.UserStateError("User is already deleted")
        self.deleted = True
        self._touch()
