import datetime as dt
import typing as t
import uuid
from enum import Enum

import pydantic as p

import todo_api.domain.exceptions as domexc
from todo_api.domain.models.common import utcnow, ensure_utc, coerce_uuid, check_optional_length

__all__ = ['Todo', 'TodoStatus', 'TITLE_MAX_LENGTH', 'DESCRIPTIONS_MAX_LENGTH']

TITLE_MAX_LENGTH = 32
DESCRIPTIONS_MAX_LENGTH = 128


class TodoStatus(str, Enum):
    ACTIVE_INCOMPLETE = "active_incomplete"
    ACTIVE_COMPLETED = "active_completed"
    DELETED = "deleted"


class Todo(p.BaseModel):
    """A single TODO item owned by a user.

    State machine over (completed, deleted):
        ACTIVE_INCOMPLETE --mark_as_completed--> ACTIVE_COMPLETED
        ACTIVE_COMPLETED --mark_as_incomplete--> ACTIVE_INCOMPLETE
        ACTIVE_* --delete--> DELETED (terminal)

    Use `create` for new todos and `reconstruct` to rehydrate stored ones.
    Persistence is the caller's job: mutators only touch in-memory fields.
    """
    model_config = p.ConfigDict(validate_assignment=True)

    IMMUTABLE_FIELDS: t.ClassVar[frozenset[str]] = frozenset({'id', 'user_id', 'created_at'})

    id: uuid.UUID
    title: str
    descriptions: str | None = None
    completed: bool = False
    user_id: uuid.UUID
    created_at: dt.datetime
    updated_at: dt.datetime
    deleted: bool = False
    version: int | None = None

    def __setattr__(self, name: str, value: t.Any) -> None:
        if name in self.IMMUTABLE_FIELDS:
            raise domexc.TodoStateError(f"Todo field '{name}' cannot be changed")
        super().__setattr__(name, value)

    ### Validation

    @p.field_validator('title', mode='before')
    @classmethod
    def title_must_fit(cls, v: t.Any):
        if v is None or v == "":
            raise domexc.TodoValueError("Title is required")
        if not isinstance(v, str):
            raise domexc.TodoValueError("Title must be a string")
        if len(v) > TITLE_MAX_LENGTH:
            raise domexc.TodoValueError(f"Title must be at most {TITLE_MAX_LENGTH} characters long (got {len(v)})")
        return v

    @p.field_validator('descriptions', mode='before')
    @classmethod
    def descriptions_must_fit(cls, v: t.Any):
        return check_optional_length(v, DESCRIPTIONS_MAX_LENGTH, "Descriptions", domexc.TodoValueError)

    @p.field_validator('id', mode='before')
    @classmethod
    def id_must_be_uuid(cls, v: t.Any):
        return coerce_uuid(v, "Todo id", domexc.TodoValueError)

    @p.field_validator('user_id', mode='before')
    @classmethod
    def user_id_must_be_uuid(cls, v: t.Any):
        return coerce_uuid(v, "User id", domexc.TodoValueError)

    @p.field_validator('created_at', 'updated_at', mode='before')
    @classmethod
    def timestamp_required(cls, v: t.Any, info: p.ValidationInfo):
        if v is None:
            raise domexc.TodoValueError(f"{info.field_name} is required")
        return v

    @p.field_validator('created_at', 'updated_at')
    @classmethod
    def timestamps_to_utc(cls, v: dt.datetime):
        return ensure_utc(v)

    ### Factories

    @classmethod
    def _build(cls, **fields) -> "Todo":
        try:
            return cls(**fields)
        except p.ValidationError as e:
            raise domexc.TodoValueError(f"Invalid todo data: {e.errors(include_url=False)}") from e

    @classmethod
    def create(cls, title: str, descriptions: str | None, user_id: uuid.UUID) -> "Todo":
        now = utcnow()
        return cls._build(
            id=uuid.uuid4(),
            title=title,
            descriptions=descriptions,
            completed=False,
            user_id=user_id,
            created_at=now,
            updated_at=now,
            deleted=False,
        )

    @classmethod
    def reconstruct(
        cls,
        id: uuid.UUID,
        title: str,
        descriptions: str | None,
        completed: bool,
        user_id: uuid.UUID,
        created_at: dt.datetime,
        updated_at: dt.datetime,
        deleted: bool,
        version: int | None = None,
    ) -> "Todo":
        return cls._build(
            id=id,
            title=title,
            descriptions=descriptions,
            completed=completed,
            user_id=user_id,
            created_at=created_at,
            updated_at=updated_at,
            deleted=deleted,
            version=version,
        )

    ### State

    @property
    def status(self) -> TodoStatus:
        if self.deleted:
            return TodoStatus.DELETED
        return TodoStatus.ACTIVE_COMPLETED if self.completed else TodoStatus.ACTIVE_INCOMPLETE

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.user_id == user_id

    def _ensure_not_deleted(self, action: str):
        if self.deleted:
            raise domexc.TodoStateError(f"Deleted todo cannot be {action}")

    def _touch(self):
        now = utcnow()
        if now > self.updated_at:
            self.updated_at = now

    ### Mutators

    def mark_as_completed(self):
        self._ensure_not_deleted("completed")
        if self.completed:
            raise domexc.TodoStateError("Todo is already completed")
        self.completed = True
        self._touch()

    def mark_as_incomplete(self):
        self._ensure_not_deleted("marked as incomplete")
        if not self.completed:
            raise domexc.TodoStateError("Todo is not completed yet")
        self.completed = False
        self._touch()

    def update_title(self, new_title: str):
        self._ensure_not_deleted("updated")
        self.title = new_title
        self._touch()

    def update_descriptions(self, new_descriptions: str | None):
        self._ensure_not_deleted("updated")
        self.descriptions = new_descriptions
        self._touch()

    def delete(self):
        if self.deleted:
            raise domexc.TodoStateError("Todo is already deleted")
        self.deleted = True
        self._touch()
