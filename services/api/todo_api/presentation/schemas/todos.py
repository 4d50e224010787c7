import datetime as dt
import uuid
import pydantic as p
from todo_api.domain.models import TITLE_MAX_LENGTH, DESCRIPTIONS_MAX_LENGTH

__all__ = ['TodoCreateRequest', 'TodoUpdateRequest', 'TodoResponse', 'TodoStatsResponse']


class TodoCreateRequest(p.BaseModel):
    model_config = p.ConfigDict(extra='forbid')

    title: str = p.Field(min_length=1, max_length=TITLE_MAX_LENGTH, description='Short summary of the task')
    descriptions: str | None = p.Field(default=None, max_length=DESCRIPTIONS_MAX_LENGTH, description='Optional details')


class TodoUpdateRequest(p.BaseModel):
    """Provide only the fields to change. Explicit `"descriptions": null` clears the descriptions."""
    model_config = p.ConfigDict(extra='forbid')

    title: str | None = p.Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    descriptions: str | None = p.Field(default=None, max_length=DESCRIPTIONS_MAX_LENGTH)

    @p.field_validator('title', mode='after')
    @classmethod
    def title_not_null(cls, v):
        if v is None:
            raise ValueError('Title cannot be null. Omit the field to keep the current title.')
        return v


class TodoResponse(p.BaseModel):
    model_config = p.ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    descriptions: str | None
    completed: bool
    user_id: uuid.UUID
    created_at: dt.datetime
    updated_at: dt.datetime


class TodoStatsResponse(p.BaseModel):
    model_config = p.ConfigDict(from_attributes=True)

    total: int
    completed: int
    incomplete: int
    completion_rate: float
