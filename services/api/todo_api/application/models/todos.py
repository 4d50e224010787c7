import datetime as dt
import uuid
import pydantic as p

__all__ = [
    'CreateTodoCommand', 'UpdateTodoCommand', 'TodoActionCommand', 'ListTodosCommand',
    'TodoResult', 'TodoPage', 'TodoStatsResult',
]


### Commands

class CreateTodoCommand(p.BaseModel):
    user_id: uuid.UUID
    title: str | None
    descriptions: str | None = None


class UpdateTodoCommand(p.BaseModel):
    """Only fields explicitly passed on construction get applied.
    Passing `descriptions=None` clears them, omitting it leaves them as they are."""
    todo_id: uuid.UUID
    user_id: uuid.UUID
    title: str | None = None
    descriptions: str | None = None

    def should_update_title(self) -> bool:
        return 'title' in self.model_fields_set

    def should_update_descriptions(self) -> bool:
        return 'descriptions' in self.model_fields_set


class TodoActionCommand(p.BaseModel):
    todo_id: uuid.UUID
    user_id: uuid.UUID


class ListTodosCommand(p.BaseModel):
    user_id: uuid.UUID
    completed: bool | None = None
    search: str | None = None
    limit: int = p.Field(default=100, ge=1, le=100)
    offset: int = p.Field(default=0, ge=0)


### Results

class TodoResult(p.BaseModel):
    model_config = p.ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    descriptions: str | None
    completed: bool
    user_id: uuid.UUID
    created_at: dt.datetime
    updated_at: dt.datetime


class TodoPage(p.BaseModel):
    items: list[TodoResult]
    total: int
    limit: int
    offset: int


class TodoStatsResult(p.BaseModel):
    user_id: uuid.UUID
    total: int
    completed: int
    incomplete: int
    completion_rate: float
