import sqlmodel as sqlm
import sqlalchemy as sa
import uuid
import todo_api.infrastructure.models.base as base
import todo_api.domain.models as dmod


class Todo(base.VersionedBaseModel, table=True):
    __tablename__ = 'todos'
    title: str = sqlm.Field(sa_type=sa.String(dmod.TITLE_MAX_LENGTH))
    descriptions: str | None = sqlm.Field(default=None, sa_type=sa.String(dmod.DESCRIPTIONS_MAX_LENGTH))
    completed: bool = sqlm.Field(default=False, nullable=False)
    user_id: uuid.UUID = sqlm.Field(foreign_key='users.id', index=True, description='Owner of the todo')
