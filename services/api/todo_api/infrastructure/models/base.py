import sqlmodel as sqlm
import sqlalchemy as sa
import datetime as dt
import uuid


class VersionedBaseModel(sqlm.SQLModel):
    """Common columns of soft-deletable, optimistically locked tables"""
    id: uuid.UUID = sqlm.Field(primary_key=True, description='UUID identifier')
    created_at: dt.datetime = sqlm.Field(sa_type=sa.DateTime(timezone=True), nullable=False)
    updated_at: dt.datetime = sqlm.Field(sa_type=sa.DateTime(timezone=True), nullable=False)
    deleted: bool = sqlm.Field(default=False, nullable=False, index=True, description='Logical deletion flag')
    version: int = sqlm.Field(default=0, nullable=False, description='Bumped on every update')
