import sqlmodel as sqlm
import sqlalchemy as sa
import todo_api.infrastructure.models.base as base
import todo_api.domain.models as dmod


class User(base.VersionedBaseModel, table=True):
    __tablename__ = 'users'
    username: str = sqlm.Field(sa_type=sa.String(dmod.USERNAME_MAX_LENGTH), unique=True, index=True, description='A unique username used for logging in')
    email: str | None = sqlm.Field(default=None, sa_type=sa.String(dmod.EMAIL_MAX_LENGTH))
    first_name: str | None = sqlm.Field(default=None, sa_type=sa.String(dmod.NAME_MAX_LENGTH))
    first_name_ruby: str | None = sqlm.Field(default=None, sa_type=sa.String(dmod.NAME_MAX_LENGTH))
    last_name: str | None = sqlm.Field(default=None, sa_type=sa.String(dmod.NAME_MAX_LENGTH))
    last_name_ruby: str | None = sqlm.Field(default=None, sa_type=sa.String(dmod.NAME_MAX_LENGTH))
    password_hash: str = sqlm.Field(sa_type=sa.String(dmod.PASSWORD_HASH_LENGTH), description='A hashed password')
    role: int = sqlm.Field(default=dmod.UserRole.USER.code, sa_type=sa.Integer, index=True, description='Role code')
    password_initialized: bool = sqlm.Field(default=False, nullable=False, description='False while the account uses a temporary password')
