import todo_api.domain.repositories as repo
import todo_api.domain.models as domain
import todo_api.domain.exceptions as domexc
import todo_api.domain.services as domsvc
import todo_api.infrastructure.models as db
import todo_api.infrastructure.interfaces as iabc
from todo_api.common.config import Config

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel.sql.expression import SelectOfScalar
import sqlalchemy.exc as sqlexc
import sqlmodel as sqlm
import typing as t
import uuid
import logging

logger = logging.getLogger('app.storage')

__all__ = ['SQLAUserRepository']


class SQLAUserRepository(repo.IUserRepository):
    """Repository implementation for User model via SQLAlchemy AsyncSession.

    This class handles CRUD operations for users and converts database-specific
    integrity errors into domain-level exceptions. Deleted users are hidden from
    every finder unless `include_deleted` is requested explicitly.
    """

    def __init__(self, uow: iabc.IUnitOfWork[AsyncSession]):
        """Initialize the repository with the unit of work of the current request.

        Args:
            uow (IUnitOfWork): Unit of work holding an active SQLAlchemy async session.
        """
        self._uow = uow

    @property
    def session(self) -> AsyncSession:
        return self._uow.session

    @staticmethod
    def _to_domain(row: db.User) -> domain.User:
        return domain.User.reconstruct(**row.model_dump())

    @staticmethod
    def _to_row_values(user: domain.User, exclude: set[str]) -> dict[str, t.Any]:
        values = user.model_dump(exclude=exclude)
        if 'role' in values:
            values['role'] = user.role.code
        return values

    def _handle_integrity_error(self, error: sqlexc.IntegrityError):
        """Convert SQLAlchemy IntegrityError into a domain exception.

        Raises:
            UserAlreadyExists: If the error is caused by a duplicate username or id.
            UserIntegrityError: For other integrity errors not handled explicitly.
        """
        msg = str(error.orig).lower()
        if 'username' in msg:
            raise domexc.UserAlreadyExists("Another user with this username already exists") from error
        if 'users.id' in msg or 'users_pkey' in msg:
            raise domexc.UserAlreadyExists("Another user with this id already exists") from error
        raise domexc.UserIntegrityError("Action causes integrity constraint violation for User model. Cancelled", orig=error.orig) from error

    def _log_on_commit(self, message: str):
        async def hook():
            logger.debug(f'[STORAGE: USERS] {message}')
        self._uow.add_post_commit_hook(hook)

    def _apply_filters(self, select_query: SelectOfScalar[db.User], filters: repo.UserFilter, filter_mode: t.Literal["and","or"] = "and"):
        d = filters.model_dump(exclude_none=True)
        if 'role' in d:
            d['role'] = int(d['role'])
        f = sqlm.and_ if filter_mode == "and" else sqlm.or_
        where_filters = [getattr(db.User, key) == value for key, value in d.items()]
        return select_query.where(f(*where_filters)) if where_filters else select_query

    async def get_by_id(self, user_id: uuid.UUID, include_deleted: bool = False) -> domain.User | None:
        """Retrieve a user by their unique ID.

        Args:
            user_id (UUID): The ID of the user to retrieve.
            include_deleted (bool): Return logically deleted users too.

        Returns:
            User | None: The user object if found, else None.
        """
        q = sqlm.select(db.User).where(db.User.id == user_id)
        if not include_deleted:
            q = q.where(db.User.deleted == False)  # noqa: E712
        user = (await self.session.scalars(q)).one_or_none()
        return self._to_domain(user) if user is not None else None

    async def get_by_username(self, username: str) -> domain.User | None:
        """Retrieve an active user by their unique username.

        Args:
            username (str): The username to search for.

        Returns:
            User | None: The user object if found, else None.
        """
        user = (await self.session.scalars(
            sqlm.select(db.User).where(db.User.username == username, db.User.deleted == False)  # noqa: E712
        )).one_or_none()
        return self._to_domain(user) if user is not None else None

    async def exists(self, user_id: uuid.UUID) -> bool:
        found = await self.session.scalar(
            sqlm.select(db.User.id).where(db.User.id == user_id, db.User.deleted == False)  # noqa: E712
        )
        return found is not None

    async def list(self, limit: int = 100, offset: int = 0, filters: repo.UserFilter | None = None, filter_mode: t.Literal["and","or"] = "and") -> list[domain.User]:
        """Retrieve active users ordered by creation time.

        Returns:
            list[User]: List of users matching the filters.
        """
        q = sqlm.select(db.User).where(db.User.deleted == False)  # noqa: E712
        if filters:
            q = self._apply_filters(q, filters, filter_mode)
        q = q.order_by(db.User.created_at, db.User.id).limit(limit).offset(offset)
        users_db = (await self.session.scalars(q)).all()
        return [self._to_domain(u) for u in users_db]

    async def save(self, user: domain.User) -> domain.User:
        """Inserts a new user or updates the stored one with the same id.

        Raises:
            UserAlreadyExists: Username is taken.
            VersionConflict: The stored user has been changed since `user` was loaded.
        """
        stored = await self.session.get(db.User, user.id)
        if stored is None:
            return await self._insert(user)
        return await self._update(stored, user)

    async def _insert(self, user: domain.User) -> domain.User:
        row = db.User(**self._to_row_values(user, exclude={'version'}), version=0)
        try:
            self.session.add(row)
            await self.session.flush()
        except sqlexc.IntegrityError as e:
            self._handle_integrity_error(e)
        self._log_on_commit(f'User id={row.id} inserted')
        return self._to_domain(row)

    async def _update(self, stored: db.User, user: domain.User) -> domain.User:
        current_version = stored.version
        if user.version is not None and user.version != current_version:
            raise domexc.VersionConflict(
                f"User id={user.id} has been changed concurrently (version {user.version} -> {current_version}). Reload and retry."
            )
        stmt = (
            sqlm.update(db.User)
            .where(db.User.id == user.id)
            .where(db.User.version == current_version)
            .values(
                **self._to_row_values(user, exclude={'id', 'created_at', 'version'}),
                version=current_version + 1
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except sqlexc.IntegrityError as e:
            self._handle_integrity_error(e)

        if result.rowcount == 0:
            raise domexc.VersionConflict(f"Update failed for User id={user.id}. The data is stale (version mismatch).")

        await self.session.refresh(stored)
        self._log_on_commit(f'User id={stored.id} updated to version {stored.version}')
        return self._to_domain(stored)

    async def delete(self, user_id: uuid.UUID) -> None:
        """Logically delete a user. Their row stays, finders stop returning it."""
        user = await self.get_by_id(user_id)
        if user is None:
            raise domexc.UserDoesNotExist("User with the provided ID does not exist")
        user.delete()
        await self.save(user)

    async def ensure_admin_exists(self, hasher: domsvc.IPasswordHasherAsync):
        admins = await self.list(limit=1, filters=repo.UserFilter(role=domain.UserRole.ADMIN))
        if admins:
            return
        username, password = Config.DEFAULT_ADMIN_USERNAME, Config.DEFAULT_ADMIN_PASSWORD
        if await self.get_by_username(username):
            logger.warning(f'[STORAGE: USERS] No admin found, yet username "{username}" is taken by a non-admin. Skipping default admin creation')
            return
        default_admin = domain.User.create(
            username=username,
            password_hash=await hasher.hash(password),
            role=domain.UserRole.ADMIN,
            password_initialized=False,
        )
        await self.save(default_admin)
        logger.info(f'[STORAGE: USERS] Default admin "{username}" created with a temporary password')
