import todo_api.domain.repositories as repo
import todo_api.domain.models as domain
import todo_api.domain.exceptions as domexc
import todo_api.infrastructure.models as db
import todo_api.infrastructure.interfaces as iabc
from todo_api.domain.models.common import utcnow

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel.sql.expression import SelectOfScalar
import sqlalchemy as sa
import sqlalchemy.exc as sqlexc
import sqlmodel as sqlm
import uuid
import logging

logger = logging.getLogger('app.storage')

__all__ = ['SQLATodoRepository']


class SQLATodoRepository(repo.ITodoRepository):
    """Todo repository over a SQLAlchemy AsyncSession shared through the unit of work.

    `save` inserts unknown ids and updates known ones. Updates are guarded by the
    row version: a todo loaded before a concurrent change cannot overwrite it.
    """

    def __init__(self, uow: iabc.IUnitOfWork[AsyncSession]):
        self._uow = uow

    @property
    def session(self) -> AsyncSession:
        return self._uow.session

    @staticmethod
    def _to_domain(row: db.Todo) -> domain.Todo:
        return domain.Todo.reconstruct(**row.model_dump())

    def _handle_integrity_error(self, error: sqlexc.IntegrityError):
        msg = str(error.orig).lower()
        if 'foreign key' in msg or 'user_id' in msg:
            raise domexc.UserDoesNotExist("Owner of the todo does not exist") from error
        raise domexc.TodoIntegrityError("Action causes integrity constraint violation for Todo model. Cancelled", orig=error.orig) from error

    def _log_on_commit(self, message: str):
        async def hook():
            logger.debug(f'[STORAGE: TODOS] {message}')
        self._uow.add_post_commit_hook(hook)

    def _apply_filters(self, query: SelectOfScalar, filters: repo.TodoFilter | None) -> SelectOfScalar:
        if filters is None:
            return query
        if filters.completed is not None:
            query = query.where(db.Todo.completed == filters.completed)
        if filters.search:
            pattern = filters.search.lower()
            query = query.where(sqlm.or_(
                sa.func.lower(sqlm.col(db.Todo.title), type_=sa.String).contains(pattern, autoescape=True),
                sa.func.lower(sa.func.coalesce(sqlm.col(db.Todo.descriptions), ''), type_=sa.String).contains(pattern, autoescape=True),
            ))
        return query

    def _owned_query(self, user_id: uuid.UUID, filters: repo.TodoFilter | None) -> SelectOfScalar:
        q = sqlm.select(db.Todo).where(db.Todo.user_id == user_id, db.Todo.deleted == False)  # noqa: E712
        return self._apply_filters(q, filters)

    async def get_by_id(self, todo_id: uuid.UUID, include_deleted: bool = False) -> domain.Todo | None:
        q = sqlm.select(db.Todo).where(db.Todo.id == todo_id)
        if not include_deleted:
            q = q.where(db.Todo.deleted == False)  # noqa: E712
        row = (await self.session.scalars(q)).one_or_none()
        return self._to_domain(row) if row is not None else None

    async def list_by_owner(self, user_id: uuid.UUID, filters: repo.TodoFilter | None = None, limit: int | None = 100, offset: int = 0) -> list[domain.Todo]:
        q = self._owned_query(user_id, filters).order_by(db.Todo.created_at, db.Todo.id).offset(offset)
        if limit is not None:
            q = q.limit(limit)
        rows = (await self.session.scalars(q)).all()
        return [self._to_domain(row) for row in rows]

    async def count_by_owner(self, user_id: uuid.UUID, filters: repo.TodoFilter | None = None) -> int:
        q = self._owned_query(user_id, filters)
        return await self.session.scalar(sqlm.select(sa.func.count()).select_from(q.subquery())) or 0

    async def save(self, todo: domain.Todo) -> domain.Todo:
        stored = await self.session.get(db.Todo, todo.id)
        if stored is None:
            return await self._insert(todo)
        return await self._update(stored, todo)

    async def _insert(self, todo: domain.Todo) -> domain.Todo:
        row = db.Todo(**todo.model_dump(exclude={'version'}), version=0)
        try:
            self.session.add(row)
            await self.session.flush()
        except sqlexc.IntegrityError as e:
            self._handle_integrity_error(e)
        self._log_on_commit(f'Todo id={row.id} inserted')
        return self._to_domain(row)

    async def _update(self, stored: db.Todo, todo: domain.Todo) -> domain.Todo:
        current_version = stored.version
        if todo.version is not None and todo.version != current_version:
            raise domexc.VersionConflict(
                f"Todo id={todo.id} has been changed concurrently (version {todo.version} -> {current_version}). Reload and retry."
            )
        stmt = (
            sqlm.update(db.Todo)
            .where(db.Todo.id == todo.id)
            .where(db.Todo.version == current_version)
            .values(
                **todo.model_dump(exclude={'id', 'user_id', 'created_at', 'version'}),
                version=current_version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except sqlexc.IntegrityError as e:
            self._handle_integrity_error(e)

        if result.rowcount == 0:
            raise domexc.VersionConflict(f"Update failed for Todo id={todo.id}. The data is stale (version mismatch).")

        await self.session.refresh(stored)
        self._log_on_commit(f'Todo id={stored.id} updated to version {stored.version}')
        return self._to_domain(stored)

    async def delete(self, todo_id: uuid.UUID) -> None:
        stored = await self.session.get(db.Todo, todo_id)
        if stored is None or stored.deleted:
            raise domexc.TodoDoesNotExist(f"Todo with id={todo_id} does not exist")
        stmt = (
            sqlm.update(db.Todo)
            .where(db.Todo.id == todo_id, db.Todo.version == stored.version)
            .values(deleted=True, updated_at=utcnow(), version=stored.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise domexc.VersionConflict(f"Delete failed for Todo id={todo_id}. The data is stale (version mismatch).")
        await self.session.refresh(stored)
        self._log_on_commit(f"Todo id={todo_id} logically deleted")
