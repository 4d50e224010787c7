import logging
from sqlalchemy.ext.asyncio import AsyncSession
import todo_api.infrastructure.interfaces as iabc
from todo_api.infrastructure.interfaces.uow import Hook

logger = logging.getLogger("app.storage")

__all__ = ["SQLAlchemyUnitOfWork"]


class SQLAlchemyUnitOfWork(iabc.IUnitOfWork[AsyncSession]):
    """Transaction of one request over a shared AsyncSession.

    Post-commit hooks (e.g. storage logs) fire once after a successful commit; a rollback drops them.
    """

    def __init__(self, session: AsyncSession):
        self._session = session
        self._post_commit_hooks: list[Hook] = []

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def commit(self) -> None:
        await self._session.commit()
        await self.run_hooks()

    async def rollback(self) -> None:
        await self._session.rollback()
        if self._post_commit_hooks:
            logger.debug(f'[UoW] Rolled back, {len(self._post_commit_hooks)} post-commit hook(s) dropped')
        self._post_commit_hooks.clear()

    def add_post_commit_hook(self, hook: Hook) -> None:
        self._post_commit_hooks.append(hook)

    async def run_hooks(self) -> None:
        #Swap first: a hook may register new hooks for the next commit
        hooks, self._post_commit_hooks = self._post_commit_hooks, []
        for hook in hooks:
            try:
                await hook()
            except Exception as e:
                logger.exception(f"[UoW] Post-commit hook {getattr(hook, '__qualname__', hook)} failed: {e}")
