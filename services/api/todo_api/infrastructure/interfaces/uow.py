import abc
import typing as t

__all__ = ['IUnitOfWork']

SessionType = t.TypeVar("SessionType")
Hook = t.Callable[[], t.Awaitable[t.Any]]


class IUnitOfWork(t.Generic[SessionType], abc.ABC):
    """Transaction boundary of a single request. Repositories share its session.

    `async with uow:` commits on a clean exit and rolls back when the block raises.
    """

    async def __aenter__(self) -> t.Self:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()

    @property
    @abc.abstractmethod
    def session(self) -> SessionType: ...

    @abc.abstractmethod
    async def commit(self) -> None:
        '''Persists the work, then fires the post-commit hooks'''

    @abc.abstractmethod
    async def rollback(self) -> None:
        '''Discards the work together with pending hooks'''

    @abc.abstractmethod
    def add_post_commit_hook(self, hook: Hook) -> None: ...

    @abc.abstractmethod
    async def run_hooks(self) -> None:
        '''Public so tests can fire hooks without committing'''
