import abc
import typing as t

__all__ = ['ConnectionManagerInterface', 'SessionManagerInterface']

ConnectionType = t.TypeVar("ConnectionType")
SessionType = t.TypeVar("SessionType")


class ConnectionManagerInterface(t.Generic[ConnectionType], abc.ABC):
    """Lifecycle of one storage backend: boot probe, schema setup, connections, shutdown."""

    @abc.abstractmethod
    def connect(self) -> t.AsyncContextManager[ConnectionType]:
        '''async with manager.connect() as conn: ...'''

    @abc.abstractmethod
    async def close(self) -> None: ...

    @abc.abstractmethod
    async def wait_for_startup(self, attempts: int = 5, interval_sec: int = 5) -> None:
        '''Blocks until the backend answers, raises StorageBootError when it never does'''

    @abc.abstractmethod
    async def initialize_data_structures(self) -> None:
        '''Idempotent: creates only what is missing'''

    @abc.abstractmethod
    async def flush_data(self) -> None: ...


class SessionManagerInterface(ConnectionManagerInterface[ConnectionType], t.Generic[ConnectionType, SessionType], abc.ABC):
    @abc.abstractmethod
    def session(self, **kwargs) -> t.AsyncContextManager[SessionType]:
        '''async with manager.session() as session: ...'''
