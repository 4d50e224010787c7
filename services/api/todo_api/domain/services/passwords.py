from abc import ABC, abstractmethod

__all__ = ['IPasswordHasher', 'IPasswordHasherAsync']


class IPasswordHasher(ABC):
    """Password collaborator. Owns the hashing algorithm and cost; the domain only stores its digests."""
    @abstractmethod
    def hash(self, password: str) -> str: ...

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool: ...


class IPasswordHasherAsync(ABC):
    @abstractmethod
    async def hash(self, password: str) -> str: ...

    @abstractmethod
    async def verify(self, password: str, password_hash: str) -> bool: ...
