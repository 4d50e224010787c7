from todo_api.domain.services import IPasswordHasher, IPasswordHasherAsync
import asyncio

__all__ = ['AsyncHasher']


class AsyncHasher(IPasswordHasherAsync):
    """Runs a blocking hasher in a worker thread so bcrypt does not stall the event loop"""
    def __init__(self, sync_hasher: IPasswordHasher):
        self._sync_hasher = sync_hasher

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(self._sync_hasher.hash, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self._sync_hasher.verify, password, password_hash)
