import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class ReadWriteLock:
    """
    Shared/exclusive lock for asyncio tasks.
    Readers run concurrently; a writer runs alone. Waiting writers block
    new readers so a steady stream of reads cannot starve them.
    """
    
    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0
    
    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and not self._waiting_writers
            )
            self._readers += 1
        try:
            yield
        finally:
            self._readers -= 1
            if not self._readers:
                await asyncio.shield(self._notify())
    
    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._waiting_writers += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer and not self._readers
                )
            finally:
                self._waiting_writers -= 1
                # Wake readers held back by this writer if it was cancelled
                self._cond.notify_all()
            self._writer = True
        try:
            yield
        finally:
            self._writer = False
            await asyncio.shield(self._notify())
    
    async def _notify(self):
        # Awaited under shield so the wakeup survives a cancelled releaser
        async with self._cond:
            self._cond.notify_all()
    
    @property
    def readers(self) -> int:
        return self._readers
    
    @property
    def locked(self) -> bool:
        """True while a writer holds the lock"""
        return self._writer
