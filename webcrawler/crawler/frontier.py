# webcrawler/crawler/frontier.py
"""
Frontier: the closable work queue of pending :class:`FrontierEntry` values.

Accounting follows :class:`asyncio.Queue`: every pushed entry is *unfinished*
until a consumer calls :meth:`Frontier.task_done` for it, and :meth:`join`
resolves once nothing is unfinished. Consumers push the links they discover
before marking their own entry done, so the count cannot reach zero while a
page that may still add work is being processed.
"""
from __future__ import annotations

import asyncio
from collections import deque
from typing import Deque, Optional

from webcrawler.crawler.models import FrontierEntry

__all__ = ("Frontier",)


class Frontier:
    """Unbounded multi-producer/multi-consumer queue with graceful close."""

    def __init__(self) -> None:
        self._items: Deque[FrontierEntry] = deque()
        self._getters: Deque[asyncio.Future[None]] = deque()
        self._unfinished = 0
        self._finished = asyncio.Event()
        self._finished.set()
        self._closed = False

    def __len__(self) -> int:
        return len(self._items)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def in_flight(self) -> int:
        """Entries handed to consumers and not yet marked done."""
        return self._unfinished - len(self._items)

    def push(self, entry: FrontierEntry) -> bool:
        """Queue *entry*; never blocks. Returns ``False`` (and drops it) once closed."""
        if self._closed:
            return False
        self._items.append(entry)
        self._unfinished += 1
        self._finished.clear()
        self._wakeup_next()
        return True

    async def pop(self) -> Optional[FrontierEntry]:
        """Wait for the next entry; ``None`` once the frontier is closed."""
        while not self._items:
            if self._closed:
                return None
            getter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
            self._getters.append(getter)
            try:
                await getter
            except asyncio.CancelledError:
                getter.cancel()
                try:
                    self._getters.remove(getter)
                except ValueError:
                    pass
                if self._items and not self._closed:
                    self._wakeup_next()
                raise
        return self._items.popleft()

    def task_done(self) -> None:
        """Mark one popped entry as fully processed."""
        if self._unfinished <= 0:
            raise ValueError("task_done() called too many times")
        self._unfinished -= 1
        if self._unfinished == 0:
            self._finished.set()

    async def join(self) -> None:
        """Resolve once every pushed entry has been processed (organic completion)."""
        await self._finished.wait()

    def close(self) -> int:
        """
        Stop accepting entries and release every waiting consumer.

        Pending entries are discarded; returns how many were abandoned.
        Calling it again is a no-op returning 0.
        """
        if self._closed:
            return 0
        self._closed = True
        abandoned = len(self._items)
        self._items.clear()
        self._unfinished -= abandoned
        if self._unfinished == 0:
            self._finished.set()
        while self._getters:
            getter = self._getters.popleft()
            if not getter.done():
                getter.set_result(None)
        return abandoned

    def _wakeup_next(self) -> None:
        while self._getters:
            getter = self._getters.popleft()
            if not getter.done():
                getter.set_result(None)
                break
