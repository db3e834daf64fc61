# econ_compare/utils/gate.py
from __future__ import annotations

import asyncio
from collections import deque
from typing import Deque


class SerializationGate:
    """
    FIFO mutual exclusion for coroutines.

    At most one holder at a time; waiters are served strictly in arrival
    order. Prefer ``async with gate:`` so the gate is released on every exit
    path, including exceptions and cancellation.
    """

    def __init__(self) -> None:
        self._waiters: Deque[asyncio.Future] = deque()
        self._locked = False

    def locked(self) -> bool:
        return self._locked

    @property
    def waiting(self) -> int:
        return sum(1 for f in self._waiters if not f.done())

    async def acquire(self) -> None:
        if not self._locked and not self._waiters:
            self._locked = True
            return

        fut = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        try:
            await fut
        except asyncio.CancelledError:
            if fut.done() and not fut.cancelled():
                # ownership was handed to us right before the cancel landed
                self._hand_off()
            else:
                try:
                    self._waiters.remove(fut)
                except ValueError:
                    pass
            raise

    def release(self) -> None:
        if not self._locked:
            raise RuntimeError("release() called on an unlocked gate")
        self._hand_off()

    def _hand_off(self) -> None:
        while self._waiters:
            fut = self._waiters.popleft()
            if not fut.done():
                fut.set_result(None)
                return
        self._locked = False

    async def __aenter__(self) -> "SerializationGate":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()
