"""Multi-producer / single-consumer result channel."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator

from msginfo.models import ExtractedResult


class ChannelClosedError(RuntimeError):
    """Raised when a producer sends on a channel that was already closed."""


class ResultChannel:
    """Unbounded queue of extracted results with an explicit close.

    Producers ``await channel.send(result)``; the single consumer iterates
    with ``async for``. Iteration ends once :meth:`close` has been called and
    every item sent before it has been delivered.

    Close only after every producer has been joined; anything sent after
    :meth:`close` raises :class:`ChannelClosedError`.
    """

    _CLOSED = object()

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, result: ExtractedResult) -> None:
        if self._closed:
            raise ChannelClosedError("send on closed result channel")
        await self._queue.put(result)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(self._CLOSED)

    async def __aiter__(self) -> AsyncIterator[ExtractedResult]:
        while True:
            item = await self._queue.get()
            if item is self._CLOSED:
                return
            yield item
