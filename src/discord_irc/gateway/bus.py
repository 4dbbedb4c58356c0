"""Event bus: one serialized queue feeding the dispatcher."""

from __future__ import annotations

import asyncio

from loguru import logger

from discord_irc.events import Dispatcher, EventTarget

__all__ = ["Bus", "EventTarget"]


class Bus:
    """Event bus. Adapters publish from their own tasks; events are handled one at a time.

    ``publish`` only enqueues. ``run`` (or ``drain``) pops events in arrival
    order and dispatches each to completion before taking the next, so two
    events are never transformed concurrently.
    """

    def __init__(self) -> None:
        self._dispatcher = Dispatcher()
        self._queue: asyncio.Queue[tuple[str, object]] = asyncio.Queue()

    def register(self, target: EventTarget) -> None:
        """Register an event target."""
        self._dispatcher.register(target)

    def unregister(self, target: EventTarget) -> None:
        """Unregister an event target."""
        self._dispatcher.unregister(target)

    @property
    def pending(self) -> int:
        """Number of queued, not yet dispatched events."""
        return self._queue.qsize()

    def publish(self, source: str, evt: object) -> None:
        """Queue an event for dispatch."""
        self._queue.put_nowait((source, evt))

    def drain(self) -> int:
        """Dispatch everything queued right now. Returns the number of events handled."""
        handled = 0
        while True:
            try:
                source, evt = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return handled
            self._dispatcher.dispatch(source, evt)
            self._queue.task_done()
            handled += 1

    async def run(self) -> None:
        """Consume the queue forever, one event at a time."""
        logger.debug("Bus consumer started")
        while True:
            source, evt = await self._queue.get()
            try:
                self._dispatcher.dispatch(source, evt)
            finally:
                self._queue.task_done()
