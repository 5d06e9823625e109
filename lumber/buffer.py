"""Timed, size-bounded buffer that flushes deduplicated batches of events."""

from __future__ import annotations

import asyncio
import threading
import time
from typing import TYPE_CHECKING, Callable, Optional

from lumber.events import CanonicalEvent

if TYPE_CHECKING:
    from lumber.pipeline import Deduplicator, Output


class StreamBuffer:
    """Collects events and writes them, deduplicated, in batches.

    The flush timer starts with the first event of a batch and runs for
    ``window`` seconds. A ``max_size`` of 0 means the buffer is unbounded.
    ``on_write`` is called after every successful write.
    """

    def __init__(
        self,
        deduplicator: "Deduplicator",
        output: "Output",
        window: float,
        max_size: int = 0,
        on_write: Optional[Callable[[], None]] = None,
    ) -> None:
        self._deduplicator = deduplicator
        self._output = output
        self._window = window
        self._max_size = max_size
        self._on_write = on_write
        self._lock = threading.Lock()
        self._pending: list[CanonicalEvent] = []
        self._deadline: Optional[float] = None
        self._timer_started = asyncio.Event()

    def add(self, event: CanonicalEvent) -> bool:
        """Buffer an event; return True when the buffer is full and must be flushed."""
        with self._lock:
            self._pending.append(event)
            if len(self._pending) == 1:
                self._deadline = time.monotonic() + self._window
                self._timer_started.set()
            return self._max_size > 0 and len(self._pending) >= self._max_size

    def seconds_until_flush(self) -> Optional[float]:
        """Seconds left until the timer fires, or None when no timer is running."""
        with self._lock:
            if self._deadline is None:
                return None
            return max(0.0, self._deadline - time.monotonic())

    async def wait_for_flush(self) -> None:
        """Wait until the flush timer fires; waits indefinitely while no timer runs."""
        while True:
            remaining = self.seconds_until_flush()
            if remaining is None:
                await self._timer_started.wait()
                continue
            if remaining <= 0:
                return
            await asyncio.sleep(remaining)

    async def flush(self) -> None:
        """Deduplicate and write every pending event, stopping the timer."""
        with self._lock:
            events, self._pending = self._pending, []
            self._deadline = None
            self._timer_started.clear()

        if not events:
            return

        for event in self._deduplicator.deduplicate_batch(events):
            await self._output.write(event)
            if self._on_write is not None:
                self._on_write()