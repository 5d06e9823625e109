"""Connects a log connector, a classification engine and an output."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterable, Optional, Protocol, Sequence

from lumber.buffer import StreamBuffer
from lumber.events import CanonicalEvent, RawLog

logger = logging.getLogger(__name__)


class Processor(Protocol):
    """Classifies and compacts raw logs; raises on failure."""

    def process(self, raw: RawLog) -> CanonicalEvent: ...

    def process_batch(self, raws: Sequence[RawLog]) -> list[CanonicalEvent]: ...


class Connector(Protocol):
    """A source of raw logs."""

    def stream(self, config: Any) -> AsyncIterable[RawLog]: ...

    async def query(self, config: Any, params: Any) -> list[RawLog]: ...


class Output(Protocol):
    """A destination for classified events."""

    async def write(self, event: CanonicalEvent) -> None: ...

    def close(self) -> Any: ...


class Deduplicator(Protocol):
    """Merges repeated events within a batch."""

    def deduplicate_batch(self, events: Sequence[CanonicalEvent]) -> list[CanonicalEvent]: ...


class PipelineError(Exception):
    """Raised when a pipeline stage fails in a way that stops the pipeline."""


class Pipeline:
    """Streams or queries logs, classifies them and writes the results.

    With a deduplicator, streamed events are buffered for ``window`` seconds
    (or until ``max_buffer_size`` events, 0 meaning unlimited) and written
    as deduplicated batches.
    """

    def __init__(
        self,
        connector: Connector,
        engine: Processor,
        output: Output,
        deduplicator: Optional[Deduplicator] = None,
        window: float = 0.0,
        max_buffer_size: int = 0,
    ) -> None:
        self._connector = connector
        self._engine = engine
        self._output = output
        self._deduplicator = deduplicator
        self._window = window
        self._max_buffer_size = max_buffer_size
        self._skipped_logs = 0
        self._written_events = 0

    @property
    def skipped_logs(self) -> int:
        """Number of logs the engine failed to process."""
        return self._skipped_logs

    @property
    def written_events(self) -> int:
        """Number of events written to the output."""
        return self._written_events

    async def stream(self, config: Any) -> None:
        """Process logs as they arrive until the source ends or the task is cancelled."""
        try:
            logs = self._connector.stream(config)
        except Exception as exc:
            raise PipelineError(f"pipeline stream: {exc}") from exc

        if self._deduplicator is not None:
            await self._stream_with_dedup(logs)
        else:
            await self._stream_direct(logs)

    async def _stream_direct(self, logs: AsyncIterable[RawLog]) -> None:
        try:
            async for raw in logs:
                event = self._process(raw, "skipping log")
                if event is None:
                    continue
                try:
                    await self._output.write(event)
                except Exception as exc:
                    raise PipelineError(f"pipeline output: {exc}") from exc
                self._written_events += 1
        except asyncio.CancelledError:
            self._log_skipped("stream stopped")
            raise
        self._log_skipped("stream ended")

    async def _stream_with_dedup(self, logs: AsyncIterable[RawLog]) -> None:
        assert self._deduplicator is not None
        buffer = StreamBuffer(
            self._deduplicator,
            self._output,
            self._window,
            self._max_buffer_size,
            self._count_written,
        )
        iterator = logs.__aiter__()
        pending: Optional[asyncio.Future] = None
        try:
            while True:
                if pending is None:
                    pending = asyncio.ensure_future(iterator.__anext__())
                done, _ = await asyncio.wait({pending}, timeout=buffer.seconds_until_flush())
                if not done:
                    await self._flush(buffer, "pipeline flush")
                    continue

                finished, pending = pending, None
                try:
                    raw = finished.result()
                except StopAsyncIteration:
                    self._log_skipped("stream ended")
                    await buffer.flush()
                    return

                event = self._process(raw, "skipping log")
                if event is None:
                    continue
                if buffer.add(event):
                    await self._flush(buffer, "pipeline flush (buffer full)")
        except asyncio.CancelledError:
            self._log_skipped("stream stopped")
            await self._flush(buffer, "pipeline flush on shutdown")
            raise
        finally:
            if pending is not None:
                pending.cancel()

    async def query(self, config: Any, params: Any) -> None:
        """Fetch logs once, classify them and write the results."""
        try:
            raws = await self._connector.query(config, params)
        except Exception as exc:
            raise PipelineError(f"pipeline query: {exc}") from exc

        try:
            events = self._engine.process_batch(raws)
        except Exception as exc:
            logger.warning(
                "batch processing failed, falling back to individual: error=%s count=%d",
                exc,
                len(raws),
            )
            events = [
                event
                for event in (self._process(raw, "skipping log in query") for raw in raws)
                if event is not None
            ]

        if self._deduplicator is not None:
            events = self._deduplicator.deduplicate_batch(events)

        for event in events:
            try:
                await self._output.write(event)
            except Exception as exc:
                raise PipelineError(f"pipeline output: {exc}") from exc
            self._written_events += 1

    def close(self) -> Any:
        """Close the output, logging totals if anything happened."""
        if self._written_events or self._skipped_logs:
            logger.info(
                "pipeline closing: total_events_written=%d total_skipped_logs=%d",
                self._written_events,
                self._skipped_logs,
            )
        return self._output.close()

    def _process(self, raw: RawLog, message: str) -> Optional[CanonicalEvent]:
        try:
            return self._engine.process(raw)
        except Exception as exc:
            self._skipped_logs += 1
            logger.warning("%s: error=%s source=%s", message, exc, raw.source)
            return None

    def _count_written(self) -> None:
        self._written_events += 1

    def _log_skipped(self, message: str) -> None:
        if self._skipped_logs:
            logger.info("%s: skipped_logs=%d", message, self._skipped_logs)

    @staticmethod
    async def _flush(buffer: StreamBuffer, context: str) -> None:
        try:
            await buffer.flush()
        except Exception as exc:
            raise PipelineError(f"{context}: {exc}") from exc