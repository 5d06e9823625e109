"""Log classification engine facade.

A :class:`Lumber` embeds log text into vectors and classifies it against a
taxonomy of root categories and leaf labels. Create one and reuse it; it is
safe to share between threads as long as the engine it wraps is::

    with Lumber(engine, roots, embedder) as lumber:
        event = lumber.classify("ERROR: connection refused to db-primary:5432")
        print(event.type, event.category)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Protocol, Sequence

from lumber.events import (
    CanonicalEvent,
    Category,
    Event,
    Label,
    Log,
    RawLog,
    event_from_canonical,
)


class _Engine(Protocol):
    def process(self, raw: RawLog) -> CanonicalEvent: ...

    def process_batch(self, raws: Sequence[RawLog]) -> list[CanonicalEvent]: ...


class _Embedder(Protocol):
    def close(self) -> Any: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Lumber:
    """Classifies log lines into canonical events."""

    def __init__(self, engine: _Engine, roots: Iterable[Any], embedder: _Embedder) -> None:
        self._engine = engine
        self._roots = tuple(roots)
        self._embedder = embedder

    def classify(self, text: str) -> Event:
        """Classify one log line."""
        canonical = self._engine.process(RawLog(timestamp=_now(), raw=text))
        return event_from_canonical(canonical)

    def classify_batch(self, texts: Iterable[str]) -> list[Event]:
        """Classify many log lines in one batched call."""
        now = _now()
        raws = [RawLog(timestamp=now, raw=text) for text in texts]
        return [event_from_canonical(c) for c in self._engine.process_batch(raws)]

    def classify_log(self, log: Log) -> Event:
        """Classify a structured log entry, keeping its timestamp and source."""
        raw = RawLog(
            timestamp=log.timestamp or _now(),
            source=log.source,
            raw=log.text,
            metadata=log.metadata,
        )
        return event_from_canonical(self._engine.process(raw))

    def classify_logs(self, logs: Iterable[Log]) -> list[Event]:
        """Classify a batch of structured log entries."""
        now = _now()
        raws = [
            RawLog(
                timestamp=log.timestamp or now,
                source=log.source,
                raw=log.text,
                metadata=log.metadata,
            )
            for log in logs
        ]
        return [event_from_canonical(c) for c in self._engine.process_batch(raws)]

    def taxonomy(self) -> list[Category]:
        """Return the taxonomy tree as read-only categories."""
        return [
            Category(
                name=root.name,
                labels=tuple(
                    Label(
                        name=child.name,
                        path=f"{root.name}.{child.name}",
                        severity=child.severity,
                    )
                    for child in root.children
                ),
            )
            for root in self._roots
        ]

    def close(self) -> Any:
        """Release the model resources."""
        return self._embedder.close()

    def __enter__(self) -> "Lumber":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()