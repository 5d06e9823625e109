"""Public and internal event types used by the classification engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class RawLog:
    """A raw log line as delivered by a connector."""

    timestamp: Optional[datetime] = None
    raw: str = ""
    source: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class CanonicalEvent:
    """The engine's internal, classified representation of a log line."""

    type: str = ""
    category: str = ""
    severity: str = ""
    timestamp: Optional[datetime] = None
    summary: str = ""
    confidence: float = 0.0
    raw: str = ""
    count: int = 0


@dataclass(frozen=True)
class Event:
    """A classified, normalized log event.

    This is the stable public type; the engine's internal representation
    may change without affecting consumers.
    """

    type: str = ""
    category: str = ""
    severity: str = ""
    timestamp: Optional[datetime] = None
    summary: str = ""
    confidence: float = 0.0
    raw: str = ""
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping; empty confidence, raw and count are omitted."""
        data: dict[str, Any] = {
            "type": self.type,
            "category": self.category,
            "severity": self.severity,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "summary": self.summary,
        }
        if self.confidence:
            data["confidence"] = self.confidence
        if self.raw:
            data["raw"] = self.raw
        if self.count:
            data["count"] = self.count
        return data


@dataclass
class Log:
    """A raw log entry with optional metadata.

    A timestamp of None means "now" at classification time.
    """

    text: str = ""
    timestamp: Optional[datetime] = None
    source: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Label:
    """A single taxonomy leaf."""

    name: str
    path: str
    severity: str


@dataclass(frozen=True)
class Category:
    """A taxonomy root category with its leaf labels."""

    name: str
    labels: tuple[Label, ...] = ()


def event_from_canonical(canonical: CanonicalEvent) -> Event:
    """Convert an internal canonical event to the public Event type."""
    return Event(
        type=canonical.type,
        category=canonical.category,
        severity=canonical.severity,
        timestamp=canonical.timestamp,
        summary=canonical.summary,
        confidence=canonical.confidence,
        raw=canonical.raw,
        count=canonical.count,
    )