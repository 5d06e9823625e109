from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from lumber.events import (
    CanonicalEvent,
    Category,
    Event,
    Label,
    Log,
    RawLog,
    event_from_canonical,
)

TS = datetime(2026, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


def _canonical(**overrides):
    values = dict(
        type="ERROR",
        category="connection_failure",
        severity="error",
        timestamp=TS,
        summary="connection refused",
        confidence=0.87,
        raw="ERROR: connection refused to db-primary:5432",
        count=3,
    )
    values.update(overrides)
    return CanonicalEvent(**values)


def test_event_from_canonical_copies_every_field():
    canonical = _canonical()
    event = event_from_canonical(canonical)
    assert event.type == canonical.type
    assert event.category == canonical.category
    assert event.severity == canonical.severity
    assert event.timestamp == canonical.timestamp
    assert event.summary == canonical.summary
    assert event.confidence == canonical.confidence
    assert event.raw == canonical.raw
    assert event.count == canonical.count


def test_to_dict_includes_populated_optional_fields():
    data = event_from_canonical(_canonical()).to_dict()
    assert data["type"] == "ERROR"
    assert data["category"] == "connection_failure"
    assert data["confidence"] == 0.87
    assert data["raw"] == "ERROR: connection refused to db-primary:5432"
    assert data["count"] == 3


def test_to_dict_omits_empty_optional_fields():
    data = event_from_canonical(_canonical(confidence=0.0, raw="", count=0)).to_dict()
    assert "confidence" not in data
    assert "raw" not in data
    assert "count" not in data
    assert set(data) == {"type", "category", "severity", "timestamp", "summary"}


def test_to_dict_timestamp_round_trips():
    data = event_from_canonical(_canonical()).to_dict()
    assert datetime.fromisoformat(data["timestamp"]) == TS


def test_event_is_immutable():
    event = event_from_canonical(_canonical())
    assert isinstance(event, Event)
    with pytest.raises(FrozenInstanceError):
        event.type = "REQUEST"
    assert event.type == "ERROR"


def test_log_defaults():
    log = Log(text="GET /api/users 200 OK")
    assert log.timestamp is None
    assert log.source == ""
    assert log.metadata == {}


def test_log_metadata_not_shared():
    first = Log(text="a")
    second = Log(text="b")
    first.metadata["k"] = "v"
    assert second.metadata == {}


def test_raw_log_holds_values():
    raw = RawLog(timestamp=TS, raw="text", source="vercel")
    assert raw.timestamp == TS
    assert raw.raw == "text"
    assert raw.source == "vercel"
    assert raw.metadata == {}


def test_category_holds_labels():
    label = Label(name="connection_failure", path="ERROR.connection_failure", severity="error")
    category = Category(name="ERROR", labels=(label,))
    assert category.labels[0].path == "ERROR.connection_failure"
    assert category.labels[0].severity == "error"