"""Timeline merger: one time-ordered view of detections and response actions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ValidationError
from core.models import Detection, EntryKind, ResponseAction, Severity, TimelineEntry

logger = logging.getLogger(__name__)

RawEntry = Mapping[str, Any]
EntryT = TypeVar("EntryT", bound=BaseModel)

# The incident service returns at most this many alerts per query.
ALERT_FEED_LIMIT = 100


@dataclass
class MergeResult:
    """Merged timeline plus the entries that were excluded from it."""

    entries: list[TimelineEntry] = field(default_factory=list)
    rejected: list[ValidationError] = field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)

    @property
    def detections(self) -> list[Detection]:
        return [e for e in self.entries if isinstance(e, Detection)]

    @property
    def actions(self) -> list[ResponseAction]:
        return [e for e in self.entries if isinstance(e, ResponseAction)]

    def __len__(self) -> int:
        return len(self.entries)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _entry_id(raw: Any, fallback: str) -> str:
    if isinstance(raw, Mapping):
        value = raw.get("id")
        if value not in (None, ""):
            return str(value)
    return fallback


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "entry"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def _parse(model: type[EntryT], raw: Any, fallback_id: str) -> EntryT:
    if isinstance(raw, model):
        return raw
    entry_id = _entry_id(raw, fallback_id)
    if not isinstance(raw, Mapping):
        raise ValidationError(entry_id, f"expected a mapping, got {type(raw).__name__}")
    try:
        return model.model_validate(dict(raw))
    except PydanticValidationError as exc:
        raise ValidationError(entry_id, _describe(exc)) from exc


def parse_detection(raw: RawEntry | Detection, fallback_id: str = "<unknown>") -> Detection:
    """Validate one alert record from the wire.

    Raises:
        ValidationError: naming the record id (or *fallback_id* when it has none).
    """
    return _parse(Detection, raw, fallback_id)


def parse_action(raw: RawEntry | ResponseAction, fallback_id: str = "<unknown>") -> ResponseAction:
    """Validate one response-action record from the wire."""
    return _parse(ResponseAction, raw, fallback_id)


def _collect(
    parser: Callable[..., EntryT],
    items: Iterable[Any],
    source: str,
    rejected: list[ValidationError],
) -> list[EntryT]:
    parsed: list[EntryT] = []
    for position, raw in enumerate(items):
        try:
            parsed.append(parser(raw, fallback_id=f"{source}[{position}]"))
        except ValidationError as exc:
            rejected.append(exc)
    return parsed


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def merge_timeline(
    detections: Iterable[RawEntry | Detection],
    actions: Iterable[RawEntry | ResponseAction],
) -> MergeResult:
    """Merge detections and response actions into one ascending timeline.

    The sort is stable and detections are laid down before actions, so at equal
    timestamps every detection precedes every action and each group keeps its
    input order. Entries that fail validation, or that reuse an id already in
    the timeline, are left out and returned in ``MergeResult.rejected``.
    Inputs are not modified.
    """
    rejected: list[ValidationError] = []
    combined: list[TimelineEntry] = _collect(parse_detection, detections, "detections", rejected)
    combined += _collect(parse_action, actions, "actions", rejected)

    seen: set[str] = set()
    unique: list[TimelineEntry] = []
    for entry in combined:
        if entry.id in seen:
            rejected.append(ValidationError(entry.id, f"duplicate id ({entry.kind})"))
            continue
        seen.add(entry.id)
        unique.append(entry)

    for exc in rejected:
        logger.warning("Excluded from timeline: %s", exc)

    entries = sorted(unique, key=lambda e: e.timestamp)
    return MergeResult(entries=entries, rejected=rejected)


def split_timeline_records(
    records: Iterable[RawEntry],
) -> tuple[list[RawEntry], list[RawEntry], list[ValidationError]]:
    """Split a ``type``-tagged timeline payload into detections and actions.

    Records with a missing or unknown ``type`` are returned as rejections.
    """
    detections: list[RawEntry] = []
    actions: list[RawEntry] = []
    rejected: list[ValidationError] = []

    for position, record in enumerate(records):
        entry_id = _entry_id(record, f"records[{position}]")
        tag = record.get("type") if isinstance(record, Mapping) else None
        if tag == EntryKind.ALERT.value:
            detections.append(record)
        elif tag == EntryKind.ACTION.value:
            actions.append(record)
        else:
            rejected.append(ValidationError(entry_id, f"unknown entry type {tag!r}"))

    return detections, actions, rejected


def merge_incident_timeline(records: Iterable[RawEntry]) -> MergeResult:
    """Build an incident timeline straight from the ``/incidents/{id}/timeline`` payload."""
    detections, actions, rejected = split_timeline_records(records)
    for exc in rejected:
        logger.warning("Excluded from timeline: %s", exc)
    result = merge_timeline(detections, actions)
    result.rejected = rejected + result.rejected
    return result


# ---------------------------------------------------------------------------
# Alert feed
# ---------------------------------------------------------------------------


def collect_alerts(
    records: Iterable[RawEntry | Detection],
    severity: Severity | str | None = None,
    limit: int = ALERT_FEED_LIMIT,
) -> MergeResult:
    """Validate alert records for the alert list, newest first.

    Invalid records are rejected the same way ``merge_timeline`` rejects them.
    When *severity* is given only alerts of that severity are kept.
    """
    wanted = Severity(severity) if severity else None
    result = merge_timeline(records, [])
    alerts = [e for e in reversed(result.entries) if wanted is None or e.severity is wanted]
    return MergeResult(entries=alerts[:limit], rejected=result.rejected)
