"""Replay reel loading from YAML/JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ReelLoadError
from core.models import ReplayEvent

logger = logging.getLogger(__name__)

REEL_SUFFIXES: tuple[str, ...] = (".yaml", ".yml", ".json")


def parse_reel(raw: Any, source: str = "<memory>") -> list[ReplayEvent]:
    """Validate a reel payload, keeping its order.

    Accepts a list of events or a mapping with an ``events`` list. A reel is
    an authoritative sequence, so one bad record fails the whole reel.
    """
    if isinstance(raw, dict):
        raw = raw.get("events")
    if not isinstance(raw, list):
        raise ReelLoadError(source, "expected a list of events or a mapping with an 'events' list")

    events: list[ReplayEvent] = []
    for position, record in enumerate(raw):
        try:
            events.append(ReplayEvent.model_validate(record))
        except PydanticValidationError as exc:
            raise ReelLoadError(source, f"event #{position}: {exc}") from exc
    return events


def load_reel(path: str | Path) -> list[ReplayEvent]:
    """Load a reel file, choosing the JSON or YAML parser by suffix."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in REEL_SUFFIXES:
        raise ReelLoadError(str(path), f"unsupported file type '{path.suffix}'")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ReelLoadError(str(path), f"Cannot read file: {exc}") from exc

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ReelLoadError(str(path), f"Invalid JSON: {exc}") from exc
    else:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ReelLoadError(str(path), f"Invalid YAML: {exc}") from exc

    events = parse_reel(data, source=str(path))
    logger.debug("Loaded %d events from reel '%s'", len(events), path.name)
    return events


def list_reels(directory: str | Path) -> list[str]:
    """Return the names (file stems) of the reels in *directory*."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted({p.stem for p in directory.iterdir() if p.suffix.lower() in REEL_SUFFIXES})


def find_reel(directory: str | Path, name: str) -> Path:
    """Resolve a reel name to its file in *directory*."""
    directory = Path(directory)
    for suffix in REEL_SUFFIXES:
        candidate = directory / f"{name}{suffix}"
        if candidate.is_file():
            return candidate
    raise ReelLoadError(str(directory / name), "no such reel")
