"""Core data models for the Runtime Guard Console."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class ActionStatus(str, Enum):
    SUCCESS = "success"
    BLOCKED = "blocked"
    FAILED = "failed"


class EntryKind(str, Enum):
    ALERT = "alert"
    ACTION = "action"


class IncidentStatus(str, Enum):
    OPEN = "open"
    INVESTIGATING = "investigating"
    CONTAINED = "contained"
    RESOLVED = "resolved"


class PlaybackPhase(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    AT_END = "at_end"


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so every entry is mutually comparable."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


# ---------------------------------------------------------------------------
# Telemetry sub-shapes
# ---------------------------------------------------------------------------


class ProcessInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    pid: int
    exe: str
    cmdline: str = ""
    ppid: int | None = None
    uid: int | None = None
    cwd: str | None = None
    has_tty: bool = False


class ContainerInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    namespace: str
    pod: str
    image: str
    container_id: str | None = None
    service_account: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)


class NetworkInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    dst_ip: str
    dst_port: int
    proto: str = "tcp"
    dst_domain: str | None = None

    @property
    def destination(self) -> str:
        return f"{self.dst_ip}:{self.dst_port}"


class Observation(BaseModel):
    """Raw telemetry attached to a detection. Carried through, never interpreted."""

    model_config = ConfigDict(frozen=True)

    event_id: str | None = None
    event_type: str | None = None
    process: ProcessInfo | None = None
    container: ContainerInfo | None = None
    network: NetworkInfo | None = None


# ---------------------------------------------------------------------------
# Timeline entries
# ---------------------------------------------------------------------------


class Detection(BaseModel):
    """An alert raised by upstream detection, as shown on an incident timeline."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["alert"] = "alert"
    id: str
    timestamp: UtcDatetime
    rule_name: str
    severity: Severity
    description: str = ""
    observation: Observation | None = Field(
        default=None, validation_alias=AliasChoices("observation", "event")
    )
    incident_id: str | None = None
    response: str | None = None


class ResponseAction(BaseModel):
    """A remediation step taken against a target resource."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["action"] = "action"
    id: str
    timestamp: UtcDatetime
    action_type: str
    target: str
    status: str
    message: str | None = None

    @property
    def status_category(self) -> ActionStatus | None:
        """Known status bucket, or None for statuses outside the vocabulary."""
        try:
            return ActionStatus(self.status)
        except ValueError:
            return None


TimelineEntry = Annotated[Union[Detection, ResponseAction], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Replay
# ---------------------------------------------------------------------------


class ReplayEvent(BaseModel):
    """One raw telemetry record in a replay reel."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    timestamp: UtcDatetime = Field(validation_alias=AliasChoices("timestamp", "ts"))
    event_type: str
    process: ProcessInfo
    container: ContainerInfo
    network: NetworkInfo | None = None
    cluster_id: str | None = None
    node_id: str | None = None


# ---------------------------------------------------------------------------
# Incidents
# ---------------------------------------------------------------------------


class Incident(BaseModel):
    """An investigation grouping of alerts."""

    id: str
    title: str
    status: IncidentStatus = IncidentStatus.OPEN
    severity: Severity = Severity.MEDIUM
    created_at: datetime | None = None
    updated_at: datetime | None = None
    alert_ids: list[str] = Field(default_factory=list)
    triggering_event_id: str | None = None
