"""Abstract base class for the console's data providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from core.models import Detection, Incident, IncidentStatus, ReplayEvent, Severity


class IncidentDataProvider(ABC):
    """Interface for the backend that serves incidents, timelines and replay reels."""

    @abstractmethod
    async def list_incidents(self) -> list[Incident]:
        ...

    @abstractmethod
    async def get_incident(self, incident_id: str) -> Incident:
        ...

    @abstractmethod
    async def update_incident_status(self, incident_id: str, status: IncidentStatus) -> Incident:
        ...

    @abstractmethod
    async def get_incident_timeline(self, incident_id: str) -> list[dict[str, Any]]:
        """Return the raw ``type``-tagged timeline records, in no particular order."""
        ...

    @abstractmethod
    async def list_alerts(self, severity: Severity | None = None) -> list[Detection]:
        """Return recent alerts, newest first, optionally of one severity only."""
        ...

    @abstractmethod
    async def list_reels(self) -> list[str]:
        ...

    @abstractmethod
    async def get_replay_reel(self, name: str) -> list[ReplayEvent]:
        """Return a reel in its authoritative order."""
        ...
