"""Mock console API — implements IncidentDataProvider with scenario fixtures."""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any

from app.config import Settings
from core.exceptions import IntegrationError, ReelLoadError
from core.models import Detection, Incident, IncidentStatus, ReplayEvent, Severity
from core.reels import find_reel, list_reels, load_reel
from core.timeline import collect_alerts
from integrations.base import IncidentDataProvider
from integrations.mock.base import MockBase


class MockConsoleAPI(IncidentDataProvider, MockBase):
    provider_key = "console"

    def __init__(self, settings: Settings) -> None:
        MockBase.__init__(self, settings)
        self._status_updates: dict[str, tuple[IncidentStatus, datetime]] = {}

    def _incident_data(self, incident_id: str) -> dict[str, Any]:
        for data in self._get("incidents", []):
            if data["id"] == incident_id:
                return data
        raise IntegrationError(self.provider_key, f"Incident '{incident_id}' not found")

    def _build_incident(self, data: dict[str, Any]) -> Incident:
        incident = Incident.model_validate(data)
        update = self._status_updates.get(incident.id)
        if update:
            status, updated_at = update
            incident = incident.model_copy(update={"status": status, "updated_at": updated_at})
        return incident

    async def list_incidents(self) -> list[Incident]:
        await self._simulate_delay()
        return [self._build_incident(data) for data in self._get("incidents", [])]

    async def get_incident(self, incident_id: str) -> Incident:
        await self._simulate_delay()
        return self._build_incident(self._incident_data(incident_id))

    async def update_incident_status(self, incident_id: str, status: IncidentStatus) -> Incident:
        await self._simulate_delay()
        data = self._incident_data(incident_id)
        self._status_updates[incident_id] = (IncidentStatus(status), datetime.now(timezone.utc))
        return self._build_incident(data)

    async def get_incident_timeline(self, incident_id: str) -> list[dict[str, Any]]:
        await self._simulate_delay()
        self._incident_data(incident_id)
        timelines = self._get("timelines", {})
        # Callers get their own copy; fixture data stays pristine across calls.
        return copy.deepcopy(timelines.get(incident_id, []))

    async def list_alerts(self, severity: Severity | None = None) -> list[Detection]:
        await self._simulate_delay()
        records = []
        for incident_id, timeline in self._get("timelines", {}).items():
            for record in timeline:
                if record.get("type") == "alert":
                    records.append({"incident_id": incident_id, **record})
        return collect_alerts(records, severity).entries

    async def list_reels(self) -> list[str]:
        return list_reels(self._settings.replay_reel_dir)

    async def get_replay_reel(self, name: str) -> list[ReplayEvent]:
        await self._simulate_delay()
        try:
            return load_reel(find_reel(self._settings.replay_reel_dir, name))
        except ReelLoadError as exc:
            raise IntegrationError(self.provider_key, str(exc)) from exc
