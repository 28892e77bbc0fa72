"""Live console API client — implements IncidentDataProvider over HTTP."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import Settings
from core.exceptions import IntegrationError, ReelLoadError
from core.models import Detection, Incident, IncidentStatus, ReplayEvent, Severity
from core.reels import find_reel, list_reels, load_reel
from core.timeline import collect_alerts
from integrations.base import IncidentDataProvider

logger = logging.getLogger(__name__)


class ConsoleAPIClient(IncidentDataProvider):
    """Talks to the incident service's ``/v1`` REST API.

    Replay reels have no endpoint yet and are read from ``replay_reel_dir``.
    """

    provider_key = "console_api"

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.api_base_url.rstrip("/") + "/v1",
            timeout=self._settings.api_timeout_seconds,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        async with self._client() as client:
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise IntegrationError(
                    self.provider_key,
                    f"{method} {path} returned {exc.response.status_code}",
                ) from exc
            except httpx.HTTPError as exc:
                raise IntegrationError(self.provider_key, f"{method} {path} failed: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise IntegrationError(self.provider_key, f"{method} {path} returned invalid JSON") from exc

    def _to_incident(self, data: Any) -> Incident:
        try:
            return Incident.model_validate(data)
        except ValueError as exc:
            raise IntegrationError(self.provider_key, f"Malformed incident: {exc}") from exc

    async def list_incidents(self) -> list[Incident]:
        data = await self._request("GET", "/incidents")
        return [self._to_incident(item) for item in data or []]

    async def get_incident(self, incident_id: str) -> Incident:
        return self._to_incident(await self._request("GET", f"/incidents/{incident_id}"))

    async def update_incident_status(self, incident_id: str, status: IncidentStatus) -> Incident:
        data = await self._request(
            "PATCH", f"/incidents/{incident_id}", json={"status": IncidentStatus(status).value}
        )
        return self._to_incident(data)

    async def get_incident_timeline(self, incident_id: str) -> list[dict[str, Any]]:
        data = await self._request("GET", f"/incidents/{incident_id}/timeline")
        # The service encodes an empty timeline as null.
        if data is None:
            return []
        if not isinstance(data, list):
            raise IntegrationError(self.provider_key, "Timeline payload is not a list")
        return data

    async def list_alerts(self, severity: Severity | None = None) -> list[Detection]:
        params = {"severity": Severity(severity).value} if severity else None
        data = await self._request("GET", "/alerts", params=params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise IntegrationError(self.provider_key, "Alerts payload is not a list")
        # Filtered again locally; older services ignore the severity parameter.
        return collect_alerts(data, severity).entries

    async def list_reels(self) -> list[str]:
        return list_reels(self._settings.replay_reel_dir)

    async def get_replay_reel(self, name: str) -> list[ReplayEvent]:
        try:
            return load_reel(find_reel(self._settings.replay_reel_dir, name))
        except ReelLoadError as exc:
            logger.warning("Replay reel unavailable: %s", exc)
            raise IntegrationError(self.provider_key, str(exc)) from exc
