"""Streamlit session state management."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import streamlit as st

from app.config import Settings, get_settings
from core.playback import PlaybackController
from integrations.base import IncidentDataProvider
from integrations.registry import IntegrationRegistry

T = TypeVar("T")

# Keys used in st.session_state
_SETTINGS_KEY = "app_settings"
_REGISTRY_KEY = "integration_registry"
_ACTIVE_INCIDENT_KEY = "active_incident_id"
_PLAYER_KEY = "replay_player"
_PLAYER_REEL_KEY = "replay_player_reel"


def init_session_state() -> None:
    """Initialize all session state keys with defaults if not already set."""
    if _SETTINGS_KEY not in st.session_state:
        st.session_state[_SETTINGS_KEY] = get_settings()
    if _REGISTRY_KEY not in st.session_state:
        st.session_state[_REGISTRY_KEY] = IntegrationRegistry(st.session_state[_SETTINGS_KEY])
    if _ACTIVE_INCIDENT_KEY not in st.session_state:
        st.session_state[_ACTIVE_INCIDENT_KEY] = None


def get_session_settings() -> Settings:
    """Return the current Settings from session state."""
    return st.session_state[_SETTINGS_KEY]


def set_session_settings(settings: Settings) -> None:
    """Replace the settings and rebuild everything derived from them."""
    st.session_state[_SETTINGS_KEY] = settings
    st.session_state[_REGISTRY_KEY] = IntegrationRegistry(settings)
    clear_player()


def get_provider() -> IncidentDataProvider:
    """Return the incident data provider for the current settings."""
    return st.session_state[_REGISTRY_KEY].get_provider("incidents")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a provider coroutine to completion from a Streamlit script."""
    return asyncio.run(coro)


def set_active_incident(incident_id: str | None) -> None:
    """Set the currently focused incident."""
    st.session_state[_ACTIVE_INCIDENT_KEY] = incident_id


def get_active_incident_id() -> str | None:
    """Return the ID of the currently focused incident, if any."""
    return st.session_state[_ACTIVE_INCIDENT_KEY]


def get_player(reel_name: str) -> PlaybackController | None:
    """Return the replay session for *reel_name*, if one is open."""
    if st.session_state.get(_PLAYER_REEL_KEY) != reel_name:
        return None
    return st.session_state.get(_PLAYER_KEY)


def set_player(reel_name: str, player: PlaybackController) -> None:
    """Start a new replay session, ending any previous one."""
    clear_player()
    st.session_state[_PLAYER_KEY] = player
    st.session_state[_PLAYER_REEL_KEY] = reel_name


def clear_player() -> None:
    """End the current replay session, cancelling its timer."""
    player = st.session_state.pop(_PLAYER_KEY, None)
    st.session_state.pop(_PLAYER_REEL_KEY, None)
    if player is not None:
        player.close()
