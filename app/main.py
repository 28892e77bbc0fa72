"""Streamlit entrypoint for the Runtime Guard Console."""

import streamlit as st

from app.config import configure_logging
from app.pages.alerts import render as alerts_page
from app.pages.incident_detail import render as incident_detail_page
from app.pages.incidents import render as incidents_page
from app.pages.replay import render as replay_page
from app.pages.settings import render as settings_page
from app.state.session import get_session_settings, init_session_state

# ---------------------------------------------------------------------------
# Session state initialization
# ---------------------------------------------------------------------------

init_session_state()
settings = get_session_settings()
configure_logging(settings)

# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

pages = st.navigation(
    [
        st.Page(incidents_page, title="Incidents", icon="🚨", url_path="incidents", default=True),
        st.Page(incident_detail_page, title="Incident Detail", icon="🔍", url_path="incident"),
        st.Page(alerts_page, title="Alerts", icon="🔔", url_path="alerts"),
        st.Page(replay_page, title="Replay", icon="⏯️", url_path="replay"),
        st.Page(settings_page, title="Settings", icon="⚙️", url_path="settings"),
    ]
)

# ---------------------------------------------------------------------------
# Sidebar branding (below the built-in page nav)
# ---------------------------------------------------------------------------

with st.sidebar:
    st.title("🛡️ Runtime Guard")
    st.caption(f"Mode: **{settings.console_mode}** | Scenario: **{settings.mock_scenario}**")

# ---------------------------------------------------------------------------
# Run the selected page
# ---------------------------------------------------------------------------

pages.run()
