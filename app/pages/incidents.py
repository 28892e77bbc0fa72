"""Incident list."""

import streamlit as st

from app.state.session import get_provider, run_async, set_active_incident
from core.exceptions import ConsoleError


def render() -> None:
    st.header("Incidents")

    try:
        incidents = run_async(get_provider().list_incidents())
    except ConsoleError as exc:
        st.error(str(exc))
        return

    if not incidents:
        st.info("No incidents. They appear here once alerts are grouped for investigation.")
        return

    for incident in incidents:
        with st.expander(f"{incident.id} — {incident.title}"):
            st.write(f"**Status:** {incident.status.value}")
            st.write(f"**Severity:** {incident.severity.value}")
            st.write(f"**Alerts:** {len(incident.alert_ids)}")
            if incident.created_at:
                st.write(f"**Created:** {incident.created_at:%Y-%m-%d %H:%M:%S}")
            if st.button("Investigate", key=f"open-{incident.id}"):
                set_active_incident(incident.id)
                st.success("Selected. Open **Incident Detail** to see its timeline.")
