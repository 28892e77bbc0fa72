"""Single incident deep-dive view with its merged timeline."""

import streamlit as st

from app.components.incident_timeline import render_timeline
from app.state.session import get_active_incident_id, get_provider, run_async
from core.exceptions import ConsoleError
from core.models import IncidentStatus
from core.timeline import merge_incident_timeline


def render() -> None:
    st.header("Incident Detail")

    provider = get_provider()
    try:
        incidents = run_async(provider.list_incidents())
    except ConsoleError as exc:
        st.error(str(exc))
        return

    if not incidents:
        st.info("No incidents to display.")
        return

    incident_ids = [i.id for i in incidents]
    active_id = get_active_incident_id()
    idx = incident_ids.index(active_id) if active_id in incident_ids else 0

    selected_id = st.selectbox("Incident", incident_ids, index=idx)
    incident = next(i for i in incidents if i.id == selected_id)

    # Header
    st.subheader(incident.title)
    col1, col2, col3 = st.columns(3)
    col1.metric("Status", incident.status.value)
    col2.metric("Severity", incident.severity.value)
    col3.metric("Alerts", len(incident.alert_ids))

    statuses = [s.value for s in IncidentStatus]
    new_status = st.selectbox("Update status", statuses, index=statuses.index(incident.status.value))
    if new_status != incident.status.value:
        try:
            run_async(provider.update_incident_status(incident.id, IncidentStatus(new_status)))
        except ConsoleError as exc:
            st.error(str(exc))
        else:
            st.rerun()

    # Timeline
    st.divider()
    st.subheader("Timeline")
    try:
        records = run_async(provider.get_incident_timeline(incident.id))
    except ConsoleError as exc:
        st.error(str(exc))
        return

    result = merge_incident_timeline(records)
    render_timeline(result.entries, result.rejected)
