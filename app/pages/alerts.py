"""Alert list with a severity filter."""

import streamlit as st

from app.components.incident_timeline import SEVERITY_BADGES, relative_time
from app.state.session import get_provider, run_async, set_active_incident
from core.exceptions import ConsoleError
from core.models import Severity

_ALL = "All"


def render() -> None:
    st.header("Alerts")
    st.caption("Runtime threat detections")

    choice = st.radio(
        "Severity",
        [_ALL] + [s.value for s in Severity],
        horizontal=True,
    )
    severity = None if choice == _ALL else Severity(choice)

    try:
        alerts = run_async(get_provider().list_alerts(severity))
    except ConsoleError as exc:
        st.error(str(exc))
        return

    if not alerts:
        st.info("No alerts detected.")
        return

    for alert in alerts:
        with st.container(border=True):
            left, right = st.columns([4, 1])
            with left:
                st.markdown(
                    f"{SEVERITY_BADGES[alert.severity]} **{alert.severity.value.upper()}** · {alert.rule_name}"
                )
                if alert.description:
                    st.caption(alert.description)
                if alert.response:
                    st.write(f"Response: `{alert.response}`")
            with right:
                st.caption(f"{alert.timestamp:%Y-%m-%d %H:%M:%S}\n\n{relative_time(alert.timestamp)}")
                if alert.incident_id and st.button(alert.incident_id, key=f"alert-{alert.id}"):
                    set_active_incident(alert.incident_id)
                    st.success("Selected. Open **Incident Detail** to see its timeline.")
