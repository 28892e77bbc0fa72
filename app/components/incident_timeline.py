"""Visual timeline component for merged incident timelines."""

from __future__ import annotations

from datetime import datetime, timezone

import streamlit as st

from core.exceptions import ValidationError
from core.models import ActionStatus, Detection, ResponseAction, Severity, TimelineEntry

SEVERITY_BADGES: dict[Severity, str] = {
    Severity.CRITICAL: "🔴",
    Severity.HIGH: "🟠",
    Severity.MEDIUM: "🟡",
    Severity.LOW: "🔵",
    Severity.INFO: "⚪",
}

STATUS_BADGES: dict[ActionStatus, str] = {
    ActionStatus.SUCCESS: "🟢",
    ActionStatus.BLOCKED: "🟡",
    ActionStatus.FAILED: "🔴",
}

DEFAULT_STATUS_BADGE = "⚫"


def status_badge(action: ResponseAction) -> str:
    """Badge for an action; statuses outside the vocabulary get the default one."""
    category = action.status_category
    return STATUS_BADGES[category] if category else DEFAULT_STATUS_BADGE


def relative_time(timestamp: datetime, now: datetime | None = None) -> str:
    """Short "x ago" label for a timeline entry."""
    now = now or datetime.now(timezone.utc)
    seconds = int((now - timestamp).total_seconds())
    if seconds < 0:
        return "in the future"
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if seconds >= size:
            return f"{seconds // size}{unit} ago"
    return f"{seconds}s ago"


def _render_detection(entry: Detection) -> None:
    st.markdown(f"{SEVERITY_BADGES[entry.severity]} **ALERT** · {entry.rule_name}")
    if entry.description:
        st.caption(entry.description)
    obs = entry.observation
    if obs is None:
        return
    if obs.process:
        st.code(obs.process.cmdline or obs.process.exe, language="bash")
        st.caption(f"PID: {obs.process.pid}")
    if obs.container:
        st.write(f"Container: `{obs.container.namespace}/{obs.container.pod}` ({obs.container.image})")
    if obs.network:
        st.write(f"Network: `{obs.network.destination}`")


def _render_action(entry: ResponseAction) -> None:
    st.markdown(f"{status_badge(entry)} **ACTION** · {entry.action_type}")
    st.write(f"Target: `{entry.target}` — Status: **{entry.status}**")
    if entry.message:
        st.caption(entry.message)


def render_timeline(entries: list[TimelineEntry], rejected: list[ValidationError] | None = None) -> None:
    """Render a merged incident timeline, oldest first."""
    if rejected:
        with st.expander(f"⚠️ {len(rejected)} timeline entries could not be shown"):
            for exc in rejected:
                st.write(f"- `{exc.entry_id}`: {exc.reason}")

    if not entries:
        st.caption("No timeline events yet.")
        return

    for entry in entries:
        with st.container(border=True):
            left, right = st.columns([4, 1])
            with left:
                if isinstance(entry, Detection):
                    _render_detection(entry)
                else:
                    _render_action(entry)
            with right:
                st.caption(f"{entry.timestamp:%H:%M:%S}\n\n{relative_time(entry.timestamp)}")
