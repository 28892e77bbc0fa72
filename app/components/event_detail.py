"""Detail card for the replay event under the playhead."""

from __future__ import annotations

import streamlit as st

from core.playback import PlaybackSnapshot

EVENT_TYPE_BADGES: dict[str, str] = {
    "network_connect": "🔴",
    "file_open": "🟠",
}


def render_event_detail(snapshot: PlaybackSnapshot) -> None:
    """Render progress plus process/container/network details of the current event."""
    event = snapshot.current_event

    st.progress(snapshot.progress, text=f"Event {snapshot.position} of {snapshot.length} · {snapshot.phase.value}")
    st.markdown(f"{EVENT_TYPE_BADGES.get(event.event_type, '🟡')} **{event.event_type.upper()}** `{event.timestamp.isoformat()}`")

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Process**")
        st.write(f"exe: `{event.process.exe}`")
        st.write(f"cmdline: `{event.process.cmdline}`")
        st.write(f"pid: `{event.process.pid}`")
    with col2:
        st.markdown("**Container**")
        st.write(f"pod: `{event.container.pod}`")
        st.write(f"namespace: `{event.container.namespace}`")
        st.write(f"image: `{event.container.image}`")

    if event.network:
        st.markdown("**Network Connection**")
        st.write(f"destination: `{event.network.destination}` · proto: `{event.network.proto}`")

    with st.expander("Raw Event"):
        st.json(event.model_dump(mode="json", exclude_none=True))
