"""Settings page — toggle mock/live mode, select scenario, tune replay."""

import streamlit as st

from app.state.session import get_session_settings, set_session_settings


def render() -> None:
    st.header("Settings")

    settings = get_session_settings()

    # ------------------------------------------------------------------
    # Global mode
    # ------------------------------------------------------------------
    st.subheader("Global Mode")
    mode = st.radio(
        "Console mode",
        options=["mock", "live"],
        index=0 if settings.console_mode == "mock" else 1,
        horizontal=True,
        help="In mock mode, incidents and timelines come from bundled scenarios.",
    )

    api_base_url = st.text_input("API base URL", value=settings.api_base_url, disabled=(mode == "mock"))

    # ------------------------------------------------------------------
    # Mock scenario selector
    # ------------------------------------------------------------------
    st.subheader("Mock Scenario")
    scenarios = settings.available_scenarios
    scenario = st.selectbox(
        "Active scenario",
        options=scenarios,
        index=scenarios.index(settings.mock_scenario) if settings.mock_scenario in scenarios else 0,
        disabled=(mode != "mock"),
    )

    mock_delay = st.checkbox(
        "Simulate API latency",
        value=settings.mock_delay_enabled,
        disabled=(mode != "mock"),
    )

    # ------------------------------------------------------------------
    # Replay
    # ------------------------------------------------------------------
    st.subheader("Replay")
    interval = st.number_input(
        "Default interval (ms)", min_value=100, max_value=10_000, value=settings.replay_interval_ms, step=100
    )

    effective = settings.get_integration_mode("api")
    icon = "🟡" if effective == "mock" else "🟢"
    st.write(f"{icon} **Console API** — {effective}")

    # ------------------------------------------------------------------
    # Apply
    # ------------------------------------------------------------------
    st.divider()
    if st.button("Apply settings", type="primary"):
        updated = settings.model_copy(
            update={
                "console_mode": mode,
                "api_base_url": api_base_url,
                "mock_scenario": scenario,
                "mock_delay_enabled": mock_delay,
                "replay_interval_ms": int(interval),
            }
        )
        set_session_settings(updated)
        st.success("Settings applied.")
        st.rerun()
