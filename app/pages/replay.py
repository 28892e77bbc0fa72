"""Replay stored runtime events for analysis."""

from __future__ import annotations

import streamlit as st

from app.components.event_detail import render_event_detail
from app.state.session import (
    get_player,
    get_provider,
    get_session_settings,
    run_async,
    set_player,
)
from core.exceptions import ConsoleError
from core.models import PlaybackPhase
from core.playback import PlaybackController, PlaybackSnapshot

_POSITION_KEY = "replay_position"


async def _play_through(player: PlaybackController, interval_ms: int) -> PlaybackSnapshot:
    player.play(interval_ms)
    return await player.wait()


def _open_player(reel_name: str) -> PlaybackController | None:
    player = get_player(reel_name)
    if player is not None:
        return player
    try:
        reel = run_async(get_provider().get_replay_reel(reel_name))
        player = PlaybackController(reel)
    except ConsoleError as exc:
        st.error(str(exc))
        return None
    set_player(reel_name, player)
    return player


def render() -> None:
    st.header("Replay")
    st.caption("Replay stored events for analysis")

    settings = get_session_settings()
    provider = get_provider()
    reels = run_async(provider.list_reels())
    if not reels:
        st.info(f"No replay reels found in `{settings.replay_reel_dir}`.")
        return

    default = reels.index(settings.replay_reel) if settings.replay_reel in reels else 0
    reel_name = st.selectbox("Reel", reels, index=default)
    player = _open_player(reel_name)
    if player is None:
        return

    interval_ms = st.number_input(
        "Interval (ms)", min_value=100, max_value=10_000, value=settings.replay_interval_ms, step=100
    )

    first, prev, play, pause, nxt, last = st.columns(6)
    try:
        if first.button("First", use_container_width=True):
            player.first()
        if prev.button("Prev", use_container_width=True):
            player.step_backward()
        if nxt.button("Next", use_container_width=True):
            player.step_forward()
        if last.button("Last", use_container_width=True):
            player.last()
        if pause.button("Pause", use_container_width=True) and player.phase is PlaybackPhase.PLAYING:
            player.pause()
        play_clicked = play.button("Play", type="primary", use_container_width=True)
    except ConsoleError as exc:
        st.warning(str(exc))
        play_clicked = False

    if player.length > 1:
        # Widget state follows the player so button clicks move the slider too.
        st.session_state[_POSITION_KEY] = player.current_index + 1
        st.slider(
            "Position",
            1,
            player.length,
            key=_POSITION_KEY,
            on_change=lambda: player.seek(st.session_state[_POSITION_KEY] - 1),
        )

    placeholder = st.empty()

    def show(snapshot: PlaybackSnapshot) -> None:
        with placeholder.container():
            render_event_detail(snapshot)

    show(player.state)

    if play_clicked:
        player.set_listener(show)
        try:
            run_async(_play_through(player, int(interval_ms)))
        except ConsoleError as exc:
            st.warning(str(exc))
        finally:
            player.set_listener(None)
