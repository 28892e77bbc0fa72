"""Unit tests for core/playback.py — PlaybackController state machine and timer."""

from __future__ import annotations

import asyncio

import pytest

from core.exceptions import InvalidStateError, OutOfRangeError
from core.models import PlaybackPhase
from core.playback import PlaybackController, PlaybackSnapshot

TICK_MS = 10


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_empty_reel_fails_fast(self):
        with pytest.raises(InvalidStateError, match="empty"):
            PlaybackController([])

    def test_starts_idle_at_first_event(self, sample_reel):
        player = PlaybackController(sample_reel)
        assert player.phase == PlaybackPhase.IDLE
        assert player.current_index == 0
        assert player.current_event.event_id == "evt-000"
        assert not player.has_active_timer

    def test_reel_order_is_kept(self, sample_reel):
        reversed_reel = list(reversed(sample_reel))
        player = PlaybackController(reversed_reel)
        assert [e.event_id for e in player.events] == ["evt-002", "evt-001", "evt-000"]

    def test_reel_is_copied(self, sample_reel):
        player = PlaybackController(sample_reel)
        sample_reel.clear()
        assert player.length == 3

    def test_accepts_iterators(self, sample_reel):
        player = PlaybackController(iter(sample_reel))
        assert player.length == 3


class TestSnapshot:
    def test_state_snapshot(self, sample_reel):
        player = PlaybackController(sample_reel)
        snap = player.seek(1)
        assert isinstance(snap, PlaybackSnapshot)
        assert snap.current_index == 1
        assert snap.phase == PlaybackPhase.PAUSED
        assert snap.length == 3
        assert snap.current_event.event_type == "file_open"
        assert snap.position == 2
        assert snap.progress == pytest.approx(2 / 3)

    def test_snapshot_is_immutable(self, sample_reel):
        snap = PlaybackController(sample_reel).state
        with pytest.raises(AttributeError):
            snap.current_index = 2  # type: ignore[misc]

    def test_snapshot_does_not_follow_later_changes(self, sample_reel):
        player = PlaybackController(sample_reel)
        snap = player.state
        player.seek(2)
        assert snap.current_index == 0
        assert snap.phase == PlaybackPhase.IDLE


# ---------------------------------------------------------------------------
# Seek and step
# ---------------------------------------------------------------------------


class TestSeek:
    def test_seek_middle_pauses(self, sample_reel):
        player = PlaybackController(sample_reel)
        snap = player.seek(1)
        assert snap.current_index == 1
        assert snap.phase == PlaybackPhase.PAUSED

    def test_seek_last_is_at_end(self, sample_reel):
        player = PlaybackController(sample_reel)
        assert player.seek(2).phase == PlaybackPhase.AT_END

    def test_seek_first_from_end(self, sample_reel):
        player = PlaybackController(sample_reel)
        player.seek(2)
        snap = player.seek(0)
        assert snap.current_index == 0
        assert snap.phase == PlaybackPhase.PAUSED

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_out_of_range(self, sample_reel, index):
        player = PlaybackController(sample_reel)
        player.seek(1)
        with pytest.raises(OutOfRangeError) as exc_info:
            player.seek(index)
        assert exc_info.value.index == index
        assert exc_info.value.length == 3
        # failed seek changes nothing
        assert player.current_index == 1
        assert player.phase == PlaybackPhase.PAUSED

    @pytest.mark.parametrize("index", [0, 1, 2])
    def test_seek_is_idempotent(self, sample_reel, index):
        once = PlaybackController(sample_reel)
        twice = PlaybackController(sample_reel)
        once.seek(index)
        twice.seek(index)
        twice.seek(index)
        assert once.state == twice.state

    def test_first_and_last(self, sample_reel):
        player = PlaybackController(sample_reel)
        assert player.last().current_index == 2
        assert player.first().current_index == 0


class TestStep:
    def test_step_forward_to_end(self, reel_factory):
        player = PlaybackController(reel_factory(5))
        for expected in range(1, 5):
            snap = player.step_forward()
            assert snap.current_index == expected
        assert snap.phase == PlaybackPhase.AT_END

    def test_step_forward_at_end_is_noop(self, sample_reel):
        player = PlaybackController(sample_reel)
        player.step_forward()
        before = player.step_forward()
        assert before.phase == PlaybackPhase.AT_END
        assert player.step_forward() == before

    def test_step_forward_on_single_event_reel(self, reel_factory):
        player = PlaybackController(reel_factory(1))
        snap = player.step_forward()
        assert snap.current_index == 0
        assert snap.phase == PlaybackPhase.AT_END

    def test_step_backward_at_start_is_noop(self, sample_reel):
        player = PlaybackController(sample_reel)
        snap = player.step_backward()
        assert snap.current_index == 0
        assert snap.phase == PlaybackPhase.IDLE

    def test_step_backward_leaves_at_end(self, sample_reel):
        player = PlaybackController(sample_reel)
        player.last()
        snap = player.step_backward()
        assert snap.current_index == 1
        assert snap.phase == PlaybackPhase.PAUSED


class TestListener:
    def test_listener_sees_each_change(self, sample_reel):
        seen: list[int] = []
        player = PlaybackController(sample_reel, on_change=lambda s: seen.append(s.current_index))
        player.step_forward()
        player.step_forward()
        player.step_forward()  # no-op, no notification
        player.step_backward()
        assert seen == [1, 2, 1]

    def test_set_listener_replaces_callback(self, sample_reel):
        seen: list[int] = []
        player = PlaybackController(sample_reel)
        player.set_listener(lambda s: seen.append(s.current_index))
        player.seek(2)
        player.set_listener(None)
        player.seek(0)
        assert seen == [2]


# ---------------------------------------------------------------------------
# Auto-advance
# ---------------------------------------------------------------------------


class TestPlay:
    @pytest.mark.asyncio
    async def test_play_returns_immediately(self, sample_reel):
        player = PlaybackController(sample_reel)
        snap = player.play(TICK_MS)
        assert snap.phase == PlaybackPhase.PLAYING
        assert snap.current_index == 0
        assert player.has_active_timer
        await player.aclose()

    @pytest.mark.asyncio
    async def test_three_event_reel_plays_to_end(self, sample_reel):
        player = PlaybackController(sample_reel)
        player.play(15)
        await asyncio.sleep(0.2)
        assert player.phase == PlaybackPhase.AT_END
        assert player.current_index == 2
        assert not player.has_active_timer

    @pytest.mark.asyncio
    async def test_ticks_advance_in_order(self, reel_factory):
        seen: list[int] = []
        player = PlaybackController(reel_factory(6), on_change=lambda s: seen.append(s.current_index))
        player.play(TICK_MS)
        final = await asyncio.wait_for(player.wait(), timeout=2)
        assert seen == [0, 1, 2, 3, 4, 5]
        assert final.phase == PlaybackPhase.AT_END

    @pytest.mark.asyncio
    async def test_auto_advance_never_restarts_itself(self, sample_reel):
        player = PlaybackController(sample_reel)
        player.play(TICK_MS)
        await asyncio.wait_for(player.wait(), timeout=2)
        await asyncio.sleep(0.05)
        assert player.phase == PlaybackPhase.AT_END
        assert not player.has_active_timer

    @pytest.mark.asyncio
    async def test_double_play_rejected(self, reel_factory):
        player = PlaybackController(reel_factory(50))
        player.play(TICK_MS)
        timer = player._timer
        with pytest.raises(InvalidStateError, match="already running"):
            player.play(TICK_MS)
        assert player._timer is timer
        assert player.phase == PlaybackPhase.PLAYING
        await player.aclose()

    @pytest.mark.asyncio
    async def test_double_play_does_not_speed_up(self, reel_factory):
        player = PlaybackController(reel_factory(50))
        player.play(40)
        with pytest.raises(InvalidStateError):
            player.play(40)
        await asyncio.sleep(0.1)
        # one timer at 40ms reaches index 2 in 100ms; two would be near 4
        assert player.current_index <= 3
        await player.aclose()

    @pytest.mark.parametrize("interval", [0, -5])
    @pytest.mark.asyncio
    async def test_non_positive_interval_rejected(self, sample_reel, interval):
        player = PlaybackController(sample_reel)
        with pytest.raises(InvalidStateError, match="positive"):
            player.play(interval)
        assert player.phase == PlaybackPhase.IDLE
        assert not player.has_active_timer

    def test_play_requires_running_loop(self, sample_reel):
        player = PlaybackController(sample_reel)
        with pytest.raises(RuntimeError):
            player.play(TICK_MS)
        assert player.phase == PlaybackPhase.IDLE

    @pytest.mark.asyncio
    async def test_play_from_end_settles_at_end(self, sample_reel):
        player = PlaybackController(sample_reel)
        player.last()
        assert player.play(TICK_MS).phase == PlaybackPhase.PLAYING
        final = await asyncio.wait_for(player.wait(), timeout=1)
        assert final.phase == PlaybackPhase.AT_END
        assert final.current_index == 2

    @pytest.mark.asyncio
    async def test_resume_after_pause(self, reel_factory):
        player = PlaybackController(reel_factory(4))
        player.seek(1)
        player.play(TICK_MS)
        final = await asyncio.wait_for(player.wait(), timeout=1)
        assert final.current_index == 3
        assert final.phase == PlaybackPhase.AT_END


class TestPause:
    def test_pause_when_not_playing_rejected(self, sample_reel):
        player = PlaybackController(sample_reel)
        with pytest.raises(InvalidStateError):
            player.pause()
        assert player.phase == PlaybackPhase.IDLE

    @pytest.mark.asyncio
    async def test_pause_stops_advancing(self, reel_factory):
        player = PlaybackController(reel_factory(50))
        player.play(TICK_MS)
        await asyncio.sleep(0.035)
        snap = player.pause()
        assert snap.phase == PlaybackPhase.PAUSED
        assert not player.has_active_timer
        frozen = player.current_index
        await asyncio.sleep(0.1)
        assert player.current_index == frozen
        assert player.phase == PlaybackPhase.PAUSED

    @pytest.mark.asyncio
    async def test_pause_before_first_tick(self, reel_factory):
        player = PlaybackController(reel_factory(5))
        player.play(TICK_MS)
        player.pause()
        await asyncio.sleep(0.05)
        assert player.current_index == 0

    @pytest.mark.asyncio
    async def test_seek_while_playing_cancels_timer(self, reel_factory):
        player = PlaybackController(reel_factory(50))
        player.play(TICK_MS)
        await asyncio.sleep(0.025)
        snap = player.seek(10)
        assert snap.phase == PlaybackPhase.PAUSED
        assert not player.has_active_timer
        await asyncio.sleep(0.05)
        assert player.current_index == 10

    @pytest.mark.asyncio
    async def test_step_while_playing_cancels_timer(self, reel_factory):
        player = PlaybackController(reel_factory(50))
        player.play(TICK_MS)
        snap = player.step_forward()
        assert snap.current_index == 1
        assert snap.phase == PlaybackPhase.PAUSED
        await asyncio.sleep(0.05)
        assert player.current_index == 1

    @pytest.mark.asyncio
    async def test_wait_returns_when_paused(self, reel_factory):
        player = PlaybackController(reel_factory(50))
        player.play(TICK_MS)
        waiter = asyncio.create_task(player.wait())
        await asyncio.sleep(0.02)
        player.pause()
        snap = await asyncio.wait_for(waiter, timeout=1)
        assert snap.phase == PlaybackPhase.PAUSED

    @pytest.mark.asyncio
    async def test_wait_without_timer(self, sample_reel):
        player = PlaybackController(sample_reel)
        snap = await player.wait()
        assert snap.phase == PlaybackPhase.IDLE


class TestListenerErrors:
    @pytest.mark.asyncio
    async def test_listener_error_stops_timer(self, reel_factory):
        def explode(snapshot: PlaybackSnapshot) -> None:
            if snapshot.current_index == 2:
                raise RuntimeError("render failed")

        player = PlaybackController(reel_factory(10))
        player.play(TICK_MS)
        player.set_listener(explode)
        with pytest.raises(RuntimeError, match="render failed"):
            await asyncio.wait_for(player.wait(), timeout=1)
        assert player.current_index == 2
        assert player.phase == PlaybackPhase.PAUSED
        assert not player.has_active_timer

    @pytest.mark.asyncio
    async def test_listener_error_logged_without_waiter(self, reel_factory, caplog):
        def explode(snapshot: PlaybackSnapshot) -> None:
            raise RuntimeError("render failed")

        player = PlaybackController(reel_factory(10))
        player.play(TICK_MS)
        player.set_listener(explode)
        with caplog.at_level("ERROR", logger="core.playback"):
            for _ in range(100):
                await asyncio.sleep(0.01)
                if any("Replay tick failed" in r.getMessage() for r in caplog.records):
                    break
        failures = [r for r in caplog.records if "Replay tick failed" in r.getMessage()]
        assert len(failures) == 1
        assert failures[0].exc_info[0] is RuntimeError
        assert player.phase == PlaybackPhase.PAUSED


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_close_while_playing(self, reel_factory):
        player = PlaybackController(reel_factory(50))
        player.play(TICK_MS)
        player.close()
        assert not player.has_active_timer
        assert player.phase == PlaybackPhase.PAUSED
        await asyncio.sleep(0.05)
        assert player.current_index == 0

    @pytest.mark.asyncio
    async def test_play_after_close_rejected(self, sample_reel):
        player = PlaybackController(sample_reel)
        player.close()
        with pytest.raises(InvalidStateError):
            player.play(TICK_MS)

    def test_close_is_idempotent(self, sample_reel):
        player = PlaybackController(sample_reel)
        player.close()
        player.close()
        assert player.phase == PlaybackPhase.IDLE

    @pytest.mark.asyncio
    async def test_async_context_cancels_on_exit(self, reel_factory):
        async with PlaybackController(reel_factory(50)) as player:
            player.play(TICK_MS)
            timer = player._timer
        assert timer.done()
        assert not player.has_active_timer

    @pytest.mark.asyncio
    async def test_async_context_cancels_on_error(self, reel_factory):
        with pytest.raises(ValueError):
            async with PlaybackController(reel_factory(50)) as player:
                player.play(TICK_MS)
                timer = player._timer
                raise ValueError("boom")
        assert timer.cancelled()
        assert player.phase == PlaybackPhase.PAUSED

    @pytest.mark.asyncio
    async def test_sync_context_cancels_on_exit(self, reel_factory):
        with PlaybackController(reel_factory(50)) as player:
            player.play(TICK_MS)
        assert not player.has_active_timer
        index = player.current_index
        await asyncio.sleep(0.05)
        assert player.current_index == index
