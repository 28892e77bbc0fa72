"""Playback controller for stepping and auto-advancing through a replay reel."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from core.exceptions import InvalidStateError, OutOfRangeError
from core.models import PlaybackPhase, ReplayEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackSnapshot:
    """Read-only view of a controller after an operation."""

    current_index: int
    phase: PlaybackPhase
    length: int
    current_event: ReplayEvent

    @property
    def position(self) -> int:
        """1-based position, as shown to users ("Event 2 of 3")."""
        return self.current_index + 1

    @property
    def progress(self) -> float:
        return self.position / self.length


ChangeListener = Callable[[PlaybackSnapshot], None]


class PlaybackController:
    """Single-owner state machine over a fixed reel of replay events.

    Phases: idle → playing ⇄ paused, with at_end reached by stepping or
    auto-advancing onto the last event. While playing, one asyncio task
    owned by the controller advances the index every interval; ``pause``,
    ``seek``, the step operations and ``close`` cancel it synchronously.

    Usage:
        async with PlaybackController(reel) as player:
            player.play(1500)
            await player.wait()
    """

    def __init__(self, reel: Iterable[ReplayEvent], *, on_change: ChangeListener | None = None) -> None:
        events = tuple(reel)
        if not events:
            raise InvalidStateError("start playback", PlaybackPhase.IDLE.value, "the reel is empty")
        self._events = events
        self._index = 0
        self._phase = PlaybackPhase.IDLE
        self._timer: asyncio.Task | None = None
        self._on_change = on_change
        self._closed = False

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def events(self) -> tuple[ReplayEvent, ...]:
        return self._events

    @property
    def length(self) -> int:
        return len(self._events)

    @property
    def last_index(self) -> int:
        return len(self._events) - 1

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def phase(self) -> PlaybackPhase:
        return self._phase

    @property
    def current_event(self) -> ReplayEvent:
        return self._events[self._index]

    @property
    def has_active_timer(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def state(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(
            current_index=self._index,
            phase=self._phase,
            length=len(self._events),
            current_event=self._events[self._index],
        )

    def set_listener(self, listener: ChangeListener | None) -> None:
        """Replace the callback invoked with a snapshot after every change."""
        self._on_change = listener

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def seek(self, index: int) -> PlaybackSnapshot:
        """Jump to *index*, stopping any auto-advance.

        Raises:
            OutOfRangeError: if *index* is outside ``[0, length)``. Nothing changes.
        """
        if not 0 <= index < len(self._events):
            raise OutOfRangeError(index, len(self._events))
        self._cancel_timer()
        self._index = index
        self._phase = PlaybackPhase.AT_END if index == self.last_index else PlaybackPhase.PAUSED
        logger.debug("Seek to %d (%s)", index, self._phase.value)
        return self._changed()

    def step_forward(self) -> PlaybackSnapshot:
        """Advance one event. On the last event this settles in at_end."""
        if self._index < self.last_index:
            return self.seek(self._index + 1)
        if self._phase is PlaybackPhase.AT_END:
            return self.state
        self._cancel_timer()
        self._phase = PlaybackPhase.AT_END
        return self._changed()

    def step_backward(self) -> PlaybackSnapshot:
        """Go back one event. A no-op on the first event."""
        if self._index == 0:
            return self.state
        return self.seek(self._index - 1)

    def first(self) -> PlaybackSnapshot:
        return self.seek(0)

    def last(self) -> PlaybackSnapshot:
        return self.seek(self.last_index)

    # ------------------------------------------------------------------
    # Auto-advance
    # ------------------------------------------------------------------

    def play(self, interval_ms: float) -> PlaybackSnapshot:
        """Start advancing one event every *interval_ms* milliseconds.

        Returns as soon as the timer is scheduled. Must be called from a
        running event loop.

        Raises:
            InvalidStateError: if already playing, if the interval is not
                positive, or after ``close``. Nothing changes.
        """
        if self._closed:
            raise InvalidStateError("play", "closed")
        if self._phase is PlaybackPhase.PLAYING:
            raise InvalidStateError("play", self._phase.value, "playback is already running")
        if interval_ms <= 0:
            raise InvalidStateError("play", self._phase.value, f"interval must be positive, got {interval_ms}")
        loop = asyncio.get_running_loop()

        self._cancel_timer()
        self._phase = PlaybackPhase.PLAYING
        self._timer = loop.create_task(self._run(interval_ms / 1000.0))
        self._timer.add_done_callback(self._timer_done)
        logger.debug("Playing from %d every %sms", self._index, interval_ms)
        return self._changed()

    def pause(self) -> PlaybackSnapshot:
        """Stop auto-advance, keeping the current event.

        Raises:
            InvalidStateError: unless currently playing.
        """
        if self._phase is not PlaybackPhase.PLAYING:
            raise InvalidStateError("pause", self._phase.value)
        self._cancel_timer()
        self._phase = PlaybackPhase.PAUSED
        logger.debug("Paused at %d", self._index)
        return self._changed()

    async def wait(self) -> PlaybackSnapshot:
        """Wait until the running timer stops, by reaching the end or being cancelled.

        Re-raises an error raised by the change listener during a tick.
        """
        timer = self._timer
        if timer is not None:
            await asyncio.wait({timer})
            if not timer.cancelled():
                timer.result()
        return self.state

    async def _run(self, interval: float) -> None:
        task = asyncio.current_task()
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        try:
            while True:
                next_tick += interval
                await asyncio.sleep(max(0.0, next_tick - loop.time()))
                if self._timer is not task or self._phase is not PlaybackPhase.PLAYING:
                    return
                self._tick()
                if self._phase is PlaybackPhase.AT_END:
                    return
        finally:
            if self._timer is task:
                self._timer = None
                if self._phase is PlaybackPhase.PLAYING:
                    self._phase = PlaybackPhase.PAUSED

    def _timer_done(self, task: asyncio.Task) -> None:
        # Retrieving the exception here keeps asyncio from reporting it as
        # never retrieved when nobody awaits wait().
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Replay tick failed at index %d", self._index, exc_info=exc)

    def _tick(self) -> None:
        if self._index < self.last_index:
            self._index += 1
        if self._index == self.last_index:
            # The timer task returns right after this tick.
            self._timer = None
            self._phase = PlaybackPhase.AT_END
            logger.debug("Reached end of reel at %d", self._index)
        self._changed()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None and not timer.done():
            timer.cancel()

    def _changed(self) -> PlaybackSnapshot:
        snapshot = self.state
        if self._on_change is not None:
            self._on_change(snapshot)
        return snapshot

    def close(self) -> None:
        """End the session. Cancels the timer; safe to call more than once."""
        timer = self._timer
        self._cancel_timer()
        if self._phase is PlaybackPhase.PLAYING:
            self._phase = PlaybackPhase.PAUSED
        self._closed = True
        if timer is not None:
            logger.debug("Replay session closed with a running timer")

    async def aclose(self) -> None:
        """Close and wait for the cancelled timer task to finish unwinding."""
        timer = self._timer
        self.close()
        if timer is not None:
            await asyncio.wait({timer})

    def __enter__(self) -> PlaybackController:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def __aenter__(self) -> PlaybackController:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
