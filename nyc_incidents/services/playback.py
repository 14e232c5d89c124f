# nyc_incidents/services/playback.py
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from nyc_incidents import config

log = logging.getLogger(__name__)

T = TypeVar("T")


class PlaybackState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETE = "complete"


class PlaybackScheduler(Generic[T]):
    """
    Reveals an already-sorted list one item per tick, as if it were arriving live.

    The displayed list is always a prefix of the source list. Each scheduler
    owns its own timer task; start/pause/reset are the only mutators besides
    the tick itself. Must be started from inside a running event loop.
    """

    def __init__(
        self,
        items: Sequence[T],
        delay_ms: int = config.PLAYBACK_DELAY_MS,
        on_tick: Optional[Callable[[T], None]] = None,
    ) -> None:
        self._items: List[T] = list(items)
        self._delay = delay_ms / 1000.0
        self._on_tick = on_tick
        self._displayed: List[T] = []
        self._position = 0
        self._state = PlaybackState.IDLE
        self._task: Optional[asyncio.Task] = None

    # ---------- read side ----------
    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def position(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return len(self._items)

    @property
    def displayed(self) -> List[T]:
        return list(self._displayed)

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.RUNNING

    # ---------- mutators ----------
    def start(self) -> None:
        if self.is_playing or not self._items or self._position >= len(self._items):
            return
        self._state = PlaybackState.RUNNING
        self._task = asyncio.get_running_loop().create_task(self._run())

    def pause(self) -> None:
        if not self.is_playing:
            return
        self._stop_timer()
        self._state = PlaybackState.PAUSED

    def reset(self) -> None:
        self._stop_timer()
        self._displayed = []
        self._position = 0
        self._state = PlaybackState.IDLE

    def close(self) -> None:
        """Teardown: stop the timer no matter what state we are in."""
        self._stop_timer()
        if self._state is PlaybackState.RUNNING:
            self._state = PlaybackState.PAUSED

    def tick(self) -> None:
        if self._position >= len(self._items):
            self._complete()
            return

        item = self._items[self._position]
        self._displayed.append(item)
        self._position += 1
        if self._on_tick is not None:
            self._on_tick(item)

        if self._position >= len(self._items):
            self._complete()

    async def wait(self) -> None:
        """Block until the current run stops (complete, paused, reset or closed)."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    # ---------- internals ----------
    def _owns_timer(self) -> bool:
        return self._task is not None and self._task is asyncio.current_task()

    async def _run(self) -> None:
        # A reset()+start() from inside on_tick hands the timer to a new task;
        # this loop must then stop rather than tick alongside it.
        try:
            while self._state is PlaybackState.RUNNING and self._owns_timer():
                await asyncio.sleep(self._delay)
                if not self._owns_timer():
                    break
                self.tick()
        finally:
            if self._owns_timer():
                # died without completing (on_tick raised)
                self._task = None
                if self._state is PlaybackState.RUNNING:
                    self._state = PlaybackState.PAUSED

    def _complete(self) -> None:
        self._state = PlaybackState.COMPLETE
        self._stop_timer()
        log.debug("Playback complete: %d/%d", self._position, len(self._items))

    def _stop_timer(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        # tick() runs inside the task itself on the last step; don't cancel ourselves
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()
