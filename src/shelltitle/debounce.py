"""Coalesce bursts of terminal activity into a single deferred recheck."""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

from shelltitle.config import DEFAULT_DEBOUNCE_DELAY, DEFAULT_SETTLE_DELAY

logger = logging.getLogger(__name__)


class DebounceState(Enum):
    """States of the activity debouncer."""

    IDLE = "idle"
    WAITING = "waiting"  # debounce window running
    SETTLING = "settling"  # window elapsed, waiting out the settle delay


class ActivityDebouncer:
    """
    Trailing-edge debouncer followed by a fixed settle delay.

    Every ``signal()`` restarts the debounce window. Once the window elapses
    without activity the debouncer waits ``settle_delay`` more seconds and
    then calls the recheck action once. Activity seen while settling is not
    dropped: it opens a new debounce window after the pending recheck runs,
    so at most one recheck is ever pending.

    Timers run on the asyncio event loop that is current when the first
    signal arrives, unless a loop is given explicitly.
    """

    def __init__(
        self,
        action: Callable[[], None],
        debounce_delay: float = DEFAULT_DEBOUNCE_DELAY,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """
        Initialize the ActivityDebouncer.

        Args:
            action: Called once per quiet period that follows activity.
            debounce_delay: Quiet period in seconds. Default 0.15s.
            settle_delay: Extra wait before the action runs. Default 0.05s.
            loop: Event loop for the timers. Default: the running loop.
        """
        self._action = action
        self._debounce_delay = debounce_delay
        self._settle_delay = settle_delay
        self._loop = loop
        self._state = DebounceState.IDLE
        self._timer: asyncio.TimerHandle | None = None
        self._pending = False

    @property
    def state(self) -> DebounceState:
        """Get the current state."""
        return self._state

    @property
    def debounce_delay(self) -> float:
        """Get the debounce window in seconds."""
        return self._debounce_delay

    @property
    def settle_delay(self) -> float:
        """Get the settle delay in seconds."""
        return self._settle_delay

    def signal(self) -> None:
        """Record that activity happened."""
        if self._state is DebounceState.SETTLING:
            self._pending = True
            return
        self._start_window()

    def cancel(self) -> None:
        """Drop any pending timer and go back to idle."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = False
        self._state = DebounceState.IDLE

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _start_window(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._state = DebounceState.WAITING
        self._timer = self._get_loop().call_later(self._debounce_delay, self._on_window_elapsed)

    def _on_window_elapsed(self) -> None:
        self._state = DebounceState.SETTLING
        self._timer = self._get_loop().call_later(self._settle_delay, self._on_settled)

    def _on_settled(self) -> None:
        self._timer = None
        self._state = DebounceState.IDLE
        try:
            self._action()
        except Exception:
            logger.exception("Recheck action failed")
        if self._pending:
            self._pending = False
            self._start_window()
