"""
Countdown clock for timed (real mode) sessions.

The clock never schedules anything itself: the owner calls tick() once per
second, or catch_up() with the current monotonic time on each UI rerun.
Stopping is irreversible, so a stale driver cannot fire a second expiry.
"""
import logging
import time
from typing import Callable, Optional

from engine import LOW_TIME_WARNING_SECONDS, TICK_SECONDS

logger = logging.getLogger(__name__)


def format_time(seconds: int) -> str:
    """Render seconds as MM:SS (minutes are not wrapped at 60)."""
    seconds = max(0, int(seconds))
    m, s = divmod(seconds, 60)
    return f"{m:02d}:{s:02d}"


class SessionClock:
    """Deadline countdown that fires on_expire exactly once at zero."""

    def __init__(
        self,
        duration_minutes: int,
        on_expire: Callable[[], None],
        time_func: Callable[[], float] = time.monotonic,
    ):
        self.duration_seconds = max(0, int(duration_minutes) * 60)
        self.time_left = self.duration_seconds
        self._on_expire = on_expire
        self._time_func = time_func
        self._last_tick_at: Optional[float] = None
        self.running = False
        self.stopped = False
        self.expired = False

    def start(self) -> None:
        if self.running or self.stopped:
            return
        self.time_left = self.duration_seconds
        self._last_tick_at = self._time_func()
        self.running = True
        logger.info(f"Clock started: {format_time(self.time_left)}")
        if self.time_left <= 0:
            self._expire()

    def tick(self) -> int:
        """Advance one second. No-op unless running."""
        if not self.running:
            return self.time_left
        self.time_left -= TICK_SECONDS
        if self.time_left <= 0:
            self.time_left = 0
            self._expire()
        return self.time_left

    def catch_up(self, now: Optional[float] = None) -> int:
        """Apply one tick per whole second elapsed since the last tick."""
        if not self.running:
            return self.time_left
        now = self._time_func() if now is None else now
        while self.running and now - self._last_tick_at >= TICK_SECONDS:
            self._last_tick_at += TICK_SECONDS
            self.tick()
        return self.time_left

    def stop(self) -> None:
        if self.running:
            logger.debug(f"Clock stopped with {self.time_left}s left")
        self.running = False
        self.stopped = True

    def _expire(self) -> None:
        self.stop()
        if self.expired:
            return
        self.expired = True
        logger.info("Clock reached zero, forcing submission")
        self._on_expire()

    @property
    def is_running_low(self) -> bool:
        return self.running and self.time_left < LOW_TIME_WARNING_SECONDS

    @property
    def display(self) -> str:
        return format_time(self.time_left)
