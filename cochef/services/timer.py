import logging
import threading
import time
from typing import Callable, Optional

from cochef.models.schemas import TimerStatus

logger = logging.getLogger(__name__)


class TimerService:
    """Cooking timer state for one chat session.

    The UI polls ``status`` and counts down; setting a new timer replaces the
    running one.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self.timer_duration = 0
        self.show_timer = False
        self._started_at: Optional[float] = None

    def set_timer(self, duration: int) -> None:
        if duration < 0:
            raise ValueError(f"Timer duration must be >= 0 seconds, got {duration}")
        with self._lock:
            self.timer_duration = int(duration)
            self.show_timer = True
            self._started_at = self._clock()
        logger.info(f"⏲️ Timer set for {duration} seconds")

    def hide_timer(self) -> None:
        with self._lock:
            self.show_timer = False
            self.timer_duration = 0
            self._started_at = None
        logger.info("Timer hidden")

    def status(self) -> TimerStatus:
        with self._lock:
            remaining = 0
            if self.show_timer and self._started_at is not None:
                elapsed = self._clock() - self._started_at
                remaining = max(0, int(round(self.timer_duration - elapsed)))
            return TimerStatus(
                duration=self.timer_duration,
                show_timer=self.show_timer,
                remaining_seconds=remaining,
            )
