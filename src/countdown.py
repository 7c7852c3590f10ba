"""CountdownDriver: cancellable one-second periodic task.

The session runner polls the driver every frame; the driver converts elapsed
wall-clock time into whole-second ticks. It only reports ticks while armed,
and every arm() starts a fresh second.
"""
from __future__ import annotations

from typing import Callable, Optional

from psychopy import core

TICK_INTERVAL = 1.0


class CountdownDriver:
    """Fixed-cadence countdown scheduler.

    Attributes:
        interval: Seconds between ticks
        next_due: Timestamp of the next tick (None while disarmed)
    """

    def __init__(
        self,
        clock: Callable[[], float] = core.getTime,
        interval: float = TICK_INTERVAL,
    ) -> None:
        """Initialize driver (disarmed).

        Args:
            clock: Monotonic time source in seconds (core.getTime by default)
            interval: Tick period in seconds
        """
        self._clock = clock
        self.interval = interval
        self.next_due: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self.next_due is not None

    def arm(self) -> None:
        """(Re)start the cadence; the first tick is due one interval from now."""
        self.next_due = self._clock() + self.interval

    def cancel(self) -> None:
        self.next_due = None

    def take_due(self) -> bool:
        """Consume one due tick if the deadline has passed.

        Returns:
            True if a tick is due (and was consumed), False otherwise
        """
        if self.next_due is None:
            return False
        if self._clock() < self.next_due:
            return False
        self.next_due += self.interval
        return True
