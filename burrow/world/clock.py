"""GameClock — the colony's day/hour/minute calendar.

One simulated second advances the clock by one game minute.  The clock
is advanced first in each simulation tick so that the rest of the update
sees the current time of day.
"""

from __future__ import annotations

from dataclasses import dataclass

DAY_START_HOUR = 6
NIGHT_START_HOUR = 20


@dataclass
class GameClock:
    """Current in-game time.

    Attributes:
        day: Day counter, starting at 1.
        hour: Hour of day (0-23).
        minute: Minute of hour; fractional because ticks carry fractional
            seconds.
    """

    day: int = 1
    hour: int = 8
    minute: float = 0.0

    def advance(self, minutes: float) -> int:
        """Move the clock forward, rolling minutes into hours and days.

        Args:
            minutes: Game minutes to add.

        Returns:
            Number of day boundaries crossed.
        """
        days_rolled = 0
        self.minute += minutes
        while self.minute >= 60:
            self.minute -= 60
            self.hour += 1
            if self.hour >= 24:
                self.hour = 0
                self.day += 1
                days_rolled += 1
        return days_rolled

    @property
    def is_daytime(self) -> bool:
        """Return True between dawn (06:00) and dusk (20:00)."""
        return DAY_START_HOUR <= self.hour < NIGHT_START_HOUR

    @property
    def is_nighttime(self) -> bool:
        return not self.is_daytime

    @property
    def day_progress(self) -> float:
        """Fraction of daylight elapsed: 0.0 at dawn, 1.0 at dusk."""
        if self.hour < DAY_START_HOUR:
            return 0.0
        if self.hour >= NIGHT_START_HOUR:
            return 1.0
        hours = self.hour - DAY_START_HOUR + self.minute / 60
        return hours / (NIGHT_START_HOUR - DAY_START_HOUR)

    def time_string(self) -> str:
        """Format as ``Day 5, 14:30``."""
        return f"Day {self.day}, {self.hour:02d}:{int(self.minute):02d}"
