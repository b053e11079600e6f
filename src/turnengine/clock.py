"""Game calendar advanced once per turn."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class GameClock:
    """
    Year/month calendar.

    One call to `advance_turn` is one month. Every phase reads the clock to
    stamp the records it writes.

    Parameters
    ----------
    year : int
        Current year.
    month : int
        Current month, 1-based.
    months_per_year : int
        Calendar length; months roll into the next year past this value.

    Examples
    --------
    >>> clock = GameClock(year=3599, month=12, months_per_year=12)
    >>> clock.advance_turn()
    >>> (clock.year, clock.month)
    (3600, 1)
    """

    year: int = 3599
    month: int = 1
    months_per_year: int = 12

    @property
    def current_year(self) -> int:
        return self.year

    @property
    def current_month(self) -> int:
        return self.month

    def advance_turn(self) -> None:
        """Advance one month, rolling over into the next year."""
        self.month += 1
        if self.month > self.months_per_year:
            self.month = 1
            self.year += 1

    def stamp(self) -> tuple[int, int]:
        """Return ``(year, month)``."""
        return self.year, self.month
