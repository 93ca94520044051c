"""The two-timestamp gate consulted by voting, removal and finalization."""

from __future__ import annotations

import enum
from typing import Optional, Tuple

from .errors import InvalidVotingPeriod, StartTimeNotInFuture


class WindowState(enum.Enum):
    BEFORE = "before"
    ACTIVE = "active"
    AFTER = "after"


class VotingWindow:
    """Closed interval [start, end] during which ballots are accepted.

    Until a period is set the window reports BEFORE for every instant.
    """

    def __init__(self):
        self.start: Optional[float] = None
        self.end: Optional[float] = None

    @property
    def is_set(self) -> bool:
        return self.start is not None

    def set_period(self, start: float, end: float, now: float) -> None:
        if start >= end:
            raise InvalidVotingPeriod(start, end)
        if start <= now:
            raise StartTimeNotInFuture(start, now)
        self.start, self.end = start, end

    def state(self, now: float) -> WindowState:
        if not self.is_set or now < self.start:
            return WindowState.BEFORE
        if now <= self.end:
            return WindowState.ACTIVE
        return WindowState.AFTER

    def has_opened(self, now: float) -> bool:
        return self.is_set and now >= self.start

    def as_tuple(self) -> Tuple[Optional[float], Optional[float]]:
        return self.start, self.end
