"""Helper utilities for the election engine.

This module contains three logical groups kept out of `election.py` so the
session object stays focused on sequencing and locking:
- tally: the two-pass winner scan and the turnout arithmetic
- consistency: rebuilding the demographic counters from per-entity records
- time: timestamp coercion and relative offsets ("+90m") for the CLI/demo
"""

from __future__ import annotations

import datetime as dt
import re
import time
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from .stats import VOTERS, GenderStats

if TYPE_CHECKING:
    from .registry import Candidate, Registry

TURNOUT_SCALE = 10000

Timestamp = Union[int, float, dt.datetime]


## --- tally -------------------------------------------------------------


def resolve_winners(candidates: Sequence["Candidate"]) -> List[int]:
    """Return the ids of every candidate sharing the top vote count.

    Pass one finds the maximum, pass two collects ties in ascending id order.
    An empty ballot box (or no candidates) declares nobody.
    """
    if not candidates:
        return []
    top = 0
    for c in candidates:
        if c.vote_count > top:
            top = c.vote_count
    if top == 0:
        return []
    return [c.candidate_id for c in candidates if c.vote_count == top]


def turnout(total_votes: int, total_voters: int) -> int:
    """Votes over registered voters, as a percentage with two implied decimals.

    >>> turnout(2, 3)
    6666
    """
    if total_voters == 0:
        return 0
    return (total_votes * TURNOUT_SCALE) // total_voters


def format_turnout(value: int) -> str:
    return f"{value // 100}.{value % 100:02d}%"


## --- consistency -------------------------------------------------------


def recompute_stats(registry: "Registry") -> GenderStats:
    """Rebuild the voter counters from scratch out of the voter records.

    Vote counters are left at zero: a ballot outlives the removal of the
    voter who cast it, so its gender split cannot be rebuilt from the
    registry. Cast ballots are checked against `total_candidate_votes`.
    """
    stats = GenderStats()
    for voter in registry.voters():
        stats.adjust(VOTERS, voter.gender, 1)
    return stats


def total_candidate_votes(registry: "Registry") -> int:
    return sum(c.vote_count for c in registry.candidates())


## --- time --------------------------------------------------------------


_OFFSET_RE = re.compile(r"^\+(\d+)([smhd])$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def to_timestamp(value: Timestamp) -> float:
    """Normalise a datetime or epoch number to epoch seconds."""
    if isinstance(value, bool):
        raise TypeError("timestamp cannot be a bool")
    if isinstance(value, dt.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=dt.timezone.utc)
        return value.timestamp()
    if isinstance(value, (int, float)):
        return float(value)
    raise TypeError(f"unsupported timestamp {value!r}")


def parse_time(text: str, now: Optional[float] = None) -> float:
    """Parse epoch seconds or an offset from now such as "+90m" or "+365d"."""
    text = text.strip()
    m = _OFFSET_RE.match(text)
    if m:
        base = time.time() if now is None else now
        return base + int(m.group(1)) * _UNIT_SECONDS[m.group(2)]
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"invalid time {text!r}: use epoch seconds or +N[smhd]") from None
