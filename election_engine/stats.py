"""Demographic counters kept in lockstep with the registry and the ballots."""

from __future__ import annotations

import enum
from typing import Dict, Union

from .errors import InvalidGender


class Gender(enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Union["Gender", str]) -> "Gender":
        """Accept a member, its name or value (any case) or a one-letter code."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key in (member.value, member.value[0]):
                    return member
        raise InvalidGender(value)


VOTES = "votes"
VOTERS = "voters"
_KINDS = (VOTES, VOTERS)


class GenderStats:
    """Six counters: cast votes and registered voters, per gender.

    The counters are a derived cache of the registry; only the election
    session adjusts them, inside the same write as the change they mirror.
    """

    def __init__(self):
        self._counts: Dict[str, Dict[Gender, int]] = {
            kind: {g: 0 for g in Gender} for kind in _KINDS
        }

    def adjust(self, kind: str, gender: Gender, delta: int = 1) -> None:
        if kind not in self._counts:
            raise ValueError(f"unknown counter kind {kind!r}")
        current = self._counts[kind][gender]
        if current + delta < 0:
            raise ValueError(f"{kind} counter for {gender.value} would go negative")
        self._counts[kind][gender] = current + delta

    def get(self, kind: str, gender: Gender) -> int:
        return self._counts[kind][gender]

    def total(self, kind: str) -> int:
        return sum(self._counts[kind].values())

    @property
    def total_votes(self) -> int:
        return self.total(VOTES)

    @property
    def total_voters(self) -> int:
        return self.total(VOTERS)

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        return {
            kind: {g.value: n for g, n in counts.items()}
            for kind, counts in self._counts.items()
        }

    def __eq__(self, other):
        if not isinstance(other, GenderStats):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self):
        return f"GenderStats({self.snapshot()!r})"
