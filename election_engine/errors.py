"""Rejections raised by the election engine.

Every failure is a synchronous validation rejection: the operation that raised
it has left the election state exactly as it was before the call.
"""

from __future__ import annotations

from typing import Any


class ElectionError(Exception):
    """Base error for every rejected election operation."""

    @property
    def code(self) -> str:
        return type(self).__name__


class NotAdministrator(ElectionError, PermissionError):
    def __init__(self, caller: Any):
        self.caller = caller
        super().__init__(f"caller {caller!r} is not the administrator")


class VotingNotActive(ElectionError):
    def __init__(self, now: float):
        self.now = now
        super().__init__(f"voting is not active at {now}")


class VoterUnderage(ElectionError, ValueError):
    def __init__(self, age: int):
        self.age = age
        super().__init__(f"voter age {age} is below 18")


class CardAlreadyUsed(ElectionError):
    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"card {card_id!r} is already bound to a registration")


class CardExpired(ElectionError):
    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"card {card_id!r} has expired")


class VoterNotRegistered(ElectionError, LookupError):
    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"{identity!r} is not a registered voter")


class AlreadyVoted(ElectionError):
    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"{identity!r} has already voted")


class InvalidCandidate(ElectionError, LookupError):
    def __init__(self, candidate_id: Any):
        self.candidate_id = candidate_id
        super().__init__(f"no candidate with id {candidate_id!r}")


class ElectionAlreadyFinalized(ElectionError):
    def __init__(self):
        super().__init__("the election has already been finalized")


class VotingWindowNotClosed(ElectionError):
    def __init__(self):
        super().__init__("the voting window has not closed yet")


class InvalidVotingPeriod(ElectionError, ValueError):
    def __init__(self, start: float, end: float):
        self.start = start
        self.end = end
        super().__init__(f"voting start {start} must be before end {end}")


class StartTimeNotInFuture(ElectionError, ValueError):
    def __init__(self, start: float, now: float):
        self.start = start
        self.now = now
        super().__init__(f"voting start {start} is not after the current time {now}")


class EmptyCandidateName(ElectionError, ValueError):
    def __init__(self):
        super().__init__("candidate name cannot be empty")


class EmptyPartyName(ElectionError, ValueError):
    def __init__(self):
        super().__init__("party name cannot be empty")


class VoterAlreadyRegistered(ElectionError):
    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"{identity!r} is already registered")


class RemovalAfterWindowOpened(ElectionError):
    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(
            f"cannot remove {identity!r}: the voting window has already opened"
        )


class InvalidGender(ElectionError, ValueError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"unknown gender category {value!r}")
