"""The election session: one administrator, one window, one tally.

An `Election` composes the registry, the voting window and the demographic
counters, and is the single write boundary for all of them. Every mutating
operation runs under one re-entrant lock, checks its preconditions first and
only then applies its changes, so a rejection never leaves partial state.
Read queries take the same lock and therefore never observe a write halfway.
"""

from __future__ import annotations

import contextlib
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from . import helpers
from .errors import (
    AlreadyVoted,
    CardExpired,
    ElectionAlreadyFinalized,
    ElectionError,
    NotAdministrator,
    RemovalAfterWindowOpened,
    VotingNotActive,
    VotingWindowNotClosed,
)
from .registry import Candidate, Registry
from .stats import VOTERS, VOTES, Gender, GenderStats
from .window import VotingWindow, WindowState

logger = logging.getLogger(__name__)

VOTE_CAST = "VOTE_CAST"
VOTER_REGISTERED = "VOTER_REGISTERED"
VOTER_REMOVED = "VOTER_REMOVED"
CANDIDATE_ADDED = "CANDIDATE_ADDED"
PERIOD_SET = "PERIOD_SET"
ELECTION_FINALIZED = "ELECTION_FINALIZED"
WINNER_DECLARED = "WINNER_DECLARED"


class ElectionEvent:
    def __init__(self, kind: str, payload: Dict[str, Any]):
        self.kind = kind
        self.payload = payload

    def __repr__(self):
        return f"ElectionEvent({self.kind!r}, {self.payload!r})"


Listener = Callable[[ElectionEvent], None]


class Election:
    def __init__(self, admin: str, clock: Callable[[], float] = time.time):
        if not admin:
            raise ValueError("an election needs an administrator identity")
        self.admin = admin
        self._clock = clock
        self._lock = threading.RLock()
        self._registry = Registry()
        self._window = VotingWindow()
        self._stats = GenderStats()
        self._finalized = False
        self._winners: List[int] = []
        self._listeners: List[Listener] = []

    ## --- notifications ---------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def _emit(self, kind: str, **payload) -> None:
        event = ElectionEvent(kind, payload)
        logger.info("%s %s", kind, payload)
        for listener in list(self._listeners):
            listener(event)

    ## --- preconditions ---------------------------------------------------

    def _now(self) -> float:
        return helpers.to_timestamp(self._clock())

    def _require_admin(self, caller: str) -> None:
        if caller != self.admin:
            raise NotAdministrator(caller)

    def _require_not_finalized(self) -> None:
        if self._finalized:
            raise ElectionAlreadyFinalized()

    @contextlib.contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        with self._lock:
            try:
                yield
            except ElectionError as exc:
                logger.warning("%s rejected: %s (%s)", operation, exc.code, exc)
                raise

    ## --- administration --------------------------------------------------

    def set_period(self, caller: str, start: helpers.Timestamp, end: helpers.Timestamp) -> None:
        start, end = helpers.to_timestamp(start), helpers.to_timestamp(end)
        with self._transaction("set_period"):
            self._require_admin(caller)
            self._require_not_finalized()
            self._window.set_period(start, end, self._now())
            self._emit(PERIOD_SET, start=start, end=end)

    def add_candidate(
        self, caller: str, name: str, gender: Union[Gender, str], party: str
    ) -> int:
        with self._transaction("add_candidate"):
            self._require_admin(caller)
            self._require_not_finalized()
            candidate = self._registry.add_candidate(name, Gender.parse(gender), party)
            self._emit(
                CANDIDATE_ADDED,
                candidate_id=candidate.candidate_id,
                name=candidate.name,
                party=candidate.party,
            )
            return candidate.candidate_id

    def register_voter(
        self,
        caller: str,
        identity: str,
        age: int,
        card_id: str,
        card_expiry: helpers.Timestamp,
        gender: Union[Gender, str],
    ) -> None:
        expiry = helpers.to_timestamp(card_expiry)
        with self._transaction("register_voter"):
            self._require_admin(caller)
            voter = self._registry.register_voter(
                identity, age, card_id, expiry, Gender.parse(gender), self._now()
            )
            self._stats.adjust(VOTERS, voter.gender, 1)
            self._emit(VOTER_REGISTERED, identity=identity)

    def remove_voter(self, caller: str, identity: str) -> None:
        with self._transaction("remove_voter"):
            self._require_admin(caller)
            self._require_not_finalized()
            # removal is legal strictly before the window start
            if self._window.has_opened(self._now()):
                raise RemovalAfterWindowOpened(identity)
            voter = self._registry.remove_voter(identity)
            self._stats.adjust(VOTERS, voter.gender, -1)
            self._emit(VOTER_REMOVED, identity=identity)

    ## --- ballots ---------------------------------------------------------

    def vote(self, identity: str, candidate_id: int) -> None:
        with self._transaction("vote"):
            now = self._now()
            if self._window.state(now) is not WindowState.ACTIVE:
                raise VotingNotActive(now)
            voter = self._registry.voter(identity)
            if voter.voted:
                raise AlreadyVoted(identity)
            if not voter.card_valid_at(now):
                raise CardExpired(voter.card_id)
            candidate = self._registry.candidate(candidate_id)
            voter.voted = True
            candidate.vote_count += 1
            self._stats.adjust(VOTES, voter.gender, 1)
            self._emit(VOTE_CAST, identity=identity, candidate_id=candidate_id)

    ## --- finalization ----------------------------------------------------

    def finalize(self, caller: str) -> List[int]:
        """Close the election and declare the winners, ties included."""
        with self._transaction("finalize"):
            self._require_admin(caller)
            self._require_not_finalized()
            if self._window.state(self._now()) is not WindowState.AFTER:
                raise VotingWindowNotClosed()
            self._finalized = True
            total = self._stats.total_votes
            self._emit(ELECTION_FINALIZED, total_votes=total)
            if total == 0:
                return []
            candidates = self._registry.candidates()
            self._winners = helpers.resolve_winners(candidates)
            for candidate_id in self._winners:
                winner = candidates[candidate_id]
                self._emit(
                    WINNER_DECLARED,
                    candidate_id=candidate_id,
                    name=winner.name,
                    votes=winner.vote_count,
                )
            return list(self._winners)

    ## --- queries ---------------------------------------------------------

    def candidate_result(self, candidate_id: int) -> Tuple[str, int, Gender, str]:
        with self._lock:
            c = self._registry.candidate(candidate_id)
            return c.name, c.vote_count, c.gender, c.party

    def candidate(self, candidate_id: int) -> Candidate:
        """Copy of one candidate record."""
        with self._lock:
            c = self._registry.candidate(candidate_id)
            return Candidate(c.candidate_id, c.name, c.gender, c.party, c.vote_count)

    def all_candidates(
        self,
    ) -> Tuple[List[int], List[str], List[int], List[Gender], List[str]]:
        """Parallel sequences of id, name, votes, gender and party by ascending id."""
        with self._lock:
            cs = self._registry.candidates()
            return (
                [c.candidate_id for c in cs],
                [c.name for c in cs],
                [c.vote_count for c in cs],
                [c.gender for c in cs],
                [c.party for c in cs],
            )

    def voter_status(self, identity: str) -> Tuple[bool, bool]:
        with self._lock:
            if not self._registry.is_registered(identity):
                return False, False
            return True, self._registry.voter(identity).voted

    def gender_stats(self) -> Dict[str, Dict[str, int]]:
        with self._lock:
            return self._stats.snapshot()

    def total_votes(self) -> int:
        with self._lock:
            return self._stats.total_votes

    def total_voters(self) -> int:
        with self._lock:
            return self._stats.total_voters

    def turnout(self) -> int:
        with self._lock:
            return helpers.turnout(self._stats.total_votes, self._stats.total_voters)

    def winners(self) -> List[int]:
        with self._lock:
            return list(self._winners)

    def candidate_count(self) -> int:
        with self._lock:
            return self._registry.candidate_count

    def is_finalized(self) -> bool:
        with self._lock:
            return self._finalized

    def window_state(self) -> WindowState:
        with self._lock:
            return self._window.state(self._now())

    def period(self) -> Tuple[Optional[float], Optional[float]]:
        with self._lock:
            return self._window.as_tuple()

    def status(self) -> Dict[str, Any]:
        with self._lock:
            start, end = self._window.as_tuple()
            return {
                "admin": self.admin,
                "start": start,
                "end": end,
                "window": self._window.state(self._now()).value,
                "finalized": self._finalized,
                "candidates": self._registry.candidate_count,
                "total_votes": self._stats.total_votes,
                "total_voters": self._stats.total_voters,
                "turnout": helpers.turnout(
                    self._stats.total_votes, self._stats.total_voters
                ),
                "winners": list(self._winners),
            }

    def check_consistency(self) -> bool:
        """True when the cached counters match a from-scratch recount.

        Voter counters are compared per gender; vote counters in total
        against the candidates' tallies.
        """
        with self._lock:
            recount = helpers.recompute_stats(self._registry)
            voters_match = all(
                recount.get(VOTERS, g) == self._stats.get(VOTERS, g) for g in Gender
            )
            return (
                voters_match
                and helpers.total_candidate_votes(self._registry)
                == self._stats.total_votes
            )
