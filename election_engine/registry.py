"""Candidate and voter records for one election cycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Set

from .errors import (
    CardAlreadyUsed,
    CardExpired,
    EmptyCandidateName,
    EmptyPartyName,
    InvalidCandidate,
    VoterAlreadyRegistered,
    VoterNotRegistered,
    VoterUnderage,
)
from .stats import Gender

MINIMUM_AGE = 18


@dataclass
class Candidate:
    candidate_id: int
    name: str
    gender: Gender
    party: str
    vote_count: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.candidate_id,
            "name": self.name,
            "votes": self.vote_count,
            "gender": self.gender.value,
            "party": self.party,
        }


@dataclass
class Voter:
    identity: str
    age: int
    card_id: str
    card_expiry: float
    gender: Gender
    voted: bool = False

    def card_valid_at(self, now: float) -> bool:
        return self.card_expiry > now


class Registry:
    """Owns candidates (append-only), voters keyed by identity and bound cards.

    The registry validates and applies its own transitions but knows nothing
    about the voting window or the demographic counters; the election session
    sequences those around each call.
    """

    def __init__(self):
        self._candidates: List[Candidate] = []
        self._voters: Dict[str, Voter] = {}
        self._used_cards: Set[str] = set()

    ## --- candidates ------------------------------------------------------

    def add_candidate(self, name: str, gender: Gender, party: str) -> Candidate:
        if not name:
            raise EmptyCandidateName()
        if not party:
            raise EmptyPartyName()
        candidate = Candidate(len(self._candidates), name, gender, party)
        self._candidates.append(candidate)
        return candidate

    def candidate(self, candidate_id: int) -> Candidate:
        # bool is an int subclass but never a meaningful id
        if (
            not isinstance(candidate_id, int)
            or isinstance(candidate_id, bool)
            or not 0 <= candidate_id < len(self._candidates)
        ):
            raise InvalidCandidate(candidate_id)
        return self._candidates[candidate_id]

    def candidates(self) -> List[Candidate]:
        return list(self._candidates)

    @property
    def candidate_count(self) -> int:
        return len(self._candidates)

    ## --- voters ----------------------------------------------------------

    def register_voter(
        self,
        identity: str,
        age: int,
        card_id: str,
        card_expiry: float,
        gender: Gender,
        now: float,
    ) -> Voter:
        if age < MINIMUM_AGE:
            raise VoterUnderage(age)
        if card_id in self._used_cards:
            raise CardAlreadyUsed(card_id)
        if card_expiry <= now:
            raise CardExpired(card_id)
        if identity in self._voters:
            raise VoterAlreadyRegistered(identity)
        voter = Voter(identity, age, card_id, card_expiry, gender)
        self._voters[identity] = voter
        self._used_cards.add(card_id)
        return voter

    def remove_voter(self, identity: str) -> Voter:
        voter = self.voter(identity)
        self._used_cards.discard(voter.card_id)
        del self._voters[identity]
        return voter

    def voter(self, identity: str) -> Voter:
        try:
            return self._voters[identity]
        except KeyError:
            raise VoterNotRegistered(identity) from None

    def is_registered(self, identity: str) -> bool:
        return identity in self._voters

    def voters(self) -> List[Voter]:
        return list(self._voters.values())

    def card_in_use(self, card_id: str) -> bool:
        return card_id in self._used_cards

    @property
    def voter_count(self) -> int:
        return len(self._voters)
