"""Request payloads accepted by the HTTP surface.

Only shape and type are checked here; business rules (empty names, ages,
card expiry, ...) are left to the election engine so every rejection carries
the engine's own error kind.
"""

from __future__ import annotations

from pydantic import BaseModel, StrictInt


class PeriodRequest(BaseModel):
    start: float
    end: float


class CandidateRequest(BaseModel):
    name: str
    gender: str
    party: str


class VoterRequest(BaseModel):
    identity: str
    age: StrictInt
    card_id: str
    card_expiry: float
    gender: str


class VoteRequest(BaseModel):
    candidate_id: StrictInt
