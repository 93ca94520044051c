import pytest

from election_engine import Election

T0 = 1_700_000_000.0
HOUR = 3600
DAY = 24 * HOUR
ADMIN = "admin"


class FakeClock:
    def __init__(self, now: float = T0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def election(clock):
    return Election(ADMIN, clock=clock)


@pytest.fixture
def open_election(election, clock):
    """Two candidates, three voters and a window that is already open."""
    election.add_candidate(ADMIN, "X", "M", "P1")
    election.add_candidate(ADMIN, "Y", "F", "P2")
    for identity, card, gender in (("a", "C1", "M"), ("b", "C2", "F"), ("c", "C3", "O")):
        election.register_voter(ADMIN, identity, 30, card, T0 + 365 * DAY, gender)
    election.set_period(ADMIN, T0 + HOUR, T0 + 2 * HOUR)
    clock.advance(90 * 60)
    return election
