import datetime as dt

import pytest

from election_engine import helpers
from election_engine.registry import Candidate
from election_engine.stats import Gender


def _candidates(*counts):
    return [
        Candidate(i, f"c{i}", Gender.OTHER, "P", vote_count=n)
        for i, n in enumerate(counts)
    ]


def test_resolve_winners_clear_leader():
    assert helpers.resolve_winners(_candidates(1, 3, 2)) == [1]


def test_resolve_winners_tie_in_ascending_id_order():
    assert helpers.resolve_winners(_candidates(2, 1, 2, 2)) == [0, 2, 3]


def test_resolve_winners_no_votes_or_candidates():
    assert helpers.resolve_winners(_candidates(0, 0)) == []
    assert helpers.resolve_winners([]) == []


def test_turnout():
    assert helpers.turnout(0, 0) == 0
    assert helpers.turnout(5, 0) == 0
    assert helpers.turnout(2, 3) == 6666
    assert helpers.turnout(3, 3) == 10000
    assert helpers.format_turnout(6666) == "66.66%"
    assert helpers.format_turnout(705) == "7.05%"


def test_to_timestamp():
    moment = dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc)
    assert helpers.to_timestamp(moment) == moment.timestamp()
    assert helpers.to_timestamp(dt.datetime(2024, 1, 1)) == moment.timestamp()
    assert helpers.to_timestamp(12) == 12.0
    with pytest.raises(TypeError):
        helpers.to_timestamp("12")
    with pytest.raises(TypeError):
        helpers.to_timestamp(True)


def test_parse_time():
    assert helpers.parse_time("+90m", now=1000) == 1000 + 90 * 60
    assert helpers.parse_time("+2h", now=0) == 7200
    assert helpers.parse_time("+365d", now=0) == 365 * 86400
    assert helpers.parse_time("1234.5") == 1234.5
    with pytest.raises(ValueError):
        helpers.parse_time("tomorrow")
