import pytest

from election_engine.errors import InvalidGender
from election_engine.stats import VOTERS, VOTES, Gender, GenderStats


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("M", Gender.MALE),
        ("female", Gender.FEMALE),
        (" Other ", Gender.OTHER),
        ("o", Gender.OTHER),
        (Gender.FEMALE, Gender.FEMALE),
    ],
)
def test_gender_parse(raw, expected):
    assert Gender.parse(raw) is expected


@pytest.mark.parametrize("raw", ["x", "", 1, None])
def test_gender_parse_rejects_unknown(raw):
    with pytest.raises(InvalidGender):
        Gender.parse(raw)


def test_adjust_and_totals():
    stats = GenderStats()
    stats.adjust(VOTERS, Gender.MALE)
    stats.adjust(VOTERS, Gender.FEMALE)
    stats.adjust(VOTERS, Gender.FEMALE)
    stats.adjust(VOTES, Gender.FEMALE)
    stats.adjust(VOTERS, Gender.FEMALE, -1)
    assert stats.total_voters == 2
    assert stats.total_votes == 1
    assert stats.snapshot() == {
        "votes": {"male": 0, "female": 1, "other": 0},
        "voters": {"male": 1, "female": 1, "other": 0},
    }


def test_adjust_never_goes_negative():
    stats = GenderStats()
    with pytest.raises(ValueError):
        stats.adjust(VOTERS, Gender.OTHER, -1)
    assert stats.get(VOTERS, Gender.OTHER) == 0


def test_adjust_unknown_kind():
    with pytest.raises(ValueError):
        GenderStats().adjust("ballots", Gender.MALE)
