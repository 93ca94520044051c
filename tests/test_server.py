import pytest

# If Flask isn't installed in the environment, skip these integration tests.
pytest.importorskip("flask")

from election_engine.config import ElectionSettings
from election_engine.server import CALLER_HEADER, create_app

from .conftest import ADMIN, DAY, HOUR, T0


@pytest.fixture
def client(clock):
    app = create_app(ElectionSettings(admin_identity=ADMIN), clock=clock)
    return app.test_client()


def _as(identity):
    return {CALLER_HEADER: identity}


def test_full_flow_configure_register_vote_finalize(client, clock):
    rv = client.post(
        "/candidates", json={"name": "Alice", "gender": "F", "party": "Blue"}, headers=_as(ADMIN)
    )
    assert rv.status_code == 201
    assert rv.get_json()["candidate_id"] == 0
    client.post(
        "/candidates", json={"name": "Bob", "gender": "M", "party": "Green"}, headers=_as(ADMIN)
    )

    for identity, card in (("alice@example.org", "C1"), ("bob@example.org", "C2")):
        rv = client.post(
            "/voters",
            json={
                "identity": identity,
                "age": 30,
                "card_id": card,
                "card_expiry": T0 + DAY,
                "gender": "O",
            },
            headers=_as(ADMIN),
        )
        assert rv.status_code == 201

    rv = client.post("/period", json={"start": T0 + HOUR, "end": T0 + 2 * HOUR}, headers=_as(ADMIN))
    assert rv.status_code == 200

    clock.advance(90 * 60)
    rv = client.post("/vote", json={"candidate_id": 0}, headers=_as("alice@example.org"))
    assert rv.status_code == 201
    rv = client.post("/vote", json={"candidate_id": 1}, headers=_as("alice@example.org"))
    assert rv.status_code == 409
    assert rv.get_json()["error"] == "AlreadyVoted"

    rv = client.get("/voters/alice@example.org")
    assert rv.get_json() == {"identity": "alice@example.org", "registered": True, "voted": True}

    clock.advance(HOUR)
    rv = client.post("/finalize", headers=_as(ADMIN))
    assert rv.status_code == 200
    assert rv.get_json()["winners"] == [0]

    data = client.get("/results").get_json()
    assert data["total_votes"] == 1
    assert data["total_voters"] == 2
    assert data["turnout"] == 5000
    assert data["turnout_percent"] == "50.00%"

    listing = client.get("/candidates").get_json()
    assert listing["names"] == ["Alice", "Bob"]
    assert listing["votes"] == [1, 0]
    assert listing["genders"] == ["female", "male"]

    assert client.get("/candidates/0").get_json()["votes"] == 1
    assert client.get("/stats").get_json()["votes"]["other"] == 1
    assert client.get("/status").get_json()["finalized"] is True


def test_non_admin_is_forbidden(client):
    rv = client.post(
        "/candidates", json={"name": "X", "gender": "M", "party": "P"}, headers=_as("mallory")
    )
    assert rv.status_code == 403
    assert rv.get_json()["error"] == "NotAdministrator"
    rv = client.post("/finalize")
    assert rv.status_code == 403


def test_unknown_candidate_is_404(client):
    rv = client.get("/candidates/3")
    assert rv.status_code == 404
    assert rv.get_json()["error"] == "InvalidCandidate"


def test_validation_rejections_are_400(client):
    rv = client.post("/period", json={"start": T0 + HOUR, "end": T0 + HOUR}, headers=_as(ADMIN))
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "InvalidVotingPeriod"
    rv = client.post(
        "/candidates", json={"name": "", "gender": "M", "party": "P"}, headers=_as(ADMIN)
    )
    assert rv.get_json()["error"] == "EmptyCandidateName"


def test_malformed_payloads(client):
    rv = client.post("/vote", data="not json", headers=_as("x"))
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "InvalidRequest"
    rv = client.post("/voters", json={"identity": "a"}, headers=_as(ADMIN))
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "InvalidRequest"


def test_remove_voter_endpoint(client):
    client.post(
        "/voters",
        json={"identity": "a", "age": 20, "card_id": "C1", "card_expiry": T0 + DAY, "gender": "M"},
        headers=_as(ADMIN),
    )
    rv = client.delete("/voters/a", headers=_as(ADMIN))
    assert rv.status_code == 200
    rv = client.delete("/voters/a", headers=_as(ADMIN))
    assert rv.status_code == 404
    assert rv.get_json()["error"] == "VoterNotRegistered"
