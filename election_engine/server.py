"""Minimal Flask API around one election session.

The caller identity is read from the X-Caller-Identity header; the hosting
environment is trusted to have authenticated it.

Endpoints:
- POST /period -> {"start": ..., "end": ...} set the voting window
- POST /candidates, GET /candidates, GET /candidates/<id>
- POST /voters, GET /voters/<identity>, DELETE /voters/<identity>
- POST /vote -> {"candidate_id": ...}
- POST /finalize -> close the election and declare winners
- GET /results, GET /stats, GET /status
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from flask import Flask, current_app, jsonify, request
from pydantic import BaseModel, ValidationError

from . import errors, helpers
from .config import ElectionSettings, load_settings, setup_logging
from .election import Election
from .schemas import CandidateRequest, PeriodRequest, VoterRequest, VoteRequest

logger = logging.getLogger(__name__)

CALLER_HEADER = "X-Caller-Identity"

_STATUS_CODES = {
    errors.NotAdministrator: 403,
    errors.InvalidCandidate: 404,
    errors.VoterNotRegistered: 404,
    errors.CardAlreadyUsed: 409,
    errors.VoterAlreadyRegistered: 409,
    errors.AlreadyVoted: 409,
    errors.ElectionAlreadyFinalized: 409,
}


def _election() -> Election:
    return current_app.extensions["election"]


def _caller() -> str:
    return request.headers.get(CALLER_HEADER, "")


class InvalidRequest(Exception):
    """Raised when a request body is not a well-formed payload."""


def _payload(model: type[BaseModel]) -> BaseModel:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest("request body must be a JSON object")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidRequest(str(exc)) from exc


def create_app(
    settings: Optional[ElectionSettings] = None,
    election: Optional[Election] = None,
    clock: Optional[Callable[[], float]] = None,
) -> Flask:
    settings = settings or load_settings()
    if election is None:
        election = Election(settings.admin_identity, clock=clock or time.time)

    app = Flask(__name__)
    app.config["ELECTION_SETTINGS"] = settings
    app.extensions["election"] = election

    @app.errorhandler(errors.ElectionError)
    def election_error(exc: errors.ElectionError):
        return jsonify({"error": exc.code, "detail": str(exc)}), _STATUS_CODES.get(
            type(exc), 400
        )

    @app.errorhandler(InvalidRequest)
    def invalid_request(exc: InvalidRequest):
        return jsonify({"error": "InvalidRequest", "detail": str(exc)}), 400

    @app.route("/period", methods=["POST"])
    def set_period():
        body = _payload(PeriodRequest)
        _election().set_period(_caller(), body.start, body.end)
        return jsonify({"status": "period set", "start": body.start, "end": body.end})

    @app.route("/candidates", methods=["POST"])
    def add_candidate():
        body = _payload(CandidateRequest)
        candidate_id = _election().add_candidate(
            _caller(), body.name, body.gender, body.party
        )
        return jsonify({"status": "added", "candidate_id": candidate_id}), 201

    @app.route("/candidates", methods=["GET"])
    def list_candidates():
        ids, names, votes, genders, parties = _election().all_candidates()
        return jsonify(
            {
                "ids": ids,
                "names": names,
                "votes": votes,
                "genders": [g.value for g in genders],
                "parties": parties,
            }
        )

    @app.route("/candidates/<int:candidate_id>", methods=["GET"])
    def get_candidate(candidate_id: int):
        return jsonify(_election().candidate(candidate_id).to_dict())

    @app.route("/voters", methods=["POST"])
    def register_voter():
        body = _payload(VoterRequest)
        _election().register_voter(
            _caller(),
            body.identity,
            body.age,
            body.card_id,
            body.card_expiry,
            body.gender,
        )
        return jsonify({"status": "registered", "identity": body.identity}), 201

    @app.route("/voters/<identity>", methods=["GET"])
    def voter_status(identity: str):
        registered, voted = _election().voter_status(identity)
        return jsonify({"identity": identity, "registered": registered, "voted": voted})

    @app.route("/voters/<identity>", methods=["DELETE"])
    def remove_voter(identity: str):
        _election().remove_voter(_caller(), identity)
        return jsonify({"status": "removed", "identity": identity})

    @app.route("/vote", methods=["POST"])
    def cast_vote():
        body = _payload(VoteRequest)
        _election().vote(_caller(), body.candidate_id)
        return jsonify({"status": "cast", "candidate_id": body.candidate_id}), 201

    @app.route("/finalize", methods=["POST"])
    def finalize():
        winners = _election().finalize(_caller())
        return jsonify({"status": "finalized", "winners": winners})

    @app.route("/results", methods=["GET"])
    def results():
        election = _election()
        value = election.turnout()
        return jsonify(
            {
                "total_votes": election.total_votes(),
                "total_voters": election.total_voters(),
                "turnout": value,
                "turnout_percent": helpers.format_turnout(value),
                "finalized": election.is_finalized(),
                "winners": election.winners(),
            }
        )

    @app.route("/stats", methods=["GET"])
    def stats():
        return jsonify(_election().gender_stats())

    @app.route("/status", methods=["GET"])
    def status():
        return jsonify(_election().status())

    return app


def main():
    settings = load_settings()
    setup_logging(settings.log_level)
    logger.info("serving election for admin %r", settings.admin_identity)
    create_app(settings).run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
