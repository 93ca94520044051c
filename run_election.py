"""Reference runner that walks one election cycle in-process.

Run this script from the repository root to simulate a small election with a
controllable clock: configuration, registration, voting, finalization, results.
"""

import argparse
import logging
import random
import time

from election_engine import Election, ElectionError, Gender
from election_engine import helpers
from election_engine.config import setup_logging

HOUR = 3600
DAY = 24 * HOUR


class SimulatedClock:
    def __init__(self, start: float):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def _print_heading(msg: str):
    print()
    print(msg)


def _print_kv(key: str, value):
    print(f"  {key}: {value}")


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--voters", type=int, default=12)
    p.add_argument("--seed", type=int, default=7)
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args()

    setup_logging("INFO" if args.verbose else "WARNING")
    rng = random.Random(args.seed)
    clock = SimulatedClock(time.time())
    admin = "admin"
    election = Election(admin, clock=clock)

    _print_heading("[Setup] candidates and voting window")
    for name, gender, party in (
        ("Alice", Gender.FEMALE, "Blue"),
        ("Bob", Gender.MALE, "Green"),
        ("Carol", Gender.OTHER, "Red"),
    ):
        cid = election.add_candidate(admin, name, gender, party)
        _print_kv(f"candidate {cid}", f"{name} ({party})")
    election.set_period(admin, clock() + HOUR, clock() + 2 * HOUR)
    _print_kv("window", election.period())

    _print_heading("[Registration]")
    genders = list(Gender)
    for i in range(args.voters):
        election.register_voter(
            admin,
            f"voter{i}@example.org",
            rng.randint(18, 90),
            f"CARD-{i:04d}",
            clock() + 365 * DAY,
            rng.choice(genders),
        )
    _print_kv("registered", election.total_voters())
    # one voter withdraws before the window opens
    election.remove_voter(admin, "voter0@example.org")
    _print_kv("after removal", election.total_voters())

    _print_heading("[Voting]")
    clock.advance(90 * 60)
    _print_kv("window", election.window_state().value)
    candidates = election.candidate_count()
    voted = []
    for i in range(1, args.voters):
        if rng.random() < 0.2:
            continue  # abstains
        identity = f"voter{i}@example.org"
        election.vote(identity, rng.randrange(candidates))
        voted.append(identity)
    _print_kv("ballots cast", len(voted))
    if voted:
        try:
            election.vote(voted[0], 0)
        except ElectionError as exc:
            _print_kv("second ballot rejected", exc.code)

    _print_heading("[Finalization]")
    clock.advance(HOUR)
    winners = election.finalize(admin)
    ids, names, votes, _, parties = election.all_candidates()
    for cid, name, count, party in zip(ids, names, votes, parties):
        _print_kv(f"{cid} {name} ({party})", count)
    _print_kv("winners", ", ".join(names[w] for w in winners) or "none")
    _print_kv("turnout", helpers.format_turnout(election.turnout()))
    _print_kv("by gender", election.gender_stats())
    _print_kv("counters consistent", election.check_consistency())

    logging.getLogger(__name__).info("demo finished")


if __name__ == "__main__":
    main()
