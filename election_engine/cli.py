"""Small CLI for driving the election Flask server.

Usage examples:
    election-cli --caller admin add-candidate --name Alice --gender F --party Blue
    election-cli --caller admin set-period --start +1h --end +2h
    election-cli --caller alice vote --candidate 0
    election-cli results
"""

import argparse
import sys

import requests

from .helpers import parse_time
from .server import CALLER_HEADER

BASE = "http://127.0.0.1:5000"


def _call(args, method: str, path: str, payload=None):
    r = requests.request(
        method,
        f"{args.base}{path}",
        json=payload,
        headers={CALLER_HEADER: args.caller},
        timeout=2,
    )
    print(r.json())
    return r


def set_period(args):
    return _call(
        args,
        "POST",
        "/period",
        {"start": parse_time(args.start), "end": parse_time(args.end)},
    )


def add_candidate(args):
    return _call(
        args,
        "POST",
        "/candidates",
        {"name": args.name, "gender": args.gender, "party": args.party},
    )


def register(args):
    return _call(
        args,
        "POST",
        "/voters",
        {
            "identity": args.identity,
            "age": args.age,
            "card_id": args.card,
            "card_expiry": parse_time(args.expiry),
            "gender": args.gender,
        },
    )


def remove(args):
    return _call(args, "DELETE", f"/voters/{args.identity}")


def vote(args):
    return _call(args, "POST", "/vote", {"candidate_id": args.candidate})


def finalize(args):
    return _call(args, "POST", "/finalize")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="election-cli")
    p.add_argument("--base", default=BASE)
    p.add_argument("--caller", default="", help="caller identity sent to the server")
    sub = p.add_subparsers(dest="cmd")

    s = sub.add_parser("set-period")
    s.add_argument("--start", required=True, help="epoch seconds or +N[smhd]")
    s.add_argument("--end", required=True, help="epoch seconds or +N[smhd]")
    s.set_defaults(func=set_period)

    s = sub.add_parser("add-candidate")
    s.add_argument("--name", required=True)
    s.add_argument("--gender", required=True)
    s.add_argument("--party", required=True)
    s.set_defaults(func=add_candidate)

    s = sub.add_parser("register")
    s.add_argument("--identity", required=True)
    s.add_argument("--age", type=int, required=True)
    s.add_argument("--card", required=True)
    s.add_argument("--expiry", required=True, help="epoch seconds or +N[smhd]")
    s.add_argument("--gender", required=True)
    s.set_defaults(func=register)

    s = sub.add_parser("remove")
    s.add_argument("--identity", required=True)
    s.set_defaults(func=remove)

    s = sub.add_parser("vote")
    s.add_argument("--candidate", type=int, required=True)
    s.set_defaults(func=vote)

    sub.add_parser("finalize").set_defaults(func=finalize)

    sub.add_parser("candidates").set_defaults(
        func=lambda a: _call(a, "GET", "/candidates")
    )
    s = sub.add_parser("candidate")
    s.add_argument("--id", type=int, required=True)
    s.set_defaults(func=lambda a: _call(a, "GET", f"/candidates/{a.id}"))

    s = sub.add_parser("voter")
    s.add_argument("--identity", required=True)
    s.set_defaults(func=lambda a: _call(a, "GET", f"/voters/{a.identity}"))

    for name in ("results", "stats", "status"):
        sub.add_parser(name).set_defaults(
            func=lambda a, path=f"/{name}": _call(a, "GET", path)
        )
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)
    if not getattr(args, "func", None):
        p.print_help()
        return 1
    try:
        r = args.func(args)
    except ValueError as exc:
        p.error(str(exc))
    return 0 if r.ok else 1


if __name__ == "__main__":
    sys.exit(main())
