# merkleclient/cli/main.py

"""
merkle-client command line tool
-------------------------------

Provides:
  - Verifying transactions against a known Merkle root
  - Hashing strings with the configured algorithm
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import List, Optional

import pydantic

from merkleclient.core.settings import get_settings
from merkleclient.merkle.hashing import available_algorithms

from . import commands


def _positive_float(value: str) -> float:
    number = float(value)
    if not math.isfinite(number) or number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive finite number, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="merkle-client",
        description="Verify transactions with Merkle proofs from a trusted authority",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: MERKLECLIENT_LOG_LEVEL or INFO)",
    )
    sub = parser.add_subparsers(dest="command")

    # verify
    p_verify = sub.add_parser("verify", help="Verify transactions against a known root")
    p_verify.add_argument("identifiers", nargs="*", help="Transaction identifiers")
    p_verify.add_argument("--host", help="Authority host")
    p_verify.add_argument("--port", type=int, help="Authority port")
    p_verify.add_argument("--root", help="Known Merkle root digest")
    p_verify.add_argument(
        "--from-file",
        metavar="PATH",
        help="Read additional identifiers from a file, one per line",
    )
    p_verify.add_argument(
        "--hash",
        dest="hash_algorithm",
        choices=available_algorithms(),
        help="Hash shared with the authority",
    )
    p_verify.add_argument("--connect-timeout", type=_positive_float, help="Seconds")
    p_verify.add_argument("--read-timeout", type=_positive_float, help="Seconds")
    p_verify.add_argument(
        "--output",
        choices=["table", "json"],
        default="table",
        help="Output format",
    )
    p_verify.set_defaults(func=commands.verify)

    # hash
    p_hash = sub.add_parser("hash", help="Print the digest of a string")
    p_hash.add_argument("text", help="Text to hash")
    p_hash.add_argument(
        "--hash",
        dest="hash_algorithm",
        choices=available_algorithms(),
        help="Hash algorithm",
    )
    p_hash.set_defaults(func=commands.hash_text)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return commands.EXIT_USAGE

    try:
        settings = get_settings()
    except pydantic.ValidationError as e:
        print(f"Error: invalid MERKLECLIENT_* environment settings\n{e}", file=sys.stderr)
        return commands.EXIT_USAGE

    logging.basicConfig(
        level=(args.log_level or settings.session.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
