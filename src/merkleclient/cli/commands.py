"""
CLI commands for merkleclient.

Commands:
    merkle-client verify --root <digest> TX [TX ...]    Verify transactions against a known root
    merkle-client hash <text>                           Print the digest of a string
"""

from __future__ import annotations

import json
import sys
from typing import Any, List

from merkleclient.core.builder import BatchRequestBuilder
from merkleclient.core.session import MerkleValidityClient
from merkleclient.core.settings import get_settings
from merkleclient.merkle.hashing import digest_width, get_hash_function
from merkleclient.protocol.enums import BatchStatus
from merkleclient.protocol.errors import BatchAbortedError, ValidationError
from merkleclient.protocol.models import BatchOutcome

EXIT_ALL_VALID = 0
EXIT_SOME_INVALID = 1
EXIT_NOT_ATTEMPTED = 2
EXIT_ABORTED = 3
EXIT_USAGE = 64


def verify(args) -> int:
    """Run one batch against the authority and print the classification."""
    settings = get_settings()

    overrides = {
        key: value
        for key, value in (
            ("hash_algorithm", args.hash_algorithm),
            ("connect_timeout", args.connect_timeout),
            ("read_timeout", args.read_timeout),
        )
        if value is not None
    }
    session_settings = settings.session.model_copy(update=overrides)

    host = args.host or settings.authority.host
    port = args.port if args.port is not None else settings.authority.port
    root = args.root or settings.authority.root
    if not root:
        print("Error: --root or MERKLECLIENT_AUTHORITY_ROOT required", file=sys.stderr)
        return EXIT_USAGE

    hash_fn = get_hash_function(session_settings.hash_algorithm)

    try:
        request = (
            BatchRequestBuilder(host, port, root, digest_width=digest_width(hash_fn))
            .add_identifiers(_collect_identifiers(args))
            .build()
        )
    except (ValidationError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    client = MerkleValidityClient(hash_fn=hash_fn, settings=session_settings)

    try:
        outcome = client.run_batch(request)
    except BatchAbortedError as e:
        print(f"Batch aborted: {e}", file=sys.stderr)
        _print_outcome(e.outcome, args.output)
        return EXIT_ABORTED

    _print_outcome(outcome, args.output)

    if outcome.status == BatchStatus.NOT_ATTEMPTED:
        return EXIT_NOT_ATTEMPTED
    return EXIT_ALL_VALID if not outcome.invalid else EXIT_SOME_INVALID


def hash_text(args) -> int:
    """Print the digest of a string, for building roots by hand."""
    algorithm = args.hash_algorithm or get_settings().session.hash_algorithm
    print(get_hash_function(algorithm)(args.text))
    return 0


def _collect_identifiers(args) -> List[str]:
    identifiers = list(args.identifiers or [])
    if args.from_file:
        with open(args.from_file, "r", encoding="utf-8") as f:
            identifiers.extend(line.strip() for line in f if line.strip())
    return identifiers


def _print_outcome(outcome: BatchOutcome, fmt: str) -> None:
    """Print output in requested format."""
    data: Any = outcome.to_dict()
    if fmt == "json":
        print(json.dumps(data, indent=2))
        return

    if outcome.status == BatchStatus.NOT_ATTEMPTED:
        print(f"Authority unreachable, no transactions processed ({outcome.error})")
        return

    print(f"{'TRANSACTION':<40} {'RESULT':<8} {'NODES':<6} {'COMPUTED ROOT'}")
    print("-" * 100)
    for r in outcome.results:
        result = "VALID" if r.valid else "INVALID"
        print(f"{r.identifier[:40]:<40} {result:<8} {r.proof_length:<6} {r.computed_root}")

    print(
        f"\nStatus: {outcome.status.value}  "
        f"valid: {len(outcome.valid)}  invalid: {len(outcome.invalid)}"
    )
