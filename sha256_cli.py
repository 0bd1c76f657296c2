"""SHA-256 built from the `padding`, `schedule` and `compress` modules.

This module provides:

- `sha256(data: bytes) -> bytes`: compute the SHA-256 digest of arbitrary data.
- `sha256_hex(data: bytes) -> str`: the same digest as lowercase hex.
- A known-answer self-test driven by `known_answers.yaml`.
- CLI usage:
    python sha256_cli.py                 # hashes "abc"
    python sha256_cli.py "message"       # hashes the UTF-8 encoding of "message"
    python sha256_cli.py -f path/to/file
    python sha256_cli.py --self-test [known_answers.yaml]
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence

import yaml

from compress import H0, State, compress_block
from padding import BytesLike, iter_blocks
from schedule import build_message_schedule


DEFAULT_KNOWN_ANSWERS = os.path.join(os.path.dirname(os.path.abspath(__file__)), "known_answers.yaml")
DEFAULT_MESSAGE = "abc"


def finalize_digest(state: Sequence[int]) -> bytes:
    """Convert the final hash state into the 32-byte SHA-256 digest."""
    if len(state) != 8:
        raise ValueError(f"Expected 8-word state, got {len(state)}")
    return b"".join(word.to_bytes(4, byteorder="big") for word in state)


def sha256(data: BytesLike) -> bytes:
    """Compute the SHA-256 digest of `data`.

    Each padded block is expanded into its message schedule and folded into
    the running state, strictly in order. The state is a local tuple, so
    concurrent calls never share anything.
    """
    state: State = H0
    for block in iter_blocks(data):
        state = compress_block(state, build_message_schedule(block))
    return finalize_digest(state)


def sha256_hex(data: BytesLike) -> str:
    """Convenience helper to return the SHA-256 hex digest of `data`."""
    return sha256(data).hex()


@dataclass(frozen=True)
class KnownAnswer:
    name: str
    message: bytes
    expected: str


def _parse_vector(index: int, entry) -> KnownAnswer:
    if not isinstance(entry, dict):
        raise ValueError(f"vector {index}: expected a mapping, got {type(entry).__name__}")

    name = str(entry.get("name", f"vector-{index}"))
    expected = entry.get("expected")
    if not isinstance(expected, str) or len(expected) != 64:
        raise ValueError(f"vector {name!r}: 'expected' must be a 64-character hex digest")

    sources = [key for key in ("message", "hex", "repeat") if key in entry]
    if len(sources) != 1:
        raise ValueError(
            f"vector {name!r}: exactly one of 'message', 'hex', 'repeat' is required, got {sources}"
        )

    source = sources[0]
    if source == "message":
        message = str(entry["message"]).encode("utf-8")
    elif source == "hex":
        message = bytes.fromhex(str(entry["hex"]))
    else:
        count = entry.get("count")
        if not isinstance(count, int) or count < 0:
            raise ValueError(f"vector {name!r}: 'repeat' needs a non-negative integer 'count'")
        message = str(entry["repeat"]).encode("utf-8") * count

    return KnownAnswer(name=name, message=message, expected=expected.lower())


def load_known_answers(path: Optional[str] = None) -> List[KnownAnswer]:
    """Load known-answer vectors from a YAML file.

    Args:
        path: YAML file to read; defaults to `known_answers.yaml` next to
            this module.

    Returns:
        The parsed vectors, in file order.
    """
    if path is None:
        path = DEFAULT_KNOWN_ANSWERS

    with open(path, "r", encoding="utf-8") as f:
        document = yaml.safe_load(f)

    if not isinstance(document, dict) or not isinstance(document.get("vectors"), list):
        raise ValueError(f"{path}: expected a top-level 'vectors' list")

    return [_parse_vector(i, entry) for i, entry in enumerate(document["vectors"])]


def run_self_test(vectors: Sequence[KnownAnswer]) -> bool:
    """Hash every vector and print one PASS/FAIL line per vector."""
    print("SHA-256 known-answer test")
    print("=" * 60)

    failed = 0
    for vector in vectors:
        result = sha256_hex(vector.message)
        if result == vector.expected:
            print(f"[PASS] {vector.name}")
        else:
            failed += 1
            print(f"[FAIL] {vector.name}")
            print(f"  expected: {vector.expected}")
            print(f"  got:      {result}")

    print("=" * 60)
    print(f"{len(vectors) - failed} passed, {failed} failed")
    return failed == 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute the SHA-256 digest of a message or file"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "message",
        nargs="?",
        help=f"Message to hash as UTF-8 (default: {DEFAULT_MESSAGE!r})",
    )
    source.add_argument(
        "-f",
        "--file",
        help="Hash the raw bytes of this file instead",
    )
    source.add_argument(
        "--self-test",
        nargs="?",
        const=DEFAULT_KNOWN_ANSWERS,
        metavar="PATH",
        help="Run the known-answer vectors (default: known_answers.yaml)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Prints the lowercase hex digest to stdout."""
    args = _build_parser().parse_args(argv)

    if args.self_test is not None:
        try:
            vectors = load_known_answers(args.self_test)
        except (OSError, ValueError, yaml.YAMLError) as e:
            sys.stderr.write(f"Error loading known answers '{args.self_test}': {e}\n")
            return 1
        return 0 if run_self_test(vectors) else 1

    if args.file is not None:
        try:
            with open(args.file, "rb") as f:
                data = f.read()
        except OSError as e:
            sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
            return 1
    else:
        message = DEFAULT_MESSAGE if args.message is None else args.message
        data = message.encode("utf-8")

    print(sha256_hex(data))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
