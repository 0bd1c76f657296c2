"""Trace SHA-256 round by round and record every intermediate value.

For one message, this script:
1. Pads it and splits it into 64-byte blocks
2. Records, for each block, the message schedule w[0..63], the working state
   (a..h) after every round, and the chaining value after feed-forward
3. Saves the trace to a YAML file or a SQLite database

Usage:
    python trace_rounds.py "abc"
    python trace_rounds.py -f path/to/file --format sqlite --output trace.db

SQLite Schema:
    - metadata: message_hex, message_length_bytes, digest_hex, total_blocks
    - blocks: block_index, block_hex, chaining_value
    - rounds: block_index, round_index, w, a, b, c, d, e, f, g, h
"""

from __future__ import annotations

import argparse
import os
import sqlite3
import sys
from typing import Dict, List

import yaml

from compress import H0, State, compress_block
from padding import BytesLike, iter_blocks
from schedule import build_message_schedule
from sha256_cli import finalize_digest


STATE_NAMES = ("a", "b", "c", "d", "e", "f", "g", "h")


def _words_hex(words) -> List[str]:
    return [f"{w:08x}" for w in words]


def trace_message(data: BytesLike) -> Dict:
    """Hash `data` and return a full per-round trace as plain dicts/lists."""
    message = bytes(data)
    state: State = H0
    blocks = []

    for block_idx, block in enumerate(iter_blocks(message)):
        ws = build_message_schedule(block)
        rounds: List[State] = []
        state = compress_block(state, ws, trace=rounds)

        blocks.append({
            "block_index": block_idx,
            "block_hex": block.hex(),
            "schedule": _words_hex(ws),
            "rounds": [
                dict(zip(STATE_NAMES, _words_hex(working))) for working in rounds
            ],
            "chaining_value": _words_hex(state),
        })

    return {
        "message_hex": message.hex(),
        "message_length_bytes": len(message),
        "digest_hex": finalize_digest(state).hex(),
        "blocks": blocks,
    }


def write_yaml(trace: Dict, output_path: str) -> None:
    """Save a trace to YAML format."""
    with open(output_path, "w") as f:
        yaml.dump(trace, f, default_flow_style=False, sort_keys=False)


def write_sqlite(trace: Dict, output_path: str) -> None:
    """Save a trace to a SQLite database, replacing any existing file."""
    if os.path.exists(output_path):
        os.remove(output_path)

    conn = sqlite3.connect(output_path)
    try:
        cursor = conn.cursor()
        cursor.executescript("""
            CREATE TABLE metadata (
                message_hex TEXT NOT NULL,
                message_length_bytes INTEGER NOT NULL,
                digest_hex TEXT NOT NULL,
                total_blocks INTEGER NOT NULL
            );

            CREATE TABLE blocks (
                block_index INTEGER PRIMARY KEY,
                block_hex TEXT NOT NULL,
                chaining_value TEXT NOT NULL
            );

            CREATE TABLE rounds (
                block_index INTEGER NOT NULL,
                round_index INTEGER NOT NULL,
                w TEXT NOT NULL,
                a TEXT NOT NULL,
                b TEXT NOT NULL,
                c TEXT NOT NULL,
                d TEXT NOT NULL,
                e TEXT NOT NULL,
                f TEXT NOT NULL,
                g TEXT NOT NULL,
                h TEXT NOT NULL,
                FOREIGN KEY (block_index) REFERENCES blocks(block_index)
            );

            CREATE INDEX idx_rounds_block ON rounds(block_index);
        """)

        cursor.execute(
            "INSERT INTO metadata VALUES (?, ?, ?, ?)",
            (
                trace["message_hex"],
                trace["message_length_bytes"],
                trace["digest_hex"],
                len(trace["blocks"]),
            ),
        )

        for block in trace["blocks"]:
            idx = block["block_index"]
            cursor.execute(
                "INSERT INTO blocks VALUES (?, ?, ?)",
                (idx, block["block_hex"], " ".join(block["chaining_value"])),
            )
            cursor.executemany(
                "INSERT INTO rounds VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    (idx, round_idx, block["schedule"][round_idx])
                    + tuple(working[name] for name in STATE_NAMES)
                    for round_idx, working in enumerate(block["rounds"])
                ],
            )
        conn.commit()
    finally:
        conn.close()


def _print_summary(trace: Dict) -> None:
    """Print the chaining value of each block and the digest."""
    print("\nChaining values:")
    for block in trace["blocks"]:
        print(f"  [{block['block_index']}] {' '.join(block['chaining_value'])}")
    print(f"digest: {trace['digest_hex']}")


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Trace SHA-256 round by round and save the intermediate values"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "message",
        nargs="?",
        help="Message to trace (UTF-8)",
    )
    source.add_argument(
        "-f",
        "--file",
        help="Trace the raw bytes of this file instead",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["yaml", "sqlite"],
        default="yaml",
        help="Output format: yaml or sqlite (default: yaml)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output path (default: trace.yaml or trace.db)",
    )
    args = parser.parse_args(argv)

    if args.file is not None:
        try:
            with open(args.file, "rb") as f:
                data = f.read()
        except OSError as e:
            sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
            return 1
    else:
        data = args.message.encode("utf-8")

    output_path = args.output
    if output_path is None:
        output_path = "trace.db" if args.format == "sqlite" else "trace.yaml"

    print(f"Message length: {len(data):,} bytes")
    trace = trace_message(data)
    print(f"Processing {len(trace['blocks'])} block(s)...")

    try:
        if args.format == "sqlite":
            write_sqlite(trace, output_path)
        else:
            write_yaml(trace, output_path)
    except (OSError, sqlite3.Error) as e:
        sys.stderr.write(f"Error writing '{output_path}': {e}\n")
        return 1

    print(f"Done! Saved trace of {len(trace['blocks'])} block(s) to {output_path}")
    _print_summary(trace)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
