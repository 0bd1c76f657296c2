"""SHA-256 message schedule.

A 64-byte block is read as 16 big-endian words `w[0..15]`, then extended to
64 words with

    w[t] = σ1(w[t-2]) + w[t-7] + σ0(w[t-15]) + w[t-16]   (mod 2**32)
"""

from __future__ import annotations

from typing import List, Sequence

from compress import MASK32, add32, rotr


def _shr(x: int, n: int) -> int:
    """Logical right shift of a 32-bit word."""
    return (x & MASK32) >> n


def gamma0(x: int) -> int:
    """SHA-256 function σ0 used in the message schedule."""
    return rotr(x, 7) ^ rotr(x, 18) ^ _shr(x, 3)


def gamma1(x: int) -> int:
    """SHA-256 function σ1 used in the message schedule."""
    return rotr(x, 17) ^ rotr(x, 19) ^ _shr(x, 10)


def block_to_words(block: bytes) -> List[int]:
    """Read a 64-byte block as 16 big-endian 32-bit words."""
    if len(block) != 64:
        raise ValueError(f"Expected 64-byte block, got {len(block)}")
    return [int.from_bytes(block[4 * i : 4 * (i + 1)], byteorder="big") for i in range(16)]


def expand_message_schedule(w: Sequence[int]) -> List[int]:
    """Expand an initial schedule W[0..15] to W[0..63].

    Only the first 16 words of `w` are used; the caller's sequence is left
    untouched.
    """
    if len(w) < 16:
        raise ValueError(
            f"Message schedule must contain at least 16 words, got {len(w)}"
        )

    schedule = [word & MASK32 for word in w[:16]]
    for t in range(16, 64):
        schedule.append(
            add32(gamma1(schedule[t - 2]), schedule[t - 7], gamma0(schedule[t - 15]), schedule[t - 16])
        )
    return schedule


def build_message_schedule(block: bytes) -> List[int]:
    """Given a 512-bit block, build the 64-word message schedule w[0..63]."""
    return expand_message_schedule(block_to_words(block))
