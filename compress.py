"""SHA-256 compression function.

This module holds the word-level primitives and the 64-round compression loop
that folds one message schedule into the running hash state.

One round, given working state words `(a, b, c, d, e, f, g, h)`, round
constant `k` and schedule word `w`:

    T1 = h + Σ1(e) + ch(e, f, g) + k + w
    T2 = Σ0(a) + maj(a, b, c)

    h, g, f, e, d, c, b, a = g, f, e, d + T1, c, b, a, T1 + T2

After all 64 rounds, the working state is added word-wise to the chaining
value of the block. All additions are performed modulo 2**32.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple


MASK32 = 0xFFFFFFFF

State = Tuple[int, int, int, int, int, int, int, int]

# Initial hash value H(0): first 32 bits of the fractional parts of the
# square roots of the first 8 primes 2..19 (FIPS 180-4, 5.3.3).
H0: State = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

# Round constants K[0..63]: first 32 bits of the fractional parts of the
# cube roots of the first 64 primes (FIPS 180-4, 4.2.2).
K_VALUES: Tuple[int, ...] = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5,
    0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3,
    0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC,
    0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7,
    0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13,
    0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3,
    0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5,
    0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208,
    0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)


def rotr(x: int, n: int) -> int:
    """Right-rotate a 32-bit word `x` by `n` bits (1 <= n <= 31)."""
    if not 1 <= n <= 31:
        raise ValueError(f"rotation amount must be in 1..31, got {n}")
    x &= MASK32
    return ((x >> n) | (x << (32 - n))) & MASK32


def add32(*words: int) -> int:
    """Sum any number of 32-bit words modulo 2**32."""
    total = 0
    for word in words:
        total += word & MASK32
    return total & MASK32


def big_sigma0(x: int) -> int:
    """Σ0, applied to `a` in every round."""
    return rotr(x, 2) ^ rotr(x, 13) ^ rotr(x, 22)


def big_sigma1(x: int) -> int:
    """Σ1, applied to `e` in every round."""
    return rotr(x, 6) ^ rotr(x, 11) ^ rotr(x, 25)


def ch(x: int, y: int, z: int) -> int:
    """Choose: bits of `y` where `x` is set, bits of `z` elsewhere."""
    return ((x & y) ^ (~x & z)) & MASK32


def maj(x: int, y: int, z: int) -> int:
    """Bitwise majority of three words."""
    return (x & y) ^ (x & z) ^ (y & z)


def compression(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    w: int,
    k: int,
) -> State:
    """Perform one SHA-256 compression round.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        32-bit words representing the current working state.
    w : int
        Message schedule word `w[t]`.
    k : int
        Round constant `K[t]`.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Working state after the round, all reduced modulo 2**32.
    """
    temp1 = add32(h, big_sigma1(e), ch(e, f, g), k, w)
    temp2 = add32(big_sigma0(a), maj(a, b, c))

    return (
        add32(temp1, temp2),
        a & MASK32,
        b & MASK32,
        c & MASK32,
        add32(d, temp1),
        e & MASK32,
        f & MASK32,
        g & MASK32,
    )


def compress64(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    ws: Sequence[int],
    trace: Optional[List[State]] = None,
) -> State:
    """Run the full 64-round SHA-256 compression loop for one block.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        Initial working state words (the chaining value of the block).
    ws : Sequence[int]
        The 64-word message schedule `w[0..63]` for this block.
    trace : list, optional
        When given, the working state after each round is appended to it.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Working state after 64 rounds. This is *not* yet added to the
        chaining value; see `update_hash_state`.
    """
    if len(ws) != 64:
        raise ValueError(f"compress64 expects 64 message schedule words, got {len(ws)}")

    working = (a, b, c, d, e, f, g, h)
    for t in range(64):
        working = compression(*working, ws[t], K_VALUES[t])
        if trace is not None:
            trace.append(working)

    return working


def update_hash_state(state: Sequence[int], working: Sequence[int]) -> State:
    """Add the post-round working registers into the chaining value.

        H_{i+1}[j] = (H_i[j] + working[j]) mod 2^32
    """
    if len(state) != 8 or len(working) != 8:
        raise ValueError(
            f"expected 8-word state and working registers, got {len(state)} and {len(working)}"
        )
    return tuple(add32(s, w) for s, w in zip(state, working))


def compress_block(
    state: Sequence[int],
    ws: Sequence[int],
    trace: Optional[List[State]] = None,
) -> State:
    """Fold one message schedule into `state` and return the next state."""
    working = compress64(*state, ws, trace=trace)
    return update_hash_state(state, working)
