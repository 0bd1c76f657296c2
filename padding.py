"""SHA-256 message padding.

The padded message is

    message || 0x80 || 0x00 * k || len64

where `len64` is the bit length of the message modulo 2**64, written as a
64-bit big-endian integer, and `k` is the smallest count that makes the total
a multiple of 64 bytes.

Blocks are produced lazily: full 64-byte windows of the input are yielded as
they are, and only the tail (plus marker and length) is copied into a fresh
buffer.
"""

from __future__ import annotations

from typing import Iterator, List, Union

BLOCK_SIZE = 64
LENGTH_FIELD_SIZE = 8

BytesLike = Union[bytes, bytearray, memoryview]


def _as_bytes(data: BytesLike) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected a bytes-like object, got {type(data).__name__}")


def length_field(n_bytes: int) -> bytes:
    """Return the 8-byte big-endian bit length of an `n_bytes` message."""
    return ((n_bytes * 8) & 0xFFFFFFFFFFFFFFFF).to_bytes(LENGTH_FIELD_SIZE, byteorder="big")


def padded_length(n_bytes: int) -> int:
    """Number of bytes produced when padding an `n_bytes` message."""
    full = n_bytes - n_bytes % BLOCK_SIZE
    remaining = n_bytes % BLOCK_SIZE
    if remaining + 1 + LENGTH_FIELD_SIZE <= BLOCK_SIZE:
        return full + BLOCK_SIZE
    return full + 2 * BLOCK_SIZE


def iter_blocks(data: BytesLike) -> Iterator[bytes]:
    """Yield the padded message as successive 64-byte blocks.

    There is always at least one block, and the 0x80 marker is always
    present. An input whose length is already a multiple of 64 (including
    the empty input) gets one extra block holding only the marker and the
    length.
    """
    message = _as_bytes(data)
    n = len(message)

    offset = 0
    while n - offset >= BLOCK_SIZE:
        yield message[offset : offset + BLOCK_SIZE]
        offset += BLOCK_SIZE

    remaining = n - offset
    min_length = remaining + 1 + LENGTH_FIELD_SIZE
    tail_size = BLOCK_SIZE if min_length <= BLOCK_SIZE else 2 * BLOCK_SIZE

    tail = bytearray(tail_size)
    tail[:remaining] = message[offset:]
    tail[remaining] = 0x80
    tail[-LENGTH_FIELD_SIZE:] = length_field(n)

    for start in range(0, tail_size, BLOCK_SIZE):
        yield bytes(tail[start : start + BLOCK_SIZE])


def pad_message(data: BytesLike) -> bytes:
    """Pad a raw message to a multiple of 64 bytes (512 bits)."""
    return b"".join(iter_blocks(data))


def split_into_blocks(padded: BytesLike) -> List[bytes]:
    """Split an already padded message into 64-byte blocks."""
    data = _as_bytes(padded)
    if len(data) == 0 or len(data) % BLOCK_SIZE != 0:
        raise ValueError(
            f"Padded message length must be a positive multiple of 64 bytes, got {len(data)}"
        )
    return [data[i : i + BLOCK_SIZE] for i in range(0, len(data), BLOCK_SIZE)]
