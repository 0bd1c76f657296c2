import pytest

from compress import rotr
from padding import pad_message
from schedule import (
    block_to_words,
    build_message_schedule,
    expand_message_schedule,
    gamma0,
    gamma1,
)


def test_abc_schedule_matches_fips_example():
    ws = build_message_schedule(pad_message(b"abc"))

    assert len(ws) == 64
    assert ws[0] == 0x61626380
    assert ws[1:15] == [0] * 14
    assert ws[15] == 0x00000018
    assert ws[16] == 0x61626380
    assert ws[17] == 0x000F0000


def test_gammas_use_logical_shift():
    x = 0x80000000
    assert gamma0(x) == rotr(x, 7) ^ rotr(x, 18) ^ (x >> 3)
    assert gamma1(x) == rotr(x, 17) ^ rotr(x, 19) ^ (x >> 10)
    assert gamma0(0) == 0
    assert gamma1(0) == 0


def test_block_to_words_is_big_endian():
    block = bytes(range(64))
    words = block_to_words(block)
    assert words[0] == 0x00010203
    assert words[15] == 0x3C3D3E3F


@pytest.mark.parametrize("length", [0, 63, 65, 128])
def test_build_message_schedule_rejects_wrong_block_size(length):
    with pytest.raises(ValueError):
        build_message_schedule(b"\x00" * length)


def test_expand_message_schedule_keeps_first_sixteen_words():
    w16 = [(0x01020304 * i) & 0xFFFFFFFF for i in range(16)]
    original = list(w16)
    ws = expand_message_schedule(w16)

    assert ws[:16] == original
    assert w16 == original
    for t in range(16, 64):
        assert ws[t] == (gamma1(ws[t - 2]) + ws[t - 7] + gamma0(ws[t - 15]) + ws[t - 16]) & 0xFFFFFFFF


def test_expand_message_schedule_requires_sixteen_words():
    with pytest.raises(ValueError):
        expand_message_schedule([0] * 15)


def test_all_ones_block_stays_within_32_bits():
    ws = build_message_schedule(b"\xff" * 64)
    assert all(0 <= w <= 0xFFFFFFFF for w in ws)
