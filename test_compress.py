import pytest

from compress import (
    H0,
    K_VALUES,
    MASK32,
    add32,
    big_sigma0,
    big_sigma1,
    ch,
    compress64,
    compress_block,
    compression,
    maj,
    rotr,
    update_hash_state,
)
from padding import pad_message
from schedule import build_message_schedule


ABC_SCHEDULE = build_message_schedule(pad_message(b"abc"))


def test_constant_tables_have_expected_shape():
    assert len(K_VALUES) == 64
    assert len(H0) == 8
    assert all(0 <= k <= MASK32 for k in K_VALUES)
    assert K_VALUES[0] == 0x428A2F98
    assert K_VALUES[63] == 0xC67178F2
    assert H0[0] == 0x6A09E667
    assert H0[7] == 0x5BE0CD19


@pytest.mark.parametrize(
    "x,n,expected",
    [
        (0x00000001, 1, 0x80000000),
        (0x80000000, 31, 0x00000001),
        (0x12345678, 8, 0x78123456),
        (0x12345678, 16, 0x56781234),
        (0xFFFFFFFF, 13, 0xFFFFFFFF),
    ],
)
def test_rotr(x, n, expected):
    assert rotr(x, n) == expected


@pytest.mark.parametrize("n", [0, 32, -1])
def test_rotr_rejects_out_of_range_amount(n):
    with pytest.raises(ValueError):
        rotr(0x12345678, n)


def test_add32_wraps_modulo_2_32():
    assert add32() == 0
    assert add32(0xFFFFFFFF, 1) == 0
    assert add32(0xFFFFFFFF, 0xFFFFFFFF, 0xFFFFFFFF) == 0xFFFFFFFD
    assert add32(*([0x80000000] * 5)) == 0x80000000


def test_boolean_functions():
    assert ch(0xFFFFFFFF, 0x12345678, 0x9ABCDEF0) == 0x12345678
    assert ch(0x00000000, 0x12345678, 0x9ABCDEF0) == 0x9ABCDEF0
    assert ch(0xFFFF0000, 0x12345678, 0x9ABCDEF0) == 0x1234DEF0
    assert maj(0xFFFF0000, 0x0000FFFF, 0xFF00FF00) == 0xFF00FF00
    assert maj(0, 0, 0xFFFFFFFF) == 0


def test_big_sigmas_are_xor_of_rotations():
    x = 0x6A09E667
    assert big_sigma0(x) == rotr(x, 2) ^ rotr(x, 13) ^ rotr(x, 22)
    assert big_sigma1(x) == rotr(x, 6) ^ rotr(x, 11) ^ rotr(x, 25)


def test_first_round_of_abc_matches_fips_example():
    """FIPS 180-2 appendix B.1 lists the working state after round t=0."""
    state = compression(*H0, ABC_SCHEDULE[0], K_VALUES[0])
    assert state == (
        0x5D6AEBCD,
        0x6A09E667,
        0xBB67AE85,
        0x3C6EF372,
        0xFA2A4622,
        0x510E527F,
        0x9B05688C,
        0x1F83D9AB,
    )


def test_compression_shifts_registers():
    a, b, c, d, e, f, g, h = 1, 2, 3, 4, 5, 6, 7, 8
    new = compression(a, b, c, d, e, f, g, h, 0x67452301, K_VALUES[10])
    assert new[1:4] == (a, b, c)
    assert new[5:8] == (e, f, g)


def test_compress64_rejects_wrong_schedule_length():
    with pytest.raises(ValueError):
        compress64(*H0, [0] * 63)


def test_compress64_trace_records_every_round():
    trace = []
    working = compress64(*H0, ABC_SCHEDULE, trace=trace)
    assert len(trace) == 64
    assert trace[-1] == working
    assert trace[0][0] == 0x5D6AEBCD


def test_compress_block_feeds_forward_into_state():
    working = compress64(*H0, ABC_SCHEDULE)
    new_state = compress_block(H0, ABC_SCHEDULE)
    assert new_state == tuple((h + w) & MASK32 for h, w in zip(H0, working))
    assert new_state[0] == 0xBA7816BF
    assert new_state[7] == 0xF20015AD


def test_compress_block_leaves_input_state_untouched():
    state = list(H0)
    compress_block(state, ABC_SCHEDULE)
    assert state == list(H0)


def test_update_hash_state_rejects_wrong_width():
    with pytest.raises(ValueError):
        update_hash_state(H0, (0,) * 7)
