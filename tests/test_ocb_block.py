import pytest

from sproutkit.ocb_block import double_block, gen_offset, ntz, xor_block

ZERO = bytes(16)


def test_xor_with_zero_is_identity():
    block = bytes(range(16))
    assert xor_block(block, ZERO) == block


def test_xor_with_self_is_zero():
    block = bytes(range(100, 116))
    assert xor_block(block, block) == ZERO


def test_xor_is_commutative_and_involutive():
    a = bytes(range(16))
    b = bytes(range(32, 48))
    assert xor_block(a, b) == xor_block(b, a)
    assert xor_block(xor_block(a, b), b) == a


def test_xor_length_mismatch_raises():
    with pytest.raises(ValueError):
        xor_block(bytes(16), bytes(15))


def test_double_zero_is_zero():
    assert double_block(ZERO) == ZERO


def test_double_without_carry_shifts_left():
    block = bytes(15) + b"\x01"
    assert double_block(block) == bytes(15) + b"\x02"


def test_double_with_carry_applies_reduction():
    block = b"\x80" + bytes(15)
    assert double_block(block) == bytes(15) + bytes([135])


def test_double_is_linear():
    a = bytes(range(200, 216))
    b = bytes(range(16))
    assert double_block(xor_block(a, b)) == xor_block(double_block(a), double_block(b))


def test_double_rejects_wrong_size():
    with pytest.raises(ValueError):
        double_block(bytes(8))


@pytest.mark.parametrize("shift", [0, 1, 5, 13, 31])
def test_ntz_of_power_of_two(shift):
    assert ntz(1 << shift) == shift


def test_ntz_ignores_higher_bits():
    assert ntz((1 << 4) | (1 << 9) | (1 << 20)) == 4


def test_ntz_of_zero_raises():
    with pytest.raises(ValueError):
        ntz(0)


def test_gen_offset_zero_shift_returns_first_two_words():
    words = [0x0102030405060708, 0x090A0B0C0D0E0F10, 0x1112131415161718]
    assert gen_offset(words, 0) == bytes(range(1, 17))


def test_gen_offset_byte_shift_slides_window():
    words = [0x0102030405060708, 0x090A0B0C0D0E0F10, 0x1112131415161718]
    assert gen_offset(words, 8) == bytes(range(2, 18))


@pytest.mark.parametrize("bot", [1, 7, 33, 63])
def test_gen_offset_matches_bit_window(bot):
    words = [0xDEADBEEFCAFEBABE, 0x0123456789ABCDEF, 0xFEDCBA9876543210]
    whole = (words[0] << 128) | (words[1] << 64) | words[2]
    window = (whole >> (64 - bot)) & ((1 << 128) - 1)
    assert int.from_bytes(gen_offset(words, bot), "big") == window


def test_gen_offset_rejects_bad_shift():
    with pytest.raises(ValueError):
        gen_offset([0, 0, 0], 64)


def test_gen_offset_rejects_wrong_word_count():
    with pytest.raises(ValueError):
        gen_offset([0, 0], 3)