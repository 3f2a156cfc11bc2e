"""Block primitives for OCB mode.

A block is a 16-byte ``bytes`` value. Bytes are in the order they take in
memory; arithmetic treats the block as a big-endian 128-bit integer.
"""

from __future__ import annotations

from collections.abc import Sequence

BLOCK_SIZE = 16

_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1
_REDUCTION = 135  # x^128 + x^7 + x^2 + x + 1, low byte


def _check_block(block: bytes, name: str = "block") -> None:
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"{name} must be {BLOCK_SIZE} bytes, got {len(block)}")


def xor_block(a: bytes, b: bytes) -> bytes:
    """Return the bytewise exclusive-or of two equally long byte strings."""
    if len(a) != len(b):
        raise ValueError(f"cannot xor blocks of lengths {len(a)} and {len(b)}")
    return (int.from_bytes(a, "big") ^ int.from_bytes(b, "big")).to_bytes(len(a), "big")


def double_block(block: bytes) -> bytes:
    """Multiply a block by x in GF(2^128), as OCB does to derive L values."""
    _check_block(block)
    value = int.from_bytes(block, "big")
    carry = value >> 127
    doubled = ((value << 1) & _MASK128) ^ (_REDUCTION if carry else 0)
    return doubled.to_bytes(BLOCK_SIZE, "big")


def ntz(value: int) -> int:
    """Return the number of trailing zero bits of a positive integer."""
    if value <= 0:
        raise ValueError("ntz is defined only for positive integers")
    return (value & -value).bit_length() - 1


def gen_offset(ktop_str: Sequence[int], bot: int) -> bytes:
    """Build the initial offset from the stretched nonce key and a bit shift.

    ``ktop_str`` holds three 64-bit words; the result is the 128 bits that
    start ``bot`` bits into their concatenation.
    """
    if len(ktop_str) != 3:
        raise ValueError("ktop_str must hold exactly three 64-bit words")
    if not 0 <= bot < 64:
        raise ValueError("bot must be in the range 0..63")
    words = [w & _MASK64 for w in ktop_str]
    if bot == 0:
        left, right = words[0], words[1]
    else:
        left = ((words[0] << bot) | (words[1] >> (64 - bot))) & _MASK64
        right = ((words[1] << bot) | (words[2] >> (64 - bot))) & _MASK64
    return left.to_bytes(8, "big") + right.to_bytes(8, "big")