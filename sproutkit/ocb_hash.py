"""Key-dependent OCB values, nonce offsets and the associated-data hash."""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .ocb_block import BLOCK_SIZE, double_block, gen_offset, ntz, xor_block

KEY_LEN = 16
NONCE_LEN = 12
L_TABLE_SIZE = 16

_MASK64 = (1 << 64) - 1
_ZERO_BLOCK = bytes(BLOCK_SIZE)


class OcbKeySchedule:
    """AES-128 key schedule together with the L values OCB derives from it."""

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != KEY_LEN:
            raise ValueError(f"key must be {KEY_LEN} bytes, got {len(key)}")
        cipher = Cipher(algorithms.AES(key), modes.ECB())
        self._encryptor = cipher.encryptor()
        self._decryptor = cipher.decryptor()

        self.lstar = self.encrypt_block(_ZERO_BLOCK)
        self.ldollar = double_block(self.lstar)
        table = [double_block(self.ldollar)]
        for _ in range(1, L_TABLE_SIZE):
            table.append(double_block(table[-1]))
        self._l_table = tuple(table)

        self._cached_top: bytes | None = None
        self._ktop_str: tuple[int, int, int] = (0, 0, 0)

    def encrypt_block(self, block: bytes) -> bytes:
        """Encrypt one 16-byte block with the raw AES key."""
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")
        return self._encryptor.update(bytes(block))

    def decrypt_block(self, block: bytes) -> bytes:
        """Decrypt one 16-byte block with the raw AES key."""
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")
        return self._decryptor.update(bytes(block))

    def l(self, index: int) -> bytes:
        """Return L[index], doubling past the precomputed table when needed."""
        if index < 0:
            raise ValueError("L index must be non-negative")
        if index < L_TABLE_SIZE:
            return self._l_table[index]
        value = self._l_table[-1]
        for _ in range(L_TABLE_SIZE - 1, index):
            value = double_block(value)
        return value

    def offset_from_nonce(self, nonce: bytes) -> bytes:
        """Compute the initial offset for a message started with ``nonce``."""
        nonce = bytes(nonce)
        if len(nonce) != NONCE_LEN:
            raise ValueError(f"nonce must be {NONCE_LEN} bytes, got {len(nonce)}")
        top = bytearray(b"\x00\x00\x00\x01" + nonce)
        bottom = top[15] & 0x3F
        top[15] &= 0xC0
        top_bytes = bytes(top)
        if top_bytes != self._cached_top:
            self._cached_top = top_bytes
            ktop = self.encrypt_block(top_bytes)
            k0 = int.from_bytes(ktop[:8], "big")
            k1 = int.from_bytes(ktop[8:], "big")
            k2 = (k0 ^ (k0 << 8) ^ (k1 >> 56)) & _MASK64
            self._ktop_str = (k0, k1, k2)
        return gen_offset(self._ktop_str, bottom)


def hash_associated_data(schedule: OcbKeySchedule, data: bytes) -> bytes:
    """Return the OCB hash (checksum) of the associated data."""
    data = bytes(data)
    offset = _ZERO_BLOCK
    checksum = _ZERO_BLOCK
    full_len = len(data) - len(data) % BLOCK_SIZE
    for number, start in enumerate(range(0, full_len, BLOCK_SIZE), start=1):
        offset = xor_block(offset, schedule.l(ntz(number)))
        chunk = data[start:start + BLOCK_SIZE]
        checksum = xor_block(checksum, schedule.encrypt_block(xor_block(offset, chunk)))
    tail = data[full_len:]
    if tail:
        offset = xor_block(offset, schedule.lstar)
        padded = tail + b"\x80" + bytes(BLOCK_SIZE - len(tail) - 1)
        checksum = xor_block(checksum, schedule.encrypt_block(xor_block(offset, padded)))
    return checksum