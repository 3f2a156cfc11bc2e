"""AES-128 in OCB mode: authenticated encryption with associated data.

Only whole messages are processed. Tags are always 16 bytes and nonces are
always 12 bytes. Passing ``None`` as the associated data reuses the
associated data of the previous message.
"""

from __future__ import annotations

import hmac

from .ocb_block import BLOCK_SIZE, ntz, xor_block
from .ocb_hash import NONCE_LEN, OcbKeySchedule, hash_associated_data

TAG_LEN = 16

_ZERO_BLOCK = bytes(BLOCK_SIZE)


class OcbError(ValueError):
    """Base class for OCB failures."""


class NotSupportedError(OcbError):
    """Raised when an unsupported length or usage mode is requested."""


class InvalidTagError(OcbError):
    """Raised when a ciphertext fails authentication."""


class OcbAes:
    """An OCB context bound to one AES-128 key."""

    def __init__(self, key: bytes, nonce_len: int = NONCE_LEN, tag_len: int = TAG_LEN) -> None:
        if nonce_len != NONCE_LEN:
            raise NotSupportedError(f"nonce length must be {NONCE_LEN}, got {nonce_len}")
        if tag_len != TAG_LEN:
            raise NotSupportedError(f"tag length must be {TAG_LEN}, got {tag_len}")
        self._schedule: OcbKeySchedule | None = OcbKeySchedule(key)
        self._ad_hash = _ZERO_BLOCK

    def _live_schedule(self) -> OcbKeySchedule:
        if self._schedule is None:
            raise OcbError("context has been cleared")
        return self._schedule

    def _associated_hash(self, schedule: OcbKeySchedule, associated_data: bytes | None) -> bytes:
        if associated_data is not None:
            self._ad_hash = hash_associated_data(schedule, associated_data)
        return self._ad_hash

    @staticmethod
    def _check_nonce(nonce: bytes) -> bytes:
        nonce = bytes(nonce)
        if len(nonce) != NONCE_LEN:
            raise OcbError(f"nonce must be {NONCE_LEN} bytes, got {len(nonce)}")
        return nonce

    def _process(
        self, schedule: OcbKeySchedule, nonce: bytes, data: bytes, decrypting: bool
    ) -> tuple[bytes, bytes, bytes]:
        """Run the OCB body; return (output, plaintext checksum, final offset)."""
        offset = schedule.offset_from_nonce(nonce)
        checksum = _ZERO_BLOCK
        out = bytearray()
        full_len = len(data) - len(data) % BLOCK_SIZE
        cipher = schedule.decrypt_block if decrypting else schedule.encrypt_block
        for number, start in enumerate(range(0, full_len, BLOCK_SIZE), start=1):
            offset = xor_block(offset, schedule.l(ntz(number)))
            chunk = data[start:start + BLOCK_SIZE]
            result = xor_block(offset, cipher(xor_block(offset, chunk)))
            plain = result if decrypting else chunk
            checksum = xor_block(checksum, plain)
            out += result
        tail = data[full_len:]
        if tail:
            offset = xor_block(offset, schedule.lstar)
            pad = schedule.encrypt_block(offset)
            result = xor_block(tail, pad[:len(tail)])
            plain = result if decrypting else tail
            padded = plain + b"\x80" + bytes(BLOCK_SIZE - len(plain) - 1)
            checksum = xor_block(checksum, padded)
            out += result
        return bytes(out), checksum, offset

    @staticmethod
    def _tag(schedule: OcbKeySchedule, checksum: bytes, offset: bytes, ad_hash: bytes) -> bytes:
        final = xor_block(xor_block(offset, schedule.ldollar), checksum)
        return xor_block(schedule.encrypt_block(final), ad_hash)

    def encrypt_detached(
        self, nonce: bytes, plaintext: bytes, associated_data: bytes | None = b""
    ) -> tuple[bytes, bytes]:
        """Encrypt a message; return the ciphertext and its tag separately."""
        schedule = self._live_schedule()
        nonce = self._check_nonce(nonce)
        ad_hash = self._associated_hash(schedule, associated_data)
        ciphertext, checksum, offset = self._process(schedule, nonce, bytes(plaintext), False)
        return ciphertext, self._tag(schedule, checksum, offset, ad_hash)

    def encrypt(
        self, nonce: bytes, plaintext: bytes, associated_data: bytes | None = b""
    ) -> bytes:
        """Encrypt a message; return the ciphertext with the tag appended."""
        ciphertext, tag = self.encrypt_detached(nonce, plaintext, associated_data)
        return ciphertext + tag

    def decrypt(
        self,
        nonce: bytes,
        ciphertext: bytes,
        associated_data: bytes | None = b"",
        tag: bytes | None = None,
    ) -> bytes:
        """Decrypt and authenticate a message.

        Without ``tag`` the last 16 bytes of ``ciphertext`` are taken as the tag.
        """
        schedule = self._live_schedule()
        nonce = self._check_nonce(nonce)
        ciphertext = bytes(ciphertext)
        if tag is None:
            if len(ciphertext) < TAG_LEN:
                raise InvalidTagError("ciphertext is shorter than the tag")
            ciphertext, tag = ciphertext[:-TAG_LEN], ciphertext[-TAG_LEN:]
        tag = bytes(tag)
        ad_hash = self._associated_hash(schedule, associated_data)
        plaintext, checksum, offset = self._process(schedule, nonce, ciphertext, True)
        expected = self._tag(schedule, checksum, offset, ad_hash)
        if len(tag) != TAG_LEN or not hmac.compare_digest(expected, tag):
            raise InvalidTagError("authentication failed")
        return plaintext

    def clear(self) -> None:
        """Forget the key material; the context is unusable afterwards."""
        self._schedule = None
        self._ad_hash = _ZERO_BLOCK