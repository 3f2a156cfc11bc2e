"""Session keys, nonces, messages and the session that frames them."""

from __future__ import annotations

import os
import re
import resource
from dataclasses import dataclass
from types import TracebackType

from .keycodec import KeyCodecError, base64_decode, base64_encode
from .ocb import OcbAes, OcbError

KEY_LEN = 16
PRINTABLE_KEY_LEN = 22
RANDOM_DEVICE = "/dev/urandom"

_LONG_MIN = -(1 << 63)
_LONG_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1
_INTEGER = re.compile(r"[ \t\n\v\f\r]*[+-]?[0-9]+")


class CryptoError(Exception):
    """Raised when a key, nonce or message is malformed or a crypto step fails."""

    def __init__(self, text: str, fatal: bool = False) -> None:
        super().__init__(text)
        self.text = text
        self.fatal = fatal


def parse_int(text: str) -> int:
    """Parse a whole string as a signed 64-bit decimal integer.

    Leading whitespace and a sign are accepted; trailing characters are not.
    An empty string parses as zero.
    """
    if text == "":
        return 0
    if not _INTEGER.fullmatch(text):
        raise CryptoError("Bad integer.")
    value = int(text.strip(" \t\n\v\f\r"))
    if not _LONG_MIN <= value <= _LONG_MAX:
        raise CryptoError("Bad integer.")
    return value


class Base64Key:
    """A 128-bit key written as 22 characters of unpadded base64."""

    def __init__(self, printable_key: str) -> None:
        if len(printable_key) != PRINTABLE_KEY_LEN:
            raise CryptoError(f"Key must be {PRINTABLE_KEY_LEN} letters long.")
        try:
            self._key = base64_decode(printable_key + "==")
        except KeyCodecError as exc:
            raise CryptoError("Key must be well-formed base64.") from exc
        if len(self._key) != KEY_LEN:
            raise CryptoError(f"Key must represent {KEY_LEN} octets.")
        # Catches spare bits set after the first 128.
        if printable_key != self.printable_key():
            raise CryptoError("Base64 key was not encoded 128-bit key.")

    @classmethod
    def random(cls) -> Base64Key:
        """Create a key from the system's random source."""
        try:
            raw = os.urandom(KEY_LEN)
        except OSError as exc:
            raise CryptoError(f"Could not read from {RANDOM_DEVICE}") from exc
        key = cls.__new__(cls)
        key._key = raw
        return key

    def printable_key(self) -> str:
        """Return the key as 22 base64 characters without padding."""
        encoded = base64_encode(self._key)
        if not encoded.endswith("=="):
            raise CryptoError(f"Unexpected output from base64_encode: {encoded}")
        return encoded[:PRINTABLE_KEY_LEN]

    def data(self) -> bytes:
        """Return the 16 raw key bytes."""
        return self._key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Base64Key):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        return "Base64Key(<hidden>)"


class Nonce:
    """A 12-byte nonce: four zero bytes and a big-endian 64-bit counter."""

    NONCE_LEN = 12

    def __init__(self, value: int) -> None:
        if not 0 <= value <= _UINT64_MAX:
            raise ValueError("nonce value must fit in 64 unsigned bits")
        self._bytes = bytes(4) + value.to_bytes(8, "big")

    @classmethod
    def from_bytes(cls, data: bytes) -> Nonce:
        """Build a nonce from its 8-byte wire representation."""
        data = bytes(data)
        if len(data) != 8:
            raise CryptoError("Nonce representation must be 8 octets long.")
        return cls(int.from_bytes(data, "big"))

    def cc_str(self) -> bytes:
        """Return the 8 bytes that go on the wire."""
        return self._bytes[4:]

    def data(self) -> bytes:
        """Return all 12 nonce bytes."""
        return self._bytes

    def val(self) -> int:
        """Return the 64-bit counter value."""
        return int.from_bytes(self._bytes[4:], "big")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Nonce):
            return NotImplemented
        return self._bytes == other._bytes

    def __hash__(self) -> int:
        return hash(self._bytes)

    def __repr__(self) -> str:
        return f"Nonce({self.val()})"


@dataclass
class Message:
    """A nonce together with the message body."""

    nonce: Nonce
    text: bytes


class Session:
    """Frames messages for one key; usable as a context manager."""

    RECEIVE_MTU = 2048

    def __init__(self, key: Base64Key) -> None:
        self.key = key
        try:
            self._ctx: OcbAes | None = OcbAes(key.data(), Nonce.NONCE_LEN, 16)
        except (OcbError, ValueError) as exc:
            raise CryptoError("Could not initialize AES-OCB context.") from exc

    def _check_open(self) -> None:
        if self._ctx is None:
            raise CryptoError("Session is closed.")

    def encrypt(self, message: Message) -> bytes:
        """Return the wire form of a message: nonce bytes followed by the body."""
        self._check_open()
        return message.nonce.cc_str() + bytes(message.text)

    def decrypt(self, ciphertext: bytes) -> Message:
        """Split a wire packet back into its nonce and body."""
        self._check_open()
        ciphertext = bytes(ciphertext)
        if len(ciphertext) < 8:
            raise CryptoError("Packet is too short to hold a nonce.")
        body = ciphertext[8:]
        if len(body) > self.RECEIVE_MTU:
            raise CryptoError("Packet is larger than the receive MTU.")
        return Message(Nonce.from_bytes(ciphertext[:8]), body)

    def close(self) -> None:
        """Clear the cipher context."""
        if self._ctx is not None:
            self._ctx.clear()
            self._ctx = None

    def __enter__(self) -> Session:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


_saved_core_limit = 0


def disable_dumping_core() -> None:
    """Set the soft core-file limit to zero, remembering the previous value."""
    global _saved_core_limit
    soft, hard = resource.getrlimit(resource.RLIMIT_CORE)
    _saved_core_limit = soft
    resource.setrlimit(resource.RLIMIT_CORE, (0, hard))


def reenable_dumping_core() -> None:
    """Restore the soft core-file limit saved by disable_dumping_core; never fails."""
    try:
        _, hard = resource.getrlimit(resource.RLIMIT_CORE)
        resource.setrlimit(resource.RLIMIT_CORE, (_saved_core_limit, hard))
    except (OSError, ValueError):
        pass