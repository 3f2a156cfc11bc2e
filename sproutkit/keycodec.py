"""Base64 encoding of 128-bit session keys."""

from __future__ import annotations

import base64
import binascii

RAW_LEN = 16
ENCODED_LEN = 24


class KeyCodecError(ValueError):
    """Raised when a key cannot be encoded or decoded."""


def base64_encode(raw: bytes) -> str:
    """Encode a 16-byte key as 24 characters of padded base64."""
    raw = bytes(raw)
    if len(raw) != RAW_LEN:
        raise KeyCodecError(f"raw key must be {RAW_LEN} bytes, got {len(raw)}")
    encoded = base64.b64encode(raw).decode("ascii")
    if len(encoded) != ENCODED_LEN:
        raise KeyCodecError("unexpected base64 output length")
    return encoded


def base64_decode(b64: str | bytes) -> bytes:
    """Decode 24 characters of base64 that must represent exactly 16 bytes."""
    if isinstance(b64, str):
        try:
            text = b64.encode("ascii")
        except UnicodeEncodeError as exc:
            raise KeyCodecError("key is not valid base64") from exc
    else:
        text = bytes(b64)
    if len(text) != ENCODED_LEN:
        raise KeyCodecError(f"encoded key must be {ENCODED_LEN} characters, got {len(text)}")
    try:
        raw = base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise KeyCodecError("key is not valid base64") from exc
    if len(raw) != RAW_LEN:
        raise KeyCodecError(f"key must represent {RAW_LEN} octets")
    return raw