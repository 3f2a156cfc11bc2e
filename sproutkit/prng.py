"""Random bytes and integers read from the system's random device."""

from __future__ import annotations

import sys
from types import TracebackType
from typing import BinaryIO

from .crypto import CryptoError

RANDOM_DEVICE = "/dev/urandom"


class PRNG:
    """Reader over the random device; usable as a context manager."""

    def __init__(self) -> None:
        try:
            self._file: BinaryIO | None = open(RANDOM_DEVICE, "rb")
        except OSError as exc:
            raise CryptoError(f"{RANDOM_DEVICE}: {exc.strerror or exc}") from exc

    def fill(self, size: int) -> bytes:
        """Return exactly ``size`` random bytes."""
        if size == 0:
            return b""
        if self._file is None:
            raise CryptoError(f"{RANDOM_DEVICE}: file is closed")
        data = self._file.read(size)
        if len(data) != size:
            raise CryptoError(f"Could not read from {RANDOM_DEVICE}")
        return data

    def _unsigned(self, size: int) -> int:
        return int.from_bytes(self.fill(size), sys.byteorder)

    def uint8(self) -> int:
        """Return a random integer in 0..255."""
        return self._unsigned(1)

    def uint32(self) -> int:
        """Return a random unsigned 32-bit integer."""
        return self._unsigned(4)

    def uint64(self) -> int:
        """Return a random unsigned 64-bit integer."""
        return self._unsigned(8)

    def close(self) -> None:
        """Close the random device."""
        if self._file is not None:
            handle, self._file = self._file, None
            try:
                handle.close()
            except OSError as exc:
                raise CryptoError(f"{RANDOM_DEVICE}: {exc.strerror or exc}") from exc

    def __enter__(self) -> PRNG:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()