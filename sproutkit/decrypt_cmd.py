"""Command that splits a framed message read from stdin."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

from .crypto import Base64Key, CryptoError, Session


def _program_name() -> str:
    if sys.argv and sys.argv[0]:
        return os.path.basename(sys.argv[0])
    return "decrypt"


def _as_signed64(value: int) -> int:
    return value - (1 << 64) if value >= (1 << 63) else value


def main(argv: Sequence[str] | None = None) -> int:
    """Read a packet from stdin, report its nonce on stderr, write its body.

    The single argument is the 22-character printable key.
    """
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print(f"Usage: {_program_name()} KEY", file=sys.stderr)
        return 1

    try:
        key = Base64Key(args[0])
        with Session(key) as session:
            try:
                ciphertext = sys.stdin.buffer.read()
            except OSError as exc:
                print(f"read: {exc.strerror or exc}", file=sys.stderr)
                return 1
            message = session.decrypt(ciphertext)

        print(f"Nonce = {_as_signed64(message.nonce.val())}", file=sys.stderr)
        out = sys.stdout.buffer
        out.write(message.text)
        out.flush()
    except CryptoError as exc:
        print(exc.text, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())