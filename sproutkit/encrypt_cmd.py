"""Command that frames standard input as a message under a fresh random key."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

from .crypto import Base64Key, CryptoError, Message, Nonce, Session, parse_int

_UINT64_MASK = (1 << 64) - 1


def _program_name() -> str:
    if sys.argv and sys.argv[0]:
        return os.path.basename(sys.argv[0])
    return "encrypt"


def main(argv: Sequence[str] | None = None) -> int:
    """Read a message from stdin and write its wire form to stdout.

    The single argument is the nonce value. The generated key is reported
    on stderr.
    """
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print(f"Usage: {_program_name()} NONCE", file=sys.stderr)
        return 1

    try:
        key = Base64Key.random()
        with Session(key) as session:
            # A negative value wraps around as an unsigned 64-bit counter.
            nonce = Nonce(parse_int(args[0]) & _UINT64_MASK)
            try:
                plaintext = sys.stdin.buffer.read()
            except OSError as exc:
                print(f"read: {exc.strerror or exc}", file=sys.stderr)
                return 1
            ciphertext = session.encrypt(Message(nonce, plaintext))

        print(f"Key: {key.printable_key()}", file=sys.stderr)
        out = sys.stdout.buffer
        out.write(ciphertext)
        out.flush()
    except CryptoError as exc:
        print(exc.text, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())