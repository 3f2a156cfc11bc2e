"""AES-OCB encryption, printable keys, nonce framing and link delay-queue simulation."""

__version__ = "0.1.0"