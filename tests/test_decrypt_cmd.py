import io
import sys

from sproutkit import encrypt_cmd
from sproutkit.crypto import Base64Key
from sproutkit.decrypt_cmd import main


def _feed_stdin(monkeypatch, data: bytes) -> None:
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))


def _random_printable_key() -> str:
    return Base64Key.random().printable_key()


def test_usage_without_arguments(capsysbinary):
    assert main([]) == 1
    err = capsysbinary.readouterr().err.decode()
    assert "Usage:" in err
    assert "KEY" in err


def test_splits_packet(monkeypatch, capsysbinary):
    _feed_stdin(monkeypatch, (5).to_bytes(8, "big") + b"hello")
    assert main([_random_printable_key()]) == 0
    captured = capsysbinary.readouterr()
    assert captured.out == b"hello"
    assert "Nonce = 5" in captured.err.decode()


def test_large_nonce_printed_signed(monkeypatch, capsysbinary):
    _feed_stdin(monkeypatch, b"\xff" * 8 + b"body")
    assert main([_random_printable_key()]) == 0
    captured = capsysbinary.readouterr()
    assert "Nonce = -1" in captured.err.decode()
    assert captured.out == b"body"


def test_bad_key_length(monkeypatch, capsysbinary):
    _feed_stdin(monkeypatch, bytes(12))
    assert main(["short"]) == 1
    captured = capsysbinary.readouterr()
    assert "Key must be 22 letters long." in captured.err.decode()
    assert captured.out == b""


def test_short_packet_fails(monkeypatch, capsysbinary):
    _feed_stdin(monkeypatch, b"abc")
    assert main([_random_printable_key()]) == 1
    assert capsysbinary.readouterr().out == b""


def test_round_trip_with_encrypt(monkeypatch, capsysbinary):
    _feed_stdin(monkeypatch, b"round trip body")
    assert encrypt_cmd.main(["42"]) == 0
    first = capsysbinary.readouterr()
    err = first.err.decode()
    printable = next(
        l for l in err.splitlines() if l.startswith("Key: ")
    )[len("Key: "):]

    _feed_stdin(monkeypatch, first.out)
    assert main([printable]) == 0
    second = capsysbinary.readouterr()
    assert second.out == b"round trip body"
    assert "Nonce = 42" in second.err.decode()