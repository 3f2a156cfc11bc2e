# sproutkit

Building blocks for a secure datagram transport and for experimenting with
cellular-like links:

- **OCB authenticated encryption** over AES-128 (`sproutkit.ocb.OcbAes`), with
  12-byte nonces and 16-byte tags, the tag either appended to the ciphertext
  or returned separately.
- **Printable keys** (`sproutkit.crypto.Base64Key`): 128-bit keys written as
  22 base64 characters, with strict checking of what is accepted.
- **Nonces and message framing** (`sproutkit.crypto.Nonce`, `Message`,
  `Session`): 64-bit sequence numbers carried as 8 big-endian bytes in front
  of each message body.
- **Random numbers** read from `/dev/urandom` (`sproutkit.prng.PRNG`).
- **Link simulation** (`sproutkit.cellsim.DelayQueue`,
  `sproutkit.cellproxy.DelayQueue`): delay queues that release packets
  according to a recorded delivery schedule.

## Installation

```
pip install sproutkit
```

Python 3.10 or later is required. AES itself comes from the `cryptography`
package.

## Authenticated encryption

```python
from sproutkit.crypto import Base64Key
from sproutkit.ocb import InvalidTagError, OcbAes

key = Base64Key.random().data()   # 16 random bytes
nonce = bytes(12)
cipher = OcbAes(key, 12, 16)

sealed = cipher.encrypt(nonce, b"hello", b"header")
assert cipher.decrypt(nonce, sealed, b"header", None) == b"hello"

try:
    cipher.decrypt(nonce, sealed, b"other header", None)
except InvalidTagError:
    print("rejected")
```

- `encrypt(nonce, plaintext, associated_data)` returns the ciphertext with
  the 16-byte tag appended.
- `encrypt_detached(...)` returns `(ciphertext, tag)`; pass that tag to
  `decrypt` instead of `None`.
- `decrypt(nonce, ciphertext, associated_data, tag)` returns the plaintext or
  raises `InvalidTagError` when authentication fails (including a ciphertext
  shorter than the tag, or a tag of the wrong length).
- Passing `None` as the associated data reuses the associated data of the
  previous message handled by the same `OcbAes`.
- A nonce length other than 12 or a tag length other than 16 given to the
  constructor raises `NotSupportedError`; a key that is not 16 bytes raises
  `ValueError`; a nonce of the wrong length passed to `encrypt` or `decrypt`
  raises `OcbError`. `InvalidTagError` and `NotSupportedError` derive from
  `OcbError`, which derives from `ValueError`.
- `clear()` forgets the key; any later call raises `OcbError`.

The lower-level pieces are available too: `sproutkit.ocb_block` has
`xor_block`, `double_block`, `ntz` and `gen_offset`, and `sproutkit.ocb_hash`
has `OcbKeySchedule` (the AES key schedule with the derived L values and
nonce offsets) and `hash_associated_data`.

## Keys, nonces and sessions

```python
from sproutkit.crypto import Base64Key, Message, Nonce, Session

key = Base64Key.random()
print(key.printable_key())            # 22 base64 characters

same_key = Base64Key(key.printable_key())
assert same_key == key

with Session(same_key) as session:
    wire = session.encrypt(Message(Nonce(42), b"payload"))
    message = session.decrypt(wire)
    print(message.nonce.val(), message.text)   # 42 b'payload'
```

- `Base64Key(text)` raises `CryptoError` unless `text` is exactly 22 base64
  characters that encode a 128-bit key with no spare bits set.
- `Nonce(value)` takes a value in 0..2**64-1; `Nonce.from_bytes(data)` takes
  its 8-byte wire form and raises `CryptoError` for any other length.
  `cc_str()` gives those 8 bytes, `data()` the full 12-byte nonce (four zero
  bytes first), `val()` the number.
- `Session.decrypt` raises `CryptoError` for packets shorter than 8 bytes or
  with a body longer than `Session.RECEIVE_MTU` (2048) bytes. A closed
  session raises `CryptoError` on use.
- `parse_int(text)` reads a whole string as a signed 64-bit decimal integer
  (leading whitespace and a sign allowed, an empty string gives 0) and raises
  `CryptoError` otherwise.
- `disable_dumping_core()` sets the soft core-file limit to zero;
  `reenable_dumping_core()` restores the saved value and never raises.

### What `Session` does not do

`Session.encrypt` and `Session.decrypt` only frame messages: they put the
nonce in front of the body and split it off again. The body is **not**
encrypted or authenticated by `Session`. For authenticated encryption use
`OcbAes` directly.

## Random numbers

```python
from sproutkit.prng import PRNG

with PRNG() as rng:
    print(rng.uint8(), rng.uint32(), rng.uint64(), rng.fill(4))
```

Integers are read in the machine's native byte order. Failures to open or
read the device raise `CryptoError`.

## Command-line tools

Frame standard input under a new random key, using the given nonce value. The
key is printed to standard error as `Key: ...`, the framed message goes to
standard output:

```
echo "hello" | sproutkit-encrypt 7 > message.bin
```

Read a framed message back with that key. The nonce is printed to standard
error as `Nonce = ...`, the body to standard output:

```
sproutkit-decrypt "$KEY" < message.bin
```

Like `Session`, these tools frame messages and do not encrypt them. Both exit
with status 1 and a message on standard error when the arguments, the input
or the key are not acceptable.

## Link simulation

A schedule file lists delivery opportunities as millisecond offsets in
non-decreasing order, separated by whitespace. `load_schedule(path,
base_timestamp)` (in both `sproutkit.cellsim` and `sproutkit.cellproxy`)
reads such a file, stops at the first entry that is not an unsigned integer,
and shifts every entry by the base timestamp.

`sproutkit.cellsim.DelayQueue` treats each opportunity as room for 1500
bytes, carrying a large packet over to later opportunities;
`sproutkit.cellproxy.DelayQueue` delivers one whole packet per opportunity,
and opportunities that pass with nothing waiting are wasted. Both are built as
`DelayQueue(name, ms_delay, schedule, clock=None, log=None)`: each written
packet is held for `ms_delay` milliseconds first, a decreasing schedule raises
`ValueError`, delivery delays and per-second link use are reported through
`log` (standard error by default), and `clock` returns the current time in
milliseconds (a monotonic clock by default), which makes the queues easy to
drive from tests:

- `write(packet)` queues a packet,
- `read()` returns the packets delivered since the last call,
- `wait_time()` gives the milliseconds until something may next happen.

The package provides the queues only; it has no command or network loop that
relays live UDP traffic through them.