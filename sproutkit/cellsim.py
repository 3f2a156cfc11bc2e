"""Byte-accurate simulation of a cellular link driven by a delivery schedule.

Every scheduled delivery opportunity carries up to 1500 bytes; a packet
larger than what one opportunity offers waits for further opportunities.
"""

from __future__ import annotations

import re
import sys
import time
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from os import PathLike

SERVICE_PACKET_SIZE = 1500
_INT_MAX = (1 << 31) - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")


def _timestamp() -> int:
    return time.monotonic_ns() // 1_000_000


def _log_stderr(line: str) -> None:
    print(line, file=sys.stderr)


def load_schedule(path: str | PathLike[str], base_timestamp: int) -> list[int]:
    """Read millisecond offsets from a file and return absolute times.

    Reading stops at the first token that is not an unsigned integer.
    """
    times: list[int] = []
    with open(path, encoding="ascii", errors="replace") as handle:
        for token in handle.read().split():
            if not _UNSIGNED.fullmatch(token):
                break
            times.append(int(token) + base_timestamp)
    return times


def _check_schedule(schedule: Iterable[int]) -> deque[int]:
    times: deque[int] = deque()
    for when in schedule:
        if times and when < times[-1]:
            raise ValueError("schedule must be non-decreasing")
        times.append(when)
    return times


@dataclass
class _DelayedPacket:
    entry_time: int
    release_time: int
    contents: bytes


@dataclass
class _PartialPacket:
    bytes_earned: int
    packet: _DelayedPacket


class DelayQueue:
    """One direction of the simulated link: a fixed delay, then the schedule."""

    def __init__(
        self,
        name: str,
        ms_delay: int,
        schedule: Iterable[int],
        clock: Callable[[], int] | None = None,
        log: Callable[[str], None] | None = None,
    ) -> None:
        self._name = name
        self._ms_delay = ms_delay
        self._clock = clock if clock is not None else _timestamp
        self._log = log if log is not None else _log_stderr
        self._schedule = _check_schedule(schedule)
        self._delay: deque[_DelayedPacket] = deque()
        self._pdp: deque[_DelayedPacket] = deque()
        self._limbo: _PartialPacket | None = None
        self._delivered: list[bytes] = []
        self._total_bytes = 0
        self._used_bytes = 0
        self._bin_sec = self._clock() // 1000
        self._log(f"Initialized {name} queue with {len(self._schedule)} services.")

    def wait_time(self) -> int:
        """Milliseconds until the queue next needs attention."""
        delay_wait = schedule_wait = _INT_MAX
        now = self._clock()
        self._tick()
        if self._delay:
            delay_wait = max(self._delay[0].release_time - now, 0)
        if self._schedule:
            schedule_wait = self._schedule[0] - now
        return min(delay_wait, schedule_wait)

    def read(self) -> list[bytes]:
        """Return the packets delivered since the last read."""
        self._tick()
        delivered, self._delivered = self._delivered, []
        return delivered

    def write(self, packet: bytes) -> None:
        """Accept a packet into the delay stage."""
        now = self._clock()
        self._delay.append(_DelayedPacket(now, now + self._ms_delay, bytes(packet)))

    def _deliver(self, packet: _DelayedPacket, now: int) -> None:
        size = len(packet.contents)
        self._total_bytes += size
        self._used_bytes += size
        self._log(f"{self._name} {now / 1000.0:.6f} delivery {now - packet.entry_time}")
        self._delivered.append(packet.contents)

    def _serve(self, now: int) -> None:
        budget = SERVICE_PACKET_SIZE

        if self._limbo is not None:
            limbo = self._limbo
            size = len(limbo.packet.contents)
            if limbo.bytes_earned + budget >= size:
                self._deliver(limbo.packet, now)
                budget -= size - limbo.bytes_earned
                self._limbo = None
            else:
                limbo.bytes_earned += budget
                budget = 0

        while budget > 0:
            if not self._pdp:
                self._total_bytes += budget
                budget = 0
                continue
            packet = self._pdp.popleft()
            if budget >= len(packet.contents):
                self._deliver(packet, now)
                budget -= len(packet.contents)
            else:
                self._limbo = _PartialPacket(budget, packet)
                budget = 0

    def _tick(self) -> None:
        now = self._clock()

        while self._delay and self._delay[0].release_time <= now:
            self._pdp.append(self._delay.popleft())

        while self._schedule and self._schedule[0] <= now:
            self._schedule.popleft()
            self._serve(now)

        while now // 1000 > self._bin_sec:
            percent = (
                100.0 * self._used_bytes / self._total_bytes
                if self._total_bytes
                else float("nan")
            )
            self._log(
                f"{self._name} {self._bin_sec} {self._used_bytes} / "
                f"{self._total_bytes} = {percent:.1f} %"
            )
            self._total_bytes = 0
            self._used_bytes = 0
            self._bin_sec += 1