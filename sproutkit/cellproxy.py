"""Simulation of a cellular link that delivers one packet per schedule slot.

Slots that pass while no packet is waiting are wasted.
"""

from __future__ import annotations

import os
import re
import sys
import time
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass

__all__ = ["DelayQueue", "load_schedule"]

_IDLE_WAIT = 100
_NUMBER = re.compile(r"\s*\+?(\d+)")


def _timestamp() -> int:
    return time.monotonic_ns() // 1_000_000


def _log_stderr(line: str) -> None:
    print(line, file=sys.stderr)


def load_schedule(path: str | os.PathLike[str], base_timestamp: int) -> list[int]:
    """Read millisecond offsets from a file, shifted by ``base_timestamp``.

    Reading stops at the first thing that is not an unsigned integer.
    """
    with open(path, encoding="ascii", errors="replace") as handle:
        text = handle.read()
    schedule: list[int] = []
    pos = 0
    while True:
        match = _NUMBER.match(text, pos)
        if match is None:
            break
        schedule.append(int(match.group(1)) + base_timestamp)
        pos = match.end()
    return schedule


@dataclass
class _DelayedPacket:
    entry_time: int
    release_time: int
    contents: bytes


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
        self._schedule: deque[int] = deque()
        for when in schedule:
            if self._schedule and when < self._schedule[-1]:
                raise ValueError("schedule must be non-decreasing")
            self._schedule.append(when)
        self._delay: deque[_DelayedPacket] = deque()
        self._pdp: deque[_DelayedPacket] = deque()
        self._delivered: list[bytes] = []
        self._total_occurrences = 0
        self._used_occurrences = 0
        self._bin_sec = self._clock() // 1000
        self._log(f"Initialized {name} queue with {len(self._schedule)} services.")

    def wait_time(self) -> int:
        """Milliseconds until the queue next needs attention."""
        delay_wait = pdp_wait = _IDLE_WAIT
        if self._delay:
            delay_wait = max(self._delay[0].release_time - self._clock(), 0)
        self._prune_schedule()
        if self._pdp and self._schedule:
            pdp_wait = self._schedule[0] - self._clock()
        return min(delay_wait, pdp_wait)

    def read(self) -> list[bytes]:
        """Return the packets delivered since the last read."""
        self._tick()
        delivered, self._delivered = self._delivered, []
        return delivered

    def write(self, packet: bytes) -> None:
        """Accept a packet into the delay stage."""
        now = self._clock()
        self._delay.append(_DelayedPacket(now, now + self._ms_delay, bytes(packet)))

    def _prune_schedule(self) -> None:
        now = self._clock()
        while self._schedule and self._schedule[0] < now:
            self._schedule.popleft()
            self._total_occurrences += 1

    def _tick(self) -> None:
        self._prune_schedule()
        now = self._clock()

        while self._delay and self._delay[0].release_time <= now:
            self._pdp.append(self._delay.popleft())

        while self._pdp and self._schedule and self._schedule[0] <= now:
            packet = self._pdp.popleft()
            self._schedule.popleft()
            self._delivered.append(packet.contents)
            self._total_occurrences += 1
            self._used_occurrences += 1
            self._log(f"{self._name} {now / 1000.0:.6f} delivery {now - packet.entry_time}")

        while now // 1000 > self._bin_sec:
            percent = (
                100.0 * self._used_occurrences / self._total_occurrences
                if self._total_occurrences
                else float("nan")
            )
            self._log(
                f"{self._name} {self._bin_sec} {self._used_occurrences} / "
                f"{self._total_occurrences} = {percent:.1f} %"
            )
            self._total_occurrences = 0
            self._used_occurrences = 0
            self._bin_sec += 1