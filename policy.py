#!/usr/bin/env python3
# policy.py – rev-p3  (2026-10-18)
"""
Track-order decisions (no device, no state).

• next_index / previous_index  – explicit skip and RepeatMode.ALL auto-advance
• cycle_repeat                 – Off → All → One → Off

Shuffle picks any index uniformly, the current one included.
"""

from __future__ import annotations
import enum, random


class RepeatMode(enum.Enum):
    OFF = "off"
    ALL = "all"
    ONE = "one"


_CYCLE = {RepeatMode.OFF: RepeatMode.ALL,
          RepeatMode.ALL: RepeatMode.ONE,
          RepeatMode.ONE: RepeatMode.OFF}


def cycle_repeat(mode: RepeatMode) -> RepeatMode:
    return _CYCLE[mode]


def _check(count: int) -> None:
    if count <= 0:
        raise ValueError("no tracks to choose from")


def next_index(current: int, count: int, shuffled: bool,
               rng: random.Random | None = None) -> int:
    _check(count)
    if shuffled:
        return (rng or random).randrange(count)
    return (current + 1) % count


def previous_index(current: int, count: int, shuffled: bool,
                   rng: random.Random | None = None) -> int:
    _check(count)
    if shuffled:
        return (rng or random).randrange(count)
    return count - 1 if current == 0 else current - 1
