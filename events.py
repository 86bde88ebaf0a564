#!/usr/bin/env python3
# events.py – rev-v2  (2026-10-18)
"""Events the controller hands to its listeners (UI, host, logger)."""

from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Callable, Union

from timefmt import format_time


class Mode(enum.Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED  = "paused"


@dataclass(frozen=True)
class StateChanged:
    mode: Mode


@dataclass(frozen=True)
class TrackChanged:
    index: int
    track: str


@dataclass(frozen=True)
class Progress:
    elapsed:  float           # seconds
    total:    float           # seconds
    fraction: float           # 0 … 1

    @property
    def elapsed_text(self) -> str:
        return format_time(self.elapsed)

    @property
    def total_text(self) -> str:
        return format_time(self.total)


@dataclass(frozen=True)
class PlaylistChanged:
    count: int


@dataclass(frozen=True)
class PlaybackError:
    kind:    str              # "load" | "decode"
    message: str


@dataclass(frozen=True)
class PlaylistFinished:
    pass


Event    = Union[StateChanged, TrackChanged, Progress, PlaylistChanged,
                 PlaybackError, PlaylistFinished]
Listener = Callable[[Event], None]
