#!/usr/bin/env python3
# playlist.py – rev-l4  (2026-10-18)
"""
Ordered track list with a restorable insertion order.

``active`` is what plays and what the UI shows; ``original`` remembers the
order tracks were added in so shuffle can be undone.  Both always hold the
same tracks.  Playlist knows nothing about the current track – the
controller fixes its index after every mutation.
"""

from __future__ import annotations
import random
from typing import Iterator, List


class Playlist:
    def __init__(self):
        self._active:   List[str] = []
        self._original: List[str] = []

    def __repr__(self):
        return f"<Playlist ({len(self._active)} tracks)>"

    # ─────────────────────────────── mutation
    def add(self, track: str) -> bool:
        """Append *track*; duplicates are ignored.  Returns True if added."""
        if track in self._original:
            return False
        self._active.append(track)
        self._original.append(track)
        return True

    def remove_at(self, index: int) -> str:
        if not 0 <= index < len(self._active):
            raise IndexError(f"track index {index} out of range (0..{len(self._active) - 1})")
        track = self._active.pop(index)
        self._original.remove(track)
        return track

    def clear(self) -> None:
        self._active.clear()
        self._original.clear()

    def shuffle(self, rng: random.Random | None = None) -> None:
        (rng or random).shuffle(self._active)

    def restore_original_order(self) -> None:
        self._active = list(self._original)

    # ─────────────────────────────── accessors
    def at(self, index: int) -> str:
        if not 0 <= index < len(self._active):
            raise IndexError(f"track index {index} out of range (0..{len(self._active) - 1})")
        return self._active[index]

    def index_of(self, track: str) -> int:
        try:
            return self._active.index(track)
        except ValueError:
            return -1

    def tracks(self) -> List[str]:
        return list(self._active)

    def original(self) -> List[str]:
        return list(self._original)

    def __len__(self) -> int:
        return len(self._active)

    def __contains__(self, track: object) -> bool:
        return track in self._original

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._active))
