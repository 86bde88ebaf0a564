#!/usr/bin/env python3
# timefmt.py – rev-t2  (2026-10-18)
"""Elapsed-time labels and progress fractions for the timeline."""

from __future__ import annotations


def format_time(seconds: float | None) -> str:
    """Return ``MM:SS``; minutes are not wrapped into hours (3600 s → ``60:00``)."""
    if not seconds or seconds < 0:
        return "00:00"
    total = int(seconds)
    return f"{total // 60:02}:{total % 60:02}"


def progress_fraction(position: float, length: float) -> float:
    if length <= 0:
        return 0.0
    return max(0.0, min(position / length, 1.0))
