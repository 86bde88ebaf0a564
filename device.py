#!/usr/bin/env python3
# device.py – rev-d5  (2026-10-18)
"""
Playback-device contract and ranked fallback.

• Device          – what the controller drives; one instance per loaded track
• FallbackDevice  – tries candidate devices in rank order until one loads
• DeviceFactory   – picks the candidate chain for a track (audio / video)

A device is *loaded* between a successful ``load()`` and ``stop()``.
``stop()`` is always safe; every other command on an unloaded device raises
DeviceCommandError.
"""

from __future__ import annotations
import enum
from typing import Callable, List, Optional, Sequence

from loguru import logger

import scanner


class DeviceState(enum.Enum):
    STOPPED = "stopped"       # never started, stopped, or reached the end
    PLAYING = "playing"
    PAUSED  = "paused"
    ERROR   = "error"         # failed after load (decode / output error)


class DeviceError(Exception):
    pass


class DeviceLoadError(DeviceError):
    """The device could not open or decode a track."""


class DeviceCommandError(DeviceError):
    """Command issued to a device that has nothing loaded."""


class Device:
    name = "device"

    def load(self, track: str) -> None:
        raise NotImplementedError

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError

    def seek(self, fraction: float) -> None:
        raise NotImplementedError

    def set_volume(self, fraction: float) -> None:
        raise NotImplementedError

    def position(self) -> float:
        raise NotImplementedError

    def length(self) -> float:
        raise NotImplementedError

    def state(self) -> DeviceState:
        raise NotImplementedError


DeviceMaker = Callable[[], Device]


# ─────────────────────────────── ranked fallback
class FallbackDevice(Device):
    """Delegate to the first candidate whose ``load`` succeeds."""

    def __init__(self, candidates: Sequence[DeviceMaker]):
        self._candidates = list(candidates)
        self._active: Optional[Device] = None

    @property
    def name(self) -> str:
        return self._active.name if self._active else "none"

    def load(self, track: str) -> None:
        self.stop()
        errors: List[str] = []
        for make in self._candidates:
            dev = make()
            try:
                dev.load(track)
            except DeviceLoadError as e:
                logger.debug("{} could not load {}: {}", dev.name, track, e)
                errors.append(f"{dev.name}: {e}")
                dev.stop()
                continue
            self._active = dev
            logger.debug("{} loaded {}", dev.name, track)
            return
        raise DeviceLoadError("; ".join(errors) or "no playback device available")

    def _dev(self) -> Device:
        if self._active is None:
            raise DeviceCommandError("no track loaded")
        return self._active

    def play(self)  -> None: self._dev().play()
    def pause(self) -> None: self._dev().pause()
    def seek(self, fraction: float) -> None: self._dev().seek(fraction)
    def set_volume(self, fraction: float) -> None: self._dev().set_volume(fraction)

    def stop(self) -> None:
        if self._active is not None:
            dev, self._active = self._active, None
            dev.stop()

    def position(self) -> float: return self._active.position() if self._active else 0.0
    def length(self)   -> float: return self._active.length()   if self._active else 0.0

    def state(self) -> DeviceState:
        return self._active.state() if self._active else DeviceState.STOPPED


# ─────────────────────────────── factory
class DeviceFactory:
    """
    Build a fresh FallbackDevice for each track.

    Video files go through the *video* chain only while ``video_mode`` is on;
    otherwise they play through the audio chain like any other file.
    """

    def __init__(self, audio: Sequence[DeviceMaker],
                 video: Sequence[DeviceMaker] = (), *, video_mode: bool = False):
        if not audio:
            raise ValueError("at least one audio device is required")
        self.audio      = list(audio)
        self.video      = list(video)
        self.video_mode = video_mode

    def chain_for(self, track: str) -> List[DeviceMaker]:
        if self.video_mode and self.video and scanner.is_video(track):
            return self.video
        return self.audio

    def __call__(self, track: str) -> Device:
        return FallbackDevice(self.chain_for(track))
