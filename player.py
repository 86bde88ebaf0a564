#!/usr/bin/env python3
# player.py – rev-e9  (2026-10-18)
"""
libVLC playback device.

• One VLCDevice per loaded track; libVLC instances are shared per
  (video, audio-output) combination
• End-of-media and decoder errors arrive on libVLC's event thread and are
  only latched here – the controller picks them up on its next tick
• Length falls back to mutagen while libVLC has not parsed the file yet
"""

from __future__ import annotations
from pathlib import Path
from typing  import Dict, Tuple

import vlc
from loguru import logger

import scanner
from device import Device, DeviceState, DeviceLoadError, DeviceCommandError
from external import ExternalPlayerDevice

# ───────────────────────────────── Audio-output CLI options
AOUT_OPTS: dict[str, list[str]] = {
    "default"         : [],
    "directsound"     : ["--aout=directsound"],
    "wasapi_shared"   : ["--aout=wasapi"],
    "wasapi_exclusive": ["--aout=wasapi", "--wasapi-exclusivemode"],
}

_STATES = {
    vlc.State.Paused : DeviceState.PAUSED,
    vlc.State.Stopped: DeviceState.STOPPED,
    vlc.State.Ended  : DeviceState.STOPPED,
    vlc.State.Error  : DeviceState.ERROR,
}

_instances: Dict[Tuple[bool, str], "vlc.Instance"] = {}


def instance_opts(video: bool, aout_mode: str) -> list[str]:
    if aout_mode not in AOUT_OPTS:
        raise ValueError(f"invalid output mode: {aout_mode}")
    opts = ["--quiet", *AOUT_OPTS[aout_mode]]
    if not video:
        opts.insert(0, "--no-video")
    return opts


def shared_instance(video: bool = False, aout_mode: str = "default"):
    key = (video, aout_mode)
    if _instances.get(key) is None:
        _instances[key] = vlc.Instance(instance_opts(video, aout_mode))
    return _instances[key]


class VLCDevice(Device):
    def __init__(self, *, video: bool = False, aout_mode: str = "default", instance=None):
        self.name      = "libvlc-video" if video else "libvlc"
        self._instance = instance if instance is not None else shared_instance(video, aout_mode)
        self.player: vlc.MediaPlayer | None = None
        self._volume    = 1.0
        self._length_hint = 0.0
        self._started  = False
        self._ended    = False
        self._errored  = False

    # ─────────────────────────────── media helpers
    def _attach_events(self):
        em = self.player.event_manager()
        em.event_attach(vlc.EventType.MediaPlayerEndReached,
                        lambda *_: setattr(self, "_ended", True))
        em.event_attach(vlc.EventType.MediaPlayerEncounteredError,
                        lambda *_: setattr(self, "_errored", True))

    def _p(self) -> vlc.MediaPlayer:
        if self.player is None:
            raise DeviceCommandError("no track loaded")
        return self.player

    def load(self, track: str) -> None:
        self.stop()
        if self._instance is None:
            raise DeviceLoadError("libVLC failed to initialise")
        if not Path(track).is_file():
            raise DeviceLoadError(f"no such file: {track}")
        media = self._instance.media_new(str(track))
        if media is None:
            raise DeviceLoadError(f"libVLC cannot open {track}")
        logger.debug("{}: media {}", self.name, track)
        self.player = self._instance.media_player_new()
        self.player.set_media(media)
        self._attach_events()
        self._length_hint = scanner.probe_length(track)
        self._started = self._ended = self._errored = False

    # ─────────────────────────────── basic controls
    def play(self) -> None:
        p = self._p()
        if p.get_state() == vlc.State.Paused:
            p.set_pause(0)
            return
        if p.play() == -1:
            raise DeviceLoadError("libVLC refused to start playback")
        self._started = True
        p.audio_set_volume(int(round(self._volume * 100)))

    def pause(self) -> None:
        self._p().set_pause(1)

    def stop(self) -> None:
        if self.player:
            self.player.stop(); self.player.release(); self.player = None
        self._started = False

    def seek(self, fraction: float) -> None:
        p = self._p()
        length = self.length()
        if length > 0:
            p.set_time(int(fraction * length * 1000))
        else:
            p.set_position(fraction)

    def set_volume(self, fraction: float) -> None:
        self._volume = fraction
        if self.player and self._started:
            self.player.audio_set_volume(int(round(fraction * 100)))

    # ─────────────────────────────── position helpers
    def length(self) -> float:
        ms = self.player.get_length() if self.player else 0
        return ms / 1000 if ms and ms > 0 else self._length_hint

    def position(self) -> float:
        ms = self.player.get_time() if self.player else 0
        return ms / 1000 if ms and ms > 0 else 0.0

    def state(self) -> DeviceState:
        if not self.player or not self._started:
            return DeviceState.STOPPED
        if self._errored:
            return DeviceState.ERROR
        if self._ended:
            return DeviceState.STOPPED
        # NothingSpecial / Opening / Buffering count as playing once started
        return _STATES.get(self.player.get_state(), DeviceState.PLAYING)


def makers(aout_mode: str = "default"):
    """(audio chain, video chain) of device constructors for DeviceFactory."""
    audio = [lambda: VLCDevice(aout_mode=aout_mode)]
    video = [lambda: VLCDevice(video=True, aout_mode=aout_mode), ExternalPlayerDevice]
    logger.debug("device chains built (output={})", aout_mode)
    return audio, video
