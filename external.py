#!/usr/bin/env python3
# external.py – rev-x3  (2026-10-18)
"""
Play a track in a separately launched ``vlc`` process.

Last resort for video when libVLC cannot embed: the process is tracked by
handle and terminated on stop(), tolerating one that already exited.
Position is wall-clock since launch (minus pauses); length comes from
mutagen.  Pause / resume use SIGSTOP / SIGCONT where the OS has them.
"""

from __future__ import annotations
import os, shutil, signal, subprocess, time
from pathlib import Path
from typing  import List, Optional

from loguru import logger

import scanner
from device import Device, DeviceState, DeviceLoadError, DeviceCommandError

DEFAULT_ARGS = ["--fullscreen", "--no-video-title-show", "--play-and-exit"]

# Windows installs are usually not on PATH
WIN_CANDIDATES = (
    r"C:\Program Files\VideoLAN\VLC\vlc.exe",
    r"C:\Program Files (x86)\VideoLAN\VLC\vlc.exe",
    r"C:\Program Files\VLC\vlc.exe",
    r"C:\Program Files (x86)\VLC\vlc.exe",
)


def find_vlc() -> Optional[str]:
    exe = shutil.which("vlc") or shutil.which("vlc.exe")
    if exe:
        return exe
    if os.name == "nt":
        return next((p for p in WIN_CANDIDATES if Path(p).is_file()), None)
    return None


class ExternalPlayerDevice(Device):
    name = "vlc-process"
    TERMINATE_TIMEOUT = 2.0

    def __init__(self, exe: str | None = None, args: List[str] | None = None):
        self._exe   = exe
        self._args  = list(DEFAULT_ARGS if args is None else args)
        self._track: Optional[str] = None
        self._proc: Optional[subprocess.Popen] = None
        self._volume     = 1.0
        self._length     = 0.0
        self._started_at = 0.0
        self._paused_at: Optional[float] = None
        self._paused_total = 0.0

    def load(self, track: str) -> None:
        self.stop()
        exe = self._exe or find_vlc()
        if not exe:
            raise DeviceLoadError("no external vlc executable found")
        if not Path(track).is_file():
            raise DeviceLoadError(f"no such file: {track}")
        self._exe, self._track = exe, track
        self._length = scanner.probe_length(track)

    def _loaded(self) -> str:
        if self._track is None:
            raise DeviceCommandError("no track loaded")
        return self._track

    def play(self) -> None:
        track = self._loaded()
        if self._proc is not None and self._proc.poll() is None:
            if self._paused_at is not None:
                self._signal(getattr(signal, "SIGCONT", None))
                self._paused_total += time.monotonic() - self._paused_at
                self._paused_at = None
            return
        cmd = [self._exe, *self._args, f"--gain={self._volume:.2f}", track]
        try:
            self._proc = subprocess.Popen(cmd, stdout=subprocess.DEVNULL,
                                          stderr=subprocess.DEVNULL)
        except OSError as e:
            raise DeviceLoadError(f"cannot launch {self._exe}: {e}") from e
        logger.debug("launched {} (pid {})", self._exe, self._proc.pid)
        self._started_at, self._paused_at, self._paused_total = time.monotonic(), None, 0.0

    def _signal(self, sig) -> None:
        if sig is None:
            raise DeviceCommandError("pausing an external player is not supported here")
        try:
            self._proc.send_signal(sig)
        except ProcessLookupError:
            pass

    def pause(self) -> None:
        self._loaded()
        if self._proc is None or self._proc.poll() is not None:
            raise DeviceCommandError("external player is not running")
        if self._paused_at is not None:
            return
        self._signal(getattr(signal, "SIGSTOP", None))
        self._paused_at = time.monotonic()

    def stop(self) -> None:
        proc, self._proc = self._proc, None
        self._track = None
        if proc is None or proc.poll() is not None:
            return
        try:
            if self._paused_at is not None and hasattr(signal, "SIGCONT"):
                proc.send_signal(signal.SIGCONT)   # a stopped process ignores SIGTERM
            proc.terminate()
            proc.wait(timeout=self.TERMINATE_TIMEOUT)
        except subprocess.TimeoutExpired:
            proc.kill(); proc.wait()
        except ProcessLookupError:
            pass                                   # exited between poll() and terminate()
        finally:
            self._paused_at = None

    def seek(self, fraction: float) -> None:
        self._loaded()
        raise DeviceCommandError("an external player cannot seek")

    def set_volume(self, fraction: float) -> None:
        self._volume = fraction               # applied on the next launch

    def length(self) -> float:
        return self._length

    def position(self) -> float:
        if self._proc is None:
            return 0.0
        now = self._paused_at if self._paused_at is not None else time.monotonic()
        pos = now - self._started_at - self._paused_total
        return max(0.0, min(pos, self._length) if self._length else pos)

    def state(self) -> DeviceState:
        if self._proc is None:
            return DeviceState.STOPPED
        rc = self._proc.poll()
        if rc is not None:
            return DeviceState.STOPPED if rc == 0 else DeviceState.ERROR
        return DeviceState.PAUSED if self._paused_at is not None else DeviceState.PLAYING
