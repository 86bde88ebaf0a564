#!/usr/bin/env python3
# controller.py – rev-c7  (2026-10-18)
"""
Headless playback controller.

Owns the playlist, the current index, Stopped/Playing/Paused, shuffle and
repeat.  UI code sends commands and listens for events; device state is
pulled in by tick(), which the host calls about once a second.

• A device is created per track and released before the next one loads
• PLAYING is only entered after the device accepted load() *and* play()
• Load / decode failures stop playback and are reported, never skipped past
• Every public method runs under one re-entrant lock, so a listener may
  call back into the controller
"""

from __future__ import annotations
import functools, random, threading
from typing import Callable, Iterable, List, Optional, Tuple

from loguru import logger

import policy
from device   import Device, DeviceState, DeviceCommandError
from events   import (Event, Listener, Mode, StateChanged, TrackChanged, Progress,
                      PlaylistChanged, PlaybackError, PlaylistFinished)
from playlist import Playlist
from policy   import RepeatMode
from timefmt  import progress_fraction

TICK_INTERVAL = 1.0          # seconds between host ticks


def clamp01(value: float) -> float:
    return max(0.0, min(float(value), 1.0))


def _serialized(fn):
    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return fn(self, *args, **kwargs)
    return wrapper


class PlaybackController:
    def __init__(self, device_factory: Callable[[str], Device], *,
                 listener: Listener | None = None,
                 rng: random.Random | None = None,
                 volume: float = 1.0):
        self._make_device = device_factory
        self._playlist    = Playlist()
        self._rng         = rng or random.Random()
        self._lock        = threading.RLock()
        self._listeners: List[Listener] = [listener] if listener else []

        self._device: Optional[Device] = None
        self._loading = False            # tick() skips while a track is swapped
        self._index   = -1
        self._mode    = Mode.STOPPED
        self._repeat  = RepeatMode.OFF
        self._shuffle = False
        self._volume  = clamp01(volume)

    # ─────────────────────────────── listeners
    def subscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _emit(self, event: Event) -> None:
        for cb in list(self._listeners):
            try:
                cb(event)
            except Exception:
                logger.exception("listener {!r} failed on {}", cb, event)

    # ─────────────────────────────── accessors
    @property
    def mode(self) -> Mode:                  return self._mode
    @property
    def current_index(self) -> int:          return self._index
    @property
    def repeat_mode(self) -> RepeatMode:     return self._repeat
    @property
    def shuffle_enabled(self) -> bool:       return self._shuffle
    @property
    def volume(self) -> float:               return self._volume
    @property
    def count(self) -> int:                  return len(self._playlist)

    @property
    def tracks(self) -> Tuple[str, ...]:
        return tuple(self._playlist.tracks())

    @property
    def current_track(self) -> Optional[str]:
        return self._playlist.at(self._index) if self._index >= 0 else None

    @property
    def device_loaded(self) -> bool:
        return self._device is not None

    # ─────────────────────────────── internal transitions
    def _set_mode(self, mode: Mode) -> None:
        if mode is self._mode:
            return
        logger.debug("mode {} → {}", self._mode.value, mode.value)
        self._mode = mode
        self._emit(StateChanged(mode))

    def _release(self) -> None:
        if self._device is None:
            return
        dev, self._device = self._device, None
        try:
            dev.stop()
        except Exception as e:
            logger.warning("releasing {} failed: {}", dev.name, e)

    def _halt(self) -> None:
        """Release the device and, if anything was playing, report Stopped at 00:00."""
        self._release()
        if self._mode is not Mode.STOPPED:
            self._set_mode(Mode.STOPPED)
            self._emit(Progress(0.0, 0.0, 0.0))

    def _fail(self, kind: str, error: object) -> None:
        logger.warning("playback error ({}) on {}: {}", kind, self.current_track, error)
        self._halt()
        self._emit(PlaybackError(kind, str(error)))

    def _start(self, index: int) -> bool:
        """Load and play ``active[index]``; on failure stay Stopped at that index."""
        track = self._playlist.at(index)
        self._loading = True
        try:
            self._release()
            self._index = index
            dev = None
            try:
                dev = self._make_device(track)
                dev.load(track)
                dev.set_volume(self._volume)
                dev.play()
            except Exception as e:
                if dev is not None:
                    try:
                        dev.stop()
                    except Exception as stop_err:
                        logger.debug("cleanup after failed load: {}", stop_err)
                self._fail("load", e)
                return False
            self._device = dev
            logger.info("playing [{}] {} via {}", index, track, dev.name)
            self._emit(TrackChanged(index, track))
            self._set_mode(Mode.PLAYING)
        finally:
            self._loading = False
        return True

    def _command(self, fn, *args) -> bool:
        """Run a device command; unloaded-device errors are ignored, others stop playback."""
        try:
            fn(*args)
        except DeviceCommandError as e:
            logger.debug("device command ignored: {}", e)
            return False
        except Exception as e:
            self._fail("device", e)
            return False
        return True

    # ─────────────────────────────── transport commands
    @_serialized
    def play(self) -> None:
        if not self._playlist:
            logger.debug("play: playlist is empty")
            return
        if self._mode is Mode.PAUSED and self._device is not None:
            if self._command(self._device.play):
                self._set_mode(Mode.PLAYING)
            return
        if self._index == -1:
            self._index = 0
        self._start(self._index)

    @_serialized
    def pause(self) -> None:
        if self._mode is not Mode.PLAYING or self._device is None:
            return
        if self._command(self._device.pause):
            self._set_mode(Mode.PAUSED)

    @_serialized
    def stop(self) -> None:
        self._halt()

    @_serialized
    def next(self) -> None:
        n = len(self._playlist)
        if not n:
            logger.debug("next: playlist is empty")
            return
        if self._index == -1:
            self._start(0)
        else:
            self._start(policy.next_index(self._index, n, self._shuffle, self._rng))

    @_serialized
    def previous(self) -> None:
        n = len(self._playlist)
        if not n:
            logger.debug("previous: playlist is empty")
            return
        if self._index == -1:
            self._start(0)
        else:
            self._start(policy.previous_index(self._index, n, self._shuffle, self._rng))

    @_serialized
    def select_track(self, index: int) -> None:
        self._playlist.at(index)             # IndexError before anything changes
        self._start(index)

    @_serialized
    def seek(self, fraction: float) -> None:
        if self._device is None or self._loading:
            return
        fraction = clamp01(fraction)
        if self._command(self._device.seek, fraction):
            length = self._device.length()
            self._emit(Progress(fraction * length, length, fraction))

    @_serialized
    def set_volume(self, fraction: float) -> float:
        self._volume = clamp01(fraction)
        if self._device is not None:
            self._command(self._device.set_volume, self._volume)
        return self._volume

    # ─────────────────────────────── order / repeat
    @_serialized
    def set_shuffle(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled == self._shuffle:
            return
        current = self.current_track
        self._shuffle = enabled
        if enabled:
            self._playlist.shuffle(self._rng)
        else:
            self._playlist.restore_original_order()
        self._index = self._playlist.index_of(current) if current is not None else -1
        logger.debug("shuffle {}; current index now {}", "on" if enabled else "off", self._index)
        self._emit(PlaylistChanged(len(self._playlist)))

    @_serialized
    def toggle_shuffle(self) -> bool:
        self.set_shuffle(not self._shuffle)
        return self._shuffle

    @_serialized
    def cycle_repeat(self) -> RepeatMode:
        self._repeat = policy.cycle_repeat(self._repeat)
        logger.debug("repeat {}", self._repeat.value)
        return self._repeat

    @_serialized
    def set_repeat(self, mode: RepeatMode | str) -> RepeatMode:
        self._repeat = RepeatMode(mode)
        return self._repeat

    # ─────────────────────────────── playlist commands
    @_serialized
    def add_tracks(self, tracks: Iterable[str]) -> int:
        added = sum(self._playlist.add(str(t)) for t in tracks)
        if added:
            self._emit(PlaylistChanged(len(self._playlist)))
        return added

    @_serialized
    def remove_at(self, index: int) -> str:
        track = self._playlist.remove_at(index)
        if index == self._index:
            self._halt()
            self._index = -1
        elif index < self._index:
            self._index -= 1
        self._emit(PlaylistChanged(len(self._playlist)))
        return track

    @_serialized
    def clear(self) -> None:
        self._halt()
        self._playlist.clear()
        self._index = -1
        self._emit(PlaylistChanged(0))

    @_serialized
    def replace_tracks(self, tracks: Iterable[str]) -> int:
        """Swap in a whole new playlist (e.g. a loaded M3U); nothing is selected."""
        self._halt()
        self._playlist.clear()
        self._index = -1
        added = sum(self._playlist.add(str(t)) for t in tracks)
        if self._shuffle:
            self._playlist.shuffle(self._rng)
        self._emit(PlaylistChanged(len(self._playlist)))
        return added

    # ─────────────────────────────── periodic reconciliation
    @_serialized
    def tick(self) -> None:
        if self._loading or self._device is None or self._mode is not Mode.PLAYING:
            return
        try:
            state = self._device.state()
        except Exception as e:
            self._fail("device", e)
            return
        if state is DeviceState.ERROR:
            self._fail("decode", f"playback of {self.current_track} failed")
        elif state is DeviceState.STOPPED:
            self._end_of_track()
        else:
            self._report_progress()

    def _report_progress(self) -> None:
        try:
            pos, length = self._device.position(), self._device.length()
        except Exception as e:
            self._fail("device", e)
            return
        if length > 0:
            pos = min(pos, length)
        self._emit(Progress(pos, length, progress_fraction(pos, length)))

    def _end_of_track(self) -> None:
        n = len(self._playlist)
        logger.debug("end of track [{}] (repeat {})", self._index, self._repeat.value)
        if self._repeat is RepeatMode.ONE:
            self._start(self._index)
        elif self._repeat is RepeatMode.ALL:
            self._start(policy.next_index(self._index, n, self._shuffle, self._rng))
        elif self._index >= n - 1:
            self._halt()
            logger.info("playlist finished")
            self._emit(PlaylistFinished())
        else:
            self._start(self._index + 1)

    # ─────────────────────────────── shutdown
    @_serialized
    def close(self) -> None:
        self._halt()
        self._listeners.clear()
