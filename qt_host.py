#!/usr/bin/env python3
# qt_host.py – rev-q3  (2026-10-18)
"""
Qt-side host for the controller (QtCore only, no widgets).

A QTimer drives controller.tick() on the Qt thread, so ticks and commands
issued from slots never overlap.  Controller events are re-emitted as Qt
signals for whatever front-end is attached.
"""

from __future__ import annotations

from PySide6.QtCore import QObject, QTimer, Signal

from controller import PlaybackController, TICK_INTERVAL
from events import (Event, StateChanged, TrackChanged, Progress, PlaylistChanged,
                    PlaybackError, PlaylistFinished)


class QtPlaybackHost(QObject):
    stateChanged     = Signal(str)                 # Mode.value
    trackChanged     = Signal(int, str)
    progress         = Signal(float, float, float) # elapsed s, total s, fraction
    playlistChanged  = Signal(int)
    playbackError    = Signal(str, str)            # kind, message
    playlistFinished = Signal()

    def __init__(self, controller: PlaybackController,
                 interval_ms: int = int(TICK_INTERVAL * 1000), parent=None):
        super().__init__(parent)
        self.controller = controller
        self._timer = QTimer(self, interval=interval_ms)
        self._timer.timeout.connect(controller.tick)
        controller.subscribe(self._relay)

    def start(self) -> None: self._timer.start()
    def stop(self)  -> None: self._timer.stop()

    @property
    def running(self) -> bool:
        return self._timer.isActive()

    def _relay(self, ev: Event) -> None:
        if isinstance(ev, StateChanged):
            self.stateChanged.emit(ev.mode.value)
        elif isinstance(ev, TrackChanged):
            self.trackChanged.emit(ev.index, ev.track)
        elif isinstance(ev, Progress):
            self.progress.emit(ev.elapsed, ev.total, ev.fraction)
        elif isinstance(ev, PlaylistChanged):
            self.playlistChanged.emit(ev.count)
        elif isinstance(ev, PlaybackError):
            self.playbackError.emit(ev.kind, ev.message)
        elif isinstance(ev, PlaylistFinished):
            self.playlistFinished.emit()

    def shutdown(self) -> None:
        self._timer.stop()
        self.controller.unsubscribe(self._relay)
        self.controller.close()
