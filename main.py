#!/usr/bin/env python3
# main.py – rev-w44  (2026-10-18)
"""
playdeck
────────
Headless playlist player (libVLC + Qt event loop).

Key features
• Files, folders and .m3u/.m3u8 playlists on the command line
• Shuffle with restorable order, repeat off / all / one
• Optional video mode: libVLC video output, external vlc process as fallback
• Settings (volume, shuffle, repeat, output) persisted between runs
"""

from __future__ import annotations
import argparse, signal, sys
from pathlib import Path
from typing  import List, Optional

from loguru import logger
from PySide6.QtCore import QCoreApplication, QTimer

import log_config, player, scanner, storage
from controller import PlaybackController
from device     import DeviceFactory
from events     import (Event, Mode, Progress, StateChanged, TrackChanged, PlaybackError,
                        PlaylistFinished)
from policy     import RepeatMode
from qt_host    import QtPlaybackHost

EXIT_PLAYBACK_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="playdeck", description="Headless playlist player.")
    ap.add_argument("paths", nargs="*", help="media files, folders or .m3u playlists")
    ap.add_argument("--shuffle", action=argparse.BooleanOptionalAction, default=None)
    ap.add_argument("--repeat", choices=[m.value for m in RepeatMode])
    ap.add_argument("--volume", type=float, help="0.0 … 1.0")
    ap.add_argument("--video", action=argparse.BooleanOptionalAction, default=None,
                    help="play video files with a video device")
    ap.add_argument("--output", choices=sorted(player.AOUT_OPTS), help="audio output mode")
    ap.add_argument("--save-playlist", metavar="M3U", type=Path,
                    help="write the queue to an M3U file and exit")
    ap.add_argument("--log-level", default="INFO")
    return ap


def merge_args(state: dict, args: argparse.Namespace) -> dict:
    """Command-line flags win over persisted settings (and are persisted)."""
    if args.shuffle is not None: state["shuffle"] = args.shuffle
    if args.repeat  is not None: state["repeat"] = args.repeat
    if args.volume  is not None: state["volume"] = args.volume
    if args.video   is not None: state["video_mode"] = args.video
    if args.output  is not None: state["audio_output"] = args.output
    return state


def log_event(ev: Event) -> None:
    if isinstance(ev, TrackChanged):
        logger.info("▶ {} ({})", Path(ev.track).stem, ev.index + 1)
    elif isinstance(ev, StateChanged):
        logger.info("state: {}", ev.mode.value)
    elif isinstance(ev, Progress):
        logger.debug("{} / {}", ev.elapsed_text, ev.total_text)
    elif isinstance(ev, PlaybackError):
        logger.error("{} error: {}", ev.kind, ev.message)
    elif isinstance(ev, PlaylistFinished):
        logger.info("playlist finished")


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log_config.setup_logging(args.log_level)

    state = merge_args(storage.load(), args)
    paths = args.paths or ([state["last_playlist"]] if state.get("last_playlist") else [])
    tracks = scanner.expand(paths)
    if not tracks:
        logger.error("nothing to play")
        return 1

    if args.save_playlist:
        scanner.write_m3u(args.save_playlist, tracks)
        logger.info("saved {} track(s) to {}", len(tracks), args.save_playlist)
        return 0

    audio, video = player.makers(state["audio_output"])
    factory = DeviceFactory(audio, video, video_mode=bool(state["video_mode"]))

    app  = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    ctl  = PlaybackController(factory, listener=log_event)
    host = QtPlaybackHost(ctl, int(float(state["tick_interval"]) * 1000))
    ctl.add_tracks(tracks)
    storage.apply(ctl, state)

    host.playlistFinished.connect(app.quit)

    def on_error(kind: str, message: str) -> None:
        # exit() before exec() is a no-op, so queue it
        if ctl.mode is Mode.STOPPED:
            QTimer.singleShot(0, lambda: app.exit(EXIT_PLAYBACK_ERROR))
    host.playbackError.connect(on_error)
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    keepalive = QTimer(app, interval=200, timeout=lambda: None)   # let Python see SIGINT
    keepalive.start()

    host.start()
    ctl.play()
    rc = app.exec()

    keepalive.stop()
    host.shutdown()
    if len(args.paths) == 1 and scanner.is_playlist(args.paths[0]):
        state["last_playlist"] = str(Path(args.paths[0]).resolve())
    storage.save(storage.capture(ctl, state))
    return rc


if __name__ == "__main__":
    sys.exit(run())
