#!/usr/bin/env python3
# scanner.py – rev-s9  (2026-10-18)
"""
Media discovery & M3U playlists.

• Audio: .mp3 .wav .flac .aac .m4a .wma  ·  Video: .mp4 .avi .mkv .mov .wmv .flv .webm
• read_m3u keeps only tracks that exist on disk; comments / blanks are skipped
• write_m3u emits ``#EXTM3U`` then one absolute path per line
• file:// URIs are stripped and percent-decoded; a lone leading “/” before a
  drive letter (``/s:/Music/…``) is dropped so Windows can open the file
"""

from __future__ import annotations
import re, urllib.parse
from pathlib import Path
from typing  import Iterable, List

from loguru import logger
from mutagen import File as MFile, MutagenError

AUDIO_EXTS    = {".mp3", ".wav", ".flac", ".aac", ".m4a", ".wma"}
VIDEO_EXTS    = {".mp4", ".avi", ".mkv", ".mov", ".wmv", ".flv", ".webm"}
PLAYLIST_EXTS = {".m3u", ".m3u8"}
M3U_HEADER    = "#EXTM3U"

# ───────────────────────── media kinds ────────────────────────────
def _ext(path: str | Path) -> str:
    return Path(path).suffix.lower()

def is_audio(path: str | Path) -> bool:    return _ext(path) in AUDIO_EXTS
def is_video(path: str | Path) -> bool:    return _ext(path) in VIDEO_EXTS
def is_media(path: str | Path) -> bool:    return is_audio(path) or is_video(path)
def is_playlist(path: str | Path) -> bool: return _ext(path) in PLAYLIST_EXTS

def probe_length(path: str | Path) -> float:
    """Duration in seconds from the file's tags/stream info; 0.0 if unknown."""
    try:
        audio = MFile(path)
    except (MutagenError, OSError) as e:
        logger.debug("mutagen could not read {}: {}", path, e)
        return 0.0
    info = getattr(audio, "info", None)
    return float(getattr(info, "length", 0) or 0)

# ───────────────────────── parsing helpers ─────────────────────────
URI_PREFIXES = ("file:///", "file://", "file:\\\\", "file:\\")  # longest first
WIN_DRIVE_RE = re.compile(r"^[A-Za-z]:[/\\]")

def _strip_uri_prefix(line: str) -> str:
    lower = line.lower()
    for pre in URI_PREFIXES:
        if lower.startswith(pre):
            return line[len(pre):]
    return line

def _normalise(line: str) -> str | None:
    line = line.strip().lstrip("\ufeff")          # strip BOM / spaces
    if not line or line.startswith("#"):
        return None

    was_uri = line.lower().startswith("file:")
    line = _strip_uri_prefix(line)
    if was_uri:
        line = urllib.parse.unquote(line)
        if not WIN_DRIVE_RE.match(line.lstrip("/")):
            line = "/" + line.lstrip("/")             # file:///home/… → /home/…

    if WIN_DRIVE_RE.match(line.lstrip("/")):
        line = line.lstrip("/")
    return line

# ───────────────────────── public API ─────────────────────────────
def read_m3u(path: str | Path) -> List[str]:
    """Return the tracks listed in *path* that exist on disk, in file order."""
    path = Path(path)
    text = path.read_text(encoding="utf-8-sig", errors="replace")
    tracks: List[str] = []
    dropped = 0
    for ln in text.splitlines():
        t = _normalise(ln)
        if t is None:
            continue
        p = Path(t)
        if not p.is_absolute():
            p = path.parent / p
        if p.is_file():
            tracks.append(str(p))
        else:
            dropped += 1
    if dropped:
        logger.info("{}: skipped {} missing track(s)", path.name, dropped)
    return tracks

def write_m3u(path: str | Path, tracks: Iterable[str]) -> None:
    path  = Path(path)
    lines = [M3U_HEADER, *(str(Path(t).absolute()) for t in tracks)]
    tmp   = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text("\n".join(lines) + "\n", encoding="utf-8")
    tmp.replace(path)

def scan_folder(root: str | Path, recursive: bool = True) -> List[str]:
    """All media files under *root*, sorted by path."""
    root = Path(root)
    walker = root.rglob("*") if recursive else root.iterdir()
    return sorted(str(p) for p in walker if p.is_file() and is_media(p))

def expand(paths: Iterable[str | Path]) -> List[str]:
    """Turn CLI-style arguments (files, folders, .m3u) into a flat track list."""
    out: List[str] = []
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            out.extend(scan_folder(p))
        elif p.is_file() and is_playlist(p):
            out.extend(read_m3u(p))
        elif p.is_file() and is_media(p):
            out.append(str(p))
        else:
            logger.warning("ignoring {}: not a media file, folder or playlist", raw)
    return out
