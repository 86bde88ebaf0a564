#!/usr/bin/env python3
# storage.py – rev-s8 (2026-10-18)

r"""
Resilient persistent settings
═════════════════════════════
* One config folder per user
  – Windows  : %APPDATA%\playdeck\settings.json
  – macOS/*nix: ~/.config/playdeck/settings.json
* Atomic writes (tmp + replace) with a .bak copy; a corrupt file rolls
  back to the backup, a missing key falls back to its default.
"""

from __future__ import annotations
import json, os, shutil
from pathlib import Path
from typing  import Any, Dict

from loguru import logger

from policy import RepeatMode

# ────────────────────────────────────────────────────────────
# 1. resolve canonical config path
# ────────────────────────────────────────────────────────────
if os.name == "nt":
    _appdata = Path(os.getenv("APPDATA") or Path.home() / "AppData" / "Roaming")
    CFG_DIR  = _appdata / "playdeck"
else:
    CFG_DIR  = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config")) / "playdeck"

STATE_FILE = CFG_DIR / "settings.json"
VERSION    = 1

# ────────────────────────────────────────────────────────────
# 2. atomic writer (+ backup)
# ────────────────────────────────────────────────────────────
def _bak(path: Path) -> Path:
    return path.with_suffix(".bak")

def _atomic_write(path: Path, data: Any) -> None:
    """Write *data* as UTF-8 JSON atomically and keep a .bak copy."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    if path.exists():
        shutil.copy2(path, _bak(path))
    tmp.replace(path)

# ────────────────────────────────────────────────────────────
# 3. helpers
# ────────────────────────────────────────────────────────────
def defaults() -> Dict:
    return {
        "version":       VERSION,
        "volume":        1.0,
        "shuffle":       False,
        "repeat":        RepeatMode.OFF.value,
        "video_mode":    False,
        "audio_output":  "default",
        "tick_interval": 1.0,          # seconds
        "last_playlist": None,
    }

def _load_json(path: Path) -> Dict | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.warning("cannot read {}: {}", path, e)
        return None
    return data if isinstance(data, dict) else None

# ────────────────────────────────────────────────────────────
# 4. public API
# ────────────────────────────────────────────────────────────
def load(path: Path = STATE_FILE) -> Dict:
    """Return persisted settings.  Rolls back to .bak on corruption."""
    data = _load_json(path)
    if data is None:
        data = _load_json(_bak(path))
        if data is None:
            return defaults()
        logger.info("restored settings from {}", _bak(path))
        shutil.copy2(_bak(path), path)

    base = defaults()
    base.update({k: v for k, v in data.items() if k in base})
    return base


def save(state: Dict, path: Path = STATE_FILE) -> None:
    """Write *state* to disk, safely."""
    state["version"] = VERSION
    _atomic_write(path, state)


def apply(controller, state: Dict) -> None:
    """Push persisted playback settings into *controller*."""
    try:
        controller.set_volume(float(state.get("volume", 1.0)))
    except (TypeError, ValueError):
        logger.warning("bad volume {!r} in settings", state.get("volume"))
    try:
        controller.set_repeat(state.get("repeat", RepeatMode.OFF.value))
    except ValueError:
        logger.warning("unknown repeat mode {!r} in settings", state.get("repeat"))
    controller.set_shuffle(bool(state.get("shuffle", False)))


def capture(controller, state: Dict) -> Dict:
    """Copy *controller*'s playback settings back into *state*."""
    state["volume"]  = controller.volume
    state["shuffle"] = controller.shuffle_enabled
    state["repeat"]  = controller.repeat_mode.value
    return state
