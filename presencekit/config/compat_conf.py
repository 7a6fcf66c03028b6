from __future__ import annotations

import json
import logging
import os
import pathlib
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)

# Settings file layout:
#   {"PRESENCE_ACTIVITY_NAME": "...", ..., "presence": {<raw presence config>}}
PRESENCE_KEY = "presence"

_SETTINGS: Dict[str, Any] = {}
_SOURCE: Optional[str] = None
_LOADED = False
_CANDIDATES = [
    "presence.local.json",
    "config/presence.local.json",
    "config/presence.json",
]

_TRUTHY = ("1", "true", "yes", "on", "y")


def _read_settings(path: str) -> Optional[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        log.warning("[config] cannot read %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        log.warning("[config] %s is not a JSON object, ignored", path)
        return None
    return data


def _settings_path() -> Optional[str]:
    explicit = os.environ.get("PRESENCE_FILE")
    if explicit:
        return explicit
    for cand in _CANDIDATES:
        if pathlib.Path(cand).exists():
            return cand
    return None


def _load_if_needed():
    global _LOADED, _SETTINGS, _SOURCE
    if _LOADED:
        return
    _SOURCE = _settings_path()
    data = _read_settings(_SOURCE) if _SOURCE and pathlib.Path(_SOURCE).exists() else None
    _SETTINGS = data or {}
    _LOADED = True
    if _SOURCE:
        log.debug("[config] settings from %s (%d key(s))", _SOURCE, len(_SETTINGS))


def reset():
    """Forget the cached file so the next lookup reads disk again."""
    global _LOADED, _SETTINGS, _SOURCE
    _SETTINGS = {}
    _SOURCE = None
    _LOADED = False


def _cast(value: Any, cast: Any):
    if cast is None:
        return value
    try:
        if cast is bool:
            if isinstance(value, str):
                return value.strip().lower() in _TRUTHY
            return bool(value)
        return cast(value)
    except (TypeError, ValueError):
        log.warning("[config] cannot cast %r to %s", value, getattr(cast, "__name__", cast))
        return None


def get(key: str, default: Any = None, cast=None):
    """Settings file first, then the environment, then ``default``.

    With ``cast`` the value is converted (``bool`` understands "yes"/"on"/"1"...);
    a value that does not convert falls back to ``default``.
    """
    _load_if_needed()
    value = _SETTINGS.get(key)
    if value is None:
        value = os.environ.get(key)
    if value is None:
        return default
    if cast is None:
        return value
    res = _cast(value, cast)
    return default if res is None else res


def load_presence_file(path: Optional[str] = None) -> Dict[str, Any]:
    """Return the raw ``presence`` block of the settings file.

    Without ``path`` the settings file is located again (PRESENCE_FILE, then
    the candidates) and read from disk, so edits show up on reload. A missing
    or broken file gives ``{}``.
    """
    if path is None:
        path = _settings_path()
    data: Optional[Dict[str, Any]]
    if path is None:
        data = None
    elif pathlib.Path(path).exists():
        data = _read_settings(str(path))
    else:
        log.warning("[config] presence file %s not found", path)
        data = None
    presence = (data or {}).get(PRESENCE_KEY, {})
    return dict(presence) if isinstance(presence, dict) else {}
