# src/subpick/settings.py
from __future__ import annotations
from pathlib import Path
import platform
from typing import Iterable, Optional, Tuple

from PySide6.QtCore import QSettings

from subpick.model.selection import (
    DEFAULT_CODEC, DEFAULT_KEYWORDS, DEFAULT_LANGUAGE, SelectionPolicy,
)

ORG = "KevNetwork"
APP = "SubPick"

DEFAULT_VIDEO_CODEC = "libx265"
DEFAULT_AUDIO_CODEC = "copy"

_TRUE = {"1", "true", "yes", "on", "y", "t"}
_FALSE = {"0", "false", "no", "off", "n", "f"}
_DISABLED = {"", "disabled", "none", "off"}

# Explizite INI-Datei (CLI --config, Tests); sonst QSettings-Standardort
_settings_file: Optional[Path] = None


def use_settings_file(path: Optional[Path]) -> None:
    """Switch all settings access to an INI file, or back to the per-user store with ``None``."""
    global _settings_file
    _settings_file = Path(path) if path is not None else None


def get_settings() -> QSettings:
    """
    Liefert das QSettings-Objekt – entweder die gewählte INI-Datei oder den
    Benutzerspeicher (Windows: Registry, Linux: ~/.config).
    """
    if _settings_file is not None:
        return QSettings(str(_settings_file), QSettings.Format.IniFormat)
    return QSettings(ORG, APP)


# ---------------------- Parser ----------------------

def _parse_bool_like(v, default: bool = False) -> bool:
    """Robuste Interpretation von bools aus QSettings (bool, int, str)."""
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return v != 0
    if isinstance(v, str):
        val = v.strip().lower()
        if val in _TRUE:
            return True
        if val in _FALSE:
            return False
    return default


def parse_keywords(text: str | Iterable[str] | None) -> Tuple[str, ...]:
    """Comma-separated keywords, trimmed, empties dropped. Order is priority."""
    if text is None:
        return ()
    parts = text.split(",") if isinstance(text, str) else list(text)
    return tuple(k.strip() for k in parts if k and k.strip())


def parse_fallback_index(value) -> Optional[int]:
    """``None``/""/"disabled"/negative -> deaktiviert (None), sonst int."""
    if value is None:
        return None
    if isinstance(value, str):
        if value.strip().lower() in _DISABLED:
            return None
        value = int(value.strip())
    idx = int(value)
    return idx if idx >= 0 else None


# ---------------------- Auswahl-Policy ----------------------

def default_policy() -> SelectionPolicy:
    s = get_settings()
    codec = s.value("selection/codec", DEFAULT_CODEC, type=str) or DEFAULT_CODEC
    language = s.value("selection/language", DEFAULT_LANGUAGE, type=str) or DEFAULT_LANGUAGE
    raw_kw = s.value("selection/keywords", None)
    keywords = DEFAULT_KEYWORDS if raw_kw is None else parse_keywords(raw_kw)
    fallback = parse_fallback_index(s.value("selection/fallback_index", None))
    return SelectionPolicy(codec=codec, language=language, keywords=keywords, fallback_index=fallback)


def save_policy(policy: SelectionPolicy) -> None:
    s = get_settings()
    s.setValue("selection/codec", policy.codec)
    s.setValue("selection/language", policy.language)
    # als String ablegen, QSettings macht aus Ein-Element-Listen sonst Strings
    s.setValue("selection/keywords", ",".join(policy.keywords))
    s.setValue("selection/fallback_index", -1 if policy.fallback_index is None else policy.fallback_index)
    s.sync()


def burn_codecs() -> tuple[str, str]:
    s = get_settings()
    video = s.value("burn/video_codec", DEFAULT_VIDEO_CODEC, type=str) or DEFAULT_VIDEO_CODEC
    audio = s.value("burn/audio_codec", DEFAULT_AUDIO_CODEC, type=str) or DEFAULT_AUDIO_CODEC
    return video, audio


# ---------------------- Helpers für Bundled-FFmpeg ----------------------

def _project_root() -> Path:
    """
    Projektwurzel:
      - im PyInstaller-Build: sys._MEIPASS
      - im Dev: zwei Ordner über dieser Datei (…/src/subpick -> Projektroot)
    """
    import sys as _sys
    return Path(getattr(_sys, "_MEIPASS", Path(__file__).resolve().parents[2]))


def bundled_ffmpeg_dir() -> Path:
    plat = "windows" if platform.system() == "Windows" else "linux"
    return _project_root() / "resources" / "ffmpeg" / plat


def bundled_ffmpeg_available() -> bool:
    d = bundled_ffmpeg_dir()
    exe = ".exe" if platform.system() == "Windows" else ""
    return (d / f"ffmpeg{exe}").exists() and (d / f"ffprobe{exe}").exists()


def use_bundled_preferred() -> bool:
    """
    True, wenn Setting 'prefer_bundled' True ist, oder gar nichts gesetzt ist,
    aber (Windows) und Bundled-Binaries vorhanden sind.
    Strings wie "false"/"0" werden korrekt interpretiert.
    """
    s = get_settings()
    if (val := s.value("prefer_bundled", None)) is not None:
        return _parse_bool_like(val, False)
    return platform.system() == "Windows" and bundled_ffmpeg_available()


def custom_bin_path(name: str) -> Optional[str]:
    """
    Benutzerdefinierter Pfad (Einstellungen) – nur zurückgeben, wenn vorhanden.
    """
    s = get_settings()
    v = (s.value(f"path_{name}", "", type=str) or "").strip()
    return v if v and Path(v).exists() else None
