from __future__ import annotations
import re

# Zeichen, die in ffmpeg-Filterargumenten (subtitles='...') Ärger machen
_SPECIAL_RE = re.compile(r"['\"\\`\[\]{}()&|;$<>*?~]")
_SPACE_RE = re.compile(r"\s+")

FALLBACK_NAME = "normalized_file"


def normalize_filename(
    name: str,
    remove_special_chars: bool = True,
    replace_spaces: bool = False,
    replacement: str = "_",
) -> str:
    """Return ``name`` (without extension) made safe for ffmpeg filter arguments."""
    out = name
    if remove_special_chars:
        out = _SPECIAL_RE.sub(replacement, out)
    if replace_spaces:
        out = _SPACE_RE.sub(replacement, out)
    if replacement:
        rep = re.escape(replacement)
        out = re.sub(f"(?:{rep}){{2,}}", replacement, out)
        out = re.sub(f"^(?:{rep})+|(?:{rep})+$", "", out)
    if not out.strip():
        return FALLBACK_NAME
    return out
