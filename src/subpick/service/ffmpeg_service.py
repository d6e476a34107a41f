from __future__ import annotations
import json
import os
import platform
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

from subpick.settings import bundled_ffmpeg_dir, custom_bin_path, use_bundled_preferred
from subpick.model.probe_result import ProbeResult
from subpick.model.probe_stream import CodecType, ProbeStream

_KNOWN_TYPES = ("video", "audio", "subtitle")


def _codec_type(raw: str) -> CodecType:
    return raw if raw in _KNOWN_TYPES else "other"  # type: ignore[return-value]


_OPTION_SPECIAL = "\\':"
_GRAPH_SPECIAL = "\\'[],;"


def _backslash_escape(text: str, special: str) -> str:
    return "".join("\\" + c if c in special else c for c in text)


def _escape_filter_path(path: str) -> str:
    # ffmpeg entschachtelt zweimal: erst Filtergraph, dann Filteroptionen
    return _backslash_escape(_backslash_escape(path, _OPTION_SPECIAL), _GRAPH_SPECIAL)


class FfmpegService:
    """Kapselt Aufrufe von ffprobe und baut die ffmpeg-Argumente für das Einbrennen."""

    # --------- Binärsuche ---------

    def _vendor_ffbin(self, name: str) -> Optional[Path]:
        exe = name + (".exe" if platform.system() == "Windows" else "")
        candidate = bundled_ffmpeg_dir() / exe
        return candidate if candidate.exists() else None

    def _chmod_exec(self, p: Path):
        try:
            os.chmod(p, 0o755)
        except OSError:
            pass

    def find_ffbin(self, name: str) -> str:
        custom = custom_bin_path(name)
        if custom:
            return custom

        def vendor() -> Optional[str]:
            vend = self._vendor_ffbin(name)
            if vend:
                self._chmod_exec(vend)
                return str(vend)
            return None

        lookups = (vendor, lambda: shutil.which(name))
        if not use_bundled_preferred():
            lookups = lookups[::-1]
        for lookup in lookups:
            found = lookup()
            if found:
                return found

        raise FileNotFoundError(
            f"{name} nicht gefunden. Setze Pfad in den Einstellungen (path_{name}), "
            f"installiere es systemweit oder lege es unter resources/ffmpeg/<platform>/ ab."
        )

    # --------- ffprobe ---------

    def run_ffprobe(self, file: Path) -> Dict[str, Any]:
        ffprobe = self.find_ffbin("ffprobe")
        cmd = [ffprobe, "-v", "error", "-show_streams", "-print_format", "json", str(file)]
        out = subprocess.check_output(cmd, stderr=subprocess.PIPE)
        return json.loads(out)

    def parse_streams(self, ffprobe_json: Dict[str, Any]) -> List[ProbeStream]:
        result: List[ProbeStream] = []
        for s in ffprobe_json.get("streams", []) or []:
            ctype = s.get("codec_type")
            if not ctype:
                continue
            tags = s.get("tags", {}) or {}
            disp = s.get("disposition", {}) or {}
            result.append(ProbeStream(
                index=int(s.get("index", -1)),
                codec_type=_codec_type(ctype),
                codec_name=s.get("codec_name"),
                language=tags.get("language") or tags.get("LANGUAGE"),
                title=tags.get("title") or tags.get("TITLE"),
                forced=str(disp.get("forced", 0)) == "1",
                default=str(disp.get("default", 0)) == "1",
            ))
        return result

    def probe_file(self, file: Path) -> ProbeResult:
        data = self.run_ffprobe(file)
        return ProbeResult(path=file, streams=tuple(self.parse_streams(data)))

    # --------- Einbrennen (nur Argumente, Ausführung macht der Aufrufer) ---------

    def subtitle_filter(self, file: Path, rel_sub_index: int) -> str:
        """``si`` zählt nur Untertitel-Streams, nicht den absoluten Index."""
        return f"subtitles={_escape_filter_path(str(file))}:si={rel_sub_index}"

    def build_burn_command(
        self,
        file: Path,
        rel_sub_index: int,
        output_file: Path,
        video_codec: str = "libx265",
        audio_codec: str = "copy",
        ffmpeg: Optional[str] = None,
    ) -> List[str]:
        ffmpeg = ffmpeg or self.find_ffbin("ffmpeg")
        return [
            ffmpeg, "-y", "-i", str(file),
            "-vf", self.subtitle_filter(file, rel_sub_index),
            "-c:v", video_codec,
            "-c:a", audio_codec,
            str(output_file),
        ]
