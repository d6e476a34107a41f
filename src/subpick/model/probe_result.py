from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple
from subpick.model.probe_stream import ProbeStream

@dataclass(frozen=True)
class ProbeResult:
    path: Path
    streams: Tuple[ProbeStream, ...]

    @property
    def subtitle_streams(self) -> Tuple[ProbeStream, ...]:
        return tuple(s for s in self.streams if s.is_subtitle)
