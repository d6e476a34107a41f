from __future__ import annotations
from typing import Sequence

from subpick.model.probe_stream import ProbeStream
from subpick.model.selection import DerivedIndices


class InvariantViolation(Exception):
    """Aufrufer hat einen Stream übergeben, der nicht zur Streamliste passt."""


def map_indices(all_streams: Sequence[ProbeStream], selected: ProbeStream) -> DerivedIndices:
    """
    Rechnet den absoluten Stream-Index in den Untertitel-relativen Index um
    (das ``si=``/``0:s:N`` von ffmpeg zählt nur Untertitel-Streams).
    """
    if not selected.is_subtitle:
        raise InvariantViolation(
            f"stream {selected.index} is {selected.codec_type}, not subtitle"
        )
    rel = -1
    for s in all_streams:
        if s.is_subtitle:
            rel += 1
            if s.index == selected.index:
                return DerivedIndices(absolute_index=s.index, subtitle_relative_index=rel)
    raise InvariantViolation(f"subtitle stream {selected.index} not found in stream list")
