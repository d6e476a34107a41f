from __future__ import annotations
from dataclasses import dataclass
from typing import Literal

CodecType = Literal["video", "audio", "subtitle", "other"]

@dataclass(frozen=True)
class ProbeStream:
    index: int
    codec_type: CodecType
    codec_name: str | None
    language: str | None = None
    title: str | None = None
    forced: bool = False
    default: bool = False

    @property
    def is_subtitle(self) -> bool:
        return self.codec_type == "subtitle"

    @property
    def has_title(self) -> bool:
        return bool(self.title and self.title.strip())
