from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional, Tuple, Union

from subpick.model.probe_stream import ProbeStream

DEFAULT_CODEC = "ass"
DEFAULT_LANGUAGE = "eng"
DEFAULT_KEYWORDS: Tuple[str, ...] = ("dialogue", "full", "complete")


@dataclass(frozen=True)
class SelectionPolicy:
    """Kriterien für genau einen Auswahl-Aufruf.

    ``fallback_index`` ist ``None``, wenn der Positions-Fallback deaktiviert ist.
    """
    codec: str = DEFAULT_CODEC
    language: str = DEFAULT_LANGUAGE
    keywords: Tuple[str, ...] = DEFAULT_KEYWORDS
    fallback_index: Optional[int] = None

    def __post_init__(self) -> None:
        # Listen vom Aufrufer einfrieren, die Reihenfolge ist die Priorität
        object.__setattr__(self, "keywords", tuple(self.keywords))

    def describe(self) -> str:
        fb = "disabled" if self.fallback_index is None else str(self.fallback_index)
        return (f'codec={self.codec}, language={self.language}, '
                f'keywords="{", ".join(self.keywords)}", fallbackIndex={fb}')


ReasonKind = Literal["single-candidate", "keyword", "fallback"]


@dataclass(frozen=True)
class MatchReason:
    kind: ReasonKind
    value: str | int | None = None

    @classmethod
    def single_candidate(cls) -> "MatchReason":
        return cls("single-candidate")

    @classmethod
    def keyword(cls, keyword: str) -> "MatchReason":
        return cls("keyword", keyword)

    @classmethod
    def fallback(cls, position: int) -> "MatchReason":
        return cls("fallback", position)

    def __str__(self) -> str:
        if self.kind == "single-candidate":
            return self.kind
        return f"{self.kind}:{self.value}"


class NoMatchCause(str, Enum):
    NO_SUBTITLES = "no-subtitles"
    NO_CANDIDATE = "no-candidate"
    NO_KEYWORD_MATCH = "no-keyword-match"
    FALLBACK_OUT_OF_BOUNDS = "fallback-out-of-bounds"
    FALLBACK_TITLED = "fallback-titled"


@dataclass(frozen=True)
class StreamSummary:
    index: int
    codec: str | None
    language: str | None
    title: str | None

    @classmethod
    def of(cls, stream: ProbeStream) -> "StreamSummary":
        return cls(stream.index, stream.codec_name, stream.language, stream.title)

    def __str__(self) -> str:
        return (f'Index {self.index}: codec={self.codec or "unknown"}, '
                f'language={self.language or "unknown"}, title="{self.title or "no title"}"')


@dataclass(frozen=True)
class Matched:
    stream: ProbeStream
    reason: MatchReason


@dataclass(frozen=True)
class NoMatch:
    cause: NoMatchCause
    diagnostics: Tuple[StreamSummary, ...] = field(default_factory=tuple)
    detail: str = ""


SelectionResult = Union[Matched, NoMatch]


@dataclass(frozen=True)
class DerivedIndices:
    absolute_index: int
    subtitle_relative_index: int
