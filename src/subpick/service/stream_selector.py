from __future__ import annotations
from typing import List, Optional, Sequence

from subpick.model.probe_stream import ProbeStream
from subpick.model.selection import (
    Matched, MatchReason, NoMatch, NoMatchCause, SelectionPolicy, SelectionResult, StreamSummary,
)


def _is_candidate(stream: ProbeStream, policy: SelectionPolicy) -> bool:
    return stream.codec_name == policy.codec and stream.language == policy.language


def _title_contains(stream: ProbeStream, keyword: str) -> bool:
    if stream.title is None:
        return False
    return keyword.lower() in stream.title.lower()


def _match_keywords(candidates: Sequence[ProbeStream], keywords: Sequence[str]) -> Optional[Matched]:
    # erstes Keyword mit irgendeinem Treffer gewinnt, innerhalb davon der erste Stream
    for kw in keywords:
        for s in candidates:
            if _title_contains(s, kw):
                return Matched(stream=s, reason=MatchReason.keyword(kw))
    return None


def select(streams: Sequence[ProbeStream], policy: SelectionPolicy) -> SelectionResult:
    """Wählt genau einen Untertitel-Stream gemäß ``policy``.

    Reine Funktion: liest nur ``streams``/``policy``, liefert ``Matched`` oder
    ``NoMatch``. Erwartete Nicht-Treffer werden nie als Exception gemeldet.
    """
    subs: List[ProbeStream] = [s for s in streams if s.is_subtitle]
    diagnostics = tuple(StreamSummary.of(s) for s in subs)

    def no_match(cause: NoMatchCause, detail: str = "") -> NoMatch:
        return NoMatch(cause=cause, diagnostics=diagnostics, detail=detail)

    if not subs:
        return no_match(NoMatchCause.NO_SUBTITLES)

    candidates = [s for s in subs if _is_candidate(s, policy)]
    if not candidates:
        return no_match(NoMatchCause.NO_CANDIDATE)

    if len(candidates) == 1:
        return Matched(stream=candidates[0], reason=MatchReason.single_candidate())

    hit = _match_keywords(candidates, policy.keywords)
    if hit is not None:
        return hit

    fb = policy.fallback_index
    if fb is None or fb < 0:
        return no_match(NoMatchCause.NO_KEYWORD_MATCH, "fallback index disabled")
    if fb >= len(candidates):
        return no_match(
            NoMatchCause.FALLBACK_OUT_OF_BOUNDS,
            f"fallback index {fb} out of bounds {len(candidates)}",
        )

    chosen = candidates[fb]
    if chosen.has_title:
        return no_match(
            NoMatchCause.FALLBACK_TITLED,
            f'fallback index {fb} has title "{chosen.title}" - only streams with no title allowed for fallback',
        )
    return Matched(stream=chosen, reason=MatchReason.fallback(fb))


def candidate_count(streams: Sequence[ProbeStream], policy: SelectionPolicy) -> int:
    return sum(1 for s in streams if s.is_subtitle and _is_candidate(s, policy))
