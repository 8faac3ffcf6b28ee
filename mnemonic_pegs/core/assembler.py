"""Merge peg, exact and searched matches into one ranked, diversified list."""

from __future__ import annotations

from typing import Iterable, List, Optional, Set, Tuple

from .bridge_dictionary import BridgeDictionary
from .candidates import MatchCandidate, Peg, pegs_for_system
from .coverage_search import (
    DEFAULT_SEARCH_WEIGHTS,
    SearchWeights,
    find_full_coverages,
    find_partial_coverages,
)
from .diversifier import diversify
from .systems import SystemLike, get_system

DEFAULT_MAX_RESULTS = 20
DEFAULT_EXACT_MATCH_LIMIT = 8


def rank_key(candidate: MatchCandidate) -> Tuple[bool, bool, int, float]:
    """Full matches before partial ones; within each, pegs first, then fewer
    words, then lower weight.
    """

    return (
        not candidate.is_full_match,
        not candidate.is_peg_sourced,
        candidate.word_count,
        candidate.weight,
    )


def rank_candidates(candidates: Iterable[MatchCandidate]) -> List[MatchCandidate]:
    return sorted(candidates, key=rank_key)


def _whole_span(
    words: Tuple[str, ...],
    digits: str,
    weight: float,
    *,
    is_peg: bool = False,
) -> MatchCandidate:
    return MatchCandidate(
        words=words,
        digits=digits,
        digits_covered=range(0, len(digits)),
        is_full_match=True,
        weight=weight,
        is_peg_sourced=is_peg,
    )


def assemble_matches(
    digits: str,
    dictionary: BridgeDictionary,
    system: SystemLike,
    pegs: Optional[Iterable[Peg]] = None,
    weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS,
    *,
    max_results: int = DEFAULT_MAX_RESULTS,
    exact_match_limit: int = DEFAULT_EXACT_MATCH_LIMIT,
) -> List[MatchCandidate]:
    """Build the ranked full-span result list for ``digits``.

    Stages, each skipping word sequences already collected: pegs spelling the
    whole span, single dictionary words spelling it, searched multi-word
    coverages and, when full matches run short, prefix coverages.
    """

    if not digits:
        return []

    resolved = get_system(system)
    active_pegs = pegs_for_system(pegs, resolved)
    span_weight = weights.weight_for(len(digits))
    merged: List[MatchCandidate] = []
    seen: Set[Tuple[str, ...]] = set()

    def _add(candidate: MatchCandidate) -> None:
        if candidate.key in seen:
            return
        seen.add(candidate.key)
        merged.append(candidate)

    for peg in active_pegs:
        if peg.digits == digits:
            _add(
                _whole_span(
                    peg.words,
                    digits,
                    weights.weight_for(len(digits), is_peg=True),
                    is_peg=True,
                )
            )

    for word in dictionary.lookup_exact(digits, resolved)[: max(0, exact_match_limit)]:
        _add(_whole_span((word,), digits, span_weight))

    for candidate in find_full_coverages(digits, dictionary, resolved, active_pegs, weights):
        _add(candidate)

    full_count = sum(1 for candidate in merged if candidate.is_full_match)
    if full_count < max_results:
        for candidate in find_partial_coverages(digits, dictionary, resolved, active_pegs, weights):
            _add(candidate)

    return diversify(rank_candidates(merged), max_results)


def segment_matches(
    digit_span: str,
    dictionary: BridgeDictionary,
    system: SystemLike,
    pegs: Optional[Iterable[Peg]] = None,
    weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS,
) -> List[MatchCandidate]:
    """Return pegs then dictionary words spelling exactly ``digit_span``.

    Words are de-duplicated case-insensitively; no diversification is applied
    so every ranked dictionary word stays available for display.
    """

    if not digit_span:
        return []

    resolved = get_system(system)
    results: List[MatchCandidate] = []
    seen: Set[Tuple[str, ...]] = set()

    for peg in pegs_for_system(pegs, resolved):
        if peg.digits != digit_span:
            continue
        candidate = _whole_span(
            peg.words,
            digit_span,
            weights.weight_for(len(digit_span), is_peg=True),
            is_peg=True,
        )
        if candidate.key not in seen:
            seen.add(candidate.key)
            results.append(candidate)

    span_weight = weights.weight_for(len(digit_span))
    for word in dictionary.lookup_exact(digit_span, resolved):
        candidate = _whole_span((word,), digit_span, span_weight)
        if candidate.key not in seen:
            seen.add(candidate.key)
            results.append(candidate)

    return results


__all__ = [
    "DEFAULT_EXACT_MATCH_LIMIT",
    "DEFAULT_MAX_RESULTS",
    "assemble_matches",
    "rank_candidates",
    "rank_key",
    "segment_matches",
]
