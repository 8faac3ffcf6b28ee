"""Weighted best-first search for word sequences that spell a digit string.

Positions ``0..len(digits)`` are graph nodes. A word covering
``digits[i:i+k]`` is an edge from ``i`` to ``i+k`` whose weight depends on
``k``: one-digit words are expensive, two-digit words cheaper, longer words
cheapest. Peg edges get a small bonus. The search pops the lightest partial
path first, so completed paths arrive roughly in weight order; revisits that
are within ``prune_slack`` of the best known weight for a position are kept
to surface alternative phrasings.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from itertools import count
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..utils.observability import get_logger
from .bridge_dictionary import BridgeDictionary
from .candidates import MatchCandidate, Peg, pegs_for_system
from .systems import SystemLike, get_system

_logger = get_logger(__name__).bind(component="coverage_search")


@dataclass(frozen=True)
class SearchWeights:
    """Tunable scoring and branching limits for the coverage search.

    The values are heuristics: result sets, not exact rankings, are what
    callers should rely on.
    """

    single_digit_weight: float = 10.0
    two_digit_weight: float = 3.0
    base_weight: float = 1.0
    peg_bonus: float = 0.5
    prune_slack: float = 5.0
    words_per_span: int = 5
    max_full_results: int = 50
    max_expansions: int = 20000
    max_partial_results: int = 10
    max_partial_prefix: int = 8
    partial_words_per_span: int = 3

    def weight_for(self, digit_length: int, *, is_peg: bool = False) -> float:
        if digit_length == 1:
            weight = self.single_digit_weight
        elif digit_length == 2:
            weight = self.two_digit_weight
        else:
            weight = self.base_weight
        return weight - self.peg_bonus if is_peg else weight


DEFAULT_SEARCH_WEIGHTS = SearchWeights()


@dataclass(frozen=True)
class WordEdge:
    """A word (or peg word sequence) consuming ``length`` digits."""

    words: Tuple[str, ...]
    length: int
    weight: float
    is_peg: bool = False


EdgeMap = Dict[int, List[WordEdge]]


def build_edge_map(
    digits: str,
    dictionary: BridgeDictionary,
    system: SystemLike,
    pegs: Optional[Iterable[Peg]] = None,
    weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS,
) -> EdgeMap:
    """Collect the outgoing edges for every start position in ``digits``.

    Peg edges are listed before dictionary edges at each position.
    """

    resolved = get_system(system)
    total = len(digits)
    edges: EdgeMap = {position: [] for position in range(total)}

    for peg in pegs_for_system(pegs, resolved):
        span = len(peg.digits)
        peg_weight = weights.weight_for(span, is_peg=True)
        start = digits.find(peg.digits)
        while start != -1:
            edges[start].append(WordEdge(peg.words, span, peg_weight, is_peg=True))
            start = digits.find(peg.digits, start + 1)

    longest = dictionary.max_code_length
    per_span = max(0, weights.words_per_span)
    for start in range(total):
        for length in range(1, min(longest, total - start) + 1):
            words = dictionary.lookup_exact(digits[start : start + length], resolved)
            weight = weights.weight_for(length)
            edges[start].extend(
                WordEdge((word,), length, weight) for word in words[:per_span]
            )

    return edges


def find_full_coverages(
    digits: str,
    dictionary: BridgeDictionary,
    system: SystemLike,
    pegs: Optional[Iterable[Peg]] = None,
    weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS,
    *,
    max_results: Optional[int] = None,
) -> List[MatchCandidate]:
    """Return distinct word sequences covering all of ``digits``, lightest first."""

    if not digits:
        return []

    limit = weights.max_full_results if max_results is None else max_results
    if limit <= 0:
        return []

    edges = build_edge_map(digits, dictionary, system, pegs, weights)
    target = len(digits)
    tiebreak = count()

    # (weight, 0 when the last edge was a peg, insertion order, position, words, has_peg)
    open_set: List[Tuple[float, int, int, int, Tuple[str, ...], bool]] = [
        (0.0, 1, next(tiebreak), 0, (), False)
    ]
    best_weight: Dict[int, float] = {0: 0.0}
    seen: Set[Tuple[str, ...]] = set()
    results: List[MatchCandidate] = []
    expansions = 0

    while open_set and len(results) < limit and expansions < weights.max_expansions:
        weight, _, _, position, words, has_peg = heapq.heappop(open_set)
        expansions += 1

        if position == target:
            if words not in seen:
                seen.add(words)
                results.append(
                    MatchCandidate(
                        words=words,
                        digits=digits,
                        digits_covered=range(0, target),
                        is_full_match=True,
                        weight=weight,
                        is_peg_sourced=has_peg,
                    )
                )
            continue

        for edge in edges.get(position, ()):
            next_position = position + edge.length
            next_weight = weight + edge.weight
            known = best_weight.get(next_position)
            if known is not None and next_weight > known + weights.prune_slack:
                continue
            if known is None or next_weight < known:
                best_weight[next_position] = next_weight
            heapq.heappush(
                open_set,
                (
                    next_weight,
                    0 if edge.is_peg else 1,
                    next(tiebreak),
                    next_position,
                    words + edge.words,
                    has_peg or edge.is_peg,
                ),
            )

    if open_set and expansions >= weights.max_expansions:
        _logger.debug(
            "Coverage search stopped at expansion cap",
            context={"digits": len(digits), "results": len(results), "open": len(open_set)},
        )

    return results


def find_partial_coverages(
    digits: str,
    dictionary: BridgeDictionary,
    system: SystemLike,
    pegs: Optional[Iterable[Peg]] = None,
    weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS,
) -> List[MatchCandidate]:
    """Return words or pegs covering a proper prefix of ``digits``.

    Longer coverage ranks first, then lower weight.
    """

    if not digits:
        return []

    resolved = get_system(system)
    limit = max(0, weights.max_partial_results)
    results: List[MatchCandidate] = []
    seen: Set[Tuple[str, ...]] = set()

    for peg in pegs_for_system(pegs, resolved):
        span = len(peg.digits)
        if span >= len(digits) or not digits.startswith(peg.digits):
            continue
        candidate = MatchCandidate(
            words=peg.words,
            digits=peg.digits,
            digits_covered=range(0, span),
            is_full_match=False,
            weight=weights.weight_for(span, is_peg=True),
            is_peg_sourced=True,
        )
        if candidate.key not in seen:
            seen.add(candidate.key)
            results.append(candidate)

    longest = min(len(digits) - 1, weights.max_partial_prefix)
    for length in range(longest, 0, -1):
        if len(results) >= limit:
            break
        prefix = digits[:length]
        for word in dictionary.lookup_exact(prefix, resolved)[: weights.partial_words_per_span]:
            candidate = MatchCandidate(
                words=(word,),
                digits=prefix,
                digits_covered=range(0, length),
                is_full_match=False,
                weight=weights.weight_for(length),
            )
            if candidate.key not in seen:
                seen.add(candidate.key)
                results.append(candidate)

    results.sort(key=lambda candidate: (-len(candidate.digits), candidate.weight))
    return results[:limit]


__all__ = [
    "DEFAULT_SEARCH_WEIGHTS",
    "EdgeMap",
    "SearchWeights",
    "WordEdge",
    "build_edge_map",
    "find_full_coverages",
    "find_partial_coverages",
]
