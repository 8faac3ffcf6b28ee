"""Filters that keep result lists from repeating morphological variants."""

from __future__ import annotations

from typing import Iterable, List, Set

from .candidates import MatchCandidate

SIMILARITY_SUFFIXES = ("s", "es", "ed", "ing", "er", "est", "ly", "tion", "ness")
MIN_BASE_LENGTH = 3


def base_form(word: str) -> str:
    """Strip the longest similarity suffix that leaves a usable stem."""

    for suffix in sorted(SIMILARITY_SUFFIXES, key=len, reverse=True):
        if word.endswith(suffix) and len(word) - len(suffix) >= MIN_BASE_LENGTH:
            return word[: -len(suffix)]
    return word


def are_similar(first: str, second: str) -> bool:
    """Return ``True`` when two words are the same word in different dress.

    Equal words, words where one prefixes the other ("run"/"running") and
    words sharing a base after stripping common suffixes ("walked"/"walking")
    all count.
    """

    a = first.lower()
    b = second.lower()
    if not a or not b:
        return a == b
    if a == b or a.startswith(b) or b.startswith(a):
        return True

    for suffix in SIMILARITY_SUFFIXES:
        base_a = a[: -len(suffix)] if a.endswith(suffix) else a
        base_b = b[: -len(suffix)] if b.endswith(suffix) else b
        if base_a == base_b or base_a == b or base_b == a:
            return True
    return base_form(a) == base_form(b)


def _clashes(words: Iterable[str], accepted: Set[str]) -> bool:
    return any(are_similar(word, used) for word in words for used in accepted)


def diversify(candidates: Iterable[MatchCandidate], max_results: int) -> List[MatchCandidate]:
    """Walk ranked candidates, dropping ones that echo an accepted word.

    Peg-sourced candidates are always kept.
    """

    accepted: List[MatchCandidate] = []
    used_words: Set[str] = set()
    if max_results <= 0:
        return accepted

    for candidate in candidates:
        if candidate.is_peg_sourced or not _clashes(candidate.words, used_words):
            accepted.append(candidate)
            used_words.update(word.lower() for word in candidate.words)
            if len(accepted) >= max_results:
                break

    return accepted


__all__ = ["MIN_BASE_LENGTH", "SIMILARITY_SUFFIXES", "are_similar", "base_form", "diversify"]
