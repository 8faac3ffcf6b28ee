"""Match service exposing the engine entry points to the application layer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from mnemonic_pegs.core import (
    DEFAULT_SEARCH_WEIGHTS,
    BridgeDictionary,
    MatchCandidate,
    Peg,
    SearchWeights,
    assemble_matches,
    display_segmentations,
    encode,
    get_system,
    segment_matches,
)
from mnemonic_pegs.core.assembler import DEFAULT_EXACT_MATCH_LIMIT, DEFAULT_MAX_RESULTS
from mnemonic_pegs.core.systems import SystemLike

from ...utils.observability import (
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)
from ...utils.telemetry import StructuredTelemetry

_NON_DIGIT = re.compile(r"[^0-9]")


def clean_digits(raw: Optional[str]) -> str:
    """Strip everything but ASCII digits from user input."""

    return _NON_DIGIT.sub("", raw or "")


@dataclass(frozen=True)
class SegmentMatches:
    """Displayed matches for one part of a split row."""

    digits: str
    matches: Tuple[MatchCandidate, ...]
    has_more: bool


@dataclass(frozen=True)
class SplitRow:
    pattern: str
    parts: Tuple[str, ...]
    segments: Tuple[SegmentMatches, ...]


class MatchService:
    """Runs match queries against a loaded dictionary.

    The dictionary and weights are fixed for the life of the service; pegs and
    the active system are supplied per query.
    """

    def __init__(
        self,
        dictionary: BridgeDictionary,
        *,
        weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS,
        max_results: int = DEFAULT_MAX_RESULTS,
        exact_match_limit: int = DEFAULT_EXACT_MATCH_LIMIT,
        telemetry: Optional[StructuredTelemetry] = None,
    ) -> None:
        self.dictionary = dictionary
        self.weights = weights
        self.max_results = max(0, int(max_results))
        self.exact_match_limit = max(0, int(exact_match_limit))
        self.telemetry = telemetry or StructuredTelemetry()
        self._logger = get_logger(__name__).bind(component="match_service")

        self._metric_queries = create_counter(
            "mnemonic_match_queries_total",
            "Match queries served, by entry point.",
            label_names=("operation",),
        )
        self._metric_failures = create_counter(
            "mnemonic_match_query_failures_total",
            "Match queries that raised an exception.",
            label_names=("operation",),
        )
        self._metric_empty = create_counter(
            "mnemonic_match_empty_results_total",
            "Match queries that produced no candidates.",
            label_names=("operation",),
        )
        self._metric_duration = create_histogram(
            "mnemonic_match_query_seconds",
            "Latency of match queries.",
            label_names=("operation",),
        )

        self._logger.info(
            "Match service initialised",
            context={
                "bridge_codes": len(dictionary),
                "max_results": self.max_results,
                "max_full_results": weights.max_full_results,
            },
        )

    # Public API ------------------------------------------------------------
    def encode(self, word: str, system: SystemLike) -> str:
        return encode(word, system)

    def match_full(
        self,
        digits: str,
        system: SystemLike,
        pegs: Optional[Iterable[Peg]] = None,
    ) -> List[MatchCandidate]:
        """Ranked full and partial matches for the whole digit string."""

        return self._run(
            "match_full",
            digits,
            system,
            lambda resolved, peg_list: assemble_matches(
                digits,
                self.dictionary,
                resolved,
                peg_list,
                self.weights,
                max_results=self.max_results,
                exact_match_limit=self.exact_match_limit,
            ),
            pegs,
        )

    def match_segment(
        self,
        digit_span: str,
        system: SystemLike,
        pegs: Optional[Iterable[Peg]] = None,
    ) -> List[MatchCandidate]:
        """Pegs and dictionary words spelling exactly ``digit_span``."""

        return self._run(
            "match_segment",
            digit_span,
            system,
            lambda resolved, peg_list: segment_matches(
                digit_span, self.dictionary, resolved, peg_list, self.weights
            ),
            pegs,
        )

    def build_split_rows(
        self,
        digits: str,
        system: SystemLike,
        pegs: Optional[Iterable[Peg]] = None,
        *,
        max_combinations: int = 50,
        max_splits: int = 100,
        words_per_segment: int = 5,
    ) -> List[SplitRow]:
        """Segment-by-segment rows for the leading splits of ``digits``.

        Rows where any part has no match are skipped. Rows stop once the
        running total of displayed combinations would pass
        ``max_combinations``; the first matching row is always returned.
        """

        if not digits:
            return []

        resolved = get_system(system)
        peg_list = list(pegs or ())
        rows: List[SplitRow] = []
        total_combinations = 0

        with self.telemetry.timer("split_rows", {"digits": len(digits)}) as payload:
            for segmentation in display_segmentations(digits, max_splits):
                segments: List[SegmentMatches] = []
                row_combinations = 1
                for part in segmentation.parts:
                    matches = segment_matches(
                        part, self.dictionary, resolved, peg_list, self.weights
                    )
                    if not matches:
                        break
                    shown = tuple(matches[:words_per_segment])
                    row_combinations *= len(shown)
                    segments.append(
                        SegmentMatches(part, shown, len(matches) > words_per_segment)
                    )
                else:
                    if rows and total_combinations + row_combinations > max_combinations:
                        break
                    total_combinations += row_combinations
                    rows.append(
                        SplitRow(segmentation.pattern, segmentation.parts, tuple(segments))
                    )
            payload["rows"] = len(rows)
            payload["combinations"] = total_combinations

        return rows

    def latest_telemetry(self) -> Dict[str, Any]:
        return self.telemetry.snapshot()

    # Internal helpers ------------------------------------------------------
    def _run(self, operation, digits, system, query, pegs) -> List[MatchCandidate]:
        self._metric_queries.labels(operation=operation).inc()
        self.telemetry.start_trace(operation)
        self.telemetry.annotate("digits.length", len(digits or ""))

        if not digits:
            self._metric_empty.labels(operation=operation).inc()
            return []

        resolved = get_system(system)
        peg_list: Sequence[Peg] = list(pegs or ())
        self.telemetry.annotate("system", resolved.id.value)
        self.telemetry.annotate("pegs", len(peg_list))

        attributes = {
            "mnemonic.operation": operation,
            "mnemonic.system": resolved.id.value,
            "mnemonic.digits": len(digits),
        }
        with start_span(f"mnemonic.{operation}", attributes) as span:
            with self._metric_duration.labels(operation=operation).time():
                try:
                    with self.telemetry.timer(operation):
                        results = query(resolved, peg_list)
                except Exception as exc:
                    self._metric_failures.labels(operation=operation).inc()
                    record_exception(span, exc)
                    self._logger.error(
                        "Match query failed",
                        context={"operation": operation, "error": str(exc)},
                    )
                    raise

            add_span_attributes(span, {"mnemonic.results": len(results)})

        full = sum(1 for candidate in results if candidate.is_full_match)
        self.telemetry.increment("results.full", full)
        self.telemetry.increment("results.partial", len(results) - full)
        if not results:
            self._metric_empty.labels(operation=operation).inc()

        self._logger.debug(
            "Match query completed",
            context={
                "operation": operation,
                "system": resolved.id.value,
                "digits": len(digits),
                "results": len(results),
                "full": full,
            },
        )
        return results


__all__ = ["MatchService", "SegmentMatches", "SplitRow", "clean_digits"]
