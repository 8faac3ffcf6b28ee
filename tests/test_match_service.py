from __future__ import annotations

import logging

import pytest
from prometheus_client import REGISTRY

from mnemonic_pegs.app.services.match_service import MatchService, clean_digits
from mnemonic_pegs.core import BridgeDictionary
from mnemonic_pegs.utils.telemetry import StructuredTelemetry


class FakeClock:
    """Deterministic clock used to drive telemetry timers in tests."""

    def __init__(self, step: float = 0.01) -> None:
        self._current = 0.0
        self._step = step

    def __call__(self) -> float:
        value = self._current
        self._current += self._step
        return value


class ExplodingDictionary(BridgeDictionary):
    def lookup_exact(self, digits, system):
        raise RuntimeError("dictionary exploded")


def _sample(name: str, operation: str) -> float:
    return REGISTRY.get_sample_value(name, {"operation": operation}) or 0.0


@pytest.fixture
def service(dictionary):
    return MatchService(dictionary, telemetry=StructuredTelemetry(time_fn=FakeClock()))


def test_clean_digits_strips_everything_but_digits():
    assert clean_digits("1-7 a") == "17"
    assert clean_digits("(555) 010-9999") == "5550109999"
    assert clean_digits(None) == ""
    assert clean_digits("no digits") == ""
    # Non-ASCII digits are not mnemonic digits.
    assert clean_digits("\u0661\u0667 12") == "12"
    assert clean_digits("\uff11\uff17") == ""


def test_match_full_accepts_string_system_ids(service):
    major = service.match_full("17", "major")
    do_re = service.match_full("17", "do-re-major")

    assert [candidate.phrase for candidate in major] == ["dog", "duck", "tea", "toe"]
    # Both systems put D on 1 and K on 7.
    assert [candidate.phrase for candidate in do_re] == [candidate.phrase for candidate in major]


def test_match_full_uses_pegs(service, dock_peg):
    results = service.match_full("17", "major", [dock_peg])

    assert results[0].phrase == "dock"
    assert results[0].is_peg_sourced


def test_empty_digits_return_no_matches(service):
    assert service.match_full("", "major") == []
    assert service.match_segment("", "major") == []
    assert service.build_split_rows("", "major") == []

    snapshot = service.latest_telemetry()
    assert snapshot["name"] == "match_segment"
    assert snapshot["metadata"]["digits.length"] == 0
    assert snapshot["timings"] == {}


def test_match_full_records_telemetry(service):
    service.match_full("17", "major")

    snapshot = service.latest_telemetry()

    assert snapshot["name"] == "match_full"
    assert snapshot["metadata"]["system"] == "major"
    assert snapshot["metadata"]["pegs"] == 0
    assert snapshot["metadata"]["digits.length"] == 2
    assert snapshot["counters"] == {"results.full": 2.0, "results.partial": 2.0}
    assert snapshot["timings"]["match_full"]["count"] == 1
    assert snapshot["timings"]["match_full"]["total"] == pytest.approx(0.01)


def test_latest_telemetry_is_a_copy(service):
    service.match_full("17", "major")

    snapshot = service.latest_telemetry()
    snapshot["counters"]["results.full"] = 99

    assert service.latest_telemetry()["counters"]["results.full"] == 2.0


def test_match_segment_lists_pegs_then_words(service, dock_peg):
    results = service.match_segment("17", "major", [dock_peg])

    assert [candidate.phrase for candidate in results] == ["dock", "dog", "duck"]
    assert service.latest_telemetry()["counters"]["results.full"] == 3.0


def test_query_failures_are_counted_logged_and_raised(caplog):
    service = MatchService(ExplodingDictionary({"DK": ["dog"]}))
    before = _sample("mnemonic_match_query_failures_total", "match_full")
    caplog.set_level(logging.ERROR, logger="mnemonic_pegs.app.services.match_service")

    with pytest.raises(RuntimeError, match="exploded"):
        service.match_full("17", "major")

    assert _sample("mnemonic_match_query_failures_total", "match_full") == before + 1
    assert any("Match query failed" in record.message for record in caplog.records)
    assert service.latest_telemetry()["timings"]["match_full"]["count"] == 1


def test_queries_are_counted(service):
    before = _sample("mnemonic_match_queries_total", "match_segment")
    empty_before = _sample("mnemonic_match_empty_results_total", "match_segment")

    service.match_segment("17", "major")
    service.match_segment("99", "major")

    assert _sample("mnemonic_match_queries_total", "match_segment") == before + 2
    assert _sample("mnemonic_match_empty_results_total", "match_segment") == empty_before + 1


def test_unknown_system_raises(service):
    with pytest.raises(KeyError):
        service.match_full("17", "dominic")


def test_build_split_rows_skips_incomplete_splits(service):
    rows = service.build_split_rows("1217", "major")

    assert [row.pattern for row in rows] == ["12+17", "1+2+17", "12+1+7", "1+2+1+7"]
    first = rows[0]
    assert first.parts == ("12", "17")
    assert [segment.digits for segment in first.segments] == ["12", "17"]
    assert [match.phrase for match in first.segments[1].matches] == ["dog", "duck"]
    assert service.latest_telemetry()["timings"]["split_rows"]["count"] == 1


def test_build_split_rows_caps_combinations_but_keeps_first_row(service):
    assert [row.pattern for row in service.build_split_rows("1217", "major", max_combinations=5)] == [
        "12+17"
    ]
    assert [row.pattern for row in service.build_split_rows("1217", "major", max_combinations=0)] == [
        "12+17"
    ]


def test_build_split_rows_truncates_segments(service, dock_peg):
    rows = service.build_split_rows("1217", "major", [dock_peg], words_per_segment=1)

    tin, dock = rows[0].segments
    assert [match.phrase for match in tin.matches] == ["tin"]
    assert tin.has_more
    assert dock.matches[0].phrase == "dock" and dock.matches[0].is_peg_sourced
    assert dock.has_more


def test_build_split_rows_without_any_complete_split(service):
    assert service.build_split_rows("999", "major") == []
