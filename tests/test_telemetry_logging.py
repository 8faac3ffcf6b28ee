import logging

from mnemonic_pegs.utils.observability import get_logger
from mnemonic_pegs.utils.telemetry import StructuredTelemetry, TelemetryLogger


def test_structured_telemetry_emits_logging_events(caplog):
    telemetry = StructuredTelemetry()
    listener = TelemetryLogger()
    telemetry.add_listener(listener)

    caplog.set_level(logging.DEBUG, logger="mnemonic_pegs.utils.telemetry")

    telemetry.start_trace("test-trace")
    with telemetry.timer("phase"):
        pass
    telemetry.increment("results.full")
    telemetry.annotate("digits.length", 3)

    messages = [record.message for record in caplog.records]
    assert any("Telemetry trace_started: test-trace" in message for message in messages)
    assert any("Telemetry timing: phase" in message for message in messages)
    assert any("Telemetry counter: results.full" in message for message in messages)
    assert any("Telemetry metadata: digits.length" in message for message in messages)


def test_removed_listener_stops_receiving_events():
    events = []
    telemetry = StructuredTelemetry()
    listener = lambda event_type, payload: events.append(event_type)  # noqa: E731
    telemetry.add_listener(listener)

    telemetry.start_trace("first")
    telemetry.remove_listener(listener)
    telemetry.increment("ignored")

    assert events == ["trace_started"]


def test_timer_payload_becomes_event_metadata():
    telemetry = StructuredTelemetry()
    telemetry.start_trace("rows")

    with telemetry.timer("split_rows", {"digits": 4}) as payload:
        payload["rows"] = 2

    event = telemetry.snapshot()["events"][-1]
    assert event["name"] == "split_rows"
    assert event["metadata"] == {"digits": 4, "rows": 2}


def test_start_trace_discards_previous_data():
    telemetry = StructuredTelemetry()
    telemetry.start_trace("first")
    telemetry.increment("results.full", 3)

    trace_id = telemetry.start_trace("second")

    snapshot = telemetry.snapshot()
    assert snapshot["trace_id"] == trace_id == 2
    assert snapshot["name"] == "second"
    assert snapshot["counters"] == {}


def test_logger_adapter_renders_bound_and_call_context(caplog):
    caplog.set_level(logging.INFO, logger="mnemonic_pegs.tests")
    logger = get_logger("mnemonic_pegs.tests", component="demo").bind(system="major")

    logger.info("Lookup finished", context={"results": 2})

    message = caplog.records[-1].message
    assert message.startswith("Lookup finished | ")
    assert '"component": "demo"' in message
    assert '"results": 2' in message
    assert '"system": "major"' in message
