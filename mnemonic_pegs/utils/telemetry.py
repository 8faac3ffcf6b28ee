"""Per-query telemetry for the match service.

A :class:`StructuredTelemetry` holds one trace at a time: the stage timings,
result counters and annotations of the query being served. Listeners see each
event as it happens, and :meth:`StructuredTelemetry.snapshot` hands out a
detached copy of the whole trace.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, Iterable, Iterator, List, Optional

from .observability import get_logger

TelemetryListener = Callable[[str, Dict[str, Any]], None]


@dataclass
class StageTiming:
    count: int = 0
    total: float = 0.0
    min: float = 0.0
    max: float = 0.0

    def observe(self, duration: float) -> None:
        if self.count == 0:
            self.min = self.max = duration
        else:
            self.min = min(self.min, duration)
            self.max = max(self.max, duration)
        self.count += 1
        self.total += duration

    def as_dict(self) -> Dict[str, float]:
        return {"count": self.count, "total": self.total, "min": self.min, "max": self.max}


@dataclass
class QueryTrace:
    trace_id: int = 0
    name: Optional[str] = None
    stages: Dict[str, StageTiming] = field(default_factory=dict)
    counters: Dict[str, float] = field(default_factory=dict)
    events: Deque[Dict[str, Any]] = field(default_factory=deque)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "trace_id": self.trace_id,
            "name": self.name,
            "timings": {stage: timing.as_dict() for stage, timing in self.stages.items()},
            "counters": dict(self.counters),
            "events": deepcopy(list(self.events)),
            "metadata": deepcopy(self.metadata),
        }


class StructuredTelemetry:
    """Collects stage timings, counters and metadata for the current query.

    Each call to :meth:`start_trace` discards the previous trace. Listeners
    receive ``(event_type, payload)`` for every recorded event.
    """

    def __init__(
        self,
        time_fn: Optional[Callable[[], float]] = None,
        *,
        max_events: int = 128,
        listeners: Optional[Iterable[TelemetryListener]] = None,
    ) -> None:
        self._clock = time_fn or time.perf_counter
        self._event_limit = max(1, int(max_events))
        self._listeners: List[TelemetryListener] = list(listeners or ())
        self._trace = self._new_trace(0, None)

    def _new_trace(self, trace_id: int, name: Optional[str]) -> QueryTrace:
        return QueryTrace(trace_id=trace_id, name=name, events=deque(maxlen=self._event_limit))

    def _publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        for listener in list(self._listeners):
            listener(event_type, dict(payload))

    def now(self) -> float:
        return float(self._clock())

    def start_trace(self, name: str) -> int:
        """Open a new trace called ``name`` and return its id."""

        self._trace = self._new_trace(self._trace.trace_id + 1, name)
        self._trace.metadata["start_time"] = self.now()
        self._publish("trace_started", {"trace_id": self._trace.trace_id, "name": name})
        return self._trace.trace_id

    def record_timing(
        self,
        name: str,
        duration: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        duration = max(0.0, float(duration))
        self._trace.stages.setdefault(name, StageTiming()).observe(duration)

        event: Dict[str, Any] = {"name": name, "duration": duration}
        if metadata:
            event["metadata"] = dict(metadata)
        self._trace.events.append(event)
        self._publish("timing", event)

    @contextmanager
    def timer(
        self,
        name: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Time the enclosed block; the yielded dict becomes event metadata."""

        details: Dict[str, Any] = dict(metadata or {})
        started = self.now()
        try:
            yield details
        finally:
            self.record_timing(name, self.now() - started, details)

    def increment(self, name: str, amount: float = 1.0) -> None:
        counters = self._trace.counters
        counters[name] = counters.get(name, 0.0) + float(amount)
        self._publish("counter", {"name": name, "delta": float(amount), "value": counters[name]})

    def annotate(self, key: str, value: Any) -> None:
        self._trace.metadata[key] = value
        self._publish("metadata", {"key": key, "value": value})

    def snapshot(self) -> Dict[str, Any]:
        """Return a detached copy of the active trace."""

        return self._trace.as_dict()

    def add_listener(self, listener: TelemetryListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: TelemetryListener) -> None:
        self._listeners = [entry for entry in self._listeners if entry is not listener]


class TelemetryLogger:
    """Forward telemetry events to the ``mnemonic_pegs`` loggers."""

    def __init__(
        self,
        *,
        logger: Optional[logging.LoggerAdapter] = None,
        level: int = logging.DEBUG,
        level_map: Optional[Dict[str, int]] = None,
    ) -> None:
        self._logger = logger or get_logger(__name__).bind(component="telemetry")
        self._level = level
        self._levels = dict(level_map or {})

    def __call__(self, event_type: str, payload: Dict[str, Any]) -> None:
        level = self._levels.get(event_type, self._level)
        if not self._logger.isEnabledFor(level):
            return

        label = payload.get("name") or payload.get("key") or "event"
        context = {"telemetry.event": event_type, **{str(k): v for k, v in payload.items()}}
        self._logger.log(level, f"Telemetry {event_type}: {label}", context=context)


__all__ = [
    "QueryTrace",
    "StageTiming",
    "StructuredTelemetry",
    "TelemetryListener",
    "TelemetryLogger",
]
