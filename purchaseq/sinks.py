"""
Concrete EventSink implementations.

InMemorySink buffers events and keeps everything it was sent; LoggingSink
writes each flushed event as one JSON line through the telemetry logger.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from purchaseq.contracts.sink import FlushBehavior, FlushReason
from purchaseq.observability.telemetry import counter, log_event


@dataclass(frozen=True)
class LoggedEvent:
    event_name: str
    value_to_sum: float
    parameters: dict[str, Any]


@dataclass
class InMemorySink:
    """Sink that records log_event/flush calls."""

    flush_behavior: FlushBehavior = FlushBehavior.AUTO
    events: list[LoggedEvent] = field(default_factory=list)
    pending: list[LoggedEvent] = field(default_factory=list)
    flushes: list[FlushReason] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def log_event(
        self, event_name: str, value_to_sum: float, parameters: Mapping[str, Any]
    ) -> None:
        logged = LoggedEvent(event_name, value_to_sum, dict(parameters))
        with self._lock:
            self.events.append(logged)
            self.pending.append(logged)

    def flush(self, reason: FlushReason) -> None:
        with self._lock:
            self.flushes.append(reason)
            self.pending.clear()


class LoggingSink(InMemorySink):
    """InMemorySink that emits buffered events on flush."""

    def flush(self, reason: FlushReason) -> None:
        """
        Side Effects:
            - Writes one telemetry event per buffered event
            - Increments telemetry counter sink.flushed
        """
        with self._lock:
            batch = list(self.pending)
            self.pending.clear()
            self.flushes.append(reason)

        for logged in batch:
            log_event(
                "iap.sink.event",
                name=logged.event_name,
                value_to_sum=logged.value_to_sum,
                parameters=json.dumps(logged.parameters, sort_keys=True),
                reason=FlushReason(reason).value,
            )
        counter("sink.flushed", len(batch))
