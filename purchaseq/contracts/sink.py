"""
Analytics sink protocol.

Mirrors the surface of an app-events transport: named events with a summed
value and a parameter map, plus an explicit flush.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol


class FlushBehavior(str, Enum):
    AUTO = "auto"
    EXPLICIT_ONLY = "explicit_only"


class FlushReason(str, Enum):
    EXPLICIT = "explicit"
    TIMER = "timer"
    SESSION_CHANGE = "session_change"
    PERSISTED_EVENTS = "persisted_events"
    EVENT_THRESHOLD = "event_threshold"
    EAGERLY_FLUSHING_EVENT = "eagerly_flushing_event"


class EventSink(Protocol):
    flush_behavior: FlushBehavior

    def log_event(
        self, event_name: str, value_to_sum: float, parameters: Mapping[str, Any]
    ) -> None:
        """Queue one event.

        Side Effects:
            Buffers the event in the transport
        """
        ...

    def flush(self, reason: FlushReason) -> None:
        """Send buffered events.

        Side Effects:
            Network/IO in real transports
        """
        ...
