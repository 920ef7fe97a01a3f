"""
Event and suspicion aggregation.

The single sink for integrity events: keeps the bounded event log, the
monotonic per-type counters, the live flags and the suspicion level in one
``CheatingMetrics`` snapshot that is replaced whole on every change.
"""

from dataclasses import replace
from typing import Callable, Optional

from signalcoach.cfg.config import DEFAULT_EVENT_LOG_CAPACITY
from signalcoach.engine.results import CheatingEvent, CheatingMetrics
from signalcoach.utils.logger import get_logger

logger = get_logger(__name__)

ViolationCallback = Callable[[CheatingEvent], None]

FLAG_FIELDS = (
    "is_tab_visible",
    "is_currently_looking_away",
    "is_phone_detected",
    "is_person_missing",
)


class EventAggregator:
    """Bounded event log, per-kind counters and suspicion classification."""

    def __init__(
        self,
        capacity: int = DEFAULT_EVENT_LOG_CAPACITY,
        on_event: Optional[ViolationCallback] = None,
    ):
        """
        Initialize aggregator.

        Args:
            capacity: Number of most recent events kept in the log
            on_event: Called once per recorded event, after the snapshot updates
        """
        self.capacity = capacity
        self.on_event = on_event
        self._metrics = CheatingMetrics()

    @property
    def metrics(self) -> CheatingMetrics:
        return self._metrics

    def record(self, event: CheatingEvent) -> CheatingMetrics:
        """Record an event and notify the listener."""
        self._metrics = self._metrics.with_event(event, self.capacity)
        logger.debug(f"Recorded {event.type.value} ({self._metrics.total_violations} total)")

        if self.on_event is not None:
            try:
                self.on_event(event)
            except Exception:
                logger.exception(f"Violation callback failed for event {event.id}")

        return self._metrics

    def set_flags(self, **flags: bool) -> CheatingMetrics:
        """Update live flags without touching counters or the log."""
        unknown = set(flags) - set(FLAG_FIELDS)
        if unknown:
            raise ValueError(f"Unknown flags: {sorted(unknown)}")
        if any(getattr(self._metrics, name) != value for name, value in flags.items()):
            self._metrics = replace(self._metrics, **flags)
        return self._metrics

    def reset(self) -> None:
        self._metrics = CheatingMetrics()
