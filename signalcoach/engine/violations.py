"""
Debounced integrity-violation detection.

Four independent machines, each quiet -> sustaining -> active:

- tab switch: edge-triggered on visibility hidden / focus lost
- looking away: eye-contact score below threshold for a sustained duration
- person missing: no person detected for a sustained duration
- phone: hand near face while hands are calm, edge-triggered

Debounce compares timestamps on every check rather than scheduling
callbacks, so a short excursion followed by recovery never fires. All
events go through the ``EventAggregator``.
"""

import time
from typing import Callable, Optional

from signalcoach.cfg import DetectionConfig
from signalcoach.engine.events import EventAggregator
from signalcoach.engine.motion import HandMovementLevel
from signalcoach.engine.results import CheatingEvent
from signalcoach.engine.scoring import round_half_up
from signalcoach.utils.alerts import ViolationType, get_violation_message

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class DebounceTimer:
    """Tracks how long a condition has held continuously."""

    def __init__(self, duration_ms: float):
        self.duration_ms = duration_ms
        self.started_at: Optional[float] = None
        self.active = False

    @property
    def sustaining(self) -> bool:
        return self.started_at is not None and not self.active

    def update(self, condition: bool, now: float) -> Optional[float]:
        """
        Feed one observation.

        Args:
            condition: Whether the watched condition holds
            now: Current time in milliseconds

        Returns:
            Elapsed duration (ms) on the transition to active, else None
        """
        if not condition:
            self.started_at = None
            self.active = False
            return None

        if self.started_at is None:
            self.started_at = now
            return None

        elapsed = now - self.started_at
        if elapsed >= self.duration_ms and not self.active:
            self.active = True
            return elapsed
        return None

    def reset(self) -> None:
        self.started_at = None
        self.active = False


class ViolationDetector:
    """
    Integrity violation state machines.
    
    Example:
        >>> detector = ViolationDetector(EventAggregator())
        >>> _ = detector.update_eye_contact(20, now=0)
        >>> _ = detector.update_eye_contact(20, now=2000)
        >>> detector.aggregator.metrics.look_away_count
        1
    """

    def __init__(
        self,
        aggregator: EventAggregator,
        config: Optional[DetectionConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.aggregator = aggregator
        self.config = config or DetectionConfig()
        self.clock = clock or monotonic_ms

        self.look_away = DebounceTimer(self.config.look_away_duration_ms)
        self.person_missing = DebounceTimer(self.config.person_missing_duration_ms)

    def now(self) -> float:
        return self.clock()

    def _emit(
        self,
        violation_type: ViolationType,
        message: str,
        duration: Optional[float] = None,
    ) -> CheatingEvent:
        event = CheatingEvent.create(violation_type, message, duration)
        self.aggregator.record(event)
        return event

    # ------------------------------------------------------------------
    # Tab switching
    # ------------------------------------------------------------------

    def on_visibility_change(self, visible: bool) -> Optional[CheatingEvent]:
        """Document visibility changed; hidden emits one event."""
        self.aggregator.set_flags(is_tab_visible=visible)
        if visible:
            return None
        return self._emit(ViolationType.TAB_SWITCH, get_violation_message("tab_hidden"))

    def on_focus_change(self, focused: bool) -> Optional[CheatingEvent]:
        """Window focus changed; losing focus emits one event."""
        self.aggregator.set_flags(is_tab_visible=focused)
        if focused:
            return None
        return self._emit(ViolationType.TAB_SWITCH, get_violation_message("window_blur"))

    # ------------------------------------------------------------------
    # Debounced signals
    # ------------------------------------------------------------------

    def update_eye_contact(self, score: float, now: Optional[float] = None) -> Optional[CheatingEvent]:
        """Feed the latest eye-contact score."""
        now = self.now() if now is None else now
        looking_away = score < self.config.eye_contact_threshold

        elapsed = self.look_away.update(looking_away, now)
        if elapsed is not None:
            self.aggregator.set_flags(is_currently_looking_away=True)
            return self._emit(
                ViolationType.LOOKING_AWAY,
                get_violation_message("looking_away", seconds=round_half_up(elapsed / 1000)),
                duration=elapsed,
            )

        if not looking_away:
            self.aggregator.set_flags(is_currently_looking_away=False)
        return None

    def update_person_detection(self, detected: bool, now: Optional[float] = None) -> Optional[CheatingEvent]:
        """Feed whether a person is currently in view."""
        now = self.now() if now is None else now

        elapsed = self.person_missing.update(not detected, now)
        if elapsed is not None:
            self.aggregator.set_flags(is_person_missing=True)
            return self._emit(
                ViolationType.PERSON_MISSING,
                get_violation_message("person_missing"),
                duration=elapsed,
            )

        if detected:
            self.aggregator.set_flags(is_person_missing=False)
        return None

    # ------------------------------------------------------------------
    # Phone heuristic
    # ------------------------------------------------------------------

    def update_phone_detection(
        self,
        hand_near_face: bool,
        hand_level: HandMovementLevel,
    ) -> Optional[CheatingEvent]:
        """A calm hand held near the face is treated as a likely phone."""
        likely_phone = hand_near_face and hand_level is HandMovementLevel.CALM
        flagged = self.aggregator.metrics.is_phone_detected

        if likely_phone and not flagged:
            self.aggregator.set_flags(is_phone_detected=True)
            return self._emit(ViolationType.PHONE_DETECTED, get_violation_message("phone_heuristic"))
        if not likely_phone and flagged:
            self.aggregator.set_flags(is_phone_detected=False)
        return None

    def report_phone_detected(self) -> Optional[CheatingEvent]:
        """Force a phone event from an upstream caller, bypassing the heuristic."""
        if self.aggregator.metrics.is_phone_detected:
            return None
        self.aggregator.set_flags(is_phone_detected=True)
        return self._emit(ViolationType.PHONE_DETECTED, get_violation_message("phone_reported"))

    def clear_phone_detection(self) -> None:
        self.aggregator.set_flags(is_phone_detected=False)

    def reset(self) -> None:
        """Clear all debounce timing state."""
        self.look_away.reset()
        self.person_missing.reset()
