"""
Signal engine.

One instance per session. Couples the body-language analyzer with the
violation detector: every processed frame's eye-contact score, presence
and hand-movement level feed the debounced detectors.
"""

from typing import Optional

from signalcoach.cfg import AnalysisConfig, DetectionConfig
from signalcoach.engine.analyzer import BodyLanguageAnalyzer
from signalcoach.engine.events import EventAggregator, ViolationCallback
from signalcoach.engine.landmarks import PoseFrame
from signalcoach.engine.presence import detect_hand_near_face, detect_person
from signalcoach.engine.results import BodyLanguageMetrics, CheatingEvent, CheatingMetrics
from signalcoach.engine.scoring import round_half_up
from signalcoach.engine.violations import Clock, ViolationDetector


def compute_session_score(body: BodyLanguageMetrics, integrity: CheatingMetrics) -> int:
    """
    Combined 0-100 session score.

    Body language contributes 30%; attention contributes 70%, losing half a
    point (out of ten) per look-away event with a floor of five.
    """
    attention = max(5.0, 10.0 - integrity.look_away_count * 0.5)
    return round_half_up(body.overall_score * 0.3 + attention * 10 * 0.7)


class SignalEngine:
    """Real-time body-language and integrity signal engine."""

    def __init__(
        self,
        analysis_config: Optional[AnalysisConfig] = None,
        detection_config: Optional[DetectionConfig] = None,
        on_violation: Optional[ViolationCallback] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize engine.

        Args:
            analysis_config: Scoring and smoothing configuration
            detection_config: Violation detection configuration
            on_violation: Called once per emitted event
            clock: Millisecond clock used for debouncing
        """
        self.detection_config = detection_config or DetectionConfig()
        self.analyzer = BodyLanguageAnalyzer(analysis_config)
        self.events = EventAggregator(self.detection_config.event_log_capacity, on_event=on_violation)
        self.detector = ViolationDetector(self.events, self.detection_config, clock)

    @property
    def body_metrics(self) -> BodyLanguageMetrics:
        return self.analyzer.metrics

    @property
    def cheating_metrics(self) -> CheatingMetrics:
        return self.events.metrics

    @property
    def frames_processed(self) -> int:
        return self.analyzer.frames_processed

    def process_frame(
        self,
        frame: Optional[PoseFrame],
        hand_near_face: Optional[bool] = None,
        person_detected: Optional[bool] = None,
        now: Optional[float] = None,
    ) -> BodyLanguageMetrics:
        """
        Process one provider frame.

        Args:
            frame: Pose frame, or None when the camera saw no person
            hand_near_face: External hand-near-face signal; derived from the
                frame when omitted and the heuristic is enabled
            person_detected: External presence signal; derived when omitted
            now: Timestamp in milliseconds, defaults to the engine clock

        Returns:
            The current body-language snapshot
        """
        now = self.detector.now() if now is None else now

        if frame is None:
            self.detector.update_person_detection(bool(person_detected), now)
            return self.body_metrics

        analysis = self.analyzer.process(frame)
        cfg = self.detection_config

        self.detector.update_eye_contact(analysis.eye_contact_score, now)

        if person_detected is None:
            person_detected = detect_person(frame, cfg.person_visibility_threshold)
        self.detector.update_person_detection(person_detected, now)

        if hand_near_face is None and cfg.enable_phone_heuristic:
            hand_near_face = detect_hand_near_face(
                frame, cfg.hand_near_face_radius, cfg.person_visibility_threshold,
            )
        if hand_near_face is not None:
            self.detector.update_phone_detection(hand_near_face, analysis.hands.level)

        return analysis.metrics

    def on_visibility_change(self, visible: bool) -> Optional[CheatingEvent]:
        return self.detector.on_visibility_change(visible)

    def on_focus_change(self, focused: bool) -> Optional[CheatingEvent]:
        return self.detector.on_focus_change(focused)

    def report_phone_detected(self) -> Optional[CheatingEvent]:
        return self.detector.report_phone_detected()

    def clear_phone_detection(self) -> None:
        self.detector.clear_phone_detection()

    def session_score(self) -> int:
        return compute_session_score(self.body_metrics, self.cheating_metrics)

    def reset(self) -> None:
        """Zero all scores, counters, flags, events and debounce timers."""
        self.analyzer.reset()
        self.detector.reset()
        self.events.reset()
