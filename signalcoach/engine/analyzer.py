"""
Body-language analysis pipeline.

Landmark buffer -> posture / hand-movement / eye-contact scorers ->
temporal aggregator -> feedback, published as ``BodyLanguageMetrics``.
"""

from dataclasses import dataclass
from typing import Optional

from signalcoach.cfg import AnalysisConfig
from signalcoach.engine.feedback import generate_feedback
from signalcoach.engine.gaze import score_eye_contact
from signalcoach.engine.landmarks import LandmarkBuffer, PoseFrame
from signalcoach.engine.motion import HandMovementResult, classify_hand_movement
from signalcoach.engine.posture import PostureResult, score_posture
from signalcoach.engine.results import BodyLanguageMetrics
from signalcoach.engine.scoring import round_half_up
from signalcoach.engine.temporal import TemporalAggregator, TemporalSnapshot


@dataclass(frozen=True)
class FrameAnalysis:
    """Raw per-frame scorer outputs alongside the published snapshot."""
    posture: PostureResult
    hands: HandMovementResult
    eye_contact_score: int
    temporal: TemporalSnapshot
    metrics: BodyLanguageMetrics


class BodyLanguageAnalyzer:
    """
    Scores pose frames and keeps the smoothed body-language metrics.
    
    Example:
        >>> analyzer = BodyLanguageAnalyzer()
        >>> analysis = analyzer.process(frame)
        >>> analyzer.metrics.overall_score
    """
    
    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize analyzer.
        
        Args:
            config: Analysis configuration
        """
        self.config = config or AnalysisConfig()
        self.buffer = LandmarkBuffer()
        self.temporal = TemporalAggregator(self.config.window_size)
        self.frames_processed = 0
        self._metrics = BodyLanguageMetrics()
    
    @property
    def metrics(self) -> BodyLanguageMetrics:
        return self._metrics
    
    def process(self, frame: PoseFrame) -> FrameAnalysis:
        """
        Score one frame and publish a new snapshot.
        
        Args:
            frame: Current pose frame
            
        Returns:
            FrameAnalysis with the per-frame results and the new snapshot
        """
        posture = score_posture(frame, self.config.posture_visibility_threshold)
        hands = classify_hand_movement(frame, self.buffer.current)
        eye_score = score_eye_contact(frame, self.config.gaze_visibility_threshold)

        # Only frames that scored cleanly become the movement baseline
        self.buffer.push(frame)

        snapshot = self.temporal.update(
            posture_score=posture.score,
            is_slouching=posture.is_slouching,
            hand_level=hands.level,
            hand_magnitude=hands.magnitude,
        )
        feedback = generate_feedback(posture.score, posture.is_slouching, hands.level, eye_score)
        
        self._metrics = BodyLanguageMetrics(
            posture_score=round_half_up(snapshot.avg_posture),
            is_slouching_now=posture.is_slouching,
            hand_movement_level=hands.level,
            hand_movement_count=snapshot.nervous_movement_count,
            eye_contact_score=eye_score,
            overall_score=snapshot.overall_score(eye_score),
            feedback=tuple(feedback),
        )
        self.frames_processed += 1
        
        return FrameAnalysis(
            posture=posture,
            hands=hands,
            eye_contact_score=eye_score,
            temporal=snapshot,
            metrics=self._metrics,
        )
    
    def reset(self) -> None:
        """Return to the default snapshot and drop all history."""
        self.buffer.clear()
        self.temporal.reset()
        self.frames_processed = 0
        self._metrics = BodyLanguageMetrics()
