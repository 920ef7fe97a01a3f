"""
Signalcoach Engine - scoring, smoothing and violation detection.

Components:
- Landmarks: PoseFrame, LandmarkPoint, LandmarkBuffer
- Scorers: posture, hand movement, eye contact
- TemporalAggregator: rolling windows and counters
- ViolationDetector / EventAggregator: debounced integrity events
- SignalEngine: per-session composition of all of the above
"""

from signalcoach.engine.landmarks import (
    LandmarkBuffer,
    LandmarkPoint,
    PoseFrame,
    PoseLandmark,
    resolve,
)
from signalcoach.engine.posture import PostureResult, score_posture
from signalcoach.engine.motion import (
    HandMovementLevel,
    HandMovementResult,
    classify_hand_movement,
    classify_movement,
)
from signalcoach.engine.gaze import score_eye_contact
from signalcoach.engine.temporal import RollingWindow, TemporalAggregator, TemporalSnapshot
from signalcoach.engine.feedback import generate_feedback
from signalcoach.engine.results import (
    BodyLanguageMetrics,
    CheatingEvent,
    CheatingMetrics,
    SessionSummary,
)
from signalcoach.engine.events import EventAggregator
from signalcoach.engine.violations import DebounceTimer, ViolationDetector
from signalcoach.engine.analyzer import BodyLanguageAnalyzer, FrameAnalysis
from signalcoach.engine.signals import SignalEngine, compute_session_score

__all__ = [
    # Landmarks
    "LandmarkBuffer",
    "LandmarkPoint",
    "PoseFrame",
    "PoseLandmark",
    "resolve",
    # Scorers
    "PostureResult",
    "score_posture",
    "HandMovementLevel",
    "HandMovementResult",
    "classify_hand_movement",
    "classify_movement",
    "score_eye_contact",
    # Temporal
    "RollingWindow",
    "TemporalAggregator",
    "TemporalSnapshot",
    "generate_feedback",
    # Results
    "BodyLanguageMetrics",
    "CheatingEvent",
    "CheatingMetrics",
    "SessionSummary",
    # Violations
    "EventAggregator",
    "DebounceTimer",
    "ViolationDetector",
    # Composition
    "BodyLanguageAnalyzer",
    "FrameAnalysis",
    "SignalEngine",
    "compute_session_score",
]
