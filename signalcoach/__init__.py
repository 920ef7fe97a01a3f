"""
Signalcoach - Real-time Interview Body-Language and Integrity Signals

Scores posture, hand movement and eye contact from pose landmarks, smooths
them over a rolling window, and raises debounced integrity events for
tab switches, sustained look-away, missing person and phone use.

Usage:
    from signalcoach import SignalEngine

    engine = SignalEngine()
    metrics = engine.process_frame(frame)
    print(metrics.overall_score, metrics.feedback)

    # Local camera session
    from signalcoach import CoachingSession, MediaPipePoseProvider
    async with CoachingSession(provider=MediaPipePoseProvider()) as session:
        ...
"""

__version__ = "0.1.0"

from signalcoach.cfg import AnalysisConfig, CameraConfig, DetectionConfig, get_settings
from signalcoach.engine import (
    BodyLanguageMetrics,
    CheatingEvent,
    CheatingMetrics,
    PoseFrame,
    SignalEngine,
)


# Camera and service components pull in asyncio/cv2 plumbing; load on access
def __getattr__(name: str):
    """Lazy load service components."""
    if name == "CoachingSession":
        from signalcoach.service.session import CoachingSession
        return CoachingSession
    elif name == "MediaPipePoseProvider":
        from signalcoach.data.providers import MediaPipePoseProvider
        return MediaPipePoseProvider
    elif name == "PoseEstimator":
        from signalcoach.models.pose import PoseEstimator
        return PoseEstimator
    raise AttributeError(f"module 'signalcoach' has no attribute '{name}'")


__all__ = [
    # Engine
    "SignalEngine",
    "PoseFrame",
    "BodyLanguageMetrics",
    "CheatingEvent",
    "CheatingMetrics",
    # Configs
    "AnalysisConfig",
    "CameraConfig",
    "DetectionConfig",
    "get_settings",
    # Lazy loaded
    "CoachingSession",
    "MediaPipePoseProvider",
    "PoseEstimator",
    "__version__",
]
