"""
Derived presence signals.

Coarse heuristics feeding the violation detector when the caller does not
supply its own person / hand-near-face signals.
"""

from typing import Optional

import numpy as np

from signalcoach.cfg.config import DEFAULT_HAND_NEAR_FACE_RADIUS, DEFAULT_PERSON_VISIBILITY
from signalcoach.engine.landmarks import PoseFrame, PoseLandmark, visibility_of


def detect_person(
    frame: Optional[PoseFrame],
    min_visibility: float = DEFAULT_PERSON_VISIBILITY,
) -> bool:
    """True when the nose or either shoulder is visible enough."""
    if frame is None:
        return False
    return any(
        visibility_of(frame.get(landmark)) >= min_visibility
        for landmark in (PoseLandmark.NOSE, PoseLandmark.LEFT_SHOULDER, PoseLandmark.RIGHT_SHOULDER)
    )


def detect_hand_near_face(
    frame: Optional[PoseFrame],
    radius: float = DEFAULT_HAND_NEAR_FACE_RADIUS,
    min_visibility: float = DEFAULT_PERSON_VISIBILITY,
) -> bool:
    """True when a visible wrist lies within ``radius`` of the nose."""
    if frame is None:
        return False
    nose = frame.get(PoseLandmark.NOSE)
    if nose is None:
        return False

    for landmark in (PoseLandmark.LEFT_WRIST, PoseLandmark.RIGHT_WRIST):
        wrist = frame.get(landmark)
        if wrist is None or wrist.visibility < min_visibility:
            continue
        if np.hypot(wrist.x - nose.x, wrist.y - nose.y) <= radius:
            return True
    return False
