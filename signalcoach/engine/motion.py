"""
Hand-movement classification.

Stateless: compares wrist positions between the previous and current frame.
History lives in the temporal aggregator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from signalcoach.engine.landmarks import PoseFrame, PoseLandmark, resolve

MAGNITUDE_SCALE = 100.0
MODERATE_THRESHOLD = 3.0
NERVOUS_THRESHOLD = 8.0


class HandMovementLevel(str, Enum):
    """Gross hand-movement level for one frame."""
    CALM = "calm"
    MODERATE = "moderate"
    NERVOUS = "nervous"


@dataclass(frozen=True)
class HandMovementResult:
    """Per-frame hand-movement output."""
    level: HandMovementLevel = HandMovementLevel.CALM
    magnitude: float = 0.0


def classify_movement(magnitude: float) -> HandMovementLevel:
    """Map a movement magnitude to a level; thresholds are inclusive."""
    if magnitude >= NERVOUS_THRESHOLD:
        return HandMovementLevel.NERVOUS
    elif magnitude >= MODERATE_THRESHOLD:
        return HandMovementLevel.MODERATE
    return HandMovementLevel.CALM


def classify_hand_movement(
    current: PoseFrame,
    previous: Optional[PoseFrame],
) -> HandMovementResult:
    """
    Classify wrist displacement between two frames.

    Args:
        current: Current pose frame
        previous: Previous pose frame, None on the first frame

    Returns:
        HandMovementResult; calm with zero magnitude when data is insufficient
    """
    wrists = (PoseLandmark.LEFT_WRIST, PoseLandmark.RIGHT_WRIST)
    now = resolve(current, *wrists)
    before = resolve(previous, *wrists)
    if now is None or before is None:
        return HandMovementResult()

    displacement = sum(
        float(np.hypot(a.x - b.x, a.y - b.y))
        for a, b in zip(now, before)
    )
    magnitude = displacement * MAGNITUDE_SCALE
    return HandMovementResult(level=classify_movement(magnitude), magnitude=magnitude)
