"""
Temporal smoothing of per-frame scores.

Fixed-capacity rolling windows for posture scores and hand-movement
magnitudes, plus session counters for slouching and nervous movement.
"""

from collections import deque
from dataclasses import dataclass

import numpy as np

from signalcoach.cfg.config import DEFAULT_WINDOW_SIZE
from signalcoach.engine.motion import HandMovementLevel
from signalcoach.engine.scoring import round_half_up

# Overall score weights
POSTURE_WEIGHT = 0.4
HAND_WEIGHT = 0.3
EYE_WEIGHT = 0.3


class RollingWindow:
    """FIFO buffer of the most recent values, oldest evicted first."""

    def __init__(self, capacity: int = DEFAULT_WINDOW_SIZE):
        """
        Initialize window.

        Args:
            capacity: Maximum number of values held
        """
        self.capacity = capacity
        self._values: deque[float] = deque(maxlen=capacity)

    def push(self, value: float) -> None:
        self._values.append(value)

    def mean(self, default: float = 0.0) -> float:
        """Mean of the held values, ``default`` when empty."""
        if not self._values:
            return default
        return float(np.mean(self._values))

    def values(self) -> list[float]:
        return list(self._values)

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)

    def is_full(self) -> bool:
        return len(self._values) == self.capacity


def hand_bucket_score(avg_movement: float) -> int:
    """Bucket the smoothed hand movement into a 100/70/40 score."""
    if avg_movement < 3:
        return 100
    elif avg_movement < 8:
        return 70
    return 40


@dataclass(frozen=True)
class TemporalSnapshot:
    """Smoothed values after one update."""
    avg_posture: float
    avg_hand_movement: float
    hand_score: int
    slouch_count: int
    nervous_movement_count: int

    def overall_score(self, eye_contact_score: float) -> int:
        """Weighted overall score, rounded half-up."""
        return round_half_up(
            POSTURE_WEIGHT * self.avg_posture
            + HAND_WEIGHT * self.hand_score
            + EYE_WEIGHT * eye_contact_score
        )


class TemporalAggregator:
    """Rolling posture / hand-movement windows and cumulative counters."""

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE):
        self.posture_window = RollingWindow(window_size)
        self.hand_window = RollingWindow(window_size)
        self.slouch_count = 0
        self.nervous_movement_count = 0

    def update(
        self,
        posture_score: float,
        is_slouching: bool,
        hand_level: HandMovementLevel,
        hand_magnitude: float,
    ) -> TemporalSnapshot:
        """Push one frame's values and return the smoothed snapshot."""
        self.posture_window.push(posture_score)
        self.hand_window.push(hand_magnitude)

        if hand_level is HandMovementLevel.NERVOUS:
            self.nervous_movement_count += 1
        if is_slouching:
            self.slouch_count += 1

        avg_hand = self.hand_window.mean()
        return TemporalSnapshot(
            avg_posture=self.posture_window.mean(),
            avg_hand_movement=avg_hand,
            hand_score=hand_bucket_score(avg_hand),
            slouch_count=self.slouch_count,
            nervous_movement_count=self.nervous_movement_count,
        )

    def reset(self) -> None:
        self.posture_window.clear()
        self.hand_window.clear()
        self.slouch_count = 0
        self.nervous_movement_count = 0
