"""
Signalcoach Models

Pose estimation backends.
"""

from signalcoach.models.pose import PoseEstimator

__all__ = [
    "PoseEstimator",
]
