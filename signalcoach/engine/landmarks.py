"""
Pose landmarks and the landmark buffer.

Frames follow the MediaPipe Pose indexing scheme. Any landmark may be
absent; scorers read landmarks only through ``PoseFrame.get`` and
``resolve`` so a missing point always degrades to the scorer's neutral
value instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable, Optional


class PoseLandmark(IntEnum):
    """MediaPipe Pose indices used by the scorers."""
    NOSE = 0
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_HIP = 23
    RIGHT_HIP = 24


@dataclass(frozen=True)
class LandmarkPoint:
    """A single tracked keypoint in normalized image space."""
    x: float
    y: float
    z: float = 0.0
    visibility: float = 0.0

    @classmethod
    def from_values(
        cls,
        x: Any,
        y: Any,
        z: Any = 0.0,
        visibility: Any = None,
    ) -> Optional["LandmarkPoint"]:
        """Build a point, returning None when a coordinate is unusable."""
        try:
            coords = (float(x), float(y), float(z if z is not None else 0.0))
            vis = float(visibility) if visibility is not None else 0.0
        except (TypeError, ValueError):
            return None
        if not all(math.isfinite(c) for c in coords) or not math.isfinite(vis):
            return None
        return cls(*coords, visibility=vis)


def visibility_of(point: Optional[LandmarkPoint]) -> float:
    """Visibility of a point, 0 when the point is absent."""
    return point.visibility if point is not None else 0.0


@dataclass(frozen=True)
class PoseFrame:
    """One frame of body landmarks, indexed by ``PoseLandmark``."""
    points: tuple[Optional[LandmarkPoint], ...] = ()

    def get(self, landmark: PoseLandmark) -> Optional[LandmarkPoint]:
        index = int(landmark)
        if index >= len(self.points):
            return None
        return self.points[index]

    def __len__(self) -> int:
        return len(self.points)

    @classmethod
    def from_landmarks(cls, landmarks: Iterable[Any]) -> "PoseFrame":
        """
        Build a frame from provider landmarks.

        Accepts objects exposing ``x``/``y``/``z``/``visibility`` attributes
        (MediaPipe ``NormalizedLandmark``), mappings with the same keys, or
        ``None`` for an undetected point.
        """
        points = []
        for item in landmarks:
            if item is None:
                points.append(None)
            elif isinstance(item, LandmarkPoint):
                points.append(item)
            elif isinstance(item, dict):
                points.append(LandmarkPoint.from_values(
                    item.get("x"), item.get("y"), item.get("z", 0.0), item.get("visibility"),
                ))
            else:
                points.append(LandmarkPoint.from_values(
                    getattr(item, "x", None),
                    getattr(item, "y", None),
                    getattr(item, "z", 0.0),
                    getattr(item, "visibility", None),
                ))
        return cls(points=tuple(points))

    @classmethod
    def from_mapping(cls, mapping: dict[PoseLandmark, LandmarkPoint]) -> "PoseFrame":
        """Build a frame holding only the given landmarks."""
        if not mapping:
            return cls()
        size = max(int(k) for k in mapping) + 1
        points: list[Optional[LandmarkPoint]] = [None] * size
        for landmark, point in mapping.items():
            points[int(landmark)] = point
        return cls(points=tuple(points))


def resolve(frame: Optional[PoseFrame], *landmarks: PoseLandmark) -> Optional[tuple[LandmarkPoint, ...]]:
    """
    Resolve several landmarks at once.

    Returns:
        The points in the requested order, or None if the frame or any
        requested landmark is missing.
    """
    if frame is None:
        return None
    points = tuple(frame.get(landmark) for landmark in landmarks)
    if any(point is None for point in points):
        return None
    return points  # type: ignore[return-value]


class LandmarkBuffer:
    """Holds the current and previous frame for delta computations."""

    def __init__(self):
        self.current: Optional[PoseFrame] = None
        self.previous: Optional[PoseFrame] = None

    def push(self, frame: PoseFrame) -> None:
        self.previous = self.current
        self.current = frame

    def clear(self) -> None:
        self.current = None
        self.previous = None
