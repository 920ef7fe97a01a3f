"""
Posture scoring.

Three geometric sub-scores (shoulder tilt, forward lean, head alignment)
averaged into a 0-100 posture score, plus a slouch flag. Under insufficient
data the scorer assumes good posture: coaching must never accuse on a
missing landmark.
"""

from dataclasses import dataclass

from signalcoach.cfg.config import DEFAULT_POSTURE_VISIBILITY
from signalcoach.engine.landmarks import PoseFrame, PoseLandmark, resolve
from signalcoach.engine.scoring import linear_decay, round_half_up

# Decay slopes per unit of normalized deviation
SHOULDER_TILT_SLOPE = 500.0
FORWARD_LEAN_SLOPE = 200.0
HEAD_OFFSET_SLOPE = 300.0

# Lean is only penalized past this depth separation
FORWARD_LEAN_TOLERANCE = 0.1
SLOUCH_LEAN_THRESHOLD = 0.15
MIN_TORSO_HEIGHT = 0.15


@dataclass(frozen=True)
class PostureResult:
    """Per-frame posture output."""
    score: int = 100
    is_slouching: bool = False


def score_posture(
    frame: PoseFrame,
    min_visibility: float = DEFAULT_POSTURE_VISIBILITY,
) -> PostureResult:
    """
    Score posture for one frame.

    Args:
        frame: Current pose frame
        min_visibility: Minimum visibility required on both shoulders

    Returns:
        PostureResult; ``PostureResult(100, False)`` when data is insufficient
    """
    points = resolve(
        frame,
        PoseLandmark.NOSE,
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_HIP,
        PoseLandmark.RIGHT_HIP,
    )
    if points is None:
        return PostureResult()

    nose, left_shoulder, right_shoulder, left_hip, right_hip = points
    if left_shoulder.visibility < min_visibility or right_shoulder.visibility < min_visibility:
        return PostureResult()

    # Shoulders should sit level
    tilt_score = linear_decay(left_shoulder.y - right_shoulder.y, SHOULDER_TILT_SLOPE)

    # Depth separation between shoulder and hip centers
    shoulder_z = (left_shoulder.z + right_shoulder.z) / 2
    hip_z = (left_hip.z + right_hip.z) / 2
    forward_lean = shoulder_z - hip_z
    lean_score = (
        linear_decay(forward_lean, FORWARD_LEAN_SLOPE)
        if forward_lean > FORWARD_LEAN_TOLERANCE
        else 100.0
    )

    # Head centered over the shoulders
    shoulder_x = (left_shoulder.x + right_shoulder.x) / 2
    head_score = linear_decay(nose.x - shoulder_x, HEAD_OFFSET_SLOPE)

    # Image y grows downward, so an upright torso has hips below shoulders
    shoulder_y = (left_shoulder.y + right_shoulder.y) / 2
    hip_y = (left_hip.y + right_hip.y) / 2
    torso_height = hip_y - shoulder_y
    is_slouching = torso_height < MIN_TORSO_HEIGHT or forward_lean > SLOUCH_LEAN_THRESHOLD

    score = round_half_up((tilt_score + lean_score + head_score) / 3)
    return PostureResult(score=score, is_slouching=is_slouching)
