"""Eye-contact scoring from head centering."""

from signalcoach.cfg.config import DEFAULT_GAZE_VISIBILITY
from signalcoach.engine.landmarks import PoseFrame, PoseLandmark, visibility_of
from signalcoach.engine.scoring import linear_decay, round_half_up

NEUTRAL_EYE_CONTACT = 50

# Webcam framing puts eye level slightly above the image center
IDEAL_X = 0.5
IDEAL_Y = 0.4
X_SLOPE = 200.0
Y_SLOPE = 150.0


def score_eye_contact(
    frame: PoseFrame,
    min_visibility: float = DEFAULT_GAZE_VISIBILITY,
) -> int:
    """
    Score how centered the head is in the camera view.

    Returns:
        0-100 score, or 50 when the nose is missing or barely visible
    """
    nose = frame.get(PoseLandmark.NOSE)
    if nose is None or visibility_of(nose) < min_visibility:
        return NEUTRAL_EYE_CONTACT

    x_score = linear_decay(nose.x - IDEAL_X, X_SLOPE)
    y_score = linear_decay(nose.y - IDEAL_Y, Y_SLOPE)
    return round_half_up((x_score + y_score) / 2)
