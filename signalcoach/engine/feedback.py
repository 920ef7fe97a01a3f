"""Rule-based coaching feedback, ordered by priority."""

from signalcoach.engine.motion import HandMovementLevel

SLOUCHING = "Sit up straight - you appear to be slouching"
LOW_POSTURE = "Adjust your posture - keep shoulders back"
NERVOUS_HANDS = "Take a breath - reduce hand movements"
MODERATE_HANDS = "Try to keep hands calm and steady"
LOW_EYE_CONTACT = "Look at the camera to maintain eye contact"
ALL_GOOD = "Great body language! Keep it up"

LOW_POSTURE_THRESHOLD = 70
LOW_EYE_CONTACT_THRESHOLD = 50

_HAND_MESSAGES = {
    HandMovementLevel.NERVOUS: NERVOUS_HANDS,
    HandMovementLevel.MODERATE: MODERATE_HANDS,
    HandMovementLevel.CALM: None,
}


def generate_feedback(
    posture_score: float,
    is_slouching: bool,
    hand_level: HandMovementLevel,
    eye_score: float,
) -> list[str]:
    """
    Build the coaching messages for the current frame.

    The first element is the primary piece of advice; exactly one
    affirmative message is returned when nothing needs fixing.
    """
    feedback: list[str] = []

    if is_slouching:
        feedback.append(SLOUCHING)
    elif posture_score < LOW_POSTURE_THRESHOLD:
        feedback.append(LOW_POSTURE)

    hand_message = _HAND_MESSAGES[hand_level]
    if hand_message:
        feedback.append(hand_message)

    if eye_score < LOW_EYE_CONTACT_THRESHOLD:
        feedback.append(LOW_EYE_CONTACT)

    if not feedback:
        feedback.append(ALL_GOOD)

    return feedback
