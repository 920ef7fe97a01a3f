"""
Per-frame scorer tests.

Posture, hand movement, eye contact and the derived presence signals,
driven by synthetic poses with known geometry.
"""

import pytest

from signalcoach.engine.gaze import score_eye_contact
from signalcoach.engine.landmarks import PoseFrame, PoseLandmark
from signalcoach.engine.motion import (
    HandMovementLevel,
    classify_hand_movement,
    classify_movement,
)
from signalcoach.engine.posture import PostureResult, score_posture
from signalcoach.engine.presence import detect_hand_near_face, detect_person
from signalcoach.engine.scoring import linear_decay, round_half_up
from tests.fixtures.synthetic_pose import hand_on_face_pose, make_pose, upright_pose


class TestRounding:
    """Published numbers round half away from zero for positives."""

    @pytest.mark.parametrize("value,expected", [(0.5, 1), (2.5, 3), (96.49, 96), (96.5, 97), (0.0, 0)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_linear_decay_floors_at_zero(self):
        assert linear_decay(-0.5, 500) == 0
        assert linear_decay(0.0, 500) == 100


class TestPostureScorer:
    """Shoulder tilt, forward lean, head offset and slouch detection."""

    def test_upright_scores_perfect(self):
        assert score_posture(upright_pose()) == PostureResult(100, False)

    @pytest.mark.parametrize("landmark", [
        PoseLandmark.NOSE,
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_HIP,
        PoseLandmark.RIGHT_HIP,
    ])
    def test_missing_landmark_fails_open(self, landmark):
        """Any required landmark missing gives exactly (100, False)."""
        frame = make_pose(shoulder_tilt=0.1, torso_height=0.05, missing=[landmark])
        assert score_posture(frame) == PostureResult(100, False)

    def test_empty_frame_fails_open(self):
        assert score_posture(PoseFrame()) == PostureResult(100, False)

    def test_low_shoulder_visibility_fails_open(self):
        frame = make_pose(shoulder_tilt=0.1, shoulder_visibility=0.4)
        assert score_posture(frame) == PostureResult(100, False)

    def test_shoulder_tilt_penalized(self):
        # tilt 0.02 -> 90, others 100 -> mean 96.67
        assert score_posture(make_pose(shoulder_tilt=0.02)).score == 97

    def test_small_lean_not_penalized(self):
        assert score_posture(make_pose(lean=0.08)).score == 100

    def test_large_lean_penalized_and_slouching(self):
        # lean 0.2 -> 60 -> mean 86.67
        result = score_posture(make_pose(lean=0.2))
        assert result.score == 87
        assert result.is_slouching

    def test_head_offset_penalized(self):
        # offset 0.1 -> 70 -> mean 90
        assert score_posture(make_pose(nose=(0.6, 0.4))).score == 90

    def test_collapsed_torso_is_slouching(self):
        result = score_posture(make_pose(torso_height=0.1))
        assert result.is_slouching
        assert result.score == 100

    def test_upright_torso_is_not_slouching(self):
        assert not score_posture(make_pose(torso_height=0.3)).is_slouching


class TestHandMovement:
    """Wrist displacement classification."""

    def test_thresholds_are_exact(self):
        assert classify_movement(2.99) is HandMovementLevel.CALM
        assert classify_movement(3.0) is HandMovementLevel.MODERATE
        assert classify_movement(7.99) is HandMovementLevel.MODERATE
        assert classify_movement(8.0) is HandMovementLevel.NERVOUS

    def test_classification_is_monotonic(self):
        order = [HandMovementLevel.CALM, HandMovementLevel.MODERATE, HandMovementLevel.NERVOUS]
        ranks = [order.index(classify_movement(m / 10)) for m in range(0, 200)]
        assert ranks == sorted(ranks)

    def test_no_previous_frame_is_calm(self):
        result = classify_hand_movement(upright_pose(), None)
        assert result.level is HandMovementLevel.CALM
        assert result.magnitude == 0

    def test_missing_wrist_is_calm(self):
        previous = make_pose(missing=[PoseLandmark.LEFT_WRIST])
        result = classify_hand_movement(make_pose(wrist_shift=(0.2, 0.0)), previous)
        assert result.magnitude == 0

    def test_still_hands_are_calm(self):
        result = classify_hand_movement(upright_pose(), upright_pose())
        assert result.level is HandMovementLevel.CALM

    def test_moderate_movement(self):
        # both wrists move 0.02 -> 4.0
        result = classify_hand_movement(make_pose(wrist_shift=(0.02, 0.0)), upright_pose())
        assert result.level is HandMovementLevel.MODERATE
        assert result.magnitude == pytest.approx(4.0)

    def test_nervous_movement(self):
        # both wrists move 0.05 -> 10.0
        result = classify_hand_movement(make_pose(wrist_shift=(0.0, 0.05)), upright_pose())
        assert result.level is HandMovementLevel.NERVOUS
        assert result.magnitude == pytest.approx(10.0)


class TestEyeContact:
    """Head centering as an eye-contact proxy."""

    def test_centered_head_scores_perfect(self):
        assert score_eye_contact(upright_pose()) == 100

    def test_off_center_head(self):
        # x off by 0.1 -> 80, y on target -> 100
        assert score_eye_contact(make_pose(nose=(0.6, 0.4))) == 90

    def test_far_off_head_is_low(self):
        assert score_eye_contact(make_pose(nose=(0.95, 0.9))) < 40

    def test_low_nose_visibility_is_neutral(self):
        frame = make_pose(nose=(0.95, 0.9), nose_visibility=0.69)
        assert score_eye_contact(frame) == 50

    def test_missing_nose_is_neutral(self):
        assert score_eye_contact(make_pose(missing=[PoseLandmark.NOSE])) == 50


class TestPresence:
    """Derived person and hand-near-face signals."""

    def test_person_detected(self):
        assert detect_person(upright_pose())

    def test_no_frame_means_no_person(self):
        assert not detect_person(None)

    def test_invisible_landmarks_mean_no_person(self):
        assert not detect_person(make_pose(visibility=0.1))

    def test_single_visible_shoulder_is_enough(self):
        frame = make_pose(
            visibility=0.1,
            shoulder_visibility=0.9,
            missing=[PoseLandmark.LEFT_SHOULDER],
        )
        assert detect_person(frame)

    def test_hand_near_face(self):
        assert detect_hand_near_face(hand_on_face_pose())
        assert not detect_hand_near_face(upright_pose())

    def test_invisible_wrist_ignored(self):
        frame = make_pose(right_wrist=(0.55, 0.42), visibility=0.2, nose_visibility=0.99)
        assert not detect_hand_near_face(frame)
