"""Tests for rolling windows, temporal aggregation and feedback."""

import pytest

from signalcoach.engine import feedback
from signalcoach.engine.feedback import generate_feedback
from signalcoach.engine.motion import HandMovementLevel
from signalcoach.engine.temporal import (
    RollingWindow,
    TemporalAggregator,
    hand_bucket_score,
)


class TestRollingWindow:
    """Fixed-capacity FIFO."""

    def test_never_exceeds_capacity(self):
        window = RollingWindow(30)
        for i in range(100):
            window.push(i)
            assert len(window) <= 30
        assert window.is_full()

    def test_31st_push_evicts_oldest(self):
        window = RollingWindow(30)
        for i in range(30):
            window.push(i)
        window.push(30)
        values = window.values()
        assert len(values) == 30
        assert values[0] == 1
        assert values[-1] == 30

    def test_mean_of_empty_window(self):
        assert RollingWindow(5).mean() == 0.0
        assert RollingWindow(5).mean(default=100.0) == 100.0

    def test_clear(self):
        window = RollingWindow(5)
        window.push(1.0)
        window.clear()
        assert len(window) == 0


class TestTemporalAggregator:
    """Smoothed posture / hand values and counters."""

    def test_constant_posture_converges_exactly(self):
        aggregator = TemporalAggregator(30)
        for _ in range(20):
            aggregator.update(40, False, HandMovementLevel.CALM, 0.0)
        for _ in range(30):
            snapshot = aggregator.update(80, False, HandMovementLevel.CALM, 0.0)
        assert snapshot.avg_posture == 80

    def test_counters(self):
        aggregator = TemporalAggregator(30)
        aggregator.update(60, True, HandMovementLevel.NERVOUS, 10.0)
        aggregator.update(60, True, HandMovementLevel.MODERATE, 4.0)
        snapshot = aggregator.update(90, False, HandMovementLevel.NERVOUS, 9.0)
        assert snapshot.slouch_count == 2
        assert snapshot.nervous_movement_count == 2

    def test_counters_outlive_the_window(self):
        aggregator = TemporalAggregator(3)
        for _ in range(10):
            snapshot = aggregator.update(50, True, HandMovementLevel.CALM, 0.0)
        assert snapshot.slouch_count == 10

    @pytest.mark.parametrize("avg,expected", [(0, 100), (2.99, 100), (3, 70), (7.99, 70), (8, 40), (25, 40)])
    def test_hand_bucket(self, avg, expected):
        assert hand_bucket_score(avg) == expected

    def test_overall_score_weights(self):
        aggregator = TemporalAggregator(30)
        snapshot = aggregator.update(80, False, HandMovementLevel.MODERATE, 5.0)
        # 0.4*80 + 0.3*70 + 0.3*50 = 68
        assert snapshot.overall_score(50) == 68

    def test_overall_score_rounds_half_up(self):
        aggregator = TemporalAggregator(30)
        snapshot = aggregator.update(95, False, HandMovementLevel.CALM, 0.0)
        # 38 + 30 + 0.3*85 = 93.5
        assert snapshot.overall_score(85) == 94

    def test_reset(self):
        aggregator = TemporalAggregator(30)
        aggregator.update(10, True, HandMovementLevel.NERVOUS, 20.0)
        aggregator.reset()
        assert len(aggregator.posture_window) == 0
        assert aggregator.slouch_count == 0
        assert aggregator.nervous_movement_count == 0


class TestFeedback:
    """Priority-ordered coaching messages."""

    def test_all_good(self):
        assert generate_feedback(95, False, HandMovementLevel.CALM, 90) == [feedback.ALL_GOOD]

    def test_slouching_takes_precedence_over_low_posture(self):
        messages = generate_feedback(40, True, HandMovementLevel.CALM, 90)
        assert messages == [feedback.SLOUCHING]

    def test_low_posture(self):
        assert generate_feedback(69, False, HandMovementLevel.CALM, 90) == [feedback.LOW_POSTURE]
        assert generate_feedback(70, False, HandMovementLevel.CALM, 90) == [feedback.ALL_GOOD]

    def test_priority_order(self):
        messages = generate_feedback(50, True, HandMovementLevel.NERVOUS, 10)
        assert messages == [feedback.SLOUCHING, feedback.NERVOUS_HANDS, feedback.LOW_EYE_CONTACT]

    def test_moderate_hands(self):
        messages = generate_feedback(90, False, HandMovementLevel.MODERATE, 49)
        assert messages == [feedback.MODERATE_HANDS, feedback.LOW_EYE_CONTACT]

    def test_exact_messages(self):
        assert feedback.SLOUCHING == "Sit up straight - you appear to be slouching"
        assert feedback.ALL_GOOD == "Great body language! Keep it up"
