"""Tests for event aggregation, counters and suspicion levels."""

import itertools

import pytest

from signalcoach.engine.events import EventAggregator
from signalcoach.engine.results import COUNTER_FIELDS, CheatingEvent, CheatingMetrics
from signalcoach.utils.alerts import SuspicionLevel, ViolationType, get_suspicion_level


def make_event(violation_type=ViolationType.TAB_SWITCH, message="test"):
    return CheatingEvent.create(violation_type, message)


class TestCheatingEvent:
    """Event identity and serialization."""

    def test_ids_are_unique(self):
        ids = {make_event().id for _ in range(200)}
        assert len(ids) == 200

    def test_timestamp_is_utc(self):
        event = make_event()
        assert event.timestamp.utcoffset().total_seconds() == 0

    def test_to_dict(self):
        event = CheatingEvent.create(ViolationType.LOOKING_AWAY, "away", duration=2100.0)
        data = event.to_dict()
        assert data["type"] == "looking_away"
        assert data["duration"] == 2100.0


class TestEventAggregator:
    """Bounded log, counters and suspicion."""

    def test_every_violation_type_has_a_counter(self):
        assert set(COUNTER_FIELDS) == set(ViolationType)

    def test_total_equals_sum_of_counters(self):
        aggregator = EventAggregator()
        kinds = itertools.cycle([
            ViolationType.TAB_SWITCH,
            ViolationType.LOOKING_AWAY,
            ViolationType.TAB_SWITCH,
            ViolationType.PHONE_DETECTED,
            ViolationType.PERSON_MISSING,
            ViolationType.LOOKING_AWAY,
        ])
        for _ in range(37):
            metrics = aggregator.record(make_event(next(kinds)))
            counters = sum(metrics.count_for(kind) for kind in ViolationType)
            assert metrics.total_violations == counters

    def test_suspicion_transitions(self):
        aggregator = EventAggregator()
        levels = [aggregator.record(make_event()).suspicion_level for _ in range(12)]
        assert levels[3] is SuspicionLevel.LOW
        assert levels[4] is SuspicionLevel.MEDIUM
        assert levels[8] is SuspicionLevel.MEDIUM
        assert levels[9] is SuspicionLevel.HIGH
        assert levels[11] is SuspicionLevel.HIGH

    def test_suspicion_never_decreases(self):
        order = [SuspicionLevel.LOW, SuspicionLevel.MEDIUM, SuspicionLevel.HIGH]
        aggregator = EventAggregator()
        ranks = [order.index(aggregator.record(make_event()).suspicion_level) for _ in range(20)]
        assert ranks == sorted(ranks)

    @pytest.mark.parametrize("total,expected", [
        (0, SuspicionLevel.LOW),
        (4, SuspicionLevel.LOW),
        (5, SuspicionLevel.MEDIUM),
        (9, SuspicionLevel.MEDIUM),
        (10, SuspicionLevel.HIGH),
    ])
    def test_suspicion_breakpoints(self, total, expected):
        assert get_suspicion_level(total) is expected

    def test_log_is_bounded_and_newest_first(self):
        aggregator = EventAggregator(capacity=50)
        events = [make_event() for _ in range(51)]
        for event in events:
            aggregator.record(event)
        metrics = aggregator.metrics
        assert len(metrics.events) == 50
        assert metrics.events[0] is events[-1]
        assert metrics.events[-1] is events[1]
        assert events[0] not in metrics.events
        assert metrics.total_violations == 51

    def test_snapshot_replaced_not_mutated(self):
        aggregator = EventAggregator()
        before = aggregator.metrics
        aggregator.record(make_event())
        assert before.total_violations == 0
        assert aggregator.metrics is not before

    def test_callback_invoked_once_per_event(self):
        seen = []
        aggregator = EventAggregator(on_event=seen.append)
        event = make_event()
        aggregator.record(event)
        assert seen == [event]

    def test_callback_failure_does_not_propagate(self):
        def explode(event):
            raise RuntimeError("listener down")

        aggregator = EventAggregator(on_event=explode)
        metrics = aggregator.record(make_event())
        assert metrics.total_violations == 1

    def test_set_flags(self):
        aggregator = EventAggregator()
        metrics = aggregator.set_flags(is_tab_visible=False)
        assert not metrics.is_tab_visible
        assert metrics.has_active_issues
        assert metrics.total_violations == 0

    def test_set_flags_without_change_keeps_snapshot(self):
        aggregator = EventAggregator()
        before = aggregator.metrics
        assert aggregator.set_flags(is_tab_visible=True) is before

    def test_unknown_flag_rejected(self):
        with pytest.raises(ValueError):
            EventAggregator().set_flags(is_sleeping=True)

    def test_reset(self):
        aggregator = EventAggregator()
        for _ in range(6):
            aggregator.record(make_event())
        aggregator.set_flags(is_phone_detected=True)
        aggregator.reset()
        assert aggregator.metrics == CheatingMetrics()
