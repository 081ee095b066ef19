import sys
import threading
from datetime import date, timedelta
from decimal import Decimal

from progress.analytics.achievements import (
    AchievementDetector,
    FiredAchievementStore,
    has_full_streak,
    milestone_progress,
)
from progress.schemas import AchievementKind, WeightObservation

TODAY = date(2024, 3, 10)


def last_days(n, today=TODAY, weight=180):
    return [WeightObservation(date=today - timedelta(days=i), weight=weight) for i in range(n)]


def ids(events):
    return [e.id for e in events]


def test_milestones_fire_once_in_ascending_order():
    detector = AchievementDetector()
    fired = []
    for current in range(200, 149, -1):
        fired += detector.evaluate(current, 150, 200, [], "lbs", today=TODAY)
    milestones = [e.id for e in fired if e.kind == AchievementKind.MILESTONE]
    assert milestones == ["milestone-25", "milestone-50", "milestone-75"]

    # Same and regressed values never re-fire
    assert detector.evaluate(150, 150, 200, [], "lbs", today=TODAY) == []
    assert detector.evaluate(195, 150, 200, [], "lbs", today=TODAY) == []
    assert detector.evaluate(150, 150, 200, [], "lbs", today=TODAY) == []


def test_milestone_fires_exactly_at_threshold():
    detector = AchievementDetector()
    events = detector.evaluate(187.5, 150, 200, [], "lbs", today=TODAY)
    assert ids(events) == ["milestone-25", "weight-loss-5", "weight-loss-10"]


def test_halfway_fires_first_two_milestones():
    detector = AchievementDetector()
    events = detector.evaluate(170, 160, 180, [], "lbs", today=TODAY)
    assert ids(events) == ["milestone-25", "milestone-50", "weight-loss-5", "weight-loss-10"]
    assert [e.milestone for e in events[:2]] == [25, 50]
    assert "milestone-75" not in detector.store


def test_goal_tolerance_boundary():
    inside = AchievementDetector().evaluate(149.6, 150, 200, [], "lbs", today=TODAY)
    outside = AchievementDetector().evaluate(149.0, 150, 200, [], "lbs", today=TODAY)
    assert "goal-achieved" in ids(inside)
    assert "goal-achieved" not in ids(outside)


def test_goal_event_text():
    event = AchievementDetector().evaluate(60, 60, 70, [], "kg", today=TODAY)[0]
    assert event.id == "goal-achieved"
    assert event.kind == AchievementKind.GOAL
    assert event.title == "🎉 Goal Achieved!"
    assert event.description == "Congratulations! You've reached your goal weight of 60 kg!"
    assert event.fired_at.tzinfo is not None


def test_goal_requires_start_weight():
    events = AchievementDetector().evaluate(150, 150, None, [], "lbs", today=TODAY)
    assert events == []


def test_zero_goal_distance_skips_milestones():
    events = AchievementDetector().evaluate(150, 150, 150, [], "lbs", today=TODAY)
    assert ids(events) == ["goal-achieved"]
    assert milestone_progress(150, 150, 150) is None


def test_missing_values_skip_rules():
    detector = AchievementDetector()
    assert detector.evaluate(None, None, None, None, "lbs", today=TODAY) == []
    # Weight loss only needs start and current
    events = detector.evaluate(190, None, 200, [], "lbs", today=TODAY)
    assert ids(events) == ["weight-loss-5", "weight-loss-10"]


def test_weight_gain_never_counts_as_loss():
    events = AchievementDetector().evaluate(210, None, 200, [], "lbs", today=TODAY)
    assert events == []


def test_weight_loss_thresholds_ascending():
    events = AchievementDetector().evaluate(174, None, 200, [], "lbs", today=TODAY)
    assert ids(events) == ["weight-loss-5", "weight-loss-10", "weight-loss-15", "weight-loss-20", "weight-loss-25"]
    assert events[-1].title == "💪 25 lbs Lost!"
    assert events[-1].description == "Amazing progress! You've lost 25 lbs!"


def test_seven_day_streak():
    detector = AchievementDetector()
    events = detector.evaluate(None, None, None, last_days(7), "lbs", today=TODAY)
    assert ids(events) == ["7-day-streak"]
    assert events[0].kind == AchievementKind.STREAK
    assert detector.evaluate(None, None, None, last_days(8), "lbs", today=TODAY) == []


def test_streak_needs_every_day():
    entries = [e for e in last_days(8) if e.date != TODAY - timedelta(days=3)]
    assert len(entries) == 7
    assert AchievementDetector().evaluate(None, None, None, entries, "lbs", today=TODAY) == []


def test_streak_must_end_today():
    entries = last_days(7, today=TODAY - timedelta(days=1))
    assert not has_full_streak(entries, TODAY, 7)
    assert has_full_streak(entries, TODAY - timedelta(days=1), 7)


def test_firing_order_within_one_pass():
    events = AchievementDetector().evaluate(150, 150, 200, last_days(7), "lbs", today=TODAY)
    assert ids(events) == [
        "goal-achieved",
        "milestone-25", "milestone-50", "milestone-75",
        "7-day-streak",
        "weight-loss-5", "weight-loss-10", "weight-loss-15", "weight-loss-20", "weight-loss-25",
    ]


def test_dismiss_hides_without_refiring():
    detector = AchievementDetector()
    detector.evaluate(170, 160, 180, [], "lbs", today=TODAY)
    assert detector.dismiss("milestone-25") is True
    assert "milestone-25" not in ids(detector.achievements)
    assert "milestone-25" in detector.store
    assert detector.evaluate(170, 160, 180, [], "lbs", today=TODAY) == []
    assert detector.dismiss("milestone-25") is False


def test_clear_all_keeps_fired_set():
    detector = AchievementDetector()
    detector.evaluate(170, 160, 180, [], "lbs", today=TODAY)
    detector.clear_all()
    assert detector.achievements == []
    assert len(detector.store) == 4
    assert detector.evaluate(170, 160, 180, [], "lbs", today=TODAY) == []


def test_injected_store_is_respected():
    store = FiredAchievementStore(["goal-achieved"])
    events = AchievementDetector(store=store).evaluate(150, 150, 150, [], "lbs", today=TODAY)
    assert events == []


def test_store_shared_between_detectors():
    store = FiredAchievementStore()
    AchievementDetector(store=store).evaluate(190, None, 200, [], "lbs", today=TODAY)
    assert AchievementDetector(store=store).evaluate(190, None, 200, [], "lbs", today=TODAY) == []


def test_presenter_receives_events_in_order():
    class Recorder:
        def __init__(self):
            self.seen = []

        def present(self, event):
            self.seen.append(event.id)

    presenter = Recorder()
    events = AchievementDetector(presenter=presenter).evaluate(170, 160, 180, [], "lbs", today=TODAY)
    assert presenter.seen == ids(events)


def test_presenter_failure_does_not_stop_evaluation():
    class Broken:
        def present(self, event):
            raise RuntimeError("animation layer unavailable")

    detector = AchievementDetector(presenter=Broken())
    events = detector.evaluate(170, 160, 180, [], "lbs", today=TODAY)
    assert len(events) == 4
    assert len(detector.achievements) == 4


def test_decimal_weights_are_accepted():
    events = AchievementDetector().evaluate(Decimal("149.6"), Decimal("150"), Decimal("200"), [], "lbs", today=TODAY)
    assert "goal-achieved" in ids(events)


def test_custom_rule_configuration():
    detector = AchievementDetector(milestones=[50], loss_thresholds=[2], streak_days=3)
    events = detector.evaluate(175, 150, 200, last_days(3), "lbs", today=TODAY)
    assert ids(events) == ["milestone-50", "3-day-streak", "weight-loss-2"]


def test_streak_days_zero_is_kept():
    assert AchievementDetector(streak_days=0).streak_days == 0


def test_store_claim_records_once():
    store = FiredAchievementStore()
    assert store.claim("goal-achieved") is True
    assert store.claim("goal-achieved") is False
    assert "goal-achieved" in store


def test_concurrent_evaluations_fire_each_id_once():
    previous = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    try:
        for _ in range(50):
            detector = AchievementDetector()
            barrier = threading.Barrier(8)
            results = []
            results_lock = threading.Lock()

            def worker():
                barrier.wait()
                events = detector.evaluate(150, 150, 200, [], "lbs", today=TODAY)
                with results_lock:
                    results.extend(ids(events))

            threads = [threading.Thread(target=worker) for _ in range(8)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

            assert sorted(results) == sorted(set(results))
            assert results.count("goal-achieved") == 1
            assert len(detector.achievements) == len(results)
    finally:
        sys.setswitchinterval(previous)
