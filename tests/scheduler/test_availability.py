"""Tests for ClassroomAvailabilityTracker class."""

from datetime import datetime

import pytest

from training_scheduler.exceptions import InvariantViolationError

MON_08 = datetime(2025, 1, 6, 8)
MON_10 = datetime(2025, 1, 6, 10)
MON_12 = datetime(2025, 1, 6, 12)


class TestClassroomAvailabilityTracker:
    """Tests for ClassroomAvailabilityTracker class."""

    def test_initially_available(self, tracker):
        assert tracker.is_available("Site A", MON_08, MON_10, max_classrooms=1)

    def test_reserve_assigns_lowest_classroom(self, tracker):
        assert tracker.reserve("Site A", MON_08, MON_10, "s1", max_classrooms=3) == 1
        assert tracker.reserve("Site A", MON_08, MON_10, "s2", max_classrooms=3) == 2
        assert tracker.reserve("Site A", MON_08, MON_10, "s3", max_classrooms=3) == 3

    def test_reserve_returns_none_when_full(self, tracker):
        tracker.reserve("Site A", MON_08, MON_10, "s1", max_classrooms=1)
        assert tracker.reserve("Site A", MON_08, MON_10, "s2", max_classrooms=1) is None
        assert not tracker.is_available("Site A", MON_08, MON_10, max_classrooms=1)

    def test_touching_intervals_do_not_conflict(self, tracker):
        tracker.reserve("Site A", MON_08, MON_10, "s1", max_classrooms=1)
        assert tracker.reserve("Site A", MON_10, MON_12, "s2", max_classrooms=1) == 1

    def test_partial_overlap_conflicts(self, tracker):
        tracker.reserve("Site A", MON_08, MON_10, "s1", max_classrooms=1)
        assert not tracker.is_available(
            "Site A", datetime(2025, 1, 6, 9), MON_12, max_classrooms=1
        )

    def test_locations_are_independent(self, tracker):
        tracker.reserve("Site A", MON_08, MON_10, "s1", max_classrooms=1)
        assert tracker.is_available("Site B", MON_08, MON_10, max_classrooms=1)

    def test_preferred_classroom_used_when_free(self, tracker):
        assert tracker.reserve("Site A", MON_08, MON_10, "s1", max_classrooms=3, preferred=2) == 2

    def test_preferred_classroom_falls_back_when_busy(self, tracker):
        tracker.reserve("Site A", MON_08, MON_10, "s1", max_classrooms=3, preferred=2)
        assert tracker.reserve("Site A", MON_08, MON_10, "s2", max_classrooms=3, preferred=2) == 1

    def test_empty_interval_raises(self, tracker):
        with pytest.raises(InvariantViolationError):
            tracker.reserve("Site A", MON_10, MON_10, "s1", max_classrooms=1)

    def test_reserve_classroom_conflict_raises(self, tracker):
        tracker.reserve_classroom("Site A", 1, MON_08, MON_10, "s1")
        with pytest.raises(InvariantViolationError):
            tracker.reserve_classroom("Site A", 1, datetime(2025, 1, 6, 9), MON_12, "s2")

    def test_conflicts_for_classroom(self, tracker):
        tracker.reserve_classroom("Site A", 1, MON_08, MON_10, "s1")
        tracker.reserve_classroom("Site A", 2, MON_08, MON_10, "s2")
        conflicts = tracker.conflicts_for("Site A", MON_08, MON_12, classroom_number=2)
        assert [r.session_id for r in conflicts] == ["s2"]

    def test_release(self, tracker):
        tracker.reserve("Site A", MON_08, MON_10, "s1", max_classrooms=1)
        assert tracker.release("s1")
        assert not tracker.release("s1")
        assert tracker.is_available("Site A", MON_08, MON_10, max_classrooms=1)

    def test_reservations_for_sorted_by_start(self, tracker):
        tracker.reserve("Site A", MON_10, MON_12, "late", max_classrooms=1)
        tracker.reserve("Site A", MON_08, MON_10, "early", max_classrooms=1)
        assert [r.session_id for r in tracker.reservations_for("Site A")] == ["early", "late"]

    def test_utilization_summary(self, tracker):
        tracker.reserve("Site A", MON_08, MON_10, "s1", max_classrooms=2)
        tracker.reserve("Site A", MON_08, MON_12, "s2", max_classrooms=2)
        summary = tracker.utilization_summary("Site A")
        assert summary["reservations"] == 2
        assert summary["booked_hours"] == 6.0
        assert summary["classroom_details"] == {1: 1, 2: 1}
        assert set(tracker.utilization_summary()) == {"Site A"}

    def test_clear(self, tracker):
        tracker.reserve("Site A", MON_08, MON_10, "s1", max_classrooms=1)
        tracker.clear()
        assert tracker.reservations_for("Site A") == []
