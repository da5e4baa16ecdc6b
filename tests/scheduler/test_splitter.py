"""Tests for SessionSplitter."""

from datetime import datetime, timedelta

import pytest

from training_scheduler.exceptions import InvariantViolationError
from training_scheduler.models import SchedulingCriteria, SchedulingPreference
from training_scheduler.scheduler.splitter import SessionSplitter
from training_scheduler.scheduler.time_blocks import TimeBlockModel

MON_08 = datetime(2025, 1, 6, 8)


class TestSplitCourse:
    """Tests for splitting durations into parts."""

    def test_short_course_is_single_part(self, splitter):
        parts = splitter.split_course(2, MON_08, "Safety Basics")
        assert len(parts) == 1
        assert parts[0].start == MON_08
        assert parts[0].end == datetime(2025, 1, 6, 10)
        assert parts[0].title == "Safety Basics - Group 1"

    def test_course_longer_than_block(self, splitter):
        parts = splitter.split_course(5, MON_08, "Equipment Operation")
        assert [(p.start, p.end) for p in parts] == [
            (MON_08, datetime(2025, 1, 6, 12)),
            (datetime(2025, 1, 6, 13), datetime(2025, 1, 6, 14)),
        ]
        assert all(p.total_parts == 2 for p in parts)
        assert all(p.day_label == "Day 1 of 1" for p in parts)

    def test_multi_day_course(self, splitter):
        parts = splitter.split_course(12, MON_08, "Long Course", session_number=2)
        assert len(parts) == 3
        assert parts[-1].start == datetime(2025, 1, 7, 8)
        assert parts[-1].end == datetime(2025, 1, 7, 12)
        assert [p.day for p in parts] == [1, 1, 2]
        assert parts[-1].title == "Long Course - Group 2 Part 3 (Day 2 of 2)"

    def test_mid_block_start_when_remainder_fits(self, splitter):
        parts = splitter.split_course(2, datetime(2025, 1, 6, 10))
        assert parts[0].start == datetime(2025, 1, 6, 10)

    def test_mid_block_start_moves_when_remainder_does_not_fit(self, splitter):
        parts = splitter.split_course(3, datetime(2025, 1, 6, 10))
        assert parts[0].start == datetime(2025, 1, 6, 13)
        assert len(parts) == 1

    def test_weekend_start_moves_to_monday(self, splitter):
        parts = splitter.split_course(1, datetime(2025, 1, 11, 9))
        assert parts[0].start == datetime(2025, 1, 13, 8)

    def test_fractional_duration(self, splitter):
        parts = splitter.split_course(4.5, MON_08)
        assert parts[-1].end == datetime(2025, 1, 6, 13, 30)

    def test_morning_only_spreads_over_days(self):
        model = TimeBlockModel(
            SchedulingCriteria(scheduling_preference=SchedulingPreference.MORNING_ONLY)
        )
        parts = SessionSplitter(model).split_course(6, MON_08)
        assert [p.start for p in parts] == [MON_08, datetime(2025, 1, 7, 8)]
        assert parts[-1].end == datetime(2025, 1, 7, 10)

    def test_session_ids_are_unique(self, splitter):
        parts = splitter.split_course(12, MON_08, "Long Course", location="Site A")
        ids = [p.session_id for p in parts]
        assert len(set(ids)) == len(ids)
        assert ids[0] == "long-course-site-a-1-part1-20250106T0800"

    @pytest.mark.parametrize("duration", [0, -1])
    def test_non_positive_duration_raises(self, splitter, duration):
        with pytest.raises(InvariantViolationError):
            splitter.split_course(duration, MON_08)

    @pytest.mark.parametrize("duration", [0.25, 1, 3.5, 4, 7.75, 8, 9, 17, 40])
    def test_duration_is_conserved(self, splitter, time_blocks, duration):
        parts = splitter.split_course(duration, MON_08)
        total = sum((p.duration for p in parts), timedelta(0))
        assert total == timedelta(hours=duration)
        for part in parts:
            block = time_blocks.get_block_containing(part.start)
            assert block is not None
            assert block.contains(part.start, part.end)


class TestValidateParts:
    """Tests for split validation."""

    def test_valid_split(self, splitter):
        parts = splitter.split_course(12, MON_08)
        validation = splitter.validate_parts(parts, 12)
        assert validation["is_valid"]
        assert validation["total_parts"] == 3
        assert validation["total_days"] == 2

    def test_duration_mismatch(self, splitter):
        parts = splitter.split_course(5, MON_08)
        validation = splitter.validate_parts(parts, 6)
        assert not validation["is_valid"]

    def test_empty_parts(self, splitter):
        assert not splitter.validate_parts([], 2)["is_valid"]
