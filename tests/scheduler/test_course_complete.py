"""Tests for CourseCompleteScheduler."""

from datetime import datetime

import pytest

from training_scheduler.models import Course, WarningKind
from training_scheduler.scheduler.course_complete import CourseCompleteScheduler
from training_scheduler.scheduler.splitter import SessionSplitter
from training_scheduler.scheduler.time_blocks import TimeBlockModel
from training_scheduler.scheduler.utils import create_session_groups


@pytest.fixture
def scheduler(course_complete_criteria, tracker):
    time_blocks = TimeBlockModel(course_complete_criteria)
    return CourseCompleteScheduler(
        course_complete_criteria, time_blocks, SessionSplitter(time_blocks), tracker
    )


@pytest.fixture
def second_course():
    return Course(id="C3", name="First Aid", duration_hours=2, priority=3)


def _groups(courses, trainee_count, location="Site A"):
    ids = [f"{location[-1]}{i}" for i in range(1, trainee_count + 1)]
    return {
        course.id: create_session_groups(ids, 10, course.id, location) for course in courses
    }


class TestCourseCompleteScheduler:
    """Tests for CourseCompleteScheduler class."""

    def test_groups_share_a_classroom_within_a_day(self, scheduler, short_course):
        parts = scheduler.schedule(
            [short_course], {"Site A": _groups([short_course], 15)}, {"Site A": 1}
        )
        assert sorted((p.session_number, p.start, p.end) for p in parts) == [
            (1, datetime(2025, 1, 6, 8), datetime(2025, 1, 6, 10)),
            (2, datetime(2025, 1, 6, 10), datetime(2025, 1, 6, 12)),
        ]

    def test_next_course_starts_on_following_day(self, scheduler, short_course, second_course):
        courses = [short_course, second_course]
        parts = scheduler.schedule(courses, {"Site A": _groups(courses, 15)}, {"Site A": 1})

        second = sorted(p.start for p in parts if p.course.id == second_course.id)
        assert second == [datetime(2025, 1, 7, 8), datetime(2025, 1, 7, 10)]

    def test_course_completes_across_all_locations_first(
        self, scheduler, short_course, second_course
    ):
        courses = [short_course, second_course]
        groups = {
            "Site A": _groups(courses, 25, "Site A"),
            "Site B": _groups(courses, 5, "Site B"),
        }
        parts = scheduler.schedule(courses, groups, {"Site A": 1, "Site B": 1})

        last_first_course = max(p.end for p in parts if p.course.id == short_course.id)
        first_second_course = min(p.start for p in parts if p.course.id == second_course.id)
        assert last_first_course < first_second_course
        assert first_second_course == datetime(2025, 1, 7, 8)

    def test_groups_run_in_parallel_classrooms(self, scheduler, long_course):
        parts = scheduler.schedule(
            [long_course], {"Site A": _groups([long_course], 15)}, {"Site A": 2}
        )
        by_group = {}
        for part in parts:
            by_group.setdefault(part.session_number, []).append(part)

        assert {p.classroom_number for p in by_group[1]} == {1}
        assert {p.classroom_number for p in by_group[2]} == {2}
        assert all(p.start.date() == datetime(2025, 1, 6).date() for p in parts)

    def test_starts_after_existing_reservation(self, scheduler, tracker, short_course):
        tracker.reserve_classroom(
            "Site A", 1, datetime(2025, 1, 6, 8), datetime(2025, 1, 6, 9), "existing"
        )
        parts = scheduler.schedule(
            [short_course], {"Site A": _groups([short_course], 5)}, {"Site A": 1}
        )
        assert [(p.start, p.end) for p in parts] == [
            (datetime(2025, 1, 6, 9), datetime(2025, 1, 6, 11))
        ]

    def test_rounds_are_bounded(self, scheduler, tracker, short_course):
        tracker.reserve_classroom(
            "Site A", 1, datetime(2025, 1, 6), datetime(2025, 12, 31), "blocked"
        )
        parts = scheduler.schedule(
            [short_course], {"Site A": _groups([short_course], 5)}, {"Site A": 1}
        )
        assert parts == []
        assert len(scheduler.warnings) == 1
        assert scheduler.warnings[0].kind == WarningKind.PLACEMENT
        assert scheduler.warnings[0].group_number == 1

    def test_nothing_placed_keeps_cursor(self, scheduler, tracker, short_course, second_course):
        courses = [short_course, second_course]
        groups = {
            "Site A": {short_course.id: _groups([short_course], 5, "Site A")[short_course.id]},
            "Site B": {second_course.id: _groups([second_course], 5, "Site B")[second_course.id]},
        }
        parts = scheduler.schedule(courses, groups, {"Site A": 0, "Site B": 1})

        assert [(p.course.id, p.start) for p in parts] == [("C3", datetime(2025, 1, 6, 8))]
        assert scheduler.warnings[0].kind == WarningKind.CAPACITY

    def test_no_classroom_double_booked(self, scheduler, tracker, short_course, long_course):
        courses = [short_course, long_course]
        scheduler.schedule(courses, {"Site A": _groups(courses, 63)}, {"Site A": 2})
        for number in (1, 2):
            booked = tracker.reservations_for("Site A", number)
            for earlier, later in zip(booked, booked[1:]):
                assert earlier.end <= later.start

    def test_fills_every_block_over_four_weeks(self, scheduler):
        course = Course(id="C4", name="Workshop", duration_hours=4, priority=1)
        ids = [f"A{i}" for i in range(1, 41)]
        groups = {"Site A": {course.id: create_session_groups(ids, 1, course.id, "Site A")}}

        parts = scheduler.schedule([course], groups, {"Site A": 1})

        assert len(parts) == 40
        assert scheduler.warnings == []
        assert {p.classroom_number for p in parts} == {1}
        first, last = min(parts, key=lambda p: p.start), max(parts, key=lambda p: p.start)
        assert (first.start, first.end) == (datetime(2025, 1, 6, 8), datetime(2025, 1, 6, 12))
        assert (last.start, last.end) == (datetime(2025, 1, 31, 13), datetime(2025, 1, 31, 17))
