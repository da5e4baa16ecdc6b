"""Test fixtures for training scheduler tests."""

import json
from datetime import date

import pytest

from training_scheduler.models import (
    Course,
    SchedulingCriteria,
    SchedulingMode,
    SchedulingPreference,
    Trainee,
)
from training_scheduler.scheduler.availability import ClassroomAvailabilityTracker
from training_scheduler.scheduler.splitter import SessionSplitter
from training_scheduler.scheduler.time_blocks import TimeBlockModel

# Monday
START_DATE = date(2025, 1, 6)


@pytest.fixture
def make_trainees():
    """Factory building trainees U1..Un at one location needing the same courses."""

    def _make(count: int, location: str = "Site A", courses=("C1",), prefix: str = "U"):
        return [
            Trainee(id=f"{prefix}{i}", location=location, course_ids=tuple(courses))
            for i in range(1, count + 1)
        ]

    return _make


@pytest.fixture
def criteria():
    """Default criteria starting on a Monday."""
    return SchedulingCriteria(start_date=START_DATE)


@pytest.fixture
def morning_criteria():
    return SchedulingCriteria(
        start_date=START_DATE,
        scheduling_preference=SchedulingPreference.MORNING_ONLY,
    )


@pytest.fixture
def course_complete_criteria():
    return SchedulingCriteria(start_date=START_DATE, mode=SchedulingMode.COURSE_COMPLETE)


@pytest.fixture
def time_blocks(criteria):
    return TimeBlockModel(criteria)


@pytest.fixture
def splitter(time_blocks):
    return SessionSplitter(time_blocks)


@pytest.fixture
def tracker():
    return ClassroomAvailabilityTracker()


@pytest.fixture
def short_course():
    return Course(id="C1", name="Safety Basics", duration_hours=2, priority=1)


@pytest.fixture
def long_course():
    return Course(id="C2", name="Equipment Operation", duration_hours=5, priority=2)


@pytest.fixture
def sample_input_document():
    """Input document as read by the loader and the CLI."""
    return {
        "criteria": {
            "max_attendees": 10,
            "scheduling_preference": "both",
            "start_date": "2025-01-06",
            "scheduling_days": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
            "mode": "group_complete",
        },
        "courses": [
            {"id": "C1", "name": "Safety Basics", "duration_hours": 2, "priority": 1},
            {"id": "C2", "name": "Equipment Operation", "duration_hours": 5, "priority": 2},
        ],
        "trainees": [
            {"id": f"U{i}", "location": "Site A", "courses": ["C1", "C2"]}
            for i in range(1, 16)
        ]
        + [{"id": f"V{i}", "location": "Site B", "courses": ["C1"]} for i in range(1, 6)],
    }


@pytest.fixture
def input_file(tmp_path, sample_input_document):
    path = tmp_path / "input.json"
    path.write_text(json.dumps(sample_input_document), encoding="utf-8")
    return path
