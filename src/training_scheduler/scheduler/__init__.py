"""Training session scheduling engine.

This package packs session groups of trainees into classrooms and daily
time blocks. Two strategies are available:

- GroupCompleteScheduler: each group finishes all its courses in one
  classroom before that classroom takes the next group
- CourseCompleteScheduler: each course is delivered to every group at every
  location before the next course starts

Usage:
    from training_scheduler.scheduler import SchedulingEngine

    engine = SchedulingEngine()
    result = engine.schedule(trainees, courses, criteria)
"""

from .availability import ClassroomAvailabilityTracker
from .base import BaseScheduler
from .capacity import CapacityPlanner, total_training_hours
from .course_complete import CourseCompleteScheduler
from .engine import SchedulingEngine, build_timetable, create_engine, schedule_training
from .group_complete import GroupCompleteScheduler
from .splitter import SessionPartPlan, SessionSplitter
from .time_blocks import TimeBlock, TimeBlockModel, parse_time, parse_time_to_hours
from .utils import (
    create_group_name,
    create_session_groups,
    format_session_title,
    group_trainees_by_location,
    sort_courses_by_priority,
    validate_timetable,
)

__all__ = [
    # Engine
    "SchedulingEngine",
    "create_engine",
    "schedule_training",
    "build_timetable",
    # Strategies
    "BaseScheduler",
    "GroupCompleteScheduler",
    "CourseCompleteScheduler",
    # Components
    "ClassroomAvailabilityTracker",
    "CapacityPlanner",
    "SessionSplitter",
    "SessionPartPlan",
    "TimeBlock",
    "TimeBlockModel",
    # Utilities
    "create_group_name",
    "create_session_groups",
    "format_session_title",
    "group_trainees_by_location",
    "parse_time",
    "parse_time_to_hours",
    "sort_courses_by_priority",
    "total_training_hours",
    "validate_timetable",
]
