"""Training Scheduler - conflict-free timetables for classroom training.

This module turns a population of trainees, each needing one or more
courses at a training location, into a timetable of session groups packed
into classrooms and daily morning/afternoon time blocks.

Example usage:
    from datetime import date

    from training_scheduler import Course, SchedulingCriteria, SchedulingEngine, Trainee

    courses = [Course(id="C1", name="Safety Basics", duration_hours=2)]
    trainees = [Trainee(id=f"U{i}", location="Site A", course_ids=("C1",)) for i in range(15)]
    criteria = SchedulingCriteria(start_date=date(2025, 1, 6))

    result = SchedulingEngine().schedule(trainees, courses, criteria)

    for part in result.parts:
        print(f"{part.start:%a %H:%M} {part.classroom_key} {part.title}")

    # Export to JSON
    from training_scheduler.exporters import JSONExporter
    exporter = JSONExporter()
    exporter.export(result, "timetable.json")
"""

from .exceptions import (
    ConfigurationError,
    InputFormatError,
    InvariantViolationError,
    SchedulingError,
)
from .exporters import CSVExporter, ExcelExporter, JSONExporter, get_exporter
from .loader import SchedulingInput, load_scheduling_input
from .models import (
    Course,
    ScheduledSessionPart,
    ScheduleResult,
    ScheduleWarning,
    SchedulingCriteria,
    SchedulingMode,
    SchedulingPreference,
    SessionGroup,
    Trainee,
    Weekday,
)
from .scheduler import SchedulingEngine, create_engine, schedule_training

__version__ = "0.1.0"

__all__ = [
    # Engine
    "SchedulingEngine",
    "create_engine",
    "schedule_training",
    # Models
    "Course",
    "Trainee",
    "SchedulingCriteria",
    "SchedulingMode",
    "SchedulingPreference",
    "SessionGroup",
    "ScheduledSessionPart",
    "ScheduleResult",
    "ScheduleWarning",
    "Weekday",
    # Input / output
    "SchedulingInput",
    "load_scheduling_input",
    "JSONExporter",
    "CSVExporter",
    "ExcelExporter",
    "get_exporter",
    # Exceptions
    "SchedulingError",
    "ConfigurationError",
    "InvariantViolationError",
    "InputFormatError",
]
