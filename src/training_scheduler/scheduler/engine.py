"""Scheduling engine facade."""

import logging
from collections import Counter, defaultdict

from ..constants import classroom_key
from ..exceptions import ConfigurationError, InvariantViolationError
from ..models import (
    Course,
    ScheduledSessionPart,
    ScheduleResult,
    ScheduleStatistics,
    ScheduleWarning,
    SchedulingCriteria,
    SchedulingMode,
    Timetable,
    Trainee,
    WarningKind,
    WarningSeverity,
)
from .availability import ClassroomAvailabilityTracker
from .base import BaseScheduler, GroupsByLocation
from .capacity import CapacityPlanner, total_training_hours
from .course_complete import CourseCompleteScheduler
from .group_complete import GroupCompleteScheduler
from .splitter import SessionSplitter
from .time_blocks import TimeBlockModel
from .utils import (
    create_session_groups,
    group_trainees_by_location,
    log_course_priority_order,
    sort_courses_by_priority,
    trainees_for_course,
    validate_timetable,
)

logger = logging.getLogger(__name__)

SCHEDULERS: dict[SchedulingMode, type[BaseScheduler]] = {
    SchedulingMode.GROUP_COMPLETE: GroupCompleteScheduler,
    SchedulingMode.COURSE_COMPLETE: CourseCompleteScheduler,
}


class SchedulingEngine:
    """Turns trainees, courses and criteria into a conflict-free timetable.

    Steps:
    1. Validate the criteria and input records
    2. Order courses by priority
    3. Partition trainees into session groups per location and course
    4. Estimate classrooms per location and report capacity problems
    5. Pack the groups with the strategy selected by criteria.mode
    6. Verify no classroom is double-booked and assemble the result
    """

    def __init__(self, planner: CapacityPlanner | None = None) -> None:
        self.planner = planner or CapacityPlanner()

    def schedule(
        self,
        trainees: list[Trainee],
        courses: list[Course],
        criteria: SchedulingCriteria,
        tracker: ClassroomAvailabilityTracker | None = None,
    ) -> ScheduleResult:
        """Generate a timetable.

        Args:
            trainees: Trainees with their location and required courses
            courses: Course catalogue
            criteria: Scheduling criteria
            tracker: Availability tracker to book into; may be pre-seeded
                with existing reservations. A fresh one is used if None.

        Returns:
            ScheduleResult with timetable, warnings, requirements and statistics

        Raises:
            ConfigurationError: If the criteria or input cannot be scheduled
            InvariantViolationError: If the generated timetable double-books
                a classroom
        """
        warnings: list[ScheduleWarning] = []

        # 1. Validate
        time_blocks = self._validate_criteria(trainees, courses, criteria, warnings)
        catalogue = self._build_catalogue(courses, warnings)
        self._check_trainee_courses(trainees, catalogue, warnings)

        # 2. Order courses
        ordered = sort_courses_by_priority(list(catalogue.values()))
        log_course_priority_order(ordered)

        # 3. Session groups
        by_location = group_trainees_by_location(trainees)
        groups_by_location: GroupsByLocation = {}
        for location, location_trainees in by_location.items():
            course_groups = {}
            for course in ordered:
                trainee_ids = trainees_for_course(location_trainees, course.id)
                if trainee_ids:
                    course_groups[course.id] = create_session_groups(
                        trainee_ids, criteria.max_attendees, course.id, location
                    )
            if course_groups:
                groups_by_location[location] = course_groups

        # 4. Capacity
        requirements = {}
        classrooms = {}
        for location in groups_by_location:
            requirement = self.planner.classrooms_needed(
                total_training_hours(by_location[location], catalogue), criteria, location
            )
            requirements[location] = requirement
            classrooms[location] = self._classrooms_for(
                location, requirement.number_of_classrooms, criteria, warnings
            )
            logger.info(
                f"{location}: {len(by_location[location])} trainees, "
                f"{requirement.total_training_hours:g} training hours, "
                f"{classrooms[location]} classroom(s)"
            )

        # 5. Pack
        if tracker is None:
            tracker = ClassroomAvailabilityTracker()
        scheduler = SCHEDULERS[criteria.mode](
            criteria, time_blocks, SessionSplitter(time_blocks), tracker
        )
        parts = scheduler.schedule(ordered, groups_by_location, classrooms)
        warnings.extend(scheduler.warnings)

        # 6. Verify and assemble
        check = validate_timetable(parts)
        if not check["is_valid"]:
            first = check["conflicts"][0]
            raise InvariantViolationError(
                f"Classroom {first['classroom_number']} double-booked by "
                f"{first['first']} and {first['second']}",
                location=first["location"],
            )
        for message in check["warnings"]:
            warnings.append(
                ScheduleWarning(
                    location="",
                    message=message,
                    severity=WarningSeverity.INFO,
                    kind=WarningKind.DATA,
                )
            )

        result = ScheduleResult(
            timetable=build_timetable(parts),
            warnings=warnings,
            requirements=requirements,
            mode=criteria.mode,
        )
        result.statistics = self._calculate_statistics(result, tracker)

        logger.info(
            f"Scheduled {result.statistics.total_sessions} sessions "
            f"({result.statistics.total_parts} parts) with {len(warnings)} warning(s)"
        )
        return result

    def _validate_criteria(
        self,
        trainees: list[Trainee],
        courses: list[Course],
        criteria: SchedulingCriteria,
        warnings: list[ScheduleWarning],
    ) -> TimeBlockModel:
        if not courses:
            raise ConfigurationError("No courses provided", field="courses")
        if not trainees:
            raise ConfigurationError("No trainees provided", field="trainees")
        if not criteria.scheduling_days:
            raise ConfigurationError(
                "At least one scheduling day must be selected", field="scheduling_days"
            )
        if criteria.max_attendees < 1:
            raise ConfigurationError(
                f"Maximum attendees must be at least 1, got {criteria.max_attendees}",
                field="max_attendees",
            )
        if criteria.contingency <= 0:
            raise ConfigurationError(
                f"Contingency must be positive, got {criteria.contingency}",
                field="contingency",
            )

        time_blocks = TimeBlockModel(criteria)
        validation = time_blocks.validate()
        if not validation["is_valid"]:
            raise ConfigurationError("; ".join(validation["errors"]), field="time_blocks")
        for message in validation["warnings"]:
            logger.warning(message)
            warnings.append(
                ScheduleWarning(
                    location="",
                    message=message,
                    severity=WarningSeverity.INFO,
                    kind=WarningKind.DATA,
                )
            )
        return time_blocks

    def _build_catalogue(
        self, courses: list[Course], warnings: list[ScheduleWarning]
    ) -> dict[str, Course]:
        """Index schedulable courses by id, dropping duplicates and empty durations."""
        catalogue: dict[str, Course] = {}
        for course in courses:
            if course.id in catalogue:
                warnings.append(
                    ScheduleWarning(
                        location="",
                        message=f"Duplicate course id '{course.id}'; keeping the first definition",
                        kind=WarningKind.DATA,
                        course_id=course.id,
                    )
                )
                continue
            if course.duration_hours <= 0:
                warnings.append(
                    ScheduleWarning(
                        location="",
                        message=(
                            f"Course '{course.name}' has non-positive duration "
                            f"({course.duration_hours:g} hours); skipped"
                        ),
                        kind=WarningKind.DATA,
                        course_id=course.id,
                    )
                )
                continue
            catalogue[course.id] = course
        return catalogue

    def _check_trainee_courses(
        self,
        trainees: list[Trainee],
        catalogue: dict[str, Course],
        warnings: list[ScheduleWarning],
    ) -> None:
        """Report course ids that trainees require but the catalogue lacks."""
        missing: Counter[tuple[str, str]] = Counter()
        for trainee in trainees:
            for course_id in dict.fromkeys(trainee.course_ids):
                if course_id not in catalogue:
                    missing[(trainee.location or "Unknown", course_id)] += 1

        for (location, course_id), count in missing.items():
            warnings.append(
                ScheduleWarning(
                    location=location,
                    message=f"{count} trainee(s) require unknown course '{course_id}'",
                    kind=WarningKind.DATA,
                    course_id=course_id,
                )
            )

    def _classrooms_for(
        self,
        location: str,
        required: int,
        criteria: SchedulingCriteria,
        warnings: list[ScheduleWarning],
    ) -> int:
        """Decide the classroom pool for a location and record capacity warnings."""
        available = None
        if criteria.available_classrooms is not None:
            available = criteria.available_classrooms.get(location)

        validation = self.planner.validate_capacity(required, available)
        if validation.severity is not None:
            logger.warning(f"{location}: {validation.message}")
            warnings.append(
                ScheduleWarning(
                    location=location,
                    message=validation.message,
                    severity=validation.severity,
                    kind=WarningKind.CAPACITY,
                )
            )

        if available is not None:
            return min(required, available) if required > 0 else available
        return max(required, 1)

    def _calculate_statistics(
        self, result: ScheduleResult, tracker: ClassroomAvailabilityTracker
    ) -> ScheduleStatistics:
        parts = result.parts
        sessions = {(p.course.id, p.location, p.session_number) for p in parts}

        by_location: dict[str, int] = defaultdict(int)
        by_course: dict[str, int] = defaultdict(int)
        for _, location, _ in sessions:
            by_location[location] += 1
        for course_id, _, _ in sessions:
            by_course[course_id] += 1

        classrooms_used = {
            location: len(classrooms)
            for locations in result.timetable.values()
            for location, classrooms in locations.items()
        }

        return ScheduleStatistics(
            total_sessions=len(sessions),
            total_parts=len(parts),
            total_hours=round(sum(p.duration_hours for p in parts), 2),
            by_location=dict(sorted(by_location.items())),
            by_course=dict(sorted(by_course.items())),
            classrooms_used=classrooms_used,
            utilization={
                location: tracker.utilization_summary(location)
                for location in classrooms_used
            },
        )


def build_timetable(parts: list[ScheduledSessionPart]) -> Timetable:
    """Nest parts as functional area -> location -> 'Classroom n' -> parts by start."""
    timetable: Timetable = {}
    for part in sorted(parts, key=lambda p: (p.start, p.location, p.classroom_number)):
        locations = timetable.setdefault(part.functional_area, {})
        classrooms = locations.setdefault(part.location, {})
        classrooms.setdefault(classroom_key(part.classroom_number), []).append(part)
    return timetable


def create_engine() -> SchedulingEngine:
    """Factory function to create a SchedulingEngine with default collaborators."""
    return SchedulingEngine()


def schedule_training(
    trainees: list[Trainee | dict],
    courses: list[Course | dict],
    criteria: SchedulingCriteria | dict,
    tracker: ClassroomAvailabilityTracker | None = None,
) -> ScheduleResult:
    """Schedule from model objects or plain dictionaries.

    Args:
        trainees: Trainee objects or dictionaries for Trainee.from_dict
        courses: Course objects or dictionaries for Course.from_dict
        criteria: SchedulingCriteria or a dictionary for SchedulingCriteria.from_dict
        tracker: Optional pre-seeded availability tracker

    Returns:
        ScheduleResult
    """
    if isinstance(criteria, dict):
        criteria = SchedulingCriteria.from_dict(criteria)
    return create_engine().schedule(
        [t if isinstance(t, Trainee) else Trainee.from_dict(t) for t in trainees],
        [c if isinstance(c, Course) else Course.from_dict(c) for c in courses],
        criteria,
        tracker=tracker,
    )
