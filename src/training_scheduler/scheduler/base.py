"""Base class for scheduling strategies."""

from abc import ABC, abstractmethod

from ..models import (
    Course,
    ScheduledSessionPart,
    SchedulingCriteria,
    ScheduleWarning,
    SessionGroup,
    WarningKind,
    WarningSeverity,
)
from .availability import ClassroomAvailabilityTracker
from .splitter import SessionPartPlan, SessionSplitter
from .time_blocks import TimeBlockModel
from .utils import create_group_name

# location -> course id -> session groups
GroupsByLocation = dict[str, dict[str, list[SessionGroup]]]


class BaseScheduler(ABC):
    """Shared state and helpers for the scheduling strategies.

    A scheduler instance is used for a single run: parts and warnings
    accumulate on the instance.
    """

    def __init__(
        self,
        criteria: SchedulingCriteria,
        time_blocks: TimeBlockModel,
        splitter: SessionSplitter,
        tracker: ClassroomAvailabilityTracker,
    ) -> None:
        self.criteria = criteria
        self.time_blocks = time_blocks
        self.splitter = splitter
        self.tracker = tracker
        self.parts: list[ScheduledSessionPart] = []
        self.warnings: list[ScheduleWarning] = []

    @abstractmethod
    def schedule(
        self,
        courses: list[Course],
        groups_by_location: GroupsByLocation,
        classrooms: dict[str, int],
    ) -> list[ScheduledSessionPart]:
        """Schedule every session group.

        Args:
            courses: Courses in priority order
            groups_by_location: Session groups per location and course
            classrooms: Number of classrooms per location

        Returns:
            Scheduled parts (also kept in self.parts)
        """
        pass

    def _build_part(
        self,
        plan: SessionPartPlan,
        course: Course,
        group: SessionGroup,
        classroom_number: int,
        total_groups: int,
    ) -> ScheduledSessionPart:
        part = ScheduledSessionPart(
            location=group.location,
            classroom_number=classroom_number,
            course=course,
            session_number=group.group_number,
            part_number=plan.part,
            total_parts=plan.total_parts,
            day_number=plan.day,
            total_days=plan.total_days,
            start=plan.start,
            end=plan.end,
            duration_hours=plan.duration_hours,
            title=plan.title,
            block_id=plan.block_id,
            functional_area=self.criteria.functional_area,
            group_name=create_group_name(
                group.location, group.user_range, classroom_number, total_groups
            ),
            user_count=group.user_count,
            user_range=group.user_range,
            max_attendees=self.criteria.max_attendees,
            session_id=plan.session_id,
        )
        self.parts.append(part)
        return part

    def _warn(
        self,
        location: str,
        message: str,
        severity: WarningSeverity = WarningSeverity.WARNING,
        kind: WarningKind = WarningKind.PLACEMENT,
        course_id: str | None = None,
        group_number: int | None = None,
    ) -> None:
        self.warnings.append(
            ScheduleWarning(
                location=location,
                message=message,
                severity=severity,
                kind=kind,
                course_id=course_id,
                group_number=group_number,
            )
        )

    def _warn_no_classrooms(self, location: str) -> None:
        self._warn(
            location,
            f"No classrooms available at {location}; location skipped",
            severity=WarningSeverity.ERROR,
            kind=WarningKind.CAPACITY,
        )
