"""Group-complete scheduling strategy.

Each session group runs through every course it needs, in priority order,
back-to-back in one classroom before that classroom takes the next group.
"""

import logging
from datetime import datetime

from ..constants import MAX_PLACEMENT_ATTEMPTS
from ..models import Course, ScheduledSessionPart, SessionGroup
from .base import BaseScheduler, GroupsByLocation
from .splitter import SessionPartPlan

logger = logging.getLogger(__name__)


class GroupCompleteScheduler(BaseScheduler):
    """Packs session groups into classrooms one group at a time.

    Every classroom keeps its own cursor. The next group number goes to the
    classroom whose cursor is earliest (lowest classroom number on ties) and
    walks through the courses there, each course starting where the previous
    one ended.
    """

    def schedule(
        self,
        courses: list[Course],
        groups_by_location: GroupsByLocation,
        classrooms: dict[str, int],
    ) -> list[ScheduledSessionPart]:
        for location, course_groups in groups_by_location.items():
            if not course_groups:
                continue

            max_classrooms = classrooms.get(location, 0)
            if max_classrooms < 1:
                self._warn_no_classrooms(location)
                continue

            self._schedule_location(location, courses, course_groups, max_classrooms)

        return self.parts

    def _schedule_location(
        self,
        location: str,
        courses: list[Course],
        course_groups: dict[str, list[SessionGroup]],
        max_classrooms: int,
    ) -> None:
        max_groups = max(len(groups) for groups in course_groups.values())
        first_slot = self.time_blocks.first_slot(self.criteria.start_date)
        cursors = {number: first_slot for number in range(1, max_classrooms + 1)}

        logger.info(
            f"Scheduling {max_groups} group(s) at {location} "
            f"in {max_classrooms} classroom(s)"
        )

        for group_number in range(1, max_groups + 1):
            classroom = min(cursors, key=lambda number: (cursors[number], number))
            local_time = cursors[classroom]

            for course in courses:
                groups = course_groups.get(course.id, [])
                if group_number > len(groups):
                    continue

                end = self._place_course(
                    course, groups[group_number - 1], classroom, local_time, len(groups)
                )
                if end is not None:
                    local_time = end

            cursors[classroom] = local_time

    def _place_course(
        self,
        course: Course,
        group: SessionGroup,
        classroom: int,
        start: datetime,
        total_groups: int,
    ) -> datetime | None:
        """Place every part of a course in one classroom.

        Returns:
            End of the last part, or None if the course could not be placed
        """
        candidate = start
        for _ in range(MAX_PLACEMENT_ATTEMPTS):
            plans = self.splitter.split_course(
                course.duration_hours,
                candidate,
                course_name=course.name,
                session_number=group.group_number,
                location=group.location,
            )
            blocking = self._first_conflict_end(group.location, classroom, plans)
            if blocking is None:
                for plan in plans:
                    self.tracker.reserve_classroom(
                        group.location, classroom, plan.start, plan.end, plan.session_id
                    )
                    self._build_part(plan, course, group, classroom, total_groups)
                return plans[-1].end
            candidate = blocking

        logger.warning(
            f"Could not place {course.name} group {group.group_number} at "
            f"{group.location} in classroom {classroom}"
        )
        self._warn(
            group.location,
            f"Could not place {course.name} group {group.group_number} in "
            f"classroom {classroom} after {MAX_PLACEMENT_ATTEMPTS} attempts",
            course_id=course.id,
            group_number=group.group_number,
        )
        return None

    def _first_conflict_end(
        self, location: str, classroom: int, plans: list[SessionPartPlan]
    ) -> datetime | None:
        """End of the latest reservation blocking the first conflicting part."""
        for plan in plans:
            conflicts = self.tracker.conflicts_for(location, plan.start, plan.end, classroom)
            if conflicts:
                return max(reservation.end for reservation in conflicts)
        return None
