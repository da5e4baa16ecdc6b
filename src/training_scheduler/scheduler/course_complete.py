"""Course-complete scheduling strategy.

Every session group of a course, at every location, is scheduled before
any group of the next course. Classrooms are shared by all groups at a
location and picked per session part.
"""

import logging
from datetime import datetime

from ..constants import MAX_SCHEDULING_ROUNDS
from ..exceptions import InvariantViolationError
from ..models import Course, ScheduledSessionPart, SessionGroup
from .base import BaseScheduler, GroupsByLocation
from .splitter import SessionPartPlan

logger = logging.getLogger(__name__)


class CourseCompleteScheduler(BaseScheduler):
    """Schedules courses one at a time across all locations.

    A global cursor marks where the current course may start. Within a
    location, groups are placed in rounds at a local time: each pending
    group tries the block starts of that day and the ends of existing
    reservations. A round that places nothing has tried every start on that
    day, so the local time moves to the first block of the next valid day.
    When a course is done, the global cursor moves to the first block of
    the day after its latest part.
    """

    def schedule(
        self,
        courses: list[Course],
        groups_by_location: GroupsByLocation,
        classrooms: dict[str, int],
    ) -> list[ScheduledSessionPart]:
        global_time = self.time_blocks.first_slot(self.criteria.start_date)
        skipped_locations: set[str] = set()

        for course in courses:
            latest_end: datetime | None = None

            for location, course_groups in groups_by_location.items():
                groups = course_groups.get(course.id, [])
                if not groups:
                    continue

                max_classrooms = classrooms.get(location, 0)
                if max_classrooms < 1:
                    if location not in skipped_locations:
                        self._warn_no_classrooms(location)
                        skipped_locations.add(location)
                    continue

                end = self._schedule_location(course, location, groups, max_classrooms, global_time)
                if end is not None and (latest_end is None or end > latest_end):
                    latest_end = end

            if latest_end is None:
                logger.debug(f"Nothing placed for {course.name}; cursor stays at {global_time}")
                continue

            global_time = self.time_blocks.next_day_start(latest_end)
            logger.info(f"{course.name} complete at {latest_end}; next course from {global_time}")

        return self.parts

    def _schedule_location(
        self,
        course: Course,
        location: str,
        groups: list[SessionGroup],
        max_classrooms: int,
        start: datetime,
    ) -> datetime | None:
        """Place all groups of a course at one location.

        Returns:
            End of the latest placed part, or None if nothing was placed
        """
        local_time = start
        pending = list(groups)
        latest_end: datetime | None = None
        rounds = 0

        while pending and rounds < MAX_SCHEDULING_ROUNDS:
            rounds += 1
            placed_any = False

            for group in list(pending):
                placement = self._find_placement(course, group, max_classrooms, local_time)
                if placement is None:
                    continue

                plans, assigned = placement
                self._commit(course, group, plans, assigned, max_classrooms, len(groups))
                pending.remove(group)
                placed_any = True
                if latest_end is None or plans[-1].end > latest_end:
                    latest_end = plans[-1].end

            if pending and not placed_any:
                local_time = self.time_blocks.next_day_start(local_time)

        for group in pending:
            logger.warning(
                f"Could not place {course.name} group {group.group_number} at {location}"
            )
            self._warn(
                location,
                f"Could not place {course.name} group {group.group_number} "
                f"within {MAX_SCHEDULING_ROUNDS} scheduling rounds",
                course_id=course.id,
                group_number=group.group_number,
            )

        return latest_end

    def _candidate_starts(self, location: str, local_time: datetime) -> list[datetime]:
        """Get start times to try on local_time's day, in order."""
        day = local_time.date()
        candidates = {
            block.start_on(day)
            for block in self.time_blocks.get_time_blocks()
            if block.start_on(day) >= local_time
        }
        for reservation in self.tracker.reservations_for(location):
            if (
                reservation.end.date() == day
                and reservation.end >= local_time
                and self.time_blocks.get_block_containing(reservation.end) is not None
            ):
                candidates.add(reservation.end)
        return sorted(candidates)

    def _find_placement(
        self,
        course: Course,
        group: SessionGroup,
        max_classrooms: int,
        local_time: datetime,
    ) -> tuple[list[SessionPartPlan], list[int]] | None:
        """Find the earliest start on local_time's day with a classroom per part."""
        for candidate in self._candidate_starts(group.location, local_time):
            plans = self.splitter.split_course(
                course.duration_hours,
                candidate,
                course_name=course.name,
                session_number=group.group_number,
                location=group.location,
            )
            if plans[0].start != candidate:
                continue

            assigned = self._assign_classrooms(group.location, plans, max_classrooms)
            if assigned is not None:
                return plans, assigned
        return None

    def _assign_classrooms(
        self, location: str, plans: list[SessionPartPlan], max_classrooms: int
    ) -> list[int] | None:
        """Pick a classroom for every part, preferring the first part's classroom."""
        assigned: list[int] = []
        preferred: int | None = None

        for plan in plans:
            if preferred is not None and self.tracker.is_classroom_free(
                location, preferred, plan.start, plan.end
            ):
                assigned.append(preferred)
                continue

            classroom = self.tracker.find_available_classroom(
                location, plan.start, plan.end, max_classrooms
            )
            if classroom is None:
                return None
            if preferred is None:
                preferred = classroom
            assigned.append(classroom)

        return assigned

    def _commit(
        self,
        course: Course,
        group: SessionGroup,
        plans: list[SessionPartPlan],
        assigned: list[int],
        max_classrooms: int,
        total_groups: int,
    ) -> None:
        for plan, classroom in zip(plans, assigned):
            reserved = self.tracker.reserve(
                group.location,
                plan.start,
                plan.end,
                plan.session_id,
                max_classrooms,
                preferred=classroom,
            )
            if reserved != classroom:
                raise InvariantViolationError(
                    f"Classroom {classroom} was free when checked but could not be "
                    f"reserved for {plan.session_id}",
                    location=group.location,
                )
            self._build_part(plan, course, group, classroom, total_groups)
