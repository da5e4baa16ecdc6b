"""Classroom availability tracking for schedule generation."""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Any

from ..exceptions import InvariantViolationError
from ..models import ClassroomReservation

logger = logging.getLogger(__name__)


class ClassroomAvailabilityTracker:
    """Tracks reserved intervals per numbered classroom at each location.

    Classrooms are numbered 1..max_classrooms per location. Intervals are
    half-open, so a session ending at 10:00 does not conflict with one
    starting at 10:00. When several classrooms are free the lowest number
    is assigned.
    """

    def __init__(self) -> None:
        # location -> list of reservations
        self.reservations: dict[str, list[ClassroomReservation]] = defaultdict(list)

    @staticmethod
    def _check_interval(start: datetime, end: datetime, location: str) -> None:
        if end <= start:
            raise InvariantViolationError(
                f"Empty or negative reservation interval {start.isoformat()} - {end.isoformat()}",
                location=location,
            )

    def conflicts_for(
        self,
        location: str,
        start: datetime,
        end: datetime,
        classroom_number: int | None = None,
    ) -> list[ClassroomReservation]:
        """Get reservations overlapping [start, end).

        Args:
            location: Training location
            start: Interval start
            end: Interval end (exclusive)
            classroom_number: Restrict to one classroom

        Returns:
            Overlapping reservations ordered by start
        """
        overlapping = [
            r
            for r in self.reservations.get(location, [])
            if r.overlaps(start, end)
            and (classroom_number is None or r.classroom_number == classroom_number)
        ]
        return sorted(overlapping, key=lambda r: (r.start, r.classroom_number))

    def is_classroom_free(
        self, location: str, classroom_number: int, start: datetime, end: datetime
    ) -> bool:
        return not self.conflicts_for(location, start, end, classroom_number)

    def find_available_classroom(
        self,
        location: str,
        start: datetime,
        end: datetime,
        max_classrooms: int,
    ) -> int | None:
        """Get the lowest-numbered classroom free for [start, end).

        Returns:
            Classroom number (1-based) or None if all are occupied
        """
        occupied = {r.classroom_number for r in self.conflicts_for(location, start, end)}
        for classroom_number in range(1, max_classrooms + 1):
            if classroom_number not in occupied:
                return classroom_number
        return None

    def is_available(
        self,
        location: str,
        start: datetime,
        end: datetime,
        max_classrooms: int,
    ) -> bool:
        """Check whether any of max_classrooms classrooms is free for [start, end)."""
        available = self.find_available_classroom(location, start, end, max_classrooms)
        if available is None:
            logger.debug(
                f"No classroom available at {location} for "
                f"{start:%Y-%m-%d %H:%M}-{end:%H:%M} ({max_classrooms} classrooms)"
            )
        return available is not None

    def reserve(
        self,
        location: str,
        start: datetime,
        end: datetime,
        session_id: str,
        max_classrooms: int,
        preferred: int | None = None,
    ) -> int | None:
        """Reserve a free classroom for [start, end).

        Args:
            location: Training location
            start: Interval start
            end: Interval end (exclusive)
            session_id: Identifier stored with the reservation
            max_classrooms: Number of classrooms at the location
            preferred: Classroom to use if it is free

        Returns:
            Assigned classroom number, or None if no classroom is free

        Raises:
            InvariantViolationError: If the interval is empty or negative
        """
        self._check_interval(start, end, location)

        if (
            preferred is not None
            and 1 <= preferred <= max_classrooms
            and self.is_classroom_free(location, preferred, start, end)
        ):
            classroom_number = preferred
        else:
            classroom_number = self.find_available_classroom(
                location, start, end, max_classrooms
            )

        if classroom_number is None:
            logger.warning(
                f"No classrooms available at {location} for session {session_id} - "
                f"all {max_classrooms} classrooms occupied"
            )
            return None

        self._add(location, classroom_number, start, end, session_id)
        return classroom_number

    def reserve_classroom(
        self,
        location: str,
        classroom_number: int,
        start: datetime,
        end: datetime,
        session_id: str,
    ) -> ClassroomReservation:
        """Reserve a specific classroom.

        Raises:
            InvariantViolationError: If the classroom is already booked for
                any part of the interval
        """
        self._check_interval(start, end, location)
        conflicts = self.conflicts_for(location, start, end, classroom_number)
        if conflicts:
            raise InvariantViolationError(
                f"Classroom {classroom_number} already reserved by "
                f"{conflicts[0].session_id} during {start.isoformat()} - {end.isoformat()}",
                location=location,
            )
        return self._add(location, classroom_number, start, end, session_id)

    def _add(
        self,
        location: str,
        classroom_number: int,
        start: datetime,
        end: datetime,
        session_id: str,
    ) -> ClassroomReservation:
        reservation = ClassroomReservation(
            location=location,
            classroom_number=classroom_number,
            start=start,
            end=end,
            session_id=session_id,
        )
        self.reservations[location].append(reservation)
        logger.debug(
            f"Reserved classroom {classroom_number} at {location} for {session_id}"
        )
        return reservation

    def release(self, session_id: str) -> bool:
        """Remove every reservation stored under session_id.

        Returns:
            True if anything was released
        """
        released = False
        for location, reservations in self.reservations.items():
            kept = [r for r in reservations if r.session_id != session_id]
            if len(kept) != len(reservations):
                self.reservations[location] = kept
                released = True
        return released

    def reservations_for(
        self, location: str, classroom_number: int | None = None
    ) -> list[ClassroomReservation]:
        """Get reservations at a location ordered by start."""
        return sorted(
            (
                r
                for r in self.reservations.get(location, [])
                if classroom_number is None or r.classroom_number == classroom_number
            ),
            key=lambda r: (r.start, r.classroom_number),
        )

    def utilization_summary(self, location: str | None = None) -> dict[str, Any]:
        """Summarize reservations for diagnostics.

        Args:
            location: Single location to summarize; all locations if None

        Returns:
            For one location: {'location', 'reservations', 'booked_hours',
            'classroom_details'}; otherwise a mapping location -> summary
        """
        if location is not None:
            return self._summarize(location)
        return {loc: self._summarize(loc) for loc in self.reservations}

    def _summarize(self, location: str) -> dict[str, Any]:
        reservations = self.reservations.get(location, [])
        classroom_details: dict[int, int] = defaultdict(int)
        for reservation in reservations:
            classroom_details[reservation.classroom_number] += 1
        return {
            "location": location,
            "reservations": len(reservations),
            "booked_hours": round(sum(r.duration_hours for r in reservations), 2),
            "classroom_details": dict(sorted(classroom_details.items())),
        }

    def clear(self) -> None:
        self.reservations.clear()
