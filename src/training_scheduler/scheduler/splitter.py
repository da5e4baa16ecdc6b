"""Splitting course durations into block-sized session parts."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..exceptions import InvariantViolationError
from .time_blocks import TimeBlockModel
from .utils import format_session_title, make_session_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionPartPlan:
    """A planned part of a session, before a classroom is assigned."""

    part: int
    total_parts: int
    day: int
    total_days: int
    start: datetime
    end: datetime
    block_id: int
    block_name: str
    title: str = ""
    session_id: str = ""

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_hours(self) -> float:
        return self.duration.total_seconds() / 3600

    @property
    def day_label(self) -> str:
        return f"Day {self.day} of {self.total_days}"


class SessionSplitter:
    """Splits any positive course duration across time blocks and days.

    Parts are filled greedily from the first usable instant at or after the
    requested start. A part may begin mid-block only when the whole
    remaining duration fits before that block ends; otherwise the split
    moves on to the next block start, so a course never starts with a
    fragment of a partly used block.
    """

    def __init__(self, time_blocks: TimeBlockModel) -> None:
        self.time_blocks = time_blocks

    def split_course(
        self,
        duration_hours: float,
        start: datetime,
        course_name: str = "Course",
        session_number: int = 1,
        location: str = "",
    ) -> list[SessionPartPlan]:
        """Split a course into contiguous session parts.

        Args:
            duration_hours: Course duration in hours
            start: Earliest instant the first part may begin
            course_name: Course name used in titles and session ids
            session_number: Session group number
            location: Location used in session ids

        Returns:
            Ordered parts, each inside a single block on a valid day

        Raises:
            InvariantViolationError: If duration_hours is not positive
            ConfigurationError: If there are no valid weekdays
        """
        if duration_hours <= 0:
            raise InvariantViolationError(f"Invalid course duration: {duration_hours} hours")

        remaining = timedelta(hours=duration_hours)
        cursor = self.time_blocks.normalize(start)
        intervals: list[tuple[datetime, datetime, int, str]] = []

        while remaining > timedelta(0):
            block = self.time_blocks.get_block_containing(cursor)
            block_end = block.end_on(cursor.date())
            available = block_end - cursor

            if cursor > block.start_on(cursor.date()) and available < remaining:
                cursor = self.time_blocks.next_block_start(cursor)
                continue

            take = min(remaining, available)
            intervals.append((cursor, cursor + take, block.id, block.name))
            remaining -= take
            cursor = self.time_blocks.normalize(cursor + take)

        days = list(dict.fromkeys(part_start.date() for part_start, _, _, _ in intervals))
        total_parts = len(intervals)

        parts = []
        for index, (part_start, part_end, block_id, block_name) in enumerate(intervals, start=1):
            day = days.index(part_start.date()) + 1
            parts.append(
                SessionPartPlan(
                    part=index,
                    total_parts=total_parts,
                    day=day,
                    total_days=len(days),
                    start=part_start,
                    end=part_end,
                    block_id=block_id,
                    block_name=block_name,
                    title=format_session_title(
                        course_name, session_number, index, total_parts, day, len(days)
                    ),
                    session_id=make_session_id(
                        course_name, session_number, index, part_start, location
                    ),
                )
            )

        logger.debug(
            f"Split {duration_hours:g}h {course_name} group {session_number} into "
            f"{total_parts} part(s) across {len(days)} day(s)"
        )
        return parts

    def validate_parts(self, parts: list[SessionPartPlan], duration_hours: float) -> dict:
        """Validate a split against its course duration.

        Returns:
            Dictionary with 'is_valid', 'errors', 'total_duration',
            'total_parts' and 'total_days'
        """
        errors = []

        if not parts:
            errors.append("No session parts provided")
            return {"is_valid": False, "errors": errors, "total_duration": 0.0,
                    "total_parts": 0, "total_days": 0}

        total = sum((part.duration for part in parts), timedelta(0))
        if total != timedelta(hours=duration_hours):
            errors.append(
                f"Parts total {total.total_seconds() / 3600:g} hours, "
                f"expected {duration_hours:g}"
            )

        for expected, part in enumerate(parts, start=1):
            if part.part != expected:
                errors.append(f"Part numbering is not sequential: expected {expected}, found {part.part}")
                break

        for previous, current in zip(parts, parts[1:]):
            if current.start < previous.end:
                errors.append(f"Part {current.part} starts before part {previous.part} ends")

        for part in parts:
            block = self.time_blocks.get_block_containing(part.start)
            if block is None or not block.contains(part.start, part.end):
                errors.append(f"Part {part.part} is not inside a single time block")

        return {
            "is_valid": not errors,
            "errors": errors,
            "total_duration": total.total_seconds() / 3600,
            "total_parts": len(parts),
            "total_days": parts[-1].day,
        }