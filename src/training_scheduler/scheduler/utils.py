"""Utility functions shared by the scheduling strategies."""

import logging
import math
import re
from collections import defaultdict
from datetime import datetime

from ..constants import SHORT_SESSION_HOURS
from ..exceptions import ConfigurationError
from ..models import Course, ScheduledSessionPart, SessionGroup, Trainee

logger = logging.getLogger(__name__)


def sort_courses_by_priority(courses: list[Course]) -> list[Course]:
    """Sort courses by priority (lower number first).

    Equal priorities are ordered by course id; the sort is stable, so
    courses sharing both keep their input order.
    """
    return sorted(courses, key=lambda c: (c.priority, c.id))


def log_course_priority_order(courses: list[Course]) -> None:
    logger.info("Courses ordered by priority:")
    for course in courses:
        logger.info(f"  {course.name} (priority {course.priority}, {course.duration_hours:g}h)")


def group_trainees_by_location(trainees: list[Trainee]) -> dict[str, list[Trainee]]:
    """Group trainees by training location, keeping first-seen order.

    Trainees without a location are grouped under 'Unknown'.
    """
    grouped: dict[str, list[Trainee]] = defaultdict(list)
    for trainee in trainees:
        grouped[trainee.location or "Unknown"].append(trainee)
    return dict(grouped)


def trainees_for_course(trainees: list[Trainee], course_id: str) -> list[str]:
    """Get ids of trainees that require a course, in input order."""
    return [t.id for t in trainees if course_id in t.course_ids]


def calculate_sessions_needed(attendees: int, max_attendees: int) -> int:
    if attendees <= 0 or max_attendees < 1:
        return 0
    return math.ceil(attendees / max_attendees)


def create_session_groups(
    trainee_ids: list[str],
    max_attendees: int,
    course_id: str = "",
    location: str = "",
) -> list[SessionGroup]:
    """Partition trainees into contiguous groups of at most max_attendees.

    Args:
        trainee_ids: Trainees needing the course, in order
        max_attendees: Maximum group size
        course_id: Course the groups attend
        location: Training location

    Returns:
        Session groups numbered from 1

    Raises:
        ConfigurationError: If max_attendees is less than 1
    """
    if max_attendees < 1:
        raise ConfigurationError("Maximum attendees must be at least 1", field="max_attendees")

    groups = []
    for index in range(calculate_sessions_needed(len(trainee_ids), max_attendees)):
        start_index = index * max_attendees
        end_index = min(start_index + max_attendees, len(trainee_ids))
        groups.append(
            SessionGroup(
                course_id=course_id,
                location=location,
                group_number=index + 1,
                trainee_ids=tuple(trainee_ids[start_index:end_index]),
                start_index=start_index,
                end_index=end_index,
            )
        )
    return groups


def create_group_name(
    location: str,
    user_range: str = "",
    classroom_number: int = 1,
    total_groups: int = 1,
) -> str:
    """Build a display name for a session group.

    Examples:
        'Site A Group 11-20 Classroom 2' when a course has several groups,
        'Site A Classroom 2' for a single group outside classroom 1,
        'Site A' otherwise.
    """
    if total_groups > 1 and user_range:
        return f"{location} Group {user_range} Classroom {classroom_number}"
    if classroom_number > 1:
        return f"{location} Classroom {classroom_number}"
    return location


def format_session_title(
    course_name: str,
    session_number: int,
    part_number: int = 1,
    total_parts: int = 1,
    day_number: int = 1,
    total_days: int = 1,
) -> str:
    """Format a session title, e.g. 'Safety - Group 2 Part 3 (Day 2 of 2)'."""
    title = f"{course_name} - Group {session_number}"
    if total_parts > 1:
        title += f" Part {part_number}"
    if total_days > 1:
        title += f" (Day {day_number} of {total_days})"
    return title


def slugify(value: str) -> str:
    """Lowercase value and join words with hyphens."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-") or "x"


def make_session_id(
    course_name: str,
    session_number: int,
    part_number: int,
    start: datetime,
    location: str = "",
) -> str:
    """Build a session identifier like 'safety-site-a-2-part1-20250106T0800'."""
    pieces = [slugify(course_name)]
    if location:
        pieces.append(slugify(location))
    pieces.append(f"{session_number}-part{part_number}-{start:%Y%m%dT%H%M}")
    return "-".join(pieces)


def validate_timetable(parts: list[ScheduledSessionPart]) -> dict:
    """Check scheduled parts for classroom double-booking.

    Args:
        parts: Scheduled parts from any number of locations

    Returns:
        Dictionary with 'is_valid', 'conflicts' (pairs of overlapping
        session ids with their classroom), 'warnings', 'total_parts' and
        'total_classrooms'
    """
    by_classroom: dict[tuple[str, int], list[ScheduledSessionPart]] = defaultdict(list)
    for part in parts:
        by_classroom[(part.location, part.classroom_number)].append(part)

    conflicts = []
    for (location, classroom_number), classroom_parts in by_classroom.items():
        ordered = sorted(classroom_parts, key=lambda p: (p.start, p.end))
        latest = ordered[0]
        for part in ordered[1:]:
            if part.start < latest.end:
                conflicts.append(
                    {
                        "location": location,
                        "classroom_number": classroom_number,
                        "first": latest.session_id,
                        "second": part.session_id,
                    }
                )
            if part.end > latest.end:
                latest = part

    warnings = [
        f"Session {part.session_id} is very short ({part.duration_hours:g} hours)"
        for part in parts
        if part.duration_hours < SHORT_SESSION_HOURS
    ]

    return {
        "is_valid": not conflicts,
        "conflicts": conflicts,
        "warnings": warnings,
        "total_parts": len(parts),
        "total_classrooms": len(by_classroom),
    }
