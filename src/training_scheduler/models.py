"""Data models for the training session scheduler."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Self

from .constants import (
    DEFAULT_CONTINGENCY,
    DEFAULT_COURSE_PRIORITY,
    DEFAULT_DAILY_HOURS,
    DEFAULT_DAYS_PER_WEEK,
    DEFAULT_END_TIME_AM,
    DEFAULT_END_TIME_PM,
    DEFAULT_FUNCTIONAL_AREA,
    DEFAULT_MAX_ATTENDEES,
    DEFAULT_SCHEDULING_DAYS,
    DEFAULT_START_TIME_AM,
    DEFAULT_START_TIME_PM,
    DEFAULT_TOTAL_WEEKS,
    WEEKDAY_NAMES,
    classroom_key,
)
from .exceptions import ConfigurationError


class Weekday(Enum):
    """Days of the week, numbered like date.weekday()."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def from_name(cls, name: str) -> "Weekday":
        """Parse a weekday name such as 'Monday' or 'mon'."""
        key = str(name).strip().upper()
        for day in cls:
            if day.name == key or day.name[:3] == key:
                return day
        raise ConfigurationError(f"Unknown weekday '{name}'", field="scheduling_days")

    @property
    def label(self) -> str:
        return WEEKDAY_NAMES[self.value]


class SchedulingPreference(str, Enum):
    """Which daily time blocks may be used."""

    BOTH = "both"
    MORNING_ONLY = "morning_only"
    AFTERNOON_ONLY = "afternoon_only"

    @classmethod
    def parse(cls, value: str) -> "SchedulingPreference":
        """Parse a preference, accepting the 'am_only'/'pm_only' aliases."""
        aliases = {"am_only": cls.MORNING_ONLY, "pm_only": cls.AFTERNOON_ONLY}
        text = str(value).strip().lower()
        if text in aliases:
            return aliases[text]
        try:
            return cls(text)
        except ValueError:
            raise ConfigurationError(
                f"Unknown scheduling preference '{value}'",
                field="scheduling_preference",
            ) from None


class SchedulingMode(str, Enum):
    """Global ordering of scheduling work."""

    GROUP_COMPLETE = "group_complete"
    COURSE_COMPLETE = "course_complete"

    @classmethod
    def parse(cls, value: str) -> "SchedulingMode":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown scheduling mode '{value}'", field="mode"
            ) from None


class WarningSeverity(str, Enum):
    """Severity of a non-fatal scheduling condition."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class WarningKind(str, Enum):
    """Category of a non-fatal scheduling condition."""

    CAPACITY = "capacity"
    PLACEMENT = "placement"
    DATA = "data"


class CapacityStatus(str, Enum):
    """Classification of an estimated classroom count."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Course:
    """A training course.

    Attributes:
        id: Course identifier
        name: Display name
        duration_hours: Total duration (fractional hours allowed)
        priority: Ordering key, lower number = scheduled first
        category: Optional application/category tag
    """

    id: str
    name: str
    duration_hours: float
    priority: int = DEFAULT_COURSE_PRIORITY
    category: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a Course from a dictionary.

        Accepts both 'id'/'name'/'duration_hours' and the
        'course_id'/'course_name'/'duration_hrs' field names.
        """
        priority = data.get("priority")
        return cls(
            id=str(data.get("id", data.get("course_id", ""))),
            name=str(data.get("name", data.get("course_name", ""))),
            duration_hours=float(data.get("duration_hours", data.get("duration_hrs", 0))),
            priority=int(priority) if priority not in (None, "") else DEFAULT_COURSE_PRIORITY,
            category=data.get("category", data.get("application")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "duration_hours": self.duration_hours,
            "priority": self.priority,
            "category": self.category,
        }


@dataclass(frozen=True)
class Trainee:
    """A person who must attend one or more courses at a training location."""

    id: str
    location: str
    course_ids: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a Trainee from a dictionary."""
        courses = data.get("course_ids", data.get("courses", []))
        if isinstance(courses, str):
            courses = [courses]
        return cls(
            id=str(data.get("id", data.get("user_id", ""))),
            location=str(data.get("location", data.get("training_location", ""))).strip(),
            course_ids=tuple(str(course_id) for course_id in courses),
        )


@dataclass(frozen=True)
class SchedulingCriteria:
    """Configuration for one scheduling run.

    total_weeks, days_per_week and daily_hours feed the classroom estimate
    only; packing uses the time blocks and scheduling_days.
    """

    max_attendees: int = DEFAULT_MAX_ATTENDEES
    scheduling_preference: SchedulingPreference = SchedulingPreference.BOTH
    start_time_am: str | None = DEFAULT_START_TIME_AM
    end_time_am: str | None = DEFAULT_END_TIME_AM
    start_time_pm: str | None = DEFAULT_START_TIME_PM
    end_time_pm: str | None = DEFAULT_END_TIME_PM
    contingency: float = DEFAULT_CONTINGENCY
    total_weeks: int = DEFAULT_TOTAL_WEEKS
    days_per_week: int = DEFAULT_DAYS_PER_WEEK
    daily_hours: float = DEFAULT_DAILY_HOURS
    start_date: date = field(default_factory=date.today)
    scheduling_days: tuple[Weekday, ...] = tuple(
        Weekday.from_name(name) for name in DEFAULT_SCHEDULING_DAYS
    )
    mode: SchedulingMode = SchedulingMode.GROUP_COMPLETE
    functional_area: str = DEFAULT_FUNCTIONAL_AREA
    available_classrooms: dict[str, int] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create criteria from a dictionary, filling wizard defaults."""
        kwargs: dict[str, Any] = {}

        for name in ("max_attendees", "total_weeks", "days_per_week"):
            if data.get(name) is not None:
                kwargs[name] = int(data[name])
        for name in ("contingency", "daily_hours"):
            if data.get(name) is not None:
                kwargs[name] = float(data[name])
        for name in ("start_time_am", "end_time_am", "start_time_pm", "end_time_pm"):
            if name in data:
                kwargs[name] = data[name] or None

        if data.get("scheduling_preference"):
            kwargs["scheduling_preference"] = SchedulingPreference.parse(
                data["scheduling_preference"]
            )
        mode = data.get("mode", data.get("scheduling_mode"))
        if mode:
            kwargs["mode"] = SchedulingMode.parse(mode)

        start_date = data.get("start_date")
        if start_date:
            kwargs["start_date"] = _parse_date(start_date)

        if "scheduling_days" in data:
            kwargs["scheduling_days"] = tuple(
                Weekday.from_name(name) for name in data["scheduling_days"] or []
            )

        functional_area = data.get("functional_area", data.get("functionalArea"))
        if functional_area:
            kwargs["functional_area"] = str(functional_area)

        if data.get("available_classrooms"):
            kwargs["available_classrooms"] = {
                str(location): int(count)
                for location, count in data["available_classrooms"].items()
            }

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_attendees": self.max_attendees,
            "scheduling_preference": self.scheduling_preference.value,
            "start_time_am": self.start_time_am,
            "end_time_am": self.end_time_am,
            "start_time_pm": self.start_time_pm,
            "end_time_pm": self.end_time_pm,
            "contingency": self.contingency,
            "total_weeks": self.total_weeks,
            "days_per_week": self.days_per_week,
            "daily_hours": self.daily_hours,
            "start_date": self.start_date.isoformat(),
            "scheduling_days": [day.label for day in self.scheduling_days],
            "mode": self.mode.value,
            "functional_area": self.functional_area,
            "available_classrooms": self.available_classrooms,
        }


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ConfigurationError(
            f"Expected YYYY-MM-DD, got '{value}'", field="start_date"
        ) from None


@dataclass(frozen=True)
class SessionGroup:
    """A bounded slice of the trainees at one location needing one course.

    Attributes:
        course_id: Course the group attends
        location: Training location
        group_number: 1-based, stable across the run
        trainee_ids: Trainees in the group
        start_index: First index (inclusive) into the course's trainee list
        end_index: Last index (exclusive)
    """

    course_id: str
    location: str
    group_number: int
    trainee_ids: tuple[str, ...]
    start_index: int
    end_index: int

    @property
    def user_count(self) -> int:
        return len(self.trainee_ids)

    @property
    def user_range(self) -> str:
        """1-based inclusive range label, e.g. '11-20'."""
        return f"{self.start_index + 1}-{self.end_index}"


@dataclass(frozen=True)
class ClassroomReservation:
    """A booked interval in one classroom at one location."""

    location: str
    classroom_number: int
    start: datetime
    end: datetime
    session_id: str

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Check overlap with [start, end) using half-open semantics."""
        return self.start < end and start < self.end

    @property
    def duration_hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600


@dataclass(frozen=True)
class ScheduledSessionPart:
    """One contiguous scheduled block of a session group's course."""

    location: str
    classroom_number: int
    course: Course
    session_number: int
    part_number: int
    total_parts: int
    day_number: int
    total_days: int
    start: datetime
    end: datetime
    duration_hours: float
    title: str
    block_id: int
    functional_area: str = DEFAULT_FUNCTIONAL_AREA
    group_name: str = ""
    user_count: int = 0
    user_range: str = ""
    max_attendees: int = DEFAULT_MAX_ATTENDEES
    session_id: str = ""

    @property
    def classroom_key(self) -> str:
        return classroom_key(self.classroom_number)

    @property
    def is_multi_day(self) -> bool:
        return self.total_days > 1

    @property
    def day_label(self) -> str:
        return f"Day {self.day_number} of {self.total_days}"

    def to_row(self) -> dict[str, Any]:
        """Flat row for persistence collaborators."""
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "course": self.course.name,
            "session_number": self.session_number,
            "part_number": self.part_number,
            "location": self.location,
            "classroom_number": self.classroom_number,
            "group_name": self.group_name,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "title": self.title,
            "functional_area": self.functional_area,
            "location": self.location,
            "classroom_number": self.classroom_number,
            "course": self.course.to_dict(),
            "session_number": self.session_number,
            "part_number": self.part_number,
            "total_parts": self.total_parts,
            "day_number": self.day_number,
            "total_days": self.total_days,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration_hours": self.duration_hours,
            "block_id": self.block_id,
            "group_name": self.group_name,
            "user_count": self.user_count,
            "user_range": self.user_range,
            "max_attendees": self.max_attendees,
        }


@dataclass
class ScheduleWarning:
    """A non-fatal condition collected during a scheduling run."""

    location: str
    message: str
    severity: WarningSeverity = WarningSeverity.WARNING
    kind: WarningKind = WarningKind.PLACEMENT
    course_id: str | None = None
    group_number: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location,
            "message": self.message,
            "severity": self.severity.value,
            "kind": self.kind.value,
            "course_id": self.course_id,
            "group_number": self.group_number,
        }


@dataclass
class ClassroomRequirement:
    """Estimated classroom need for one location."""

    number_of_classrooms: int
    total_training_hours: float
    raw_training_hours: float = 0.0
    contingency_factor: float = 1.0
    classroom_hours_per_week: float = 0.0
    classroom_hours_available: float = 0.0
    classroom_user_hours_capacity: float = 0.0
    is_valid: bool = True
    location: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location,
            "number_of_classrooms": self.number_of_classrooms,
            "total_training_hours": self.total_training_hours,
            "raw_training_hours": self.raw_training_hours,
            "contingency_factor": self.contingency_factor,
            "classroom_hours_per_week": self.classroom_hours_per_week,
            "classroom_hours_available": self.classroom_hours_available,
            "classroom_user_hours_capacity": self.classroom_user_hours_capacity,
            "is_valid": self.is_valid,
        }


@dataclass
class CapacityValidation:
    """Severity classification of a classroom requirement."""

    status: CapacityStatus
    message: str
    required_classrooms: int
    available_classrooms: int | None = None

    @property
    def severity(self) -> WarningSeverity | None:
        """Warning severity to report, or None when no warning is needed."""
        if self.status == CapacityStatus.WARNING:
            return WarningSeverity.WARNING
        if self.status == CapacityStatus.ERROR:
            return WarningSeverity.ERROR
        return None


@dataclass
class ScheduleStatistics:
    """Statistics about a generated timetable."""

    total_sessions: int = 0
    total_parts: int = 0
    total_hours: float = 0.0
    by_location: dict[str, int] = field(default_factory=dict)
    by_course: dict[str, int] = field(default_factory=dict)
    classrooms_used: dict[str, int] = field(default_factory=dict)
    utilization: dict[str, dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_sessions": self.total_sessions,
            "total_parts": self.total_parts,
            "total_hours": self.total_hours,
            "by_location": self.by_location,
            "by_course": self.by_course,
            "classrooms_used": self.classrooms_used,
            "utilization": self.utilization,
        }


# functional area -> location -> "Classroom n" -> parts
Timetable = dict[str, dict[str, dict[str, list[ScheduledSessionPart]]]]


@dataclass
class ScheduleResult:
    """Result of a scheduling run."""

    timetable: Timetable = field(default_factory=dict)
    warnings: list[ScheduleWarning] = field(default_factory=list)
    requirements: dict[str, ClassroomRequirement] = field(default_factory=dict)
    statistics: ScheduleStatistics = field(default_factory=ScheduleStatistics)
    mode: SchedulingMode = SchedulingMode.GROUP_COMPLETE
    generation_date: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def parts(self) -> list[ScheduledSessionPart]:
        """All scheduled parts, ordered by start then location and classroom."""
        parts = [
            part
            for locations in self.timetable.values()
            for classrooms in locations.values()
            for classroom_parts in classrooms.values()
            for part in classroom_parts
        ]
        return sorted(parts, key=lambda p: (p.start, p.location, p.classroom_number))

    @property
    def total_parts(self) -> int:
        return len(self.parts)

    @property
    def total_sessions(self) -> int:
        """Number of distinct (course, location, session group) sessions."""
        return len(
            {(p.course.id, p.location, p.session_number) for p in self.parts}
        )

    @property
    def has_errors(self) -> bool:
        return any(w.severity == WarningSeverity.ERROR for w in self.warnings)

    def warnings_for(self, location: str) -> list[ScheduleWarning]:
        return [w for w in self.warnings if w.location == location]

    def to_rows(self) -> list[dict[str, Any]]:
        return [part.to_row() for part in self.parts]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "generation_date": self.generation_date,
            "mode": self.mode.value,
            "timetable": {
                area: {
                    location: {
                        key: [part.to_dict() for part in parts]
                        for key, parts in classrooms.items()
                    }
                    for location, classrooms in locations.items()
                }
                for area, locations in self.timetable.items()
            },
            "warnings": [w.to_dict() for w in self.warnings],
            "requirements": {
                location: req.to_dict() for location, req in self.requirements.items()
            },
            "statistics": self.statistics.to_dict(),
        }
