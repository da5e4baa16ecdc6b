"""Daily time blocks and valid scheduling days."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..constants import AFTERNOON_BLOCK_ID, MORNING_BLOCK_ID, SHORT_BLOCK_HOURS
from ..exceptions import ConfigurationError
from ..models import SchedulingCriteria, SchedulingPreference, Weekday

logger = logging.getLogger(__name__)


def parse_time(value: str | None, field: str = "time") -> time:
    """Parse a 24-hour 'HH:MM' string.

    Args:
        value: Time string such as '08:00' or '13:30'
        field: Criteria field name for error messages

    Returns:
        Parsed time

    Raises:
        ConfigurationError: If the value is missing or malformed
    """
    if not value or not isinstance(value, str):
        raise ConfigurationError(f"Missing time value: {value!r}", field=field)

    pieces = value.strip().split(":")
    try:
        hours, minutes = int(pieces[0]), int(pieces[1])
    except (ValueError, IndexError):
        raise ConfigurationError(
            f"Invalid time format: {value!r}. Expected HH:MM", field=field
        ) from None

    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ConfigurationError(
            f"Invalid time format: {value!r}. Expected HH:MM", field=field
        )
    return time(hours, minutes)


def parse_time_to_hours(value: str) -> float:
    """Convert 'HH:MM' to decimal hours (e.g., '13:30' → 13.5)."""
    parsed = parse_time(value)
    return parsed.hour + parsed.minute / 60


@dataclass(frozen=True)
class TimeBlock:
    """A recurring daily window in which sessions may run."""

    id: int
    name: str
    start: time
    end: time

    @property
    def start_hours(self) -> float:
        return self.start.hour + self.start.minute / 60

    @property
    def end_hours(self) -> float:
        return self.end.hour + self.end.minute / 60

    @property
    def duration(self) -> timedelta:
        return datetime.combine(date.min, self.end) - datetime.combine(date.min, self.start)

    @property
    def duration_hours(self) -> float:
        return self.duration.total_seconds() / 3600

    def start_on(self, day: date) -> datetime:
        return datetime.combine(day, self.start)

    def end_on(self, day: date) -> datetime:
        return datetime.combine(day, self.end)

    def contains(self, start: datetime, end: datetime) -> bool:
        """Check that [start, end) lies inside this block on start's day."""
        day = start.date()
        return self.start_on(day) <= start and end <= self.end_on(day)

    def __str__(self) -> str:
        return f"{self.name} {self.start:%H:%M}-{self.end:%H:%M}"


class TimeBlockModel:
    """Block arithmetic shared by both scheduling strategies.

    Block 1 is built from the morning criteria fields and block 2 from the
    afternoon fields; the scheduling preference decides which of them exist.
    Every returned instant is on a valid weekday inside a block, except
    set_date_to_block_start which does not check the weekday.
    """

    def __init__(self, criteria: SchedulingCriteria) -> None:
        """Initialize the model.

        Args:
            criteria: Scheduling criteria for the run

        Raises:
            ConfigurationError: If a required block time is missing or invalid
        """
        self.criteria = criteria
        self.preference = criteria.scheduling_preference
        self.valid_weekdays = frozenset(criteria.scheduling_days)
        self.time_blocks = self._parse_time_blocks()
        self.max_daily_hours = sum(block.duration_hours for block in self.time_blocks)

        logger.debug(
            f"Time blocks: {', '.join(str(b) for b in self.time_blocks)}; "
            f"days: {', '.join(d.label for d in sorted(self.valid_weekdays, key=lambda d: d.value))}"
        )

    def _parse_time_blocks(self) -> list[TimeBlock]:
        """Build the ordered block list for the scheduling preference."""
        blocks = []
        preference = self.preference

        if preference in (SchedulingPreference.BOTH, SchedulingPreference.MORNING_ONLY):
            blocks.append(
                self._make_block(
                    MORNING_BLOCK_ID,
                    "Morning",
                    self.criteria.start_time_am,
                    self.criteria.end_time_am,
                    ("start_time_am", "end_time_am"),
                )
            )

        if preference in (SchedulingPreference.BOTH, SchedulingPreference.AFTERNOON_ONLY):
            blocks.append(
                self._make_block(
                    AFTERNOON_BLOCK_ID,
                    "Afternoon",
                    self.criteria.start_time_pm,
                    self.criteria.end_time_pm,
                    ("start_time_pm", "end_time_pm"),
                )
            )

        blocks.sort(key=lambda b: b.start)
        for current, following in zip(blocks, blocks[1:]):
            if current.end > following.start:
                raise ConfigurationError(
                    f"{current.name} block ends at {current.end:%H:%M} but "
                    f"{following.name} block starts at {following.start:%H:%M}",
                    field="time_blocks",
                )
        return blocks

    def _make_block(
        self,
        block_id: int,
        name: str,
        start_value: str | None,
        end_value: str | None,
        fields: tuple[str, str],
    ) -> TimeBlock:
        start = parse_time(start_value, field=fields[0])
        end = parse_time(end_value, field=fields[1])
        if end <= start:
            raise ConfigurationError(
                f"End time ({end_value}) must be after start time ({start_value})",
                field=fields[1],
            )
        return TimeBlock(id=block_id, name=name, start=start, end=end)

    def get_time_blocks(self) -> list[TimeBlock]:
        """Get the ordered list of daily blocks."""
        return list(self.time_blocks)

    def get_block(self, block_id: int) -> TimeBlock:
        for block in self.time_blocks:
            if block.id == block_id:
                return block
        raise ConfigurationError(f"Time block {block_id} not found", field="time_blocks")

    def is_valid_day(self, value: date) -> bool:
        return Weekday(value.weekday()) in self.valid_weekdays

    def get_next_valid_date(
        self,
        value: date,
        valid_weekdays: Iterable[Weekday] | None = None,
    ) -> date:
        """Get the earliest date on or after value on a valid weekday.

        Datetimes keep their clock time.

        Args:
            value: Starting date or datetime
            valid_weekdays: Override for the criteria weekdays

        Returns:
            value itself when already valid, otherwise a later date

        Raises:
            ConfigurationError: If there are no valid weekdays
        """
        weekdays = (
            frozenset(valid_weekdays) if valid_weekdays is not None else self.valid_weekdays
        )
        if not weekdays:
            raise ConfigurationError(
                "At least one scheduling day must be selected", field="scheduling_days"
            )

        current = value
        while Weekday(current.weekday()) not in weekdays:
            current = current + timedelta(days=1)
        return current

    def set_date_to_block_start(self, value: date, block_id: int = MORNING_BLOCK_ID) -> datetime:
        """Get the start of a block on value's calendar day."""
        block = self.get_block(block_id)
        day = value.date() if isinstance(value, datetime) else value
        return block.start_on(day)

    def first_slot(self, value: date) -> datetime:
        """Start of the first block on the first valid date on or after value."""
        day = value.date() if isinstance(value, datetime) else value
        return self.time_blocks[0].start_on(self.get_next_valid_date(day))

    def get_block_containing(self, moment: datetime) -> TimeBlock | None:
        """Get the block containing moment, if moment is on a valid day."""
        if not self.is_valid_day(moment):
            return None
        day = moment.date()
        for block in self.time_blocks:
            if block.start_on(day) <= moment < block.end_on(day):
                return block
        return None

    def block_end(self, moment: datetime) -> datetime | None:
        """End of the block containing moment, or None outside blocks."""
        block = self.get_block_containing(moment)
        if block is None:
            return None
        return block.end_on(moment.date())

    def normalize(self, moment: datetime) -> datetime:
        """Get the earliest instant at or after moment where work may run.

        Returns moment itself when it is inside a block on a valid day,
        otherwise the next block start.
        """
        current = moment
        while True:
            day = self.get_next_valid_date(current.date())
            if day != current.date():
                current = datetime.combine(day, time.min)
            for block in self.time_blocks:
                if current < block.start_on(day):
                    return block.start_on(day)
                if current < block.end_on(day):
                    return current
            current = datetime.combine(day + timedelta(days=1), time.min)

    def next_block_start(self, moment: datetime) -> datetime:
        """Get the first block start strictly after moment."""
        day = moment.date()
        if self.is_valid_day(day):
            for block in self.time_blocks:
                if block.start_on(day) > moment:
                    return block.start_on(day)
        return self.first_slot(day + timedelta(days=1))

    def next_day_start(self, moment: datetime) -> datetime:
        """First block of the next valid date after moment's day."""
        return self.first_slot(moment.date() + timedelta(days=1))

    def find_single_block_fit(self, duration_hours: float) -> TimeBlock | None:
        """Get the first block long enough for duration_hours."""
        for block in self.time_blocks:
            if block.duration_hours >= duration_hours:
                return block
        return None

    def can_fit_in_single_day(self, duration_hours: float) -> bool:
        return duration_hours <= self.max_daily_hours

    def calculate_days_needed(self, duration_hours: float) -> int:
        """Minimum number of scheduling days for duration_hours."""
        if duration_hours <= 0:
            return 0
        return math.ceil(duration_hours / self.max_daily_hours)

    def validate(self) -> dict:
        """Validate the block configuration.

        Returns:
            Dictionary with 'is_valid', 'errors' and 'warnings'
        """
        errors = []
        warnings = []

        if not self.time_blocks:
            errors.append("No time blocks configured")
        if not self.valid_weekdays:
            errors.append("No scheduling days configured")

        for block in self.time_blocks:
            if block.duration_hours < SHORT_BLOCK_HOURS:
                warnings.append(
                    f"Time block {block.name} is very short ({block.duration_hours:g} hours)"
                )

        return {"is_valid": not errors, "errors": errors, "warnings": warnings}
