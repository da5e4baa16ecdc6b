"""Constants for training session scheduling."""

# Weekday names indexed by date.weekday()
WEEKDAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

# Default criteria (values pre-filled by the criteria wizard)
DEFAULT_MAX_ATTENDEES = 10
DEFAULT_TOTAL_WEEKS = 4
DEFAULT_DAYS_PER_WEEK = 5
DEFAULT_DAILY_HOURS = 8.0
DEFAULT_CONTINGENCY = 1.0
DEFAULT_START_TIME_AM = "08:00"
DEFAULT_END_TIME_AM = "12:00"
DEFAULT_START_TIME_PM = "13:00"
DEFAULT_END_TIME_PM = "17:00"
DEFAULT_SCHEDULING_DAYS = WEEKDAY_NAMES[:5]
DEFAULT_FUNCTIONAL_AREA = "General"

# Courses without an explicit priority sort last
DEFAULT_COURSE_PRIORITY = 999

# Block identifiers
MORNING_BLOCK_ID = 1
AFTERNOON_BLOCK_ID = 2

# Capacity policy thresholds (classrooms per location)
CAPACITY_OK_MAX = 5
CAPACITY_WARNING_MAX = 10

# Course-complete: rounds per (course, location) before giving up
MAX_SCHEDULING_ROUNDS = 50

# Group-complete: attempts to move past booked intervals for one course
MAX_PLACEMENT_ATTEMPTS = 50

# Blocks shorter than this (hours) produce a configuration warning
SHORT_BLOCK_HOURS = 1.0

# Session parts shorter than this (hours) are flagged by timetable validation
SHORT_SESSION_HOURS = 0.5

CLASSROOM_KEY_TEMPLATE = "Classroom {}"


def classroom_key(classroom_number: int) -> str:
    """Get timetable key for a classroom (e.g., 2 → 'Classroom 2')."""
    return CLASSROOM_KEY_TEMPLATE.format(classroom_number)
