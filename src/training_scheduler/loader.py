"""Loading scheduling input documents."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from .exceptions import ConfigurationError, InputFormatError
from .models import Course, SchedulingCriteria, Trainee
from .scheduler.time_blocks import TimeBlockModel

logger = logging.getLogger(__name__)

# Column aliases accepted in trainee tables
TRAINEE_ID_COLUMNS = ["id", "user_id", "trainee_id"]
TRAINEE_LOCATION_COLUMNS = ["location", "training_location"]
TRAINEE_COURSE_COLUMNS = ["courses", "course_ids", "course_id"]


@dataclass
class SchedulingInput:
    """Everything one scheduling run needs."""

    criteria: SchedulingCriteria
    courses: list[Course] = field(default_factory=list)
    trainees: list[Trainee] = field(default_factory=list)


def load_json(path: Path | str) -> dict:
    """Read a JSON document.

    Raises:
        InputFormatError: If the file is missing or not valid JSON
    """
    path = Path(path)
    if not path.exists():
        raise InputFormatError("File not found", path=str(path))

    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise InputFormatError(f"Invalid JSON ({e.msg} at line {e.lineno})", path=str(path)) from e


def load_scheduling_input(
    path: Path | str,
    trainees_path: Path | str | None = None,
) -> SchedulingInput:
    """Load criteria, courses and trainees from a JSON document.

    The document looks like:
        {"criteria": {...}, "courses": [...], "trainees": [...]}

    Args:
        path: Path to the JSON input document
        trainees_path: Optional CSV or Excel table replacing the document's
            trainees

    Returns:
        SchedulingInput

    Raises:
        InputFormatError: If the document is malformed
        ConfigurationError: If the criteria section holds invalid values
    """
    data = load_json(path)
    if not isinstance(data, dict):
        raise InputFormatError("Expected a JSON object at the top level", path=str(path))

    criteria_data = data.get("criteria", {})
    if not isinstance(criteria_data, dict):
        raise InputFormatError("'criteria' must be an object", path=str(path))

    courses = [Course.from_dict(item) for item in _records(data, "courses", path)]

    if trainees_path is not None:
        trainees = load_trainees_table(trainees_path)
    else:
        trainees = [Trainee.from_dict(item) for item in _records(data, "trainees", path)]

    logger.info(
        f"Loaded {len(courses)} courses and {len(trainees)} trainees from {Path(path).name}"
    )
    return SchedulingInput(
        criteria=SchedulingCriteria.from_dict(criteria_data),
        courses=courses,
        trainees=trainees,
    )


def _records(data: dict, key: str, path: Path | str) -> list[dict[str, Any]]:
    if key not in data:
        raise InputFormatError(f"Missing '{key}' section", path=str(path))
    records = data[key]
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise InputFormatError(f"'{key}' must be a list of objects", path=str(path))
    return records


def load_trainees_table(path: Path | str) -> list[Trainee]:
    """Read trainees from a CSV or Excel table.

    Expected columns are an id, a location and a course list; course ids in
    one cell are separated by ';' or ','. Rows sharing an id are merged.

    Raises:
        InputFormatError: If the file cannot be read or a column is missing
    """
    path = Path(path)
    if not path.exists():
        raise InputFormatError("File not found", path=str(path))

    try:
        if path.suffix.lower() in (".xlsx", ".xls"):
            df = pd.read_excel(path, dtype=str)
        else:
            df = pd.read_csv(path, dtype=str)
    except (ValueError, OSError) as e:
        raise InputFormatError(f"Could not read trainee table: {e}", path=str(path)) from e

    df.columns = [str(c).strip().lower() for c in df.columns]
    id_col = _find_column(df, TRAINEE_ID_COLUMNS, path)
    location_col = _find_column(df, TRAINEE_LOCATION_COLUMNS, path)
    course_col = _find_column(df, TRAINEE_COURSE_COLUMNS, path)
    df = df.fillna("")

    merged: dict[str, tuple[str, list[str]]] = {}
    for _, row in df.iterrows():
        trainee_id = row[id_col].strip()
        if not trainee_id:
            continue
        course_ids = [
            c.strip() for c in row[course_col].replace(",", ";").split(";") if c.strip()
        ]
        location, existing = merged.setdefault(trainee_id, (row[location_col].strip(), []))
        existing.extend(c for c in course_ids if c not in existing)

    return [
        Trainee(id=trainee_id, location=location, course_ids=tuple(course_ids))
        for trainee_id, (location, course_ids) in merged.items()
    ]


def _find_column(df: pd.DataFrame, candidates: list[str], path: Path) -> str:
    for name in candidates:
        if name in df.columns:
            return name
    raise InputFormatError(
        f"Missing column (expected one of: {', '.join(candidates)})", path=str(path)
    )


def validate_input(data: SchedulingInput) -> list[str]:
    """Check an input document without scheduling it.

    Returns:
        List of problems; empty when the input can be scheduled
    """
    problems = []
    if not data.courses:
        problems.append("No courses defined")
    if not data.trainees:
        problems.append("No trainees defined")

    ids = [c.id for c in data.courses]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        problems.append(f"Duplicate course ids: {', '.join(duplicates)}")

    for course in data.courses:
        if not course.id:
            problems.append(f"Course '{course.name}' has no id")
        if course.duration_hours <= 0:
            problems.append(f"Course '{course.id}' has non-positive duration")

    known = set(ids)
    unknown = sorted({c for t in data.trainees for c in t.course_ids if c not in known})
    if unknown:
        problems.append(f"Trainees reference unknown courses: {', '.join(unknown)}")

    without_location = [t.id for t in data.trainees if not t.location]
    if without_location:
        problems.append(f"{len(without_location)} trainee(s) have no location")

    criteria = data.criteria
    if not criteria.scheduling_days:
        problems.append("No scheduling days selected")
    if criteria.max_attendees < 1:
        problems.append("Maximum attendees must be at least 1")
    if criteria.contingency <= 0:
        problems.append("Contingency must be positive")

    try:
        TimeBlockModel(criteria)
    except ConfigurationError as e:
        problems.append(str(e))

    return problems
