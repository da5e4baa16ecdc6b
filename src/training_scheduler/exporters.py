"""Export functionality for schedule results."""

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd

from .models import ScheduleResult

SESSION_COLUMNS = [
    "session_id",
    "functional_area",
    "location",
    "classroom",
    "course_id",
    "course",
    "title",
    "session_number",
    "part_number",
    "total_parts",
    "day",
    "start",
    "end",
    "duration_hours",
    "group_name",
    "user_count",
    "user_range",
]

WARNING_COLUMNS = ["location", "message", "severity", "kind", "course_id", "group_number"]

REQUIREMENT_COLUMNS = [
    "location",
    "number_of_classrooms",
    "total_training_hours",
    "raw_training_hours",
    "contingency_factor",
    "classroom_hours_per_week",
    "classroom_hours_available",
    "classroom_user_hours_capacity",
    "is_valid",
]


class BaseExporter(ABC):
    """Base class for exporters."""

    @abstractmethod
    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to file.

        Args:
            result: ScheduleResult to export
            output_path: Path to output file or directory
        """
        pass


class JSONExporter(BaseExporter):
    """Export to JSON format."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        """Initialize exporter.

        Args:
            indent: JSON indentation level
            ensure_ascii: If False, allows non-ASCII characters
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(
                result.to_dict(),
                f,
                indent=self.indent,
                ensure_ascii=self.ensure_ascii,
            )


def _session_rows(result: ScheduleResult) -> list[dict]:
    rows = []
    for part in result.parts:
        rows.append(
            {
                "session_id": part.session_id,
                "functional_area": part.functional_area,
                "location": part.location,
                "classroom": part.classroom_key,
                "course_id": part.course.id,
                "course": part.course.name,
                "title": part.title,
                "session_number": part.session_number,
                "part_number": part.part_number,
                "total_parts": part.total_parts,
                "day": part.day_label,
                "start": part.start.isoformat(),
                "end": part.end.isoformat(),
                "duration_hours": part.duration_hours,
                "group_name": part.group_name,
                "user_count": part.user_count,
                "user_range": part.user_range,
            }
        )
    return rows


def _requirement_rows(result: ScheduleResult) -> list[dict]:
    return [req.to_dict() for req in result.requirements.values()]


def _warning_rows(result: ScheduleResult) -> list[dict]:
    return [warning.to_dict() for warning in result.warnings]


class CSVExporter(BaseExporter):
    """Export to CSV format (multiple files)."""

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to CSV files.

        Creates three files:
        - sessions.csv: All scheduled session parts
        - warnings.csv: Warnings collected during scheduling
        - requirements.csv: Classroom requirements per location

        Args:
            result: ScheduleResult to export
            output_path: Path to output directory
        """
        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        self._write_csv(output_dir / "sessions.csv", _session_rows(result), SESSION_COLUMNS)
        self._write_csv(output_dir / "warnings.csv", _warning_rows(result), WARNING_COLUMNS)
        self._write_csv(
            output_dir / "requirements.csv", _requirement_rows(result), REQUIREMENT_COLUMNS
        )

    def _write_csv(self, output_path: Path, rows: list[dict], columns: list[str]) -> None:
        """Write rows to CSV file; an empty row list still gets the header."""
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=columns)
            writer.writeheader()
            writer.writerows(rows)


class ExcelExporter(BaseExporter):
    """Export to Excel format (single workbook with multiple sheets)."""

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to Excel file.

        Creates workbook with sheets:
        - Sessions: All scheduled session parts
        - Warnings: Warning list
        - Requirements: Classroom requirements per location
        - Summary: Overall summary

        Args:
            result: ScheduleResult to export
            output_path: Path to output Excel file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            self._write_sheet(writer, "Sessions", _session_rows(result), SESSION_COLUMNS)
            self._write_sheet(writer, "Warnings", _warning_rows(result), WARNING_COLUMNS)
            self._write_sheet(
                writer, "Requirements", _requirement_rows(result), REQUIREMENT_COLUMNS
            )
            self._export_summary_sheet(result, writer)

    def _write_sheet(
        self,
        writer: pd.ExcelWriter,
        sheet_name: str,
        rows: list[dict],
        columns: list[str],
    ) -> None:
        df = pd.DataFrame(rows, columns=columns)
        df.to_excel(writer, sheet_name=sheet_name, index=False)

    def _export_summary_sheet(
        self, result: ScheduleResult, writer: pd.ExcelWriter
    ) -> None:
        """Export summary to Excel sheet."""
        stats = result.statistics
        rows = [
            {"Metric": "Generation Date", "Value": result.generation_date},
            {"Metric": "Mode", "Value": result.mode.value},
            {"Metric": "Total Sessions", "Value": stats.total_sessions},
            {"Metric": "Total Parts", "Value": stats.total_parts},
            {"Metric": "Total Hours", "Value": stats.total_hours},
            {"Metric": "Locations", "Value": ", ".join(sorted(stats.by_location))},
            {"Metric": "Warnings", "Value": len(result.warnings)},
        ]

        df = pd.DataFrame(rows)
        df.to_excel(writer, sheet_name="Summary", index=False)


def get_exporter(format_type: str) -> BaseExporter:
    """Get appropriate exporter for format type.

    Args:
        format_type: Export format ('json', 'csv', 'excel')

    Returns:
        Exporter instance

    Raises:
        ValueError: If format type is not supported
    """
    exporters = {
        "json": JSONExporter,
        "csv": CSVExporter,
        "excel": ExcelExporter,
    }

    if format_type not in exporters:
        raise ValueError(
            f"Unsupported format: {format_type}. Supported: {', '.join(exporters.keys())}"
        )

    return exporters[format_type]()
