"""Tests for schedule exporters."""

import json

import pandas as pd
import pytest

from training_scheduler.exporters import (
    CSVExporter,
    ExcelExporter,
    JSONExporter,
    WARNING_COLUMNS,
    get_exporter,
)
from training_scheduler.models import Course, Trainee
from training_scheduler.scheduler.engine import SchedulingEngine


@pytest.fixture
def result(criteria, make_trainees):
    courses = [
        Course(id="C1", name="Safety Basics", duration_hours=2, priority=1),
        Course(id="C2", name="Equipment Operation", duration_hours=5, priority=2),
    ]
    trainees = make_trainees(15, courses=("C1", "C2")) + [
        Trainee(id="Z1", location="Site B", course_ids=("X9",))
    ]
    return SchedulingEngine().schedule(trainees, courses, criteria)


class TestJSONExporter:
    """Tests for JSONExporter."""

    def test_export(self, result, tmp_path):
        output = tmp_path / "out" / "schedule.json"
        JSONExporter().export(result, output)

        data = json.loads(output.read_text(encoding="utf-8"))
        classrooms = data["timetable"]["General"]["Site A"]
        assert len(classrooms["Classroom 1"]) == 6
        assert data["statistics"]["total_sessions"] == 4
        assert data["warnings"][0]["kind"] == "data"


class TestCSVExporter:
    """Tests for CSVExporter."""

    def test_export(self, result, tmp_path):
        CSVExporter().export(result, tmp_path)

        sessions = pd.read_csv(tmp_path / "sessions.csv")
        assert len(sessions) == 6
        assert sessions["classroom"].unique().tolist() == ["Classroom 1"]
        assert (tmp_path / "warnings.csv").exists()
        requirements = pd.read_csv(tmp_path / "requirements.csv")
        assert requirements["location"].tolist() == ["Site A"]

    def test_clean_run_writes_header_only_warnings(self, criteria, make_trainees, tmp_path):
        course = Course(id="C1", name="Safety Basics", duration_hours=2, priority=1)
        result = SchedulingEngine().schedule(make_trainees(5), [course], criteria)
        assert result.warnings == []

        CSVExporter().export(result, tmp_path)

        warnings = pd.read_csv(tmp_path / "warnings.csv")
        assert warnings.empty
        assert list(warnings.columns) == WARNING_COLUMNS


class TestExcelExporter:
    """Tests for ExcelExporter."""

    def test_export(self, result, tmp_path):
        output = tmp_path / "schedule.xlsx"
        ExcelExporter().export(result, output)

        sheets = pd.read_excel(output, sheet_name=None)
        assert list(sheets) == ["Sessions", "Warnings", "Requirements", "Summary"]
        assert len(sheets["Sessions"]) == 6
        summary = dict(zip(sheets["Summary"]["Metric"], sheets["Summary"]["Value"]))
        assert summary["Mode"] == "group_complete"


class TestGetExporter:
    """Tests for get_exporter."""

    @pytest.mark.parametrize(
        ("format_type", "exporter_class"),
        [("json", JSONExporter), ("csv", CSVExporter), ("excel", ExcelExporter)],
    )
    def test_known_formats(self, format_type, exporter_class):
        assert isinstance(get_exporter(format_type), exporter_class)

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            get_exporter("pdf")
