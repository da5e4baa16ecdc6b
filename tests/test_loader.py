"""Tests for input loading."""

import json

import pandas as pd
import pytest

from training_scheduler.exceptions import ConfigurationError, InputFormatError
from training_scheduler.loader import (
    load_json,
    load_scheduling_input,
    load_trainees_table,
    validate_input,
)
from training_scheduler.models import SchedulingMode


class TestLoadSchedulingInput:
    """Tests for load_scheduling_input."""

    def test_loads_document(self, input_file):
        data = load_scheduling_input(input_file)
        assert len(data.courses) == 2
        assert len(data.trainees) == 20
        assert data.criteria.mode == SchedulingMode.GROUP_COMPLETE
        assert data.trainees[0].course_ids == ("C1", "C2")

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputFormatError):
            load_scheduling_input(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InputFormatError):
            load_json(path)

    def test_missing_section(self, tmp_path):
        path = tmp_path / "input.json"
        path.write_text(json.dumps({"criteria": {}, "courses": []}), encoding="utf-8")
        with pytest.raises(InputFormatError, match="trainees"):
            load_scheduling_input(path)

    def test_section_must_be_list(self, tmp_path):
        path = tmp_path / "input.json"
        path.write_text(json.dumps({"courses": {}, "trainees": []}), encoding="utf-8")
        with pytest.raises(InputFormatError):
            load_scheduling_input(path)

    def test_invalid_criteria(self, tmp_path, sample_input_document):
        sample_input_document["criteria"]["mode"] = "fastest"
        path = tmp_path / "input.json"
        path.write_text(json.dumps(sample_input_document), encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_scheduling_input(path)


class TestLoadTraineesTable:
    """Tests for reading trainees from tables."""

    def test_csv(self, tmp_path):
        path = tmp_path / "trainees.csv"
        pd.DataFrame(
            {
                "User_ID": ["U1", "U2", "U1"],
                "Location": ["Site A", "Site B", "Site A"],
                "Courses": ["C1; C2", "C1", "C3"],
            }
        ).to_csv(path, index=False)

        trainees = load_trainees_table(path)
        assert [t.id for t in trainees] == ["U1", "U2"]
        assert trainees[0].course_ids == ("C1", "C2", "C3")
        assert trainees[1].location == "Site B"

    def test_excel(self, tmp_path):
        path = tmp_path / "trainees.xlsx"
        pd.DataFrame(
            {"id": ["U1"], "training_location": ["Site A"], "course_ids": ["C1,C2"]}
        ).to_excel(path, index=False)

        trainees = load_trainees_table(path)
        assert trainees[0].course_ids == ("C1", "C2")

    def test_missing_column(self, tmp_path):
        path = tmp_path / "trainees.csv"
        pd.DataFrame({"id": ["U1"], "location": ["Site A"]}).to_csv(path, index=False)
        with pytest.raises(InputFormatError):
            load_trainees_table(path)

    def test_replaces_document_trainees(self, tmp_path, input_file):
        path = tmp_path / "trainees.csv"
        pd.DataFrame({"id": ["X1"], "location": ["Site Z"], "courses": ["C1"]}).to_csv(
            path, index=False
        )
        data = load_scheduling_input(input_file, trainees_path=path)
        assert [t.id for t in data.trainees] == ["X1"]


class TestValidateInput:
    """Tests for validate_input."""

    def test_valid(self, input_file):
        assert validate_input(load_scheduling_input(input_file)) == []

    def test_reports_problems(self, tmp_path, sample_input_document):
        sample_input_document["courses"].append({"id": "C1", "name": "Again", "duration_hours": 0})
        sample_input_document["trainees"].append({"id": "Z", "location": "", "courses": ["X9"]})
        sample_input_document["criteria"]["scheduling_days"] = []
        path = tmp_path / "input.json"
        path.write_text(json.dumps(sample_input_document), encoding="utf-8")

        problems = validate_input(load_scheduling_input(path))
        assert any("Duplicate" in p for p in problems)
        assert any("non-positive" in p for p in problems)
        assert any("X9" in p for p in problems)
        assert any("no location" in p for p in problems)
        assert any("scheduling days" in p for p in problems)
