"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from study_planner.cli import app

runner = CliRunner()


@pytest.fixture
def bad_plan_file(tmp_path):
    """Plan taking CS2040 before its prerequisite."""
    path = tmp_path / "bad_plan.json"
    path.write_text(
        json.dumps({"terms": [{"term_id": 0, "course_codes": ["CS2040"]}]}),
        encoding="utf-8",
    )
    return path


class TestPlanCommand:
    """Tests for the plan command."""

    def test_plan_to_json(self, tmp_path, degree_graph_file):
        output = tmp_path / "out.json"
        result = runner.invoke(
            app, ["plan", str(degree_graph_file), "-t", "CS3230", "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert "Planned Terms" in result.output
        assert "Plan is valid" in result.output

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["terms"] == [
            {"term_id": 0, "course_codes": ["CS1010", "MA1521", "CS1231"]},
            {"term_id": 2, "course_codes": ["CS2040"]},
            {"term_id": 4, "course_codes": ["CS3230"]},
        ]

    def test_plan_adds_suffix(self, tmp_path, degree_graph_file):
        output = tmp_path / "out"
        result = runner.invoke(
            app,
            ["plan", str(degree_graph_file), "-t", "CS2100", "-o", str(output), "-f", "excel"],
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "out.xlsx").exists()

    def test_plan_from_request_file(self, tmp_path, degree_graph_file):
        request = tmp_path / "request.json"
        request.write_text(
            json.dumps({"required": ["CS2100"], "exempted": ["CS1010"], "maxMcs": 20}),
            encoding="utf-8",
        )
        output = tmp_path / "out.json"
        result = runner.invoke(
            app,
            ["plan", str(degree_graph_file), "--request", str(request), "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["terms"] == [{"term_id": 0, "course_codes": ["CS2100"]}]
        assert data["exempted"] == ["CS1010"]

    def test_unknown_target(self, degree_graph_file):
        result = runner.invoke(app, ["plan", str(degree_graph_file), "-t", "ZZ9999"])

        assert result.exit_code == 1
        assert "ZZ9999" in result.output

    def test_no_targets(self, degree_graph_file):
        result = runner.invoke(app, ["plan", str(degree_graph_file)])

        assert result.exit_code == 1
        assert "No target courses specified" in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_plan(self, tmp_path, degree_graph_file):
        output = tmp_path / "plan.json"
        runner.invoke(app, ["plan", str(degree_graph_file), "-t", "CS3230", "-o", str(output)])

        result = runner.invoke(
            app, ["validate", str(output), str(degree_graph_file), "-t", "CS3230"]
        )

        assert result.exit_code == 0, result.output
        assert "Status: VALID" in result.output
        assert "Plan is valid" in result.output

    def test_invalid_plan(self, bad_plan_file, degree_graph_file):
        result = runner.invoke(app, ["validate", str(bad_plan_file), str(degree_graph_file)])

        assert result.exit_code == 1
        assert "Status: INVALID" in result.output
        assert "prerequisite CS1010 not completed" in result.output


class TestCheckCommand:
    """Tests for the check command."""

    def test_problems_reported(self, bad_plan_file, degree_graph_file):
        result = runner.invoke(app, ["check", str(bad_plan_file), str(degree_graph_file)])

        assert result.exit_code == 0, result.output
        assert "CS2040" in result.output
        assert "unsatisfied" in result.output
        assert "1 course(s) need attention" in result.output

    def test_exempted_prerequisite(self, bad_plan_file, degree_graph_file):
        result = runner.invoke(
            app, ["check", str(bad_plan_file), str(degree_graph_file), "-e", "CS1010"]
        )

        assert result.exit_code == 0, result.output
        assert "All courses satisfied" in result.output


class TestGraphInfoCommand:
    """Tests for the graph-info command."""

    def test_summary(self, degree_graph_file):
        result = runner.invoke(app, ["graph-info", str(degree_graph_file)])

        assert result.exit_code == 0, result.output
        assert "Overview" in result.output
        assert "Logic Nodes by Type" in result.output
        assert "OR" in result.output

    def test_missing_graph(self, tmp_path):
        result = runner.invoke(app, ["graph-info", str(tmp_path / "missing.json")])

        assert result.exit_code != 0
