"""Tests for graph loading."""

import json

import pandas as pd
import pytest

from study_planner.exceptions import GraphCycleError, GraphLoadError
from study_planner.loader import load_graph
from study_planner.models import LogicType, TermType


class TestLoadGraphJson:
    """Tests for JSON graph files."""

    def test_load(self, degree_graph_file):
        graph = load_graph(degree_graph_file)
        assert len(list(graph.courses())) == 8
        assert graph.is_logic("L_MATH")
        assert graph.prerequisites("CS3230") == ["CS2040", "L_MATH"]
        assert graph.dependents("CS1010") == ["CS2030", "CS2040", "CS2100"]

    def test_relationships_key(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text(
            json.dumps(
                {
                    "nodes": {
                        "A": {"type": "course", "code": "A"},
                        "B": {"type": "course", "code": "B"},
                    },
                    "relationships": [{"from": "B", "to": "A"}],
                }
            ),
            encoding="utf-8",
        )
        graph = load_graph(path)
        assert graph.prerequisites("B") == ["A"]

    def test_cycle_rejected(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text(
            json.dumps(
                {
                    "nodes": {
                        "A": {"type": "course", "code": "A"},
                        "B": {"type": "course", "code": "B"},
                    },
                    "edges": [{"from": "A", "to": "B"}, {"from": "B", "to": "A"}],
                }
            ),
            encoding="utf-8",
        )
        with pytest.raises(GraphCycleError):
            load_graph(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(GraphLoadError, match="file not found"):
            load_graph(tmp_path / "missing.json")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "graph.yaml"
        path.write_text("nodes: {}", encoding="utf-8")
        with pytest.raises(GraphLoadError, match="unsupported graph format"):
            load_graph(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(GraphLoadError, match="invalid JSON"):
            load_graph(path)

    def test_top_level_list(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(GraphLoadError, match="top level must be an object"):
            load_graph(path)


class TestLoadGraphTables:
    """Tests for CSV directories and Excel workbooks."""

    @pytest.fixture
    def tables(self):
        courses = pd.DataFrame(
            [
                {
                    "code": "CS1010",
                    "title": "Programming Methodology",
                    "credits": "4",
                    "terms_offered": "term1;term2",
                    "preclusions": "",
                },
                {
                    "code": "CS1101S",
                    "title": "Programming Methodology",
                    "credits": "4",
                    "terms_offered": "term1",
                    "preclusions": "CS1010",
                },
                {
                    "code": "CS2040",
                    "title": "Data Structures and Algorithms",
                    "credits": "4",
                    "terms_offered": "term1;term2;short_a",
                    "preclusions": "",
                },
            ]
        )
        logic = pd.DataFrame([{"id": "L_PROG", "type": "OR", "n": ""}])
        edges = pd.DataFrame(
            [
                {"from": "CS2040", "to": "L_PROG"},
                {"from": "L_PROG", "to": "CS1010"},
                {"from": "L_PROG", "to": "CS1101S"},
            ]
        )
        return courses, logic, edges

    def _check(self, graph):
        assert [c.code for c in graph.courses()] == ["CS1010", "CS1101S", "CS2040"]
        assert graph.get("L_PROG").kind == LogicType.OR
        assert graph.prerequisites("CS2040") == ["L_PROG"]

        cs2040 = graph.course("CS2040")
        assert cs2040.credits == 4
        assert cs2040.terms_offered == [TermType.TERM1, TermType.TERM2, TermType.SHORT_A]
        assert graph.course("CS1101S").preclusions == ["CS1010"]
        assert graph.course("CS1010").preclusions == []

    def test_csv_directory(self, tmp_path, tables):
        courses, logic, edges = tables
        courses.to_csv(tmp_path / "courses.csv", index=False)
        logic.to_csv(tmp_path / "logic.csv", index=False)
        edges.to_csv(tmp_path / "edges.csv", index=False)

        self._check(load_graph(tmp_path))

    def test_csv_directory_without_edges(self, tmp_path, tables):
        courses, _, _ = tables
        courses.to_csv(tmp_path / "courses.csv", index=False)

        with pytest.raises(GraphLoadError, match="missing edges.csv"):
            load_graph(tmp_path)

    def test_excel_workbook(self, tmp_path, tables):
        courses, logic, edges = tables
        path = tmp_path / "graph.xlsx"
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            courses.to_excel(writer, sheet_name="courses", index=False)
            logic.to_excel(writer, sheet_name="logic", index=False)
            edges.to_excel(writer, sheet_name="edges", index=False)

        self._check(load_graph(path))

    def test_excel_missing_sheet(self, tmp_path, tables):
        courses, _, _ = tables
        path = tmp_path / "graph.xlsx"
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            courses.to_excel(writer, sheet_name="courses", index=False)

        with pytest.raises(GraphLoadError, match="sheet 'edges' not found"):
            load_graph(path)

    def test_exam_columns(self, tmp_path):
        pd.DataFrame(
            [
                {
                    "code": "MA1521",
                    "terms_offered": "term1",
                    "exam_start": "2025-11-25T09:00:00",
                    "exam_duration": "120",
                }
            ]
        ).to_csv(tmp_path / "courses.csv", index=False)
        pd.DataFrame(columns=["from", "to"]).to_csv(tmp_path / "edges.csv", index=False)

        course = load_graph(tmp_path).course("MA1521")
        assert course.exam is not None
        assert course.exam.duration_minutes == 120
