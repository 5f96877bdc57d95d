"""Test fixtures for study planner tests."""

import json

import pytest

from study_planner.models import CourseGraph

DEFAULT_TERMS = ["term1", "term2"]


def _build_graph(courses, logic=None, edges=()):
    nodes = {}
    for course in courses:
        if isinstance(course, str):
            course = {"code": course}
        record = {"type": "course", "credits": 4, "terms_offered": DEFAULT_TERMS} | course
        nodes[record["code"]] = record
    for logic_id, record in (logic or {}).items():
        nodes[logic_id] = record
    return CourseGraph.from_dict(
        {
            "nodes": nodes,
            "edges": [{"from": dependent, "to": prereq} for dependent, prereq in edges],
        }
    )


@pytest.fixture
def make_graph():
    """Factory building a graph whose node ids are the course codes.

    Courses are codes or partial records (defaults: 4 credits, Term 1 and
    Term 2); logic nodes map id -> record; edges are (dependent, prerequisite).
    """
    return _build_graph


@pytest.fixture
def single_graph():
    """One course A with no prerequisites."""
    return _build_graph(["A"])


@pytest.fixture
def chain_graph():
    """A <- B <- C: B requires A, C requires B."""
    return _build_graph(["A", "B", "C"], edges=[("B", "A"), ("C", "B")])


@pytest.fixture
def nof_graph():
    """T requires 2 of A, B, C through logic node L."""
    return _build_graph(
        ["A", "B", "C", "T"],
        logic={"L": {"type": "NOF", "n": 2}},
        edges=[("T", "L"), ("L", "A"), ("L", "B"), ("L", "C")],
    )


@pytest.fixture
def exam_graph():
    """X and Y with overlapping exams; T requires X or Y."""
    exam = {"start_time": "2025-11-25T09:00:00", "duration_minutes": 120}
    return _build_graph(
        [
            {"code": "X", "exam": exam},
            {"code": "Y", "exam": exam},
            "T",
        ],
        logic={"L": {"type": "OR"}},
        edges=[("T", "L"), ("L", "X"), ("L", "Y")],
    )


@pytest.fixture
def degree_graph_data():
    """Small computing degree graph in JSON form."""
    courses = [
        "CS1010",
        "MA1521",
        "CS1231",
        "CS2030",
        "CS2040",
        "CS2100",
        "CS3230",
        "CS5330",
    ]
    nodes = {
        code: {"type": "course", "code": code, "credits": 4, "terms_offered": DEFAULT_TERMS}
        for code in courses
    }
    nodes["L_MATH"] = {"type": "OR"}
    edges = [
        ("CS2030", "CS1010"),
        ("CS2040", "CS1010"),
        ("CS2100", "CS1010"),
        ("CS3230", "CS2040"),
        ("CS3230", "L_MATH"),
        ("L_MATH", "MA1521"),
        ("L_MATH", "CS1231"),
        ("CS5330", "CS3230"),
    ]
    return {
        "nodes": nodes,
        "edges": [{"from": dependent, "to": prereq} for dependent, prereq in edges],
    }


@pytest.fixture
def degree_graph(degree_graph_data):
    return CourseGraph.from_dict(degree_graph_data)


@pytest.fixture
def degree_graph_file(tmp_path, degree_graph_data):
    """Degree graph written to a JSON file."""
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(degree_graph_data), encoding="utf-8")
    return path
