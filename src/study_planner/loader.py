"""Load course graphs from JSON, Excel or CSV files."""

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from .exceptions import GraphLoadError
from .models import CourseGraph
from .utils import safe_str

logger = logging.getLogger(__name__)

# Sheet (Excel) or file stem (CSV) names of tabular graphs
COURSES_TABLE = "courses"
LOGIC_TABLE = "logic"
EDGES_TABLE = "edges"


def load_graph(path: Path | str) -> CourseGraph:
    """Load a course graph, choosing the reader from the path.

    Args:
        path: ``.json`` file, ``.xlsx``/``.xls`` workbook or a directory of CSVs

    Returns:
        Acyclic CourseGraph

    Raises:
        GraphLoadError: If the path is missing, unsupported or malformed
        GraphCycleError: If the prerequisites form a cycle
    """
    path = Path(path)
    if not path.exists():
        raise GraphLoadError("file not found", source=str(path))

    if path.is_dir():
        return load_graph_csv_dir(path)

    suffix = path.suffix.lower()
    if suffix == ".json":
        return load_graph_json(path)
    if suffix in (".xlsx", ".xls"):
        return load_graph_excel(path)

    raise GraphLoadError(
        f"unsupported graph format '{suffix}' (expected .json, .xlsx or a CSV directory)",
        source=str(path),
    )


def load_graph_json(path: Path | str) -> CourseGraph:
    """Load a graph from ``{"nodes": {...}, "edges": [...]}`` JSON."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise GraphLoadError(f"invalid JSON: {e}", source=str(path)) from e

    if not isinstance(data, dict):
        raise GraphLoadError("top level must be an object", source=str(path))

    return _build_graph(data, path)


def load_graph_excel(path: Path | str) -> CourseGraph:
    """Load a graph from a workbook with courses, logic and edges sheets."""
    path = Path(path)
    excel_file = pd.ExcelFile(path)
    sheets = excel_file.sheet_names

    for required in (COURSES_TABLE, EDGES_TABLE):
        if required not in sheets:
            raise GraphLoadError(
                f"sheet '{required}' not found. Available: {', '.join(sheets)}",
                source=str(path),
            )

    courses = pd.read_excel(excel_file, sheet_name=COURSES_TABLE, dtype=str)
    edges = pd.read_excel(excel_file, sheet_name=EDGES_TABLE, dtype=str)
    logic = None
    if LOGIC_TABLE in sheets:
        logic = pd.read_excel(excel_file, sheet_name=LOGIC_TABLE, dtype=str)

    return _build_graph(_tables_to_dict(courses, logic, edges), path)


def load_graph_csv_dir(path: Path | str) -> CourseGraph:
    """Load a graph from ``courses.csv``, ``edges.csv`` and optional ``logic.csv``."""
    path = Path(path)
    courses_csv = path / f"{COURSES_TABLE}.csv"
    edges_csv = path / f"{EDGES_TABLE}.csv"
    logic_csv = path / f"{LOGIC_TABLE}.csv"

    for required in (courses_csv, edges_csv):
        if not required.exists():
            raise GraphLoadError(f"missing {required.name}", source=str(path))

    courses = pd.read_csv(courses_csv, dtype=str)
    edges = pd.read_csv(edges_csv, dtype=str)
    logic = pd.read_csv(logic_csv, dtype=str) if logic_csv.exists() else None

    return _build_graph(_tables_to_dict(courses, logic, edges), path)


def _tables_to_dict(
    courses: pd.DataFrame, logic: pd.DataFrame | None, edges: pd.DataFrame
) -> dict[str, Any]:
    """Convert tabular graph sheets into the JSON graph shape."""
    nodes: dict[str, dict[str, Any]] = {}

    for record in _records(courses):
        code = safe_str(record.get("code"))
        node_id = safe_str(record.pop("id", None)) or code
        record.setdefault("type", "course")

        exam_start = record.pop("exam_start", None)
        exam_duration = record.pop("exam_duration", None)
        if exam_start:
            record["exam"] = {"start_time": exam_start, "duration_minutes": exam_duration}

        nodes[node_id] = record

    if logic is not None:
        for record in _records(logic):
            node_id = safe_str(record.pop("id", None))
            nodes[node_id] = record

    return {"nodes": nodes, "edges": _records(edges)}


def _records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Rows as dicts with empty cells dropped."""
    rows = []
    for row in df.to_dict(orient="records"):
        rows.append({str(k).strip(): v for k, v in row.items() if not pd.isna(v)})
    return rows


def _build_graph(data: dict[str, Any], source: Path) -> CourseGraph:
    try:
        graph = CourseGraph.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise GraphLoadError(f"malformed record: {e}", source=str(source)) from e

    graph.check_acyclic()

    course_count = sum(1 for _ in graph.courses())
    logger.info(
        f"Loaded graph from {source}: {course_count} courses, "
        f"{len(graph) - course_count} logic nodes, {len(graph.edges)} edges"
    )
    return graph
