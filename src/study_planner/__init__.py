"""Study Planner - multi-term course schedule generation.

This module turns a course prerequisite graph (courses plus AND / OR / N-of-M
logic nodes) into a term-by-term study plan that reaches a set of target
courses under a per-term credit cap, then prunes and validates it.

Example usage:
    from study_planner import PlanRequest, TermPlanner, load_graph

    graph = load_graph("graph.json")
    planner = TermPlanner(graph)
    result = planner.plan(PlanRequest(targets=["CS3230"], exempted=["CS1010"]))

    for row in result.terms:
        print(f"{row.label}: {', '.join(row.course_codes)}")

    # Export to JSON
    from study_planner.exporters import JSONExporter
    exporter = JSONExporter()
    exporter.export(result, "plan.json")
"""

from .exceptions import (
    EmptyTargetsError,
    GraphCycleError,
    GraphLoadError,
    InvalidRequestError,
    PlannerError,
    TargetNotFoundError,
)
from .exporters import CSVExporter, ExcelExporter, JSONExporter, get_exporter, load_plan_json
from .loader import load_graph
from .models import (
    Course,
    CourseGraph,
    CourseStatus,
    Edge,
    ExamWindow,
    LogicNode,
    LogicType,
    TermType,
)
from .planner import PlanRequest, PlanResult, TermPlanner, TermRow

__version__ = "0.1.0"

__all__ = [
    # Main planner
    "TermPlanner",
    "PlanRequest",
    "PlanResult",
    "TermRow",
    # Graph
    "load_graph",
    "CourseGraph",
    "Course",
    "LogicNode",
    "LogicType",
    "Edge",
    "ExamWindow",
    "TermType",
    "CourseStatus",
    # Exporters
    "JSONExporter",
    "CSVExporter",
    "ExcelExporter",
    "get_exporter",
    "load_plan_json",
    # Exceptions
    "PlannerError",
    "GraphLoadError",
    "GraphCycleError",
    "InvalidRequestError",
    "EmptyTargetsError",
    "TargetNotFoundError",
]
