"""Multi-term course planning engine.

This package turns a prerequisite graph and a set of target courses into an
ordered term-by-term schedule. Each term is filled greedily from an
availability snapshot, scoring candidates by how many targets they lead to,
and the result is pruned backwards and validated.

Main classes:
- TermPlanner: Runs a planning request against a course graph
- CourseSelector: Greedy per-term selection with impact scoring
- PlanRequest: Targets, exemptions and per-term constraints

Usage:
    from study_planner.planner import PlanRequest, TermPlanner

    planner = TermPlanner(graph)
    result = planner.plan(PlanRequest(targets=["CS2040"], max_credits=20))
"""

from .availability import calculate_available_courses
from .cleaner import clean_terms
from .config import PlanRequest, load_plan_request
from .constants import (
    DEFAULT_MAX_CREDITS,
    DEPTH_DECAY,
    GRADUATE_COURSE_PATTERN,
    GRADUATE_PENALTY,
    MAX_TERMS,
    TARGET_SCORE,
)
from .course_states import check_course_states
from .models import (
    CourseIssue,
    CourseState,
    IssueType,
    LogicStatus,
    PlannerState,
    PlanResult,
    TermRow,
    ValidationResult,
    ValidationStats,
)
from .propagation import update_logic_satisfaction
from .scheduler import TermPlanner, create_planner
from .selector import CourseSelector, select_courses_for_term
from .utils import is_graduate_course, make_code_predicate, term_label
from .validator import generate_validation_report, validate_schedule

__all__ = [
    # Main planner
    "TermPlanner",
    "create_planner",
    "CourseSelector",
    # Configuration
    "PlanRequest",
    "load_plan_request",
    "DEFAULT_MAX_CREDITS",
    "DEPTH_DECAY",
    "GRADUATE_COURSE_PATTERN",
    "GRADUATE_PENALTY",
    "MAX_TERMS",
    "TARGET_SCORE",
    # Models
    "CourseIssue",
    "CourseState",
    "IssueType",
    "LogicStatus",
    "PlannerState",
    "PlanResult",
    "TermRow",
    "ValidationResult",
    "ValidationStats",
    # Steps
    "calculate_available_courses",
    "select_courses_for_term",
    "update_logic_satisfaction",
    "clean_terms",
    "validate_schedule",
    "generate_validation_report",
    "check_course_states",
    # Utilities
    "is_graduate_course",
    "make_code_predicate",
    "term_label",
]
