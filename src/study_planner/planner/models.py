"""Data models for the term planning engine."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..models import CourseGraph, CourseStatus
from .propagation import update_logic_satisfaction
from .utils import term_label


@dataclass
class LogicStatus:
    """Satisfaction counter for one logic node."""

    requires: int
    satisfied_count: int = 0
    satisfied: bool = False


@dataclass
class PlannerState:
    """Mutable state of a single planning run.

    Every run builds its own state; nothing here is shared between runs.

    Attributes:
        completed: Course ids finished as of the current simulated term
        redundant: Course ids dropped by a preclusion or exam clash
        logic_status: Logic node id -> satisfaction counter
        satisfied_logic_nodes: Logic node ids already satisfied
    """

    completed: set[str] = field(default_factory=set)
    redundant: set[str] = field(default_factory=set)
    logic_status: dict[str, LogicStatus] = field(default_factory=dict)
    satisfied_logic_nodes: set[str] = field(default_factory=set)

    @classmethod
    def initialise(
        cls, graph: CourseGraph, completed_ids: Iterable[str] = ()
    ) -> "PlannerState":
        """Create a state with counters for every logic node.

        Seeded course ids are marked completed and their satisfaction is
        propagated, so logic nodes they fulfil start out satisfied.

        Args:
            graph: Course graph of the run
            completed_ids: Course ids treated as already finished

        Returns:
            Fresh PlannerState
        """
        state = cls()
        for logic in graph.logic_nodes():
            requires = graph.required_count(logic.id)
            state.logic_status[logic.id] = LogicStatus(requires=requires)

        # Logic nodes needing nothing (e.g. an AND without children)
        for logic_id, status in state.logic_status.items():
            if status.requires <= 0 and not status.satisfied:
                status.satisfied = True
                state.satisfied_logic_nodes.add(logic_id)
                update_logic_satisfaction(logic_id, state, graph)

        for course_id in completed_ids:
            state.complete(course_id, graph)

        return state

    def complete(self, course_id: str, graph: CourseGraph) -> None:
        """Mark a course completed and propagate it to its logic nodes."""
        if course_id in self.completed:
            return
        self.completed.add(course_id)
        update_logic_satisfaction(course_id, self, graph)

    def is_satisfied(self, logic_id: str) -> bool:
        status = self.logic_status.get(logic_id)
        return bool(status and status.satisfied)


@dataclass
class TermRow:
    """Courses placed in one term."""

    term_id: int
    course_codes: list[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        return term_label(self.term_id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TermRow":
        term_id = data.get("term_id", data.get("id"))
        codes = data.get("course_codes", data.get("moduleCodes", []))
        return cls(term_id=int(term_id), course_codes=list(codes))

    def to_dict(self) -> dict[str, Any]:
        return {"term_id": self.term_id, "course_codes": list(self.course_codes)}


@dataclass
class ValidationStats:
    """Aggregate numbers for a validated schedule."""

    total_courses: int = 0
    total_terms: int = 0
    total_credits: int = 0
    max_term_credits: int = 0
    targets_completed: int = 0
    targets_total: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total_courses": self.total_courses,
            "total_terms": self.total_terms,
            "total_credits": self.total_credits,
            "max_term_credits": self.max_term_credits,
            "targets_completed": self.targets_completed,
            "targets_total": self.targets_total,
        }


@dataclass
class ValidationResult:
    """Outcome of validating a schedule. Advisory only."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: ValidationStats = field(default_factory=ValidationStats)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "stats": self.stats.to_dict(),
        }


class IssueType(str, Enum):
    """Problems found on a placed course."""

    INVALID_TERM = "invalid_term"
    PRECLUDED = "precluded"
    EXAM_CLASH = "exam_clash"
    PREREQ_UNSATISFIED = "prereq_unsatisfied"


@dataclass
class CourseIssue:
    """One problem with a placed course."""

    type: IssueType
    with_codes: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if self.with_codes:
            return f"{self.type.value} ({', '.join(self.with_codes)})"
        return self.type.value

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value}
        if self.with_codes:
            data["with"] = self.with_codes
        return data


@dataclass
class CourseState:
    """Status of one placed course."""

    code: str
    term_id: int
    status: CourseStatus
    issues: list[CourseIssue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "term_id": self.term_id,
            "status": self.status.value,
            "issues": [i.to_dict() for i in self.issues],
        }


@dataclass
class PlanResult:
    """Result of a planning run."""

    terms: list[TermRow] = field(default_factory=list)
    validation: ValidationResult = field(default_factory=ValidationResult)
    targets: list[str] = field(default_factory=list)
    exempted: list[str] = field(default_factory=list)
    max_credits: int = 0
    use_special_terms: bool = False
    generation_date: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def total_courses(self) -> int:
        return sum(len(row.course_codes) for row in self.terms)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "generation_date": self.generation_date,
            "targets": self.targets,
            "exempted": self.exempted,
            "max_credits": self.max_credits,
            "use_special_terms": self.use_special_terms,
            "terms": [row.to_dict() for row in self.terms],
            "validation": self.validation.to_dict(),
        }
