"""Data models for the course prerequisite graph."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Self

from .constants import (
    COURSE_NODE_TYPES,
    DEFAULT_COURSE_CREDITS,
    LOGIC_NODE_TYPES,
    PASSING_GRADES,
    TERMS_PER_YEAR,
)
from .exceptions import GraphCycleError, GraphLoadError
from .utils import extract_preclusion_codes, parse_semester_data, safe_int, safe_str, split_list


class TermType(str, Enum):
    """Slot in the 4-term academic year cycle."""

    TERM1 = "term1"
    SHORT_A = "short_a"
    TERM2 = "term2"
    SHORT_B = "short_b"

    @classmethod
    def from_term_id(cls, term_id: int) -> "TermType":
        """Term type of a term id (id mod 4)."""
        return _TERM_CYCLE[term_id % TERMS_PER_YEAR]

    @classmethod
    def parse(cls, label: str) -> "TermType":
        """Parse a term label such as "term1", "TERM2" or "short_a"."""
        key = label.strip().lower().replace(" ", "_").replace("-", "_")
        return cls(key)

    @property
    def is_special(self) -> bool:
        """True for the short (special) terms."""
        return self in (TermType.SHORT_A, TermType.SHORT_B)

    @property
    def display_name(self) -> str:
        return _TERM_DISPLAY_NAMES[self]


_TERM_CYCLE = [TermType.TERM1, TermType.SHORT_A, TermType.TERM2, TermType.SHORT_B]

_TERM_DISPLAY_NAMES = {
    TermType.TERM1: "Term 1",
    TermType.SHORT_A: "Short Term A",
    TermType.TERM2: "Term 2",
    TermType.SHORT_B: "Short Term B",
}


class LogicType(str, Enum):
    """Prerequisite combinator kinds."""

    AND = "AND"
    OR = "OR"
    NOF = "NOF"


class CourseStatus(str, Enum):
    """Status of a course on a plan.

    COMPLETED: Course already has a recorded grade
    SATISFIED: Placed with prerequisites met and no conflicts
    UNSATISFIED: Placed before its prerequisites are met
    CONFLICTED: Placed with a term, preclusion or exam conflict
    """

    COMPLETED = "completed"
    SATISFIED = "satisfied"
    UNSATISFIED = "unsatisfied"
    CONFLICTED = "conflicted"


@dataclass(frozen=True)
class ExamWindow:
    """Final exam slot of a course."""

    start: datetime
    duration_minutes: int

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)

    def overlaps(self, other: "ExamWindow") -> bool:
        """Half-open overlap test; back-to-back exams do not clash."""
        return self.start < other.end and other.start < self.end

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create an exam window; starts are stored as naive UTC.

        Starts with an offset (or a trailing "Z") are converted to UTC, starts
        without one are taken as UTC already, so windows from mixed sources
        stay comparable.
        """
        start = data.get("start_time") or data.get("startTime") or data.get("start")
        if isinstance(start, str):
            start = datetime.fromisoformat(start.replace("Z", "+00:00"))
        if isinstance(start, datetime) and start.tzinfo is not None:
            start = start.astimezone(timezone.utc).replace(tzinfo=None)
        duration = data.get("duration_minutes", data.get("durationMinutes", 0))
        return cls(start=start, duration_minutes=safe_int(duration, 0))

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_time": self.start.isoformat(),
            "duration_minutes": self.duration_minutes,
        }


@dataclass
class Course:
    """A schedulable course node.

    Attributes:
        id: Node identifier in the graph
        code: Unique course code (e.g. "CS2040")
        title: Human-readable title
        credits: Credit weight; None or 0 falls back to DEFAULT_COURSE_CREDITS
        terms_offered: Term types the course runs in
        exam: Exam window, if the course has a final exam
        preclusions: Codes of courses that cannot also be completed
        grade: Recorded grade from a prior completion
        status: Recorded status from a prior completion
    """

    id: str
    code: str
    title: str = ""
    credits: int | None = None
    terms_offered: list[TermType] = field(default_factory=list)
    exam: ExamWindow | None = None
    preclusions: list[str] = field(default_factory=list)
    grade: str | None = None
    status: CourseStatus | None = None
    description: str | None = None
    faculty: str | None = None
    department: str | None = None

    @property
    def credit_weight(self) -> int:
        """Credits counted against the per-term cap."""
        return self.credits or DEFAULT_COURSE_CREDITS

    @property
    def is_recorded_complete(self) -> bool:
        """True if the course already carries a passing grade or completed status."""
        return self.grade in PASSING_GRADES or self.status == CourseStatus.COMPLETED

    def is_offered_in(self, term_type: TermType) -> bool:
        return term_type in self.terms_offered

    def precludes(self, other: "Course") -> bool:
        """True if either course lists the other as a preclusion."""
        return other.code in self.preclusions or self.code in other.preclusions

    @classmethod
    def from_dict(cls, node_id: str, data: dict[str, Any]) -> Self:
        """Create a Course from a graph file record.

        Terms come from ``terms_offered`` labels or the store's
        ``semester_data`` records; preclusions from a ``preclusions`` list or
        free-text ``preclusion``.
        """
        exam = None
        if data.get("terms_offered") is not None:
            labels = split_list(data["terms_offered"])
        else:
            labels, exam_data = parse_semester_data(
                data.get("semester_data", data.get("semesterData"))
            )
            if exam_data:
                exam = ExamWindow.from_dict(exam_data)
        if data.get("exam"):
            exam = ExamWindow.from_dict(data["exam"])

        if data.get("preclusions") is not None:
            preclusions = split_list(data["preclusions"])
        else:
            preclusions = extract_preclusion_codes(safe_str(data.get("preclusion")))

        grade = safe_str(data.get("grade")) or None
        status = safe_str(data.get("status")) or None

        return cls(
            id=node_id,
            code=safe_str(data.get("code") or data.get("moduleCode")),
            title=safe_str(data.get("title")),
            credits=safe_int(data.get("credits", data.get("moduleCredit"))),
            terms_offered=[TermType.parse(label) for label in labels],
            exam=exam,
            preclusions=preclusions,
            grade=grade,
            status=_parse_status(status),
            description=safe_str(data.get("description")) or None,
            faculty=safe_str(data.get("faculty")) or None,
            department=safe_str(data.get("department")) or None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "course",
            "code": self.code,
            "title": self.title,
            "credits": self.credits,
            "terms_offered": [t.value for t in self.terms_offered],
            "exam": self.exam.to_dict() if self.exam else None,
            "preclusions": self.preclusions,
            "grade": self.grade,
            "status": self.status.value if self.status else None,
        }


@dataclass
class LogicNode:
    """A prerequisite combinator (not schedulable itself).

    AND needs every child, OR needs one child, NOF needs ``n`` children.
    """

    id: str
    kind: LogicType
    n: int | None = None

    def required_count(self, child_count: int) -> int:
        """Number of satisfied children needed."""
        if self.kind == LogicType.AND:
            return child_count
        if self.kind == LogicType.OR:
            return 1
        return self.n if self.n is not None else 1

    @classmethod
    def from_dict(cls, node_id: str, data: dict[str, Any]) -> Self:
        kind = LogicType(safe_str(data.get("type")).upper())
        n = safe_int(data.get("n", data.get("threshold")))
        return cls(id=node_id, kind=kind, n=n if kind == LogicType.NOF else None)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.kind.value}
        if self.kind == LogicType.NOF:
            data["n"] = self.n
        return data


Node = Course | LogicNode


def _parse_status(value: str | None) -> CourseStatus | None:
    """Recorded status, ignoring values the planner does not track."""
    if not value:
        return None
    try:
        return CourseStatus(value.lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class Edge:
    """Directed edge from a dependent node to one of its prerequisites."""

    dependent: str
    prerequisite: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        dependent = data.get("from", data.get("dependent"))
        prerequisite = data.get("to", data.get("prerequisite"))
        return cls(dependent=safe_str(dependent), prerequisite=safe_str(prerequisite))

    def to_dict(self) -> dict[str, str]:
        return {"from": self.dependent, "to": self.prerequisite}


def node_from_dict(node_id: str, data: dict[str, Any]) -> Node:
    """Build a Course or LogicNode from a graph file record.

    Raises:
        GraphLoadError: If the record's type is not recognised
    """
    node_type = safe_str(data.get("type"))
    if node_type.upper() in LOGIC_NODE_TYPES:
        return LogicNode.from_dict(node_id, data)
    if node_type.lower() in COURSE_NODE_TYPES or (not node_type and data.get("code")):
        return Course.from_dict(node_id, data)
    raise GraphLoadError(f"Unknown type '{node_type}' for node '{node_id}'")


class CourseGraph:
    """Read-only prerequisite graph with precomputed adjacency.

    Nodes live in an id-keyed map; ``prerequisites`` (out-edges) and
    ``dependents`` (in-edges) are indexed once at construction so shared
    logic nodes can be reached from every dependent.
    """

    def __init__(self, nodes: dict[str, Node], edges: list[Edge]) -> None:
        self.nodes = nodes
        self.edges = edges
        self._out: dict[str, list[str]] = {node_id: [] for node_id in nodes}
        self._in: dict[str, list[str]] = {node_id: [] for node_id in nodes}
        self._code_to_id: dict[str, str] = {}

        for edge in edges:
            for end in (edge.dependent, edge.prerequisite):
                if end not in nodes:
                    raise GraphLoadError(
                        f"Edge {edge.dependent} -> {edge.prerequisite} references "
                        f"unknown node '{end}'"
                    )
            self._out[edge.dependent].append(edge.prerequisite)
            self._in[edge.prerequisite].append(edge.dependent)

        for node_id, node in nodes.items():
            if isinstance(node, Course):
                self._code_to_id[node.code] = node_id

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def get(self, node_id: str) -> Node | None:
        return self.nodes.get(node_id)

    def is_course(self, node_id: str) -> bool:
        return isinstance(self.nodes.get(node_id), Course)

    def is_logic(self, node_id: str) -> bool:
        return isinstance(self.nodes.get(node_id), LogicNode)

    def course(self, node_id: str) -> Course:
        """Get a course node by id.

        Raises:
            KeyError: If the id is not a course node
        """
        node = self.nodes.get(node_id)
        if not isinstance(node, Course):
            raise KeyError(f"Node '{node_id}' is not a course")
        return node

    def courses(self) -> Iterator[Course]:
        """Course nodes in insertion order."""
        for node in self.nodes.values():
            if isinstance(node, Course):
                yield node

    def logic_nodes(self) -> Iterator[LogicNode]:
        for node in self.nodes.values():
            if isinstance(node, LogicNode):
                yield node

    def prerequisites(self, node_id: str) -> list[str]:
        """Direct prerequisites of a node (out-edges)."""
        return self._out.get(node_id, [])

    def dependents(self, node_id: str) -> list[str]:
        """Nodes that directly require this node (in-edges)."""
        return self._in.get(node_id, [])

    def id_for_code(self, code: str) -> str | None:
        """Exact course code lookup."""
        return self._code_to_id.get(code)

    def resolve_code(self, code: str) -> str | None:
        """Course code lookup, retrying upper-cased."""
        node_id = self._code_to_id.get(code)
        if node_id is None:
            node_id = self._code_to_id.get(code.strip().upper())
        return node_id

    def course_by_code(self, code: str) -> Course | None:
        node_id = self.resolve_code(code)
        return self.course(node_id) if node_id else None

    def required_count(self, logic_id: str) -> int:
        """Satisfied children a logic node needs."""
        node = self.nodes[logic_id]
        if not isinstance(node, LogicNode):
            raise KeyError(f"Node '{logic_id}' is not a logic node")
        return node.required_count(len(self._out[logic_id]))

    def describe_logic(self, logic_id: str) -> str:
        """Label like ``LOGIC-L1 [needs 2 of: CS1010, MA1521, LOGIC-L2]``."""
        node = self.nodes.get(logic_id)
        if not isinstance(node, LogicNode):
            return f"LOGIC-{logic_id}"
        options = []
        for option_id in self._out[logic_id]:
            option = self.nodes[option_id]
            options.append(option.code if isinstance(option, Course) else f"LOGIC-{option_id}")
        return (
            f"LOGIC-{logic_id} [needs {self.required_count(logic_id)} of: "
            f"{', '.join(options)}]"
        )

    def find_cycle(self) -> list[str] | None:
        """Find a prerequisite cycle, if any.

        Returns:
            Node ids along the cycle (first id repeated at the end), or None
        """
        # 0 = unvisited, 1 = on current path, 2 = done
        state: dict[str, int] = {node_id: 0 for node_id in self.nodes}

        for root in self.nodes:
            if state[root]:
                continue
            path = [root]
            stack = [(root, iter(self._out[root]))]
            state[root] = 1
            while stack:
                node_id, children = stack[-1]
                child = next(children, None)
                if child is None:
                    state[node_id] = 2
                    stack.pop()
                    path.pop()
                elif state[child] == 1:
                    return path[path.index(child):] + [child]
                elif state[child] == 0:
                    state[child] = 1
                    path.append(child)
                    stack.append((child, iter(self._out[child])))
        return None

    def check_acyclic(self) -> None:
        """Raise GraphCycleError if the graph has a cycle."""
        cycle = self.find_cycle()
        if cycle:
            raise GraphCycleError(cycle)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a graph from ``{"nodes": {...}, "edges": [...]}``."""
        raw_nodes = data.get("nodes", {})
        if isinstance(raw_nodes, list):
            raw_nodes = {safe_str(n.get("id")): n for n in raw_nodes}
        nodes = {
            str(node_id): node_from_dict(str(node_id), record)
            for node_id, record in raw_nodes.items()
        }
        raw_edges = data.get("edges", data.get("relationships", []))
        edges = [Edge.from_dict(e) for e in raw_edges]
        return cls(nodes, edges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": {node_id: node.to_dict() for node_id, node in self.nodes.items()},
            "edges": [e.to_dict() for e in self.edges],
        }
