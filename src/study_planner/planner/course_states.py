"""Per-course status check for a placed schedule."""

import logging
from collections.abc import Iterable

from ..models import CourseGraph, CourseStatus, TermType
from .models import CourseIssue, CourseState, IssueType, TermRow

logger = logging.getLogger(__name__)

_PASSED = (CourseStatus.COMPLETED, CourseStatus.SATISFIED)


def check_course_states(
    terms: list[TermRow],
    graph: CourseGraph,
    exempted: Iterable[str] = (),
) -> dict[str, CourseState]:
    """Evaluate the status of every placed course.

    Terms are replayed in ascending order. A course already carrying a
    passing grade or completed status is COMPLETED with no issues. Otherwise
    conflicts (wrong term type, preclusion, exam clash) make it CONFLICTED;
    prerequisites not met by exempted or earlier-term courses make it
    UNSATISFIED; anything else is SATISFIED. Only COMPLETED and SATISFIED
    courses count towards later prerequisites, and a term's results are
    committed after the whole term is evaluated.

    Args:
        terms: Term rows to check
        graph: Course graph
        exempted: Course codes counted as satisfied before the first term

    Returns:
        Course code -> CourseState, for placed courses found in the graph
    """
    placement: dict[str, int] = {}
    for row in terms:
        for code in row.course_codes:
            placement[code] = row.term_id

    conflicts = _build_conflicts(placement, graph)
    seen: dict[str, CourseStatus] = {code: CourseStatus.SATISFIED for code in exempted}
    states: dict[str, CourseState] = {}

    for term_id in sorted({row.term_id for row in terms}):
        term_results: dict[str, CourseState] = {}

        for code in (c for row in terms if row.term_id == term_id for c in row.course_codes):
            node_id = graph.id_for_code(code)
            if node_id is None:
                logger.debug(f"Skipping {code}: not in graph")
                continue

            course = graph.course(node_id)
            if course.is_recorded_complete:
                term_results[code] = CourseState(code, term_id, CourseStatus.COMPLETED)
                continue

            issues = list(conflicts.get(code, []))
            prereqs_met = all(
                _is_met(prereq_id, graph, seen) for prereq_id in graph.prerequisites(node_id)
            )
            if not prereqs_met:
                issues.append(CourseIssue(IssueType.PREREQ_UNSATISFIED))

            if code in conflicts:
                status = CourseStatus.CONFLICTED
            elif not prereqs_met:
                status = CourseStatus.UNSATISFIED
            else:
                status = CourseStatus.SATISFIED

            term_results[code] = CourseState(code, term_id, status, issues)

        for code, state in term_results.items():
            states[code] = state
            seen[code] = state.status

    return states


def _is_met(node_id: str, graph: CourseGraph, seen: dict[str, CourseStatus]) -> bool:
    """Whether a prerequisite node is met by the courses seen so far."""
    if graph.is_course(node_id):
        return seen.get(graph.course(node_id).code) in _PASSED
    if not graph.is_logic(node_id):
        return False

    met = sum(1 for child_id in graph.prerequisites(node_id) if _is_met(child_id, graph, seen))
    return met >= graph.required_count(node_id)


def _build_conflicts(
    placement: dict[str, int], graph: CourseGraph
) -> dict[str, list[CourseIssue]]:
    """Term, preclusion and exam clash issues of every placed course."""
    clashes = _build_exam_clashes(placement, graph)
    conflicts: dict[str, list[CourseIssue]] = {}

    for code, term_id in placement.items():
        course = graph.course_by_code(code)
        if course is None:
            continue

        issues: list[CourseIssue] = []
        if not course.is_offered_in(TermType.from_term_id(term_id)):
            issues.append(CourseIssue(IssueType.INVALID_TERM))

        precluded = [
            other for other in course.preclusions
            if other in placement and placement[other] <= term_id
        ]
        if precluded:
            issues.append(CourseIssue(IssueType.PRECLUDED, precluded))

        if clashes.get(code):
            issues.append(CourseIssue(IssueType.EXAM_CLASH, clashes[code]))

        if issues:
            conflicts[code] = issues

    return conflicts


def _build_exam_clashes(
    placement: dict[str, int], graph: CourseGraph
) -> dict[str, list[str]]:
    """Codes each course's exam overlaps with inside its own term."""
    by_term: dict[int, list] = {}
    for code, term_id in placement.items():
        course = graph.course_by_code(code)
        if course is not None and course.exam is not None:
            by_term.setdefault(term_id, []).append(course)

    clashes: dict[str, list[str]] = {}
    for courses in by_term.values():
        courses.sort(key=lambda c: c.exam.start)
        for i, first in enumerate(courses):
            for second in courses[i + 1:]:
                if second.exam.start >= first.exam.end:
                    break
                if first.exam.overlaps(second.exam):
                    clashes.setdefault(first.code, []).append(second.code)
                    clashes.setdefault(second.code, []).append(first.code)
    return clashes
