"""Backward pruning of planned terms."""

from collections.abc import Iterable

from ..models import CourseGraph
from .models import TermRow


def clean_terms(
    terms: list[TermRow],
    graph: CourseGraph,
    keep_codes: Iterable[str],
) -> list[TermRow]:
    """Drop courses that no kept course needs.

    Terms are walked from last to first. A course stays if its code is in
    ``keep_codes`` (even when it is missing from the graph) or a later kept
    course marked it as required. Keeping a course marks its direct
    prerequisites; logic-node prerequisites are walked through so every
    course beneath them is marked too. Terms left empty are dropped.

    Args:
        terms: Term rows in ascending term order
        graph: Course graph
        keep_codes: Target codes plus preserved codes

    Returns:
        New list of pruned term rows, in the original order
    """
    keep = set(keep_codes)
    required: set[str] = set()

    def mark_prerequisites(node_id: str) -> None:
        stack = list(graph.prerequisites(node_id))
        while stack:
            prereq_id = stack.pop()
            if prereq_id in required:
                continue
            required.add(prereq_id)
            if graph.is_logic(prereq_id):
                stack.extend(graph.prerequisites(prereq_id))

    cleaned: list[TermRow] = []
    for row in reversed(terms):
        kept: list[str] = []
        for code in row.course_codes:
            node_id = graph.id_for_code(code)
            if code in keep or (node_id is not None and node_id in required):
                kept.append(code)
                if node_id is not None:
                    mark_prerequisites(node_id)
        if kept:
            cleaned.append(TermRow(term_id=row.term_id, course_codes=kept))

    cleaned.reverse()
    return cleaned
