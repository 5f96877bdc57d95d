"""Availability snapshot for a planning term."""

from ..models import Course, CourseGraph, TermType
from .models import PlannerState


def calculate_available_courses(
    term_id: int,
    state: PlannerState,
    graph: CourseGraph,
    use_special_terms: bool = True,
) -> list[str]:
    """Compute the courses that can be taken in a term.

    A course is available when it is neither completed nor redundant, all of
    its direct prerequisites are satisfied (courses completed, logic nodes
    marked satisfied) and it is offered in the term's type. Short terms yield
    nothing when special terms are disabled. The state is only read.

    Args:
        term_id: Term to compute (0 = Y1 Term 1, 1 = Y1 Short A, ...)
        state: Current planner state
        graph: Course graph of the run
        use_special_terms: Whether short terms may be used

    Returns:
        Available course ids, unique, in graph order
    """
    term_type = TermType.from_term_id(term_id)
    if term_type.is_special and not use_special_terms:
        return []

    available: list[str] = []
    for course in graph.courses():
        if course.id in state.completed or course.id in state.redundant:
            continue
        if not course.is_offered_in(term_type):
            continue
        if _prerequisites_satisfied(course, state, graph):
            available.append(course.id)

    return available


def _prerequisites_satisfied(
    course: Course, state: PlannerState, graph: CourseGraph
) -> bool:
    """Check the direct prerequisites of a course against the state."""
    for prereq_id in graph.prerequisites(course.id):
        if graph.is_course(prereq_id):
            if prereq_id not in state.completed:
                return False
        elif graph.is_logic(prereq_id):
            if not state.is_satisfied(prereq_id):
                return False
        else:
            return False
    return True
