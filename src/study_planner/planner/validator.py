"""Independent validation of a finished schedule."""

from collections import Counter
from collections.abc import Iterable

from ..constants import DEFAULT_COURSE_CREDITS
from ..models import CourseGraph
from .constants import DEFAULT_MAX_CREDITS
from .models import PlannerState, TermRow, ValidationResult, ValidationStats


def validate_schedule(
    terms: list[TermRow],
    graph: CourseGraph,
    targets: Iterable[str],
    max_credits: int = DEFAULT_MAX_CREDITS,
    exempted: Iterable[str] = (),
) -> ValidationResult:
    """Check a schedule against every planning constraint.

    Works on any schedule, including hand-edited ones. All violations are
    collected in one pass; nothing is raised.

    Errors: duplicate courses, terms over the credit cap, prerequisites not
    completed in a strictly earlier term (same-term placement reported
    explicitly), unmet targets. Warnings: courses missing from the graph,
    gaps in term numbering.

    Args:
        terms: Term rows to check
        graph: Course graph
        targets: Target course codes
        max_credits: Per-term credit cap
        exempted: Course codes counted as completed before the first term

    Returns:
        ValidationResult with errors, warnings and stats
    """
    targets = list(targets)
    result = ValidationResult()

    by_term: dict[int, list[str]] = {}
    all_codes: list[str] = []
    for row in terms:
        by_term.setdefault(row.term_id, []).extend(row.course_codes)
        all_codes.extend(row.course_codes)

    counts = Counter(all_codes)
    duplicates = [code for code in dict.fromkeys(all_codes) if counts[code] > 1]
    if duplicates:
        result.errors.append(f"Duplicate courses scheduled: {', '.join(duplicates)}")

    exempted_ids = [i for i in (graph.id_for_code(c) for c in exempted) if i is not None]
    tracker = PlannerState.initialise(graph, exempted_ids)
    completed_codes: set[str] = set(exempted)

    max_term_credits = 0
    term_ids = sorted(by_term)

    for term_id in term_ids:
        codes = by_term[term_id]
        current = set(codes)
        term_credits = 0

        for code in codes:
            node_id = graph.id_for_code(code)
            if node_id is None:
                continue

            course = graph.course(node_id)
            term_credits += course.credit_weight

            for prereq_id in graph.prerequisites(node_id):
                if graph.is_course(prereq_id):
                    prereq_code = graph.course(prereq_id).code
                    if prereq_code in current:
                        result.errors.append(
                            f"Course {code} taken in term {term_id} but prerequisite "
                            f"{prereq_code} is also taken in the same term"
                        )
                    elif prereq_code not in completed_codes:
                        result.errors.append(
                            f"Course {code} taken in term {term_id} but prerequisite "
                            f"{prereq_code} not completed"
                        )
                elif not tracker.is_satisfied(prereq_id):
                    if _satisfiable_by(prereq_id, current, graph):
                        result.errors.append(
                            f"Course {code} taken in term {term_id} but prerequisite "
                            f"logic node cannot be satisfied by courses in the same term"
                        )
                    else:
                        result.errors.append(
                            f"Course {code} taken in term {term_id} but prerequisite "
                            f"logic node {graph.describe_logic(prereq_id)} not satisfied"
                        )

        if term_credits > max_credits:
            result.errors.append(
                f"Term {term_id} has {term_credits} credits, exceeding limit of {max_credits}"
            )
        max_term_credits = max(max_term_credits, term_credits)

        # Completed only after the whole term is checked
        for code in codes:
            completed_codes.add(code)
            node_id = graph.id_for_code(code)
            if node_id is not None:
                tracker.complete(node_id, graph)

    completed_targets = [code for code in targets if code in completed_codes]
    missing_targets = [code for code in targets if code not in completed_codes]
    if missing_targets:
        result.errors.append(f"Target courses not completed: {', '.join(missing_targets)}")

    for code in dict.fromkeys(all_codes):
        if graph.id_for_code(code) is None:
            result.warnings.append(f"Course {code} in schedule but not found in graph")

    for previous, current_id in zip(term_ids, term_ids[1:]):
        if current_id != previous + 1:
            result.warnings.append(f"Gap in terms: {previous} to {current_id}")

    result.stats = ValidationStats(
        total_courses=len(all_codes),
        total_terms=len(term_ids),
        total_credits=sum(_credits_for(code, graph) for code in all_codes),
        max_term_credits=max_term_credits,
        targets_completed=len(completed_targets),
        targets_total=len(targets),
    )
    return result


def _satisfiable_by(logic_id: str, codes: set[str], graph: CourseGraph) -> bool:
    """True if a direct course option of the logic node is in ``codes``."""
    for option_id in graph.prerequisites(logic_id):
        if graph.is_course(option_id) and graph.course(option_id).code in codes:
            return True
    return False


def _credits_for(code: str, graph: CourseGraph) -> int:
    node_id = graph.id_for_code(code)
    if node_id is None:
        return DEFAULT_COURSE_CREDITS
    return graph.course(node_id).credit_weight


def generate_validation_report(
    result: ValidationResult, max_credits: int = DEFAULT_MAX_CREDITS
) -> str:
    """Render a validation result as a plain-text report."""
    stats = result.stats
    lines = [
        f"Status: {'VALID' if result.is_valid else 'INVALID'}",
        "",
        "Statistics:",
        f"  - Total courses: {stats.total_courses}",
        f"  - Total terms: {stats.total_terms}",
        f"  - Total credits: {stats.total_credits}",
        f"  - Max credits in a term: {stats.max_term_credits}/{max_credits}",
        f"  - Target courses completed: {stats.targets_completed}/{stats.targets_total}",
        "",
    ]

    if result.errors:
        lines.append(f"Errors ({len(result.errors)}):")
        lines.extend(f"  {i}. {error}" for i, error in enumerate(result.errors, 1))
        lines.append("")

    if result.warnings:
        lines.append(f"Warnings ({len(result.warnings)}):")
        lines.extend(f"  {i}. {warning}" for i, warning in enumerate(result.warnings, 1))
        lines.append("")

    lines.append("=== END OF REPORT ===")
    return "\n".join(lines)
