"""Term-by-term planning of a course schedule."""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from ..exceptions import EmptyTargetsError, TargetNotFoundError
from ..loader import load_graph
from ..models import CourseGraph
from .availability import calculate_available_courses
from .cleaner import clean_terms
from .config import PlanRequest
from .constants import MAX_TERMS
from .models import PlannerState, PlanResult, TermRow
from .selector import CourseSelector
from .utils import is_graduate_course, term_label
from .validator import generate_validation_report, validate_schedule

logger = logging.getLogger(__name__)


class TermPlanner:
    """Greedy planner that fills terms one at a time.

    Planning steps:
    1. Resolve targets (all must exist), exempted and preserved codes
    2. Seed the state with exempted and preserved courses
    3. Copy preserved terms verbatim and start after the last of them
    4. For each term: take the availability snapshot and select courses
    5. Stop once every target is completed or MAX_TERMS is passed
    6. Prune courses no target or preserved course needs
    7. Validate the result (advisory only)
    """

    def __init__(
        self,
        graph: CourseGraph,
        max_terms: int = MAX_TERMS,
        is_deprioritized: Callable[[str], bool] = is_graduate_course,
    ) -> None:
        """Initialize the planner.

        Args:
            graph: Course graph, shared read-only across runs
            max_terms: Highest term id the planner may fill
            is_deprioritized: Predicate on course codes scored down during selection
        """
        self.graph = graph
        self.max_terms = max_terms
        self.is_deprioritized = is_deprioritized

    def plan(self, request: PlanRequest) -> PlanResult:
        """Build a schedule for a request.

        Args:
            request: Targets, exemptions, term options and preserved terms

        Returns:
            PlanResult with pruned term rows and the validation outcome

        Raises:
            EmptyTargetsError: If no target is given
            TargetNotFoundError: If any target code is not in the graph
        """
        target_ids = self._resolve_targets(request.targets)
        target_codes = [self.graph.course(i).code for i in target_ids]

        exempted_ids = self._resolve_codes(request.exempted, "exempted")
        exempted_codes = [self.graph.course(i).code for i in exempted_ids]
        preserved_ids = self._resolve_codes(request.preserved_codes, "preserved")

        state = PlannerState.initialise(self.graph, [*exempted_ids, *preserved_ids])

        terms = [
            TermRow(term_id=term_id, course_codes=list(request.preserved[term_id]))
            for term_id in sorted(request.preserved)
        ]
        start = max(request.preserved, default=-1) + 1

        selector = CourseSelector(
            self.graph, target_ids, request.max_credits, self.is_deprioritized
        )

        for term_id in range(start, self.max_terms + 1):
            if all(i in state.completed for i in target_ids):
                logger.info(f"All targets planned before {term_label(term_id)}")
                break

            available = calculate_available_courses(
                term_id, state, self.graph, request.use_special_terms
            )
            if not available:
                logger.debug(f"No courses available in {term_label(term_id)}")
                continue

            selected = selector.select(available, state)
            if selected:
                codes = [self.graph.course(i).code for i in selected]
                logger.info(f"{term_label(term_id)}: {', '.join(codes)}")
                terms.append(TermRow(term_id=term_id, course_codes=codes))
        else:
            missing = [self.graph.course(i).code for i in target_ids if i not in state.completed]
            if missing:
                logger.warning(
                    f"Term limit {self.max_terms} reached with targets unplanned: "
                    f"{', '.join(missing)}"
                )

        keep = [*target_codes, *request.preserved_codes]
        terms = clean_terms(terms, self.graph, keep)

        validation = validate_schedule(
            terms, self.graph, target_codes, request.max_credits, exempted_codes
        )
        report = generate_validation_report(validation, request.max_credits)
        if validation.is_valid:
            logger.info(f"Validation report:\n{report}")
        else:
            logger.warning(f"Generated schedule is invalid:\n{report}")

        return PlanResult(
            terms=terms,
            validation=validation,
            targets=target_codes,
            exempted=list(request.exempted),
            max_credits=request.max_credits,
            use_special_terms=request.use_special_terms,
        )

    def _resolve_targets(self, codes: list[str]) -> list[str]:
        if not codes:
            raise EmptyTargetsError()

        resolved: list[str] = []
        missing: list[str] = []
        for code in codes:
            node_id = self.graph.resolve_code(code)
            if node_id is None:
                missing.append(code)
            elif node_id not in resolved:
                resolved.append(node_id)
        if missing:
            raise TargetNotFoundError(missing)
        return resolved

    def _resolve_codes(self, codes: Iterable[str], kind: str) -> list[str]:
        """Resolve codes to ids, skipping unknown ones with a warning."""
        resolved: list[str] = []
        for code in codes:
            node_id = self.graph.resolve_code(code)
            if node_id is None:
                logger.warning(f"Ignoring {kind} course {code}: not in graph")
            else:
                resolved.append(node_id)
        return resolved


def create_planner(
    graph_path: Path | str,
    max_terms: int = MAX_TERMS,
) -> TermPlanner:
    """Factory function to create a TermPlanner from a graph file.

    Args:
        graph_path: Graph JSON, Excel workbook or CSV directory
        max_terms: Highest term id the planner may fill

    Returns:
        Configured TermPlanner instance
    """
    return TermPlanner(load_graph(graph_path), max_terms=max_terms)
