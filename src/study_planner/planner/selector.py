"""Greedy per-term course selection with impact scoring."""

import logging
from collections.abc import Callable, Iterable

from ..models import Course, CourseGraph
from .constants import DEPTH_DECAY, GRADUATE_PENALTY, TARGET_SCORE
from .models import PlannerState
from .propagation import update_logic_satisfaction
from .utils import is_graduate_course

logger = logging.getLogger(__name__)


class CourseSelector:
    """Picks the courses for one term under a credit cap.

    Selection loop (until no candidates remain or the cap is reached):
    1. Score every remaining candidate by how many targets it leads to
    2. Take the highest score (first candidate wins ties)
    3. Drop it as redundant if a preclusion fires against a completed course
    4. Close the term if its credits do not fit (no smaller substitute)
    5. Accept it and mark it completed
    6. Drop remaining candidates whose exam overlaps the accepted one
    7. Propagate logic-node satisfaction
    """

    def __init__(
        self,
        graph: CourseGraph,
        targets: Iterable[str],
        max_credits: int,
        is_deprioritized: Callable[[str], bool] = is_graduate_course,
    ) -> None:
        """Initialize the selector.

        Args:
            graph: Course graph of the run
            targets: Target course ids
            max_credits: Per-term credit cap
            is_deprioritized: Predicate on course codes whose score is scaled
                down by GRADUATE_PENALTY
        """
        self.graph = graph
        self.targets = set(targets)
        self.max_credits = max_credits
        self.is_deprioritized = is_deprioritized

    def select(self, available: Iterable[str], state: PlannerState) -> list[str]:
        """Select courses for a term from an availability snapshot.

        Args:
            available: Available course ids (order breaks score ties)
            state: Planner state, updated in place

        Returns:
            Selected course ids in selection order
        """
        selected: list[str] = []
        used_credits = 0
        remaining = list(dict.fromkeys(available))

        while remaining and used_credits < self.max_credits:
            best_id = self.find_best_course(remaining, state)
            if best_id is None:
                break

            course = self.graph.course(best_id)

            blocker = self._find_precluding_course(course, state)
            if blocker is not None:
                logger.debug(f"{course.code} is precluded by completed course {blocker.code}")
                remaining.remove(best_id)
                state.redundant.add(best_id)
                continue

            credits = course.credit_weight
            if used_credits + credits > self.max_credits:
                logger.debug(
                    f"{course.code} ({credits} credits) does not fit "
                    f"({used_credits}/{self.max_credits}); closing term"
                )
                break

            selected.append(best_id)
            used_credits += credits
            remaining.remove(best_id)
            state.completed.add(best_id)

            if course.exam is not None:
                self._drop_exam_clashes(course, remaining, state)

            self._propagate(best_id, state)

        return selected

    def find_best_course(self, candidates: list[str], state: PlannerState) -> str | None:
        """Return the candidate with the strictly highest score."""
        best_id: str | None = None
        best_score = -1.0

        for course_id in candidates:
            score = self.score_course(course_id, state)
            if score > best_score:
                best_score = score
                best_id = course_id

        return best_id

    def score_course(self, course_id: str, state: PlannerState) -> float:
        """Impact score of taking a course now.

        Walks dependents (nodes requiring this one, directly or through logic
        nodes) depth-first. Every target course reached adds
        TARGET_SCORE * DEPTH_DECAY ** depth, the candidate itself counting at
        depth 0. Already satisfied logic nodes are not entered. The visited
        set belongs to this candidate only.

        Args:
            course_id: Candidate course id
            state: Current planner state

        Returns:
            Score (0.0 when no target is reachable)
        """
        score = 0.0
        stack: list[tuple[str, int]] = [(course_id, 0)]
        visited = {course_id}

        while stack:
            node_id, depth = stack.pop()

            if node_id in self.targets and self.graph.is_course(node_id):
                score += TARGET_SCORE * DEPTH_DECAY**depth

            for parent_id in self.graph.dependents(node_id):
                if parent_id in visited:
                    continue
                if self.graph.is_logic(parent_id) and state.is_satisfied(parent_id):
                    continue
                visited.add(parent_id)
                stack.append((parent_id, depth + 1))

        if self.is_deprioritized(self.graph.course(course_id).code):
            score *= GRADUATE_PENALTY

        return score

    def _find_precluding_course(self, course: Course, state: PlannerState) -> Course | None:
        """Completed course that precludes (or is precluded by) the given one."""
        for completed_id in state.completed:
            completed = self.graph.get(completed_id)
            if isinstance(completed, Course) and course.precludes(completed):
                return completed
        return None

    def _drop_exam_clashes(
        self, course: Course, remaining: list[str], state: PlannerState
    ) -> None:
        """Remove remaining candidates whose exam overlaps the course's exam."""
        for other_id in list(remaining):
            other = self.graph.course(other_id)
            if other.exam is not None and course.exam.overlaps(other.exam):
                logger.debug(f"{other.code} exam clashes with {course.code}; dropped")
                remaining.remove(other_id)
                state.redundant.add(other_id)

    def _propagate(self, course_id: str, state: PlannerState) -> None:
        """Advance logic nodes above a newly accepted course."""
        for logic_id in update_logic_satisfaction(course_id, state, self.graph):
            logger.debug(f"Satisfied {self.graph.describe_logic(logic_id)}")


def select_courses_for_term(
    available: Iterable[str],
    state: PlannerState,
    graph: CourseGraph,
    targets: Iterable[str],
    max_credits: int,
    is_deprioritized: Callable[[str], bool] = is_graduate_course,
) -> list[str]:
    """Select one term's courses without keeping a selector around.

    Returns:
        Selected course ids in selection order; the state is updated in place
    """
    selector = CourseSelector(graph, targets, max_credits, is_deprioritized)
    return selector.select(available, state)
