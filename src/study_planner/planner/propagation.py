"""Incremental prerequisite-satisfaction propagation."""

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import CourseGraph
    from .models import PlannerState


def update_logic_satisfaction(
    node_id: str,
    state: "PlannerState",
    graph: "CourseGraph",
) -> list[str]:
    """Propagate a newly satisfied node to the logic nodes above it.

    Logic nodes directly requiring ``node_id`` gain one satisfied child. A
    logic node reaching its requirement is marked satisfied and queues its
    own dependents, breadth-first. Each logic node is processed at most once
    per call, so a node reached through several newly satisfied children
    (a diamond) gains a single count. Satisfied logic nodes are never counted
    again, so ``satisfied`` only flips false -> true.

    Args:
        node_id: Completed course id (or a logic node that became satisfied)
        state: Planner state to update in place
        graph: Course graph of the run

    Returns:
        Ids of logic nodes that became satisfied, in order
    """
    newly_satisfied: list[str] = []
    queue = deque(graph.dependents(node_id))
    processed: set[str] = set()

    while queue:
        logic_id = queue.popleft()
        if logic_id in processed:
            continue
        processed.add(logic_id)

        status = state.logic_status.get(logic_id)
        if status is None or status.satisfied:
            continue

        status.satisfied_count += 1
        if status.satisfied_count >= status.requires:
            status.satisfied = True
            state.satisfied_logic_nodes.add(logic_id)
            newly_satisfied.append(logic_id)
            queue.extend(graph.dependents(logic_id))

    return newly_satisfied
