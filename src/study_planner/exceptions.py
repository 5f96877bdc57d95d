"""Custom exceptions for the study planner."""


class PlannerError(Exception):
    """Base exception for planner errors."""

    pass


class GraphLoadError(PlannerError):
    """Graph file could not be turned into a course graph."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        location = f" in '{source}'" if source else ""
        super().__init__(f"Failed to load graph{location}: {message}")


class GraphCycleError(PlannerError):
    """Prerequisite graph contains a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Prerequisite cycle detected: {' -> '.join(cycle)}")


class InvalidRequestError(PlannerError):
    """Plan request parameters are invalid."""

    pass


class EmptyTargetsError(InvalidRequestError):
    """No target courses were given."""

    def __init__(self):
        super().__init__("No target courses specified")


class TargetNotFoundError(InvalidRequestError):
    """Target course codes that do not resolve to a graph node."""

    def __init__(self, missing_codes: list[str]):
        self.missing_codes = missing_codes
        super().__init__(
            f"Target courses not found in graph: {', '.join(missing_codes)}"
        )
