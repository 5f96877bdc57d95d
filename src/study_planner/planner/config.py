"""Plan request configuration."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..exceptions import InvalidRequestError
from .constants import DEFAULT_MAX_CREDITS, MAX_REASONABLE_CREDITS, MIN_REASONABLE_CREDITS

logger = logging.getLogger(__name__)


@dataclass
class PlanRequest:
    """Parameters of one planning run.

    Attributes:
        targets: Course codes that must end up on the plan
        exempted: Course codes treated as already completed
        use_special_terms: Whether short terms may be scheduled
        max_credits: Per-term credit cap
        preserved: Term id -> course codes kept exactly as given
    """

    targets: list[str] = field(default_factory=list)
    exempted: list[str] = field(default_factory=list)
    use_special_terms: bool = False
    max_credits: int = DEFAULT_MAX_CREDITS
    preserved: dict[int, list[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.max_credits < 1:
            raise InvalidRequestError(
                f"Max credits per term must be positive, got {self.max_credits}"
            )
        if not MIN_REASONABLE_CREDITS <= self.max_credits <= MAX_REASONABLE_CREDITS:
            logger.warning(
                f"Max credits per term {self.max_credits} is outside the usual "
                f"{MIN_REASONABLE_CREDITS}-{MAX_REASONABLE_CREDITS} range"
            )

    @property
    def preserved_codes(self) -> list[str]:
        """All preserved course codes in term order."""
        codes: list[str] = []
        for term_id in sorted(self.preserved):
            codes.extend(self.preserved[term_id])
        return codes

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlanRequest":
        """Create a request from a dictionary.

        Accepts snake_case keys as well as the web API's keys
        (``required``, ``specialTerms``, ``maxMcs``, ``preservedTimetable``).
        Preserved term keys that are not integers are skipped.
        """
        raw_preserved = data.get("preserved", data.get("preservedTimetable")) or {}
        preserved: dict[int, list[str]] = {}
        for term_key, codes in raw_preserved.items():
            try:
                term_id = int(term_key)
            except (TypeError, ValueError):
                logger.warning(f"Ignoring preserved term with non-numeric id '{term_key}'")
                continue
            preserved[term_id] = list(codes) if isinstance(codes, list) else []

        return cls(
            targets=list(data.get("targets", data.get("required", []))),
            exempted=list(data.get("exempted", [])),
            use_special_terms=bool(
                data.get("use_special_terms", data.get("specialTerms", False))
            ),
            max_credits=int(data.get("max_credits", data.get("maxMcs", DEFAULT_MAX_CREDITS))),
            preserved=preserved,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "targets": self.targets,
            "exempted": self.exempted,
            "use_special_terms": self.use_special_terms,
            "max_credits": self.max_credits,
            "preserved": {str(k): v for k, v in sorted(self.preserved.items())},
        }


def load_plan_request(path: Path | str) -> PlanRequest:
    """Load a plan request from a JSON file.

    Args:
        path: Path to the request JSON

    Returns:
        PlanRequest

    Raises:
        InvalidRequestError: If the file is not a JSON object
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise InvalidRequestError(f"Plan request in '{path}' must be a JSON object")
    return PlanRequest.from_dict(data)
