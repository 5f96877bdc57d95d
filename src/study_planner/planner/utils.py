"""Utility functions for term planning."""

import re
from collections.abc import Callable

from ..constants import TERMS_PER_YEAR
from ..models import TermType
from .constants import GRADUATE_COURSE_PATTERN


def term_year(term_id: int) -> int:
    """Academic year (1-based) of a term id.

    Examples:
        0 -> 1 (Year 1 Term 1)
        3 -> 1 (Year 1 Short Term B)
        4 -> 2 (Year 2 Term 1)
    """
    return term_id // TERMS_PER_YEAR + 1


def term_label(term_id: int) -> str:
    """Human-readable label for a term id, e.g. 'Y2 Term 1'."""
    return f"Y{term_year(term_id)} {TermType.from_term_id(term_id).display_name}"


def is_special_term(term_id: int) -> bool:
    """True if the term id falls on a short (special) term."""
    return TermType.from_term_id(term_id).is_special


def make_code_predicate(pattern: str) -> Callable[[str], bool]:
    """Build a predicate that matches course codes against a regex.

    Args:
        pattern: Regular expression applied with re.match

    Returns:
        Callable returning True for matching codes
    """
    compiled = re.compile(pattern)

    def predicate(code: str) -> bool:
        return compiled.match(code) is not None

    return predicate


is_graduate_course = make_code_predicate(GRADUATE_COURSE_PATTERN)
