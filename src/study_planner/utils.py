"""Utility functions for reading course graph records."""

import json
import re
from typing import Any

import pandas as pd

from .constants import LIST_SEPARATOR, PRECLUSION_CODE_PATTERN, SEMESTER_NUMBER_LABELS


def safe_int(value: Any, default: int | None = None) -> int | None:
    """Safely convert a value to int.

    Args:
        value: Value to convert (may be NaN, None, string, float)
        default: Value returned when conversion is not possible

    Returns:
        Integer value or default
    """
    if value is None:
        return default
    if isinstance(value, float) and pd.isna(value):
        return default
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return default


def safe_str(value: Any) -> str:
    """Safely convert a value to a stripped string ('' for NaN/None)."""
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value).strip()


def split_list(value: Any) -> list[str]:
    """Split a list-valued cell into its items.

    Accepts real lists (JSON input) or separator-joined strings (CSV/Excel
    input). Empty items are dropped.

    Examples:
        "CS1010; CS1101S" -> ["CS1010", "CS1101S"]
        ["term1", "term2"] -> ["term1", "term2"]
    """
    if isinstance(value, (list, tuple)):
        return [safe_str(v) for v in value if safe_str(v)]
    text = safe_str(value)
    if not text:
        return []
    return [part.strip() for part in text.split(LIST_SEPARATOR) if part.strip()]


def extract_preclusion_codes(text: str | None) -> list[str]:
    """Extract course codes from a free-text preclusion description.

    Args:
        text: Description like "CS1010 or its equivalents, CS1101S"

    Returns:
        Codes in order of appearance
    """
    if not text:
        return []
    return re.findall(PRECLUSION_CODE_PATTERN, text)


def parse_semester_data(raw: Any) -> tuple[list[str], dict | None]:
    """Parse store semester records into term labels and an exam record.

    Each record carries a ``semester`` number (1, 2 main terms; 3, 4 short
    terms) and optionally ``exam_date``/``examDate`` with
    ``exam_duration``/``examDuration`` in minutes. The first record with an
    exam date supplies the exam.

    Args:
        raw: List of records or its JSON encoding

    Returns:
        Tuple of (term labels, exam dict with start_time/duration_minutes or None)
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw or "[]")
        except json.JSONDecodeError:
            return [], None

    if not isinstance(raw, list):
        return [], None

    labels: list[str] = []
    exam: dict | None = None
    for record in raw:
        if not isinstance(record, dict):
            continue
        label = SEMESTER_NUMBER_LABELS.get(safe_int(record.get("semester")))
        if label and label not in labels:
            labels.append(label)

        exam_date = record.get("exam_date") or record.get("examDate")
        if exam is None and exam_date:
            duration = record.get("exam_duration", record.get("examDuration"))
            exam = {
                "start_time": exam_date,
                "duration_minutes": safe_int(duration, 0),
            }

    return labels, exam
