"""Constants for the course graph model."""

# Credit weight used when a course record has none (or zero)
DEFAULT_COURSE_CREDITS = 4

# Number of terms in an academic year: Term 1, Short A, Term 2, Short B
TERMS_PER_YEAR = 4

# Course codes inside free-text preclusion descriptions, e.g. "CS1010, CS1101S"
PRECLUSION_CODE_PATTERN = r"\b[A-Z]{2,3}\d{4}[A-Z]?\b"

# Store semester numbers -> term labels
# 1 and 2 are the main terms, 3 and 4 the short (special) terms
SEMESTER_NUMBER_LABELS = {
    1: "term1",
    2: "term2",
    3: "short_a",
    4: "short_b",
}

# Separator for list-valued cells in CSV / Excel graph tables
LIST_SEPARATOR = ";"

# Node type markers in graph files
COURSE_NODE_TYPES = {"course", "module"}
LOGIC_NODE_TYPES = {"AND", "OR", "NOF"}

# Grades that count as a recorded completion
PASSING_GRADES = {
    "A+", "A", "A-", "B+", "B", "B-", "C+", "C", "D+", "D", "S", "CS", "P",
}
