"""Constants for term planning."""

# Highest term id the planner will fill (ids 0..31 cover eight academic years)
MAX_TERMS = 31

# Default per-term credit cap
DEFAULT_MAX_CREDITS = 20

# Usual credit cap range; caps outside it are allowed but logged
MIN_REASONABLE_CREDITS = 16
MAX_REASONABLE_CREDITS = 40

# Impact scoring
# A target reached after `depth` dependent hops adds TARGET_SCORE * DEPTH_DECAY ** depth
TARGET_SCORE = 100.0
DEPTH_DECAY = 0.8

# Graduate-level courses keep GRADUATE_PENALTY of their score
GRADUATE_PENALTY = 0.1

# Letter prefix followed by 5 or 6, e.g. "CS5229", "MA6202"
GRADUATE_COURSE_PATTERN = r"^[a-zA-Z]*[56]"
