"""Application constants.

Contains CV scoring weights, dashboard limits, and filter defaults.
"""

# ---------------------------------------------------------------------------
# Performance score weights
# score = skills*2 + years*5 + match + certification bonus + references bonus
# ---------------------------------------------------------------------------
SKILL_WEIGHT: int = 2
EXPERIENCE_WEIGHT: int = 5
CERTIFICATION_BONUS: int = 15
REFERENCES_BONUS: int = 10

# ---------------------------------------------------------------------------
# Dashboard limits
# ---------------------------------------------------------------------------
TOP_PERFORMERS_LIMIT: int = 5
RECENT_APPLICATIONS_LIMIT: int = 4
UPCOMING_INTERVIEWS_LIMIT: int = 4
TREND_DAYS: int = 30
EXPERIENCE_BUCKET_WIDTH: int = 2

# ---------------------------------------------------------------------------
# Sorting page filter defaults
# ---------------------------------------------------------------------------
MIN_EXPERIENCE_DEFAULT: int = 0
MAX_EXPERIENCE_DEFAULT: int = 30

# CVs without a pipeline tag count as freshly applied
DEFAULT_PIPELINE_STATUS: str = "applied"

# ---------------------------------------------------------------------------
# Job posting form rules
# ---------------------------------------------------------------------------
JOB_TITLE_MIN_LENGTH: int = 3
JOB_TEXT_MIN_LENGTH: int = 10

# ---------------------------------------------------------------------------
# Remote procedures
# ---------------------------------------------------------------------------
RPC_INCREMENT_APPLICATIONS: str = "increment_job_applications"
RPC_DECREMENT_APPLICATIONS: str = "decrement_job_applications"
