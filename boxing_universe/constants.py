"""Shared universe constants.

Centralises magic numbers and string literals that are referenced by
multiple modules so they have a single source of truth.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------
WEEKS_PER_YEAR: int = 52
"""Simulated weeks in one calendar year."""

RETIREMENT_CADENCE_WEEKS: int = 4
"""Retirement and per-body ranking passes only run on weeks divisible by this."""

HALL_OF_FAME_WEEK: int = 52
"""Week of the year on which Hall-of-Fame voting happens."""

# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------
MIN_ATTRIBUTE: float = 30.0
"""Absolute minimum for any fighter skill."""

MAX_ATTRIBUTE: float = 99.0
"""Absolute maximum for any fighter skill."""

ATTRIBUTE_CATEGORIES: tuple[str, ...] = (
    "power",
    "speed",
    "stamina",
    "defense",
    "offense",
    "technical",
    "mental",
)
"""The seven attribute categories every fighter carries."""

# ---------------------------------------------------------------------------
# Sanctioning organisations
# ---------------------------------------------------------------------------
LINEAL_TITLE: str = "LINEAL"
"""Pseudo-organisation used for the division's lineal championship."""

RANKED_SLOTS: int = 15
"""Number of ranked contenders per division (champion excluded)."""

# ---------------------------------------------------------------------------
# Fight methods
# ---------------------------------------------------------------------------
STOPPAGE_METHODS: frozenset[str] = frozenset({"KO", "TKO"})
DRAW_METHOD: str = "Draw"
DECISION_METHOD: str = "Decision"

# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------
CURRENT_UNIVERSE_VERSION: int = 1
"""Serialised universe document format version."""
