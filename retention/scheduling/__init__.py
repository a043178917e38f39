"""
Spaced repetition scheduling

Includes:
- SchedulingEngine: SM-2 next-state computation
- SM2Parameters: tunable SM-2 policy constants
- Due/new card helpers and deck retention statistics
"""
from .sm2_algorithm import SchedulingEngine, SM2Parameters
from .statistics import (
    get_due_cards,
    get_new_cards,
    calculate_deck_statistics,
    MATURE_INTERVAL_DAYS,
)

__all__ = [
    "SchedulingEngine",
    "SM2Parameters",
    "get_due_cards",
    "get_new_cards",
    "calculate_deck_statistics",
    "MATURE_INTERVAL_DAYS",
]
