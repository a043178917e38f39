"""
Quiz session building

Includes:
- CardSelector: per-deck selection policies (easy / medium / hard / expert)
- InterleavingScheduler: multi-deck merge with no back-to-back deck repeats
"""
from .card_selector import CardSelector, POLICIES
from .interleaved_scheduler import InterleavingScheduler

__all__ = [
    "CardSelector",
    "POLICIES",
    "InterleavingScheduler",
]
