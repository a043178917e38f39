"""
Due/new card helpers and deck retention statistics
"""
from datetime import datetime
from typing import Iterable, List, Optional

from retention.models import Card
from retention.models.base import ensure_utc, utc_now
from retention.schemas import DeckStatistics

# Cards with an interval of three weeks or more count as mature
MATURE_INTERVAL_DAYS = 21


def get_due_cards(cards: Iterable[Card], now: Optional[datetime] = None) -> List[Card]:
    """Cards whose next review is at or before now, most overdue first"""
    now = ensure_utc(now) or utc_now()
    due = [c for c in cards if c.scheduling.is_due(now)]
    due.sort(key=lambda c: c.scheduling.next_review_at)
    return due


def get_new_cards(cards: Iterable[Card]) -> List[Card]:
    """Cards that have never been successfully reviewed"""
    return [c for c in cards if c.scheduling.repetitions == 0]


def calculate_deck_statistics(
    cards: Iterable[Card],
    now: Optional[datetime] = None,
) -> DeckStatistics:
    """
    Summarize the retention state of a set of cards

    retention_rate is the share of cards that are not yet due, in percent.
    """
    cards = list(cards)
    total = len(cards)
    if total == 0:
        return DeckStatistics()

    now = ensure_utc(now) or utc_now()
    due = sum(1 for c in cards if c.scheduling.is_due(now))
    new = sum(1 for c in cards if c.scheduling.repetitions == 0)
    mature = sum(1 for c in cards if c.scheduling.interval >= MATURE_INTERVAL_DAYS)
    avg_ease = sum(c.scheduling.ease_factor for c in cards) / total

    return DeckStatistics(
        total_cards=total,
        due_cards=due,
        new_cards=new,
        mature_cards=mature,
        average_ease_factor=round(avg_ease, 3),
        retention_rate=(total - due) / total * 100,
    )
