"""Picking and ordering cards for a study session."""
import math
from datetime import datetime

from flashdeck.models import Difficulty, Flashcard, StudyMode

DIFFICULTY_ORDER = {Difficulty.HARD: 3, Difficulty.MEDIUM: 2, Difficulty.EASY: 1}
DIFFICULT_ACCURACY = 0.7
DIFFICULT_EASE_FACTOR = 1.6

SECONDS_PER_DAY = 24 * 60 * 60


def get_due_cards(cards: list[Flashcard], now: datetime) -> list[Flashcard]:
    """Cards whose review date has arrived. New cards without a date are always due."""
    due = []
    for card in cards:
        s = card.schedule
        if s.next_review is None:
            if s.is_new:
                due.append(card)
        elif s.next_review <= now:
            due.append(card)
    return due


def get_new_cards(cards: list[Flashcard]) -> list[Flashcard]:
    return [c for c in cards if c.schedule.is_new]


def get_difficult_cards(cards: list[Flashcard]) -> list[Flashcard]:
    """Reviewed cards that are labelled hard, mostly missed, or at a low ease."""
    return [
        c for c in cards
        if not c.schedule.is_new and (
            c.difficulty is Difficulty.HARD
            or c.schedule.accuracy < DIFFICULT_ACCURACY
            or c.schedule.ease_factor <= DIFFICULT_EASE_FACTOR
        )
    ]


def days_overdue(card: Flashcard, now: datetime) -> int:
    if card.schedule.next_review is None:
        return 0
    elapsed = (now - card.schedule.next_review).total_seconds()
    return max(0, math.ceil(elapsed / SECONDS_PER_DAY))


def sort_cards_by_priority(cards: list[Flashcard], now: datetime) -> list[Flashcard]:
    """Most overdue first, then hardest label, then lowest ease factor."""
    return sorted(
        cards,
        key=lambda c: (
            -days_overdue(c, now),
            -DIFFICULTY_ORDER[c.difficulty],
            c.schedule.ease_factor,
        ),
    )


def filter_by_study_mode(cards: list[Flashcard], mode, now: datetime) -> list[Flashcard]:
    mode = StudyMode.parse(mode)
    if mode is StudyMode.NEW:
        return get_new_cards(cards)
    if mode is StudyMode.REVIEW:
        return [
            c for c in cards
            if c.schedule.next_review is not None and c.schedule.next_review <= now
        ]
    if mode is StudyMode.DIFFICULT:
        return [
            c for c in cards
            if c.difficulty is Difficulty.HARD
            or (not c.schedule.is_new and c.schedule.accuracy < DIFFICULT_ACCURACY)
        ]
    return list(cards)


def days_until_due(card: Flashcard, now: datetime) -> int:
    """Whole days past the due date; negative while the card is still ahead."""
    elapsed = (now - card.schedule.next_review).total_seconds()
    return math.floor(elapsed / SECONDS_PER_DAY)


def get_review_candidates(
    cards: list[Flashcard],
    now: datetime,
    max_cards: int = 20,
    include_new: bool = True,
) -> list[dict]:
    """Rank cards for review: new 100, overdue 50-90, due today 30, due tomorrow 10.

    Cards further ahead (or reviewed cards with no due date) are left out.
    """
    candidates = []
    for card in cards:
        s = card.schedule
        if s.is_new and include_new:
            priority, reason = 100, "new"
        elif s.next_review is None:
            continue
        else:
            overdue = days_until_due(card, now)
            if overdue > 0:
                priority, reason = 50 + min(overdue * 10, 40), f"overdue_{overdue}d"
            elif overdue == 0:
                priority, reason = 30, "due_today"
            elif overdue == -1:
                priority, reason = 10, "due_soon"
            else:
                continue
        candidates.append({"card": card, "priority": priority, "reason": reason})
    candidates.sort(key=lambda c: c["priority"], reverse=True)
    return candidates[:max_cards]
