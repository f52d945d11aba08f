"""Deck statistics, session planning and learning progress."""
from datetime import datetime, timedelta

from flashdeck.config import DEFAULT_EASE_FACTOR
from flashdeck.models import Difficulty, Flashcard, FlashcardSchedulingState, Grade
from flashdeck.scheduler import round_half_up
from flashdeck.selection import (
    get_difficult_cards, get_due_cards, get_new_cards, get_review_candidates,
)

SECONDS_PER_CARD = {Difficulty.EASY: 15, Difficulty.MEDIUM: 25, Difficulty.HARD: 40}
DEFAULT_SECONDS_PER_CARD = 30
MAX_SESSION_CARDS = 20

PLAN_SECONDS_PER_CARD = {Difficulty.EASY: 30, Difficulty.MEDIUM: 60, Difficulty.HARD: 120}
PROGRESS_TIMEFRAMES = {"week": timedelta(days=7), "month": timedelta(days=30), "all": None}
MILESTONES = (10, 25, 50, 100, 200, 500)


def get_accuracy_label(pct: float) -> str:
    if pct >= 80:
        return "GOOD"
    elif pct >= 60:
        return "FAIR"
    return "POOR"


def get_accuracy_color(pct: float) -> str:
    if pct >= 80:
        return "green"
    elif pct >= 60:
        return "yellow"
    return "red"


def classify_difficulty(state: FlashcardSchedulingState) -> Difficulty:
    """Suggest a difficulty label from review performance.

    Unreviewed cards keep whatever label they were authored with. The
    scheduler does not apply this; callers decide whether to relabel.
    """
    if state.is_new:
        return state.difficulty
    if state.accuracy >= 0.8 and state.ease_factor >= 2.2:
        return Difficulty.EASY
    if state.accuracy < 0.6 or state.ease_factor <= 1.5:
        return Difficulty.HARD
    return Difficulty.MEDIUM


def get_study_stats(cards: list[Flashcard], now: datetime) -> dict:
    total_reviews = sum(c.schedule.review_count for c in cards)
    total_correct = sum(c.schedule.correct_count for c in cards)
    avg = (total_correct / total_reviews) * 100 if total_reviews else 0.0
    return {
        "total": len(cards),
        "new": len(get_new_cards(cards)),
        "due": len(get_due_cards(cards, now)),
        "difficult": len(get_difficult_cards(cards)),
        "total_reviews": total_reviews,
        "average_accuracy": round(avg, 1),
    }


def estimate_time_per_card(cards: list[Flashcard]) -> float:
    if not cards:
        return DEFAULT_SECONDS_PER_CARD
    return sum(SECONDS_PER_CARD[c.difficulty] for c in cards) / len(cards)


def recommend_session_size(cards: list[Flashcard], now: datetime, target_minutes: int = 20) -> int:
    """How many cards fit a session of `target_minutes`, capped at 20."""
    stats = get_study_stats(cards, now)
    max_cards = int((target_minutes * 60) // estimate_time_per_card(cards))
    # Due cards first, then a few new and difficult ones
    wanted = stats["due"] + min(5, stats["new"]) + min(3, stats["difficult"])
    return max(1, min(max_cards, wanted, MAX_SESSION_CARDS))


def summarize_session(grades) -> dict:
    grades = [Grade.parse(g) for g in grades]
    correct = sum(1 for g in grades if g is Grade.CORRECT)
    accuracy = (correct / len(grades)) * 100 if grades else 0.0
    return {
        "cards_studied": len(grades),
        "correct_answers": correct,
        "accuracy": round(accuracy, 1),
    }


def estimate_plan_seconds(card: Flashcard) -> float:
    """Study time for one card: new cards take half again as long, low-ease ones a fifth longer."""
    seconds = PLAN_SECONDS_PER_CARD[card.difficulty]
    if card.schedule.is_new:
        return seconds * 1.5
    if card.schedule.ease_factor < 2.0:
        return seconds * 1.2
    return seconds


def plan_study_session(
    cards: list[Flashcard],
    now: datetime,
    available_minutes: int,
    max_new_cards: int = 5,
    focus_difficulty=None,
) -> dict:
    """Pick the highest-priority cards that fit into `available_minutes`.

    Returns the chosen card ids, the estimated minutes, a new/review/overdue
    breakdown and a list of study tips.
    """
    if focus_difficulty is not None:
        focus_difficulty = Difficulty.parse(focus_difficulty)
    available_seconds = available_minutes * 60
    total_seconds = 0.0
    selected = []
    breakdown = {"new": 0, "review": 0, "overdue": 0}

    for candidate in get_review_candidates(cards, now, max_cards=len(cards)):
        card, reason = candidate["card"], candidate["reason"]
        if focus_difficulty is not None and card.difficulty is not focus_difficulty:
            continue
        seconds = estimate_plan_seconds(card)
        if total_seconds + seconds > available_seconds:
            continue
        if reason == "new" and breakdown["new"] >= max_new_cards:
            continue
        selected.append(card.id)
        total_seconds += seconds
        if reason == "new":
            breakdown["new"] += 1
        elif reason.startswith("overdue"):
            breakdown["overdue"] += 1
        else:
            breakdown["review"] += 1

    tips = []
    if breakdown["overdue"]:
        tips.append(f"Start with the {breakdown['overdue']} overdue cards")
    if breakdown["new"]:
        tips.append(f"Take extra time with the {breakdown['new']} new cards")
    if total_seconds < available_seconds * 0.8:
        tips.append("You have time to spare: review extra cards or take short breaks")
    if len(selected) > 15:
        tips.append("Long session: take a five-minute break halfway through")

    return {
        "card_ids": selected,
        "estimated_minutes": round_half_up(total_seconds / 60),
        "breakdown": breakdown,
        "tips": tips,
    }


def is_mastered(state: FlashcardSchedulingState) -> bool:
    return state.correct_count >= 3 and state.ease_factor >= 2.5 and state.accuracy >= 0.8


def is_struggling(state: FlashcardSchedulingState) -> bool:
    return state.ease_factor < 2.0 or (not state.is_new and state.accuracy < 0.6)


def analyze_learning_progress(cards: list[Flashcard], now: datetime, timeframe: str = "week") -> dict:
    """Mastery summary for cards reviewed within `timeframe` (week, month or all).

    Progress is broken down per tag; untagged cards are counted under
    "untagged". Cards never reviewed only count when timeframe is "all".
    """
    if timeframe not in PROGRESS_TIMEFRAMES:
        raise ValueError(f"Invalid timeframe: {timeframe!r} (expected week, month or all)")
    window = PROGRESS_TIMEFRAMES[timeframe]

    relevant = []
    for card in cards:
        reviewed = card.schedule.last_reviewed
        if reviewed is None:
            if window is None:
                relevant.append(card)
        elif window is None or reviewed >= now - window:
            relevant.append(card)

    mastered = [c for c in relevant if is_mastered(c.schedule)]
    struggling = [c for c in relevant if is_struggling(c.schedule)]
    if relevant:
        average_ease = sum(c.schedule.ease_factor for c in relevant) / len(relevant)
    else:
        average_ease = DEFAULT_EASE_FACTOR

    by_tag = {}
    for card in relevant:
        for tag in card.tags or ["untagged"]:
            progress = by_tag.setdefault(tag, {"total": 0, "mastered": 0, "struggling": 0})
            progress["total"] += 1
            progress["mastered"] += is_mastered(card.schedule)
            progress["struggling"] += is_struggling(card.schedule)

    recommendations = []
    if len(struggling) > len(relevant) * 0.3:
        recommendations.append("Many cards need attention: revisit the fundamentals")
    if len(mastered) < len(relevant) * 0.2:
        recommendations.append("Practise daily to build mastery")
    if average_ease < 2.2:
        recommendations.append("Cards look challenging: split complex ones into smaller cards")
    overdue = [c for c in relevant if c.schedule.next_review is not None and c.schedule.next_review < now]
    if overdue:
        recommendations.append(f"{len(overdue)} cards are overdue: review them first")

    target = next((m for m in MILESTONES if m > len(mastered)), len(mastered) + 100)
    return {
        "total": len(relevant),
        "mastered": len(mastered),
        "struggling": len(struggling),
        "average_ease_factor": round(average_ease, 2),
        "tags": by_tag,
        "recommendations": recommendations,
        "next_milestone": {
            "target": target,
            "current": len(mastered),
            "description": f"Master {target} flashcards",
        },
    }
