"""SM-2 style spaced repetition scheduler with a three-grade response."""
import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta

from flashdeck.config import DEFAULT_CONFIG, SchedulerConfig
from flashdeck.models import FlashcardSchedulingState, Grade, InvalidGradeError

logger = logging.getLogger(__name__)

__all__ = ["InvalidGradeError", "SpacedRepetitionScheduler", "default_scheduler", "update_card"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, not 2)."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


class SpacedRepetitionScheduler:
    """Computes the next scheduling state for a graded flashcard.

    Instances hold only their (immutable) config, so one scheduler can be
    shared freely between threads and study sessions.
    """

    def __init__(self, config: SchedulerConfig = DEFAULT_CONFIG):
        self.config = config

    def next_schedule(self, interval: int, ease_factor: float, grade: Grade) -> tuple[int, float]:
        """Return (interval, ease_factor) after a review graded `grade`.

        Args:
            interval: Current interval in days
            ease_factor: Current ease factor
            grade: The user's self-assessment

        Returns:
            Tuple of the new interval (days, at least 1) and ease factor
            (never below the configured minimum).
        """
        cfg = self.config
        if grade is Grade.CORRECT:
            new_ef = ease_factor + cfg.correct_ease_bonus
            new_interval = round_half_up(interval * new_ef)
        elif grade is Grade.HARD:
            new_ef = max(cfg.min_ease_factor, ease_factor - cfg.hard_ease_penalty)
            new_interval = round_half_up(interval * cfg.hard_interval_factor)
        elif grade is Grade.INCORRECT:
            new_ef = max(cfg.min_ease_factor, ease_factor - cfg.incorrect_ease_penalty)
            new_interval = cfg.initial_interval
        else:
            raise InvalidGradeError(f"Unhandled grade: {grade!r}")
        return max(1, new_interval), new_ef

    def update_card(
        self,
        state: FlashcardSchedulingState,
        grade,
        now: datetime,
    ) -> FlashcardSchedulingState:
        """Return the state that follows `state` after one review at `now`.

        `grade` may be a Grade or its string value; anything else raises
        InvalidGradeError. The input state is left untouched.
        """
        grade = Grade.parse(grade)
        if not isinstance(now, datetime):
            raise TypeError(f"now must be a datetime, got {type(now).__name__}")

        interval, ease_factor = self.next_schedule(state.interval, state.ease_factor, grade)
        logger.debug(
            "Rescheduled card: grade=%s interval %d -> %d, ease %.2f -> %.2f",
            grade.value, state.interval, interval, state.ease_factor, ease_factor,
        )
        return replace(
            state,
            interval=interval,
            ease_factor=ease_factor,
            review_count=state.review_count + 1,
            correct_count=state.correct_count + (1 if grade is Grade.CORRECT else 0),
            last_reviewed=now,
            next_review=now + timedelta(days=interval),
        )


default_scheduler = SpacedRepetitionScheduler()


def update_card(state: FlashcardSchedulingState, grade, now: datetime) -> FlashcardSchedulingState:
    """Reschedule `state` with the default scheduler."""
    return default_scheduler.update_card(state, grade, now)
