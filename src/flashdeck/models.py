"""Data classes for flashcards and their spaced-repetition state."""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from flashdeck.config import DEFAULT_EASE_FACTOR, INITIAL_INTERVAL


class InvalidGradeError(ValueError):
    """Raised when a review grade is not one of correct/hard/incorrect."""


class Grade(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    HARD = "hard"

    @classmethod
    def parse(cls, value) -> "Grade":
        """Return the Grade for `value`, failing fast on anything unrecognised."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidGradeError(f"Invalid grade: {value!r} (expected one of correct, hard, incorrect)")


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value) -> "Difficulty":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Invalid difficulty: {value!r}")


class StudyMode(str, Enum):
    NEW = "new"
    REVIEW = "review"
    DIFFICULT = "difficult"
    ALL = "all"

    @classmethod
    def parse(cls, value) -> "StudyMode":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Invalid study mode: {value!r}")


@dataclass(frozen=True)
class FlashcardSchedulingState:
    interval: int = INITIAL_INTERVAL
    ease_factor: float = DEFAULT_EASE_FACTOR
    review_count: int = 0
    correct_count: int = 0
    last_reviewed: Optional[datetime] = None
    next_review: Optional[datetime] = None
    difficulty: Difficulty = Difficulty.MEDIUM

    def __post_init__(self):
        object.__setattr__(self, "difficulty", Difficulty.parse(self.difficulty))

    @property
    def is_new(self) -> bool:
        return self.review_count == 0

    @property
    def accuracy(self) -> float:
        if not self.review_count:
            return 0.0
        return self.correct_count / self.review_count


def new_schedule(difficulty="medium", now: Optional[datetime] = None) -> FlashcardSchedulingState:
    """Seed state for a freshly authored card.

    A card created with a `now` is due immediately; without one it has no due
    date and is picked up as a new card.
    """
    return FlashcardSchedulingState(
        difficulty=Difficulty.parse(difficulty),
        next_review=now,
    )


@dataclass
class Flashcard:
    id: str
    front: str
    back: str
    tags: list[str] = field(default_factory=list)
    schedule: FlashcardSchedulingState = field(default_factory=FlashcardSchedulingState)

    @property
    def difficulty(self) -> Difficulty:
        return self.schedule.difficulty

    def review(self, grade, now: datetime, scheduler=None) -> "Flashcard":
        """Return a copy of this card rescheduled for `grade` at `now`."""
        if scheduler is None:
            from flashdeck.scheduler import default_scheduler
            scheduler = default_scheduler
        return replace(self, tags=list(self.tags), schedule=scheduler.update_card(self.schedule, grade, now))
