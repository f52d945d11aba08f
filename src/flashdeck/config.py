"""Scheduler tunables and runtime settings."""
import os
from dataclasses import dataclass

MIN_EASE_FACTOR = 1.3
DEFAULT_EASE_FACTOR = 2.5
INITIAL_INTERVAL = 1

CORRECT_EASE_BONUS = 0.1
HARD_EASE_PENALTY = 0.15
INCORRECT_EASE_PENALTY = 0.2
HARD_INTERVAL_FACTOR = 0.5

LOG_LEVEL = os.environ.get("FLASHDECK_LOG_LEVEL", "WARNING").upper()


@dataclass(frozen=True)
class SchedulerConfig:
    min_ease_factor: float = MIN_EASE_FACTOR
    initial_interval: int = INITIAL_INTERVAL
    correct_ease_bonus: float = CORRECT_EASE_BONUS
    hard_ease_penalty: float = HARD_EASE_PENALTY
    incorrect_ease_penalty: float = INCORRECT_EASE_PENALTY
    hard_interval_factor: float = HARD_INTERVAL_FACTOR

    def __post_init__(self):
        if self.min_ease_factor <= 0:
            raise ValueError(f"min_ease_factor must be positive, got {self.min_ease_factor}")
        if not 0 < self.hard_interval_factor <= 1:
            raise ValueError(f"hard_interval_factor must be in (0, 1], got {self.hard_interval_factor}")
        if self.initial_interval < 1:
            raise ValueError(f"initial_interval must be at least 1, got {self.initial_interval}")
        for name in ("correct_ease_bonus", "hard_ease_penalty", "incorrect_ease_penalty"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")


DEFAULT_CONFIG = SchedulerConfig()
