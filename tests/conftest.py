from datetime import datetime, timezone
import pytest

from flashdeck.models import FlashcardSchedulingState
from flashdeck.seed import starter_deck


@pytest.fixture
def now():
    """A fixed 'day 0' so schedules are deterministic."""
    return datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def seed_state():
    return FlashcardSchedulingState()


@pytest.fixture
def deck(now):
    return starter_deck(now)
