# tests/test_scheduler.py
from datetime import date, timedelta
from itertools import product

import pytest

from flashdeck.config import SchedulerConfig
from flashdeck.models import Difficulty, FlashcardSchedulingState, Grade, InvalidGradeError
from flashdeck.scheduler import SpacedRepetitionScheduler, round_half_up, update_card


def test_first_review_correct(seed_state, now):
    result = update_card(seed_state, Grade.CORRECT, now)
    assert result.interval == 3  # round(1 * 2.6)
    assert result.ease_factor == pytest.approx(2.6)
    assert result.review_count == 1
    assert result.correct_count == 1
    assert result.last_reviewed == now
    assert result.next_review == now + timedelta(days=3)


def test_first_review_hard(seed_state, now):
    result = update_card(seed_state, Grade.HARD, now)
    assert result.interval == 1
    assert result.ease_factor == pytest.approx(2.35)
    assert result.review_count == 1
    assert result.correct_count == 0
    assert result.next_review == now + timedelta(days=1)


def test_first_review_incorrect(seed_state, now):
    result = update_card(seed_state, Grade.INCORRECT, now)
    assert result.interval == 1
    assert result.ease_factor == pytest.approx(2.3)
    assert result.review_count == 1
    assert result.correct_count == 0
    assert result.next_review == now + timedelta(days=1)


def test_consecutive_correct_grows_geometrically(now):
    state = FlashcardSchedulingState(interval=10, ease_factor=2.5)
    intervals = [state.interval]
    for day in range(3):
        state = update_card(state, Grade.CORRECT, now + timedelta(days=day))
        intervals.append(state.interval)
    assert intervals[1] == 26
    assert intervals == sorted(set(intervals))


def test_incorrect_at_ease_floor_stays_at_floor(now):
    state = FlashcardSchedulingState(interval=5, ease_factor=1.3)
    result = update_card(state, Grade.INCORRECT, now)
    assert result.ease_factor == 1.3
    assert result.interval == 1
    again = update_card(result, Grade.INCORRECT, now)
    assert again.ease_factor == 1.3


def test_hard_clamps_ease_after_adjustment(now):
    state = FlashcardSchedulingState(interval=4, ease_factor=1.4)
    result = update_card(state, Grade.HARD, now)
    assert result.ease_factor == 1.3
    assert result.interval == 2


def test_hard_interval_rounds_half_up(now):
    """5 * 0.5 = 2.5 rounds to 3, not banker's 2."""
    state = FlashcardSchedulingState(interval=5, ease_factor=2.5)
    assert update_card(state, Grade.HARD, now).interval == 3
    state = FlashcardSchedulingState(interval=7, ease_factor=2.5)
    assert update_card(state, Grade.HARD, now).interval == 4


def test_incorrect_resets_long_interval(now):
    state = FlashcardSchedulingState(interval=120, ease_factor=2.8, review_count=9, correct_count=9)
    result = update_card(state, "incorrect", now)
    assert result.interval == 1
    assert result.correct_count == 9
    assert result.review_count == 10


def test_no_upper_bound_on_ease(now):
    state = FlashcardSchedulingState(interval=1, ease_factor=3.0)
    assert update_card(state, Grade.CORRECT, now).ease_factor == pytest.approx(3.1)


def test_difficulty_label_is_carried_through(now):
    state = FlashcardSchedulingState(difficulty=Difficulty.HARD)
    for grade in Grade:
        assert update_card(state, grade, now).difficulty is Difficulty.HARD


def test_input_state_not_mutated(now):
    state = FlashcardSchedulingState(interval=6, ease_factor=2.2, review_count=3, correct_count=2)
    snapshot = FlashcardSchedulingState(interval=6, ease_factor=2.2, review_count=3, correct_count=2)
    update_card(state, Grade.CORRECT, now)
    assert state == snapshot


def test_deterministic(seed_state, now):
    for grade in Grade:
        assert update_card(seed_state, grade, now) == update_card(seed_state, grade, now)


def test_invariants_hold_for_every_grade_sequence(now):
    for sequence in product(list(Grade), repeat=5):
        state = FlashcardSchedulingState()
        for step, grade in enumerate(sequence):
            when = now + timedelta(days=step)
            result = update_card(state, grade, when)
            assert result.interval >= 1
            assert result.ease_factor >= 1.3
            assert result.review_count == state.review_count + 1
            assert result.correct_count - state.correct_count in (0, 1)
            assert result.correct_count <= result.review_count
            assert result.next_review > result.last_reviewed
            state = result


def test_grade_accepts_string_values(seed_state, now):
    assert update_card(seed_state, " Correct ", now) == update_card(seed_state, Grade.CORRECT, now)


@pytest.mark.parametrize("bad", [None, "easy", "", 3, "perfect"])
def test_invalid_grade_raises(seed_state, now, bad):
    with pytest.raises(InvalidGradeError):
        update_card(seed_state, bad, now)


def test_invalid_grade_is_value_error(seed_state, now):
    with pytest.raises(ValueError):
        update_card(seed_state, "blackout", now)


def test_now_must_be_datetime(seed_state):
    with pytest.raises(TypeError):
        update_card(seed_state, Grade.CORRECT, date(2024, 3, 1))
    with pytest.raises(TypeError):
        update_card(seed_state, Grade.CORRECT, "2024-03-01T00:00:00Z")


def test_custom_config(now):
    scheduler = SpacedRepetitionScheduler(SchedulerConfig(hard_interval_factor=0.6, min_ease_factor=1.5))
    state = FlashcardSchedulingState(interval=10, ease_factor=1.6)
    result = scheduler.update_card(state, Grade.HARD, now)
    assert result.interval == 6
    assert result.ease_factor == 1.5


def test_next_schedule_returns_pair():
    scheduler = SpacedRepetitionScheduler()
    assert scheduler.next_schedule(6, 2.5, Grade.INCORRECT) == (1, pytest.approx(2.3))


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    assert round_half_up(26.0) == 26
    assert round_half_up(-2.5) == -3


def test_correct_interval_rounds_half_up(now):
    """Ease 2.4 -> 2.5, and 5 * 2.5 = 12.5 rounds to 13."""
    state = FlashcardSchedulingState(interval=5, ease_factor=2.4)
    result = update_card(state, Grade.CORRECT, now)
    assert result.ease_factor == pytest.approx(2.5)
    assert result.interval == 13
    assert result.next_review == now + timedelta(days=13)
