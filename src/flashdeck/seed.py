"""Built-in starter deck for the terminal drill."""
from datetime import datetime
from typing import Optional

from flashdeck.models import Flashcard, new_schedule

STARTER_CARDS = [
    ("sr-1", "What does an ease factor control?",
     "How quickly the review interval grows after correct answers.", ["basics"], "easy"),
    ("sr-2", "What is the minimum ease factor?",
     "1.3, so a card can never spiral into ever-shorter intervals.", ["basics"], "medium"),
    ("sr-3", "What happens to the interval after an incorrect answer?",
     "It resets to one day.", ["grades"], "easy"),
    ("sr-4", "What happens to the interval after a hard answer?",
     "It is halved (rounded, never below one day).", ["grades"], "medium"),
    ("sr-5", "How is the next interval computed after a correct answer?",
     "Old interval times the new ease factor, rounded to whole days.", ["grades"], "hard"),
    ("sr-6", "Why space reviews out instead of repeating daily?",
     "Recall at the edge of forgetting strengthens memory more than easy repetition.", ["theory"], "hard"),
    ("sr-7", "Which cards count as difficult?",
     "Cards labelled hard, answered correctly under 70% of the time, or with ease at or below 1.6.",
     ["selection"], "medium"),
    ("sr-8", "In what order are due cards studied?",
     "Most overdue first, then hardest label, then lowest ease factor.", ["selection"], "medium"),
]


def starter_deck(now: Optional[datetime] = None) -> list[Flashcard]:
    """Fresh cards from STARTER_CARDS, all due at `now` (or new with no date)."""
    return [
        Flashcard(id=card_id, front=front, back=back, tags=list(tags), schedule=new_schedule(difficulty, now))
        for card_id, front, back, tags, difficulty in STARTER_CARDS
    ]
