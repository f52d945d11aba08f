"""Interactive terminal drill over an in-memory deck."""
import logging
from datetime import datetime, timezone

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from flashdeck.config import LOG_LEVEL
from flashdeck.models import Flashcard, Grade, InvalidGradeError
from flashdeck.seed import starter_deck
from flashdeck.selection import get_due_cards, sort_cards_by_priority
from flashdeck.stats import (
    analyze_learning_progress, get_accuracy_color, get_accuracy_label, get_study_stats,
    recommend_session_size, summarize_session,
)

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")
GRADE_SHORTCUTS = {"1": Grade.HARD, "2": Grade.INCORRECT, "3": Grade.CORRECT}


class SessionExitRequested(Exception):
    """User asked to leave the current drill."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def parse_grade_answer(answer: str) -> Grade:
    answer = answer.strip().lower()
    if answer in GRADE_SHORTCUTS:
        return GRADE_SHORTCUTS[answer]
    return Grade.parse(answer)


def ask_grade() -> Grade:
    while True:
        answer = session_prompt("Grade (1=hard, 2=incorrect, 3=correct)")
        try:
            return parse_grade_answer(answer)
        except InvalidGradeError:
            console.print("[red]Please answer correct, hard or incorrect (or 1/2/3).[/red]")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("drill", "Study due cards"),
        ("stats", "Deck statistics"),
        ("due", "List upcoming reviews"),
        ("progress", "Mastery by tag"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<8}[/cyan] {desc}")


def run_drill(deck: dict[str, Flashcard], clock=utcnow) -> list[Grade]:
    """Drill due cards, replacing each graded card in `deck`. Returns the grades given.

    `clock` is read once to pick the session's cards and again at each grade.
    """
    now = clock()
    cards = list(deck.values())
    due = sort_cards_by_priority(get_due_cards(cards, now), now)
    due = due[:recommend_session_size(cards, now)]
    if not due:
        console.print("[yellow]No flashcards due right now![/yellow]")
        return []
    console.print(f"\n[bold]Flashcard Drill[/bold] ({len(due)} cards)\n")
    grades = []
    try:
        for i, card in enumerate(due, 1):
            console.print(Panel(card.front, title=f"Card {i}/{len(due)}", border_style="cyan"))
            session_prompt("[dim]Press Enter to reveal answer[/dim]", default="")
            console.print(Panel(card.back, border_style="green"))
            grade = ask_grade()
            updated = card.review(grade, clock())
            deck[card.id] = updated
            grades.append(grade)
            console.print(
                f"[dim]Next review in {updated.schedule.interval} day(s), "
                f"ease {updated.schedule.ease_factor:.2f}[/dim]\n"
            )
    except SessionExitRequested:
        console.print("[dim]Drill stopped.[/dim]")
    show_session_summary(grades)
    return grades


def show_session_summary(grades: list[Grade]):
    if not grades:
        return
    summary = summarize_session(grades)
    color = get_accuracy_color(summary["accuracy"])
    console.print(
        f"[bold]Studied {summary['cards_studied']} cards, "
        f"{summary['correct_answers']} correct[/bold] "
        f"([{color}]{summary['accuracy']}% {get_accuracy_label(summary['accuracy'])}[/{color}])"
    )


def cmd_stats(deck: dict[str, Flashcard], now=None):
    now = now or utcnow()
    stats = get_study_stats(list(deck.values()), now)
    table = Table(title="Deck Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Cards", str(stats["total"]))
    table.add_row("New", str(stats["new"]))
    table.add_row("Due", str(stats["due"]))
    table.add_row("Difficult", str(stats["difficult"]))
    table.add_row("Reviews", str(stats["total_reviews"]))
    color = get_accuracy_color(stats["average_accuracy"])
    table.add_row("Accuracy", f"[{color}]{stats['average_accuracy']}%[/{color}]")
    console.print(table)


def cmd_due(deck: dict[str, Flashcard]):
    table = Table(title="Upcoming Reviews")
    table.add_column("Card")
    table.add_column("Difficulty")
    table.add_column("Interval", justify="right")
    table.add_column("Next Review")
    cards = sorted(deck.values(), key=lambda c: (c.schedule.next_review is not None, c.schedule.next_review or 0))
    for card in cards:
        nxt = card.schedule.next_review
        table.add_row(
            card.front,
            card.difficulty.value,
            f"{card.schedule.interval}d",
            nxt.strftime("%Y-%m-%d %H:%M") if nxt else "new",
        )
    console.print(table)


def cmd_progress(deck: dict[str, Flashcard], now=None, timeframe: str = "all"):
    now = now or utcnow()
    report = analyze_learning_progress(list(deck.values()), now, timeframe)
    table = Table(title="Learning Progress")
    table.add_column("Tag", style="cyan")
    table.add_column("Cards", justify="right")
    table.add_column("Mastered", justify="right")
    table.add_column("Struggling", justify="right")
    for tag, counts in sorted(report["tags"].items()):
        table.add_row(tag, str(counts["total"]), str(counts["mastered"]), str(counts["struggling"]))
    console.print(table)
    milestone = report["next_milestone"]
    console.print(f"\n  Next milestone: [bold]{milestone['description']}[/bold] ({milestone['current']}/{milestone['target']})")
    for rec in report["recommendations"]:
        console.print(f"  [yellow]{rec}[/yellow]")


def main():
    logging.basicConfig(level=LOG_LEVEL)
    deck = {card.id: card for card in starter_deck()}
    logger.info("Loaded starter deck with %d cards", len(deck))
    console.print(Panel("[bold]flashdeck[/bold]\n[dim]Spaced repetition drill[/dim]", title="Welcome", border_style="blue"))

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="drill").strip().lower()
        try:
            if choice == "drill":
                run_drill(deck)
            elif choice == "stats":
                cmd_stats(deck)
            elif choice == "due":
                cmd_due(deck)
            elif choice == "progress":
                cmd_progress(deck)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]See you at your next review.[/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")


if __name__ == "__main__":
    main()
