"""Interactive CLI application."""
import time
from pathlib import Path

import structlog
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from hanyu_tutor.config import get_active_user, get_db_path, is_production, set_active_user
from hanyu_tutor.dashboard import (
    get_class_analytics, get_learner_report, get_score_color, get_streak_label,
    get_user_statistics, get_user_streak,
)
from hanyu_tutor.db import init_db
from hanyu_tutor.exercises import get_exercises, is_seeded, seed_exercises
from hanyu_tutor.grader import CORRECT, EMPTY, grade_submission
from hanyu_tutor.importer import import_history
from hanyu_tutor.log import configure_logging
from hanyu_tutor.models import DEFAULT_LANGUAGE, LEVELS
from hanyu_tutor.progress import ProgressValidationError, find_by_user, record_completion, reset_progress

console = Console()
logger = structlog.get_logger()

EXIT_WORDS = ("q", "menu")
SESSION_SIZE = 5


class SessionExitRequested(Exception):
    """Raised when the learner abandons a session mid-way."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def show_welcome(user_id: str):
    console.print(Panel(
        f"[bold]Hanyu Tutor[/bold]\n[dim]Mandarin pinyin practice[/dim]\n\nLearner: [cyan]{user_id}[/cyan]",
        title="Welcome", border_style="red",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("practice", "Practice quiz (answers shown as you go)"),
        ("test", "Level test (results at the end)"),
        ("dashboard", "Streak + score summary"),
        ("history", "Recent quizzes and tests"),
        ("report", "Detailed report for a learner"),
        ("analytics", "Activity across all learners"),
        ("import", "Import offline score history"),
        ("user", "Switch learner"),
        ("reset", "Delete a learner's history"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ask_level() -> str:
    return Prompt.ask("Level", choices=list(LEVELS), default="newbie")


def run_exercise_session(db_path: str, user_id: str, exercises: list, kind: str = "quiz",
                         level: str = "newbie", language: str = DEFAULT_LANGUAGE):
    """Ask each exercise, grade it, and record the finished session.

    Returns the stored CompletionEvent, or None when there was nothing to ask.
    Raises SessionExitRequested if the learner quits; nothing is saved then.
    """
    if not exercises:
        console.print("[yellow]No exercises available for this level yet![/yellow]")
        return None
    reveal = kind == "quiz"
    title = "Practice Quiz" if reveal else "Level Test"
    console.print(f"\n[bold]{title}[/bold] — {len(exercises)} questions [dim](q to quit)[/dim]\n")
    started = time.monotonic()
    correct = 0
    missed = []
    for i, ex in enumerate(exercises, 1):
        console.print(f"[bold]Q{i}.[/bold] {ex.prompt}")
        if ex.hint:
            console.print(f"[dim]Hint: {ex.hint}[/dim]")
        while True:
            result = grade_submission(session_prompt("Your answer"), ex.answers)
            if result.status != EMPTY:
                break
            console.print("[yellow]Please enter your answer.[/yellow]")
        if result.status == CORRECT:
            correct += 1
            if reveal:
                console.print("[green]Correct! Well done![/green]")
        else:
            missed.append((ex, result))
            if reveal:
                console.print(f"[red]Not quite.[/red] The answer could be: [green]{result.display_answers}[/green]")
        console.print()

    if not reveal and missed:
        console.print("[bold]Review:[/bold]")
        for ex, result in missed:
            console.print(f"  [red]✗[/red] {ex.prompt} → [green]{result.display_answers}[/green]")

    event = record_completion(
        db_path, user_id, kind, language, level, correct, len(exercises),
        time_spent_seconds=int(time.monotonic() - started),
    )
    color = get_score_color(event.percentage)
    console.print(f"\n[bold]Score: {correct}/{len(exercises)} ([{color}]{event.percentage}%[/{color}])[/bold]\n")
    return event


def cmd_session(db_path: str, user_id: str, kind: str):
    level = ask_level()
    count = None if kind == "test" else SESSION_SIZE
    exercises = get_exercises(db_path, level, count=count)
    run_exercise_session(db_path, user_id, exercises, kind=kind, level=level)


def render_statistics(stats, title: str = "Scores by Level"):
    console.print(f"\n  Tests: [bold]{stats.total_tests}[/bold]  |  "
                  f"Quizzes: [bold]{stats.total_quizzes}[/bold]  |  "
                  f"Average: [bold]{stats.average_score}%[/bold]  |  "
                  f"Best: [bold]{stats.best_score}%[/bold]  |  "
                  f"Time: [bold]{stats.total_time_spent // 60} min[/bold]")
    if not stats.by_level:
        return
    table = Table(title=title)
    table.add_column("Level", style="cyan")
    table.add_column("Quizzes", justify="right")
    table.add_column("Tests", justify="right")
    table.add_column("Average", justify="right")
    table.add_column("Best", justify="right")
    for group in sorted(stats.by_level.values(), key=lambda g: (g.language, LEVELS.index(g.level))):
        color = get_score_color(group.average_score)
        table.add_row(
            f"{group.language} {group.level}",
            str(group.quizzes),
            str(group.tests),
            f"[{color}]{group.average_score}%[/{color}]",
            f"{group.best_score}%",
        )
    console.print(table)


def render_activity(events, title: str = "Recent Activity"):
    if not events:
        console.print("[dim]No activity yet.[/dim]")
        return
    table = Table(title=title)
    table.add_column("When")
    table.add_column("Type")
    table.add_column("Level", style="cyan")
    table.add_column("Score", justify="right")
    for e in events:
        color = get_score_color(e.percentage)
        table.add_row(
            e.completed_at.strftime("%Y-%m-%d %H:%M"),
            e.kind,
            f"{e.language} {e.level}",
            f"{e.score}/{e.total} [{color}]({e.percentage}%)[/{color}]",
        )
    console.print(table)


def cmd_dashboard(db_path: str, user_id: str):
    streak = get_user_streak(db_path, user_id)
    stats = get_user_statistics(db_path, user_id)
    console.print(Panel(
        f"Current streak: [bold]{get_streak_label(streak.current)}[/bold]\n"
        f"Best streak: [bold]{streak.best}[/bold] day{'s' if streak.best != 1 else ''}",
        title=f"Dashboard — {user_id}", border_style="blue",
    ))
    render_statistics(stats)
    render_activity(stats.recent_activity)


def cmd_history(db_path: str, user_id: str):
    kind = Prompt.ask("Show", choices=["all", "quiz", "test"], default="all")
    events = find_by_user(db_path, user_id, kind=None if kind == "all" else kind, limit=20)
    render_activity(events, title="History")


def cmd_report(db_path: str, user_id: str):
    target = Prompt.ask("Learner", default=user_id)
    report = get_learner_report(db_path, target)
    streak = report["streak"]
    console.print(Panel(
        f"Current streak: [bold]{streak.current}[/bold]  |  Best streak: [bold]{streak.best}[/bold]\n"
        f"Activities in the last 30 days: [bold]{len(report['progress_over_time'])}[/bold]",
        title=f"Learner Report — {target}", border_style="blue",
    ))
    render_statistics(report["statistics"])
    render_activity(report["recent_activity"])


def cmd_analytics(db_path: str):
    data = get_class_analytics(db_path)
    console.print(Panel(
        f"Learners: [bold]{data['total_learners']}[/bold]  |  "
        f"Active this week: [bold]{data['active_learners']}[/bold]  |  "
        f"Activities: [bold]{data['total_activities']}[/bold]\n"
        f"Average: [bold]{data['average_score']}%[/bold]  |  "
        f"Tests: [bold]{data['average_test_score']}%[/bold]  |  "
        f"Quizzes: [bold]{data['average_quiz_score']}%[/bold]",
        title="Analytics", border_style="blue",
    ))
    if data["popular_levels"]:
        table = Table(title="Most Popular Levels")
        table.add_column("Level", style="cyan")
        table.add_column("Activities", justify="right")
        for p in data["popular_levels"]:
            table.add_row(f"{p['language']} {p['level']}", str(p["activities"]))
        console.print(table)


def cmd_import(db_path: str, user_id: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    result = import_history(db_path, user_id, file_path)
    console.print(f"[green]Imported {result['imported']} activities[/green]"
                  + (f" [yellow]({result['skipped']} skipped)[/yellow]" if result["skipped"] else ""))


def cmd_user(db_path: str) -> str:
    user_id = Prompt.ask("Learner id", default=get_active_user(db_path))
    set_active_user(db_path, user_id)
    console.print(f"[green]Now studying as {user_id.strip()}[/green]")
    return user_id.strip()


def cmd_reset(db_path: str, user_id: str):
    target = Prompt.ask("Learner to reset", default=user_id)
    if not Confirm.ask(f"[red]Delete all progress for {target}?[/red]", default=False):
        return
    deleted = reset_progress(db_path, target)
    console.print(f"[green]Progress reset for {target} ({deleted} records deleted)[/green]")


def main():
    configure_logging(production=is_production())
    db_path = get_db_path()
    init_db(db_path)
    if not is_seeded(db_path):
        console.print("[dim]Setting up for first use...[/dim]")
        seed_exercises(db_path)
        console.print("[green]Ready![/green]\n")

    user_id = get_active_user(db_path)
    show_welcome(user_id)

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="practice").strip().lower()
        try:
            if choice == "practice":
                cmd_session(db_path, user_id, "quiz")
            elif choice == "test":
                cmd_session(db_path, user_id, "test")
            elif choice == "dashboard":
                cmd_dashboard(db_path, user_id)
            elif choice == "history":
                cmd_history(db_path, user_id)
            elif choice == "report":
                cmd_report(db_path, user_id)
            elif choice == "analytics":
                cmd_analytics(db_path)
            elif choice == "import":
                cmd_import(db_path, user_id)
            elif choice == "user":
                user_id = cmd_user(db_path)
            elif choice == "reset":
                cmd_reset(db_path, user_id)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]再见! See you tomorrow.[/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Session abandoned, nothing was saved.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except ProgressValidationError as e:
            console.print(f"[red]Could not save progress: {e}[/red]")
        except Exception as e:
            logger.exception("command_failed", command=choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
