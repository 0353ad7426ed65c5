"""Interactive CLI application."""
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table

from biblia_ampm.config import (
    get_db_path, get_log_level, get_timezone_name, local_now, parse_date, set_timezone,
)
from biblia_ampm.db import init_db
from biblia_ampm.errors import PlanError
from biblia_ampm.plan import resolve_today
from biblia_ampm.progress import (
    daily_state, mark_daily, mark_weekly, progress_summary, resolve_current_weekly_item,
    user_history,
)
from biblia_ampm.repository import SQLiteStore
from biblia_ampm.seed import DEFAULT_CATECHISM_URL, is_seeded, seed_catechism, seed_plan

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def show_welcome(user_name: str):
    console.print(Panel(
        f"[bold]Bíblia AM/PM[/bold]\n[dim]Daily readings and weekly catechism for {user_name}[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("today", "Today's readings"),
        ("morning", "Mark morning reading done"),
        ("evening", "Mark evening reading done"),
        ("catechism", "This week's catechism question"),
        ("learned", "Mark this week's question studied"),
        ("progress", "Completion history"),
        ("plan", "View the 365-day plan"),
        ("seed", "Load the plan and catechism"),
        ("timezone", "Change the time zone"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ask_date(now):
    """Prompt for a date; blank means today."""
    raw = Prompt.ask("Date (YYYY-MM-DD, blank for today)", default="", show_default=False)
    return parse_date(raw) if raw.strip() else now.date()


def cmd_today(store, user, tz_name: str):
    now = local_now(tz_name)
    today = resolve_today(store, now, user.id)
    if today.assignment is None:
        console.print(f"[yellow]No readings planned for day {today.day_of_year}.[/yellow]")
        return
    a = today.assignment
    table = Table(title=f"Day {today.day_of_year} ({now.date().isoformat()})")
    table.add_column("Stream", style="cyan")
    table.add_column("Reading")
    table.add_row("Old Testament", a.old_testament_ref or "[dim]-[/dim]")
    table.add_row("New Testament", a.new_testament_ref or "[dim]-[/dim]")
    table.add_row("Psalms", a.psalms_ref)
    table.add_row("Proverbs", a.proverbs_ref)
    console.print(table)
    p = today.progress
    morning = "[green]done[/green]" if p and p.morning_completed else "pending"
    evening = "[green]done[/green]" if p and p.evening_completed else "pending"
    console.print(f"  Period: [bold]{today.period}[/bold]  |  Morning: {morning}  |  Evening: {evening}")


def cmd_mark_daily(store, user, tz_name: str, period: str):
    now = local_now(tz_name)
    record = mark_daily(store, user.id, now.date(), period, now)
    state = daily_state(record)
    if state == "complete":
        console.print("[green]Both readings done today![/green]")
    else:
        console.print(f"[green]{period.capitalize()} reading marked.[/green]")


def cmd_catechism(store, user, tz_name: str):
    now = local_now(tz_name)
    rotation = resolve_current_weekly_item(store, user.id, now)
    title = f"Question {rotation.item_number} of {rotation.total_items}"
    if rotation.item is None:
        console.print(f"[yellow]{title} is missing. Re-run 'seed'.[/yellow]")
        return
    console.print(Panel(
        f"[bold]{rotation.item.question}[/bold]\n\n{rotation.item.answer}",
        title=title, border_style="cyan",
    ))
    console.print(
        f"  Week {rotation.week_start.isoformat()} to {rotation.week_end.isoformat()}"
        f"  |  Next question on {rotation.next_rotation.isoformat()}"
        f"  |  Studied {len(rotation.week_progress)} day(s) this week"
    )


def cmd_learned(store, user, tz_name: str):
    now = local_now(tz_name)
    target = ask_date(now)
    record = mark_weekly(store, user.id, target, now)
    console.print(f"[green]Question {record.item_number} marked for {record.date.isoformat()}.[/green]")


def cmd_progress(store, user):
    summary = progress_summary(store, user.id)
    console.print(
        f"\n  Completed days: [bold]{summary['completed']}[/bold]  |  "
        f"Tracked days: [bold]{summary['total']}[/bold]  |  "
        f"Completion: [bold]{summary['percent']}%[/bold]\n"
    )
    history = user_history(store, user.id)
    table = Table(title="Daily Readings")
    table.add_column("Date")
    table.add_column("Day", justify="right")
    table.add_column("Morning")
    table.add_column("Evening")
    for p in history["daily"][:14]:
        table.add_row(
            p.date.isoformat(), str(p.day_of_year),
            "✓" if p.morning_completed else "", "✓" if p.evening_completed else "",
        )
    console.print(table)
    weekly = Table(title="Catechism")
    weekly.add_column("Date")
    weekly.add_column("Question", justify="right")
    for p in history["weekly"][:14]:
        weekly.add_row(p.date.isoformat(), str(p.item_number))
    console.print(weekly)


def cmd_plan(store, tz_name: str):
    now = local_now(tz_name)
    today = resolve_today(store, now)
    table = Table(title="365-Day Reading Plan")
    table.add_column("Day", justify="right")
    table.add_column("Old Testament")
    table.add_column("New Testament")
    table.add_column("Psalms")
    table.add_column("Proverbs")
    for a in store.list_assignments():
        if abs(a.day_of_year - today.day_of_year) > 7:
            continue
        marker = "[bold cyan]" if a.day_of_year == today.day_of_year else ""
        end = "[/bold cyan]" if marker else ""
        table.add_row(
            f"{marker}{a.day_of_year}{end}", a.old_testament_ref, a.new_testament_ref,
            a.psalms_ref, a.proverbs_ref,
        )
    console.print(table)


def cmd_timezone(store, tz_name: str) -> str:
    console.print(f"Current time zone: [cyan]{tz_name}[/cyan]")
    new_name = Prompt.ask("New time zone (e.g. America/Sao_Paulo)", default=tz_name)
    tz_name = set_timezone(store, new_name)
    console.print(f"[green]Using time zone {tz_name}.[/green]")
    return tz_name


def cmd_seed(store):
    clear = Confirm.ask("Clear existing plan and catechism first?", default=False)
    days = seed_plan(store, clear=clear)
    console.print(f"[green]Stored {days} plan days.[/green]")
    source = Prompt.ask("Catechism file or URL", default=DEFAULT_CATECHISM_URL)
    count = seed_catechism(store, source, clear=clear)
    console.print(f"[green]Stored {count} catechism questions.[/green]")


def main():
    setup_logging(get_log_level())
    db_path = get_db_path()
    init_db(db_path)
    store = SQLiteStore(db_path)
    tz_name = get_timezone_name(store)

    user_name = Prompt.ask("Your name", default="reader").strip() or "reader"
    user = store.get_or_create_user(user_name)
    show_welcome(user.name)
    if not is_seeded(store):
        console.print("[yellow]The plan or catechism is not loaded yet. Use 'seed'.[/yellow]")

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="today").strip().lower()
        try:
            if choice == "today":
                cmd_today(store, user, tz_name)
            elif choice in ("morning", "evening"):
                cmd_mark_daily(store, user, tz_name, choice)
            elif choice == "catechism":
                cmd_catechism(store, user, tz_name)
            elif choice == "learned":
                cmd_learned(store, user, tz_name)
            elif choice == "progress":
                cmd_progress(store, user)
            elif choice == "plan":
                cmd_plan(store, tz_name)
            elif choice == "seed":
                cmd_seed(store)
            elif choice == "timezone":
                tz_name = cmd_timezone(store, tz_name)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Até logo![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except PlanError as e:
            console.print(f"[yellow]{e}[/yellow]")
        except Exception as e:
            logger.exception("Command %r failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
