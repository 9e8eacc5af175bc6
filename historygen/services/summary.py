from rich.console import Console
from rich.table import Table

from historygen.schemas import GenerationSettings, RunStatistics


def render_settings(console: Console, settings: GenerationSettings):
    """Prints the current generation settings as a two-column table."""
    table = Table(title="Current Settings", show_header=False, title_style="bold blue")
    table.add_column(style="cyan")
    table.add_column(style="magenta")

    start, end = settings.date_range
    chances = " | ".join(
        f"{day[:3]}: {chance}%" for day, chance in settings.weekday_skip_chance.items()
    )
    fixed = ", ".join(sorted(d.isoformat() for d in settings.skip_dates))

    table.add_row("Date range", f"{start} to {end}")
    table.add_row("Commits per day", "{} - {}".format(*settings.commit_range))
    table.add_row("Skipped days per month", "{} - {}".format(*settings.monthly_skip_range))
    table.add_row("Message file", str(settings.message_file or "auto-generated"))
    table.add_row("Uniqueness", f"{round(settings.uniqueness * 100)}%")
    table.add_row("Fixed skip dates", fixed or "none")
    table.add_row("Weekday skip chances", chances or "none")
    console.print(table)


def render_summary(console: Console, stats: RunStatistics):
    """Prints run statistics, including partial ones from an aborted run."""
    table = Table(title="Results", show_header=False, title_style="bold blue")
    table.add_column(style="cyan")
    table.add_column(justify="right", style="magenta")

    table.add_row("Total days", str(stats.total_days))
    table.add_row("Processed days", str(stats.processed_days))
    table.add_row("Commits created", str(stats.total_commits))
    table.add_row("Skipped days", str(stats.skipped_days))
    table.add_section()
    table.add_row("  Fixed dates", str(stats.fixed_skips))
    table.add_row("  Monthly quota", str(stats.monthly_skips))
    table.add_row("  Weekday chance", str(stats.chance_skips))
    console.print(table)

    if stats.interrupted:
        console.print("⚠️  Run was interrupted before the last day.", style="yellow")
