from datetime import date

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
)


class RichProgressSink:
    """Live progress bar fed by the orchestrator after every processed day."""

    def __init__(self, console: Console, total_days: int):
        self.total_days = total_days
        self.progress = Progress(
            BarColumn(complete_style="magenta"),
            TaskProgressColumn(),
            MofNCompleteColumn(),
            TextColumn("[yellow]{task.fields[day]}"),
            console=console,
        )
        self.task_id = None

    def __enter__(self):
        self.progress.start()
        self.task_id = self.progress.add_task("generate", total=self.total_days, day="")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.progress.stop()

    def on_day_processed(self, day: date, index: int, total: int) -> None:
        self.progress.update(
            self.task_id,
            completed=index,
            total=total,
            day=f"Processing: {day.isoformat()}",
        )
