# historygen/workflows.py
import logging
from abc import ABC, abstractmethod
from rich.console import Console

from historygen.engine import HistoryEngine
from historygen.exceptions import (
    ConfigurationError,
    MessagePoolUnavailable,
    VersionControlError,
)
from historygen.schemas import GenerationSettings, RunStatistics
from historygen.services.summary import render_settings, render_summary
from historygen.settings_loader import OVERRIDE_FIELDS, settings_to_dict, update_setting

logger = logging.getLogger(__name__)


def current_setting_value(settings: GenerationSettings, key: str):
    """The value an override key currently resolves to, in editable form."""
    field, index = OVERRIDE_FIELDS[key]
    value = settings_to_dict(settings)[field]
    return value if index is None else value[index]


class WorkflowHandler(ABC):
    """Abstract base class for all workflow handlers."""

    def __init__(self, engine: HistoryEngine, console: Console, tui_module):
        self.engine = engine
        self.console = console
        self.tui = tui_module

    @abstractmethod
    def execute(self, repo_path: str, **kwargs):
        """Execute the specific workflow."""
        pass


class EditSettingsWorkflowHandler(WorkflowHandler):
    """Interactive editor; returns the (possibly) updated settings."""

    def execute(self, repo_path: str, **kwargs) -> GenerationSettings:
        settings: GenerationSettings = kwargs["settings"]

        while True:
            key = self.tui.get_setting_to_edit()
            if not key:
                return settings

            value = self.tui.prompt_setting_value(
                key, current_setting_value(settings, key)
            )
            if value is None:
                continue

            try:
                settings = update_setting(settings, key, value)
            except ConfigurationError as e:
                for error in e.errors:
                    self.console.print(f"   ❌ {error}", style="red")
                continue

            self.console.print("\n✅ Setting updated.", style="bold green")
            render_settings(self.console, settings)


class GenerationWorkflowHandler(WorkflowHandler):
    """Messages -> Schedule -> Commits -> Summary -> optional Push."""

    def execute(self, repo_path: str, **kwargs) -> RunStatistics | None:
        settings: GenerationSettings = kwargs["settings"]
        push = kwargs.get("push")
        # Unattended runs accept synthetic messages and never push unasked
        assume_yes = kwargs.get("assume_yes", False)
        if push is None and assume_yes:
            push = False

        try:
            messages = self.engine.load_messages(settings)
        except MessagePoolUnavailable:
            if assume_yes:
                logger.warning(
                    f"Message file '{settings.message_file}' missing, using synthetic messages"
                )
                self.console.print(
                    f"   ⚠️  '{settings.message_file}' not found, using auto-generated messages.",
                    style="yellow",
                )
            elif not self.tui.confirm_synthetic_fallback(settings.message_file):
                self.console.print("\n⚠️  Operation cancelled by user.", style="yellow")
                return None
            messages = self.engine.synthetic_messages(settings)

        schedule = self.engine.build_schedule(settings)
        self.console.print(
            f"\n[bold cyan]-- Generating commits for {len(schedule)} days --[/bold cyan]"
        )

        try:
            stats = self.engine.generate(repo_path, schedule, messages)
        except VersionControlError as e:
            self.console.print(f"\n❌ Git Error: {e}", style="bold red")
            if e.statistics is not None:
                render_summary(self.console, e.statistics)
            raise

        render_summary(self.console, stats)

        if push is None:
            push = self.tui.confirm_push()
        if push:
            self.engine.publish(repo_path)
            self.console.print("\n✅ Commits pushed.", style="bold green")
        else:
            self.console.print("\n⚠️  Push skipped.", style="yellow")
        return stats
