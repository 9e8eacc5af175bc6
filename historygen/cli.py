import argparse
import json
from rich.console import Console
from historygen.config import load_settings
from historygen.engine import HistoryEngine
from historygen.exceptions import ConfigurationError, HistoryGenError
from historygen.schemas import GenerationSettings
from historygen.services.summary import render_settings
from historygen.settings_loader import load_generation_settings
from historygen.utils import load_config, save_path_to_config, setup_logging
import historygen.tui as tui
from historygen.workflows import EditSettingsWorkflowHandler, GenerationWorkflowHandler

__version__ = "1.0.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="historygen",
        description="Generate a backdated git commit history across a date range.",
    )
    parser.add_argument("--config", help="Path to a JSON settings file.")
    parser.add_argument("--start", help="Start date (YYYY-MM-DD).")
    parser.add_argument("--end", help="End date (YYYY-MM-DD).")
    parser.add_argument("--commits-min", type=int, help="Minimum commits per day.")
    parser.add_argument("--commits-max", type=int, help="Maximum commits per day.")
    parser.add_argument("--skip-days-min", type=int, help="Minimum skipped days per month.")
    parser.add_argument("--skip-days-max", type=int, help="Maximum skipped days per month.")
    parser.add_argument("--messages-file", help="File with one commit message per line.")
    parser.add_argument("--uniqueness", type=float, help="Message uniqueness (0-1).")
    parser.add_argument("--skip-dates", help="Dates to always skip, as a JSON array.")
    parser.add_argument(
        "--weekday-chances", help="Weekday skip chances in percent, as a JSON object."
    )
    parser.add_argument("--repo", help="Path to the target git repository.")
    parser.add_argument("--seed", type=int, help="Seed for a reproducible schedule.")
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Run unattended: skip the dashboard, fall back to auto-generated "
        "messages and push only with --push.",
    )
    parser.add_argument(
        "--push",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Push after generating (asks when omitted).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _parse_json_option(raw, expected_type, flag):
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError([f"{flag}: invalid JSON ({e})"]) from e
    if not isinstance(value, expected_type):
        raise ConfigurationError([f"{flag}: expected a JSON {expected_type.__name__}"])
    return value


class App:
    def __init__(self, argv=None):
        self.args = build_parser().parse_args(argv)
        runtime = load_settings()
        self.logger = setup_logging(runtime.log_level)
        self.console = Console()
        if self.args.seed is not None:
            runtime = runtime.model_copy(update={"seed": self.args.seed})
        self.engine = HistoryEngine(self.console, runtime)
        # For dependency injection into handlers
        self.tui = tui

    def _overrides(self) -> dict:
        args = self.args
        return {
            "start": args.start,
            "end": args.end,
            "commits_min": args.commits_min,
            "commits_max": args.commits_max,
            "skip_days_min": args.skip_days_min,
            "skip_days_max": args.skip_days_max,
            "message_file": args.messages_file,
            "uniqueness": args.uniqueness,
            "skip_dates": _parse_json_option(args.skip_dates, list, "--skip-dates"),
            "weekday_chances": _parse_json_option(
                args.weekday_chances, dict, "--weekday-chances"
            ),
        }

    def _get_repository_path(self):
        """Gets the repository path from flags, or from the user utilizing saved paths."""
        if self.args.repo:
            return self.args.repo
        if self.args.yes:
            return self.engine.runtime.repo_path

        config = load_config()
        saved_paths = config.get("saved_paths", [])
        path = self.tui.get_repository_path(saved_paths)

        if path:
            save_path_to_config(path)

        return path

    def _confirm_settings(
        self, repo_path: str, settings: GenerationSettings
    ) -> GenerationSettings | None:
        """Settings dashboard loop; None means the user cancelled."""
        editor = EditSettingsWorkflowHandler(self.engine, self.console, self.tui)
        while True:
            render_settings(self.console, settings)
            action = self.tui.get_dashboard_action()
            if action == "edit":
                settings = editor.execute(repo_path, settings=settings)
            elif action == "start":
                return settings
            else:
                return None

    def run(self) -> int:
        """Main application flow. Returns a process exit code."""
        self.console.print("\n--- 🌱 Git History Generator ---\n", style="bold blue")

        try:
            settings = load_generation_settings(self.args.config, self._overrides())
        except ConfigurationError as e:
            self.console.print("❌ Configuration errors:", style="bold red")
            for error in e.errors:
                self.console.print(f"   • {error}", style="red")
            return 1

        repo_path = self._get_repository_path()
        if not repo_path:
            return 0
        self.logger.info(f"Session started for: {repo_path}")

        if not self.args.yes:
            settings = self._confirm_settings(repo_path, settings)
            if settings is None:
                self.console.print("\n⚠️  Operation cancelled by user.", style="yellow")
                return 0

        handler = GenerationWorkflowHandler(self.engine, self.console, self.tui)
        try:
            handler.execute(
                repo_path,
                settings=settings,
                push=self.args.push,
                assume_yes=self.args.yes,
            )
        except HistoryGenError as e:
            self.console.print(f"\n❌ Application Error: {e}", style="bold red")
            self.logger.error("Top level error", exc_info=True)
            return 1

        self.console.print("Goodbye!", style="bold blue")
        return 0


def main(argv=None) -> int:
    return App(argv).run()


if __name__ == "__main__":
    raise SystemExit(main())
