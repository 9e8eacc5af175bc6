import logging
import signal
from contextlib import contextmanager
from rich.console import Console
from typing import List, Optional

# Internal Imports
from historygen.config import RuntimeSettings, load_settings
from historygen.core import CommitEmitter, GitRepositoryContext, push_commits
from historygen.messages import MessageProvider
from historygen.orchestrator import RunOrchestrator
from historygen.randomness import RandomSource
from historygen.scheduler import DayScheduler
from historygen.schemas import GenerationSettings, RunStatistics, ScheduledDay
from historygen.services.progress import RichProgressSink

logger = logging.getLogger(__name__)


class HistoryEngine:
    """
    The Central Processing Unit of the application.
    Orchestrates Messages -> Schedule -> Commits -> Statistics.
    """

    def __init__(self, console: Console, runtime: Optional[RuntimeSettings] = None):
        self.console = console
        self.runtime = runtime or load_settings()
        self.rng = RandomSource(self.runtime.seed)
        self._orchestrator: RunOrchestrator | None = None

    def load_messages(self, settings: GenerationSettings) -> MessageProvider:
        """
        Builds the message provider for a run.
        NOTE: raises MessagePoolUnavailable when the file is missing so the
        caller can offer synthetic messages instead.
        """
        if settings.message_file is not None:
            self.console.print(
                f"   ⚙️  Loading commit messages from {settings.message_file}...",
                style="dim",
            )
        return MessageProvider.from_settings(settings, self.rng)

    def synthetic_messages(self, settings: GenerationSettings) -> MessageProvider:
        return MessageProvider(uniqueness=settings.uniqueness, rng=self.rng)

    def build_schedule(self, settings: GenerationSettings) -> List[ScheduledDay]:
        """Classifies every day of the range once, up front."""
        return DayScheduler(settings, self.rng).build()

    def generate(
        self,
        repo_path: str,
        schedule: List[ScheduledDay],
        messages: MessageProvider,
    ) -> RunStatistics:
        """
        Workflow: Open Repository -> Commit Day by Day -> Statistics.
        Raises VersionControlError (carrying partial statistics) on failure.
        """
        with GitRepositoryContext(repo_path) as repo:
            emitter = CommitEmitter(
                repo,
                messages,
                scratch_name=self.runtime.scratch_file,
                commit_hour=self.runtime.commit_hour,
                rng=self.rng,
            )
            with RichProgressSink(self.console, len(schedule)) as progress:
                self._orchestrator = RunOrchestrator(emitter, progress)
                try:
                    with self._stop_on_interrupt():
                        return self._orchestrator.run(schedule)
                finally:
                    self._orchestrator = None

    def request_stop(self):
        if self._orchestrator is not None:
            self._orchestrator.request_stop()

    @contextmanager
    def _stop_on_interrupt(self):
        """Ctrl+C finishes the current day instead of killing a commit halfway."""

        def _handler(signum, frame):
            logger.warning("Interrupt received, stopping after the current day")
            self.request_stop()

        previous = signal.signal(signal.SIGINT, _handler)
        try:
            yield
        finally:
            signal.signal(signal.SIGINT, previous)

    def publish(self, repo_path: str):
        """Workflow: Push the generated history to the configured remote."""
        self.console.print(
            f"   ⚙️  Pushing commits to '{self.runtime.remote}'...", style="dim"
        )
        push_commits(repo_path, self.runtime.remote)
