import logging
from collections import Counter
from datetime import date
from typing import Optional, Protocol, Sequence

from historygen.exceptions import VersionControlError
from historygen.schemas import DayDecision, RunStatistics, ScheduledDay

logger = logging.getLogger(__name__)


class ProgressSink(Protocol):
    def on_day_processed(self, day: date, index: int, total: int) -> None: ...


class DayEmitter(Protocol):
    def commit_day(self, day: date, count: int) -> object: ...


class RunOrchestrator:
    """
    Walks a schedule in date order, commits the active days and tallies
    the results.
    """

    def __init__(self, emitter: DayEmitter, progress: Optional[ProgressSink] = None):
        self.emitter = emitter
        self.progress = progress
        self._stop_requested = False
        self._tally: Counter = Counter()
        self._total_days = 0

    def request_stop(self):
        """Stop once the day being processed has finished its commits."""
        self._stop_requested = True

    def snapshot(self, interrupted: bool = False) -> RunStatistics:
        return RunStatistics(
            total_days=self._total_days,
            processed_days=self._tally["processed"],
            produced_days=self._tally["produced"],
            total_commits=self._tally["commits"],
            skipped_days=self._tally["skipped"],
            fixed_skips=self._tally[DayDecision.FIXED_SKIP],
            chance_skips=self._tally[DayDecision.CHANCE_SKIP],
            monthly_skips=self._tally[DayDecision.MONTHLY_SKIP],
            interrupted=interrupted,
        )

    def _process(self, item: ScheduledDay):
        if item.is_skip:
            self._tally[item.decision] += 1
            self._tally["skipped"] += 1
        else:
            self.emitter.commit_day(item.day, item.commit_count)
            self._tally["commits"] += item.commit_count
            self._tally["produced"] += 1
        self._tally["processed"] += 1

    def run(self, schedule: Sequence[ScheduledDay]) -> RunStatistics:
        days = [item.day for item in schedule]
        if any(later <= earlier for earlier, later in zip(days, days[1:])):
            raise ValueError("Schedule must be strictly ascending by date.")

        self._tally = Counter()
        self._total_days = len(schedule)
        self._stop_requested = False

        for index, item in enumerate(schedule, start=1):
            if self._stop_requested:
                logger.warning(f"Run interrupted before {item.day}")
                return self.snapshot(interrupted=True)
            try:
                self._process(item)
            except VersionControlError as e:
                self._tally["commits"] += e.created
                e.statistics = self.snapshot()
                logger.error(f"Run aborted on {item.day}: {e}")
                raise
            if self.progress is not None:
                self.progress.on_day_processed(item.day, index, len(schedule))

        stats = self.snapshot()
        logger.info(
            f"Run finished: {stats.total_commits} commits, "
            f"{stats.skipped_days} skipped days"
        )
        return stats
