# historygen/scheduler.py

"""
Day scheduling: expands the configured date range into days and decides,
for each one, whether it produces commits or is skipped (and why).
"""

import logging
from datetime import date, timedelta
from itertools import groupby
from typing import Callable, FrozenSet, Iterable, List, Sequence, Tuple

from historygen.randomness import RandomSource
from historygen.schemas import DayDecision, GenerationSettings, ScheduledDay

logger = logging.getLogger(__name__)

SkipRule = Callable[[date], bool]


def expand_dates(start: date, end: date) -> List[date]:
    """Every calendar date from start to end inclusive, ascending."""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def plan_monthly_skips(
    days: Sequence[date],
    monthly_skip_range: Tuple[int, int],
    rng: RandomSource,
) -> FrozenSet[date]:
    """
    Pre-selects the forced skip days of every calendar month in ``days``.
    The draw for each month is clamped to the days that month has in range.
    """
    selected = set()
    for (year, month), month_days in groupby(days, key=lambda d: (d.year, d.month)):
        month_days = list(month_days)
        wanted = rng.uniform_int(*monthly_skip_range)
        count = min(wanted, len(month_days))
        selected.update(rng.sample(month_days, count))
        logger.debug(f"Month {year}-{month:02d}: skipping {count} of {len(month_days)} days")
    return frozenset(selected)


class DayScheduler:
    """
    Classifies days with an ordered list of skip rules; the first matching
    rule wins and a day matching none produces commits.
    """

    def __init__(
        self,
        settings: GenerationSettings,
        rng: RandomSource,
        monthly_skips: Iterable[date] | None = None,
    ):
        self.settings = settings
        self.rng = rng
        self.days = expand_dates(settings.start_date, settings.end_date)
        if monthly_skips is None:
            monthly_skips = plan_monthly_skips(
                self.days, settings.monthly_skip_range, rng
            )
        self.monthly_skips = frozenset(monthly_skips)
        self.rules: List[Tuple[DayDecision, SkipRule]] = [
            (DayDecision.FIXED_SKIP, self._is_fixed_skip),
            (DayDecision.CHANCE_SKIP, self._is_chance_skip),
            (DayDecision.MONTHLY_SKIP, self._is_monthly_skip),
        ]

    def _is_fixed_skip(self, day: date) -> bool:
        return day in self.settings.skip_dates

    def _is_chance_skip(self, day: date) -> bool:
        return self.rng.uniform_int(1, 100) <= self.settings.weekday_chance(day)

    def _is_monthly_skip(self, day: date) -> bool:
        return day in self.monthly_skips

    def classify(self, day: date) -> ScheduledDay:
        for decision, rule in self.rules:
            if rule(day):
                return ScheduledDay(day=day, decision=decision)
        count = self.rng.uniform_int(*self.settings.commit_range)
        return ScheduledDay(day=day, decision=DayDecision.PRODUCE, commit_count=count)

    def build(self) -> List[ScheduledDay]:
        schedule = [self.classify(day) for day in self.days]
        produced = sum(1 for item in schedule if not item.is_skip)
        logger.info(
            f"Scheduled {len(schedule)} days "
            f"({produced} active, {len(schedule) - produced} skipped)"
        )
        return schedule
