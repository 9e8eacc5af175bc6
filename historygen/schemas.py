from datetime import date
from enum import Enum
from pathlib import Path
from typing import Annotated, Dict, FrozenSet, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    field_validator,
    model_validator,
)

from .constants import WEEKDAY_NAMES

Percentage = Annotated[int, Field(ge=0, le=100)]


class GenerationSettings(BaseModel):
    """Validated parameters for one generation run."""

    model_config = ConfigDict(frozen=True)

    date_range: Tuple[date, date]
    commit_range: Tuple[NonNegativeInt, NonNegativeInt]
    monthly_skip_range: Tuple[NonNegativeInt, NonNegativeInt]
    skip_dates: FrozenSet[date] = frozenset()
    weekday_skip_chance: Dict[str, Percentage] = Field(default_factory=dict)
    message_file: Optional[Path] = None
    uniqueness: float = Field(default=1.0, ge=0.0, le=1.0)

    @field_validator("message_file", mode="before")
    @classmethod
    def _blank_path_means_synthetic(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("weekday_skip_chance")
    @classmethod
    def _normalise_weekdays(cls, value: Dict[str, int]) -> Dict[str, int]:
        normalised = {}
        unknown = []
        for name, chance in value.items():
            key = name.strip().title()
            if key in WEEKDAY_NAMES:
                normalised[key] = chance
            else:
                unknown.append(name)
        if unknown:
            raise ValueError(f"Unknown weekday names: {', '.join(unknown)}")
        return normalised

    @model_validator(mode="after")
    def _check_ranges(self) -> "GenerationSettings":
        start, end = self.date_range
        if start > end:
            raise ValueError("Start date must not be after end date")
        if self.commit_range[0] > self.commit_range[1]:
            raise ValueError("Minimum commits per day exceeds maximum")
        if self.monthly_skip_range[0] > self.monthly_skip_range[1]:
            raise ValueError("Minimum skipped days per month exceeds maximum")
        return self

    @property
    def start_date(self) -> date:
        return self.date_range[0]

    @property
    def end_date(self) -> date:
        return self.date_range[1]

    def weekday_chance(self, day: date) -> int:
        """Skip chance in percent for the weekday of ``day``; unlisted days are 0."""
        return self.weekday_skip_chance.get(WEEKDAY_NAMES[day.weekday()], 0)


class DayDecision(str, Enum):
    FIXED_SKIP = "fixed_skip"
    CHANCE_SKIP = "chance_skip"
    MONTHLY_SKIP = "monthly_skip"
    PRODUCE = "produce"


class ScheduledDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    decision: DayDecision
    commit_count: NonNegativeInt = 0

    @property
    def is_skip(self) -> bool:
        return self.decision is not DayDecision.PRODUCE


class RunStatistics(BaseModel):
    """Counters for a finished (or aborted) run."""

    model_config = ConfigDict(frozen=True)

    total_days: int = 0
    processed_days: int = 0
    produced_days: int = 0
    total_commits: int = 0
    skipped_days: int = 0
    fixed_skips: int = 0
    chance_skips: int = 0
    monthly_skips: int = 0
    interrupted: bool = False
