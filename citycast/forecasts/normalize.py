"""
Condense the 3 hourly forecast into one summary per calendar day.

The forecast endpoint returns ~40 samples spanning 5 days. Samples are not
trusted: every sample is validated on its own and invalid ones are skipped,
so a single broken sample never loses the whole forecast.
"""

from datetime import date, datetime, tzinfo
from typing import Any

import pydantic
import structlog

from ..integrations.common.utils import round_half_up
from .types import DailySummary, ForecastSample, TemperatureRange

logger = structlog.get_logger()

MAX_DAYS = 7


class _DailyAccumulator:
    """Running min/max for a single day, seeded from its first sample."""

    def __init__(self, day: date, sample: ForecastSample) -> None:
        self.day = day
        self.timestamp = sample.dt
        self.temp_min = sample.main.temp_min
        self.temp_max = sample.main.temp_max
        self.condition = sample.condition.main
        self.icon = sample.condition.icon

    def update(self, sample: ForecastSample) -> None:
        # The condition of the first sample is kept for the whole day
        self.temp_min = min(self.temp_min, sample.main.temp_min)
        self.temp_max = max(self.temp_max, sample.main.temp_max)

    def summary(self) -> DailySummary:
        return DailySummary(
            day=self.day,
            timestamp=self.timestamp,
            temperature=TemperatureRange(
                min=round_half_up(self.temp_min),
                max=round_half_up(self.temp_max),
            ),
            condition=self.condition,
            icon=self.icon,
        )


def get_day(timestamp: int, tz: tzinfo | None = None) -> date:
    """
    The calendar day of a timestamp, in the given timezone or the local
    timezone if none is given.
    """
    return datetime.fromtimestamp(timestamp, tz=tz).date()


def normalize_forecast(
    samples: Any, *, tz: tzinfo | None = None, limit: int = MAX_DAYS
) -> list[DailySummary]:
    """
    Build daily summaries from raw forecast samples.

    Days are returned in the order they are first seen, and at most `limit`
    days are returned. Days where all samples are invalid are left out.
    """

    if not isinstance(samples, list | tuple):
        logger.error("Invalid forecast sample list", type=type(samples).__name__)
        return []

    days: dict[date, _DailyAccumulator] = {}
    skipped = 0

    for index, raw in enumerate(samples):
        try:
            sample = ForecastSample.model_validate(raw)
        except pydantic.ValidationError as exc:
            skipped += 1
            logger.warning(
                "Skipping invalid forecast sample",
                index=index,
                reason="; ".join(
                    f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                    for error in exc.errors()
                ),
            )
            continue

        try:
            day = get_day(sample.dt, tz)
        except (ValueError, OverflowError, OSError) as exc:
            skipped += 1
            logger.warning(
                "Skipping invalid forecast sample", index=index, reason=f"dt: {exc}"
            )
            continue

        if accumulator := days.get(day):
            accumulator.update(sample)
        else:
            days[day] = _DailyAccumulator(day, sample)

    summaries = [accumulator.summary() for accumulator in days.values()][:limit]

    logger.info(
        "Normalized forecast",
        samples=len(samples),
        skipped=skipped,
        days=len(summaries),
    )

    return summaries
