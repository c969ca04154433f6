# pure forecast reduction: 3-hourly samples -> one summary per upcoming calendar day

from __future__ import annotations
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Dict, Iterable, List, Optional

from .errors import ValidationError
from .models import DailySummary, ForecastFeed, WeatherSample

FORECAST_DAYS = 5


def summarize_forecast(
    samples: Iterable[WeatherSample],
    tz: tzinfo = timezone.utc,
    days: int = FORECAST_DAYS,
) -> List[DailySummary]:
    """Collapse a chronological feed into per-day max/min summaries.

    Samples are grouped by their calendar date in ``tz``. The first day is the
    partial current day and is dropped; at most ``days`` of the following days
    are returned, oldest first. The condition of a day is the one of its
    earliest sample.
    """
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise ValidationError(f"'days' must be a positive integer (got {days!r})")

    # dicts keep insertion order, which is chronological for a sorted feed
    by_day: Dict[date, DailySummary] = {}
    previous: Optional[int] = None
    for sample in samples:
        ts = sample.timestamp
        if isinstance(ts, bool) or not isinstance(ts, int):
            raise ValidationError(f"Forecast timestamp must be integer epoch seconds (got {ts!r})")
        if previous is not None and ts < previous:
            raise ValidationError(f"Forecast feed is not in timestamp order ({ts} after {previous})")
        previous = ts

        day = datetime.fromtimestamp(ts, tz).date()
        summary = by_day.get(day)
        if summary is None:
            by_day[day] = DailySummary(
                date=day,
                temp_max=sample.temp_max,
                temp_min=sample.temp_min,
                condition=sample.condition,
                description=sample.description,
            )
        else:
            by_day[day] = DailySummary(
                date=day,
                temp_max=max(summary.temp_max, sample.temp_max),
                temp_min=min(summary.temp_min, sample.temp_min),
                condition=summary.condition,
                description=summary.description,
            )

    return list(by_day.values())[1:days + 1]


def feed_timezone(feed: ForecastFeed, configured: tzinfo | None = None) -> tzinfo:
    # configured zone wins, then the provider's reported offset, then UTC
    if configured is not None:
        return configured
    if feed.utc_offset is not None:
        return timezone(timedelta(seconds=feed.utc_offset))
    return timezone.utc
