"""Period resolution, return calculation and chart indexing.

Flow per call to resolve():
    1. Sort the series (stable, input untouched)
    2. Find the latest sample not after ``now``
    3. Turn the period spec into a target (start, end) range
    4. Snap both targets to the closest sample dates
    5. Slice the window and compute the simple or annualized return
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import date

from perfidx import calculator
from perfidx.datemath import closest_date, preset_start_date, year_fraction
from perfidx.errors import DegenerateValueError
from perfidx.models import (
    AxisRange,
    Custom,
    IndexedPoint,
    PeriodSpec,
    Preset,
    ResolvedResult,
    Sample,
)

logger = logging.getLogger(__name__)

BASELINE = 100.0


def _latest_usable(series: Sequence[Sample], now: date) -> Sample | None:
    for sample in reversed(series):
        if sample.date <= now:
            return sample
    return None


def _target_range(
    spec: PeriodSpec, series: Sequence[Sample], latest: Sample
) -> tuple[date, date]:
    match spec:
        case Custom(start_date=start, end_date=end):
            return start, end
        case Preset.SINCE_INCEPTION:
            return series[0].date, latest.date
        case Preset():
            return preset_start_date(spec, latest.date), latest.date
    raise TypeError(f"Unsupported period spec: {spec!r}")


def _has_duplicate_dates(series: Sequence[Sample]) -> bool:
    return any(a.date == b.date for a, b in zip(series, series[1:]))


def _is_annualized(spec: PeriodSpec, start: date, end: date) -> bool:
    if isinstance(spec, Custom):
        return year_fraction(start, end) >= 1
    return spec.annualizes


def resolve(
    series: Sequence[Sample], spec: PeriodSpec, now: date
) -> ResolvedResult:
    """Resolve a period against a series and compute its return.

    Returns ResolvedResult.empty() when there is nothing to show: an empty
    series, or no sample dated on or before ``now``. A zero start value
    raises DegenerateValueError.
    """
    if not series:
        return ResolvedResult.empty()

    ordered = tuple(sorted(series, key=lambda s: s.date))
    if _has_duplicate_dates(ordered):
        logger.warning(
            "Series contains duplicate dates; the first sample on the start "
            "date and the last sample on the end date are used"
        )

    latest = _latest_usable(ordered, now)
    if latest is None:
        logger.debug("No sample on or before %s", now)
        return ResolvedResult.empty()

    target_start, target_end = _target_range(spec, ordered, latest)

    all_dates = [s.date for s in ordered]
    start = closest_date(target_start, all_dates)
    end = closest_date(target_end, all_dates)
    if start is None or end is None:
        return ResolvedResult.empty()

    logger.debug(
        "Period %s: target %s..%s resolved to %s..%s",
        spec,
        target_start,
        target_end,
        start,
        end,
    )

    filtered = tuple(s for s in ordered if start <= s.date <= end)
    start_value = filtered[0].value
    end_value = filtered[-1].value

    is_annualized = _is_annualized(spec, start, end)
    if is_annualized:
        years = year_fraction(start, end)
        return_value = calculator.period_return(start_value, end_value, years)
    else:
        return_value = calculator.simple_return(start_value, end_value)

    inception = ordered[0]
    return ResolvedResult(
        filtered_series=filtered,
        start_date=start,
        end_date=end,
        start_value=start_value,
        end_value=end_value,
        return_value=return_value,
        is_annualized=is_annualized,
        inception_date=inception.date,
        inception_value=inception.value,
    )


def index_series(
    filtered_series: Sequence[Sample],
    inception_date: date,
    inception_value: float,
) -> list[IndexedPoint]:
    """Rebase a window to 100 at its first sample for charting.

    Each point also carries the annualized return from the inception sample
    of the whole series, independent of the selected window.
    """
    if not filtered_series:
        return []

    baseline = filtered_series[0].value
    if baseline == 0:
        raise DegenerateValueError("Window starts at zero; cannot index to 100")

    points: list[IndexedPoint] = []
    for sample in filtered_series:
        years = year_fraction(inception_date, sample.date)
        points.append(
            IndexedPoint(
                timestamp=sample.date,
                indexed_value=sample.value / baseline * BASELINE,
                actual_value=sample.value,
                annualized_return_since_inception=calculator.period_return(
                    inception_value, sample.value, years
                ),
            )
        )
    return points


def _tick_interval(span: float) -> float:
    if span <= 10:
        return 2
    if span <= 50:
        return 5
    if span <= 100:
        return 10
    return math.ceil(span / 100) * 10


def axis_range(points: Sequence[IndexedPoint]) -> AxisRange | None:
    """Round y-axis bounds for indexed values, always showing the 100 line."""
    if not points:
        return None

    values = [p.indexed_value for p in points]
    low, high = min(values), max(values)
    interval = _tick_interval(high - low)

    lower = math.floor(low / interval) * interval
    upper = math.ceil(high / interval) * interval
    return AxisRange(
        lower=min(lower, BASELINE - interval),
        upper=max(upper, BASELINE + interval),
        interval=interval,
    )
