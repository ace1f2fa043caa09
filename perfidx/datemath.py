"""Day-count and period-boundary date arithmetic."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from perfidx.models import Preset


def year_fraction(start: date, end: date) -> float:
    """Fractional years between two dates, US 30/360 (NASD) basis.

    Matches the spreadsheet YEARFRAC(start, end, 0) convention: every month
    counts as 30 days and every year as 360. The order of the arguments does
    not matter.
    """
    if start > end:
        start, end = end, start

    start_day = start.day
    end_day = end.day

    # start adjustment must happen before the end condition is checked
    if start_day == 31:
        start_day = 30
    if end_day == 31 and start_day >= 30:
        end_day = 30

    days = (
        (end.year - start.year) * 360
        + (end.month - start.month) * 30
        + (end_day - start_day)
    )
    return days / 360.0


def preset_start_date(preset: Preset, end_date: date) -> date:
    """Target start date for a preset period ending on end_date.

    Month and year offsets clamp to the last valid day of the target month
    (Feb 29 minus one year is Feb 28).
    """
    if preset is Preset.YEAR_TO_DATE:
        return date(end_date.year, 1, 1)

    offset = preset.offset
    if offset is None:
        raise ValueError(f"Preset {preset.value!r} has no calendar start date")
    return end_date - offset


def closest_date(target: date, candidates: Iterable[date]) -> date | None:
    """Candidate nearest to target; the first one wins on ties."""
    closest: date | None = None
    min_difference = 0
    for candidate in candidates:
        difference = abs((candidate - target).days)
        if closest is None or difference < min_difference:
            closest = candidate
            min_difference = difference
    return closest
