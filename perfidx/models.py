"""Data models for period resolution and indexed performance."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum

from dateutil.relativedelta import relativedelta


@dataclass(frozen=True, slots=True)
class Sample:
    date: date
    value: float


class Preset(str, Enum):
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    YEAR_TO_DATE = "ytd"
    ONE_YEAR = "1y"
    THREE_YEARS = "3y"
    FIVE_YEARS = "5y"
    TEN_YEARS = "10y"
    FIFTEEN_YEARS = "15y"
    TWENTY_YEARS = "20y"
    SINCE_INCEPTION = "si"

    @property
    def offset(self) -> relativedelta | None:
        """Calendar offset back from the end date, None for ytd and si."""
        return _PRESET_OFFSETS.get(self)

    @property
    def annualizes(self) -> bool:
        return self in _ANNUALIZED_PRESETS


_PRESET_OFFSETS: dict[Preset, relativedelta] = {
    Preset.ONE_MONTH: relativedelta(months=1),
    Preset.THREE_MONTHS: relativedelta(months=3),
    Preset.ONE_YEAR: relativedelta(years=1),
    Preset.THREE_YEARS: relativedelta(years=3),
    Preset.FIVE_YEARS: relativedelta(years=5),
    Preset.TEN_YEARS: relativedelta(years=10),
    Preset.FIFTEEN_YEARS: relativedelta(years=15),
    Preset.TWENTY_YEARS: relativedelta(years=20),
}

_ANNUALIZED_PRESETS = frozenset(
    {
        Preset.ONE_YEAR,
        Preset.THREE_YEARS,
        Preset.FIVE_YEARS,
        Preset.TEN_YEARS,
        Preset.FIFTEEN_YEARS,
        Preset.TWENTY_YEARS,
        Preset.SINCE_INCEPTION,
    }
)

SUPPORTED_PRESETS = [p.value for p in Preset]


@dataclass(frozen=True, slots=True)
class Custom:
    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise ValueError(
                f"Custom period start {self.start_date} is after end {self.end_date}"
            )


PeriodSpec = Preset | Custom


def parse_period(text: str) -> Preset:
    """Look up a preset by its short code ("1y", "SI", ...)."""
    try:
        return Preset(text.strip().lower())
    except ValueError as exc:
        supported = ", ".join(SUPPORTED_PRESETS)
        raise ValueError(
            f"Period {text!r} not supported. Supported: {supported}"
        ) from exc


@dataclass(frozen=True, slots=True)
class ResolvedResult:
    filtered_series: tuple[Sample, ...]
    start_date: date | None
    end_date: date | None
    start_value: float | None
    end_value: float | None
    return_value: float | None
    is_annualized: bool
    inception_date: date | None
    inception_value: float | None

    @classmethod
    def empty(cls) -> ResolvedResult:
        """Result for a series with nothing to show yet."""
        return cls(
            filtered_series=(),
            start_date=None,
            end_date=None,
            start_value=None,
            end_value=None,
            return_value=None,
            is_annualized=False,
            inception_date=None,
            inception_value=None,
        )

    @property
    def is_empty(self) -> bool:
        return self.return_value is None


@dataclass(frozen=True, slots=True)
class IndexedPoint:
    timestamp: date
    indexed_value: float
    actual_value: float
    annualized_return_since_inception: float


@dataclass(frozen=True, slots=True)
class AxisRange:
    lower: float
    upper: float
    interval: float

    @property
    def ticks(self) -> list[float]:
        count = math.floor((self.upper - self.lower) / self.interval) + 1
        return [self.lower + i * self.interval for i in range(count)]
