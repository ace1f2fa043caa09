"""Output formatters for table, JSON, and CSV."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from perfidx.models import (
    AxisRange,
    Custom,
    IndexedPoint,
    PeriodSpec,
    Preset,
    ResolvedResult,
)

PERIOD_LABELS: dict[Preset, str] = {
    Preset.ONE_MONTH: "1 month",
    Preset.THREE_MONTHS: "3 months",
    Preset.YEAR_TO_DATE: "Year to date",
    Preset.ONE_YEAR: "1 year",
    Preset.THREE_YEARS: "3 years",
    Preset.FIVE_YEARS: "5 years",
    Preset.TEN_YEARS: "10 years",
    Preset.FIFTEEN_YEARS: "15 years",
    Preset.TWENTY_YEARS: "20 years",
    Preset.SINCE_INCEPTION: "Since inception",
}

NO_DATA_MESSAGE = "No data available for the selected period."


def describe_period(spec: PeriodSpec) -> str:
    if isinstance(spec, Custom):
        return f"Custom ({spec.start_date} to {spec.end_date})"
    return PERIOD_LABELS[spec]


def _fmt_pct(val: float, plus_sign: bool = True) -> str:
    """Format a decimal as a percentage with 2 decimal places."""
    pct = val * 100
    if plus_sign and pct > 0:
        return f"+{pct:.2f}%"
    return f"{pct:.2f}%"


def _fmt_value(value: float) -> str:
    """Format a value as #,###.## without abbreviation."""
    return f"{value:,.2f}"


def _return_label(result: ResolvedResult) -> str:
    return "Annualized return" if result.is_annualized else "Return"


def format_table(
    result: ResolvedResult,
    spec: PeriodSpec,
    points: Sequence[IndexedPoint] | None = None,
    axis: AxisRange | None = None,
) -> str:
    """Format results as Rich tables rendered to string."""
    buf = io.StringIO()
    rich_console = Console(file=buf, width=100, no_color=True)

    header = (
        f"Period Return Analysis\n"
        f"======================\n"
        f"Period: {describe_period(spec)}\n"
    )
    rich_console.print(header, end="")

    if result.is_empty:
        rich_console.print(NO_DATA_MESSAGE)
        return buf.getvalue()

    assert result.return_value is not None
    assert result.start_value is not None
    assert result.end_value is not None

    summary = Table(box=box.SIMPLE_HEAD, pad_edge=False)
    summary.add_column("Start Date")
    summary.add_column("End Date")
    summary.add_column("Start Value", justify="right")
    summary.add_column("End Value", justify="right")
    summary.add_column(_return_label(result), justify="right")
    summary.add_row(
        str(result.start_date),
        str(result.end_date),
        _fmt_value(result.start_value),
        _fmt_value(result.end_value),
        _fmt_pct(result.return_value),
    )
    rich_console.print(summary)

    if points:
        series = Table(box=box.SIMPLE_HEAD, pad_edge=False)
        series.add_column("Date")
        series.add_column("NAV", justify="right")
        series.add_column("Indexed", justify="right")
        series.add_column("Ann. Return SI", justify="right")
        for p in points:
            series.add_row(
                str(p.timestamp),
                _fmt_value(p.actual_value),
                f"{p.indexed_value:.2f}",
                _fmt_pct(p.annualized_return_since_inception),
            )
        rich_console.print(series)

    footer = f"Inception: {result.inception_date}"
    if axis is not None:
        footer += (
            f"\nAxis: {axis.lower:g} to {axis.upper:g} "
            f"(step {axis.interval:g}, start = 100)"
        )
    rich_console.print(footer)

    return buf.getvalue()


def _point_dict(p: IndexedPoint) -> dict[str, Any]:
    return {
        "date": p.timestamp.isoformat(),
        "actual_value": p.actual_value,
        "indexed_value": round(p.indexed_value, 4),
        "annualized_return_since_inception": round(
            p.annualized_return_since_inception, 6
        ),
    }


def format_json(
    result: ResolvedResult,
    spec: PeriodSpec,
    points: Sequence[IndexedPoint] | None = None,
    axis: AxisRange | None = None,
) -> str:
    """Format results as JSON."""
    data: dict[str, Any] = {
        "period": spec.value if isinstance(spec, Preset) else "custom",
        "start_date": result.start_date.isoformat() if result.start_date else None,
        "end_date": result.end_date.isoformat() if result.end_date else None,
        "start_value": result.start_value,
        "end_value": result.end_value,
        "return_pct": (
            round(result.return_value * 100, 4)
            if result.return_value is not None
            else None
        ),
        "is_annualized": result.is_annualized,
        "inception_date": (
            result.inception_date.isoformat() if result.inception_date else None
        ),
        "inception_value": result.inception_value,
    }

    if points is not None:
        data["series"] = [_point_dict(p) for p in points]
    if axis is not None:
        data["axis"] = {
            "lower": axis.lower,
            "upper": axis.upper,
            "interval": axis.interval,
        }

    return json.dumps(data, indent=2)


def format_csv(
    result: ResolvedResult,
    spec: PeriodSpec,
    points: Sequence[IndexedPoint] | None = None,
) -> str:
    """Format the summary row, or the indexed series when points are given."""
    buf = io.StringIO()

    if points is not None:
        fields = [
            "date",
            "actual_value",
            "indexed_value",
            "annualized_return_since_inception",
        ]
        writer = csv.DictWriter(buf, fieldnames=fields)
        writer.writeheader()
        for p in points:
            writer.writerow(
                {
                    "date": p.timestamp.isoformat(),
                    "actual_value": f"{p.actual_value:.2f}",
                    "indexed_value": f"{p.indexed_value:.4f}",
                    "annualized_return_since_inception": (
                        f"{p.annualized_return_since_inception * 100:.4f}"
                    ),
                }
            )
        return buf.getvalue()

    fields = [
        "period",
        "start_date",
        "end_date",
        "start_value",
        "end_value",
        "return_pct",
        "is_annualized",
    ]
    writer = csv.DictWriter(buf, fieldnames=fields)
    writer.writeheader()
    if not result.is_empty:
        assert result.return_value is not None
        writer.writerow(
            {
                "period": spec.value if isinstance(spec, Preset) else "custom",
                "start_date": str(result.start_date),
                "end_date": str(result.end_date),
                "start_value": f"{result.start_value:.2f}",
                "end_value": f"{result.end_value:.2f}",
                "return_pct": f"{result.return_value * 100:.4f}",
                "is_annualized": str(result.is_annualized).lower(),
            }
        )
    return buf.getvalue()
