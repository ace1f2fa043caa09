"""CLI entry point for perfidx."""

from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path
from typing import NoReturn

import click

from perfidx import engine, formatters, ingest
from perfidx.errors import DegenerateValueError, IngestionError
from perfidx.models import (
    SUPPORTED_PRESETS,
    AxisRange,
    Custom,
    IndexedPoint,
    PeriodSpec,
    parse_period,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter(
            f"Invalid date format: {value!r}. Use YYYY-MM-DD."
        ) from exc


def _date_option(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> date | None:
    if value is None:
        return None
    return _parse_date(value)


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.command()
@click.argument(
    "file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--period",
    type=click.Choice(SUPPORTED_PRESETS, case_sensitive=False),
    help="Preset period (default: si, since inception); not with --start/--end",
)
@click.option(
    "--start", callback=_date_option, help="Custom period start (YYYY-MM-DD)"
)
@click.option("--end", callback=_date_option, help="Custom period end (YYYY-MM-DD)")
@click.option(
    "--as-of",
    callback=_date_option,
    envvar="PERFIDX_AS_OF",
    help="Reference date for 'today' (YYYY-MM-DD, default: today)",
)
@click.option("--series", is_flag=True, help="Include the indexed series")
@click.option(
    "--output",
    "output_format",
    default="table",
    type=click.Choice(["table", "json", "csv"]),
    help="Output format",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging verbosity on stderr",
)
def main(
    file: Path,
    period: str | None,
    start: date | None,
    end: date | None,
    as_of: date | None,
    series: bool,
    output_format: str,
    log_level: str,
) -> None:
    """Period Return Analyzer.

    Reads a two-column (date, value) CSV or Excel file and reports the
    return over the selected period, annualized for periods of a year or
    more, with an optional series indexed to 100 at the period start.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if (start is None) != (end is None):
        _fail("--start and --end must be given together.")
    if start is not None and period is not None:
        _fail("--period cannot be combined with --start/--end.")

    spec: PeriodSpec
    if start is not None and end is not None:
        try:
            spec = Custom(start_date=start, end_date=end)
        except ValueError as exc:
            _fail(str(exc))
    else:
        spec = parse_period(period or "si")

    now = as_of or date.today()

    points: list[IndexedPoint] | None = None
    axis: AxisRange | None = None
    try:
        samples = ingest.load_series(file)
        result = engine.resolve(samples, spec, now)
        if series and not result.is_empty:
            assert result.inception_date is not None
            assert result.inception_value is not None
            points = engine.index_series(
                result.filtered_series, result.inception_date, result.inception_value
            )
            axis = engine.axis_range(points)
    except (IngestionError, DegenerateValueError) as exc:
        _fail(str(exc))

    if output_format == "json":
        click.echo(formatters.format_json(result, spec, points, axis))
    elif output_format == "csv":
        click.echo(formatters.format_csv(result, spec, points), nl=False)
    else:
        click.echo(formatters.format_table(result, spec, points, axis), nl=False)


if __name__ == "__main__":
    main()
