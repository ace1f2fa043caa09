"""Load a two-column (date, value) series from CSV or Excel files.

The first row is a header. Column A holds dates, either as spreadsheet
serial day numbers or as date strings; column B holds numeric values. Rows
that cannot be parsed are dropped.
"""

from __future__ import annotations

import csv
import logging
import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

from dateutil import parser as date_parser
from openpyxl import load_workbook

from perfidx.errors import IngestionError
from perfidx.models import Sample

logger = logging.getLogger(__name__)

# Serial day number of 1970-01-01 in spreadsheet date encoding.
SPREADSHEET_EPOCH_SERIAL = 25569
_UNIX_EPOCH = date(1970, 1, 1)
# Fills fields missing from partial date strings ("2024" -> 2024-01-01).
_PARSE_DEFAULT = datetime(1970, 1, 1)

SUPPORTED_SUFFIXES = (".csv", ".xlsx")


def _is_blank(cell: Any) -> bool:
    return cell is None or (isinstance(cell, str) and not cell.strip())


def _from_serial(serial: float) -> date | None:
    if not math.isfinite(serial):
        return None
    try:
        offset = math.floor(serial - SPREADSHEET_EPOCH_SERIAL)
        return _UNIX_EPOCH + timedelta(days=offset)
    except OverflowError:
        return None


def parse_date_cell(cell: Any) -> date | None:
    """Parse a date cell; None when it is not a recognisable date."""
    if isinstance(cell, bool) or _is_blank(cell):
        return None
    if isinstance(cell, datetime):
        return cell.date()
    if isinstance(cell, date):
        return cell
    if isinstance(cell, (int, float)):
        return _from_serial(float(cell))

    text = str(cell).strip()
    # A bare four-digit string is a year, not a serial day number.
    if not (len(text) == 4 and text.isdigit()):
        try:
            return _from_serial(float(text))
        except ValueError:
            pass
    try:
        return date_parser.parse(text, default=_PARSE_DEFAULT).date()
    except (ValueError, OverflowError):
        return None


def parse_value_cell(cell: Any) -> float | None:
    """Parse a numeric value cell; None for non-numeric or non-finite input."""
    if isinstance(cell, bool) or _is_blank(cell):
        return None
    try:
        value = float(str(cell).strip()) if isinstance(cell, str) else float(cell)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_rows(rows: Sequence[Sequence[Any]]) -> list[Sample]:
    """Turn raw rows (header first) into a date-sorted series.

    Raises IngestionError when the header is missing a column or fewer than
    two valid samples remain.
    """
    if len(rows) < 2:
        raise IngestionError("The file does not contain enough data")

    header = rows[0]
    if len(header) < 2 or _is_blank(header[0]) or _is_blank(header[1]):
        raise IngestionError(
            "The file must have dates in column A and values in column B"
        )

    samples: list[Sample] = []
    for row_number, row in enumerate(rows[1:], start=2):
        if len(row) < 2 or _is_blank(row[0]) or _is_blank(row[1]):
            continue

        parsed_date = parse_date_cell(row[0])
        if parsed_date is None:
            logger.debug("Row %d: unparseable date %r, skipped", row_number, row[0])
            continue

        value = parse_value_cell(row[1])
        if value is None:
            logger.debug("Row %d: non-numeric value %r, skipped", row_number, row[1])
            continue

        samples.append(Sample(date=parsed_date, value=value))

    samples.sort(key=lambda s: s.date)

    if len(samples) < 2:
        raise IngestionError("The file does not contain enough valid data points")

    dropped = len(rows) - 1 - len(samples)
    if dropped:
        logger.info("Dropped %d row(s) without a valid date and value", dropped)
    return samples


def _read_csv(path: Path) -> list[list[str]]:
    with path.open(encoding="utf-8-sig", newline="") as fh:
        return [row for row in csv.reader(fh)]


def _read_xlsx(path: Path) -> list[tuple[Any, ...]]:
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except Exception as exc:
        raise IngestionError(f"Cannot read Excel file {path.name}: {exc}") from exc
    try:
        worksheet = workbook.worksheets[0]
        rows: Iterable[tuple[Any, ...]] = worksheet.iter_rows(values_only=True)
        return [tuple(row) for row in rows if row is not None]
    finally:
        workbook.close()


def load_series(path: str | Path) -> list[Sample]:
    """Read a .csv or .xlsx file into a sorted series."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        supported = ", ".join(SUPPORTED_SUFFIXES)
        raise IngestionError(f"Unsupported file format {suffix!r}. Use {supported}.")

    try:
        rows = _read_csv(path) if suffix == ".csv" else _read_xlsx(path)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise IngestionError(f"Cannot read {path.name}: {exc}") from exc

    samples = parse_rows(rows)
    logger.info(
        "Loaded %d samples from %s (%s to %s)",
        len(samples),
        path.name,
        samples[0].date,
        samples[-1].date,
    )
    return samples
