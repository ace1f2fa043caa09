"""Tests for CLI entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from perfidx.cli import main

ANNUAL_ROWS = [
    ("2020-06-30", "1000"),
    ("2021-06-30", "1100"),
    ("2022-06-30", "1210"),
    ("2023-06-30", "1331"),
    ("2024-06-30", "1464.1"),
    ("2025-06-30", "1610.51"),
]


def _write_csv(path: Path, rows: list[tuple[str, str]]) -> Path:
    lines = ["Date,NAV"] + [f"{d},{v}" for d, v in rows]
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def nav_csv(tmp_path: Path) -> Path:
    return _write_csv(tmp_path / "nav.csv", ANNUAL_ROWS)


class TestCliValidation:
    def test_start_without_end(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [str(nav_csv), "--start", "2021-01-01"])
        assert result.exit_code == 1
        assert "must be given together" in result.output

    def test_period_with_custom_range(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                str(nav_csv),
                "--period",
                "1y",
                "--start",
                "2021-01-01",
                "--end",
                "2022-01-01",
            ],
        )
        assert result.exit_code == 1
        assert "cannot be combined" in result.output

    def test_invalid_date(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [str(nav_csv), "--as-of", "not-a-date"])
        assert result.exit_code != 0

    def test_end_before_start(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, [str(nav_csv), "--start", "2024-06-01", "--end", "2023-01-01"]
        )
        assert result.exit_code == 1
        assert "after end" in result.output

    def test_unknown_period(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [str(nav_csv), "--period", "7y"])
        assert result.exit_code != 0

    def test_missing_file(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path / "nope.csv")])
        assert result.exit_code != 0

    def test_ingestion_error(self, tmp_path: Path) -> None:
        path = _write_csv(tmp_path / "bad.csv", [("2024-01-01", "100")])
        runner = CliRunner()
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_zero_start_value(self, tmp_path: Path) -> None:
        path = _write_csv(
            tmp_path / "zero.csv", [("2024-01-01", "0"), ("2024-06-01", "10")]
        )
        runner = CliRunner()
        result = runner.invoke(main, [str(path), "--as-of", "2024-12-31"])
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestCliOutput:
    def test_table_output(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, [str(nav_csv), "--period", "1y", "--as-of", "2025-06-30"]
        )
        assert result.exit_code == 0
        assert "Period Return Analysis" in result.output
        assert "2024-06-30" in result.output
        assert "+10.00%" in result.output

    def test_json_output(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            [str(nav_csv), "--period", "5y", "--as-of", "2025-06-30", "--output", "json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["period"] == "5y"
        assert data["is_annualized"] is True
        assert data["return_pct"] == pytest.approx(10.0)

    def test_json_series(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                str(nav_csv),
                "--as-of",
                "2025-06-30",
                "--series",
                "--output",
                "json",
            ],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["series"]) == 6
        assert data["series"][0]["indexed_value"] == 100.0
        assert data["axis"]["interval"] == 10

    def test_custom_period_csv(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                str(nav_csv),
                "--start",
                "2021-07-01",
                "--end",
                "2022-07-01",
                "--as-of",
                "2025-06-30",
                "--output",
                "csv",
            ],
        )
        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert lines[0].startswith("period,start_date")
        assert lines[1].startswith("custom,2021-06-30,2022-06-30")
        assert lines[1].endswith("true")

    def test_as_of_from_env(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            [str(nav_csv), "--period", "1y", "--output", "json"],
            env={"PERFIDX_AS_OF": "2023-06-30"},
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["end_date"] == "2023-06-30"
        assert data["start_date"] == "2022-06-30"

    def test_nothing_before_as_of(self, nav_csv: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [str(nav_csv), "--as-of", "2019-01-01"])
        assert result.exit_code == 0
        assert "No data available" in result.output

    def test_help(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Period Return Analyzer" in result.output
