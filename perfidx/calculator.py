"""Pure calculation functions for period returns."""

from __future__ import annotations

from perfidx.errors import DegenerateValueError

# Periods shorter than one 30/360 month are never annualized.
MIN_ANNUALIZATION_YEARS = 1 / 12


def _ratio(start_value: float, end_value: float) -> float:
    if start_value == 0:
        raise DegenerateValueError(
            f"Start value is zero; return to {end_value} is undefined"
        )
    return end_value / start_value


def simple_return(start_value: float, end_value: float) -> float:
    """Total return as a decimal (0.232 = 23.2%)."""
    return _ratio(start_value, end_value) - 1


def cagr(start_value: float, end_value: float, years: float) -> float:
    """Compound Annual Growth Rate."""
    if years <= 0:
        raise ValueError("Period must be positive")
    ratio = _ratio(start_value, end_value)
    if ratio < 0:
        raise DegenerateValueError(
            f"Cannot annualize a sign change from {start_value} to {end_value}"
        )
    return float(ratio ** (1 / years)) - 1


def period_return(start_value: float, end_value: float, years: float) -> float:
    """CAGR for periods of at least a month, simple return below that."""
    if years >= MIN_ANNUALIZATION_YEARS:
        return cagr(start_value, end_value, years)
    return simple_return(start_value, end_value)
