"""Exceptions raised by the engine and the ingestion layer."""

from __future__ import annotations


class DegenerateValueError(ValueError):
    """A return cannot be computed from the given values (e.g. a zero start)."""


class IngestionError(ValueError):
    """An input file cannot be turned into a usable series."""
