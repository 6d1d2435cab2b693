"""Exceptions raised by the analysis."""

from __future__ import annotations

from typing import Iterable


class HolidayAnalysisError(Exception):
    """Base class for analysis errors."""


class MissingInputFieldError(HolidayAnalysisError, KeyError):
    """An input table lacks columns the analysis cannot run without."""

    def __init__(self, table: str, columns: Iterable[str]) -> None:
        self.table = table
        self.columns = sorted(columns)
        super().__init__(f"{table} table is missing required columns: {', '.join(self.columns)}")

    def __str__(self) -> str:
        return self.args[0]


class InsufficientSampleError(HolidayAnalysisError, ValueError):
    """Too few (or too degenerate) observations for a density estimate."""
