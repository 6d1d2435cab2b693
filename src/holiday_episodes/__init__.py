"""Descriptive analysis of the TidyTuesday holiday TV episodes dataset."""

from __future__ import annotations

from .data import EpisodeTables, join_datasets
from .errors import HolidayAnalysisError, InsufficientSampleError, MissingInputFieldError

__all__ = [
    "EpisodeTables",
    "HolidayAnalysisError",
    "InsufficientSampleError",
    "MissingInputFieldError",
    "join_datasets",
]

__version__ = "0.1.0"
