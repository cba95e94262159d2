"""Data layer utilities for loading roster definitions."""

from .errors import DataLoadError, DataReferenceError, DataValidationError
from .paths import get_definitions_path

__all__ = [
    "DataLoadError",
    "DataReferenceError",
    "DataValidationError",
    "get_definitions_path",
]
