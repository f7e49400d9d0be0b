from __future__ import annotations


class DashboardError(Exception):
    """Base class for data pipeline and query failures."""


class SchemaError(DashboardError):
    """Raised when a required column is missing after header normalization."""


class RowCoercionError(DashboardError, ValueError):
    """Raised when a single row value cannot be converted; the row is dropped."""


class EmptyGroupError(DashboardError):
    """Raised when an aggregation group has no usable values."""


class InvalidSelectionError(DashboardError, ValueError):
    """Raised when the selected country is not present in the cleaned table."""


class InvalidRangeError(DashboardError, ValueError):
    """Raised when a year range is malformed or has lo > hi."""


class EmptyResultError(DashboardError):
    """Raised when a filtered subset has no rows to summarize."""
