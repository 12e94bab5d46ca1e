"""Layout error taxonomy.

Only two abnormal conditions exist. Candidate rejection is a normal outcome
and never raises.
"""
from __future__ import annotations


class LayoutError(Exception):
    pass


class ConfigurationError(LayoutError, ValueError):
    """Invalid layout configuration; generation does not start."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self):
        return {"error": self.message, "field": self.field}


class ConsistencyViolation(LayoutError, RuntimeError):
    """Occupancy and room registry disagree. Internal invariant failure."""


__all__ = ["LayoutError", "ConfigurationError", "ConsistencyViolation"]
