"""Exceptions raised while expanding a route into timed points."""
from __future__ import annotations


class TimedRouteError(Exception):
    """Base class for errors that end a run."""


class UsageError(TimedRouteError):
    """A required command line argument was not supplied."""


class ConfigError(TimedRouteError):
    """The configuration file or an option value is invalid."""


class InputReadError(TimedRouteError):
    """The input file could not be opened or read."""


class InputParseError(TimedRouteError):
    """The input file is not valid JSON or not a feature collection."""


class InsufficientWaypointsError(TimedRouteError):
    """Fewer than two point features are available to build a segment."""

    def __init__(self, count: int) -> None:
        super().__init__(f"Route needs at least two vertices, found {count}.")
        self.count = count


class OutputWriteError(TimedRouteError):
    """The output destination could not be written."""
