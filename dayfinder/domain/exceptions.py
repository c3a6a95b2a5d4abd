"""
Domain-specific exception hierarchy for the dayfinder application.
"""


class DayfinderError(Exception):
    """Base class for all application-level errors."""


class InvalidRange(DayfinderError):
    """Raised when a date range is missing a bound or ends before it starts."""


class InvalidSelection(DayfinderError):
    """Raised when a batch operation is called without anything selected."""


class IntervalNotFound(DayfinderError):
    """Raised when an interval id is not part of the caller's (user, group) scope."""


class PersistenceFailure(DayfinderError):
    """Raised when a unit of work could not be committed. The store is left unchanged."""


class UnknownGroupError(DayfinderError):
    """Raised when a group id cannot be resolved to a roster."""


class HolidayLookupError(DayfinderError):
    """Raised when holiday data cannot be provided for a country."""
