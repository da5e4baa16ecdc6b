"""Custom exceptions for the training scheduler."""


class SchedulingError(Exception):
    """Base exception for scheduler errors."""

    pass


class ConfigurationError(SchedulingError):
    """Scheduling criteria or input are structurally invalid."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        if field:
            message = f"Invalid configuration for '{field}': {message}"
        super().__init__(message)


class InvariantViolationError(SchedulingError):
    """Internal consistency check failed.

    Raised for conditions that indicate a defect in the scheduler itself,
    such as a negative duration or a reservation on an occupied classroom.
    """

    def __init__(self, message: str, location: str | None = None):
        self.location = location
        if location:
            message = f"{message} (location '{location}')"
        super().__init__(message)


class InputFormatError(SchedulingError):
    """Input document could not be read."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path:
            message = f"{message} in '{path}'"
        super().__init__(message)
