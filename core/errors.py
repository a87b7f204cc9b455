class IntakeError(Exception):
    """Base class for errors raised by the intake services."""


class ValidationError(IntakeError):
    """A required input was missing or malformed."""


class ConflictError(IntakeError):
    """The row being created already exists (e.g. a second enrollment)."""


class NotFoundError(IntakeError):
    """The row an operation depends on does not exist."""


class RemoteError(IntakeError):
    """The database call failed. The original exception is chained."""
