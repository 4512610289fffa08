"""Errors raised by the document routing engine.

Every failure is caller-correctable and carries a human-readable message.
Nothing here is retried by the engine.
"""


class ProcessError(Exception):
    """Base class for routing engine errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProcessValidationError(ProcessError):
    """Missing or malformed input (empty subject, unknown status, ...)."""
    pass


class StatusTransitionError(ProcessValidationError):
    """Raised when the configured transition policy rejects a status change."""
    pass


class PermissionDeniedError(ProcessError):
    """Movement or deletion denied by the permission validator."""
    pass


class InvalidReferenceError(ProcessError):
    """Destination area or employee is inactive or inconsistent."""
    pass


class ProcessNotFoundError(ProcessError):
    """Document, user, area or employee does not exist."""
    pass


class ConcurrencyError(ProcessError):
    """A concurrent writer changed the document, or a generated number collided."""
    pass
