"""Exceptions raised by service installation.

Every failure the CLI reports derives from ServiceError, so callers can catch
the whole family at once. Rollback problems are never raised; they are logged.
"""


class ServiceError(Exception):
    """Base class for service installation errors."""


class ValidationError(ServiceError):
    """Invalid user input (bad option, malformed env entry, forced manager)."""


class UnsupportedSystemError(ServiceError):
    """The host, init system or requested manager has no implementation."""


class AlreadyExistsError(ServiceError):
    """A service artifact already exists at one of the candidate paths."""


class PreconditionError(ServiceError):
    """A requirement for the operation is not met; nothing was written."""


class NotFoundError(ServiceError):
    """The artifact to uninstall does not exist."""


class ActivationError(ServiceError):
    """A native control command failed after the artifact was written."""

    def __init__(self, message: str, diagnostics: str = ""):
        self.diagnostics = diagnostics
        if diagnostics:
            message = f"{message} Error: \n{diagnostics}"
        super().__init__(message)
