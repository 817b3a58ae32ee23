"""Errors raised by the registration service.

Each error carries the HTTP status the API layer answers with; the message is
returned to the client as ``{"error": message}``.
"""


class RegistrationError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RegistrationError):
    """Missing or malformed request fields."""
    status_code = 400


class NotFoundError(RegistrationError):
    status_code = 404


class ConflictError(RegistrationError):
    """The student already holds an active registration for the course."""
    status_code = 400


class CapacityExceededError(RegistrationError):
    status_code = 400


class StorageError(RegistrationError):
    """The database failed underneath an operation."""
    status_code = 500
