# schoolhub/core/exceptions.py
"""Custom exceptions for the SchoolHub application."""
from typing import Optional


class SchoolHubException(Exception):
    """Base exception for SchoolHub; rendered as {"message": ...}."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(SchoolHubException):
    """Missing field, invalid enum value or invalid resource type."""
    status_code = 400


class AuthenticationError(SchoolHubException):
    """Missing, malformed or expired credential."""
    status_code = 401


class AuthorizationError(SchoolHubException):
    """Role mismatch or failed ownership/membership check."""
    status_code = 403


class NotFoundError(SchoolHubException):
    """Referenced entity does not exist."""
    status_code = 404

    def __init__(self, resource: str, message: Optional[str] = None):
        self.resource = resource
        super().__init__(message or f"{resource} not found")


class ConflictError(SchoolHubException):
    """Duplicate natural key (email, attendance day, grade, enrollment)."""
    status_code = 400


class UnhandledError(SchoolHubException):
    """Any other failure, tagged with the operation that raised it."""
    status_code = 500

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Server error in {operation}: {cause}")


# Errors raised by the data-access layer

class DataAccessError(Exception):
    """Base class for persistence failures translated from the ORM."""


class RecordNotFoundError(DataAccessError):
    def __init__(self, model_name: str, record_id=None):
        self.model_name = model_name
        self.record_id = record_id
        message = f"{model_name} not found"
        if record_id is not None:
            message += f" with id: {record_id}"
        super().__init__(message)


class UniqueConstraintError(DataAccessError):
    """A unique constraint was violated."""


class ForeignKeyViolationError(DataAccessError):
    """A referenced row does not exist."""
