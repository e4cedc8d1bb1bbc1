# classroom_app/core/exceptions.py
"""Custom exceptions for the classroom application."""


class AppException(Exception):
    """Base exception for the application. Rendered as ``{"message": ...}``."""
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppException):
    """Malformed or missing input."""
    status_code = 400


class PermissionDeniedError(AppException):
    """Caller role is not allowed to perform the operation."""
    status_code = 403

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


class NotFoundError(AppException):
    """Referenced entity is absent or not owned by the caller's school."""
    status_code = 404


class ConflictError(AppException):
    """A uniqueness or ownership invariant would be violated."""
    status_code = 409
