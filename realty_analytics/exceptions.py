"""
Domain exceptions raised by calculators and services.

The API layer maps these onto HTTP responses; nothing below the API
raises HTTPException directly.
"""


class AnalyticsError(Exception):
    """Base exception for the analytics engine."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AnalyticsError):
    """A referenced record does not exist or is not visible to the caller."""

    status_code = 404


class ConflictError(AnalyticsError):
    """The request collides with existing state (e.g. duplicate membership)."""

    status_code = 409


class ValidationError(AnalyticsError):
    """Numeric input outside the domain a calculation accepts."""

    status_code = 400
