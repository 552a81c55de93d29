"""Domain errors raised by services and routes.

Every error carries the HTTP status it maps to; ``app.main`` registers a
handler that renders them as ``{"detail": message}``.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class PermissionDenied(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class PayloadTooLarge(AppError):
    status_code = 413


class InvalidArchive(AppError):
    """Structural import precondition failed; nothing was written."""

    status_code = 400
