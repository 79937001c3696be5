"""Typed errors raised by services and translated to HTTP responses in ``main``."""

from typing import Any, Optional


class AppError(Exception):
    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[Any] = None):
        self.detail = detail if detail is not None else self.default_detail
        super().__init__(str(self.detail))


class ValidationError(AppError):
    status_code = 400
    default_detail = "Invalid request"


class AuthenticationError(AppError):
    status_code = 401
    default_detail = "Not authenticated"


class AuthorizationError(AppError):
    status_code = 403
    default_detail = "Insufficient permissions"


class NotFoundError(AppError):
    status_code = 404
    default_detail = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_detail = "Conflict"
