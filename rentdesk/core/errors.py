# rentdesk/core/errors.py
from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    UNAUTHORIZED = "unauthorized"        # 401
    FORBIDDEN = "forbidden"              # 403
    NOT_FOUND = "not_found"              # 404
    CONFLICT = "conflict"                # 409
    VALIDATION_ERROR = "validation_error"# 400
    BAD_REQUEST = "bad_request"          # 400
    CONFIGURATION_UNAVAILABLE = "configuration_unavailable"  # 503
    INTERNAL_ERROR = "internal_error"    # 500


class AppError(Exception):
    """
    Base domain error.
    Services raise these; the handlers in main.py turn them into
    `{"status": "error", "code", "message"}` responses.
    """
    status_code: int = 500
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, *, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.meta = meta

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "status": "error",
            "code": self.code.value,
            "message": self.message,
        }
        if self.meta:
            body["meta"] = self.meta
        return body


class NotFoundError(AppError):
    status_code = 404
    code = ErrorCode.NOT_FOUND


class ConflictError(AppError):
    status_code = 409
    code = ErrorCode.CONFLICT


class UnauthorizedError(AppError):
    status_code = 401
    code = ErrorCode.UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = 403
    code = ErrorCode.FORBIDDEN


class BadRequestError(AppError):
    status_code = 400
    code = ErrorCode.BAD_REQUEST


class ValidationError(AppError):
    status_code = 400
    code = ErrorCode.VALIDATION_ERROR


class ConfigurationUnavailableError(AppError):
    """Raised when a backing table exists in code but not yet in the database."""
    status_code = 503
    code = ErrorCode.CONFIGURATION_UNAVAILABLE
