"""
Domain exceptions raised by the service layer.

Routers never catch these; ``main.py`` turns them into the error envelope
``{"success": false, "errors": [{"msg", "code"}]}``.
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

    def to_error(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"msg": self.message, "code": self.error_code}
        if self.details:
            error["details"] = self.details
        return error


class BadRequestError(AppException):
    """Illegal state transitions, missing employee profiles, rejected uploads."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, error_code="BAD_REQUEST", details=details)


class NotFoundError(AppException):
    """Raised when an entity is absent or owned by another tenant."""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404, error_code="NOT_FOUND")


class ConflictError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=409, error_code="CONFLICT", details=details)


class AuthenticationError(AppException):
    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, status_code=401, error_code="AUTH_FAILED")


class AccessDeniedError(AppException):
    """Named AccessDeniedError to avoid shadowing the built-in PermissionError."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, status_code=403, error_code="PERMISSION_DENIED")
