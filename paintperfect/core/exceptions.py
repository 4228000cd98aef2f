# paintperfect/core/exceptions.py
from typing import Any, Dict, Optional


class PaintPerfectError(Exception):
    """Base class for domain errors raised by the service layer."""

    status_code = 400
    code = "error"

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return {"ok": False, "error": body}


class ValidationError(PaintPerfectError):
    status_code = 422
    code = "validation_error"


class NotFoundError(PaintPerfectError):
    status_code = 404
    code = "not_found"


class PermissionDeniedError(PaintPerfectError):
    status_code = 403
    code = "permission_denied"


class ConflictError(PaintPerfectError):
    status_code = 409
    code = "conflict"


class AuthenticationError(PaintPerfectError):
    status_code = 401
    code = "invalid_credentials"


class StorageError(PaintPerfectError):
    status_code = 502
    code = "storage_error"


class CheckoutError(PaintPerfectError):
    status_code = 502
    code = "checkout_failed"
