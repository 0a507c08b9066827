"""Domain exceptions raised by the service layer.

Services raise these instead of ``HTTPException`` so they stay usable outside
a request. ``app.main`` maps them onto the ``ErrorResponse`` envelope.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for expected, user-facing failures."""

    status_code: int = 400
    code: str = "SERVICE_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFoundError(ServiceError):
    status_code = 404
    code = "RESOURCE_NOT_FOUND"


class ConflictError(ServiceError):
    """Dependent records exist or a unique value is already taken."""
    status_code = 409
    code = "CONFLICT"


class DomainValidationError(ServiceError):
    status_code = 400
    code = "VALIDATION_FAILED"


class PermissionDeniedError(ServiceError):
    status_code = 403
    code = "PERMISSION_DENIED"


class PayloadTooLargeError(ServiceError):
    status_code = 413
    code = "PAYLOAD_TOO_LARGE"


class StorageError(ServiceError):
    status_code = 502
    code = "STORAGE_ERROR"
