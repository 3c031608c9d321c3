"""Exception types shared by the staff service and its backend client."""

from typing import Any, Optional


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, *, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class BackendError(ServiceError):
    """A call to the remote REST backend failed.

    ``status`` is the backend's HTTP status, or ``None`` when the request never
    produced a response (connection error, timeout).
    """

    status_code = 502
    code = "backend_error"

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message, details=payload)
        self.status = status
        self.payload = payload

    @property
    def error_code(self) -> Optional[str]:
        if isinstance(self.payload, dict):
            return self.payload.get("error")
        return None


class ValidationFailed(ServiceError):
    """Input rejected before any network call was made."""

    status_code = 422
    code = "validation_failed"

    def __init__(self, errors: dict[str, str], message: str = "Validation failed"):
        super().__init__(message, details=errors)
        self.errors = errors
