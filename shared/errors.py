"""
Shared error handling for the Project Board services.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = False
    request_id: Optional[str] = None
    code: str
    error: str
    details: Dict[str, Any] = {}


class BoardException(Exception):
    """Base exception for Project Board services."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            error=self.message,
            details=self.details
        )


class ValidationError(BoardException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class InvalidFilterError(ValidationError):
    """A listing filter could not be normalized."""

    def __init__(self, message: str = "Invalid filter", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.code = "INVALID_FILTER"


class DataUnavailableError(BoardException):
    """The relational data source could not answer a query."""

    status_code = 503

    def __init__(self, message: str = "Project data unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("DATA_UNAVAILABLE", message, details)


class CacheUnavailableError(BoardException):
    """The cache store could not be read or written."""

    status_code = 503

    def __init__(self, message: str = "Cache unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_UNAVAILABLE", message, details)
