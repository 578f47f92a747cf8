"""Error taxonomy for the persistence layer.

Every failure surfaces to the caller as one of these; nothing is retried
or swallowed here.
"""
from typing import Any, Optional


class CaseManagerError(Exception):
    """Base class for all persistence layer errors."""
    pass


class NotFoundError(CaseManagerError):
    """Raised when a record id is absent from the store (or the server says 404)."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} with id {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class NetworkError(CaseManagerError):
    """Raised when no response could be obtained from the server."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Network error: {cause}")
        self.cause = cause


class ApiError(CaseManagerError):
    """Raised when the server answers with a non-success status."""

    def __init__(self, message: str, status_code: int, body: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ParseError(CaseManagerError):
    """Raised when a success response body is not valid JSON."""
    pass


class AuthenticationError(CaseManagerError):
    """Raised on bad credentials or an unknown session token."""
    pass


class ValidationError(CaseManagerError):
    """Raised when registration input is malformed."""
    pass


class RateLimitExceeded(AuthenticationError):
    """Raised when too many login attempts were made for one account."""

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after
