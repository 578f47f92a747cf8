"""Mock-or-live persistence layer for the case manager."""
from case_manager.errors import (
    ApiError,
    AuthenticationError,
    CaseManagerError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitExceeded,
    ValidationError,
)
from case_manager.factory import Services, build_services

__version__ = "1.0.0"

__all__ = [
    "ApiError",
    "AuthenticationError",
    "CaseManagerError",
    "NetworkError",
    "NotFoundError",
    "ParseError",
    "RateLimitExceeded",
    "ValidationError",
    "Services",
    "build_services",
]
