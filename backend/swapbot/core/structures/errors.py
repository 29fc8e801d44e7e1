from __future__ import annotations

from enum import Enum
from typing import Optional


class DiscoveryErrorKind(str, Enum):
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    NETWORK_ERROR = "network_error"


class DiscoveryError(Exception):
    """
    Classified failure of a pool discovery request.

    A single exception type tagged by `kind`; callers switch on the tag
    (or on `retryable`) instead of on subclasses.
    """

    def __init__(self, kind: DiscoveryErrorKind, message: str, retryable: bool,
                 status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.retryable = retryable
        self.status_code = status_code

    def __repr__(self) -> str:
        return (f"DiscoveryError(kind={self.kind.value}, retryable={self.retryable}, "
                f"status_code={self.status_code}, message={self.message!r})")


class SwapValidationError(ValueError):
    """Raised before any network call when a user-supplied value is unusable."""

    def __init__(self, field: str, constraint: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Invalid {field}: {constraint}")
        self.field = field
        self.constraint = constraint
