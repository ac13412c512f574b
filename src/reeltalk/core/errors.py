"""Domain exceptions shared by the service layer and the API."""

from __future__ import annotations


class ReeltalkError(RuntimeError):
    """Base exception for failures surfaced to API callers.

    Subclasses carry the HTTP status the API layer answers with.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ReeltalkError):
    """Raised when input has the wrong shape or length."""

    status_code = 400


class NotFoundError(ReeltalkError):
    """Raised when a topic, post or other reference does not resolve."""

    status_code = 404


class PermissionDeniedError(ReeltalkError):
    """Raised when a user acts on content they do not own."""

    status_code = 403


class RateLimitError(ReeltalkError):
    """Raised when a user's insight generation quota is exhausted."""

    status_code = 429


class UpstreamError(ReeltalkError):
    """Raised when the metadata or text-generation provider fails."""

    status_code = 502


class StorageError(ReeltalkError):
    """Raised when a write the caller depends on could not be persisted."""

    status_code = 503


__all__ = [
    "ReeltalkError",
    "ValidationError",
    "NotFoundError",
    "PermissionDeniedError",
    "RateLimitError",
    "UpstreamError",
    "StorageError",
]
