"""
Cloudkeys exception hierarchy.

Every error raised by the library inherits from :class:`CloudkeysError`
and carries a structural :class:`ErrorKind`, so callers can tell
"absent" from "ambiguous" from "anything else" without comparing
exception instances::

    try:
        sm.get_secret("lb-cert")
    except CloudkeysError as e:
        if e.kind is ErrorKind.NOT_FOUND:
            ...
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification shared by every Cloudkeys error."""

    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    MALFORMED_REFERENCE = "malformed_reference"
    REMOTE = "remote"
    CANCELLED = "cancelled"


# ── Base ──────────────────────────────────────────────────────────────
class CloudkeysError(Exception):
    """Root exception for all Cloudkeys errors."""

    kind: ErrorKind = ErrorKind.REMOTE


# ── Secret Manager ────────────────────────────────────────────────────
class SecretManagerError(CloudkeysError):
    """Base exception for secret manager operations."""


class SecretNotFoundError(SecretManagerError):
    """No secret matched the lookup."""

    kind = ErrorKind.NOT_FOUND


class AmbiguousSecretError(SecretManagerError):
    """More than one secret matched a lookup that must be unique."""

    kind = ErrorKind.AMBIGUOUS


class MalformedReferenceError(SecretManagerError, ValueError):
    """A secret reference has no identifier segment."""

    kind = ErrorKind.MALFORMED_REFERENCE


class RemoteServiceError(SecretManagerError):
    """The key-manager service rejected or failed a request.

    The SDK exception is chained as ``__cause__``.
    """

    kind = ErrorKind.REMOTE

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ── Request lifecycle ─────────────────────────────────────────────────
class OperationCancelledError(CloudkeysError):
    """The caller cancelled the request context."""

    kind = ErrorKind.CANCELLED


class OperationTimeoutError(OperationCancelledError):
    """The request context deadline passed."""


def error_kind(exc: BaseException) -> ErrorKind | None:
    """Return the :class:`ErrorKind` of *exc*, or ``None`` for foreign errors."""
    if isinstance(exc, CloudkeysError):
        return exc.kind
    return None


__all__ = [
    "ErrorKind",
    "CloudkeysError",
    "SecretManagerError",
    "SecretNotFoundError",
    "AmbiguousSecretError",
    "MalformedReferenceError",
    "RemoteServiceError",
    "OperationCancelledError",
    "OperationTimeoutError",
    "error_kind",
]
