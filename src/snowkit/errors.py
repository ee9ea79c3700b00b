"""
Error taxonomy for snowkit.

Platform adapters translate client exceptions into these classes so the
orchestrator and the artifact pipeline can decide, per error kind, whether a
failure is a no-op, a retry trigger, an isolated leaf failure or fatal.
"""

from typing import Optional

import requests

from snowkit.models.enums import ErrorKind


class SnowkitError(Exception):
    """Base class for all snowkit errors."""

    kind: ErrorKind = ErrorKind.PLATFORM


class ConfigurationError(SnowkitError):
    """Raised for invalid configuration or a malformed dependency graph."""

    kind = ErrorKind.CONFIGURATION


class ResourceNotFoundError(SnowkitError):
    """Raised when an object does not exist (or is not visible to the role)."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource_name: str, detail: Optional[str] = None):
        self.resource_name = resource_name
        super().__init__(detail or f"'{resource_name}' does not exist or is not authorized")


class DependencyBlockedError(SnowkitError):
    """Raised when a drop is refused because live objects still depend on the target."""

    kind = ErrorKind.DEPENDENCY_BLOCKED

    def __init__(self, resource_name: str, detail: Optional[str] = None):
        self.resource_name = resource_name
        super().__init__(detail or f"'{resource_name}' has live dependents")


class PermissionDeniedError(SnowkitError):
    """Raised when the current role lacks a privilege."""

    kind = ErrorKind.PERMISSION_DENIED


class TransientPlatformError(SnowkitError):
    """Raised for platform errors that may succeed when retried."""

    kind = ErrorKind.TRANSIENT


class FetchTimeoutError(SnowkitError):
    """Raised when an artifact fetch exceeds its timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, url: str, timeout_seconds: float):
        self.url = url
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Timed out after {timeout_seconds:g}s fetching {url}")


class ArtifactFetchError(SnowkitError):
    """Raised when the artifact source answers with an error status."""

    def __init__(self, url: str, status_code: Optional[int], detail: str):
        self.url = url
        self.status_code = status_code
        super().__init__(detail)


class ArtifactIntegrityError(SnowkitError):
    """Raised when fetched bytes do not match the pinned content hash."""

    kind = ErrorKind.INTEGRITY


def classify_error(error: BaseException) -> ErrorKind:
    """Map any exception raised by an operation onto the error taxonomy."""
    if isinstance(error, SnowkitError):
        return error.kind
    if isinstance(error, requests.Timeout):
        return ErrorKind.TIMEOUT
    if isinstance(error, PermissionError):
        return ErrorKind.PERMISSION_DENIED
    if isinstance(error, TimeoutError):
        return ErrorKind.TIMEOUT
    return ErrorKind.PLATFORM


def describe_error(error: BaseException) -> str:
    """Human-readable detail for an outcome, prefixed by its error kind."""
    kind = classify_error(error)
    if kind == ErrorKind.PERMISSION_DENIED:
        return f"Permission denied: {error}. Check that the current role has the required privileges."
    if kind == ErrorKind.NOT_FOUND:
        return f"Resource not found: {error}"
    if kind == ErrorKind.DEPENDENCY_BLOCKED:
        return f"Dependency blocked: {error}"
    if kind == ErrorKind.TIMEOUT:
        return f"Timeout: {error}"
    if kind == ErrorKind.TRANSIENT:
        return f"Service temporarily unavailable: {error}. Try again later."
    if kind == ErrorKind.INTEGRITY:
        return f"Integrity check failed: {error}"
    if kind == ErrorKind.CONFIGURATION:
        return f"Configuration error: {error}"
    return str(error) or error.__class__.__name__
