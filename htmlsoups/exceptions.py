"""
Exception hierarchy for htmlsoups.

All exceptions inherit from SoupsError to allow catching all library errors.
"""

from datetime import datetime, timezone
from typing import Any


class SoupsError(Exception):
    """Base exception for all htmlsoups errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)


# =============================================================================
# Document Errors
# =============================================================================


class ParseError(SoupsError):
    """HTML could not be parsed, or the document cannot be queried at all."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message, {"url": url})
        self.url = url


class QueryError(SoupsError):
    """A CSS selector failed to parse or execute against a document."""

    def __init__(self, selector: str, message: str):
        super().__init__(
            f"Selector query failed for {selector!r}: {message}",
            {"selector": selector},
        )
        self.selector = selector


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(SoupsError):
    """Learning state could not be read or written."""

    def __init__(self, operation: str, backend: str, message: str):
        super().__init__(
            f"{backend} storage {operation} failed: {message}",
            {"operation": operation, "backend": backend},
        )
        self.operation = operation
        self.backend = backend


# =============================================================================
# Fetch Errors
# =============================================================================


class FetchError(SoupsError):
    """HTTP fetch failed."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(
            f"Fetch failed for {url}: {message}",
            {"url": url, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code


class TimeoutError(FetchError):
    """Request timed out."""

    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(url, f"Timeout after {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds


class InvalidURLError(FetchError):
    """URL is malformed or has no host."""

    def __init__(self, url: str):
        super().__init__(url, "Invalid URL")


# =============================================================================
# Extraction Errors
# =============================================================================


class ExtractionError(SoupsError):
    """Content extraction failed."""

    def __init__(self, url: str, message: str, selector: str | None = None):
        super().__init__(
            f"Extraction failed for {url}: {message}",
            {"url": url, "selector": selector},
        )
        self.url = url
        self.selector = selector


class ElementNotFoundError(ExtractionError):
    """A required field's selector matched nothing."""

    def __init__(self, url: str, field: str, selector: str):
        super().__init__(url, f"No element found for {field}", selector)
        self.field = field
