"""Client-side error taxonomy.

Transport problems never surface as exceptions; they come back as failed
envelopes. These errors are raised where a caller asked for a hard failure
(state holders, ``handle_api_error``, upload validation).
"""

from __future__ import annotations


class FrextError(Exception):
    """Base error for frext client failures."""


class FrextApiError(FrextError):
    """Raised when an API envelope reports failure and the caller needs an exception."""

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class UploadValidationError(FrextError):
    """Raised when a file is rejected before any network call."""

    def __init__(self, message: str, *, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class StorageError(FrextError):
    """Raised by key/value stores when the backing medium is unusable."""
