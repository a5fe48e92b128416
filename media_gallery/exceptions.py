# media_gallery/exceptions.py
"""
Custom exceptions for the media gallery backend.

Every failure a pipeline has to reason about is one of these. Store
implementations translate backend-specific errors (``OSError``,
``psycopg.Error``) into this taxonomy so pipelines never branch on a
store-specific representation.
"""

from typing import Any, Dict, Optional


class GalleryError(Exception):
    """Base exception for all gallery-specific errors."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.details = details or {}

    def __str__(self) -> str:
        if self.operation:
            return f"{self.message} (operation: {self.operation})"
        return self.message


class NotFoundError(GalleryError):
    """A binary or document is missing. Non-fatal on delete paths."""

    pass


class ObjectNotFoundError(NotFoundError):
    """Object store key does not exist."""

    pass


class DocumentNotFoundError(NotFoundError):
    """Document store key does not exist."""

    pass


class DecodeFailureError(GalleryError):
    """A media file could not be decoded into a thumbnail or poster."""

    pass


class UnsupportedMediaError(DecodeFailureError):
    """File type is not accepted for upload."""

    pass


class StoreFailureError(GalleryError):
    """Network, permission or backend error from either store."""

    pass


class ValidationFailureError(GalleryError):
    """Required input missing or malformed. Raised before any store call."""

    pass


class ConfigurationError(GalleryError):
    """Invalid or incomplete configuration."""

    pass
