"""Error taxonomy shared by the image workflows.

Disk failures are not wrapped: they surface as the built-in ``OSError``.
"""
from __future__ import annotations


class ImageServiceError(Exception):
    """Base class for expected, user-facing failures."""


class ValidationError(ImageServiceError):
    """Empty or undecodable upload."""


class NotFoundError(ImageServiceError):
    """Unknown image id, or metadata that points at a missing file."""


class InvalidRequestError(ImageServiceError):
    """Request that can never succeed for this image (e.g. upscaling)."""


class ConfigError(ImageServiceError):
    """Aspect-ratio catalog missing or malformed."""


class ConflictError(ImageServiceError):
    """Metadata insert for an id that already exists."""
