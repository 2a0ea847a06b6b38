"""Error taxonomy shared by the variant reconciler and the offer governor.

Validation, not-found and conflict errors are raised before any write is
issued; the surrounding unit of work rolls back whatever the session holds.
"""

from __future__ import annotations


class CatalogError(RuntimeError):
    """Base class for all catalog core failures."""


class ValidationError(CatalogError):
    """Malformed or missing input."""


class NotFoundError(CatalogError):
    """Target is absent, deleted or not visible to the caller."""


class ConflictError(CatalogError):
    """Request contradicts existing state (self-ownership, missing base offer)."""


class ResourceExhaustedError(CatalogError):
    """A bounded search (sku uniquifier) ran out of attempts."""


class StorageError(CatalogError):
    """The transaction could not be flushed or committed."""


__all__ = [
    "CatalogError",
    "ConflictError",
    "NotFoundError",
    "ResourceExhaustedError",
    "StorageError",
    "ValidationError",
]
