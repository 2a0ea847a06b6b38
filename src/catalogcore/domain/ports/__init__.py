"""Domain port definitions for adapters."""

from __future__ import annotations

from .capabilities import SchemaCapabilities
from .persistence import (
    ChangeRequestRepository,
    OfferRepository,
    ProductRepository,
    Repository,
    VariantRepository,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    CatalogUnitOfWorkFactory,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "CatalogUnitOfWorkFactory",
    "ChangeRequestRepository",
    "OfferRepository",
    "ProductRepository",
    "Repository",
    "RepositoryCollection",
    "SchemaCapabilities",
    "UnitOfWork",
    "VariantRepository",
]
