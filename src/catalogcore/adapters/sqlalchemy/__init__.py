"""SQLAlchemy adapter package for the catalog core."""

from __future__ import annotations

from .capabilities import reflect_schema_capabilities
from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyChangeRequestRepository,
    SqlAlchemyOfferRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyVariantRepository,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyChangeRequestRepository",
    "SqlAlchemyOfferRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyVariantRepository",
    "StartupError",
    "configured_engine",
    "is_started",
    "mapper_registry",
    "reflect_schema_capabilities",
    "shutdown",
    "start_mappers",
    "startup",
]
