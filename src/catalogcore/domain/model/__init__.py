"""Domain model for the catalog core."""

from __future__ import annotations

from catalogcore.domain.model.catalog import Product, Variant, VariantOption
from catalogcore.domain.model.entity import Entity, new_id, utcnow
from catalogcore.domain.model.enums import (
    ChangeRequestStatus,
    ModelName,
    OfferScope,
    ProductStatus,
)
from catalogcore.domain.model.offers import (
    RESOLUTION_FIELDS,
    BaseOffer,
    ChangeRequest,
    Offer,
    OfferPatch,
    VariantOffer,
)

__all__ = [
    "RESOLUTION_FIELDS",
    "BaseOffer",
    "ChangeRequest",
    "ChangeRequestStatus",
    "Entity",
    "ModelName",
    "Offer",
    "OfferPatch",
    "OfferScope",
    "Product",
    "ProductStatus",
    "Variant",
    "VariantOffer",
    "VariantOption",
    "new_id",
    "utcnow",
]
