"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ProductStatus(StrEnum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    LIVE = "LIVE"
    REJECTED = "REJECTED"


class OfferScope(StrEnum):
    BASE_OFFER = "BASE_OFFER"
    VARIANT_OFFER = "VARIANT_OFFER"


class ChangeRequestStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"
    EXPIRED = "EXPIRED"


class ModelName(StrEnum):
    """Names the capability adapter answers questions about."""

    PRODUCT = "Product"
    VARIANT = "Variant"
    VARIANT_OPTION = "VariantOption"
    BASE_OFFER = "BaseOffer"
    VARIANT_OFFER = "VariantOffer"
    CHANGE_REQUEST = "ChangeRequest"
