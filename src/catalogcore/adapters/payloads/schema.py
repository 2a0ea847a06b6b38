"""Pydantic models describing the JSON request payloads (camelCase)."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

QTY_ALIASES = AliasChoices("availableQty", "available_qty", "qty", "quantity")
PRICE_ALIASES = AliasChoices("price", "basePrice", "unitPrice")


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class OptionPayload(CatalogBaseModel):
    attribute_id: str = Field(alias="attributeId")
    value_id: str = Field(alias="valueId")
    price_bump: Decimal | None = Field(default=None, alias="priceBump")

    @field_validator("attribute_id", "value_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value


class VariantRowPayload(CatalogBaseModel):
    id: UUID | None = None
    sku: str | None = None
    options: list[OptionPayload] = Field(default_factory=list)
    available_qty: int | None = Field(default=None, validation_alias=QTY_ALIASES)
    in_stock: bool | None = Field(default=None, alias="inStock")
    price: Decimal | None = Field(default=None, validation_alias=PRICE_ALIASES)

    _normalize_sku = field_validator("sku", mode="before")(_blank_to_none)


class ReconcileVariantsPayload(CatalogBaseModel):
    product_id: UUID | None = Field(default=None, alias="productId")
    replace: bool = True
    variants: list[VariantRowPayload] = Field(default_factory=list)


class OfferPayload(CatalogBaseModel):
    product_id: UUID = Field(alias="productId")
    variant_id: UUID | None = Field(default=None, alias="variantId")
    price: Decimal = Field(validation_alias=PRICE_ALIASES)
    available_qty: int = Field(default=0, validation_alias=QTY_ALIASES)
    lead_days: int | None = Field(default=None, alias="leadDays")
    is_active: bool = Field(default=True, alias="isActive")
    in_stock: bool | None = Field(default=None, alias="inStock")
    currency: str | None = None

    _normalize_currency = field_validator("currency", mode="before")(_blank_to_none)
