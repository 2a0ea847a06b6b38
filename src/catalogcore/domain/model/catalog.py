"""Catalog entities: products, their variants and the option selections defining them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from catalogcore.domain.model.entity import Entity, utcnow
from catalogcore.domain.model.enums import ModelName, ProductStatus

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Product(Entity):
    MODEL: ClassVar[ModelName] = ModelName.PRODUCT

    title: str
    status: ProductStatus = ProductStatus.DRAFT
    seller_id: UUID | None = None  # owning seller, if any
    base_price: Decimal | None = None
    is_deleted: bool = False
    created_at: datetime = field(default_factory=utcnow)

    def is_owned_by(self, seller_id: UUID) -> bool:
        return self.seller_id is not None and self.seller_id == seller_id


@dataclass(eq=False, kw_only=True)
class VariantOption(Entity):
    """One facet selection (attribute -> value) of a variant."""

    MODEL: ClassVar[ModelName] = ModelName.VARIANT_OPTION

    attribute_id: str
    value_id: str
    price_bump: Decimal | None = None


@dataclass(eq=False, kw_only=True)
class Variant(Entity):
    """A purchasable combination of option values of one product.

    Lifecycle flags: `is_active`, `is_deleted` and `archived_at` are the
    soft-disable markers; which of them a deployment stores is a schema
    capability question, so callers never assume all three exist.
    """

    MODEL: ClassVar[ModelName] = ModelName.VARIANT

    product_id: UUID
    sku: str
    in_stock: bool = True
    available_qty: int = 0
    price: Decimal | None = None

    is_active: bool = True
    is_deleted: bool = False
    archived_at: datetime | None = None
    created_at: datetime = field(default_factory=utcnow)

    options: list[VariantOption] = field(default_factory=list["VariantOption"])

    @property
    def is_live(self) -> bool:
        return self.is_active and not self.is_deleted and self.archived_at is None
