"""SQLAlchemy mapping metadata for the catalog domain model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from decimal import Decimal
from functools import cache
from typing import TYPE_CHECKING, Any, Final, cast

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
    text,
)
from sqlalchemy.orm import configure_mappers, relationship

from catalogcore.domain.model import (
    BaseOffer,
    ChangeRequest,
    ChangeRequestStatus,
    OfferScope,
    Product,
    ProductStatus,
    Variant,
    VariantOffer,
    VariantOption,
)

if TYPE_CHECKING:
    from catalogcore.domain.model import OfferPatch

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]
MoneyColumnType = Numeric(14, 2, asdecimal=True)

# patch/snapshot keys holding money values
DECIMAL_PATCH_FIELDS: Final[frozenset[str]] = frozenset({"price"})


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class OfferPatchType(TypeDecorator[dict[str, object]]):
    """Offer field values stored as JSON text; money survives as exact decimals."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: OfferPatch | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        payload = {
            key: str(item) if isinstance(item, Decimal) else item for key, item in value.items()
        }
        return json.dumps(payload, sort_keys=True)

    def process_result_value(self, value: str | None, dialect: Dialect) -> OfferPatch | None:
        _ = dialect
        if value is None:
            return None
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return {}
        items = cast(dict[str, Any], loaded)
        return {
            key: Decimal(str(item))
            if key in DECIMAL_PATCH_FIELDS and item is not None
            else item
            for key, item in items.items()
        }


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Catalog tables --------------------------------------------------------------

product_table = Table(
    "product",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("title", String, nullable=False),
    Column("status", Enum(ProductStatus, native_enum=False), nullable=False),
    Column("seller_id", UUIDColumnType, nullable=True),
    Column("base_price", MoneyColumnType, nullable=True),
    Column("is_deleted", Boolean, nullable=False, default=False),
    Column("created_at", UTCDateTime(), nullable=False),
)

variant_table = Table(
    "variant",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "product_id", UUIDColumnType, ForeignKey("product.id", ondelete="CASCADE"), nullable=False
    ),
    Column("sku", String, nullable=False, unique=True),
    Column("in_stock", Boolean, nullable=False, default=True),
    Column("available_qty", Integer, nullable=False, default=0),
    Column("price", MoneyColumnType, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("is_deleted", Boolean, nullable=False, default=False),
    Column("archived_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_variant_product", "product_id"),
)

variant_option_table = Table(
    "variant_option",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "variant_id", UUIDColumnType, ForeignKey("variant.id", ondelete="CASCADE"), nullable=False
    ),
    Column("attribute_id", String, nullable=False),
    Column("value_id", String, nullable=False),
    Column("price_bump", MoneyColumnType, nullable=True),
    UniqueConstraint("variant_id", "attribute_id", name="uq_variant_option_attribute"),
)

# Offer tables ----------------------------------------------------------------


def _offer_columns() -> list[Column[Any]]:
    return [
        Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
        Column("seller_id", UUIDColumnType, nullable=False),
        Column(
            "product_id",
            UUIDColumnType,
            ForeignKey("product.id", ondelete="CASCADE"),
            nullable=False,
        ),
        Column("price", MoneyColumnType, nullable=False),
        Column("available_qty", Integer, nullable=False, default=0),
        Column("lead_days", Integer, nullable=True),
        Column("is_active", Boolean, nullable=False, default=True),
        Column("in_stock", Boolean, nullable=False, default=True),
        Column("currency", String(8), nullable=False),
        Column("created_at", UTCDateTime(), nullable=False),
        Column("updated_at", UTCDateTime(), nullable=False),
    ]


base_offer_table = Table(
    "base_offer",
    mapper_registry.metadata,
    *_offer_columns(),
    UniqueConstraint("seller_id", "product_id", name="uq_base_offer_seller_product"),
)

variant_offer_table = Table(
    "variant_offer",
    mapper_registry.metadata,
    *_offer_columns(),
    Column(
        "variant_id", UUIDColumnType, ForeignKey("variant.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "base_offer_id",
        UUIDColumnType,
        ForeignKey("base_offer.id", ondelete="SET NULL"),
        nullable=True,
    ),
    UniqueConstraint("seller_id", "variant_id", name="uq_variant_offer_seller_variant"),
    Index("ix_variant_offer_variant", "variant_id"),
)

PENDING_ONLY = text(f"status = '{ChangeRequestStatus.PENDING.value}'")

change_request_table = Table(
    "offer_change_request",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("seller_id", UUIDColumnType, nullable=False),
    Column("product_id", UUIDColumnType, nullable=False),
    Column("scope", Enum(OfferScope, native_enum=False), nullable=False),
    Column("offer_id", UUIDColumnType, nullable=False),
    Column("patch", OfferPatchType(), nullable=False),
    Column("snapshot", OfferPatchType(), nullable=True),
    Column("status", Enum(ChangeRequestStatus, native_enum=False), nullable=False),
    Column("note", Text, nullable=True),
    Column("requested_by", UUIDColumnType, nullable=True),
    Column("requested_at", UTCDateTime(), nullable=True),
    Column("reviewed_by", UUIDColumnType, nullable=True),
    Column("reviewed_at", UTCDateTime(), nullable=True),
    Column("review_note", Text, nullable=True),
    Column("rejection_reason", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Index("ix_offer_change_request_status", "status", "requested_at"),
    Index(
        "uq_offer_change_request_pending",
        "seller_id",
        "scope",
        "offer_id",
        unique=True,
        sqlite_where=PENDING_ONLY,
        postgresql_where=PENDING_ONLY,
    ),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Product, product_table)

    mapper_registry.map_imperatively(VariantOption, variant_option_table)

    mapper_registry.map_imperatively(
        Variant,
        variant_table,
        properties={
            "options": relationship(
                VariantOption,
                cascade="all, delete-orphan",
                lazy="selectin",
                order_by=variant_option_table.c.attribute_id,
            ),
        },
    )

    mapper_registry.map_imperatively(BaseOffer, base_offer_table)
    mapper_registry.map_imperatively(VariantOffer, variant_offer_table)
    mapper_registry.map_imperatively(ChangeRequest, change_request_table)

    configure_mappers()
    return mapper_registry

