"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from catalogcore.adapters.sqlalchemy.mappings import (
    base_offer_table,
    change_request_table,
    variant_offer_table,
    variant_table,
)
from catalogcore.domain.model import (
    BaseOffer,
    ChangeRequest,
    ChangeRequestStatus,
    Product,
    Variant,
    VariantOffer,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session

    from catalogcore.domain.model import Offer, OfferScope, VariantOption


class SqlAlchemyProductRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Product) -> None:
        self.session.add(entity)

    def get(self, product_id: UUID) -> Product | None:
        return self.session.get(Product, product_id)


class SqlAlchemyVariantRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Variant) -> None:
        self.session.add(entity)

    def get(self, variant_id: UUID) -> Variant | None:
        return self.session.get(Variant, variant_id)

    def list_for_product(self, product_id: UUID) -> list[Variant]:
        stmt = (
            select(Variant)
            .where(variant_table.c.product_id == product_id)
            .order_by(variant_table.c.created_at, variant_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def sku_exists(self, sku: str) -> bool:
        stmt = select(variant_table.c.id).where(variant_table.c.sku == sku).limit(1)
        return self.session.execute(stmt).first() is not None

    def replace_options(self, variant: Variant, options: Sequence[VariantOption]) -> None:
        # flush the deletes first; (variant_id, attribute_id) is unique
        variant.options.clear()
        self.session.flush()
        variant.options.extend(options)

    def remove(self, variant: Variant) -> None:
        self.session.delete(variant)


class SqlAlchemyOfferRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Offer) -> None:
        self.session.add(entity)

    def get_base(self, seller_id: UUID, product_id: UUID) -> BaseOffer | None:
        stmt = (
            select(BaseOffer)
            .where(base_offer_table.c.seller_id == seller_id)
            .where(base_offer_table.c.product_id == product_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_variant(self, seller_id: UUID, variant_id: UUID) -> VariantOffer | None:
        stmt = (
            select(VariantOffer)
            .where(variant_offer_table.c.seller_id == seller_id)
            .where(variant_offer_table.c.variant_id == variant_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_variant_offer(self, offer_id: UUID) -> VariantOffer | None:
        return self.session.get(VariantOffer, offer_id)

    def list_variant_offers(self, seller_id: UUID, product_id: UUID) -> list[VariantOffer]:
        stmt = (
            select(VariantOffer)
            .where(variant_offer_table.c.seller_id == seller_id)
            .where(variant_offer_table.c.product_id == product_id)
            .order_by(variant_offer_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())

    def offers_for_variant(self, variant_id: UUID) -> list[VariantOffer]:
        stmt = select(VariantOffer).where(variant_offer_table.c.variant_id == variant_id)
        return list(self.session.execute(stmt).scalars())

    def locked_variant_ids(self, product_id: UUID, *, owner_id: UUID | None) -> set[UUID]:
        stmt = (
            select(variant_offer_table.c.variant_id)
            .join(variant_table, variant_table.c.id == variant_offer_table.c.variant_id)
            .where(variant_table.c.product_id == product_id)
            .where(variant_offer_table.c.is_active.is_(True))
            .distinct()
        )
        if owner_id is not None:
            stmt = stmt.where(variant_offer_table.c.seller_id != owner_id)
        return set(self.session.execute(stmt).scalars())

    def remove(self, offer: Offer) -> None:
        self.session.delete(offer)
        # variant offers reference base offers and variants by plain foreign keys
        self.session.flush()


class SqlAlchemyChangeRequestRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ChangeRequest) -> None:
        self.session.add(entity)

    def find_pending(
        self, seller_id: UUID, scope: OfferScope, offer_id: UUID
    ) -> ChangeRequest | None:
        stmt = (
            select(ChangeRequest)
            .where(change_request_table.c.seller_id == seller_id)
            .where(change_request_table.c.scope == scope)
            .where(change_request_table.c.offer_id == offer_id)
            .where(change_request_table.c.status == ChangeRequestStatus.PENDING)
            .order_by(change_request_table.c.created_at.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def pending_for_offers(
        self, seller_id: UUID, offer_ids: Collection[UUID]
    ) -> list[ChangeRequest]:
        if not offer_ids:
            return []
        stmt = (
            select(ChangeRequest)
            .where(change_request_table.c.seller_id == seller_id)
            .where(change_request_table.c.offer_id.in_(list(offer_ids)))
            .where(change_request_table.c.status == ChangeRequestStatus.PENDING)
            .order_by(change_request_table.c.requested_at.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def list_requests(
        self,
        *,
        status: ChangeRequestStatus | None,
        scope: OfferScope | None = None,
    ) -> list[ChangeRequest]:
        stmt = select(ChangeRequest).order_by(
            change_request_table.c.requested_at.desc(),
            change_request_table.c.created_at.desc(),
        )
        if status is not None:
            stmt = stmt.where(change_request_table.c.status == status)
        if scope is not None:
            stmt = stmt.where(change_request_table.c.scope == scope)
        return list(self.session.execute(stmt).scalars())


__all__ = [
    "SqlAlchemyChangeRequestRepository",
    "SqlAlchemyOfferRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyVariantRepository",
]
