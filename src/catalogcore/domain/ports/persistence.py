"""Ports for persisting catalog aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from catalogcore.domain.model import ChangeRequest, Offer, Product, Variant

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from uuid import UUID

    from catalogcore.domain.model import (
        BaseOffer,
        ChangeRequestStatus,
        OfferScope,
        VariantOffer,
        VariantOption,
    )


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ProductRepository(Repository[Product], Protocol):
    """Repository contract for products."""

    def get(self, product_id: UUID) -> Product | None: ...


@runtime_checkable
class VariantRepository(Repository[Variant], Protocol):
    """Repository contract for variants and their option rows."""

    def get(self, variant_id: UUID) -> Variant | None: ...

    def list_for_product(self, product_id: UUID) -> list[Variant]:
        """All variants of a product, soft-disabled ones included, oldest first."""
        ...

    def sku_exists(self, sku: str) -> bool: ...

    def replace_options(self, variant: Variant, options: Sequence[VariantOption]) -> None:
        """Delete every option row of `variant`, then write `options`."""
        ...

    def remove(self, variant: Variant) -> None: ...


@runtime_checkable
class OfferRepository(Repository[Offer], Protocol):
    """Repository contract for base and variant offers."""

    def get_base(self, seller_id: UUID, product_id: UUID) -> BaseOffer | None: ...

    def get_variant(self, seller_id: UUID, variant_id: UUID) -> VariantOffer | None: ...

    def get_variant_offer(self, offer_id: UUID) -> VariantOffer | None: ...

    def list_variant_offers(self, seller_id: UUID, product_id: UUID) -> list[VariantOffer]: ...

    def offers_for_variant(self, variant_id: UUID) -> list[VariantOffer]: ...

    def locked_variant_ids(self, product_id: UUID, *, owner_id: UUID | None) -> set[UUID]:
        """Variants of `product_id` under an active offer by a seller other than `owner_id`."""
        ...

    def remove(self, offer: Offer) -> None: ...


@runtime_checkable
class ChangeRequestRepository(Repository[ChangeRequest], Protocol):
    """Repository contract for the offer review queue."""

    def find_pending(
        self, seller_id: UUID, scope: OfferScope, offer_id: UUID
    ) -> ChangeRequest | None: ...

    def pending_for_offers(
        self, seller_id: UUID, offer_ids: Collection[UUID]
    ) -> list[ChangeRequest]: ...

    def list_requests(
        self,
        *,
        status: ChangeRequestStatus | None,
        scope: OfferScope | None = None,
    ) -> list[ChangeRequest]:
        """Requests filtered by status (`None` = any) and scope, newest first."""
        ...
