"""Request/response shapes for the offer governor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from catalogcore.domain.model import OfferScope

if TYPE_CHECKING:
    from decimal import Decimal
    from uuid import UUID

    from catalogcore.domain.model import ChangeRequest, Offer


@dataclass(frozen=True, slots=True)
class OfferTarget:
    product_id: UUID
    variant_id: UUID | None = None

    @property
    def scope(self) -> OfferScope:
        if self.variant_id is None:
            return OfferScope.BASE_OFFER
        return OfferScope.VARIANT_OFFER


@dataclass(frozen=True, slots=True)
class ProposedOffer:
    """A seller's complete desired state for one offer."""

    price: Decimal
    available_qty: int
    in_stock: bool
    is_active: bool = True
    currency: str | None = None
    lead_days: int | None = None


@dataclass(slots=True)
class UpsertOfferResult:
    offer: Offer
    review_queued: bool
    change_request: ChangeRequest | None = None
    created: bool = False


@dataclass(slots=True)
class DeleteOfferResult:
    deleted_offer_ids: list[UUID] = field(default_factory=list["UUID"])
    canceled_request_ids: list[UUID] = field(default_factory=list["UUID"])
