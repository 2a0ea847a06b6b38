"""Seller offers and the review queue that gates their price-sensitive fields."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from catalogcore.domain.model.entity import Entity, utcnow
from catalogcore.domain.model.enums import ChangeRequestStatus, ModelName, OfferScope

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime
    from decimal import Decimal
    from uuid import UUID


type OfferPatch = dict[str, object]


@dataclass(eq=False, kw_only=True)
class Offer(Entity):
    """Fields shared by both offer kinds. Never persisted on its own."""

    SCOPE: ClassVar[OfferScope]

    seller_id: UUID
    product_id: UUID

    price: Decimal
    available_qty: int = 0
    lead_days: int | None = None
    is_active: bool = True
    in_stock: bool = True
    currency: str

    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def scope(self) -> OfferScope:
        return self.SCOPE

    def touch(self, at: datetime | None = None) -> None:
        self.updated_at = at or utcnow()


@dataclass(eq=False, kw_only=True)
class BaseOffer(Offer):
    MODEL: ClassVar[ModelName] = ModelName.BASE_OFFER
    SCOPE: ClassVar[OfferScope] = OfferScope.BASE_OFFER


@dataclass(eq=False, kw_only=True)
class VariantOffer(Offer):
    MODEL: ClassVar[ModelName] = ModelName.VARIANT_OFFER
    SCOPE: ClassVar[OfferScope] = OfferScope.VARIANT_OFFER

    variant_id: UUID
    base_offer_id: UUID | None = None


RESOLUTION_FIELDS: tuple[str, ...] = (
    "reviewed_at",
    "reviewed_by",
    "review_note",
    "rejection_reason",
)


@dataclass(eq=False, kw_only=True)
class ChangeRequest(Entity):
    """A queued proposal for an offer's review-gated fields.

    `patch` always carries the latest proposal. `snapshot` is captured when
    the request is first opened and stays fixed while it is pending.
    """

    MODEL: ClassVar[ModelName] = ModelName.CHANGE_REQUEST

    seller_id: UUID
    product_id: UUID
    scope: OfferScope
    offer_id: UUID

    patch: OfferPatch = field(default_factory=dict[str, object])
    snapshot: OfferPatch | None = None
    status: ChangeRequestStatus = ChangeRequestStatus.PENDING
    note: str | None = None

    requested_by: UUID | None = None
    requested_at: datetime | None = None
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None
    review_note: str | None = None
    rejection_reason: str | None = None

    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def revise(self, patch: Mapping[str, object]) -> None:
        """Replace the proposal in place; status returns to PENDING."""
        self.patch = dict(patch)
        self.status = ChangeRequestStatus.PENDING
        self.updated_at = utcnow()

    def clear_resolution(self, fields: Iterable[str] = RESOLUTION_FIELDS) -> None:
        for name in fields:
            setattr(self, name, None)

    def cancel(self, at: datetime | None = None) -> None:
        self.status = ChangeRequestStatus.CANCELED
        self.updated_at = at or utcnow()
