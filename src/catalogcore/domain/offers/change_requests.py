"""The offer review queue: at most one pending request per offer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalogcore.domain.model import (
    RESOLUTION_FIELDS,
    ChangeRequest,
    ChangeRequestStatus,
    ModelName,
    utcnow,
)
from catalogcore.domain.offers.policy import FieldTreatment, governed_fields

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime
    from uuid import UUID

    from catalogcore.domain.model import Offer, OfferPatch, OfferScope
    from catalogcore.domain.ports import (
        CatalogUnitOfWorkFactory,
        ChangeRequestRepository,
        SchemaCapabilities,
    )

log = logging.getLogger(__name__)


def queue_change_request(
    requests: ChangeRequestRepository,
    offer: Offer,
    patch: Mapping[str, object],
    *,
    requested_by: UUID | None,
    capabilities: SchemaCapabilities,
    now: datetime | None = None,
) -> ChangeRequest:
    """Open a review request for `offer` or overwrite the pending one.

    An overwritten request keeps its original snapshot.
    """
    now = now or utcnow()
    pending = requests.find_pending(offer.seller_id, offer.scope, offer.id)
    if pending is not None:
        pending.revise(patch)
        _stamp_requester(pending, requested_by=requested_by, now=now, capabilities=capabilities)
        pending.clear_resolution(
            name
            for name in RESOLUTION_FIELDS
            if capabilities.has_field(ModelName.CHANGE_REQUEST, name)
        )
        log.info("Updated pending change request %s for offer %s", pending.id, offer.id)
        return pending

    request = ChangeRequest(
        seller_id=offer.seller_id,
        product_id=offer.product_id,
        scope=offer.scope,
        offer_id=offer.id,
        patch=dict(patch),
    )
    if capabilities.has_field(ModelName.CHANGE_REQUEST, "snapshot"):
        request.snapshot = review_snapshot(offer, capabilities=capabilities)
    _stamp_requester(request, requested_by=requested_by, now=now, capabilities=capabilities)
    requests.add(request)
    log.info("Queued change request %s for offer %s", request.id, offer.id)
    return request


def review_snapshot(offer: Offer, *, capabilities: SchemaCapabilities) -> OfferPatch:
    """Current values of every review-gated field of `offer`."""
    return {
        name: getattr(offer, name)
        for name in governed_fields(
            FieldTreatment.REVIEW, model=offer.model_name, capabilities=capabilities
        )
    }


def cancel_pending(
    requests: ChangeRequestRepository,
    offers: list[Offer],
    *,
    now: datetime | None = None,
) -> list[ChangeRequest]:
    now = now or utcnow()
    canceled: list[ChangeRequest] = []
    for offer in offers:
        for request in requests.pending_for_offers(offer.seller_id, [offer.id]):
            request.cancel(now)
            canceled.append(request)
    return canceled


def list_change_requests(
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
    status: ChangeRequestStatus | None = ChangeRequestStatus.PENDING,
    scope: OfferScope | None = None,
) -> list[ChangeRequest]:
    """Administrator queue, newest first. `status=None` lists every status."""
    with unit_of_work_factory() as uow:
        return uow.repositories.change_requests.list_requests(status=status, scope=scope)


def pending_change_requests(
    seller_id: UUID,
    product_id: UUID,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
) -> list[ChangeRequest]:
    """Pending requests for the seller's base and variant offers on one product."""
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        offer_ids = [
            offer.id for offer in repositories.offers.list_variant_offers(seller_id, product_id)
        ]
        base = repositories.offers.get_base(seller_id, product_id)
        if base is not None:
            offer_ids.insert(0, base.id)
        if not offer_ids:
            return []
        return repositories.change_requests.pending_for_offers(seller_id, offer_ids)


def _stamp_requester(
    request: ChangeRequest,
    *,
    requested_by: UUID | None,
    now: datetime,
    capabilities: SchemaCapabilities,
) -> None:
    if capabilities.has_field(ModelName.CHANGE_REQUEST, "requested_by"):
        request.requested_by = requested_by
    if capabilities.has_field(ModelName.CHANGE_REQUEST, "requested_at"):
        request.requested_at = now
