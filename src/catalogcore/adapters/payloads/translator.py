"""Translate JSON payloads into domain requests and domain results back into JSON."""

from __future__ import annotations

from decimal import Decimal
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from catalogcore.domain.errors import ValidationError
from catalogcore.domain.offers import OfferTarget, ProposedOffer
from catalogcore.domain.variants import OptionSelection, ReconcileVariantsRequest, VariantRow

from .schema import OfferPayload, ReconcileVariantsPayload

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime
    from uuid import UUID

    from catalogcore.domain.model import ChangeRequest, Offer, Variant
    from catalogcore.domain.offers import DeleteOfferResult, UpsertOfferResult
    from catalogcore.domain.variants import ReconcileVariantsResult

log = getLogger(__name__)

type JSONDict = dict[str, Any]


def parse_reconcile_request(
    data: Mapping[str, object], *, product_id: UUID | None = None
) -> ReconcileVariantsRequest:
    """`product_id` overrides the payload's own `productId`."""
    try:
        payload = ReconcileVariantsPayload.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from exc

    resolved = product_id or payload.product_id
    if resolved is None:
        raise ValidationError("productId is required")
    rows = tuple(
        VariantRow(
            id=row.id,
            sku=row.sku,
            options=tuple(
                OptionSelection(
                    attribute_id=option.attribute_id,
                    value_id=option.value_id,
                    price_bump=option.price_bump,
                )
                for option in row.options
            ),
            available_qty=row.available_qty,
            in_stock=row.in_stock,
            price=row.price,
        )
        for row in payload.variants
    )
    for row in rows:
        if row.available_qty is not None and row.available_qty < 0:
            raise ValidationError("availableQty must be >= 0")
        if row.price is not None and row.price < 0:
            raise ValidationError("price must be >= 0")
    return ReconcileVariantsRequest(product_id=resolved, variants=rows, replace=payload.replace)


def parse_offer_request(data: Mapping[str, object]) -> tuple[OfferTarget, ProposedOffer]:
    try:
        payload = OfferPayload.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from exc

    target = OfferTarget(product_id=payload.product_id, variant_id=payload.variant_id)
    proposed = ProposedOffer(
        price=payload.price,
        available_qty=payload.available_qty,
        in_stock=payload.available_qty > 0 if payload.in_stock is None else payload.in_stock,
        is_active=payload.is_active,
        currency=payload.currency,
        lead_days=payload.lead_days,
    )
    return target, proposed


def render_variant(variant: Variant) -> JSONDict:
    return {
        "id": str(variant.id),
        "productId": str(variant.product_id),
        "sku": variant.sku,
        "availableQty": variant.available_qty,
        "inStock": variant.in_stock,
        "price": _money(variant.price),
        "isActive": variant.is_active,
        "createdAt": _timestamp(variant.created_at),
        "options": [
            {
                "attributeId": option.attribute_id,
                "valueId": option.value_id,
                "priceBump": _money(option.price_bump),
            }
            for option in variant.options
        ],
    }


def render_reconcile_result(result: ReconcileVariantsResult) -> JSONDict:
    stats = result.stats
    return {
        "variants": [render_variant(variant) for variant in result.variants],
        "stats": {
            "created": stats.created,
            "updated": stats.updated,
            "hardDeleted": stats.hard_deleted,
            "softDisabled": stats.soft_disabled,
            "retained": stats.retained,
        },
    }


def render_offer(offer: Offer) -> JSONDict:
    rendered: JSONDict = {
        "id": str(offer.id),
        "scope": offer.scope.value,
        "sellerId": str(offer.seller_id),
        "productId": str(offer.product_id),
        "price": _money(offer.price),
        "availableQty": offer.available_qty,
        "leadDays": offer.lead_days,
        "isActive": offer.is_active,
        "inStock": offer.in_stock,
        "currency": offer.currency,
        "createdAt": _timestamp(offer.created_at),
        "updatedAt": _timestamp(offer.updated_at),
    }
    variant_id = getattr(offer, "variant_id", None)
    if variant_id is not None:
        rendered["variantId"] = str(variant_id)
    return rendered


def render_change_request(request: ChangeRequest) -> JSONDict:
    return {
        "id": str(request.id),
        "sellerId": str(request.seller_id),
        "productId": str(request.product_id),
        "scope": request.scope.value,
        "offerId": str(request.offer_id),
        "status": request.status.value,
        "patch": _patch(request.patch),
        "snapshot": _patch(request.snapshot) if request.snapshot is not None else None,
        "requestedBy": str(request.requested_by) if request.requested_by else None,
        "requestedAt": _timestamp(request.requested_at),
        "reviewedAt": _timestamp(request.reviewed_at),
        "rejectionReason": request.rejection_reason,
    }


def render_upsert_result(result: UpsertOfferResult) -> JSONDict:
    rendered: JSONDict = {
        "offer": render_offer(result.offer),
        "reviewQueued": result.review_queued,
        "created": result.created,
    }
    if result.change_request is not None:
        rendered["changeRequest"] = render_change_request(result.change_request)
    return rendered


def render_delete_result(result: DeleteOfferResult) -> JSONDict:
    return {
        "deletedOfferIds": [str(offer_id) for offer_id in result.deleted_offer_ids],
        "canceledChangeRequestIds": [str(item) for item in result.canceled_request_ids],
    }


_CAMEL_FIELDS = {
    "available_qty": "availableQty",
    "in_stock": "inStock",
    "lead_days": "leadDays",
    "is_active": "isActive",
}


def _patch(values: Mapping[str, object]) -> JSONDict:
    return {
        _CAMEL_FIELDS.get(key, key): _money(value) if isinstance(value, Decimal) else value
        for key, value in values.items()
    }


def _money(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def _timestamp(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat()


def _describe(exc: PydanticValidationError) -> str:
    problems = [
        f"{'.'.join(str(part) for part in error['loc']) or 'payload'}: {error['msg']}"
        for error in exc.errors()
    ]
    log.debug("Rejected payload: %s", problems)
    return "; ".join(problems)
