"""Offer Mutation Governor: apply or queue seller offer changes per field."""

from __future__ import annotations

from .change_requests import (
    cancel_pending,
    list_change_requests,
    pending_change_requests,
    queue_change_request,
    review_snapshot,
)
from .dto import DeleteOfferResult, OfferTarget, ProposedOffer, UpsertOfferResult
from .governor import (
    DEFAULT_CURRENCY,
    DEFAULT_SELLABLE_STATUSES,
    delete_base_offer,
    delete_variant_offer,
    upsert_offer,
)
from .policy import (
    OFFER_FIELD_POLICY,
    FieldKind,
    FieldPolicy,
    FieldTreatment,
    governed_fields,
    values_equal,
)

__all__ = [
    "DEFAULT_CURRENCY",
    "DEFAULT_SELLABLE_STATUSES",
    "OFFER_FIELD_POLICY",
    "DeleteOfferResult",
    "FieldKind",
    "FieldPolicy",
    "FieldTreatment",
    "OfferTarget",
    "ProposedOffer",
    "UpsertOfferResult",
    "cancel_pending",
    "delete_base_offer",
    "delete_variant_offer",
    "governed_fields",
    "list_change_requests",
    "pending_change_requests",
    "queue_change_request",
    "review_snapshot",
    "upsert_offer",
    "values_equal",
]
