"""Offer Mutation Governor.

A seller always submits the complete desired state of one offer. The first
submission creates the offer outright. Later submissions are split per field
by `OFFER_FIELD_POLICY`: immediate fields are written straight away while
review-gated fields are collected into a patch on the offer's single pending
change request. Deletion is never queued.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalogcore.domain.errors import ConflictError, NotFoundError, ValidationError
from catalogcore.domain.model import (
    BaseOffer,
    ModelName,
    ProductStatus,
    VariantOffer,
    utcnow,
)
from catalogcore.domain.offers.change_requests import cancel_pending, queue_change_request
from catalogcore.domain.offers.dto import DeleteOfferResult, UpsertOfferResult
from catalogcore.domain.offers.policy import FieldTreatment, governed_fields, values_equal

if TYPE_CHECKING:
    from collections.abc import Collection
    from uuid import UUID

    from catalogcore.domain.model import Offer, Product, Variant
    from catalogcore.domain.offers.dto import OfferTarget, ProposedOffer
    from catalogcore.domain.ports import (
        CatalogRepositories,
        CatalogUnitOfWorkFactory,
        SchemaCapabilities,
    )

log = logging.getLogger(__name__)

DEFAULT_CURRENCY = "NGN"
DEFAULT_SELLABLE_STATUSES: frozenset[ProductStatus] = frozenset({ProductStatus.LIVE})


def upsert_offer(
    seller_id: UUID,
    target: OfferTarget,
    proposed: ProposedOffer,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
    capabilities: SchemaCapabilities,
    requested_by: UUID | None = None,
    sellable_statuses: Collection[ProductStatus] = DEFAULT_SELLABLE_STATUSES,
    default_currency: str = DEFAULT_CURRENCY,
) -> UpsertOfferResult:
    values = _validated_values(proposed, default_currency=default_currency)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        product = repositories.products.get(target.product_id)
        if product is None or product.is_deleted:
            raise NotFoundError("Product not found")

        base_offer: BaseOffer | None = None
        variant: Variant | None = None
        if target.variant_id is None:
            offer: Offer | None = repositories.offers.get_base(seller_id, product.id)
        else:
            variant = _require_variant(repositories, target.variant_id, product)
            base_offer = repositories.offers.get_base(seller_id, product.id)
            if base_offer is None:
                raise ConflictError("Create a base offer for this product first")
            offer = repositories.offers.get_variant(seller_id, variant.id)

        if offer is None:
            _check_sellable(product, seller_id, sellable_statuses)
            if variant is not None and not variant.is_live:
                raise NotFoundError("Variant not found")
            offer = _new_offer(
                seller_id,
                product,
                variant=variant,
                base_offer=base_offer,
                values=values,
                capabilities=capabilities,
            )
            repositories.offers.add(offer)
            uow.commit()
            log.info(
                "Created %s %s for seller %s on product %s",
                offer.scope,
                offer.id,
                seller_id,
                product.id,
            )
            return UpsertOfferResult(offer=offer, review_queued=False, created=True)

        if isinstance(offer, VariantOffer) and base_offer is not None:
            offer.base_offer_id = base_offer.id

        immediate = {
            name: values[name]
            for name in governed_fields(
                FieldTreatment.IMMEDIATE, model=offer.model_name, capabilities=capabilities
            )
            if not values_equal(name, getattr(offer, name), values[name])
        }
        patch = {
            name: values[name]
            for name in governed_fields(
                FieldTreatment.REVIEW, model=offer.model_name, capabilities=capabilities
            )
            if not values_equal(name, getattr(offer, name), values[name])
        }

        if immediate:
            for name, value in immediate.items():
                setattr(offer, name, value)
            offer.touch()
            log.info("Applied %s to offer %s", ", ".join(sorted(immediate)), offer.id)

        change_request = None
        if patch:
            change_request = queue_change_request(
                repositories.change_requests,
                offer,
                patch,
                requested_by=requested_by or seller_id,
                capabilities=capabilities,
            )
        uow.commit()

    return UpsertOfferResult(
        offer=offer,
        review_queued=change_request is not None,
        change_request=change_request,
    )


def delete_base_offer(
    seller_id: UUID,
    product_id: UUID,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
) -> DeleteOfferResult:
    """Delete the seller's base offer and every variant offer they hold on the product."""
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        base_offer = repositories.offers.get_base(seller_id, product_id)
        if base_offer is None:
            raise NotFoundError("Offer not found")
        offers: list[Offer] = [*repositories.offers.list_variant_offers(seller_id, product_id)]
        offers.append(base_offer)
        result = _delete_offers(repositories, offers)
        uow.commit()

    log.info(
        "Deleted base offer %s and %s variant offers of seller %s",
        base_offer.id,
        len(result.deleted_offer_ids) - 1,
        seller_id,
    )
    return result


def delete_variant_offer(
    seller_id: UUID,
    offer_id: UUID,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
) -> DeleteOfferResult:
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        offer = repositories.offers.get_variant_offer(offer_id)
        if offer is None or offer.seller_id != seller_id:
            raise NotFoundError("Offer not found")
        result = _delete_offers(repositories, [offer])
        uow.commit()

    log.info("Deleted variant offer %s of seller %s", offer_id, seller_id)
    return result


def _validated_values(proposed: ProposedOffer, *, default_currency: str) -> dict[str, object]:
    if proposed.price < 0:
        raise ValidationError("price must be >= 0")
    if proposed.available_qty < 0:
        raise ValidationError("available_qty must be >= 0")
    if proposed.lead_days is not None and proposed.lead_days < 0:
        raise ValidationError("lead_days must be >= 0")
    currency = (proposed.currency or default_currency).strip().upper()
    if not currency:
        raise ValidationError("currency must not be empty")
    return {
        "price": proposed.price,
        "available_qty": proposed.available_qty,
        "in_stock": proposed.in_stock,
        "is_active": proposed.is_active,
        "currency": currency,
        "lead_days": proposed.lead_days,
    }


def _check_sellable(
    product: Product,
    seller_id: UUID,
    sellable_statuses: Collection[ProductStatus],
) -> None:
    if product.status not in sellable_statuses:
        raise NotFoundError("Product not available")
    if product.is_owned_by(seller_id):
        raise ConflictError("Cannot offer your own product")


def _require_variant(
    repositories: CatalogRepositories,
    variant_id: UUID,
    product: Product,
) -> Variant:
    variant = repositories.variants.get(variant_id)
    if variant is None or variant.product_id != product.id or variant.is_deleted:
        raise NotFoundError("Variant not found")
    return variant


def _new_offer(
    seller_id: UUID,
    product: Product,
    *,
    variant: Variant | None,
    base_offer: BaseOffer | None,
    values: dict[str, object],
    capabilities: SchemaCapabilities,
) -> Offer:
    model = ModelName.BASE_OFFER if variant is None else ModelName.VARIANT_OFFER
    fields = {
        name: values[name]
        for name in (
            *governed_fields(FieldTreatment.IMMEDIATE, model=model, capabilities=capabilities),
            *governed_fields(FieldTreatment.REVIEW, model=model, capabilities=capabilities),
        )
    }
    if variant is None:
        return BaseOffer(seller_id=seller_id, product_id=product.id, **fields)  # pyright: ignore[reportArgumentType]
    return VariantOffer(
        seller_id=seller_id,
        product_id=product.id,
        variant_id=variant.id,
        base_offer_id=base_offer.id if base_offer is not None else None,
        **fields,  # pyright: ignore[reportArgumentType]
    )


def _delete_offers(repositories: CatalogRepositories, offers: list[Offer]) -> DeleteOfferResult:
    now = utcnow()
    canceled = cancel_pending(repositories.change_requests, offers, now=now)
    result = DeleteOfferResult(canceled_request_ids=[request.id for request in canceled])
    for offer in offers:
        repositories.offers.remove(offer)
        result.deleted_offer_ids.append(offer.id)
    return result
