"""Converge a product's persisted variant set to an editor-submitted target set.

One call runs inside one unit of work:

1. load every variant of the product (soft-disabled ones included) and index
   it by combination key;
2. load the variant ids locked by active third-party offers;
3. apply each target row in order, matching by prior id, then by key; a row
   that lands on the key of another live variant supersedes it;
4. in replace mode, remove what was not kept (see `decide_removal`);
5. return the live variants, oldest first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from catalogcore.domain.errors import NotFoundError, ValidationError
from catalogcore.domain.model import ModelName, Variant, VariantOption, utcnow
from catalogcore.domain.variants.decisions import RemovalAction, decide_removal
from catalogcore.domain.variants.dto import ReconcileStats, ReconcileVariantsResult
from catalogcore.domain.variants.keys import combination_key, normalize_options, normalize_sku
from catalogcore.domain.variants.sku import DEFAULT_MAX_ATTEMPTS, allocate_sku

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime
    from uuid import UUID

    from catalogcore.domain.model import Product
    from catalogcore.domain.ports import (
        CatalogRepositories,
        CatalogUnitOfWorkFactory,
        SchemaCapabilities,
    )
    from catalogcore.domain.variants.dto import (
        OptionSelection,
        ReconcileVariantsRequest,
        VariantRow,
    )

log = logging.getLogger(__name__)

SOFT_DISABLE_FIELDS: tuple[str, ...] = ("is_active", "is_deleted", "archived_at")


def reconcile_variants(
    request: ReconcileVariantsRequest,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
    capabilities: SchemaCapabilities,
    sku_max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> ReconcileVariantsResult:
    stats = ReconcileStats()
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        product = _require_product(repositories, request.product_id)

        persisted = repositories.variants.list_for_product(product.id)
        by_id = {variant.id: variant for variant in persisted}
        by_key = _key_index(persisted)
        locked = repositories.offers.locked_variant_ids(product.id, owner_id=product.seller_id)

        now = utcnow()
        kept: set[UUID] = set()
        removed: set[UUID] = set()
        claimed: frozenset[str] = frozenset()
        for row in request.variants:
            options = normalize_options(row.options)
            key = combination_key(options)
            variant = _match(row, key, by_id=by_id, by_key=by_key)
            if variant is None:
                variant, claimed = _create_variant(
                    product,
                    row,
                    options,
                    repositories=repositories,
                    claimed=claimed,
                    sku_max_attempts=sku_max_attempts,
                )
                by_id[variant.id] = variant
                stats.created += 1
            else:
                claimed = _update_variant(
                    product,
                    variant,
                    row,
                    options,
                    repositories=repositories,
                    capabilities=capabilities,
                    claimed=claimed,
                    sku_max_attempts=sku_max_attempts,
                )
                stats.updated += 1
                for stale in [k for k, indexed in by_key.items() if indexed is variant]:
                    del by_key[stale]

            # an id match that lands on another live variant's key supersedes it
            displaced = by_key.get(key)
            if displaced is not None and displaced is not variant and displaced.is_live:
                uow.flush()
                action = _remove_variant(
                    displaced,
                    locked=displaced.id in locked,
                    repositories=repositories,
                    capabilities=capabilities,
                    now=now,
                )
                _count_removal(stats, action)
                kept.discard(displaced.id)
                removed.add(displaced.id)
                if action is RemovalAction.HARD_DELETE:
                    del by_id[displaced.id]
                log.info(
                    "Variant %s takes over options %s from variant %s",
                    variant.id,
                    key,
                    displaced.id,
                )
            by_key[key] = variant
            kept.add(variant.id)
            removed.discard(variant.id)

        if request.replace:
            for variant in persisted:
                if variant.id in kept or variant.id in removed:
                    continue
                action = _remove_variant(
                    variant,
                    locked=variant.id in locked,
                    repositories=repositories,
                    capabilities=capabilities,
                    now=now,
                )
                _count_removal(stats, action)

        uow.flush()
        live = _live_variants(repositories.variants.list_for_product(product.id), capabilities)
        uow.commit()

    log.info(
        "Reconciled variants of product %s: %s created, %s updated, %s deleted, "
        "%s disabled, %s retained",
        request.product_id,
        stats.created,
        stats.updated,
        stats.hard_deleted,
        stats.soft_disabled,
        stats.retained,
    )
    return ReconcileVariantsResult(variants=live, stats=stats)


@dataclass(slots=True)
class EnsureVariantResult:
    variant: Variant
    created: bool


def ensure_variant(
    product_id: UUID,
    options: Sequence[OptionSelection],
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
    sku: str | None = None,
    available_qty: int = 0,
    in_stock: bool | None = None,
    sku_max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> EnsureVariantResult:
    """Create the variant for an option combination unless one already exists.

    An existing variant is returned untouched.
    """
    clean = normalize_options(options)
    if not clean:
        raise ValidationError("A variant needs at least one option selection")
    if available_qty < 0:
        raise ValidationError("available_qty must be >= 0")
    key = combination_key(clean)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        product = _require_product(repositories, product_id)
        for existing in repositories.variants.list_for_product(product.id):
            if not existing.is_deleted and combination_key(existing.options) == key:
                return EnsureVariantResult(variant=existing, created=False)

        variant = Variant(
            product_id=product.id,
            sku=allocate_sku(
                sku,
                fallback=_fallback_sku(product),
                claimed=frozenset(),
                exists=repositories.variants.sku_exists,
                max_attempts=sku_max_attempts,
            ),
            available_qty=available_qty,
            in_stock=available_qty > 0 if in_stock is None else in_stock,
            price=_resolve_price(None, product.base_price, clean),
            options=_build_options(clean),
        )
        repositories.variants.add(variant)
        uow.commit()

    log.info("Created variant %s (%s) for product %s", variant.id, variant.sku, product_id)
    return EnsureVariantResult(variant=variant, created=True)


def _require_product(repositories: CatalogRepositories, product_id: UUID) -> Product:
    product = repositories.products.get(product_id)
    if product is None or product.is_deleted:
        raise NotFoundError(f"Product {product_id} not found")
    return product


def _key_index(variants: Iterable[Variant]) -> dict[str, Variant]:
    # live variants take precedence over soft-disabled ones sharing a key
    ordered = sorted(variants, key=lambda variant: variant.is_live)
    return {combination_key(variant.options): variant for variant in ordered}


def _match(
    row: VariantRow,
    key: str,
    *,
    by_id: dict[UUID, Variant],
    by_key: dict[str, Variant],
) -> Variant | None:
    if row.id is not None and row.id in by_id:
        return by_id[row.id]
    return by_key.get(key)


def _create_variant(
    product: Product,
    row: VariantRow,
    options: Sequence[OptionSelection],
    *,
    repositories: CatalogRepositories,
    claimed: frozenset[str],
    sku_max_attempts: int,
) -> tuple[Variant, frozenset[str]]:
    sku = allocate_sku(
        row.sku,
        fallback=_fallback_sku(product),
        claimed=claimed,
        exists=repositories.variants.sku_exists,
        max_attempts=sku_max_attempts,
    )
    available_qty = row.available_qty or 0
    variant = Variant(
        product_id=product.id,
        sku=sku,
        available_qty=available_qty,
        in_stock=available_qty > 0 if row.in_stock is None else row.in_stock,
        price=_resolve_price(row.price, product.base_price, options),
        options=_build_options(options),
    )
    repositories.variants.add(variant)
    return variant, claimed | {sku}


def _update_variant(
    product: Product,
    variant: Variant,
    row: VariantRow,
    options: Sequence[OptionSelection],
    *,
    repositories: CatalogRepositories,
    capabilities: SchemaCapabilities,
    claimed: frozenset[str],
    sku_max_attempts: int,
) -> frozenset[str]:
    if row.available_qty is not None:
        variant.available_qty = row.available_qty
    if row.in_stock is not None:
        variant.in_stock = row.in_stock
    price = _resolve_price(row.price, product.base_price, options)
    if price is not None:
        variant.price = price

    hint = normalize_sku(row.sku)
    if hint and hint != variant.sku:
        current = variant.sku
        variant.sku = allocate_sku(
            hint,
            fallback=_fallback_sku(product),
            claimed=claimed,
            exists=lambda candidate: candidate != current
            and repositories.variants.sku_exists(candidate),
            max_attempts=sku_max_attempts,
        )

    if not variant.is_live:
        _set_lifecycle(variant, capabilities, active=True, now=None)

    repositories.variants.replace_options(variant, _build_options(options))
    return claimed | {variant.sku}


def _remove_variant(
    variant: Variant,
    *,
    locked: bool,
    repositories: CatalogRepositories,
    capabilities: SchemaCapabilities,
    now: datetime,
) -> RemovalAction:
    action = decide_removal(
        locked=locked,
        can_soft_disable=_can_soft_disable(capabilities),
        can_hard_delete=capabilities.has_relation(ModelName.VARIANT, "options"),
    )
    match action:
        case RemovalAction.HARD_DELETE:
            for offer in repositories.offers.offers_for_variant(variant.id):
                for request in repositories.change_requests.pending_for_offers(
                    offer.seller_id, [offer.id]
                ):
                    request.cancel(now)
                repositories.offers.remove(offer)
            repositories.variants.remove(variant)
            log.debug("Deleted variant %s (%s)", variant.id, variant.sku)
        case RemovalAction.SOFT_DISABLE:
            if variant.is_live:
                _set_lifecycle(variant, capabilities, active=False, now=now)
            log.debug(
                "Disabled variant %s (%s)%s",
                variant.id,
                variant.sku,
                " held by active offers" if locked else "",
            )
        case RemovalAction.RETAIN:
            log.warning(
                "Variant %s (%s) dropped from target set but the schema cannot disable it",
                variant.id,
                variant.sku,
            )
    return action


def _count_removal(stats: ReconcileStats, action: RemovalAction) -> None:
    match action:
        case RemovalAction.HARD_DELETE:
            stats.hard_deleted += 1
        case RemovalAction.SOFT_DISABLE:
            stats.soft_disabled += 1
        case RemovalAction.RETAIN:
            stats.retained += 1


def _can_soft_disable(capabilities: SchemaCapabilities) -> bool:
    return any(capabilities.has_field(ModelName.VARIANT, name) for name in SOFT_DISABLE_FIELDS)


def _set_lifecycle(
    variant: Variant,
    capabilities: SchemaCapabilities,
    *,
    active: bool,
    now: datetime | None,
) -> None:
    if capabilities.has_field(ModelName.VARIANT, "is_active"):
        variant.is_active = active
    if capabilities.has_field(ModelName.VARIANT, "is_deleted"):
        variant.is_deleted = not active
    if capabilities.has_field(ModelName.VARIANT, "archived_at"):
        variant.archived_at = None if active else now


def _live_variants(variants: Iterable[Variant], capabilities: SchemaCapabilities) -> list[Variant]:
    live = [variant for variant in variants if variant.is_live]
    if capabilities.has_field(ModelName.VARIANT, "created_at"):
        return sorted(live, key=lambda variant: (variant.created_at, variant.id))
    return sorted(live, key=lambda variant: variant.id)


def _resolve_price(
    explicit: Decimal | None,
    base_price: Decimal | None,
    options: Iterable[OptionSelection],
) -> Decimal | None:
    if explicit is not None:
        return explicit
    if base_price is None:
        return None
    bumps = (option.price_bump for option in options if option.price_bump is not None)
    return base_price + sum(bumps, Decimal(0))


def _build_options(options: Iterable[OptionSelection]) -> list[VariantOption]:
    return [
        VariantOption(
            attribute_id=option.attribute_id,
            value_id=option.value_id,
            price_bump=option.price_bump,
        )
        for option in options
    ]


def _fallback_sku(product: Product) -> str:
    return f"{product.id}-VAR"
