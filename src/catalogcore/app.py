"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from catalogcore.adapters.sqlalchemy import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    reflect_schema_capabilities,
    startup,
)
from catalogcore.config import get_catalog_config
from catalogcore.domain.errors import ValidationError
from catalogcore.domain.model import ChangeRequestStatus
from catalogcore.domain.offers import (
    delete_base_offer,
    delete_variant_offer,
    list_change_requests,
    pending_change_requests,
    upsert_offer,
)
from catalogcore.domain.variants import ensure_variant, reconcile_variants

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from catalogcore.config import CatalogConfig
    from catalogcore.domain.model import ChangeRequest, OfferScope
    from catalogcore.domain.offers import (
        DeleteOfferResult,
        OfferTarget,
        ProposedOffer,
        UpsertOfferResult,
    )
    from catalogcore.domain.ports import CatalogUnitOfWorkFactory, SchemaCapabilities
    from catalogcore.domain.variants import (
        EnsureVariantResult,
        OptionSelection,
        ReconcileVariantsRequest,
        ReconcileVariantsResult,
    )


log = getLogger(__name__)


def initialize_database(*, database_uri: str | None = None) -> None:
    """Start the SQLAlchemy adapter, migrating the schema to head."""

    if not is_started():
        startup(database_uri=database_uri)


def current_capabilities() -> SchemaCapabilities:
    """Capabilities of the database the adapter is connected to."""

    initialize_database()
    engine = configured_engine()
    if engine is None:
        raise StartupError("SQLAlchemy adapter has no engine after startup")
    return reflect_schema_capabilities(engine)


def reconcile_product_variants(
    request: ReconcileVariantsRequest,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    capabilities: SchemaCapabilities | None = None,
    config: CatalogConfig | None = None,
) -> ReconcileVariantsResult:
    effective_config = config or get_catalog_config()
    log.info(
        "Reconciling %s variant rows for product %s (replace=%s)",
        len(request.variants),
        request.product_id,
        request.replace,
    )
    return reconcile_variants(
        request,
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        capabilities=capabilities or current_capabilities(),
        sku_max_attempts=effective_config.sku_max_attempts,
    )


def create_product_variant(
    product_id: UUID,
    options: Sequence[OptionSelection],
    *,
    sku: str | None = None,
    available_qty: int = 0,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    config: CatalogConfig | None = None,
) -> EnsureVariantResult:
    effective_config = config or get_catalog_config()
    return ensure_variant(
        product_id,
        options,
        sku=sku,
        available_qty=available_qty,
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        sku_max_attempts=effective_config.sku_max_attempts,
    )


def submit_offer(
    seller_id: UUID,
    target: OfferTarget,
    proposed: ProposedOffer,
    *,
    requested_by: UUID | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    capabilities: SchemaCapabilities | None = None,
    config: CatalogConfig | None = None,
) -> UpsertOfferResult:
    effective_config = config or get_catalog_config()
    return upsert_offer(
        seller_id,
        target,
        proposed,
        requested_by=requested_by,
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        capabilities=capabilities or current_capabilities(),
        sellable_statuses=effective_config.sellable_statuses,
        default_currency=effective_config.default_currency,
    )


def withdraw_offer(
    seller_id: UUID,
    *,
    product_id: UUID | None = None,
    variant_offer_id: UUID | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
) -> DeleteOfferResult:
    """Delete a base offer (with its variant offers) or a single variant offer."""

    if product_id is not None and variant_offer_id is None:
        return delete_base_offer(
            seller_id,
            product_id,
            unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        )
    if variant_offer_id is not None and product_id is None:
        return delete_variant_offer(
            seller_id,
            variant_offer_id,
            unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        )
    raise ValidationError("Pass exactly one of product_id or variant_offer_id")


def review_queue(
    *,
    status: ChangeRequestStatus | None = ChangeRequestStatus.PENDING,
    scope: OfferScope | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
) -> list[ChangeRequest]:
    return list_change_requests(
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        status=status,
        scope=scope,
    )


def seller_pending_requests(
    seller_id: UUID,
    product_id: UUID,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
) -> list[ChangeRequest]:
    return pending_change_requests(
        seller_id,
        product_id,
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
    )


def _default_unit_of_work_factory() -> CatalogUnitOfWorkFactory:
    initialize_database()
    return SqlAlchemyCatalogUnitOfWork
