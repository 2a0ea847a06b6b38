from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from catalogcore import app
from catalogcore.config import CatalogConfig
from catalogcore.adapters.sqlalchemy import StartupError
from catalogcore.domain.errors import ResourceExhaustedError, ValidationError
from catalogcore.domain.model import ChangeRequestStatus, ModelName, OfferScope
from catalogcore.domain.offers import OfferTarget, ProposedOffer
from catalogcore.domain.variants import ReconcileVariantsRequest, VariantRow
from tests.helpers.catalog import SELLER_ID, make_base_offer, make_product, make_variant, opt, seed

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogcore.adapters.sqlalchemy import SqlAlchemyCatalogUnitOfWork

    UowFactory = Callable[[], SqlAlchemyCatalogUnitOfWork]


def test_app_runs_against_the_started_adapter(sqlite_unit_of_work: UowFactory) -> None:
    product = make_product()
    seed(sqlite_unit_of_work, product)

    reconciled = app.reconcile_product_variants(
        ReconcileVariantsRequest(
            product_id=product.id,
            variants=(VariantRow(options=(opt("color", "red"),), sku="tee red"),),
        )
    )
    (variant,) = reconciled.variants
    assert variant.sku == "TEE-RED"

    app.submit_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id),
        ProposedOffer(price=Decimal(1000), available_qty=3, in_stock=True),
    )
    app.submit_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id, variant_id=variant.id),
        ProposedOffer(price=Decimal(1100), available_qty=1, in_stock=True),
    )
    queued = app.submit_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id, variant_id=variant.id),
        ProposedOffer(price=Decimal(1250), available_qty=1, in_stock=True),
    )

    assert queued.review_queued is True
    assert [r.id for r in app.review_queue(scope=OfferScope.VARIANT_OFFER)] == [
        queued.change_request.id  # type: ignore[union-attr]
    ]
    assert app.review_queue(scope=OfferScope.BASE_OFFER) == []
    assert len(app.seller_pending_requests(SELLER_ID, product.id)) == 1

    deleted = app.withdraw_offer(SELLER_ID, product_id=product.id)

    assert len(deleted.deleted_offer_ids) == 2
    assert app.review_queue() == []
    (canceled,) = app.review_queue(status=ChangeRequestStatus.CANCELED)
    assert canceled.id == queued.change_request.id  # type: ignore[union-attr]


def test_create_product_variant_uses_configured_attempt_bound(
    sqlite_unit_of_work: UowFactory,
) -> None:
    product = make_product()
    seed(sqlite_unit_of_work, product, make_variant(product, "TEE", ("color", "red")))

    with pytest.raises(ResourceExhaustedError):
        app.create_product_variant(
            product.id,
            [opt("color", "blue")],
            sku="tee",
            config=CatalogConfig(sku_max_attempts=1),
        )

    created = app.create_product_variant(product.id, [opt("color", "blue")], sku="tee")
    assert created.variant.sku == "TEE-2"


@pytest.mark.usefixtures("sqlite_unit_of_work")
def test_withdraw_offer_requires_exactly_one_target() -> None:
    base = make_base_offer(make_product())

    with pytest.raises(ValidationError, match="exactly one"):
        app.withdraw_offer(SELLER_ID)
    with pytest.raises(ValidationError, match="exactly one"):
        app.withdraw_offer(SELLER_ID, product_id=base.product_id, variant_offer_id=base.id)


@pytest.mark.usefixtures("sqlite_unit_of_work")
def test_current_capabilities_reflect_started_engine() -> None:
    capabilities = app.current_capabilities()

    assert capabilities.has_relation(ModelName.VARIANT, "options")
    assert capabilities.has_field(ModelName.CHANGE_REQUEST, "snapshot")


def test_current_capabilities_require_an_engine(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app, "is_started", lambda: True)
    monkeypatch.setattr(app, "configured_engine", lambda: None)

    with pytest.raises(StartupError):
        app.current_capabilities()
