from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from catalogcore.adapters.sqlalchemy import SqlAlchemyCatalogUnitOfWork
from catalogcore.domain.errors import ConflictError, NotFoundError, StorageError, ValidationError
from catalogcore.domain.model import ChangeRequestStatus, ModelName, OfferScope, ProductStatus
from catalogcore.domain.offers import (
    OfferTarget,
    ProposedOffer,
    delete_base_offer,
    delete_variant_offer,
    upsert_offer,
)
from tests.helpers.catalog import (
    OTHER_SELLER_ID,
    OWNER_ID,
    SELLER_ID,
    make_base_offer,
    make_product,
    make_variant,
    make_variant_offer,
    seed,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogcore.adapters.capabilities import StaticSchemaCapabilities

    UowFactory = Callable[[], SqlAlchemyCatalogUnitOfWork]


def _proposal(
    price: str = "1000",
    *,
    available_qty: int = 5,
    in_stock: bool = True,
    is_active: bool = True,
    currency: str | None = "NGN",
    lead_days: int | None = 2,
) -> ProposedOffer:
    return ProposedOffer(
        price=Decimal(price),
        available_qty=available_qty,
        in_stock=in_stock,
        is_active=is_active,
        currency=currency,
        lead_days=lead_days,
    )


def test_price_change_is_queued_and_overwrites_pending_request(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    base = make_base_offer(product, price="1000")
    seed(sqlite_unit_of_work, product, base)
    target = OfferTarget(product_id=product.id)

    first = upsert_offer(
        SELLER_ID,
        target,
        _proposal("1200"),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )

    assert first.review_queued is True
    assert first.offer.price == Decimal(1000)
    assert first.change_request is not None
    assert first.change_request.patch == {"price": Decimal(1200)}
    assert first.change_request.snapshot == {
        "price": Decimal(1000),
        "currency": "NGN",
        "lead_days": 2,
        "is_active": True,
    }

    second = upsert_offer(
        SELLER_ID,
        target,
        _proposal("1300"),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )

    assert second.change_request is not None
    assert second.change_request.id == first.change_request.id
    assert second.offer.price == Decimal(1000)

    with sqlite_unit_of_work() as uow:
        pending = uow.repositories.change_requests.list_requests(
            status=ChangeRequestStatus.PENDING
        )
        stored_offer = uow.repositories.offers.get_base(SELLER_ID, product.id)
    assert [request.id for request in pending] == [first.change_request.id]
    assert pending[0].patch == {"price": Decimal(1300)}
    assert pending[0].snapshot == first.change_request.snapshot
    assert pending[0].requested_by == SELLER_ID
    assert stored_offer is not None
    assert stored_offer.price == Decimal(1000)


def test_quantity_and_stock_apply_without_review(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    base = make_base_offer(product, price="1000", available_qty=5)
    seed(sqlite_unit_of_work, product, base)

    result = upsert_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id),
        _proposal("1000", available_qty=0, in_stock=False),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )

    assert result.review_queued is False
    assert result.change_request is None
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.offers.get_base(SELLER_ID, product.id)
        assert uow.repositories.change_requests.list_requests(status=None) == []
    assert stored is not None
    assert stored.available_qty == 0
    assert stored.in_stock is False


def test_mixed_change_applies_quantity_and_queues_price(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    base = make_base_offer(product, price="1000", available_qty=5)
    seed(sqlite_unit_of_work, product, base)

    result = upsert_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id),
        _proposal("900", available_qty=8, is_active=False, currency="usd"),
        requested_by=OWNER_ID,
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )

    assert result.review_queued is True
    assert result.offer.available_qty == 8
    assert result.offer.price == Decimal(1000)
    assert result.offer.is_active is True
    assert result.change_request is not None
    assert result.change_request.patch == {
        "price": Decimal(900),
        "currency": "USD",
        "is_active": False,
    }
    assert result.change_request.requested_by == OWNER_ID


class FailingCommitUnitOfWork(SqlAlchemyCatalogUnitOfWork):
    """Sends pending writes to the database, then fails the commit."""

    def commit(self) -> None:
        self.flush()
        raise StorageError("database went away")


def test_failed_commit_rolls_back_quantity_and_change_request_together(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    base = make_base_offer(product, price="1000", available_qty=5)
    seed(sqlite_unit_of_work, product, base)

    with pytest.raises(StorageError):
        upsert_offer(
            SELLER_ID,
            OfferTarget(product_id=product.id),
            _proposal("900", available_qty=8),
            unit_of_work_factory=FailingCommitUnitOfWork,
            capabilities=capabilities,
        )

    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.offers.get_base(SELLER_ID, product.id)
        assert stored is not None
        assert stored.available_qty == 5
        assert stored.price == Decimal(1000)
        assert uow.repositories.change_requests.list_requests(status=None) == []


def test_unchanged_proposal_touches_nothing(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    base = make_base_offer(product, price="1000", available_qty=5, lead_days=2)
    seed(sqlite_unit_of_work, product, base)

    result = upsert_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id),
        _proposal("1000.00", currency=" ngn"),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )

    assert result.review_queued is False
    assert result.created is False


def test_first_submission_creates_offer_without_review(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    seed(sqlite_unit_of_work, product)

    result = upsert_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id),
        _proposal("1500", currency=None),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )

    assert result.created is True
    assert result.review_queued is False
    assert result.offer.price == Decimal(1500)
    assert result.offer.currency == "NGN"
    assert result.offer.scope is OfferScope.BASE_OFFER
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.change_requests.list_requests(status=None) == []


def test_variant_offer_requires_base_offer(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    variant = make_variant(product, "TEE-RED", ("color", "red"))
    seed(sqlite_unit_of_work, product, variant)
    target = OfferTarget(product_id=product.id, variant_id=variant.id)

    with pytest.raises(ConflictError, match="base offer"):
        upsert_offer(
            SELLER_ID,
            target,
            _proposal(),
            unit_of_work_factory=sqlite_unit_of_work,
            capabilities=capabilities,
        )

    seed(sqlite_unit_of_work, make_base_offer(product))
    result = upsert_offer(
        SELLER_ID,
        target,
        _proposal("1100"),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )

    assert result.created is True
    assert result.offer.scope is OfferScope.VARIANT_OFFER


def test_disabled_variant_cannot_get_a_new_offer(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    variant = make_variant(product, "TEE-RED", ("color", "red"))
    variant.is_active = False
    seed(sqlite_unit_of_work, product, variant, make_base_offer(product))

    with pytest.raises(NotFoundError):
        upsert_offer(
            SELLER_ID,
            OfferTarget(product_id=product.id, variant_id=variant.id),
            _proposal(),
            unit_of_work_factory=sqlite_unit_of_work,
            capabilities=capabilities,
        )


def test_seller_cannot_offer_own_product(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product(owner_id=SELLER_ID)
    seed(sqlite_unit_of_work, product)

    with pytest.raises(ConflictError, match="own product"):
        upsert_offer(
            SELLER_ID,
            OfferTarget(product_id=product.id),
            _proposal(),
            unit_of_work_factory=sqlite_unit_of_work,
            capabilities=capabilities,
        )


@pytest.mark.parametrize(
    "status", [ProductStatus.DRAFT, ProductStatus.PENDING, ProductStatus.REJECTED]
)
def test_unsellable_product_is_rejected(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
    status: ProductStatus,
) -> None:
    product = make_product(status=status)
    seed(sqlite_unit_of_work, product)

    with pytest.raises(NotFoundError):
        upsert_offer(
            SELLER_ID,
            OfferTarget(product_id=product.id),
            _proposal(),
            unit_of_work_factory=sqlite_unit_of_work,
            capabilities=capabilities,
        )

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.offers.get_base(SELLER_ID, product.id) is None


def test_sellable_statuses_are_configurable(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product(status=ProductStatus.PUBLISHED)
    seed(sqlite_unit_of_work, product)

    result = upsert_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id),
        _proposal(),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
        sellable_statuses={ProductStatus.PUBLISHED, ProductStatus.LIVE},
    )

    assert result.created is True


def test_missing_or_deleted_product_is_rejected(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    deleted = make_product()
    deleted.is_deleted = True
    seed(sqlite_unit_of_work, deleted)

    for product_id in (uuid4(), deleted.id):
        with pytest.raises(NotFoundError):
            upsert_offer(
                SELLER_ID,
                OfferTarget(product_id=product_id),
                _proposal(),
                unit_of_work_factory=sqlite_unit_of_work,
                capabilities=capabilities,
            )


@pytest.mark.parametrize(
    "proposal",
    [
        ProposedOffer(price=Decimal(-1), available_qty=1, in_stock=True),
        ProposedOffer(price=Decimal(1), available_qty=-1, in_stock=True),
        ProposedOffer(price=Decimal(1), available_qty=1, in_stock=True, lead_days=-2),
        ProposedOffer(price=Decimal(1), available_qty=1, in_stock=True, currency="  "),
    ],
)
def test_invalid_proposal_is_rejected_before_any_read(proposal: ProposedOffer) -> None:
    def unusable_factory() -> SqlAlchemyCatalogUnitOfWork:
        raise AssertionError("unit of work must not be opened")

    with pytest.raises(ValidationError):
        upsert_offer(
            SELLER_ID,
            OfferTarget(product_id=uuid4()),
            proposal,
            unit_of_work_factory=unusable_factory,
            capabilities=None,  # type: ignore[arg-type]
        )


def test_lead_days_is_ignored_without_capability(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    base = make_base_offer(product, lead_days=2)
    seed(sqlite_unit_of_work, product, base)

    result = upsert_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id),
        _proposal(lead_days=9),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities.without_fields(ModelName.BASE_OFFER, "lead_days"),
    )

    assert result.review_queued is False


def test_resolved_fields_are_cleared_when_request_is_revised(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    base = make_base_offer(product)
    seed(sqlite_unit_of_work, product, base)
    target = OfferTarget(product_id=product.id)
    first = upsert_offer(
        SELLER_ID,
        target,
        _proposal("1200"),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )
    assert first.change_request is not None

    with sqlite_unit_of_work() as uow:
        (stored,) = uow.repositories.change_requests.list_requests(status=None)
        stored.review_note = "needs a lower price"
        stored.reviewed_by = OTHER_SELLER_ID
        uow.commit()

    second = upsert_offer(
        SELLER_ID,
        target,
        _proposal("1100"),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )

    assert second.change_request is not None
    assert second.change_request.review_note is None
    assert second.change_request.reviewed_by is None
    assert second.change_request.status is ChangeRequestStatus.PENDING


def test_variant_offer_is_relinked_to_current_base_offer(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    variant = make_variant(product, "TEE-RED", ("color", "red"))
    base = make_base_offer(product)
    orphan = make_variant_offer(variant, base, available_qty=3)
    orphan.base_offer_id = None
    seed(sqlite_unit_of_work, product, variant, base, orphan)

    result = upsert_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id, variant_id=variant.id),
        _proposal("1100", available_qty=4),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )

    assert result.offer.id == orphan.id
    assert result.offer.base_offer_id == base.id  # type: ignore[attr-defined]
    assert result.offer.available_qty == 4


def test_delete_base_offer_cascades_to_variant_offers(
    sqlite_unit_of_work: UowFactory,
    capabilities: StaticSchemaCapabilities,
) -> None:
    product = make_product()
    red = make_variant(product, "TEE-RED", ("color", "red"))
    blue = make_variant(product, "TEE-BLUE", ("color", "blue"))
    base = make_base_offer(product)
    red_offer = make_variant_offer(red, base)
    blue_offer = make_variant_offer(blue, base)
    other_base = make_base_offer(product, seller_id=OTHER_SELLER_ID)
    seed(sqlite_unit_of_work, product, red, blue, base, red_offer, blue_offer, other_base)
    queued = upsert_offer(
        SELLER_ID,
        OfferTarget(product_id=product.id, variant_id=red.id),
        _proposal("1500"),
        unit_of_work_factory=sqlite_unit_of_work,
        capabilities=capabilities,
    )
    assert queued.change_request is not None

    result = delete_base_offer(SELLER_ID, product.id, unit_of_work_factory=sqlite_unit_of_work)

    assert set(result.deleted_offer_ids) == {base.id, red_offer.id, blue_offer.id}
    assert result.canceled_request_ids == [queued.change_request.id]
    with sqlite_unit_of_work() as uow:
        offers = uow.repositories.offers
        assert offers.get_base(SELLER_ID, product.id) is None
        assert offers.list_variant_offers(SELLER_ID, product.id) == []
        assert offers.get_base(OTHER_SELLER_ID, product.id) is not None
        (request,) = uow.repositories.change_requests.list_requests(status=None)
        assert request.status is ChangeRequestStatus.CANCELED


def test_delete_variant_offer_checks_seller(
    sqlite_unit_of_work: UowFactory,
) -> None:
    product = make_product()
    variant = make_variant(product, "TEE-RED", ("color", "red"))
    base = make_base_offer(product)
    offer = make_variant_offer(variant, base)
    seed(sqlite_unit_of_work, product, variant, base, offer)

    with pytest.raises(NotFoundError):
        delete_variant_offer(OTHER_SELLER_ID, offer.id, unit_of_work_factory=sqlite_unit_of_work)

    result = delete_variant_offer(SELLER_ID, offer.id, unit_of_work_factory=sqlite_unit_of_work)

    assert result.deleted_offer_ids == [offer.id]
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.offers.get_variant_offer(offer.id) is None
        assert uow.repositories.offers.get_base(SELLER_ID, product.id) is not None


def test_delete_missing_base_offer(sqlite_unit_of_work: UowFactory) -> None:
    with pytest.raises(NotFoundError):
        delete_base_offer(SELLER_ID, uuid4(), unit_of_work_factory=sqlite_unit_of_work)
