from __future__ import annotations

from decimal import Decimal

import pytest

from catalogcore.adapters.capabilities import StaticSchemaCapabilities
from catalogcore.domain.model import ModelName
from catalogcore.domain.offers import (
    OFFER_FIELD_POLICY,
    FieldTreatment,
    governed_fields,
    values_equal,
)


def test_quantity_and_stock_apply_immediately() -> None:
    immediate = {
        name
        for name, entry in OFFER_FIELD_POLICY.items()
        if entry.treatment is FieldTreatment.IMMEDIATE
    }

    assert immediate == {"available_qty", "in_stock"}


def test_price_sensitive_fields_are_review_gated(
    domain_capabilities: StaticSchemaCapabilities,
) -> None:
    fields = governed_fields(
        FieldTreatment.REVIEW, model=ModelName.BASE_OFFER, capabilities=domain_capabilities
    )

    assert fields == ("price", "currency", "lead_days", "is_active")


def test_optional_field_drops_out_without_capability(
    domain_capabilities: StaticSchemaCapabilities,
) -> None:
    reduced = domain_capabilities.without_fields(ModelName.VARIANT_OFFER, "lead_days")

    fields = governed_fields(
        FieldTreatment.REVIEW, model=ModelName.VARIANT_OFFER, capabilities=reduced
    )

    assert "lead_days" not in fields
    assert "price" in fields


def test_required_fields_stay_governed_even_if_unreported() -> None:
    empty = StaticSchemaCapabilities(fields={}, relations={})

    assert governed_fields(
        FieldTreatment.IMMEDIATE, model=ModelName.BASE_OFFER, capabilities=empty
    ) == ("available_qty", "in_stock")


@pytest.mark.parametrize(
    ("name", "current", "proposed", "expected"),
    [
        ("price", Decimal("1000.00"), Decimal(1000), True),
        ("price", Decimal("1000.00"), "1000", True),
        ("price", Decimal(1000), Decimal("1000.01"), False),
        ("currency", "NGN", " ngn ", True),
        ("currency", "NGN", "USD", False),
        ("lead_days", None, None, True),
        ("lead_days", None, 0, False),
        ("lead_days", 3, "3", True),
        ("available_qty", 5, 0, False),
        ("is_active", True, True, True),
        ("in_stock", True, False, False),
    ],
)
def test_values_equal(name: str, current: object, proposed: object, *, expected: bool) -> None:
    assert values_equal(name, current, proposed) is expected
