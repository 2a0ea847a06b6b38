"""Per-field treatment of proposed offer changes.

Quantity and stock signals apply immediately; price-sensitive fields wait for
an administrator. Optional fields only take part when the schema has them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from catalogcore.domain.model import ModelName
    from catalogcore.domain.ports import SchemaCapabilities


class FieldTreatment(StrEnum):
    IMMEDIATE = "immediate"
    REVIEW = "review"


class FieldKind(StrEnum):
    MONEY = "money"
    TOKEN = "token"
    COUNT = "count"
    FLAG = "flag"


@dataclass(frozen=True, slots=True)
class FieldPolicy:
    name: str
    treatment: FieldTreatment
    kind: FieldKind
    optional: bool = False


OFFER_FIELD_POLICY: Mapping[str, FieldPolicy] = MappingProxyType(
    {
        policy.name: policy
        for policy in (
            FieldPolicy("available_qty", FieldTreatment.IMMEDIATE, FieldKind.COUNT),
            FieldPolicy("in_stock", FieldTreatment.IMMEDIATE, FieldKind.FLAG),
            FieldPolicy("price", FieldTreatment.REVIEW, FieldKind.MONEY),
            FieldPolicy("currency", FieldTreatment.REVIEW, FieldKind.TOKEN),
            FieldPolicy("lead_days", FieldTreatment.REVIEW, FieldKind.COUNT, optional=True),
            FieldPolicy("is_active", FieldTreatment.REVIEW, FieldKind.FLAG),
        )
    }
)


def governed_fields(
    treatment: FieldTreatment,
    *,
    model: ModelName,
    capabilities: SchemaCapabilities,
    policy: Mapping[str, FieldPolicy] = OFFER_FIELD_POLICY,
) -> tuple[str, ...]:
    """Field names with `treatment` that exist on `model`, in table order."""
    return tuple(
        entry.name
        for entry in policy.values()
        if entry.treatment is treatment
        and (not entry.optional or capabilities.has_field(model, entry.name))
    )


def values_equal(
    name: str,
    current: object,
    proposed: object,
    policy: Mapping[str, FieldPolicy] = OFFER_FIELD_POLICY,
) -> bool:
    """Compare two values of a governed field the way a reviewer would."""
    if current is None or proposed is None:
        return current is None and proposed is None
    match policy[name].kind:
        case FieldKind.MONEY:
            return Decimal(str(current)) == Decimal(str(proposed))
        case FieldKind.TOKEN:
            return str(current).strip().upper() == str(proposed).strip().upper()
        case FieldKind.COUNT:
            return int(str(current)) == int(str(proposed))
        case FieldKind.FLAG:
            return bool(current) is bool(proposed)
