"""Request/response shapes for variant reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from decimal import Decimal
    from uuid import UUID

    from catalogcore.domain.model import Variant


@dataclass(frozen=True, slots=True)
class OptionSelection:
    attribute_id: str
    value_id: str
    price_bump: Decimal | None = None


@dataclass(frozen=True, slots=True)
class VariantRow:
    """One target variant as submitted by an editor."""

    options: tuple[OptionSelection, ...]
    id: UUID | None = None
    sku: str | None = None
    available_qty: int | None = None
    in_stock: bool | None = None
    price: Decimal | None = None


@dataclass(frozen=True, slots=True)
class ReconcileVariantsRequest:
    product_id: UUID
    variants: tuple[VariantRow, ...]
    replace: bool = True


@dataclass(slots=True)
class ReconcileStats:
    created: int = 0
    updated: int = 0
    hard_deleted: int = 0
    soft_disabled: int = 0
    retained: int = 0


@dataclass(slots=True)
class ReconcileVariantsResult:
    variants: list[Variant]
    stats: ReconcileStats = field(default_factory=ReconcileStats)
