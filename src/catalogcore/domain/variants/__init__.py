"""Variant Reconciler: converge a product's variants to a submitted target set."""

from __future__ import annotations

from .decisions import RemovalAction, decide_removal
from .dto import (
    OptionSelection,
    ReconcileStats,
    ReconcileVariantsRequest,
    ReconcileVariantsResult,
    VariantRow,
)
from .keys import combination_key, normalize_options, normalize_sku
from .reconcile import EnsureVariantResult, ensure_variant, reconcile_variants
from .sku import DEFAULT_MAX_ATTEMPTS, allocate_sku, sku_candidates

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "EnsureVariantResult",
    "OptionSelection",
    "ReconcileStats",
    "ReconcileVariantsRequest",
    "ReconcileVariantsResult",
    "RemovalAction",
    "VariantRow",
    "allocate_sku",
    "combination_key",
    "decide_removal",
    "ensure_variant",
    "normalize_options",
    "normalize_sku",
    "reconcile_variants",
    "sku_candidates",
]
