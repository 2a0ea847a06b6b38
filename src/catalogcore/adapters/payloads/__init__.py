"""JSON payload adapter (pydantic schemas and translators)."""

from __future__ import annotations

from .translator import (
    parse_offer_request,
    parse_reconcile_request,
    render_change_request,
    render_delete_result,
    render_offer,
    render_reconcile_result,
    render_upsert_result,
    render_variant,
)

__all__ = [
    "parse_offer_request",
    "parse_reconcile_request",
    "render_change_request",
    "render_delete_result",
    "render_offer",
    "render_reconcile_result",
    "render_upsert_result",
    "render_variant",
]
