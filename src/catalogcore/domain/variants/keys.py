"""Canonical forms for option selections and SKUs."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from catalogcore.domain.variants.dto import OptionSelection

if TYPE_CHECKING:
    from collections.abc import Iterable

    from catalogcore.domain.model import VariantOption

KEY_SEPARATOR = "|"

_WHITESPACE = re.compile(r"\s+")
_NOT_SKU = re.compile(r"[^A-Z0-9-]")
_DASHES = re.compile(r"-+")


def normalize_options(options: Iterable[OptionSelection]) -> list[OptionSelection]:
    """Drop blank selections and keep one value per attribute (last one wins).

    The first-seen position of each attribute is kept.
    """
    by_attribute: dict[str, OptionSelection] = {}
    for option in options:
        attribute_id = option.attribute_id.strip()
        value_id = option.value_id.strip()
        if not attribute_id or not value_id:
            continue
        by_attribute[attribute_id] = OptionSelection(
            attribute_id=attribute_id,
            value_id=value_id,
            price_bump=option.price_bump,
        )
    return list(by_attribute.values())


def combination_key(options: Iterable[OptionSelection | VariantOption]) -> str:
    """`attr=value` pairs, sorted and joined; equal selections give equal keys."""
    pairs = sorted((option.attribute_id, option.value_id) for option in options)
    return KEY_SEPARATOR.join(f"{attribute_id}={value_id}" for attribute_id, value_id in pairs)


def normalize_sku(raw: str | None) -> str:
    """Uppercase alphanumeric-with-dash token; empty when nothing usable remains."""
    if raw is None:
        return ""
    text = _WHITESPACE.sub("-", raw.strip().upper())
    text = _NOT_SKU.sub("", text)
    return _DASHES.sub("-", text).strip("-")
