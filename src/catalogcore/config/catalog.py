"""Catalog policy configuration (sku allocation, currencies, sellable states)."""

from __future__ import annotations

from dataclasses import dataclass, field

from catalogcore.domain.model import ProductStatus
from catalogcore.domain.offers.governor import DEFAULT_CURRENCY, DEFAULT_SELLABLE_STATUSES
from catalogcore.domain.variants.sku import DEFAULT_MAX_ATTEMPTS as DEFAULT_SKU_MAX_ATTEMPTS

from .env import optional_env_int, optional_env_list, optional_env_str
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    sku_max_attempts: int = DEFAULT_SKU_MAX_ATTEMPTS
    default_currency: str = DEFAULT_CURRENCY
    sellable_statuses: frozenset[ProductStatus] = field(
        default_factory=lambda: DEFAULT_SELLABLE_STATUSES
    )


def _parse_statuses(values: tuple[str, ...]) -> frozenset[ProductStatus]:
    statuses: set[ProductStatus] = set()
    for raw in values:
        try:
            statuses.add(ProductStatus(raw.upper()))
        except ValueError as exc:
            raise ConfigurationError(f"Unknown product status in sellable list: {raw!r}") from exc
    return frozenset(statuses)


def get_catalog_config() -> CatalogConfig:
    attempts = optional_env_int("CATALOGCORE_SKU_MAX_ATTEMPTS", minimum=1)
    currency = optional_env_str("CATALOGCORE_DEFAULT_CURRENCY")
    statuses = optional_env_list("CATALOGCORE_SELLABLE_STATUSES")
    return CatalogConfig(
        sku_max_attempts=attempts if attempts is not None else DEFAULT_SKU_MAX_ATTEMPTS,
        default_currency=currency.upper() if currency else DEFAULT_CURRENCY,
        sellable_statuses=_parse_statuses(statuses) if statuses else DEFAULT_SELLABLE_STATUSES,
    )
