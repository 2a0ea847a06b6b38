"""Deterministic SKU uniquifier.

Candidates are tried in the order `base`, `base-2`, `base-3`, ... against
the names already claimed by the current batch and against the store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogcore.domain.errors import ResourceExhaustedError, ValidationError
from catalogcore.domain.variants.keys import normalize_sku

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

DEFAULT_MAX_ATTEMPTS = 1000


def sku_candidates(base: str, max_attempts: int) -> Iterator[str]:
    if max_attempts < 1:
        return
    yield base
    for suffix in range(2, max_attempts + 1):
        yield f"{base}-{suffix}"


def allocate_sku(
    desired: str | None,
    *,
    fallback: str,
    claimed: frozenset[str],
    exists: Callable[[str], bool],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> str:
    """Return the first free candidate for `desired` (or `fallback` when blank).

    Raises ``ResourceExhaustedError`` once `max_attempts` candidates are taken.
    """
    base = normalize_sku(desired) or normalize_sku(fallback)
    if not base:
        raise ValidationError("Cannot derive a sku from an empty hint and fallback")
    for candidate in sku_candidates(base, max_attempts):
        if candidate in claimed or exists(candidate):
            continue
        return candidate
    raise ResourceExhaustedError(
        f"Could not allocate a unique sku for {base!r} after {max_attempts} attempts"
    )
