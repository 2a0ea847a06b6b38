"""Pure removal decision for variants dropped from a target set."""

from __future__ import annotations

from enum import StrEnum


class RemovalAction(StrEnum):
    HARD_DELETE = "hard_delete"
    SOFT_DISABLE = "soft_disable"
    RETAIN = "retain"


def decide_removal(
    *,
    locked: bool,
    can_soft_disable: bool,
    can_hard_delete: bool,
) -> RemovalAction:
    """Locked variants are never hard-deleted.

    RETAIN only happens when the schema offers no way to disable the variant.
    """
    if not locked and can_hard_delete:
        return RemovalAction.HARD_DELETE
    if can_soft_disable:
        return RemovalAction.SOFT_DISABLE
    return RemovalAction.RETAIN
