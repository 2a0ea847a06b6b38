from __future__ import annotations

import pytest

from catalogcore.domain.variants import RemovalAction, decide_removal


@pytest.mark.parametrize(
    ("locked", "can_soft_disable", "can_hard_delete", "expected"),
    [
        (False, True, True, RemovalAction.HARD_DELETE),
        (False, False, True, RemovalAction.HARD_DELETE),
        (False, True, False, RemovalAction.SOFT_DISABLE),
        (False, False, False, RemovalAction.RETAIN),
        (True, True, True, RemovalAction.SOFT_DISABLE),
        (True, True, False, RemovalAction.SOFT_DISABLE),
        (True, False, True, RemovalAction.RETAIN),
        (True, False, False, RemovalAction.RETAIN),
    ],
)
def test_decide_removal(
    *,
    locked: bool,
    can_soft_disable: bool,
    can_hard_delete: bool,
    expected: RemovalAction,
) -> None:
    assert (
        decide_removal(
            locked=locked,
            can_soft_disable=can_soft_disable,
            can_hard_delete=can_hard_delete,
        )
        is expected
    )


def test_locked_variant_is_never_hard_deleted() -> None:
    for can_soft_disable in (True, False):
        action = decide_removal(
            locked=True, can_soft_disable=can_soft_disable, can_hard_delete=True
        )
        assert action is not RemovalAction.HARD_DELETE
