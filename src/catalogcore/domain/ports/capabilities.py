"""Port for schema capability queries.

Operations touching optional fields or relations ask first and skip the
optional behaviour when the answer is no; absence is never an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from catalogcore.domain.model import ModelName


@runtime_checkable
class SchemaCapabilities(Protocol):
    """Answers which fields and relations a deployment's schema exposes."""

    def has_field(self, model: ModelName, field: str) -> bool: ...

    def has_relation(self, model: ModelName, field: str) -> bool: ...

    def resolve_relation_target(self, model: ModelName, field: str) -> ModelName | None: ...
