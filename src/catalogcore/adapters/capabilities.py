"""Immutable schema capability snapshots."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from catalogcore.domain.model import (
    BaseOffer,
    ChangeRequest,
    Entity,
    ModelName,
    Product,
    Variant,
    VariantOffer,
    VariantOption,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

MODEL_CLASSES: Final[Mapping[ModelName, type[Entity]]] = MappingProxyType(
    {
        ModelName.PRODUCT: Product,
        ModelName.VARIANT: Variant,
        ModelName.VARIANT_OPTION: VariantOption,
        ModelName.BASE_OFFER: BaseOffer,
        ModelName.VARIANT_OFFER: VariantOffer,
        ModelName.CHANGE_REQUEST: ChangeRequest,
    }
)

MODEL_RELATIONS: Final[Mapping[ModelName, Mapping[str, ModelName]]] = MappingProxyType(
    {ModelName.VARIANT: MappingProxyType({"options": ModelName.VARIANT_OPTION})}
)


@dataclass(frozen=True, slots=True)
class StaticSchemaCapabilities:
    """A fixed answer set for `SchemaCapabilities` queries.

    Unknown models have neither fields nor relations.
    """

    fields: Mapping[ModelName, frozenset[str]]
    relations: Mapping[ModelName, Mapping[str, ModelName]]

    @classmethod
    def from_domain_model(cls) -> StaticSchemaCapabilities:
        """Every field and relation the domain model declares."""
        declared: dict[ModelName, frozenset[str]] = {}
        for model, entity_cls in MODEL_CLASSES.items():
            relation_names = MODEL_RELATIONS.get(model, {})
            declared[model] = frozenset(
                item.name
                for item in dataclasses.fields(entity_cls)
                if item.name not in relation_names
            )
        return cls(fields=declared, relations=MODEL_RELATIONS)

    def has_field(self, model: ModelName, field: str) -> bool:
        return field in self.fields.get(model, frozenset())

    def has_relation(self, model: ModelName, field: str) -> bool:
        return field in self.relations.get(model, {})

    def resolve_relation_target(self, model: ModelName, field: str) -> ModelName | None:
        return self.relations.get(model, {}).get(field)

    def without_fields(self, model: ModelName, *names: str) -> StaticSchemaCapabilities:
        reduced = dict(self.fields)
        reduced[model] = self.fields.get(model, frozenset()) - set(names)
        return StaticSchemaCapabilities(fields=reduced, relations=self.relations)

    def without_relations(self, model: ModelName, *names: str) -> StaticSchemaCapabilities:
        reduced = dict(self.relations)
        reduced[model] = {
            key: target
            for key, target in self.relations.get(model, {}).items()
            if key not in names
        }
        return StaticSchemaCapabilities(fields=self.fields, relations=reduced)


if TYPE_CHECKING:
    from catalogcore.domain.ports import SchemaCapabilities

    _capabilities_check: SchemaCapabilities = StaticSchemaCapabilities(fields={}, relations={})
