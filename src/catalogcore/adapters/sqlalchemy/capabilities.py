"""Capability snapshot reflected from the mappers and the live database."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import inspect

from catalogcore.adapters.capabilities import MODEL_CLASSES, StaticSchemaCapabilities
from catalogcore.adapters.sqlalchemy.mappings import start_mappers

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Mapper

    from catalogcore.domain.model import ModelName

log = logging.getLogger(__name__)


def reflect_schema_capabilities(engine: Engine) -> StaticSchemaCapabilities:
    """Mapped attributes whose columns (or target tables) exist in the database."""

    start_mappers()
    inspector = inspect(engine)
    model_by_class = {entity_cls: model for model, entity_cls in MODEL_CLASSES.items()}

    present: dict[ModelName, set[str] | None] = {}
    for model, entity_cls in MODEL_CLASSES.items():
        table_name = _mapper(entity_cls).local_table.name  # pyright: ignore[reportAttributeAccessIssue]
        if not inspector.has_table(table_name):
            log.warning("Table %s for %s is missing", table_name, model)
            present[model] = None
            continue
        present[model] = {column["name"] for column in inspector.get_columns(table_name)}

    fields: dict[ModelName, frozenset[str]] = {}
    relations: dict[ModelName, dict[str, ModelName]] = {}
    for model, entity_cls in MODEL_CLASSES.items():
        columns = present[model]
        mapper = _mapper(entity_cls)
        if columns is None:
            fields[model] = frozenset()
            relations[model] = {}
            continue
        fields[model] = frozenset(
            prop.key
            for prop in mapper.column_attrs
            if all(column.name in columns for column in prop.columns)  # pyright: ignore[reportAttributeAccessIssue]
        )
        relations[model] = {
            relation.key: model_by_class[relation.mapper.class_]
            for relation in mapper.relationships
            if relation.mapper.class_ in model_by_class
            and present[model_by_class[relation.mapper.class_]] is not None
        }
    return StaticSchemaCapabilities(fields=fields, relations=relations)


def _mapper(entity_cls: type) -> Mapper[object]:
    return inspect(entity_cls)
