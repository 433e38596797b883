from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib.resources import files as resource_files
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from jsonschema import Draft7Validator

from ..entities import EnemyDef
from ..exceptions import DataValidationError
from ..items import Item

logger = logging.getLogger(__name__)

ITEM_TABLE_SCHEMA = "item-table"
ENEMY_TABLE_SCHEMA = "enemy-table"


@dataclass(frozen=True)
class SchemaInfo:
    name: str
    uri: str
    schema: Dict[str, Any]


class SchemaRegistry:
    """Registry for bundled JSON Schemas.

    Discovers schemas from the package resource directory ``delve.data.schemas``.
    A schema's name is its filename without the ``.schema.json`` suffix.
    """

    _PKG = "delve.data.schemas"

    def __init__(self) -> None:
        self._schemas_by_name: dict[str, SchemaInfo] = {}
        self._schemas_by_uri: dict[str, SchemaInfo] = {}
        self._load_all()

    def _load_all(self) -> None:
        schema_dir = resource_files(self._PKG)
        for entry in schema_dir.iterdir():
            if not entry.name.endswith(".schema.json"):
                continue
            name = entry.name[: -len(".schema.json")]
            with entry.open("rb") as fh:
                schema = json.load(fh)
            uri = schema.get("$id") or f"resource://{self._PKG}/{entry.name}"
            info = SchemaInfo(name=name, uri=uri, schema=schema)
            self._schemas_by_name[name] = info
            self._schemas_by_uri[uri] = info
            logger.debug("Registered schema '%s' (uri=%s)", name, uri)

    def get(self, name_or_uri: str) -> Optional[SchemaInfo]:
        return self._schemas_by_name.get(name_or_uri) or self._schemas_by_uri.get(name_or_uri)

    def names(self) -> list[str]:
        return sorted(self._schemas_by_name.keys())

    def make_validator(self, name_or_uri: str) -> Draft7Validator:
        info = self.get(name_or_uri)
        if not info:
            raise KeyError(f"Schema not found: {name_or_uri}")
        return Draft7Validator(info.schema)


class DataLoader:
    """Load JSON definition files and validate them against a bundled schema."""

    def __init__(self, schema_registry: Optional[SchemaRegistry] = None) -> None:
        self.schemas = schema_registry or SchemaRegistry()

    def load(self, path: os.PathLike | str, schema: str) -> Any:
        abs_path = Path(path).resolve()
        logger.debug("Loading JSON: %s", abs_path)
        with abs_path.open("r", encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError as e:
                raise DataValidationError(f"Invalid JSON in {abs_path}: {e}") from e
        self.validate_data(data, schema)
        return data

    def load_resource(self, name: str, schema: str) -> Any:
        text = resource_files("delve.data").joinpath(name).read_text(encoding="utf-8")
        data = json.loads(text)
        self.validate_data(data, schema)
        return data

    def validate_data(self, data: Any, schema_name_or_uri: str) -> None:
        try:
            validator = self.schemas.make_validator(schema_name_or_uri)
        except KeyError as e:
            raise DataValidationError(f"Unknown schema: {schema_name_or_uri}") from e

        errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
        if errors:
            for err in errors:
                logger.error("Schema '%s' validation error at %s: %s", schema_name_or_uri, list(err.path), err.message)
            raise DataValidationError(f"JSON validation failed for schema '{schema_name_or_uri}'", errors)


@dataclass(frozen=True)
class DefinitionTables:
    """Read-only lookup of enemy and item definitions keyed by identifier."""

    enemies: Mapping[str, EnemyDef]
    items: Mapping[str, Item]

    def enemy(self, def_id: str) -> EnemyDef:
        return self.enemies[def_id]

    def item(self, def_id: str) -> Item:
        return self.items[def_id]

    def enemies_for_depth(self, depth: int) -> List[str]:
        """Sorted ids so that seeded choices do not depend on dict ordering."""
        return sorted(k for k, v in self.enemies.items() if v.min_depth <= depth)

    def items_for_depth(self, depth: int) -> List[str]:
        return sorted(k for k, v in self.items.items() if v.min_depth <= depth)


def load_definitions(
    enemies_path: Optional[os.PathLike | str] = None,
    items_path: Optional[os.PathLike | str] = None,
    loader: Optional[DataLoader] = None,
) -> DefinitionTables:
    """Load and validate the enemy and item tables (bundled copies by default)."""
    loader = loader or DataLoader()
    if enemies_path is None:
        raw_enemies = loader.load_resource("enemies.json", ENEMY_TABLE_SCHEMA)
    else:
        raw_enemies = loader.load(enemies_path, ENEMY_TABLE_SCHEMA)
    if items_path is None:
        raw_items = loader.load_resource("items.json", ITEM_TABLE_SCHEMA)
    else:
        raw_items = loader.load(items_path, ITEM_TABLE_SCHEMA)

    enemies = {k: EnemyDef.from_dict(k, v) for k, v in raw_enemies["enemies"].items()}
    items = {k: Item.from_dict(k, v) for k, v in raw_items["items"].items()}
    logger.debug("Loaded %d enemy and %d item definitions", len(enemies), len(items))
    return DefinitionTables(enemies=MappingProxyType(enemies), items=MappingProxyType(items))


__all__ = ["DataLoader", "DefinitionTables", "SchemaRegistry", "load_definitions"]
