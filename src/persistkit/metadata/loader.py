"""Load entity persistence configurations from YAML files.

Each file describes one entity:

    entity: User
    table: users
    primaryKey: id
    ids: [email]
    columns: [name, bio]
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from persistkit.config import EntityConfig
from persistkit.errors import InvalidArgumentError


@dataclass
class EntityDefinition:
    name: str
    table: str
    primary_key: str = "id"
    ids: list[str] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EntityDefinition":
        """Create EntityDefinition from YAML dict."""
        if "entity" not in data:
            raise InvalidArgumentError("Entity definition has no 'entity' name")
        name = data["entity"]
        ids = data.get("ids", [])
        if isinstance(ids, str):
            ids = [ids]
        return cls(
            name=name,
            table=data.get("table", name),
            primary_key=data.get("primaryKey", "id"),
            ids=ids,
            columns=data.get("columns", []),
        )

    def to_config(self) -> EntityConfig:
        return EntityConfig(
            self.table, self.primary_key, ids=self.ids, columns=self.columns
        )


def load_entity_config(path: Path) -> EntityConfig:
    """Load a single YAML file into an EntityConfig."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return EntityDefinition.from_dict(data).to_config()


class MetadataLoader:
    """Loads entity definitions from a YAML file or a directory of them."""

    def __init__(self, metadata_path: Path):
        self.metadata_path = Path(metadata_path)
        self.definitions: dict[str, EntityDefinition] = {}
        self.entities: dict[str, EntityConfig] = {}

    def load_all(self) -> None:
        """Load every entity definition under metadata_path."""
        if self.metadata_path.is_file():
            files = [self.metadata_path]
        else:
            files = sorted(self.metadata_path.glob("*.yaml"))

        for yaml_file in files:
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if not data or "entity" not in data:
                continue
            definition = EntityDefinition.from_dict(data)
            if definition.name in self.definitions:
                raise InvalidArgumentError(
                    f"Entity '{definition.name}' is defined more than once ({yaml_file})"
                )
            self.definitions[definition.name] = definition
            self.entities[definition.name] = definition.to_config()

    def get_entity(self, name: str) -> EntityConfig | None:
        return self.entities.get(name)

    def list_entities(self) -> list[str]:
        return sorted(self.entities)
