"""Entity metadata - YAML definitions of entity persistence configs."""

from persistkit.metadata.loader import EntityDefinition, MetadataLoader, load_entity_config

__all__ = ["EntityDefinition", "MetadataLoader", "load_entity_config"]
