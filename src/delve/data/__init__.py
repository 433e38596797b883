from .loader import DataLoader, DefinitionTables, SchemaRegistry, load_definitions

__all__ = ["DataLoader", "DefinitionTables", "SchemaRegistry", "load_definitions"]
