"""Type providers: one per source grammar."""

from schema_typegen.providers.base import ParsedSchema, TypeProvider
from schema_typegen.providers.protobuf import ProtobufProvider
from schema_typegen.providers.registry import ProviderRegistry, get_provider
from schema_typegen.providers.resolution import SourceText, resolve_source
from schema_typegen.providers.sql import DDLProvider
from schema_typegen.providers.toml_config import TomlProvider

__all__ = [
    "ParsedSchema",
    "TypeProvider",
    "ProtobufProvider",
    "DDLProvider",
    "TomlProvider",
    "ProviderRegistry",
    "get_provider",
    "SourceText",
    "resolve_source",
]
