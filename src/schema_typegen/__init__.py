"""schema-typegen - generate record and union types from schema files.

Reads Protocol Buffer IDL, SQL DDL and TOML configuration, normalizes each
into one canonical IR and projects it into records, discriminated unions and
nested modules.
"""

__version__ = "0.1.0"

from schema_typegen.config import ConfigLoader, MapRepresentation, ProviderConfig, SqlDialect, load_config
from schema_typegen.errors import GenerationError, ParseError, ResolutionError, TypegenError
from schema_typegen.generator import TargetModule, TypeProjector, render
from schema_typegen.ir import CanonicalSchema, SchemaGrammar
from schema_typegen.pipeline import BatchResult, generate_batch, generate_types, resolve_schema
from schema_typegen.providers import (
    DDLProvider,
    ParsedSchema,
    ProtobufProvider,
    ProviderRegistry,
    TomlProvider,
)

__all__ = [
    "__version__",
    "ConfigLoader",
    "MapRepresentation",
    "ProviderConfig",
    "SqlDialect",
    "load_config",
    "GenerationError",
    "ParseError",
    "ResolutionError",
    "TypegenError",
    "TargetModule",
    "TypeProjector",
    "render",
    "CanonicalSchema",
    "SchemaGrammar",
    "BatchResult",
    "generate_batch",
    "generate_types",
    "resolve_schema",
    "DDLProvider",
    "ParsedSchema",
    "ProtobufProvider",
    "ProviderRegistry",
    "TomlProvider",
]
