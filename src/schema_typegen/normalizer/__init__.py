"""Schema normalizers: grammar AST to canonical IR."""

from schema_typegen.normalizer.base import Normalizer
from schema_typegen.normalizer.ddl import DDLNormalizer, normalize_ddl
from schema_typegen.normalizer.protobuf import ProtobufNormalizer, normalize_proto
from schema_typegen.normalizer.toml_config import TomlNormalizer, normalize_toml

__all__ = [
    "Normalizer",
    "DDLNormalizer",
    "normalize_ddl",
    "ProtobufNormalizer",
    "normalize_proto",
    "TomlNormalizer",
    "normalize_toml",
]
