"""Grammar front-ends: source text to grammar AST."""

from schema_typegen.frontends.base import FrontEnd
from schema_typegen.frontends.ddl import DDLFrontEnd, SqlSchema, parse_ddl
from schema_typegen.frontends.protobuf import ProtobufFrontEnd, ProtoFile, parse_proto
from schema_typegen.frontends.toml_config import TomlDocument, TomlFrontEnd, parse_toml

__all__ = [
    "FrontEnd",
    "DDLFrontEnd",
    "SqlSchema",
    "parse_ddl",
    "ProtobufFrontEnd",
    "ProtoFile",
    "parse_proto",
    "TomlDocument",
    "TomlFrontEnd",
    "parse_toml",
]
