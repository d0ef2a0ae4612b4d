"""Protobuf type provider."""

from schema_typegen.frontends.mappings import PROTOBUF_SCALARS, ScalarMappingTable
from schema_typegen.frontends.protobuf import ProtobufFrontEnd
from schema_typegen.ir.base import SchemaGrammar
from schema_typegen.normalizer.protobuf import ProtobufNormalizer
from schema_typegen.providers.base import TypeProvider


class ProtobufProvider(TypeProvider):
    """Generates types from Protocol Buffer (.proto) schemas."""

    name = "protobuf"
    grammar = SchemaGrammar.PROTOBUF
    description = "Protocol Buffers IDL (proto2, proto3)"
    file_extensions = (".proto",)
    frontend_class = ProtobufFrontEnd
    normalizer_class = ProtobufNormalizer

    def mapping_table(self) -> ScalarMappingTable:
        return PROTOBUF_SCALARS
