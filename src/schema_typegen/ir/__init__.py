"""Canonical schema IR shared by every front-end."""

from schema_typegen.ir.base import (
    CanonicalSchema,
    FieldDef,
    FieldType,
    ListType,
    MapType,
    OptionalType,
    RecordDef,
    ReferenceType,
    ScalarKind,
    ScalarType,
    SchemaGrammar,
    SchemaModule,
    TypeDef,
    TypeOrigin,
    UnionDef,
    VariantDef,
    iter_references,
    list_of,
    make_optional,
    map_of,
    reference,
    scalar,
)
from schema_typegen.ir.naming import NamingStrategy, TypeNamer, to_pascal_case

__all__ = [
    "CanonicalSchema",
    "FieldDef",
    "FieldType",
    "ListType",
    "MapType",
    "OptionalType",
    "RecordDef",
    "ReferenceType",
    "ScalarKind",
    "ScalarType",
    "SchemaGrammar",
    "SchemaModule",
    "TypeDef",
    "TypeOrigin",
    "UnionDef",
    "VariantDef",
    "iter_references",
    "list_of",
    "make_optional",
    "map_of",
    "reference",
    "scalar",
    "NamingStrategy",
    "TypeNamer",
    "to_pascal_case",
]
