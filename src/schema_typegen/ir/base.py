"""Canonical schema IR.

Every front-end normalizes into these models. A ``SchemaModule`` is an ordered
list of named type definitions (records and unions) under a module path; field
types are a small recursive algebra of scalars, references, lists, optionals
and maps.
"""

from enum import Enum
from typing import Annotated, Any, Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from schema_typegen.errors import GenerationError


class SchemaGrammar(str, Enum):
    """Source grammars understood by the pipeline."""

    PROTOBUF = "protobuf"
    SQL = "sql"
    TOML = "toml"


class ScalarKind(str, Enum):
    """Canonical scalar kinds shared by every grammar."""

    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"


class TypeOrigin(str, Enum):
    """How a type definition came to exist in the module."""

    DECLARED = "declared"
    HOISTED = "hoisted"
    MAP_ENTRY = "map_entry"


class _FieldTypeModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class ScalarType(_FieldTypeModel):
    kind: Literal["scalar"] = "scalar"
    scalar: ScalarKind

    def __str__(self) -> str:
        return self.scalar.value


class ReferenceType(_FieldTypeModel):
    kind: Literal["reference"] = "reference"
    module_path: tuple[str, ...] = ()
    name: str

    @property
    def qualified_name(self) -> str:
        return ".".join((*self.module_path, self.name))

    def __str__(self) -> str:
        return f"ref({self.qualified_name})"


class ListType(_FieldTypeModel):
    kind: Literal["list"] = "list"
    element: "FieldType"

    def __str__(self) -> str:
        return f"list({self.element})"


class OptionalType(_FieldTypeModel):
    kind: Literal["optional"] = "optional"
    inner: "FieldType"

    def __str__(self) -> str:
        return f"optional({self.inner})"


class MapType(_FieldTypeModel):
    """Key/value association.

    ``entry`` points at the hoisted ``{key, value}`` record that carries the
    same information as a list of entries, for targets without native maps.
    """

    kind: Literal["map"] = "map"
    key: "FieldType"
    value: "FieldType"
    entry: ReferenceType | None = None

    def __str__(self) -> str:
        return f"map({self.key}, {self.value})"


FieldType = Annotated[
    Union[ScalarType, ReferenceType, ListType, OptionalType, MapType],
    Field(discriminator="kind"),
]

ListType.model_rebuild()
OptionalType.model_rebuild()
MapType.model_rebuild()


def scalar(kind: ScalarKind) -> ScalarType:
    return ScalarType(scalar=kind)


def reference(name: str, module_path: list[str] | tuple[str, ...] = ()) -> ReferenceType:
    return ReferenceType(name=name, module_path=tuple(module_path))


def list_of(element: FieldType) -> ListType:
    return ListType(element=element)


def make_optional(inner: FieldType) -> FieldType:
    """Wrap a type in ``OptionalType`` unless it already is one."""
    if isinstance(inner, OptionalType):
        return inner
    return OptionalType(inner=inner)


def map_of(key: FieldType, value: FieldType, entry: ReferenceType | None = None) -> MapType:
    return MapType(key=key, value=value, entry=entry)


def iter_references(field_type: FieldType) -> Iterator[ReferenceType]:
    """Yield every reference reachable from a field type, in order."""
    if isinstance(field_type, ReferenceType):
        yield field_type
    elif isinstance(field_type, ListType):
        yield from iter_references(field_type.element)
    elif isinstance(field_type, OptionalType):
        yield from iter_references(field_type.inner)
    elif isinstance(field_type, MapType):
        yield from iter_references(field_type.key)
        yield from iter_references(field_type.value)


class FieldDef(BaseModel):
    """A named, typed field of a record."""

    name: str = Field(..., description="Field name as declared in the source")
    type: FieldType = Field(..., description="Canonical field type")
    tag: int | None = Field(default=None, description="Source field number, if any")
    description: str | None = Field(default=None, description="Free-form note from the source")


class RecordDef(BaseModel):
    kind: Literal["record"] = "record"
    name: str
    fields: list[FieldDef] = Field(default_factory=list)
    origin: TypeOrigin = TypeOrigin.DECLARED
    source_name: str | None = Field(default=None, description="Qualified name in the source schema")

    def get_field(self, name: str) -> FieldDef | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def references(self) -> Iterator[ReferenceType]:
        for field in self.fields:
            yield from iter_references(field.type)


class VariantDef(BaseModel):
    """A union variant.

    ``discriminant`` is the ordinal position of the variant; ``source_value``
    keeps the number the source assigned to it (enum value, field tag).
    """

    name: str
    discriminant: int
    source_value: int | str | None = None
    payload: FieldType | None = None


class UnionDef(BaseModel):
    kind: Literal["union"] = "union"
    name: str
    variants: list[VariantDef] = Field(default_factory=list)
    origin: TypeOrigin = TypeOrigin.DECLARED
    source_name: str | None = None

    @property
    def is_enumeration(self) -> bool:
        """True when no variant carries a payload."""
        return all(v.payload is None for v in self.variants)

    def references(self) -> Iterator[ReferenceType]:
        for variant in self.variants:
            if variant.payload is not None:
                yield from iter_references(variant.payload)


TypeDef = Annotated[Union[RecordDef, UnionDef], Field(discriminator="kind")]


class SchemaModule(BaseModel):
    """An ordered collection of uniquely named type definitions."""

    path: list[str] = Field(default_factory=list)
    types: list[TypeDef] = Field(default_factory=list)

    def add(self, type_def: RecordDef | UnionDef) -> None:
        if self.get(type_def.name) is not None:
            raise GenerationError(
                f"Duplicate type name '{type_def.name}' in module {'.'.join(self.path)}",
                type_name=type_def.name,
            )
        self.types.append(type_def)

    def get(self, name: str) -> RecordDef | UnionDef | None:
        for type_def in self.types:
            if type_def.name == name:
                return type_def
        return None

    def names(self) -> list[str]:
        return [t.name for t in self.types]

    def records(self) -> list[RecordDef]:
        return [t for t in self.types if isinstance(t, RecordDef)]

    def unions(self) -> list[UnionDef]:
        return [t for t in self.types if isinstance(t, UnionDef)]


class CanonicalSchema(BaseModel):
    """The grammar-independent result of normalization."""

    module: SchemaModule
    grammar: SchemaGrammar
    root_name: str
    source_file: str | None = None
    imports: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
