"""Protobuf AST to canonical IR."""

import logging

from schema_typegen.config import ProviderConfig
from schema_typegen.frontends.mappings import PROTOBUF_SCALARS, ScalarMappingTable
from schema_typegen.frontends.protobuf import (
    FieldLabel,
    ProtoEnum,
    ProtoField,
    ProtoFile,
    ProtoMessage,
    ProtoOneof,
)
from schema_typegen.ir.base import (
    CanonicalSchema,
    FieldDef,
    FieldType,
    RecordDef,
    SchemaGrammar,
    TypeOrigin,
    UnionDef,
    VariantDef,
    list_of,
    make_optional,
    map_of,
    scalar,
)
from schema_typegen.normalizer.base import Normalizer

logger = logging.getLogger(__name__)


class ProtobufNormalizer(Normalizer):
    """Normalizes a parsed .proto file.

    Messages become records and enums become payload-less unions. Nested
    definitions are hoisted to the top level of the module; they keep their
    own name when it is free, otherwise they are prefixed with the enclosing
    message name. Oneof groups become unions whose variants carry the member
    field types, and map fields get a hoisted ``{key, value}`` entry record.
    """

    grammar = SchemaGrammar.PROTOBUF

    def normalize(self, ast: ProtoFile, root_name: str) -> CanonicalSchema:
        self.package_parts = ast.package.split(".") if ast.package else []
        self.syntax = ast.syntax
        self.reset(self.package_parts or [root_name])
        self.names: dict[str, str] = {}

        self._assign_names(ast)
        for definition in ast.definitions:
            self._emit(definition)

        for service in ast.services:
            logger.debug("Dropping service %s with %d methods", service.name, len(service.methods))

        return CanonicalSchema(
            module=self.module,
            grammar=self.grammar,
            root_name=root_name,
            imports=list(ast.imports),
            metadata={
                "syntax": ast.syntax,
                "edition": ast.edition,
                "package": ast.package,
                "options": dict(ast.options),
                "services": [s.name for s in ast.services],
            },
        )

    def _full_name(self, path: tuple[str, ...]) -> str:
        return ".".join((*self.package_parts, *path))

    def _assign_names(self, proto: ProtoFile) -> None:
        """Give every message and enum its module-level name, top-level first."""
        for definition in proto.definitions:
            self.names[self._full_name(definition.path)] = definition.name
            self.namer.reserve(definition.name)

        def visit(message: ProtoMessage, parent_name: str) -> None:
            for nested in message.definitions:
                name = self.namer.claim(nested.name, f"{parent_name}{nested.name}")
                if name != nested.name:
                    logger.debug("Nested type %s renamed to %s", self._full_name(nested.path), name)
                self.names[self._full_name(nested.path)] = name
                if isinstance(nested, ProtoMessage):
                    visit(nested, name)

        for message in proto.messages:
            visit(message, message.name)

    def _emit(self, definition: ProtoMessage | ProtoEnum) -> None:
        full_name = self._full_name(definition.path)
        name = self.names[full_name]
        origin = TypeOrigin.DECLARED if len(definition.path) == 1 else TypeOrigin.HOISTED

        if isinstance(definition, ProtoEnum):
            self.add_type(
                UnionDef(
                    name=name,
                    variants=[
                        VariantDef(name=value.name, discriminant=i, source_value=value.number)
                        for i, value in enumerate(definition.values)
                    ],
                    origin=origin,
                    source_name=full_name,
                )
            )
            return

        record = RecordDef(name=name, origin=origin, source_name=full_name)
        self.add_type(record)
        for member in definition.members:
            if isinstance(member, ProtoOneof):
                record.fields.append(self._oneof_field(record.name, definition, member))
            else:
                record.fields.append(
                    FieldDef(
                        name=member.name,
                        type=self._field_type(record.name, definition, member),
                        tag=member.number,
                        description=_deprecation_note(member),
                    )
                )

        for nested in definition.definitions:
            self._emit(nested)

    def resolve(self, type_name: str, scope: tuple[str, ...]) -> FieldType:
        """Resolve a field type name the way protoc does.

        A leading dot makes the name fully qualified; otherwise the enclosing
        scopes are searched from the innermost outwards.
        """
        kind = self.mapping_table.lookup(type_name)
        if kind is not None:
            return scalar(kind)

        if type_name.startswith("."):
            candidates = [type_name[1:]]
        else:
            parts = [*self.package_parts, *scope]
            candidates = [".".join((*parts[:i], type_name)) for i in range(len(parts), -1, -1)]

        for candidate in candidates:
            if candidate in self.names:
                return self.ref(self.names[candidate])

        logger.debug("Unresolved type name %s in scope %s", type_name, ".".join(scope))
        return self.ref(type_name.lstrip("."))

    def _field_type(self, parent_name: str, message: ProtoMessage, field: ProtoField) -> FieldType:
        if field.is_map:
            key = self.resolve(field.key_type, message.path)
            value = self.resolve(field.type_name, message.path)
            entry_name = self.namer.hoisted(parent_name, field.name, "Entry")
            self.add_type(
                RecordDef(
                    name=entry_name,
                    fields=[FieldDef(name="key", type=key, tag=1), FieldDef(name="value", type=value, tag=2)],
                    origin=TypeOrigin.MAP_ENTRY,
                    source_name=f"{self._full_name(message.path)}.{field.name}",
                )
            )
            return map_of(key, value, entry=self.ref(entry_name))

        field_type = self.resolve(field.type_name, message.path)
        if field.label == FieldLabel.REPEATED:
            return list_of(field_type)
        if field.label == FieldLabel.OPTIONAL:
            return make_optional(field_type)
        return field_type

    def _oneof_field(self, parent_name: str, message: ProtoMessage, oneof: ProtoOneof) -> FieldDef:
        union_name = self.namer.hoisted(parent_name, oneof.name)
        logger.debug("Hoisting oneof %s.%s as %s", parent_name, oneof.name, union_name)
        self.add_type(
            UnionDef(
                name=union_name,
                variants=[
                    VariantDef(
                        name=field.name,
                        discriminant=i,
                        source_value=field.number,
                        payload=self.resolve(field.type_name, message.path),
                    )
                    for i, field in enumerate(oneof.fields)
                ],
                origin=TypeOrigin.HOISTED,
                source_name=f"{self._full_name(message.path)}.{oneof.name}",
            )
        )
        return FieldDef(name=oneof.name, type=make_optional(self.ref(union_name)))


def _deprecation_note(field: ProtoField) -> str | None:
    if field.options.get("deprecated") == "true":
        return "deprecated"
    return None


def normalize_proto(
    ast: ProtoFile,
    mapping_table: ScalarMappingTable = PROTOBUF_SCALARS,
    root_name: str = "Root",
    config: ProviderConfig | None = None,
) -> CanonicalSchema:
    """Normalize a parsed .proto file into canonical IR."""
    return ProtobufNormalizer(mapping_table, config).normalize(ast, root_name)
