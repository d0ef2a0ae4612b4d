"""SQL DDL AST to canonical IR."""

import logging

from schema_typegen.config import ProviderConfig, SqlDialect
from schema_typegen.frontends.ddl import Column, ColumnConstraintKind, SqlColumnType, SqlSchema, Table
from schema_typegen.frontends.mappings import SQL_SCALARS, ScalarMappingTable
from schema_typegen.ir.base import (
    CanonicalSchema,
    FieldDef,
    FieldType,
    RecordDef,
    ScalarKind,
    SchemaGrammar,
    TypeOrigin,
    UnionDef,
    VariantDef,
    list_of,
    make_optional,
    scalar,
)
from schema_typegen.normalizer.base import Normalizer

logger = logging.getLogger(__name__)


class DDLNormalizer(Normalizer):
    """Normalizes a parsed DDL script.

    Every table becomes a record in a module named after the root. A column
    is optional unless it carries a column-level ``PRIMARY KEY`` or
    ``NOT NULL``. ``CREATE TYPE ... AS ENUM`` and inline MySQL ``ENUM``
    columns become payload-less unions.
    """

    grammar = SchemaGrammar.SQL

    def normalize(self, ast: SqlSchema, root_name: str) -> CanonicalSchema:
        self.reset([root_name])
        self.enum_names: dict[str, str] = {}

        for enum_type in ast.enum_types:
            self.namer.reserve(enum_type.name)
            self.enum_names[enum_type.name.lower()] = enum_type.name
        for table in ast.tables:
            self.namer.reserve(table.name)

        for enum_type in ast.enum_types:
            self.add_type(
                UnionDef(
                    name=enum_type.name,
                    variants=_variants(enum_type.values),
                    source_name=".".join(filter(None, (enum_type.schema, enum_type.name))),
                )
            )

        for table in ast.tables:
            self._emit_table(table)

        for statement in ast.skipped:
            logger.debug("Dropped %s statement", statement)

        return CanonicalSchema(
            module=self.module,
            grammar=self.grammar,
            root_name=root_name,
            metadata={
                "dialect": self.config.dialect.value,
                "skipped": list(ast.skipped),
                "primary_keys": {t.name: t.primary_key_columns for t in ast.tables},
            },
        )

    def _emit_table(self, table: Table) -> None:
        record = RecordDef(
            name=table.name,
            source_name=".".join(filter(None, (table.schema, table.name))),
        )
        self.add_type(record)

        for column in table.columns:
            record.fields.append(
                FieldDef(
                    name=column.name,
                    type=self._column_type(table, column),
                    description=column.constraint_value(ColumnConstraintKind.COMMENT),
                )
            )

        for constraint in table.constraints:
            logger.debug("Dropping %s constraint on %s", constraint.kind.value, table.name)

    def _column_type(self, table: Table, column: Column) -> FieldType:
        field_type = self._base_type(table, column)
        for _ in range(column.type.array_depth):
            field_type = list_of(field_type)

        if not (column.is_primary_key or column.is_not_null):
            field_type = make_optional(field_type)
        return field_type

    def _base_type(self, table: Table, column: Column) -> FieldType:
        column_type = column.type

        if column_type.is_enum:
            union_name = self.namer.hoisted(table.name, column.name)
            logger.debug("Hoisting inline enum %s.%s as %s", table.name, column.name, union_name)
            self.add_type(
                UnionDef(
                    name=union_name,
                    variants=_variants(column_type.enum_values or []),
                    origin=TypeOrigin.HOISTED,
                    source_name=f"{table.name}.{column.name}",
                )
            )
            return self.ref(union_name)

        if _is_mysql_bool(column_type, self.config.dialect):
            return scalar(ScalarKind.BOOL)

        kind = self.mapping_table.lookup(column_type.base_name)
        if kind is not None:
            return scalar(kind)

        type_name = column_type.name.split(".")[-1]
        if type_name.lower() in self.enum_names:
            return self.ref(self.enum_names[type_name.lower()])

        if self.config.unknown_type_fallback is not None:
            logger.debug(
                "Unknown SQL type %s on %s.%s, using %s",
                column_type.name,
                table.name,
                column.name,
                self.config.unknown_type_fallback.value,
            )
            return scalar(self.config.unknown_type_fallback)

        logger.debug("Unknown SQL type %s on %s.%s kept as reference", column_type.name, table.name, column.name)
        return self.ref(type_name)


def _variants(values: list[str]) -> list[VariantDef]:
    return [VariantDef(name=value, discriminant=i, source_value=value) for i, value in enumerate(values)]


def _is_mysql_bool(column_type: SqlColumnType, dialect: SqlDialect) -> bool:
    return dialect == SqlDialect.MYSQL and column_type.base_name == "TINYINT" and column_type.args == ["1"]


def normalize_ddl(
    ast: SqlSchema,
    mapping_table: ScalarMappingTable = SQL_SCALARS,
    root_name: str = "Root",
    config: ProviderConfig | None = None,
) -> CanonicalSchema:
    """Normalize a parsed DDL script into canonical IR."""
    return DDLNormalizer(mapping_table, config).normalize(ast, root_name)
