"""TOML document to canonical IR by value inference."""

import logging
from typing import Any

from schema_typegen.config import ProviderConfig
from schema_typegen.errors import ParseError
from schema_typegen.frontends.mappings import TOML_SCALARS, toml_scalar_kind
from schema_typegen.frontends.toml_config import TomlDocument
from schema_typegen.ir.base import (
    CanonicalSchema,
    FieldDef,
    FieldType,
    RecordDef,
    ReferenceType,
    ScalarKind,
    SchemaGrammar,
    TypeOrigin,
    list_of,
    make_optional,
    scalar,
)
from schema_typegen.normalizer.base import Normalizer

logger = logging.getLogger(__name__)


class TomlNormalizer(Normalizer):
    """Infers a record tree from a TOML document.

    The root table becomes a record named after the root. Nested tables are
    hoisted as ``Parent`` + ``Key`` records, arrays of tables as
    ``Parent`` + ``Key`` + ``Item`` records whose fields are the union of the
    keys of all elements; keys that some elements lack become optional.
    Arrays are typed by their first element.
    """

    grammar = SchemaGrammar.TOML

    def __init__(self, mapping_table: Any = TOML_SCALARS, config: ProviderConfig | None = None):
        super().__init__(mapping_table, config)

    def normalize(self, ast: TomlDocument, root_name: str) -> CanonicalSchema:
        self.reset([root_name])
        self.namer.reserve(root_name)
        self._build_record(root_name, [ast.root], TypeOrigin.DECLARED, "")

        return CanonicalSchema(
            module=self.module,
            grammar=self.grammar,
            root_name=root_name,
        )

    def _build_record(
        self,
        name: str,
        tables: list[dict[str, Any]],
        origin: TypeOrigin,
        path: str,
    ) -> ReferenceType:
        record = RecordDef(name=name, origin=origin, source_name=path or None)
        self.add_type(record)

        keys: dict[str, None] = {}
        for table in tables:
            keys.update(dict.fromkeys(table))

        for key in keys:
            key_path = f"{path}.{key}" if path else key
            values = [table[key] for table in tables if key in table]
            self._check_uniform(values, key_path)

            field_type = self._infer(name, key, values, key_path)
            if len(values) < len(tables):
                logger.debug("Key %s missing from some tables, marking optional", key_path)
                field_type = make_optional(field_type)
            record.fields.append(FieldDef(name=key, type=field_type))

        return self.ref(name)

    def _infer(self, parent: str, key: str, values: list[Any], path: str) -> FieldType:
        """Infer one type for every value seen at ``path``; the first value decides."""
        first = values[0]

        if isinstance(first, dict):
            name = self.namer.hoisted(parent, key)
            logger.debug("Hoisting table %s as %s", path, name)
            tables = [v for v in values if isinstance(v, dict)]
            return self._build_record(name, tables, TypeOrigin.HOISTED, path)

        if isinstance(first, list):
            items = [item for v in values if isinstance(v, list) for item in v]
            if not items:
                logger.warning("Empty array at %s, typing it as a list of string", path)
                return list_of(scalar(ScalarKind.STRING))

            self._check_uniform(items, f"{path}[]")
            if isinstance(items[0], dict):
                name = self.namer.hoisted(parent, key, "Item")
                logger.debug("Hoisting array of tables %s as %s", path, name)
                tables = [item for item in items if isinstance(item, dict)]
                return list_of(self._build_record(name, tables, TypeOrigin.HOISTED, path))
            return list_of(self._infer(parent, key, items, f"{path}[]"))

        kind = toml_scalar_kind(first, self.mapping_table)
        if kind is None:
            raise ParseError(f"Unsupported TOML value {first!r} at '{path}'")
        return scalar(kind)

    def _shape(self, value: Any) -> str:
        if isinstance(value, dict):
            return "table"
        if isinstance(value, list):
            return "array"
        kind = toml_scalar_kind(value, self.mapping_table)
        return kind.value if kind else type(value).__name__

    def _check_uniform(self, values: list[Any], path: str) -> None:
        shapes = list(dict.fromkeys(self._shape(v) for v in values))
        if len(shapes) < 2:
            return
        if self.config.strict_arrays:
            raise ParseError(f"Mixed value types at '{path}': {', '.join(shapes)}")
        logger.warning(
            "Mixed value types at %s (%s), typing by the first element as %s",
            path,
            ", ".join(shapes),
            shapes[0],
        )


def normalize_toml(
    ast: TomlDocument,
    mapping_table: Any = TOML_SCALARS,
    root_name: str = "Root",
    config: ProviderConfig | None = None,
) -> CanonicalSchema:
    """Infer canonical IR from a parsed TOML document."""
    return TomlNormalizer(mapping_table, config).normalize(ast, root_name)
