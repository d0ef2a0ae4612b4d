"""Scalar mapping tables.

Static lookups from each grammar's primitive type names to canonical scalar
kinds. The SQL table is keyed by upper-case base type name (arguments and
array suffixes removed before lookup).
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time

from schema_typegen.config import SqlDialect
from schema_typegen.ir.base import ScalarKind


@dataclass(frozen=True)
class ScalarMappingTable:
    """A named, read-only mapping from type name to scalar kind."""

    name: str
    entries: dict[str, ScalarKind] = field(default_factory=dict)
    case_sensitive: bool = True

    def _key(self, type_name: str) -> str:
        key = type_name.strip()
        return key if self.case_sensitive else key.upper()

    def lookup(self, type_name: str) -> ScalarKind | None:
        return self.entries.get(self._key(type_name))

    def __contains__(self, type_name: str) -> bool:
        return self._key(type_name) in self.entries

    def with_overrides(self, name: str, overrides: dict[str, ScalarKind]) -> "ScalarMappingTable":
        """Return a new table with extra or replaced entries."""
        merged = dict(self.entries)
        merged.update({self._key(k): v for k, v in overrides.items()})
        return ScalarMappingTable(name=name, entries=merged, case_sensitive=self.case_sensitive)


PROTOBUF_SCALARS = ScalarMappingTable(
    name="protobuf",
    entries={
        "double": ScalarKind.FLOAT,
        "float": ScalarKind.FLOAT,
        "int32": ScalarKind.INT32,
        "sint32": ScalarKind.INT32,
        "sfixed32": ScalarKind.INT32,
        "int64": ScalarKind.INT64,
        "sint64": ScalarKind.INT64,
        "sfixed64": ScalarKind.INT64,
        "uint32": ScalarKind.UINT32,
        "fixed32": ScalarKind.UINT32,
        "uint64": ScalarKind.UINT64,
        "fixed64": ScalarKind.UINT64,
        "bool": ScalarKind.BOOL,
        "string": ScalarKind.STRING,
        "bytes": ScalarKind.BYTES,
    },
)


SQL_SCALARS = ScalarMappingTable(
    name="sql",
    case_sensitive=False,
    entries={
        # Integers
        "TINYINT": ScalarKind.INT32,
        "SMALLINT": ScalarKind.INT32,
        "MEDIUMINT": ScalarKind.INT32,
        "INT": ScalarKind.INT32,
        "INTEGER": ScalarKind.INT32,
        "BIGINT": ScalarKind.INT32,
        "INT1": ScalarKind.INT32,
        "INT2": ScalarKind.INT32,
        "INT4": ScalarKind.INT32,
        "INT8": ScalarKind.INT32,
        "SERIAL": ScalarKind.INT32,
        "SMALLSERIAL": ScalarKind.INT32,
        "BIGSERIAL": ScalarKind.INT32,
        # Floats
        "REAL": ScalarKind.FLOAT,
        "FLOAT": ScalarKind.FLOAT,
        "FLOAT4": ScalarKind.FLOAT,
        "FLOAT8": ScalarKind.FLOAT,
        "DOUBLE": ScalarKind.FLOAT,
        "DOUBLE PRECISION": ScalarKind.FLOAT,
        "DECIMAL": ScalarKind.FLOAT,
        "DEC": ScalarKind.FLOAT,
        "NUMERIC": ScalarKind.FLOAT,
        # Strings
        "CHAR": ScalarKind.STRING,
        "CHARACTER": ScalarKind.STRING,
        "VARCHAR": ScalarKind.STRING,
        "CHARACTER VARYING": ScalarKind.STRING,
        "CHAR VARYING": ScalarKind.STRING,
        "NATIONAL CHARACTER": ScalarKind.STRING,
        "NATIONAL CHARACTER VARYING": ScalarKind.STRING,
        "NATIONAL CHAR": ScalarKind.STRING,
        "NCHAR": ScalarKind.STRING,
        "NVARCHAR": ScalarKind.STRING,
        "TEXT": ScalarKind.STRING,
        "TINYTEXT": ScalarKind.STRING,
        "MEDIUMTEXT": ScalarKind.STRING,
        "LONGTEXT": ScalarKind.STRING,
        # Bit strings, kept in their textual form
        "BIT": ScalarKind.STRING,
        "BIT VARYING": ScalarKind.STRING,
        "VARBIT": ScalarKind.STRING,
        # Boolean
        "BOOLEAN": ScalarKind.BOOL,
        "BOOL": ScalarKind.BOOL,
        # Date/Time
        "DATE": ScalarKind.STRING,
        "TIME": ScalarKind.STRING,
        "TIMESTAMP": ScalarKind.STRING,
        "TIMESTAMPTZ": ScalarKind.STRING,
        "TIMESTAMP WITH TIME ZONE": ScalarKind.STRING,
        "TIMESTAMP WITHOUT TIME ZONE": ScalarKind.STRING,
        "TIME WITH TIME ZONE": ScalarKind.STRING,
        "TIME WITHOUT TIME ZONE": ScalarKind.STRING,
        "DATETIME": ScalarKind.STRING,
        # Binary
        "BLOB": ScalarKind.BYTES,
        "BYTEA": ScalarKind.BYTES,
        "BINARY": ScalarKind.BYTES,
        "VARBINARY": ScalarKind.BYTES,
        # JSON
        "JSON": ScalarKind.STRING,
        "JSONB": ScalarKind.STRING,
        # UUID
        "UUID": ScalarKind.STRING,
    },
)


DIALECT_SCALARS: dict[SqlDialect, ScalarMappingTable] = {
    SqlDialect.GENERIC: SQL_SCALARS,
    SqlDialect.SQLITE: SQL_SCALARS,
    SqlDialect.POSTGRESQL: SQL_SCALARS.with_overrides(
        "postgresql",
        {
            "MONEY": ScalarKind.FLOAT,
            "INET": ScalarKind.STRING,
            "CIDR": ScalarKind.STRING,
            "MACADDR": ScalarKind.STRING,
            "INTERVAL": ScalarKind.STRING,
            "CITEXT": ScalarKind.STRING,
            "XML": ScalarKind.STRING,
        },
    ),
    SqlDialect.MYSQL: SQL_SCALARS.with_overrides(
        "mysql",
        {
            "YEAR": ScalarKind.INT32,
            "TINYBLOB": ScalarKind.BYTES,
            "MEDIUMBLOB": ScalarKind.BYTES,
            "LONGBLOB": ScalarKind.BYTES,
            "SET": ScalarKind.STRING,
        },
    ),
}


def sql_scalars(dialect: SqlDialect) -> ScalarMappingTable:
    return DIALECT_SCALARS[dialect]


# Python types produced by the TOML reader. Order matters: bool is an int
# subclass and datetime is a date subclass.
TOML_SCALARS: tuple[tuple[type, ScalarKind], ...] = (
    (bool, ScalarKind.BOOL),
    (int, ScalarKind.INT64),
    (float, ScalarKind.FLOAT),
    (str, ScalarKind.STRING),
    (datetime, ScalarKind.STRING),
    (date, ScalarKind.STRING),
    (time, ScalarKind.STRING),
)


def toml_scalar_kind(
    value: object,
    table: tuple[tuple[type, ScalarKind], ...] = TOML_SCALARS,
) -> ScalarKind | None:
    """Return the scalar kind of a TOML value, or None for tables and arrays."""
    for python_type, kind in table:
        if isinstance(value, python_type):
            return kind
    return None
