"""SQL DDL type provider."""

from schema_typegen.frontends.ddl import DDLFrontEnd
from schema_typegen.frontends.mappings import ScalarMappingTable, sql_scalars
from schema_typegen.ir.base import SchemaGrammar
from schema_typegen.normalizer.ddl import DDLNormalizer
from schema_typegen.providers.base import TypeProvider


class DDLProvider(TypeProvider):
    """Generates record types from CREATE TABLE statements.

    The scalar mapping follows the configured SQL dialect.
    """

    name = "sql"
    grammar = SchemaGrammar.SQL
    description = "SQL DDL (CREATE TABLE, CREATE TYPE ... AS ENUM)"
    file_extensions = (".sql", ".ddl")
    frontend_class = DDLFrontEnd
    normalizer_class = DDLNormalizer

    def mapping_table(self) -> ScalarMappingTable:
        return sql_scalars(self.config.dialect)
