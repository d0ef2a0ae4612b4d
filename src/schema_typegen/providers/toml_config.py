"""TOML type provider."""

from schema_typegen.frontends.mappings import TOML_SCALARS
from schema_typegen.frontends.toml_config import TomlFrontEnd
from schema_typegen.ir.base import ScalarKind, SchemaGrammar
from schema_typegen.normalizer.toml_config import TomlNormalizer
from schema_typegen.providers.base import TypeProvider


class TomlProvider(TypeProvider):
    """Infers record types from the values of a TOML document."""

    name = "toml"
    grammar = SchemaGrammar.TOML
    description = "TOML configuration (types inferred from values)"
    file_extensions = (".toml",)
    frontend_class = TomlFrontEnd
    normalizer_class = TomlNormalizer

    def mapping_table(self) -> tuple[tuple[type, ScalarKind], ...]:
        return TOML_SCALARS
