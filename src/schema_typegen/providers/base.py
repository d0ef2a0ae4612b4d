"""Base class for type providers.

A provider ties one grammar's front-end, scalar mapping table and normalizer
to the shared projector:

    provider = ProtobufProvider(config)
    schema = provider.resolve_schema("user.proto")
    module = provider.generate_types(schema, "User")
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from schema_typegen.config import ProviderConfig
from schema_typegen.frontends.base import FrontEnd
from schema_typegen.generator.base import TargetModule
from schema_typegen.generator.projector import TypeProjector
from schema_typegen.ir.base import CanonicalSchema, SchemaGrammar
from schema_typegen.ir.naming import to_pascal_case
from schema_typegen.normalizer.base import Normalizer
from schema_typegen.providers.resolution import SourceText, resolve_source

logger = logging.getLogger(__name__)

DEFAULT_ROOT_NAME = "Root"


@dataclass
class ParsedSchema:
    """A resolved and parsed schema unit, ready for type generation."""

    grammar: SchemaGrammar
    ast: Any
    source: SourceText

    @property
    def source_file(self) -> str | None:
        return str(self.source.path) if self.source.path else None

    def default_root_name(self) -> str:
        """Root name derived from the file name, or ``Root`` for inline text."""
        if self.source.path is not None:
            return to_pascal_case(self.source.path.stem)
        return DEFAULT_ROOT_NAME


class TypeProvider(ABC):
    """Abstract base class for all grammar providers."""

    name: str
    grammar: SchemaGrammar
    description: str = ""
    file_extensions: tuple[str, ...] = ()
    frontend_class: type[FrontEnd]
    normalizer_class: type[Normalizer]

    def __init__(self, config: ProviderConfig | None = None):
        """Initialize the provider.

        Args:
            config: Provider options; defaults apply when omitted
        """
        self.config = config or ProviderConfig()
        self.frontend = self.frontend_class(self.config)

    @abstractmethod
    def mapping_table(self) -> Any:
        """Scalar mapping table handed to the normalizer."""
        pass

    def resolve_schema(self, source: str | Path) -> ParsedSchema:
        """Resolve an input to text and parse it.

        Args:
            source: Path, ``file://`` URL or inline schema text

        Returns:
            The parsed schema

        Raises:
            ResolutionError: if the input cannot be resolved
            ParseError: if the text is malformed
        """
        source_text = resolve_source(source)
        logger.debug("Parsing %s schema from %s", self.name, source_text.origin)
        ast = self.frontend.parse(source_text.text)
        return ParsedSchema(grammar=self.grammar, ast=ast, source=source_text)

    def normalize(self, schema: ParsedSchema, root_name: str | None = None) -> CanonicalSchema:
        """Normalize a parsed schema into canonical IR."""
        if schema.grammar != self.grammar:
            raise ValueError(
                f"Schema grammar '{schema.grammar.value}' does not match provider '{self.name}'"
            )

        root_name = root_name or schema.default_root_name()
        normalizer = self.normalizer_class(self.mapping_table(), self.config)
        canonical = normalizer.normalize(schema.ast, root_name)
        canonical.source_file = schema.source_file
        return canonical

    def generate_types(self, schema: ParsedSchema, root_name: str | None = None) -> TargetModule:
        """Generate target declarations for a parsed schema.

        Args:
            schema: Result of ``resolve_schema``
            root_name: Root type/module name; derived from the source when omitted

        Returns:
            Root of the generated module hierarchy

        Raises:
            GenerationError: on an unresolved reference or naming collision
        """
        root_name = root_name or schema.default_root_name()
        canonical = self.normalize(schema, root_name)
        module = TypeProjector(self.config).project(canonical, root_name)
        logger.debug(
            "Generated %d types from %s",
            sum(1 for _ in module.walk()),
            schema.source.origin,
        )
        return module
