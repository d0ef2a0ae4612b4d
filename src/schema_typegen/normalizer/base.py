"""Base class for schema normalizers.

A normalizer turns one grammar's AST into a ``CanonicalSchema``. Each call
builds a fresh module and namer, so normalizing the same AST twice gives equal
IR.
"""

from abc import ABC, abstractmethod
from typing import Any

from schema_typegen.config import ProviderConfig
from schema_typegen.ir.base import (
    CanonicalSchema,
    RecordDef,
    ReferenceType,
    SchemaGrammar,
    SchemaModule,
    UnionDef,
    reference,
)
from schema_typegen.ir.naming import TypeNamer


class Normalizer(ABC):
    """Abstract base class for grammar normalizers."""

    grammar: SchemaGrammar

    def __init__(self, mapping_table: Any, config: ProviderConfig | None = None):
        """Initialize the normalizer.

        Args:
            mapping_table: Scalar mapping table for this grammar
            config: Provider options
        """
        self.mapping_table = mapping_table
        self.config = config or ProviderConfig()
        self.module = SchemaModule()
        self.namer = TypeNamer()

    def reset(self, module_path: list[str]) -> None:
        """Start a new module; called at the top of every ``normalize``."""
        self.module = SchemaModule(path=list(module_path))
        self.namer = TypeNamer()

    def add_type(self, type_def: RecordDef | UnionDef) -> None:
        self.module.add(type_def)

    def ref(self, name: str) -> ReferenceType:
        """Reference to a type in the module being built."""
        return reference(name, self.module.path)

    @abstractmethod
    def normalize(self, ast: Any, root_name: str) -> CanonicalSchema:
        """Normalize a grammar AST into canonical IR.

        Args:
            ast: Grammar AST produced by the matching front-end
            root_name: Name for the root type or module

        Returns:
            The canonical schema
        """
        pass
