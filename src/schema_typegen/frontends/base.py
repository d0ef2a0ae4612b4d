"""Base class for grammar front-ends.

A front-end turns source text into its own grammar AST. It knows nothing about
the canonical IR; normalizers take it from there.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from schema_typegen.config import ProviderConfig
from schema_typegen.ir.base import SchemaGrammar


class FrontEnd(ABC):
    """Abstract base class for all grammar front-ends."""

    grammar: SchemaGrammar

    def __init__(self, config: ProviderConfig | None = None):
        """Initialize the front-end.

        Args:
            config: Provider options (dialect and friends)
        """
        self.config = config or ProviderConfig()

    @abstractmethod
    def parse(self, source_text: str) -> Any:
        """Parse source text into a grammar AST.

        Raises:
            ParseError: on the first structural error
        """
        pass

    def parse_file(self, path: Path | str) -> Any:
        """Read a file and parse its content."""
        return self.parse(Path(path).read_text(encoding="utf-8"))
