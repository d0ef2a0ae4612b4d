"""TOML value-inference front-end.

TOML documents carry no schema of their own; the shape is inferred from the
values. This front-end only reads the document, the TOML normalizer does the
inference.
"""

import logging
import re
import tomllib
from dataclasses import dataclass, field
from typing import Any

from schema_typegen.errors import ParseError
from schema_typegen.frontends.base import FrontEnd
from schema_typegen.ir.base import SchemaGrammar

logger = logging.getLogger(__name__)

_POSITION_RE = re.compile(r"\(at line (\d+), column (\d+)\)")


@dataclass
class TomlDocument:
    """A parsed TOML document.

    ``root`` is the top-level table; insertion order of every table follows
    the source.
    """

    root: dict[str, Any] = field(default_factory=dict)

    def tables(self) -> list[str]:
        """Keys of the top-level sub-tables."""
        return [k for k, v in self.root.items() if isinstance(v, dict)]

    def arrays_of_tables(self) -> list[str]:
        return [
            k for k, v in self.root.items()
            if isinstance(v, list) and v and all(isinstance(item, dict) for item in v)
        ]


def _error_position(error: tomllib.TOMLDecodeError) -> tuple[int | None, int | None]:
    line = getattr(error, "lineno", None)
    column = getattr(error, "colno", None)
    if line is not None:
        return line, column

    match = _POSITION_RE.search(str(error))
    if match:
        return int(match.group(1)), int(match.group(2))
    return None, None


class TomlFrontEnd(FrontEnd):
    """Front-end for TOML configuration files."""

    grammar = SchemaGrammar.TOML

    def parse(self, source_text: str) -> TomlDocument:
        """Parse TOML content.

        Args:
            source_text: TOML document as string

        Returns:
            Parsed TomlDocument
        """
        try:
            root = tomllib.loads(source_text)
        except tomllib.TOMLDecodeError as e:
            line, column = _error_position(e)
            message = _POSITION_RE.sub("", getattr(e, "msg", None) or str(e)).strip()
            raise ParseError(f"Invalid TOML: {message}", line, column) from e

        logger.debug("Parsed TOML document with %d top-level keys", len(root))
        return TomlDocument(root=root)


def parse_toml(content: str) -> TomlDocument:
    """Convenience function to parse TOML content."""
    return TomlFrontEnd().parse(content)
