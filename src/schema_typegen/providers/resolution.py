"""Resolution layer: decide whether an input is a file or inline schema text.

Policy, in order:

1. ``file://`` prefix: strip it and read that path.
2. The input names an existing file: read it.
3. The input looks like a bare path to a schema file that does not exist:
   error, rather than parsing the path as schema text.
4. Empty input: error.
5. Anything else is inline schema text.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from schema_typegen.errors import ResolutionError

logger = logging.getLogger(__name__)

FILE_PREFIX = "file://"

SCHEMA_EXTENSIONS = {".proto", ".sql", ".ddl", ".toml"}

# Longer inputs are never treated as paths.
MAX_PATH_LENGTH = 4096


@dataclass(frozen=True)
class SourceText:
    """Schema text plus where it came from."""

    text: str
    path: Path | None = None

    @property
    def origin(self) -> str:
        return str(self.path) if self.path else "<inline>"


def _read(path: Path, source: str) -> SourceText:
    if not path.exists():
        raise ResolutionError(f"Schema file not found: {path}", source=source)
    if not path.is_file():
        raise ResolutionError(f"Schema path is not a file: {path}", source=source)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ResolutionError(f"Cannot read schema file {path}: {e}", source=source) from e

    logger.debug("Read schema from %s (%d bytes)", path, len(text))
    return SourceText(text=text, path=path)


def _is_existing_file(candidate: str) -> bool:
    if "\n" in candidate or len(candidate) > MAX_PATH_LENGTH:
        return False
    try:
        return Path(candidate).is_file()
    except OSError:
        return False


def _looks_like_schema_path(candidate: str) -> bool:
    if any(ch.isspace() for ch in candidate):
        return False
    return Path(candidate).suffix.lower() in SCHEMA_EXTENSIONS


def resolve_source(source: str | Path) -> SourceText:
    """Resolve an input to schema text.

    Args:
        source: A path, a ``file://`` URL or inline schema text

    Returns:
        The schema text and its path when it was read from a file

    Raises:
        ResolutionError: if the input is empty or names an unreadable file
    """
    if isinstance(source, Path):
        return _read(source, str(source))

    if not source.strip():
        raise ResolutionError("Empty schema input", source=source)

    if source.startswith(FILE_PREFIX):
        return _read(Path(source[len(FILE_PREFIX):]), source)

    candidate = source.strip()
    if _is_existing_file(candidate):
        return _read(Path(candidate), source)

    if _looks_like_schema_path(candidate):
        raise ResolutionError(f"Schema file not found: {candidate}", source=source)

    return SourceText(text=source)
