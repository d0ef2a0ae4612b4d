"""Tests for the resolution layer.

Tests cover:
- file:// inputs
- Bare paths and Path objects
- Inline schema text
- Missing files and empty input
"""

import tempfile
from pathlib import Path

import pytest

from schema_typegen.errors import ResolutionError
from schema_typegen.providers.resolution import resolve_source


@pytest.fixture
def temp_dir():
    """Create temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def schema_file(temp_dir):
    """Write a small proto file."""
    path = temp_dir / "user.proto"
    path.write_text("message User { string id = 1; }\n")
    return path


class TestResolveSource:
    """Tests for resolve_source."""

    def test_file_prefix(self, schema_file):
        """Test file:// inputs are read from disk."""
        source = resolve_source(f"file://{schema_file}")
        assert source.text.startswith("message User")
        assert source.path == schema_file
        assert source.origin == str(schema_file)

    def test_bare_path(self, schema_file):
        """Test an existing path is read."""
        source = resolve_source(str(schema_file))
        assert source.path == schema_file

    def test_path_object(self, schema_file):
        """Test Path objects are always treated as files."""
        source = resolve_source(schema_file)
        assert source.path == schema_file

    def test_inline_text(self):
        """Test text that is not a file is returned inline."""
        text = "message User { string id = 1; }"
        source = resolve_source(text)
        assert source.text == text
        assert source.path is None
        assert source.origin == "<inline>"

    def test_inline_text_with_schema_extension_word(self):
        """Test inline text mentioning a file name is still inline."""
        text = 'import "other.proto";'
        assert resolve_source(text).path is None

    def test_missing_file_prefix(self, temp_dir):
        """Test a file:// input that does not exist."""
        missing = temp_dir / "missing.proto"
        with pytest.raises(ResolutionError, match="Schema file not found") as exc_info:
            resolve_source(f"file://{missing}")
        assert exc_info.value.source == f"file://{missing}"

    def test_missing_bare_schema_path(self):
        """Test a bare schema path that does not exist."""
        with pytest.raises(ResolutionError, match="Schema file not found: schemas/nope.sql"):
            resolve_source("schemas/nope.sql")

    def test_directory_is_rejected(self, temp_dir):
        """Test that a directory is not a schema file."""
        with pytest.raises(ResolutionError, match="not a file"):
            resolve_source(f"file://{temp_dir}")

    def test_empty_input(self):
        """Test empty and blank input."""
        with pytest.raises(ResolutionError, match="Empty schema input"):
            resolve_source("   \n")

    def test_undecodable_file(self, temp_dir):
        """Test a file that is not UTF-8 text."""
        path = temp_dir / "binary.sql"
        path.write_bytes(b"\xff\xfe\x00")
        with pytest.raises(ResolutionError, match="Cannot read schema file"):
            resolve_source(path)
