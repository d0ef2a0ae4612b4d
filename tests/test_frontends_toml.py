"""Tests for the TOML front-end.

Tests cover:
- Parsing documents into TomlDocument
- Table and array-of-tables discovery
- Error positions for malformed TOML
- Reading UTF-8 files
"""

from pathlib import Path

import pytest

from schema_typegen.errors import ParseError
from schema_typegen.frontends.toml_config import TomlFrontEnd, parse_toml


SCHEMAS_DIR = Path(__file__).parent.parent / "examples" / "schemas"
TOML_FILE = SCHEMAS_DIR / "config.toml"


class TestTomlFrontEnd:
    """Tests for TomlFrontEnd."""

    def test_parse_scalars(self):
        """Test scalar values keep their Python types."""
        document = parse_toml('name = "svc"\nport = 8080\nratio = 0.5\nenabled = true\n')
        assert document.root == {"name": "svc", "port": 8080, "ratio": 0.5, "enabled": True}

    def test_tables_and_arrays_of_tables(self):
        """Test discovery of sub-tables and arrays of tables."""
        document = parse_toml("""
            title = "x"
            hosts = ["a", "b"]

            [database]
            host = "localhost"

            [[services]]
            name = "api"
        """)
        assert document.tables() == ["database"]
        assert document.arrays_of_tables() == ["services"]

    def test_key_order_is_preserved(self):
        """Test that keys come back in source order."""
        document = parse_toml("z = 1\na = 2\nm = 3\n")
        assert list(document.root) == ["z", "a", "m"]

    def test_parse_example_file(self):
        """Test parsing the example config.toml."""
        document = TomlFrontEnd().parse_file(TOML_FILE)
        assert document.root["title"] == "Order Service"
        assert document.tables() == ["database"]
        assert document.arrays_of_tables() == ["services"]
        assert document.root["database"]["pool"]["max_size"] == 10

    def test_invalid_toml_reports_position(self):
        """Test that a malformed document raises ParseError with a line."""
        with pytest.raises(ParseError, match="Invalid TOML") as exc_info:
            parse_toml('a = 1\nb = "unterminated\n')
        assert exc_info.value.line == 2

    def test_duplicate_key_is_an_error(self):
        """Test duplicate keys."""
        with pytest.raises(ParseError):
            parse_toml("a = 1\na = 2\n")

    def test_parse_file_reads_utf8(self, tmp_path):
        """Test that files are decoded as UTF-8 whatever the locale."""
        path = tmp_path / "owner.toml"
        path.write_bytes('owner = "Zoë Ünal"\n'.encode("utf-8"))
        document = TomlFrontEnd().parse_file(path)
        assert document.root == {"owner": "Zoë Ünal"}
