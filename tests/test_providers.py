"""Tests for providers, the registry and the pipeline entry points.

Tests cover:
- End-to-end generation for Protobuf, SQL DDL and TOML
- ProviderRegistry lookup, creation and detection
- resolve_schema / generate_types helpers
- Batch generation with failing units
"""

import tempfile
from pathlib import Path

import pytest

from schema_typegen import (
    BatchResult,
    DDLProvider,
    ProtobufProvider,
    ProviderConfig,
    ProviderRegistry,
    SqlDialect,
    TomlProvider,
    generate_batch,
    generate_types,
    resolve_schema,
)
from schema_typegen.errors import GenerationError, ParseError, ResolutionError
from schema_typegen.generator import ListOf, MapOf, OptionOf, Primitive, TypeRef
from schema_typegen.ir import SchemaGrammar
from schema_typegen.providers import get_provider


SCHEMAS_DIR = Path(__file__).parent.parent / "examples" / "schemas"
PROTOBUF_FILE = SCHEMAS_DIR / "user.proto"
DDL_FILE = SCHEMAS_DIR / "users.sql"
TOML_FILE = SCHEMAS_DIR / "config.toml"

USER_PROTO = """
syntax = "proto3";

message User {
  string id = 1;
  string name = 2;
  Status status = 3;
  repeated string tags = 4;
  map<string, string> metadata = 5;
}

enum Status {
  UNKNOWN = 0;
  ACTIVE = 1;
  INACTIVE = 2;
}
"""

USERS_DDL = "CREATE TABLE users(id INT PRIMARY KEY, name VARCHAR(255) NOT NULL, email TEXT, age INT);"

CONFIG_TOML = """
name = "orders"
port = 8080

[database]
host = "localhost"
pool_size = 5

[[services]]
name = "api"
replicas = 2

[[services]]
name = "worker"
replicas = 1
"""


@pytest.fixture
def temp_dir():
    """Create temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# End-to-end Tests
# =============================================================================

class TestProtobufProvider:
    """End-to-end tests for ProtobufProvider."""

    def test_user_example(self):
        """Test the User/Status example."""
        provider = ProtobufProvider()
        schema = provider.resolve_schema(USER_PROTO)
        module = provider.generate_types(schema, "User")

        assert module.name == "User"
        assert module.names() == ["Status", "User"]

        status = module.get("Status")
        assert status.case_names() == ["Unknown", "Active", "Inactive"]
        assert [c.tag for c in status.cases] == [0, 1, 2]

        user = module.get("User")
        types = {f.name: f.type for f in user.fields}
        assert list(types) == ["id", "name", "status", "tags", "metadata"]
        assert types["id"] == Primitive(name="string")
        assert types["name"] == Primitive(name="string")
        assert types["status"] == TypeRef(module_path=("User",), name="Status")
        assert types["tags"] == ListOf(element=Primitive(name="string"))
        assert types["metadata"] == MapOf(key=Primitive(name="string"), value=Primitive(name="string"))

    def test_example_file(self):
        """Test the example user.proto end to end."""
        provider = ProtobufProvider()
        schema = provider.resolve_schema(PROTOBUF_FILE)
        module = provider.generate_types(schema)

        assert module.name == "acme"
        users = module.innermost()
        assert users.name == "users"
        assert users.names() == [
            "Status",
            "Address",
            "UserContact",
            "User",
            "UserList",
            "GetUserRequest",
            "ListUsersRequest",
        ]
        user = users.get("User")
        assert str(user.get_field("email").type) == "string option"
        assert str(user.get_field("contact").type) == "UserContact option"
        assert users.get("Address").get_field("postal_code").description == "deprecated"
        assert users.get("UserContact").case_names() == ["Phone", "MailingAddress"]

    def test_root_name_defaults_to_file_stem(self, temp_dir):
        """Test the default root name for files without a package."""
        path = temp_dir / "order_events.proto"
        path.write_text("message Created { string id = 1; }")
        provider = ProtobufProvider()
        module = provider.generate_types(provider.resolve_schema(path))
        assert module.name == "OrderEvents"

    def test_unresolved_reference(self):
        """Test that an unknown message type fails generation."""
        provider = ProtobufProvider()
        schema = provider.resolve_schema("message A { Missing m = 1; }")
        with pytest.raises(GenerationError, match="Unresolved reference 'Root.Missing'"):
            provider.generate_types(schema)

    def test_parse_error(self):
        """Test that parse errors surface from resolve_schema."""
        with pytest.raises(ParseError):
            ProtobufProvider().resolve_schema("message A {")


class TestDDLProvider:
    """End-to-end tests for DDLProvider."""

    def test_users_example(self):
        """Test the users table example."""
        provider = DDLProvider()
        module = provider.generate_types(provider.resolve_schema(USERS_DDL), "Db")

        users = module.get("Users")
        assert [(f.name, str(f.type)) for f in users.fields] == [
            ("id", "int"),
            ("name", "string"),
            ("email", "string option"),
            ("age", "int option"),
        ]
        assert users.get_field("email").type == OptionOf(inner=Primitive(name="string"))

    def test_example_file(self):
        """Test the example users.sql with the PostgreSQL dialect."""
        provider = DDLProvider(ProviderConfig(dialect=SqlDialect.POSTGRESQL))
        schema = provider.resolve_schema(DDL_FILE)
        module = provider.generate_types(schema)

        assert module.name == "Users"
        assert module.names() == ["UserRole", "Users", "Orders"]
        users = module.get("Users")
        assert str(users.get_field("role").type) == "UserRole"
        assert str(users.get_field("tags").type) == "string list option"
        assert str(users.get_field("created_at").type) == "string option"
        assert str(users.get_field("is_active").type) == "bool"
        orders = module.get("Orders")
        assert str(orders.get_field("user_id").type) == "int"
        assert str(orders.get_field("total").type) == "float"

    def test_dialect_selects_mapping_table(self):
        """Test that the configured dialect picks the scalar table."""
        assert "INET" not in DDLProvider().mapping_table()
        assert "INET" in DDLProvider(ProviderConfig(dialect=SqlDialect.POSTGRESQL)).mapping_table()


class TestTomlProvider:
    """End-to-end tests for TomlProvider."""

    def test_config_example(self):
        """Test the Config / database / services example."""
        provider = TomlProvider()
        module = provider.generate_types(provider.resolve_schema(CONFIG_TOML), "Config")

        assert sorted(module.names()) == ["Config", "ConfigDatabase", "ConfigServicesItem"]
        assert module.names()[-1] == "Config"

        config = module.get("Config")
        assert str(config.get_field("database").type) == "ConfigDatabase"
        assert str(config.get_field("services").type) == "ConfigServicesItem list"
        assert str(config.get_field("port").type) == "int64"

        database = module.get("ConfigDatabase")
        assert [(f.name, str(f.type)) for f in database.fields] == [
            ("host", "string"),
            ("pool_size", "int64"),
        ]
        services = module.get("ConfigServicesItem")
        assert [(f.name, str(f.type)) for f in services.fields] == [
            ("name", "string"),
            ("replicas", "int64"),
        ]

    def test_example_file(self):
        """Test the example config.toml."""
        provider = TomlProvider()
        module = provider.generate_types(provider.resolve_schema(TOML_FILE))

        assert module.name == "Config"
        assert module.names() == ["ConfigDatabasePool", "ConfigDatabase", "ConfigServicesItem", "Config"]
        services = module.get("ConfigServicesItem")
        assert str(services.get_field("replicas").type) == "int64 option"
        assert str(module.get("Config").get_field("hosts").type) == "string list"


# =============================================================================
# Registry Tests
# =============================================================================

class TestProviderRegistry:
    """Tests for ProviderRegistry."""

    def test_default_providers(self):
        """Test the built-in providers are registered."""
        registry = ProviderRegistry()
        assert registry.list_grammars() == [SchemaGrammar.PROTOBUF, SchemaGrammar.SQL, SchemaGrammar.TOML]
        assert "protobuf" in registry
        assert SchemaGrammar.TOML in registry
        assert "avro" not in registry

    def test_get_by_string_or_enum(self):
        """Test lookup by name and enum."""
        registry = ProviderRegistry()
        assert registry.get("SQL") is DDLProvider
        assert registry.get(SchemaGrammar.PROTOBUF) is ProtobufProvider
        assert registry.get("nope") is None

    def test_create_passes_config(self):
        """Test that created providers carry the config."""
        config = ProviderConfig(dialect=SqlDialect.MYSQL)
        provider = ProviderRegistry().create("sql", config)
        assert isinstance(provider, DDLProvider)
        assert provider.config is config
        assert provider.frontend.config is config

    def test_create_unknown(self):
        """Test creating an unknown provider."""
        with pytest.raises(ValueError, match="Provider 'avro' not found. Available: protobuf, sql, toml"):
            ProviderRegistry().create("avro")

    def test_detect(self):
        """Test grammar detection from file extensions."""
        registry = ProviderRegistry()
        assert registry.detect("a/b/user.proto") == SchemaGrammar.PROTOBUF
        assert registry.detect("schema.DDL") == SchemaGrammar.SQL
        assert registry.detect("config.toml") == SchemaGrammar.TOML
        assert registry.detect("notes.txt") is None

    def test_unregister(self):
        """Test removing a provider."""
        registry = ProviderRegistry()
        assert registry.unregister(SchemaGrammar.TOML)
        assert not registry.unregister(SchemaGrammar.TOML)
        assert "toml" not in registry

    def test_registries_are_independent(self):
        """Test that registries share no state."""
        first = ProviderRegistry()
        first.unregister(SchemaGrammar.SQL)
        assert "sql" in ProviderRegistry()

    def test_get_provider(self):
        """Test the convenience factory."""
        assert isinstance(get_provider("toml"), TomlProvider)

    def test_grammar_mismatch(self):
        """Test normalizing a schema with the wrong provider."""
        schema = ProtobufProvider().resolve_schema("message A {}")
        with pytest.raises(ValueError, match="does not match provider 'sql'"):
            DDLProvider().normalize(schema)


# =============================================================================
# Pipeline Tests
# =============================================================================

class TestPipeline:
    """Tests for the module-level entry points."""

    def test_resolve_and_generate(self):
        """Test resolve_schema followed by generate_types."""
        schema = resolve_schema(USERS_DDL, "sql")
        assert schema.grammar == SchemaGrammar.SQL
        assert schema.source_file is None
        module = generate_types(schema, "Db")
        assert module.names() == ["Users"]

    def test_round_trips_are_independent(self):
        """Test that repeated generation gives equal, separate results."""
        schema = resolve_schema(USER_PROTO, SchemaGrammar.PROTOBUF)
        first = generate_types(schema, "User")
        second = generate_types(schema, "User")
        assert first == second
        assert first is not second

    def test_resolution_error(self):
        """Test a missing schema file."""
        with pytest.raises(ResolutionError):
            resolve_schema("missing/users.sql", "sql")

    def test_long_reference_chain(self):
        """Test a chain of messages longer than the interpreter recursion limit."""
        count = 1500
        messages = [f"message M{i} {{ M{i + 1} next = 1; }}" for i in range(count - 1)]
        messages.append(f"message M{count - 1} {{ string id = 1; }}")

        module = generate_types(resolve_schema("\n".join(messages), "protobuf"), "Root")

        assert len(module.declarations) == count
        assert module.names()[0] == f"M{count - 1}"
        assert module.names()[-1] == "M0"
        assert all(d.recursive_group is None for d in module.declarations)


class TestBatch:
    """Tests for generate_batch."""

    def test_batch_continues_after_failure(self, temp_dir):
        """Test that one failing unit does not stop the others."""
        good = temp_dir / "good.sql"
        good.write_text("CREATE TABLE a (id INT PRIMARY KEY);")
        bad = temp_dir / "bad.sql"
        bad.write_text("CREATE TABLE b (id INT")

        result = generate_batch(
            [str(good), str(bad), (USERS_DDL, "Inline"), str(temp_dir / "missing.sql")],
            "sql",
        )

        assert isinstance(result, BatchResult)
        assert len(result.results) == 4
        assert not result.all_ok
        assert result.error_count == 2
        assert [r.ok for r in result.results] == [True, False, True, False]
        assert isinstance(result.results[1].error, ParseError)
        assert isinstance(result.results[3].error, ResolutionError)
        assert result.results[0].root_name == "Good"
        assert result.results[2].root_name == "Inline"
        assert [m.name for m in result.modules()] == ["Good", "Inline"]

    def test_batch_to_dict(self):
        """Test the batch summary."""
        result = generate_batch([USERS_DDL, "CREATE TABLE ("], "sql")
        data = result.to_dict()
        assert data["total"] == 2
        assert data["succeeded"] == 1
        assert data["failed"] == 1
        assert data["results"][1]["error"]["error"] == "ParseError"
        assert data["results"][1]["error"]["line"] == 1

    def test_batch_unknown_grammar(self):
        """Test an unknown grammar fails up front."""
        with pytest.raises(ValueError, match="not found"):
            generate_batch([USERS_DDL], "avro")
