"""Tests for the type projector and renderers.

Tests cover:
- Scalar and composite type expressions
- Dependency-first ordering and recursive groups
- Native and entry-list map projection
- Module hierarchy from module paths
- Naming strategy and collisions
- Unresolved references
- Text and JSON rendering
"""

import json

import pytest

from schema_typegen.config import MapRepresentation, ProviderConfig
from schema_typegen.errors import GenerationError
from schema_typegen.frontends.protobuf import parse_proto
from schema_typegen.generator import (
    ListOf,
    MapOf,
    OptionOf,
    Primitive,
    RecordDecl,
    TypeProjector,
    TypeRef,
    UnionDecl,
    project,
    render,
    render_json,
    render_text,
)
from schema_typegen.generator.projector import dependency_components
from schema_typegen.ir import (
    CanonicalSchema,
    FieldDef,
    NamingStrategy,
    RecordDef,
    ScalarKind,
    SchemaGrammar,
    SchemaModule,
    UnionDef,
    VariantDef,
    list_of,
    make_optional,
    reference,
    scalar,
)
from schema_typegen.normalizer import normalize_proto


def make_schema(*types, path=("App",)) -> CanonicalSchema:
    """Build a canonical schema from type definitions."""
    module = SchemaModule(path=list(path))
    for type_def in types:
        module.add(type_def)
    root_name = path[-1] if path else "Root"
    return CanonicalSchema(module=module, grammar=SchemaGrammar.PROTOBUF, root_name=root_name)


def record(type_name, **fields) -> RecordDef:
    return RecordDef(name=type_name, fields=[FieldDef(name=k, type=v) for k, v in fields.items()])


def ref(name):
    return reference(name, ["App"])


# =============================================================================
# Dependency Component Tests
# =============================================================================

class TestDependencyComponents:
    """Tests for the dependency component helper."""

    def test_dependencies_come_first(self):
        """Test that a component follows everything it references."""
        components = dependency_components(
            ["a", "b", "c"],
            {"a": ["b"], "b": ["c"], "c": []},
        )
        assert components == [["c"], ["b"], ["a"]]

    def test_cycle_is_one_component(self):
        """Test that a cycle forms a single component in declaration order."""
        components = dependency_components(
            ["a", "b", "c"],
            {"a": ["b"], "b": ["a", "c"], "c": []},
        )
        assert components == [["c"], ["a", "b"]]

    def test_ties_follow_declaration_order(self):
        """Test that ready components are taken in declaration order."""
        components = dependency_components(
            ["a", "b", "c"],
            {"a": ["c"], "b": [], "c": []},
        )
        assert components == [["b"], ["c"], ["a"]]

    def test_long_chain(self):
        """Test a reference chain far deeper than the interpreter recursion limit."""
        nodes = [f"n{i}" for i in range(5000)]
        edges = {nodes[i]: [nodes[i + 1]] for i in range(len(nodes) - 1)}
        components = dependency_components(nodes, edges)
        assert len(components) == 5000
        assert components[0] == ["n4999"]
        assert components[-1] == ["n0"]


# =============================================================================
# Projection Tests
# =============================================================================

class TestProjection:
    """Tests for TypeProjector."""

    def test_scalar_names(self):
        """Test target names for each canonical scalar."""
        schema = make_schema(record(
            "S",
            a=scalar(ScalarKind.INT32),
            b=scalar(ScalarKind.INT64),
            c=scalar(ScalarKind.UINT32),
            d=scalar(ScalarKind.UINT64),
            e=scalar(ScalarKind.FLOAT),
            f=scalar(ScalarKind.BOOL),
            g=scalar(ScalarKind.STRING),
            h=scalar(ScalarKind.BYTES),
        ))
        decl = project(schema).get("S")
        assert [str(f.type) for f in decl.fields] == [
            "int", "int64", "uint", "uint64", "float", "bool", "string", "bytes",
        ]

    def test_composite_expressions(self):
        """Test list, option and reference expressions."""
        schema = make_schema(
            record("Tag", name=scalar(ScalarKind.STRING)),
            record(
                "Post",
                tags=list_of(ref("Tag")),
                subtitle=make_optional(scalar(ScalarKind.STRING)),
                matrix=list_of(list_of(scalar(ScalarKind.INT32))),
            ),
        )
        post = project(schema).get("Post")
        assert post.get_field("tags").type == ListOf(element=TypeRef(module_path=("App",), name="Tag"))
        assert post.get_field("subtitle").type == OptionOf(inner=Primitive(name="string"))
        assert str(post.get_field("tags").type) == "Tag list"
        assert str(post.get_field("matrix").type) == "int list list"

    def test_dependency_order(self):
        """Test that referenced declarations are emitted first."""
        schema = make_schema(
            record("Order", customer=ref("Customer"), lines=list_of(ref("Line"))),
            record("Line", product=ref("Product")),
            record("Customer", name=scalar(ScalarKind.STRING)),
            record("Product", sku=scalar(ScalarKind.STRING)),
        )
        module = project(schema)
        assert module.names() == ["Customer", "Product", "Line", "Order"]
        assert all(d.recursive_group is None for d in module.declarations)

    def test_independent_types_keep_declaration_order(self):
        """Test ordering of unrelated types."""
        schema = make_schema(
            record("B", x=scalar(ScalarKind.BOOL)),
            record("A", x=scalar(ScalarKind.BOOL)),
            record("C", x=scalar(ScalarKind.BOOL)),
        )
        assert project(schema).names() == ["B", "A", "C"]

    def test_self_reference_is_recursive(self):
        """Test a self-referencing record forms a recursive group."""
        schema = make_schema(record("Node", value=scalar(ScalarKind.INT32), children=list_of(ref("Node"))))
        node = project(schema).get("Node")
        assert node.recursive_group == 1
        assert node.get_field("children").indirect
        assert not node.get_field("value").indirect

    def test_mutual_recursion(self):
        """Test mutually recursive records share a group and use indirect references."""
        schema = make_schema(
            record("Leaf", v=scalar(ScalarKind.INT32)),
            record("Tree", root=make_optional(ref("Branch"))),
            record("Branch", leaf=ref("Leaf"), tree=ref("Tree")),
        )
        module = project(schema)
        assert module.names() == ["Leaf", "Tree", "Branch"]

        tree = module.get("Tree")
        branch = module.get("Branch")
        assert tree.recursive_group == branch.recursive_group == 1
        assert module.get("Leaf").recursive_group is None
        assert tree.get_field("root").indirect
        assert branch.get_field("tree").indirect
        assert not branch.get_field("leaf").indirect

    def test_enum_variants_are_pascal_cased(self):
        """Test enum cases are case-normalized and keep their numbering."""
        schema = make_schema(UnionDef(
            name="Status",
            variants=[
                VariantDef(name="UNKNOWN", discriminant=0, source_value=0),
                VariantDef(name="ACTIVE", discriminant=1, source_value=1),
                VariantDef(name="ON_HOLD", discriminant=2, source_value=7),
            ],
        ))
        status = project(schema).get("Status")
        assert isinstance(status, UnionDecl)
        assert status.case_names() == ["Unknown", "Active", "OnHold"]
        assert [c.tag for c in status.cases] == [0, 1, 2]
        assert status.cases[2].source_value == 7
        assert all(c.payload is None for c in status.cases)

    def test_union_payloads(self):
        """Test payload-carrying unions."""
        schema = make_schema(
            record("Email", address=scalar(ScalarKind.STRING)),
            UnionDef(
                name="Contact",
                variants=[
                    VariantDef(name="email", discriminant=0, payload=ref("Email")),
                    VariantDef(name="phone", discriminant=1, payload=scalar(ScalarKind.STRING)),
                ],
            ),
        )
        contact = project(schema).get("Contact")
        assert contact.case_names() == ["Email", "Phone"]
        assert contact.cases[0].payload == TypeRef(module_path=("App",), name="Email")

    def test_preserve_naming(self):
        """Test the preserve naming strategy."""
        schema = make_schema(record("user_account", id=scalar(ScalarKind.INT32)))
        module = TypeProjector(ProviderConfig(naming=NamingStrategy.PRESERVE)).project(schema)
        assert module.names() == ["user_account"]

    def test_pascal_naming_updates_references(self):
        """Test that references follow renamed declarations."""
        schema = make_schema(
            record("user_role", name=scalar(ScalarKind.STRING)),
            record("users", role=ref("user_role")),
        )
        module = project(schema)
        assert module.names() == ["UserRole", "Users"]
        assert module.get("Users").get_field("role").type.name == "UserRole"

    def test_module_hierarchy(self):
        """Test nested modules from a dotted module path."""
        schema = make_schema(record("User", id=scalar(ScalarKind.STRING)), path=("acme", "users", "v1"))
        root = project(schema)
        assert root.name == "acme"
        assert root.declarations == []
        inner = root.innermost()
        assert inner.name == "v1"
        assert inner.names() == ["User"]
        assert root.submodule("users").submodule("v1") is inner
        assert [(path, d.name) for path, d in root.walk()] == [(("acme", "users", "v1"), "User")]

    def test_root_name_used_without_module_path(self):
        """Test the root name becomes the module name."""
        schema = make_schema(record("A"), path=())
        module = TypeProjector().project(schema, "Fallback")
        assert module.name == "Fallback"

    def test_empty_record(self):
        """Test records without fields."""
        module = project(make_schema(record("Empty")))
        assert module.get("Empty").fields == []


# =============================================================================
# Map Projection Tests
# =============================================================================

class TestMapProjection:
    """Tests for native and entry-list maps."""

    PROTO = "message User { map<string, int64> scores = 1; string name = 2; }"

    def test_native_maps(self):
        """Test maps project to Map<K, V> and entry records are dropped."""
        schema = normalize_proto(parse_proto(self.PROTO), root_name="App")
        module = project(schema)
        assert module.names() == ["User"]
        field = module.get("User").get_field("scores")
        assert field.type == MapOf(key=Primitive(name="string"), value=Primitive(name="int64"))
        assert str(field.type) == "Map<string, int64>"

    def test_entry_list_maps(self):
        """Test maps project to a list of key/value records."""
        schema = normalize_proto(parse_proto(self.PROTO), root_name="App")
        config = ProviderConfig(map_representation=MapRepresentation.ENTRY_LIST)
        module = project(schema, config=config)

        assert module.names() == ["UserScoresEntry", "User"]
        entry = module.get("UserScoresEntry")
        assert [(f.name, str(f.type)) for f in entry.fields] == [("key", "string"), ("value", "int64")]
        assert str(module.get("User").get_field("scores").type) == "UserScoresEntry list"


# =============================================================================
# Error Tests
# =============================================================================

class TestProjectionErrors:
    """Tests for GenerationError cases."""

    def test_unresolved_reference(self):
        """Test that a missing reference is fatal."""
        schema = make_schema(record("Order", customer=ref("Customer")))
        with pytest.raises(GenerationError, match="Unresolved reference 'App.Customer' in type 'Order'") as exc_info:
            project(schema)
        assert exc_info.value.type_name == "Order"

    def test_reference_to_other_module(self):
        """Test a reference into a module that is not being projected."""
        schema = make_schema(
            record("A"),
            record("B", a=reference("A", ["Other"])),
        )
        with pytest.raises(GenerationError, match="Unresolved reference 'Other.A'"):
            project(schema)

    def test_unresolved_union_payload(self):
        """Test that payload references are checked too."""
        schema = make_schema(UnionDef(
            name="U",
            variants=[VariantDef(name="x", discriminant=0, payload=ref("Nope"))],
        ))
        with pytest.raises(GenerationError, match="Unresolved reference"):
            project(schema)

    def test_target_name_collision(self):
        """Test two types that map to the same target name."""
        schema = make_schema(record("user_role"), record("UserRole"))
        with pytest.raises(GenerationError, match="both map to 'UserRole'"):
            project(schema)

    def test_variant_name_collision(self):
        """Test two variants that map to the same case name."""
        schema = make_schema(UnionDef(
            name="Mode",
            variants=[
                VariantDef(name="ON_OFF", discriminant=0),
                VariantDef(name="on_off", discriminant=1),
            ],
        ))
        with pytest.raises(GenerationError, match="both map to 'OnOff'"):
            project(schema)


# =============================================================================
# Rendering Tests
# =============================================================================

class TestRendering:
    """Tests for text and JSON rendering."""

    def test_render_text(self):
        """Test the text rendering of records and unions."""
        schema = make_schema(
            UnionDef(name="Status", variants=[
                VariantDef(name="UNKNOWN", discriminant=0),
                VariantDef(name="ACTIVE", discriminant=1),
            ]),
            record("User", name=scalar(ScalarKind.STRING), status=ref("Status"), tags=list_of(scalar(ScalarKind.STRING))),
        )
        text = render_text(project(schema))
        assert text == (
            "module App =\n"
            "    type Status =\n"
            "        | Unknown\n"
            "        | Active\n"
            "    type User = {\n"
            "        name: string\n"
            "        status: Status\n"
            "        tags: string list\n"
            "    }\n"
        )

    def test_render_recursive_group_uses_and(self):
        """Test members of one recursive group are chained with 'and'."""
        schema = make_schema(
            record("A", b=make_optional(ref("B"))),
            record("B", a=make_optional(ref("A"))),
        )
        lines = render_text(project(schema)).splitlines()
        assert "    type A = {" in lines
        assert "    and B = {" in lines

    def test_render_nested_modules(self):
        """Test indentation of nested modules."""
        schema = make_schema(record("X"), path=("a", "b"))
        assert render_text(project(schema)) == "module a =\n    module b =\n        type X = { }\n"

    def test_render_union_payload_and_description(self):
        """Test union payloads and field descriptions."""
        schema = make_schema(
            RecordDef(name="R", fields=[FieldDef(name="old", type=scalar(ScalarKind.INT32), description="deprecated")]),
            UnionDef(name="U", variants=[VariantDef(name="r", discriminant=0, payload=ref("R"))]),
        )
        text = render_text(project(schema))
        assert "        old: int  // deprecated\n" in text
        assert "        | R of R\n" in text

    def test_render_json(self):
        """Test the JSON rendering."""
        schema = make_schema(record("User", id=scalar(ScalarKind.STRING), nick=make_optional(scalar(ScalarKind.STRING))))
        data = json.loads(render_json(project(schema)))
        assert data["name"] == "App"
        user = data["declarations"][0]
        assert user["kind"] == "record"
        assert user["fields"][0] == {"name": "id", "type": {"kind": "primitive", "name": "string"}}
        assert user["fields"][1]["type"]["kind"] == "option"

    def test_render_unknown_format(self):
        """Test an unknown output format."""
        with pytest.raises(ValueError, match="Unknown output format 'xml'"):
            render(project(make_schema(record("A"))), "xml")

    def test_declarations_are_plain_models(self):
        """Test the projector output is detached from the IR."""
        schema = make_schema(record("A", x=scalar(ScalarKind.BOOL)))
        module = project(schema)
        schema.module.get("A").fields.clear()
        assert isinstance(module.get("A"), RecordDecl)
        assert len(module.get("A").fields) == 1
