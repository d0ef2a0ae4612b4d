"""Type projector: canonical IR to target declarations.

Declarations are emitted dependency-first. The reference graph is split into
strongly connected components with networkx; each component is emitted after every
component it references, with ties broken by declaration order. Components
with more than one member, or a member that references itself, form a
recursive group and the references inside them are marked indirect.
"""

import logging

import networkx as nx

from schema_typegen.config import MapRepresentation, ProviderConfig
from schema_typegen.errors import GenerationError
from schema_typegen.generator.base import (
    CaseDecl,
    FieldDecl,
    ListOf,
    MapOf,
    OptionOf,
    Primitive,
    RecordDecl,
    TargetModule,
    TypeExpr,
    TypeRef,
    UnionDecl,
)
from schema_typegen.ir.base import (
    CanonicalSchema,
    FieldType,
    ListType,
    MapType,
    OptionalType,
    RecordDef,
    ReferenceType,
    ScalarKind,
    ScalarType,
    TypeOrigin,
    UnionDef,
)

logger = logging.getLogger(__name__)


SCALAR_NAMES: dict[ScalarKind, str] = {
    ScalarKind.INT32: "int",
    ScalarKind.INT64: "int64",
    ScalarKind.UINT32: "uint",
    ScalarKind.UINT64: "uint64",
    ScalarKind.FLOAT: "float",
    ScalarKind.BOOL: "bool",
    ScalarKind.STRING: "string",
    ScalarKind.BYTES: "bytes",
}


def dependency_components(nodes: list[str], edges: dict[str, list[str]]) -> list[list[str]]:
    """Group nodes into strongly connected components, dependencies first.

    A component comes after every component it references. Ties go to the
    component whose earliest member comes first in ``nodes``, and members keep
    that order too.
    """
    position = {name: i for i, name in enumerate(nodes)}
    graph = nx.DiGraph()
    graph.add_nodes_from(nodes)
    graph.add_edges_from((node, successor) for node in nodes for successor in edges.get(node, []))

    condensed = nx.condensation(graph)
    members = {
        component: sorted(data["members"], key=position.__getitem__)
        for component, data in condensed.nodes(data=True)
    }
    ordered = nx.lexicographical_topological_sort(
        condensed.reverse(copy=False),
        key=lambda component: position[members[component][0]],
    )
    return [members[component] for component in ordered]


class TypeProjector:
    """Projects a canonical schema into a target module tree."""

    def __init__(self, config: ProviderConfig | None = None):
        self.config = config or ProviderConfig()

    @property
    def native_maps(self) -> bool:
        return self.config.map_representation == MapRepresentation.NATIVE

    def project(self, schema: CanonicalSchema, root_name: str | None = None) -> TargetModule:
        """Project a schema.

        Args:
            schema: Canonical schema to project
            root_name: Module name used when the schema module has no path

        Returns:
            Root of the target module hierarchy

        Raises:
            GenerationError: on an unresolved reference or a naming collision
        """
        module = schema.module
        self.module_path = tuple(module.path) or (root_name or schema.root_name,)
        emitted = [t for t in module.types if self._is_emitted(t)]
        self.target_names = self._assign_target_names(emitted)
        self.types = {t.name: t for t in emitted}

        order = list(self.types)
        edges = {name: self._dependencies(self.types[name]) for name in order}

        self.group_of: dict[str, int] = {}
        components = dependency_components(order, edges)
        group_id = 0
        for component in components:
            recursive = len(component) > 1 or component[0] in edges[component[0]]
            if recursive:
                group_id += 1
                for name in component:
                    self.group_of[name] = group_id
                logger.debug("Recursive group %d: %s", group_id, ", ".join(component))

        declarations = [self._declare(self.types[name]) for component in components for name in component]

        root = TargetModule(name=self.module_path[0])
        current = root
        for part in self.module_path[1:]:
            child = TargetModule(name=part)
            current.modules.append(child)
            current = child
        current.declarations = declarations

        logger.debug("Projected %d declarations into %s", len(declarations), ".".join(self.module_path))
        return root

    def _is_emitted(self, type_def: RecordDef | UnionDef) -> bool:
        return not (self.native_maps and type_def.origin == TypeOrigin.MAP_ENTRY)

    def _assign_target_names(self, type_defs: list[RecordDef | UnionDef]) -> dict[str, str]:
        naming = self.config.naming
        names: dict[str, str] = {}
        owners: dict[str, str] = {}

        for type_def in type_defs:
            target = naming.apply(type_def.name)
            if target in owners:
                raise GenerationError(
                    f"Types '{owners[target]}' and '{type_def.name}' both map to '{target}'",
                    type_name=target,
                )
            owners[target] = type_def.name
            names[type_def.name] = target

            if isinstance(type_def, UnionDef):
                case_owners: dict[str, str] = {}
                for variant in type_def.variants:
                    case_name = naming.apply(variant.name)
                    if case_name in case_owners:
                        raise GenerationError(
                            f"Variants '{case_owners[case_name]}' and '{variant.name}' of "
                            f"'{type_def.name}' both map to '{case_name}'",
                            type_name=type_def.name,
                        )
                    case_owners[case_name] = variant.name

        return names

    def _resolve(self, ref: ReferenceType, owner: str) -> str:
        module_ok = not ref.module_path or tuple(ref.module_path) == self.module_path
        if module_ok and ref.name in self.types:
            return ref.name
        raise GenerationError(
            f"Unresolved reference '{ref.qualified_name}' in type '{owner}'",
            type_name=owner,
        )

    def _type_dependencies(self, field_type: FieldType, owner: str) -> list[str]:
        if isinstance(field_type, ReferenceType):
            return [self._resolve(field_type, owner)]
        if isinstance(field_type, ListType):
            return self._type_dependencies(field_type.element, owner)
        if isinstance(field_type, OptionalType):
            return self._type_dependencies(field_type.inner, owner)
        if isinstance(field_type, MapType):
            if not self.native_maps and field_type.entry is not None:
                return [self._resolve(field_type.entry, owner)]
            return self._type_dependencies(field_type.key, owner) + self._type_dependencies(field_type.value, owner)
        return []

    def _dependencies(self, type_def: RecordDef | UnionDef) -> list[str]:
        if isinstance(type_def, RecordDef):
            field_types = [f.type for f in type_def.fields]
        else:
            field_types = [v.payload for v in type_def.variants if v.payload is not None]

        dependencies: list[str] = []
        for field_type in field_types:
            for name in self._type_dependencies(field_type, type_def.name):
                if name not in dependencies:
                    dependencies.append(name)
        return dependencies

    def _expr(self, field_type: FieldType, owner: str) -> TypeExpr:
        if isinstance(field_type, ScalarType):
            return Primitive(name=SCALAR_NAMES[field_type.scalar])
        if isinstance(field_type, ReferenceType):
            return self._ref(field_type, owner)
        if isinstance(field_type, ListType):
            return ListOf(element=self._expr(field_type.element, owner))
        if isinstance(field_type, OptionalType):
            return OptionOf(inner=self._expr(field_type.inner, owner))
        if isinstance(field_type, MapType):
            if not self.native_maps and field_type.entry is not None:
                return ListOf(element=self._ref(field_type.entry, owner))
            return MapOf(key=self._expr(field_type.key, owner), value=self._expr(field_type.value, owner))
        raise GenerationError(f"Unsupported field type {field_type!r}", type_name=owner)

    def _ref(self, ref: ReferenceType, owner: str) -> TypeRef:
        target = self._resolve(ref, owner)
        group = self.group_of.get(owner)
        return TypeRef(
            module_path=self.module_path,
            name=self.target_names[target],
            indirect=group is not None and self.group_of.get(target) == group,
        )

    def _declare(self, type_def: RecordDef | UnionDef) -> RecordDecl | UnionDecl:
        name = self.target_names[type_def.name]
        group = self.group_of.get(type_def.name)

        if isinstance(type_def, RecordDef):
            return RecordDecl(
                name=name,
                fields=[
                    FieldDecl(
                        name=field.name,
                        type=self._expr(field.type, type_def.name),
                        tag=field.tag,
                        description=field.description,
                    )
                    for field in type_def.fields
                ],
                recursive_group=group,
                source_name=type_def.source_name,
            )

        return UnionDecl(
            name=name,
            cases=[
                CaseDecl(
                    name=self.config.naming.apply(variant.name),
                    tag=variant.discriminant,
                    source_value=variant.source_value,
                    payload=self._expr(variant.payload, type_def.name) if variant.payload is not None else None,
                )
                for variant in type_def.variants
            ],
            recursive_group=group,
            source_name=type_def.source_name,
        )


def project(
    schema: CanonicalSchema,
    root_name: str | None = None,
    config: ProviderConfig | None = None,
) -> TargetModule:
    """Convenience function to project a canonical schema."""
    return TypeProjector(config).project(schema, root_name)
