"""Target type-system declarations.

The projector produces these: records, discriminated unions and nested
modules. Type expressions print in postfix style (``string list``,
``int option``, ``Map<string, int>``).
"""

from typing import Annotated, Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _TypeExprModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Primitive(_TypeExprModel):
    kind: Literal["primitive"] = "primitive"
    name: str

    def __str__(self) -> str:
        return self.name


class TypeRef(_TypeExprModel):
    """Reference to another declaration.

    ``indirect`` is set when the reference closes a cycle between mutually
    recursive declarations.
    """

    kind: Literal["ref"] = "ref"
    module_path: tuple[str, ...] = ()
    name: str
    indirect: bool = False

    @property
    def qualified_name(self) -> str:
        return ".".join((*self.module_path, self.name))

    def __str__(self) -> str:
        return self.name


class ListOf(_TypeExprModel):
    kind: Literal["list"] = "list"
    element: "TypeExpr"

    def __str__(self) -> str:
        return f"{_wrap(self.element)} list"


class OptionOf(_TypeExprModel):
    kind: Literal["option"] = "option"
    inner: "TypeExpr"

    def __str__(self) -> str:
        return f"{_wrap(self.inner)} option"


class MapOf(_TypeExprModel):
    kind: Literal["map"] = "map"
    key: "TypeExpr"
    value: "TypeExpr"

    def __str__(self) -> str:
        return f"Map<{self.key}, {self.value}>"


TypeExpr = Annotated[
    Union[Primitive, TypeRef, ListOf, OptionOf, MapOf],
    Field(discriminator="kind"),
]

ListOf.model_rebuild()
OptionOf.model_rebuild()
MapOf.model_rebuild()


def _wrap(expr: "TypeExpr") -> str:
    return f"({expr})" if isinstance(expr, MapOf) else str(expr)


def iter_type_refs(expr: TypeExpr) -> Iterator[TypeRef]:
    if isinstance(expr, TypeRef):
        yield expr
    elif isinstance(expr, ListOf):
        yield from iter_type_refs(expr.element)
    elif isinstance(expr, OptionOf):
        yield from iter_type_refs(expr.inner)
    elif isinstance(expr, MapOf):
        yield from iter_type_refs(expr.key)
        yield from iter_type_refs(expr.value)


class FieldDecl(BaseModel):
    name: str
    type: TypeExpr
    tag: int | None = None
    description: str | None = None

    @property
    def indirect(self) -> bool:
        return any(ref.indirect for ref in iter_type_refs(self.type))


class RecordDecl(BaseModel):
    kind: Literal["record"] = "record"
    name: str
    fields: list[FieldDecl] = Field(default_factory=list)
    recursive_group: int | None = None
    source_name: str | None = None

    def get_field(self, name: str) -> FieldDecl | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None


class CaseDecl(BaseModel):
    name: str
    tag: int
    source_value: int | str | None = None
    payload: TypeExpr | None = None


class UnionDecl(BaseModel):
    kind: Literal["union"] = "union"
    name: str
    cases: list[CaseDecl] = Field(default_factory=list)
    recursive_group: int | None = None
    source_name: str | None = None

    def case_names(self) -> list[str]:
        return [c.name for c in self.cases]


Declaration = Annotated[Union[RecordDecl, UnionDecl], Field(discriminator="kind")]


class TargetModule(BaseModel):
    """A module of declarations, possibly containing sub-modules."""

    name: str
    declarations: list[Declaration] = Field(default_factory=list)
    modules: list["TargetModule"] = Field(default_factory=list)

    def get(self, name: str) -> RecordDecl | UnionDecl | None:
        for declaration in self.declarations:
            if declaration.name == name:
                return declaration
        return None

    def names(self) -> list[str]:
        return [d.name for d in self.declarations]

    def submodule(self, name: str) -> "TargetModule | None":
        for module in self.modules:
            if module.name == name:
                return module
        return None

    def walk(self, prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], RecordDecl | UnionDecl]]:
        """Yield ``(module_path, declaration)`` for this module and every sub-module."""
        path = (*prefix, self.name)
        for declaration in self.declarations:
            yield path, declaration
        for module in self.modules:
            yield from module.walk(path)

    def innermost(self) -> "TargetModule":
        """Follow single-child nesting down to the module holding declarations."""
        module = self
        while not module.declarations and len(module.modules) == 1:
            module = module.modules[0]
        return module


TargetModule.model_rebuild()
