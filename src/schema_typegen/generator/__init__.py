"""Type projection into the target type system."""

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
from schema_typegen.generator.projector import TypeProjector, project
from schema_typegen.generator.render import render, render_json, render_text

__all__ = [
    "CaseDecl",
    "FieldDecl",
    "ListOf",
    "MapOf",
    "OptionOf",
    "Primitive",
    "RecordDecl",
    "TargetModule",
    "TypeExpr",
    "TypeRef",
    "UnionDecl",
    "TypeProjector",
    "project",
    "render",
    "render_json",
    "render_text",
]
