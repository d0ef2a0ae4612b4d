"""Render target declarations as text or JSON."""

import json

from schema_typegen.generator.base import RecordDecl, TargetModule, UnionDecl

INDENT = "    "


def _render_record(decl: RecordDecl, keyword: str, indent: str) -> list[str]:
    if not decl.fields:
        return [f"{indent}{keyword} {decl.name} = {{ }}"]

    lines = [f"{indent}{keyword} {decl.name} = {{"]
    for field in decl.fields:
        line = f"{indent}{INDENT}{field.name}: {field.type}"
        if field.description:
            line += f"  // {field.description}"
        lines.append(line)
    lines.append(f"{indent}}}")
    return lines


def _render_union(decl: UnionDecl, keyword: str, indent: str) -> list[str]:
    lines = [f"{indent}{keyword} {decl.name} ="]
    for case in decl.cases:
        if case.payload is not None:
            lines.append(f"{indent}{INDENT}| {case.name} of {case.payload}")
        else:
            lines.append(f"{indent}{INDENT}| {case.name}")
    return lines


def _render_module(module: TargetModule, depth: int) -> list[str]:
    indent = INDENT * depth
    lines = [f"{indent}module {module.name} ="]
    inner = indent + INDENT
    previous_group = None

    for decl in module.declarations:
        # Members of one recursive group are chained with "and".
        keyword = "and" if decl.recursive_group is not None and decl.recursive_group == previous_group else "type"
        previous_group = decl.recursive_group
        if isinstance(decl, RecordDecl):
            lines.extend(_render_record(decl, keyword, inner))
        else:
            lines.extend(_render_union(decl, keyword, inner))

    for child in module.modules:
        lines.extend(_render_module(child, depth + 1))
    return lines


def render_text(module: TargetModule) -> str:
    """Render a module tree as indented type declarations."""
    return "\n".join(_render_module(module, 0)) + "\n"


def render_json(module: TargetModule) -> str:
    """Render a module tree as JSON."""
    return json.dumps(module.model_dump(mode="json", exclude_none=True), indent=2)


RENDERERS = {
    "text": render_text,
    "json": render_json,
}


def render(module: TargetModule, output_format: str = "text") -> str:
    if output_format not in RENDERERS:
        available = ", ".join(RENDERERS)
        raise ValueError(f"Unknown output format '{output_format}'. Available: {available}")
    return RENDERERS[output_format](module)
