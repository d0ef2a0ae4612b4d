"""Module-level entry points.

``resolve_schema`` and ``generate_types`` pick the provider for a grammar and
run one schema unit through it. ``generate_batch`` runs many units and keeps
going past units that fail.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from schema_typegen.config import ProviderConfig
from schema_typegen.errors import TypegenError
from schema_typegen.generator.base import TargetModule
from schema_typegen.ir.base import SchemaGrammar
from schema_typegen.providers.base import ParsedSchema
from schema_typegen.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def resolve_schema(
    source: str | Path,
    grammar: SchemaGrammar | str,
    config: ProviderConfig | None = None,
) -> ParsedSchema:
    """Resolve and parse one schema unit with the provider for ``grammar``."""
    return ProviderRegistry().create(grammar, config).resolve_schema(source)


def generate_types(
    schema: ParsedSchema,
    root_name: str | None = None,
    config: ProviderConfig | None = None,
) -> TargetModule:
    """Generate target declarations for a parsed schema."""
    return ProviderRegistry().create(schema.grammar, config).generate_types(schema, root_name)


@dataclass
class UnitResult:
    """Outcome of one schema unit in a batch."""

    source: str
    root_name: str | None = None
    module: TargetModule | None = None
    error: TypegenError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"source": self.source, "root_name": self.root_name, "ok": self.ok}
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


@dataclass
class BatchResult:
    """Result of a batch generation run."""

    results: list[UnitResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[UnitResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[UnitResult]:
        return [r for r in self.results if not r.ok]

    @property
    def all_ok(self) -> bool:
        return not self.failed

    @property
    def error_count(self) -> int:
        return len(self.failed)

    def modules(self) -> list[TargetModule]:
        return [r.module for r in self.results if r.module is not None]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": len(self.results),
            "succeeded": len(self.succeeded),
            "failed": self.error_count,
            "results": [r.to_dict() for r in self.results],
        }


SchemaUnit = str | Path | tuple[str | Path, str]


def generate_batch(
    units: Iterable[SchemaUnit],
    grammar: SchemaGrammar | str,
    config: ProviderConfig | None = None,
) -> BatchResult:
    """Generate types for several independent schema units.

    Args:
        units: Inputs, each either a source or a ``(source, root_name)`` pair
        grammar: Grammar shared by all units
        config: Provider options

    Returns:
        BatchResult with one entry per unit, in input order
    """
    provider = ProviderRegistry().create(grammar, config)
    batch = BatchResult()

    for unit in units:
        source, root_name = unit if isinstance(unit, tuple) else (unit, None)
        result = UnitResult(source=str(source), root_name=root_name)
        try:
            schema = provider.resolve_schema(source)
            result.root_name = root_name or schema.default_root_name()
            result.module = provider.generate_types(schema, result.root_name)
        except TypegenError as e:
            logger.warning("Schema unit %s failed: %s", result.source[:80], e)
            result.error = e
        batch.results.append(result)

    logger.info("Batch finished: %d succeeded, %d failed", len(batch.succeeded), batch.error_count)
    return batch
