"""Provider configuration and its YAML loader.

A ``ProviderConfig`` carries the few options that change how a schema is
parsed and projected. None of them is required; the defaults reproduce the
generic behavior.
"""

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from schema_typegen.ir.base import ScalarKind
from schema_typegen.ir.naming import NamingStrategy


class SqlDialect(str, Enum):
    """SQL flavors with dialect-specific type names."""

    GENERIC = "generic"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class MapRepresentation(str, Enum):
    """How key/value maps are projected into the target."""

    NATIVE = "native"
    ENTRY_LIST = "entry_list"


class ProviderConfig(BaseModel):
    """Options recognized by the providers."""

    model_config = ConfigDict(extra="forbid")

    dialect: SqlDialect = Field(default=SqlDialect.GENERIC, description="SQL flavor for DDL input")
    naming: NamingStrategy = Field(
        default=NamingStrategy.PASCAL,
        description="Case convention for generated type and variant names",
    )
    map_representation: MapRepresentation = Field(
        default=MapRepresentation.NATIVE,
        description="Project maps natively or as lists of key/value records",
    )
    strict_arrays: bool = Field(
        default=False,
        description="Reject mixed-type arrays instead of typing them by their first element",
    )
    unknown_type_fallback: ScalarKind | None = Field(
        default=None,
        description="Scalar used for unrecognized SQL types instead of a type reference",
    )


class ConfigLoader:
    """Loads provider configuration from YAML files.

    The options may sit at the top level of the document or under a
    ``typegen`` key.
    """

    SECTION = "typegen"

    def load_file(self, path: Path | str) -> ProviderConfig:
        """Load a configuration from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            Loaded ProviderConfig
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return self._parse_config(data)

    def load_from_string(self, content: str) -> ProviderConfig:
        """Load a configuration from a YAML string."""
        data = yaml.safe_load(content)
        return self._parse_config(data)

    def _parse_config(self, data: Any) -> ProviderConfig:
        if data is None:
            return ProviderConfig()
        if not isinstance(data, dict):
            raise ValueError("Config must be a YAML mapping")
        if self.SECTION in data:
            data = data[self.SECTION] or {}
        return ProviderConfig.model_validate(data)

    def save_file(self, config: ProviderConfig, path: Path | str) -> None:
        """Save a configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(
                {self.SECTION: config.model_dump(mode="json")},
                f,
                default_flow_style=False,
                sort_keys=False,
            )


def load_config(path: Path | str) -> ProviderConfig:
    """Convenience function to load a configuration file."""
    return ConfigLoader().load_file(path)
