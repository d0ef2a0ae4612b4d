"""Provider registry for managing the available grammars."""

from pathlib import Path

from schema_typegen.config import ProviderConfig
from schema_typegen.ir.base import SchemaGrammar
from schema_typegen.providers.base import TypeProvider


class ProviderRegistry:
    """Registry of type providers, one per grammar.

    Provides lookup by grammar name and factory methods for creating
    configured provider instances.
    """

    def __init__(self):
        self._providers: dict[SchemaGrammar, type[TypeProvider]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register the built-in providers."""
        from schema_typegen.providers.protobuf import ProtobufProvider
        from schema_typegen.providers.sql import DDLProvider
        from schema_typegen.providers.toml_config import TomlProvider

        self.register(ProtobufProvider)
        self.register(DDLProvider)
        self.register(TomlProvider)

    def register(self, provider_class: type[TypeProvider]) -> None:
        """Register a provider class under its grammar."""
        self._providers[provider_class.grammar] = provider_class

    def get(self, grammar: SchemaGrammar | str) -> type[TypeProvider] | None:
        """Get a provider class by grammar.

        Args:
            grammar: The grammar (string or enum)

        Returns:
            The provider class or None if not found
        """
        if isinstance(grammar, str):
            try:
                grammar = SchemaGrammar(grammar.lower())
            except ValueError:
                return None

        return self._providers.get(grammar)

    def create(self, grammar: SchemaGrammar | str, config: ProviderConfig | None = None) -> TypeProvider:
        """Create a configured provider instance.

        Raises:
            ValueError: if no provider is registered for the grammar
        """
        provider_class = self.get(grammar)
        if provider_class is None:
            name = grammar.value if isinstance(grammar, SchemaGrammar) else grammar
            available = ", ".join(g.value for g in self.list_grammars())
            raise ValueError(f"Provider '{name}' not found. Available: {available}")
        return provider_class(config)

    def detect(self, path: Path | str) -> SchemaGrammar | None:
        """Guess the grammar from a file extension."""
        suffix = Path(path).suffix.lower()
        for grammar, provider_class in self._providers.items():
            if suffix in provider_class.file_extensions:
                return grammar
        return None

    def list_grammars(self) -> list[SchemaGrammar]:
        """List all registered grammars."""
        return list(self._providers.keys())

    def list_providers(self) -> list[type[TypeProvider]]:
        return list(self._providers.values())

    def unregister(self, grammar: SchemaGrammar) -> bool:
        """Remove a provider from the registry.

        Returns:
            True if removed, False if not found
        """
        if grammar in self._providers:
            del self._providers[grammar]
            return True
        return False

    def __contains__(self, grammar: SchemaGrammar | str) -> bool:
        return self.get(grammar) is not None


def get_provider(grammar: SchemaGrammar | str, config: ProviderConfig | None = None) -> TypeProvider:
    """Create a provider from a fresh registry."""
    return ProviderRegistry().create(grammar, config)
