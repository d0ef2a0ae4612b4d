"""Main CLI entry point for schema-typegen.

Generates record and union types from Protobuf, SQL DDL and TOML schemas.
"""

from pathlib import Path
import logging
import sys

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from schema_typegen import __version__
from schema_typegen.config import ConfigLoader, MapRepresentation, ProviderConfig, SqlDialect
from schema_typegen.generator.render import RENDERERS, render
from schema_typegen.ir.base import RecordDef, SchemaGrammar
from schema_typegen.ir.naming import NamingStrategy
from schema_typegen.pipeline import generate_batch
from schema_typegen.providers.registry import ProviderRegistry

console = Console()
err_console = Console(stderr=True)

CLI_ERRORS = (ValueError, OSError, yaml.YAMLError)

GRAMMARS = [g.value for g in SchemaGrammar]


def _setup_logging(verbose: bool) -> None:
    """Send package logs to stderr through rich."""
    logger = logging.getLogger("schema_typegen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=err_console, show_path=verbose, markup=False))
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _load_config(config_path: str | None, dialect: str | None) -> ProviderConfig:
    config = ConfigLoader().load_file(config_path) if config_path else ProviderConfig()
    if dialect:
        config = config.model_copy(update={"dialect": SqlDialect(dialect)})
    return config


def _pick_grammar(registry: ProviderRegistry, grammar: str | None, source: str) -> str:
    if grammar:
        return grammar
    detected = registry.detect(source.removeprefix("file://"))
    if detected is None:
        raise ValueError(f"Cannot detect the grammar of '{source[:60]}'; pass --grammar")
    return detected.value


def _fail(ctx: click.Context, error: Exception) -> None:
    err_console.print(f"[red]Error: {escape(str(error))}[/red]", soft_wrap=True)
    if ctx.obj.get("verbose", False):
        import traceback
        err_console.print(traceback.format_exc())
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="typegen")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """schema-typegen - Generate types from Protobuf, SQL DDL and TOML schemas.

    Each schema is parsed, normalized into a canonical IR and projected into
    records, discriminated unions and modules.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _setup_logging(verbose)


@cli.command()
@click.argument("source")
@click.option("--grammar", "-g", type=click.Choice(GRAMMARS), help="Schema grammar (detected from the file extension if omitted)")
@click.option("--root", "-r", "root_name", help="Root type/module name (defaults to the file name)")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Provider config YAML")
@click.option("--dialect", type=click.Choice([d.value for d in SqlDialect]), help="SQL dialect (overrides config)")
@click.option("--format", "-f", "output_format", type=click.Choice(list(RENDERERS)), default="text", help="Output format")
@click.option("--output", "-o", type=click.Path(), help="Output file (stdout if not specified)")
@click.pass_context
def generate(
    ctx: click.Context,
    source: str,
    grammar: str | None,
    root_name: str | None,
    config_path: str | None,
    dialect: str | None,
    output_format: str,
    output: str | None,
) -> None:
    """Generate types from a schema.

    SOURCE is a schema file, a file:// URL or inline schema text.
    """
    try:
        registry = ProviderRegistry()
        config = _load_config(config_path, dialect)
        provider = registry.create(_pick_grammar(registry, grammar, source), config)

        schema = provider.resolve_schema(source)
        module = provider.generate_types(schema, root_name)
        text = render(module, output_format)

        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text)
            count = sum(1 for _ in module.walk())
            err_console.print(f"[green]Wrote {count} types to {output}[/green]", soft_wrap=True)
        else:
            click.echo(text, nl=False)

    except CLI_ERRORS as e:
        _fail(ctx, e)


@cli.command()
@click.argument("source")
@click.option("--grammar", "-g", type=click.Choice(GRAMMARS), help="Schema grammar (detected from the file extension if omitted)")
@click.option("--root", "-r", "root_name", help="Root type/module name (defaults to the file name)")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Provider config YAML")
@click.option("--dialect", type=click.Choice([d.value for d in SqlDialect]), help="SQL dialect (overrides config)")
@click.pass_context
def inspect(
    ctx: click.Context,
    source: str,
    grammar: str | None,
    root_name: str | None,
    config_path: str | None,
    dialect: str | None,
) -> None:
    """Show the canonical IR of a schema.

    SOURCE is a schema file, a file:// URL or inline schema text.
    """
    try:
        registry = ProviderRegistry()
        config = _load_config(config_path, dialect)
        provider = registry.create(_pick_grammar(registry, grammar, source), config)

        schema = provider.resolve_schema(source)
        canonical = provider.normalize(schema, root_name)

        console.print(Panel.fit(
            f"[cyan]Grammar:[/cyan] {canonical.grammar.value}\n"
            f"[cyan]Source:[/cyan] {schema.source.origin}\n"
            f"[cyan]Module:[/cyan] {'.'.join(canonical.module.path)}\n"
            f"[cyan]Types:[/cyan] {len(canonical.module.types)}",
            title="Canonical Schema",
        ))

        table = Table(title="Types")
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Kind", no_wrap=True)
        table.add_column("Origin", style="dim", no_wrap=True)
        table.add_column("Members")

        for type_def in canonical.module.types:
            if isinstance(type_def, RecordDef):
                members = "\n".join(f"{f.name}: {f.type}" for f in type_def.fields)
            else:
                members = "\n".join(
                    f"{v.name} ({v.payload})" if v.payload is not None else v.name
                    for v in type_def.variants
                )
            table.add_row(type_def.name, type_def.kind, type_def.origin.value, members or "-")

        console.print(table)

    except CLI_ERRORS as e:
        _fail(ctx, e)


@cli.command()
@click.argument("sources", nargs=-1, required=True)
@click.option("--grammar", "-g", type=click.Choice(GRAMMARS), required=True, help="Schema grammar shared by all sources")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Provider config YAML")
@click.option("--output-dir", "-o", type=click.Path(), help="Write one rendered file per source into this directory")
@click.option("--format", "-f", "output_format", type=click.Choice(list(RENDERERS)), default="text", help="Output format")
@click.pass_context
def batch(
    ctx: click.Context,
    sources: tuple[str, ...],
    grammar: str,
    config_path: str | None,
    output_dir: str | None,
    output_format: str,
) -> None:
    """Generate types for several schemas, continuing past failures.

    SOURCES are schema files or file:// URLs.
    """
    try:
        config = _load_config(config_path, None)
    except CLI_ERRORS as e:
        _fail(ctx, e)
        return

    result = generate_batch(sources, grammar, config)

    table = Table(title="Batch Results")
    table.add_column("Source", style="cyan")
    table.add_column("Root")
    table.add_column("Types", justify="right")
    table.add_column("Status")

    suffix = ".json" if output_format == "json" else ".txt"
    taken: set[str] = set()
    write_failures = 0

    for unit in result.results:
        if unit.ok and unit.module is not None:
            count = str(sum(1 for _ in unit.module.walk()))
            status = "[green]OK[/green]"
            if output_dir:
                path = Path(output_dir) / f"{_output_stem(unit.root_name or 'Root', taken)}{suffix}"
                try:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_text(render(unit.module, output_format))
                except CLI_ERRORS as e:
                    write_failures += 1
                    status = f"[red]Cannot write {escape(str(path))}: {escape(str(e))}[/red]"
        else:
            count = "-"
            status = f"[red]{escape(str(unit.error))}[/red]"
        table.add_row(unit.source, unit.root_name or "-", count, status)

    console.print(table)
    failed = result.error_count + write_failures
    console.print(f"{len(result.results) - failed} succeeded, {failed} failed")

    if failed:
        sys.exit(1)


@cli.command()
@click.pass_context
def list_providers(ctx: click.Context) -> None:
    """List available schema providers."""
    registry = ProviderRegistry()

    table = Table(title="Available Providers")
    table.add_column("Grammar", style="cyan", no_wrap=True)
    table.add_column("Extensions", no_wrap=True)
    table.add_column("Description")

    for provider_class in registry.list_providers():
        table.add_row(
            provider_class.name,
            ", ".join(provider_class.file_extensions),
            provider_class.description,
        )

    console.print(table)


@cli.command()
@click.option("--output", "-o", type=click.Path(), default="typegen.yaml", help="Output file path")
@click.option("--dialect", type=click.Choice([d.value for d in SqlDialect]), default=SqlDialect.GENERIC.value, help="SQL dialect")
@click.option("--naming", type=click.Choice([n.value for n in NamingStrategy]), default=NamingStrategy.PASCAL.value, help="Type naming strategy")
@click.option("--maps", type=click.Choice([m.value for m in MapRepresentation]), default=MapRepresentation.NATIVE.value, help="Map representation")
@click.pass_context
def init_config(ctx: click.Context, output: str, dialect: str, naming: str, maps: str) -> None:
    """Initialize a provider config file.

    Creates a template config YAML file.
    """
    config = ProviderConfig(
        dialect=SqlDialect(dialect),
        naming=NamingStrategy(naming),
        map_representation=MapRepresentation(maps),
    )

    try:
        ConfigLoader().save_file(config, output)
    except CLI_ERRORS as e:
        _fail(ctx, e)

    console.print(f"[green]Created config: {output}[/green]")


def _output_stem(root_name: str, taken: set[str]) -> str:
    """Pick a file stem not used earlier in the batch; repeats get 2, 3, ..."""
    stem = root_name
    n = 2
    while stem in taken:
        stem = f"{root_name}{n}"
        n += 1
    taken.add(stem)
    return stem


if __name__ == "__main__":
    cli()
