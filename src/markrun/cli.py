"""Command-line interface for markrun."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from .config import DEFAULT_CONFIG_FILENAME, MarkrunConfig, load_config
from .exceptions import ConfigError, MarkrunError
from .logger import get_logger, scopes_enabled, setup_logger
from .parser import MarkupParser
from .placeholders import (
    CORE_NAMESPACE,
    VARIABLES,
    ContextSet,
    PlaceholderContext,
    PlaceholderEngine,
    get_registry,
    register_builtins,
)
from .render import to_ansi, to_json, to_plain

logger = get_logger()

app = typer.Typer(
    name="markrun",
    help="Compile tagged markup (colors, emphasis, links, gradients, placeholders) into styled runs",
    add_completion=False,
)


class OutputFormat(str, Enum):
    """Rendering of the parsed runs."""

    PLAIN = "plain"
    ANSI = "ansi"
    JSON = "json"


class _CliState:
    """Options set by the global callback."""

    def __init__(self) -> None:
        self.config_path: Path | None = None


_state = _CliState()


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=scope changes, 2=tag dispatch, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help=f"Path to config file (default: {DEFAULT_CONFIG_FILENAME} if present)",
        ),
    ] = None,
) -> None:
    """Global options for markrun commands."""
    setup_logger(verbose)
    _state.config_path = config


@app.command()
def render(  # noqa: PLR0913 - CLI command needs multiple options
    text: Annotated[str | None, typer.Argument(help="Markup to render")] = None,
    *,
    file: Annotated[
        Path | None, typer.Option("--file", "-f", help="Read markup from a file ('-' for stdin)")
    ] = None,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", help="Output format")
    ] = OutputFormat.ANSI,
    no_placeholders: Annotated[
        bool, typer.Option("--no-placeholders", help="Leave <ph:...> tags as literal text")
    ] = False,
    variables: Annotated[
        list[str] | None,
        typer.Option("--var", help="NAME=VALUE available to <ph:var|NAME> (repeatable)"),
    ] = None,
    context_tag: Annotated[
        str | None,
        typer.Option("--context", help="Context tag for placeholders written without @context"),
    ] = None,
    plugin_module: Annotated[
        str | None,
        typer.Option("--plugin-module", help="Python module path registering placeholders"),
    ] = None,
    plugin_file: Annotated[
        Path | None,
        typer.Option("--plugin-file", help="Python file path registering placeholders"),
    ] = None,
) -> None:
    """Parse markup and print the styled result."""
    if text is not None and file is not None:
        typer.echo("Error: Cannot specify both TEXT and --file", err=True)
        raise typer.Exit(1)

    if plugin_module and plugin_file:
        typer.echo("Error: Cannot specify both --plugin-module and --plugin-file", err=True)
        raise typer.Exit(1)

    try:
        source = _read_source(text, file)
        config = _load_config()
        if plugin_module or plugin_file:
            _load_plugin(plugin_module, plugin_file)

        registry = get_registry()
        if f"{CORE_NAMESPACE}:var" not in registry:
            register_builtins(registry)

        variable_map = _parse_variables(variables or [])
        contexts = ContextSet.of_default(
            PlaceholderContext.builder().put(VARIABLES, variable_map).build()
        )
        engine = PlaceholderEngine(registry, config.default_namespace)

        options = config.parser_options()
        if scopes_enabled():
            aliases = ", ".join(sorted(options["aliases"].snapshot()))
            logger.scopes(
                f"Namespace {engine.default_namespace}, context {config.default_context}, "
                f"aliases: {aliases}"
            )

        parser = MarkupParser(engine, contexts, **options)
        runs = parser.parse(
            source,
            default_context=context_tag,
            placeholders=False if no_placeholders else None,
        )
    except (MarkrunError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    if output_format == OutputFormat.JSON:
        typer.echo(to_json(runs))
    elif output_format == OutputFormat.PLAIN:
        typer.echo(to_plain(runs))
    else:
        typer.echo(to_ansi(runs))


@app.command()
def colors() -> None:
    """List the color aliases available to <color:...> tags."""
    try:
        table = _load_config().build_alias_table()
    except (MarkrunError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    for alias, value in sorted(table.snapshot().items()):
        typer.echo(f"{alias:<12} {value}")


def _load_config() -> MarkrunConfig:
    """Load the config given by --config, else ./markrun.yaml, else defaults."""
    config_path = _state.config_path
    if config_path is not None:
        return load_config(config_path)

    default_path = Path(DEFAULT_CONFIG_FILENAME)
    if default_path.exists():
        return load_config(default_path)
    return MarkrunConfig()


def _read_source(text: str | None, file: Path | None) -> str:
    if file is None:
        return text or ""
    if str(file) == "-":
        return sys.stdin.read()
    if not file.exists():
        raise FileNotFoundError(f"File not found: {file}")
    return file.read_text(encoding="utf-8")


def _parse_variables(entries: list[str]) -> dict[str, str]:
    """Split NAME=VALUE entries."""
    result: dict[str, str] = {}
    for entry in entries:
        name, sep, value = entry.partition("=")
        if not sep or not name.strip():
            raise ConfigError(f"Invalid --var {entry!r}: expected NAME=VALUE")
        result[name.strip()] = value
    return result


def _load_plugin(plugin_module: str | None, plugin_file: Path | None) -> None:
    """Import a plugin so its @placeholder registrations run."""
    if plugin_module:
        importlib.import_module(plugin_module)
    elif plugin_file:
        plugin_path = plugin_file.resolve()
        spec = importlib.util.spec_from_file_location("markrun_plugin", plugin_path)
        if spec is None or spec.loader is None:
            raise MarkrunError(f"Could not load plugin file: {plugin_file}")
        plugin = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(plugin)
    logger.scopes(f"Loaded plugin {plugin_module or plugin_file}")


def main() -> None:
    """Entry point for the markrun console script."""
    app()


if __name__ == "__main__":
    main()
