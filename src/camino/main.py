"""CLI entry point for Camino.

This module defines the Click-based command-line interface:

    camino render TEMPLATE [-p name=value]... [-f properties.yaml]...
    camino check TEMPLATE
    camino functions
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

import click

from camino import __version__
from camino.cli.output import (
    ExitCode,
    format_config_error,
    format_error,
    format_success,
    format_template_error,
)
from camino.config import CaminoConfig, load_config
from camino.exceptions import CaminoError, ConfigError
from camino.logging import bind_context, configure_logging, get_logger
from camino.properties import (
    Property,
    load_properties,
    merge_properties,
    parse_assignment,
)
from camino.render import Template, default_registry

logger = get_logger(__name__)

_VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@click.group()
@click.version_option(version=__version__, prog_name="camino")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file (overrides ./camino.yaml).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Only log errors.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Path | None,
    verbose: int,
    quiet: bool,
) -> None:
    """Camino - render templates with embedded <%= expressions %>."""
    ctx.ensure_object(dict)

    try:
        config = load_config(config_file)
    except ConfigError as e:
        click.echo(format_config_error(e), err=True)
        ctx.exit(ExitCode.FAILURE)

    ctx.obj["config"] = config
    configure_logging(level=_log_level(config.verbosity, verbose, quiet))


def _log_level(verbosity: str, verbose: int, quiet: bool) -> int:
    """Pick the log level: -q wins over -v, and either wins over the config."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG if verbose > 1 else logging.INFO
    return _VERBOSITY_LEVELS.get(verbosity, logging.WARNING)


def _read_template(ctx: click.Context, template: TextIO, name: str) -> str:
    try:
        with template:
            return template.read()
    except UnicodeDecodeError as e:
        click.echo(format_error(f"Cannot decode {name}: {e}"), err=True)
        ctx.exit(ExitCode.FAILURE)


def _collect_properties(
    property_files: tuple[Path, ...], assignments: tuple[str, ...]
) -> tuple[Property, ...]:
    from_files = [load_properties(path) for path in property_files]
    from_args = [parse_assignment(item) for item in assignments]
    return merge_properties(*from_files, from_args)


@cli.command()
@click.argument("template", type=click.File("r", encoding="utf-8"))
@click.option(
    "-p",
    "--property",
    "assignments",
    multiple=True,
    metavar="NAME=VALUE",
    help="Bind a property (repeatable; overrides property files).",
)
@click.option(
    "-f",
    "--properties-file",
    "property_files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML property file (repeatable; later files win).",
)
@click.option(
    "-o",
    "--output",
    type=click.File("w"),
    default="-",
    help="Write rendered text here instead of stdout.",
)
@click.pass_context
def render(
    ctx: click.Context,
    template: TextIO,
    assignments: tuple[str, ...],
    property_files: tuple[Path, ...],
    output: TextIO,
) -> None:
    """Render TEMPLATE ('-' for stdin) and write the result."""
    config: CaminoConfig = ctx.obj["config"]
    name = getattr(template, "name", "<stdin>")
    bind_context(template=name)
    source = _read_template(ctx, template, name)

    try:
        properties = _collect_properties(property_files, assignments)
        text = Template(source, name=name).render(
            properties,
            default_registry(),
            max_call_depth=config.render.max_call_depth,
        )
    except CaminoError as e:
        logger.error("render_failed", template=name, error=e.message)
        click.echo(format_template_error(e, source), err=True)
        ctx.exit(ExitCode.FAILURE)

    output.write(text)


@cli.command()
@click.argument("template", type=click.File("r", encoding="utf-8"))
@click.pass_context
def check(ctx: click.Context, template: TextIO) -> None:
    """Parse TEMPLATE and report syntax errors without rendering."""
    name = getattr(template, "name", "<stdin>")
    source = _read_template(ctx, template, name)
    try:
        parsed = Template(source, name=name)
    except CaminoError as e:
        click.echo(format_template_error(e, source), err=True)
        ctx.exit(ExitCode.FAILURE)
    click.echo(
        format_success(f"{name} is valid ({len(parsed.block.children)} nodes)")
    )


@cli.command()
def functions() -> None:
    """List the built-in template functions."""
    registry = default_registry()
    width = max(len(name) for name in registry.names())
    for function in sorted(registry, key=lambda f: f.name):
        click.echo(
            f"{function.name:<{width}}  ({function.arity})  {function.description}"
        )


if __name__ == "__main__":
    cli()
