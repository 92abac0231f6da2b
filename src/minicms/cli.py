"""CLI interface for minicms.

Command-line tool for serving and inspecting the page menu.
"""

import json
import logging
import sys
from pathlib import Path

import click

from minicms.config import Config
from minicms.core.access import Viewer
from minicms.core.loader import create_builder
from minicms.core.menu import MenuNode


@click.group()
def cli() -> None:
    """minicms - Page menus for the Mini CMS."""


@click.group()
def menu() -> None:
    """Menu inspection commands."""


cli.add_command(menu)


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover minicms.toml)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging, error details)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable config live reload (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
    live_reload: bool | None,
) -> None:
    """Start the menu server."""
    from minicms.server import run_server

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    if config.config_path is not None:
        click.echo(f"Configuration: {config.config_path}")
    else:
        click.echo("Configuration: defaults (no minicms.toml found)")
    click.echo(f"Pages: {len(config.pages)}")
    if config.live_reload.enabled and config.config_path is not None:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config, verbose=verbose)


@menu.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover minicms.toml)",
)
@click.option(
    "--lang",
    "language",
    default=None,
    help="Language to build the menu for (default: from config)",
)
@click.option(
    "--user",
    "username",
    default="guest",
    help="Viewer name",
)
@click.option(
    "--roles",
    default="",
    help="Comma separated role short names of the viewer",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the exported tree as JSON",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def show(
    config_path: Path | None,
    language: str | None,
    username: str,
    roles: str,
    as_json: bool,
    verbose: bool,
) -> None:
    """Print the menu as seen by a viewer."""
    _configure_logging(verbose)
    config = _load_config(config_path)
    viewer = Viewer.from_roles(username, roles.split(","))

    try:
        root = create_builder(config).build(
            viewer,
            language=language or config.menu.default_language,
        )
    except ValueError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    if as_json:
        items = [child.to_dict() for child in root.sorted_children()]
        click.echo(json.dumps({"items": items}, indent=2, ensure_ascii=False))
        return

    if not root.has_children():
        click.echo("Menu is empty.")
        return

    for child in root.sorted_children():
        _print_node(child, 0)


@menu.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover minicms.toml)",
)
@click.option(
    "--roles",
    default="",
    help="Comma separated role short names of the viewer",
)
def targets(config_path: Path | None, roles: str) -> None:
    """List the menu targets a page can be attached to."""
    config = _load_config(config_path)
    viewer = Viewer.from_roles("guest", roles.split(","))

    try:
        choices = create_builder(config).identifiable_menus(viewer)
    except ValueError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    width = max(len(identifier) for identifier in choices)
    for identifier, label in choices.items():
        click.echo(f"{identifier.ljust(width)}  {label}")


def _print_node(node: MenuNode, depth: int) -> None:
    """Print a node and its children as an indented outline."""
    line = f"{'  ' * depth}{node.label}"
    if node.identifier:
        line += f" [{node.identifier}]"
    if node.link:
        line += f" -> {node.link}"
    click.echo(line)
    for child in node.sorted_children():
        _print_node(child, depth + 1)
