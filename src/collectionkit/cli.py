"""CLI interface for collectionkit.

Command-line tool for building collections from data documents and
inspecting the resulting node structure.
"""

import json
import logging
from pathlib import Path

import click

from collectionkit.config import OUTPUT_FORMATS, Config
from collectionkit.core.builder import CollectionBuilder, CollectionProps
from collectionkit.core.collection import ListCollection
from collectionkit.core.context import CollectionContext
from collectionkit.core.errors import CollectionError
from collectionkit.core.traversal import get_item_count
from collectionkit.loader import load_document


@click.group()
def cli() -> None:
    """collectionkit - Normalized collections from declarative content."""


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover collectionkit.toml)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (overrides config, default: outline)",
)
@click.option(
    "--production/--no-production",
    default=None,
    help="Disable development diagnostics (overrides config)",
)
@click.option(
    "--suppress-text-warning",
    is_flag=True,
    help="Suppress the missing text value warning (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (show builder debug logs)",
)
def build(
    source: Path,
    config_path: Path | None,
    output_format: str | None,
    production: bool | None,
    suppress_text_warning: bool,
    verbose: bool,
) -> None:
    """Build a collection from a data document and print it."""
    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        production=production,
        suppress_text_value_warning=suppress_text_warning or None,
        output_format=output_format,
    )

    collection = _build_collection(source, config.to_context())

    if config.output.format == "json":
        nodes = [node.to_dict() for node in collection]
        click.echo(json.dumps(nodes, indent=config.output.indent or None))
        return

    for node in collection:
        pad = " " * (config.output.indent * node.level)
        label = node.text_value or (node.rendered if isinstance(node.rendered, str) else "")
        click.echo(f"{pad}{node.key} [{node.type}] {label}".rstrip())
    click.echo(f"{collection.size} nodes, {get_item_count(collection)} items")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover collectionkit.toml)",
)
def count(source: Path, config_path: Path | None) -> None:
    """Print the number of items in a data document."""
    _configure_logging(verbose=False)
    config = _load_config(config_path)
    collection = _build_collection(source, config.to_context())
    click.echo(str(get_item_count(collection)))


def _load_config(config_path: Path | None) -> Config:
    """Load configuration, converting errors to CLI errors."""
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e


def _build_collection(source: Path, context: CollectionContext) -> ListCollection:
    """Load a document and build its collection, converting errors to CLI errors."""
    try:
        props: CollectionProps = load_document(source)
        return ListCollection(CollectionBuilder().build(props, context))
    except CollectionError as e:
        raise click.ClickException(f"Invalid collection: {e}") from e
    except ValueError as e:
        raise click.ClickException(f"Invalid document {source}: {e}") from e


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
