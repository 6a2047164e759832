"""persistkit CLI entry point."""

import asyncio
import json
import logging
from pathlib import Path

import click

from persistkit.entity import Repository
from persistkit.errors import PersistkitError
from persistkit.metadata import MetadataLoader


def _load(path: Path) -> MetadataLoader:
    loader = MetadataLoader(path)
    try:
        loader.load_all()
    except PersistkitError as e:
        click.echo(click.style(f"Invalid metadata: {e}", fg="red"), err=True)
        raise SystemExit(1)
    return loader


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log queries.")
def cli(verbose: bool):
    """persistkit: declarative persistence CLI."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def describe(path: Path):
    """Describe the entities defined in PATH (a YAML file or directory)."""
    loader = _load(path)
    entities = loader.list_entities()
    if not entities:
        click.echo("No entities found.")
        return

    for name in entities:
        conf = loader.get_entity(name)
        click.echo(click.style(name, bold=True) + f" (table: {conf.table})")
        click.echo(f"  primary key: {conf.primary_key}")
        click.echo(f"  identifiers: {', '.join(conf.identifiers)}")
        click.echo(f"  columns:     {', '.join(conf.columns)}")
        click.echo("  queries:")
        for query in conf.queries:
            click.echo(
                f"    {query.name} "
                f"(before: {len(query.hooks.before)}, after: {len(query.hooks.after)})"
            )


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.argument("entity")
@click.argument("key")
@click.argument("value")
@click.option(
    "--database-url",
    default=None,
    envvar="DATABASE_URL",
    help="Database URL (defaults to the environment configuration).",
)
def fetch(path: Path, entity: str, key: str, value: str, database_url: str | None):
    """Fetch ENTITY whose identifier KEY equals VALUE."""
    loader = _load(path)
    conf = loader.get_entity(entity)
    if conf is None:
        click.echo(f"Error: unknown entity '{entity}'", err=True)
        raise SystemExit(1)

    async def _fetch():
        conf.setup(database_url)
        try:
            return await Repository(conf).fetch(key, value)
        finally:
            await conf.cleanup()

    try:
        row = asyncio.run(_fetch())
    except Exception as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if row is None:
        click.echo("Not found")
        raise SystemExit(1)
    click.echo(json.dumps(row, indent=2, default=str))
