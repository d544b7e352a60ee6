"""Command-line interface for collectiondb.

Collections are read from a JSON file mapping collection names to their
definitions.
"""

import asyncio
import importlib
import json
from pathlib import Path
from typing import Any, NoReturn

import click

from collectiondb.core.config import get_settings
from collectiondb.core.logging import configure_logging, get_logger
from collectiondb.domain.entities.collection import Collection
from collectiondb.domain.exceptions import ConfigurationError


def load_collections(path: str) -> dict[str, Collection]:
    """Read and validate collection definitions from a JSON file."""
    from collectiondb.domain.services import CollectionValidator

    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return CollectionValidator.parse_collections(raw)


def load_seed(target: str) -> Any:
    """Import a seed procedure given as ``module:function``."""
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise click.BadParameter("Seed must be given as module:function", param_hint="--seed")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attribute)
    except AttributeError:
        raise click.BadParameter(
            f"Module '{module_name}' has no attribute '{attribute}'", param_hint="--seed"
        ) from None


@click.group()
@click.version_option(version="0.1.0", prog_name="collectiondb")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides COLLECTIONDB_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """collectiondb - compile collection definitions to SQLite tables."""
    settings = get_settings()
    if log_level is not None:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    ctx.obj = settings


@cli.command()
@click.argument("collections_file", type=click.Path(exists=True, dir_okay=False))
def ddl(collections_file: str) -> None:
    """Print the setup statements for COLLECTIONS_FILE."""
    from collectiondb.infrastructure.persistence import DDLGenerator

    try:
        statements = DDLGenerator.setup_statements(load_collections(collections_file))
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    for statement in statements:
        click.echo(f"{statement};")


@cli.command()
@click.argument("collections_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--seed", "seed_target", default=None, help="Seed procedure as module:function")
@click.option(
    "--mode",
    type=click.Choice(["dev", "build"]),
    default=None,
    help="Mode passed to the seed procedure (overrides config)",
)
@click.option("--database-url", default=None, help="Database URL (overrides config)")
@click.pass_obj
def setup(
    settings: Any,
    collections_file: str,
    seed_target: str | None,
    mode: str | None,
    database_url: str | None,
) -> None:
    """Drop, recreate and seed the tables defined in COLLECTIONS_FILE."""
    from collectiondb.infrastructure.persistence import (
        create_local_database_client,
        setup_db_tables,
    )

    logger = get_logger(__name__)

    try:
        collections = load_collections(collections_file)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    seed = load_seed(seed_target) if seed_target else None
    url = database_url or settings.database_url
    seed_mode = mode or settings.seed_mode
    if settings.is_production and seed_mode == "dev":
        click.echo("Error: refusing a dev setup in production; use --mode build", err=True)
        raise SystemExit(1)

    async def run() -> None:
        db = create_local_database_client(collections, url, seeding=True, echo=settings.db_echo)
        try:
            await setup_db_tables(db, collections, mode=seed_mode, seed=seed)
        finally:
            await db.dispose()

    try:
        asyncio.run(run())
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    logger.info("Setup complete", collection_count=len(collections), mode=seed_mode)
    click.echo(f"Set up {len(collections)} collection(s).")


@cli.command()
@click.pass_obj
def info(settings: Any) -> None:
    """Display collectiondb configuration."""
    click.echo(f"""
collectiondb v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Seed Mode:    {settings.seed_mode}

Database:
  URL:          {settings.database_url}
  Echo:         {settings.db_echo}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
