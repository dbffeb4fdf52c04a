#!/usr/bin/env python3
"""
`points-migrate`: Alembic commands bound to the Points API schema and settings.

The migration scripts ship inside the package, so the commands work from an
installed wheel without a checkout. Pass `--config` (or set
`POINTS_ALEMBIC_INI`) to run against a different alembic.ini instead.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from alembic import command
from alembic.config import Config
from points_api import __version__
from points_api.config import get_database_url, settings
from points_api.database.connection import redact_database_url
from points_api.logging import configure_logging, get_logger

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"
# ConfigParser interpolation: each literal % is written as %%
REVISION_FILE_TEMPLATE = (
    "%%(year)d%%(month).2d%%(day).2d_%%(hour).2d%%(minute).2d%%(second).2d_%%(slug)s"
)


def build_alembic_config(
    config_file: str | None = None, database_url: str | None = None
) -> Config:
    """Build the Alembic config for one command.

    Without an ini file the packaged migrations directory is used. The
    database URL is always taken from the option or the application
    settings, never from the ini file.
    """
    config_file = config_file or settings.alembic_ini
    if config_file:
        ini_path = Path(config_file)
        if not ini_path.is_file():
            raise click.ClickException(f"Alembic config not found: {ini_path}")
        alembic_config = Config(str(ini_path))
    else:
        alembic_config = Config()
        alembic_config.set_main_option("script_location", str(MIGRATIONS_DIR))
        alembic_config.set_main_option("file_template", REVISION_FILE_TEMPLATE)

    url = database_url or get_database_url()
    alembic_config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return alembic_config


def run_alembic(
    ctx: click.Context, action: Callable[[Config], Any], event: str, **log_fields: Any
) -> None:
    """Run one Alembic command, turning failures into a non-zero exit."""
    alembic_config = build_alembic_config(**ctx.obj)
    database_url = alembic_config.get_main_option("sqlalchemy.url") or ""
    logger.info(event, database_url=redact_database_url(database_url), **log_fields)
    try:
        action(alembic_config)
    except Exception as e:
        logger.error("Migration command failed", command=ctx.info_name, error=str(e))
        raise click.ClickException(f"{ctx.info_name} failed: {e}") from e


@click.group()
@click.option(
    "-c",
    "--config",
    "config_file",
    default=None,
    type=click.Path(dir_okay=False),
    help="alembic.ini to use instead of the packaged migrations",
)
@click.option(
    "--database-url",
    default=None,
    help="Database to migrate (defaults to the configured one)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.version_option(version=__version__, prog_name="points-migrate")
@click.pass_context
def main(
    ctx: click.Context, config_file: str | None, database_url: str | None, log_level: str
) -> None:
    """Manage the daily_point and user_summary schema."""
    configure_logging(debug=(log_level == "debug"), level=log_level)
    ctx.obj = {"config_file": config_file, "database_url": database_url}


@main.command()
@click.argument("revision", default="head")
@click.pass_context
def upgrade(ctx: click.Context, revision: str) -> None:
    """Upgrade the schema to REVISION (default: head)."""
    run_alembic(
        ctx, lambda cfg: command.upgrade(cfg, revision), "Upgrading database", revision=revision
    )
    click.echo(f"Database upgraded to {revision}")


@main.command()
@click.argument("revision", default="-1")
@click.pass_context
def downgrade(ctx: click.Context, revision: str) -> None:
    """Downgrade the schema to REVISION (default: one step back)."""
    run_alembic(
        ctx,
        lambda cfg: command.downgrade(cfg, revision),
        "Downgrading database",
        revision=revision,
    )
    click.echo(f"Database downgraded to {revision}")


@main.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option(
    "--autogenerate/--no-autogenerate",
    default=True,
    help="Diff models against the database",
)
@click.pass_context
def revision(ctx: click.Context, message: str, autogenerate: bool) -> None:
    """Create a new migration script in the migrations directory."""
    run_alembic(
        ctx,
        lambda cfg: command.revision(cfg, message=message, autogenerate=autogenerate),
        "Creating migration",
        message=message,
        autogenerate=autogenerate,
    )


@main.command()
@click.pass_context
def current(ctx: click.Context) -> None:
    """Show the revision the database is at."""
    run_alembic(ctx, command.current, "Reading current revision")


@main.command()
@click.pass_context
def history(ctx: click.Context) -> None:
    """List migration scripts."""
    run_alembic(ctx, command.history, "Listing migration history")


if __name__ == "__main__":
    main()
