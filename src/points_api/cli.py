#!/usr/bin/env python3
"""
Main CLI entry point for the Points API server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from points_api import __version__
from points_api.config import settings
from points_api.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="points-api")
def cli() -> None:
    """Points API CLI - run the server and check the database."""
    pass


@cli.command()
@click.option(
    "--host",
    default=settings.api_host,
    show_default=True,
    help="Host to bind to",
)
@click.option(
    "--port",
    default=settings.api_port,
    show_default=True,
    type=int,
    help="Port to bind to",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--workers",
    default=1,
    type=int,
    help="Number of worker processes (default: 1)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(
    host: str,
    port: int,
    reload: bool,
    workers: int,
    log_level: str,
) -> None:
    """Start the Points API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting Points API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Propagate to the app module, which reads settings at import time
    if log_level == "debug":
        os.environ["POINTS_DEBUG"] = "true"
        os.environ["POINTS_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("POINTS_DEBUG", "false")
        os.environ.setdefault("POINTS_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "points_api.api.app:app",
            host=host,
            port=port,
            reload=reload,
            workers=(workers if not reload else 1),  # reload doesn't work with multiple workers
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("check-db")
@click.option(
    "--database-url",
    default=None,
    help="Database URL to check (defaults to the configured one)",
)
def check_db(database_url: str | None) -> None:
    """Check that the configured database is reachable."""
    from points_api.database import Database
    from points_api.database.connection import redact_database_url

    configure_logging()

    async def do_check() -> tuple[bool, str | None, str]:
        database = Database(database_url, pool_size=1, max_overflow=0)
        try:
            success, error_message = await database.check_connection()
        finally:
            await database.dispose()
        return success, error_message, database.database_url

    success, error_message, url = asyncio.run(do_check())
    if success:
        click.echo(f"✓ Database reachable: {redact_database_url(url)}")
        return

    click.echo(f"✗ Database check failed for {redact_database_url(url)}", err=True)
    click.echo(error_message, err=True)
    sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
