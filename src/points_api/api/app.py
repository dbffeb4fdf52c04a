"""
Main FastAPI application for the Points API
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import is_production, settings
from ..database import Database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..validation import get_startup_recommendations, validate_startup_configuration

# Configure logging before creating logger
configure_logging(debug=settings.debug)
logger = get_logger(__name__)


class StartupValidationError(Exception):
    """Raised when the application must not start."""

    pass


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Points API...")

    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database()
    database: Database = app.state.database

    try:
        validation_results = await validate_startup_configuration(database)

        if not validation_results["overall_valid"]:
            logger.error(
                "Application configuration validation failed - some features may not work properly",
                database_errors=validation_results["database"]["errors"],
                settings_errors=validation_results["settings"]["errors"],
            )
            if is_production():
                raise StartupValidationError(
                    "Critical configuration validation failed in production"
                )

        recommendations = get_startup_recommendations(validation_results)
        if recommendations:
            logger.info("Configuration recommendations", recommendations=recommendations)

        yield
    finally:
        logger.info("Shutting down Points API...")
        if owns_database:
            await database.dispose()
            app.state.database = None


def create_app(database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        database: Pre-built data-access handle. When omitted, one is created
            from settings during application startup.
    """
    app = FastAPI(
        title="Points API",
        description="GraphQL API for daily point entries and user point summaries",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.database = database

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Liveness check endpoint."""
        return {"status": "healthy", "version": __version__}

    # GraphQL endpoint (allow disabling for tests)
    if not os.getenv("POINTS_DISABLE_GRAPHQL"):
        try:
            from ..graphql.schema import create_graphql_router, validate_schema

            logger.info("Validating GraphQL schema...")
            validate_schema()

            app.include_router(create_graphql_router(), prefix="")
            logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")
        except Exception as e:  # pragma: no cover
            logger.error("Failed to initialize GraphQL endpoint", error=str(e))
            raise

    return app


# Create the main application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "points_api.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
