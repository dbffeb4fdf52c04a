"""
GraphQL request context helpers
"""

from typing import TYPE_CHECKING, Any

import strawberry
from fastapi import Request

from ..errors import StorageError
from ..logging import get_logger

if TYPE_CHECKING:
    from ..database.connection import Database

logger = get_logger(__name__)


def build_context(request: Request, database: "Database") -> dict[str, Any]:
    """Context passed to every resolver of one request."""
    return {
        "request": request,
        "db": database,
    }


def get_database(info: strawberry.Info) -> "Database":
    """Return the data-access handle injected into the request context."""
    database = info.context.get("db")
    if database is None:
        logger.error("Database not available in GraphQL context")
        raise StorageError()
    return database
