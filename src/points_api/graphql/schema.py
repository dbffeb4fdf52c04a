"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import GraphQLError
from graphql import validate_schema as gql_validate_schema
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter
from strawberry.schema.config import StrawberryConfig

from ..config import settings
from ..errors import PointsAPIError
from ..logging import get_logger
from .context import build_context
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)

MASKED_ERROR_MESSAGE = "Unexpected error."


def should_mask_error(error: GraphQLError) -> bool:
    """Hide messages of unexpected exceptions raised inside resolvers.

    GraphQL-level errors (syntax, unknown fields, bad argument types) have
    no original error and are always shown.
    """
    original = error.original_error
    if original is None:
        return False
    return not isinstance(original, PointsAPIError)


# Field and argument names are part of the public contract (snake_case
# object fields, camelCase query names), so they are spelled out explicitly.
schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    config=StrawberryConfig(auto_camel_case=False),
    extensions=[
        lambda: MaskErrors(
            should_mask_error=should_mask_error, error_message=MASKED_ERROR_MESSAGE
        ),
    ],
)


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    Catches unresolved type references early, so the server fails fast
    rather than erroring at request time.

    Raises:
        Exception: If the schema is invalid or has unresolved types
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        # Check that introspection query works (catches most resolution issues)
        from graphql import get_introspection_query, graphql_sync

        result = graphql_sync(graphql_schema, get_introspection_query())

        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI."""

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        return build_context(request, request.app.state.database)

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if settings.graphiql else None,
        context_getter=get_context,
    )
