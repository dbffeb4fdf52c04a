"""
Argument and configuration validation for the Points API.

Resolver arguments are checked here before any database session is opened,
and the application configuration is checked once at startup.
"""

from __future__ import annotations

import math
from datetime import date
from typing import TYPE_CHECKING, Any

from .config import is_production, settings
from .errors import ValidationError
from .logging import get_logger

if TYPE_CHECKING:
    from .database.connection import Database

logger = get_logger(__name__)

# Balance fields must be non-negative; point fields only need to be finite
NON_NEGATIVE_FIELDS = frozenset(
    {"stake_usd", "debt_usd", "blend_lend", "blend_borrow", "yuzu_lend", "yuzu_borrow"}
)


def normalize_user_id(user_id: str | None) -> str:
    """Canonical form of a user identifier: stripped and lower-cased.

    Applied on every read and every write so that lookups are
    case-insensitive.
    """
    if user_id is None:
        raise ValidationError("user_id is required")
    normalized = user_id.strip().lower()
    if not normalized:
        raise ValidationError("user_id must not be empty")
    if len(normalized) > 255:
        raise ValidationError("user_id too long (max 255 characters)")
    return normalized


def validate_send_date(value: str | None, field: str = "send_date") -> str:
    """Require an ISO calendar date (YYYY-MM-DD) and return it unchanged."""
    if value is None:
        raise ValidationError(f"{field} is required")
    candidate = value.strip()
    try:
        parsed = date.fromisoformat(candidate)
    except ValueError:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format") from None
    # fromisoformat also accepts compact forms like 20240101
    if parsed.isoformat() != candidate:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format")
    return candidate


def validate_date_range(
    start_date: str | None, end_date: str | None
) -> tuple[str, str] | None:
    """Return the inclusive range to filter on, or None when it should not apply.

    Filtering only activates when both bounds are present; a lone bound is
    still format-checked but otherwise ignored.
    """
    start = validate_send_date(start_date, "startDate") if start_date is not None else None
    end = validate_send_date(end_date, "endDate") if end_date is not None else None
    if start is None or end is None:
        return None
    return start, end


def validate_amounts(values: dict[str, float]) -> dict[str, float]:
    """Check that every amount is finite, and balances are non-negative."""
    for field, value in values.items():
        if value is None or not math.isfinite(value):
            raise ValidationError(f"{field} must be a finite number")
        if field in NON_NEGATIVE_FIELDS and value < 0:
            raise ValidationError(f"{field} must not be negative")
    return values


def validate_limit(limit: int) -> int:
    maximum = settings.max_top_users_limit
    if limit < 1 or limit > maximum:
        raise ValidationError(f"limit must be between 1 and {maximum}")
    return limit


async def validate_database_connection(database: Database) -> dict[str, Any]:
    """
    Validate that the database is accessible and responsive.

    Returns a dictionary with validation results and connection details.
    """
    results: dict[str, Any] = {
        "valid": True,
        "warnings": [],
        "errors": [],
        "connection_info": None,
    }

    success, error_message = await database.check_connection()

    if success:
        results["connection_info"] = {
            "status": "connected",
            "message": "Database connection successful",
        }
        logger.info("Database connection validation successful")
    else:
        results["valid"] = False
        results["errors"].append(error_message)
        logger.error("Database connection validation failed", error=error_message)

    return results


def validate_settings() -> dict[str, Any]:
    """Validate static settings that would otherwise fail at request time."""
    results: dict[str, Any] = {"valid": True, "warnings": [], "errors": []}

    if settings.max_top_users_limit < 1:
        results["valid"] = False
        results["errors"].append("max_top_users_limit must be at least 1")

    if is_production():
        if settings.debug:
            results["warnings"].append("Debug mode is enabled in production")
        if settings.graphiql:
            results["warnings"].append("GraphiQL IDE is exposed in production")
        if "*" in settings.cors_origins:
            results["warnings"].append("CORS allows any origin in production")

    return results


async def validate_startup_configuration(database: Database) -> dict[str, Any]:
    """Run every startup check and combine the results."""
    database_results = await validate_database_connection(database)
    settings_results = validate_settings()

    return {
        "overall_valid": database_results["valid"] and settings_results["valid"],
        "database": database_results,
        "settings": settings_results,
    }


def get_startup_recommendations(validation_results: dict[str, Any]) -> list[str]:
    """Turn validation results into human-readable recommendations."""
    recommendations: list[str] = []

    if not validation_results["database"]["valid"]:
        recommendations.append(
            "Check POINTS_DATABASE_URL (or POINTS_DB_*) and run `points-migrate upgrade`"
        )

    recommendations.extend(validation_results["settings"]["warnings"])
    return recommendations


__all__ = [
    "ValidationError",
    "normalize_user_id",
    "validate_send_date",
    "validate_date_range",
    "validate_amounts",
    "validate_limit",
    "validate_startup_configuration",
    "get_startup_recommendations",
]
