from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from ...dbmodels import USER_SUMMARY_AMOUNT_FIELDS, UserSummaries
from ...errors import ValidationError
from ...logging import get_logger
from ...validation import normalize_user_id, validate_amounts, validate_limit
from ..context import get_database
from ..ordering import order_clause, parse_leaderboard_field, parse_sort_direction
from .daily_point import format_timestamp

if TYPE_CHECKING:
    from ..types.user_summary import PointSummary, UserSummary

logger = get_logger(__name__)


def to_user_summary(row: UserSummaries, rank: int | None = None) -> UserSummary:
    """Convert a SQLAlchemy row to the GraphQL type."""
    from ..types.user_summary import UserSummary as UserSummaryType

    return UserSummaryType(
        id=row.id,
        user_id=row.user_id,
        blend_lend=row.blend_lend,
        blend_borrow=row.blend_borrow,
        yuzu_lend=row.yuzu_lend,
        yuzu_borrow=row.yuzu_borrow,
        blend_point=row.blend_point,
        yuzu_point=row.yuzu_point,
        last_time=format_timestamp(row.last_time),
        rank=rank,
    )


# Query resolvers
async def resolve_user_summary(info: strawberry.Info, user_id: str) -> UserSummary | None:
    """Resolve one user's totals; identifiers match case-insensitively."""
    normalized_user_id = normalize_user_id(user_id)

    async with get_database(info).session() as session:
        stmt = select(UserSummaries).where(UserSummaries.user_id == normalized_user_id)
        result = await session.execute(stmt)
        row = result.scalar_one_or_none()

        if row is None:
            logger.debug("User summary not found", user_id=normalized_user_id)
            return None

        return to_user_summary(row)


async def resolve_top_users(
    info: strawberry.Info, limit: int, order_by: str, order_by_direction: str
) -> list[UserSummary]:
    """
    Resolve the leaderboard.

    `order_by` and `order_by_direction` are checked against allow-lists
    before any query is built; each returned row carries its 1-based rank.
    """
    try:
        limit = validate_limit(limit)
        field = parse_leaderboard_field(order_by)
        direction = parse_sort_direction(order_by_direction)
    except ValidationError as e:
        logger.info(
            "Rejected topUsers arguments",
            order_by=order_by,
            order_by_direction=order_by_direction,
            limit=limit,
            error=str(e),
        )
        raise

    stmt = (
        select(UserSummaries)
        .order_by(order_clause(field, direction), UserSummaries.id.asc())
        .limit(limit)
    )

    async with get_database(info).session() as session:
        result = await session.execute(stmt)
        rows = result.scalars().all()
        return [to_user_summary(row, rank=rank) for rank, row in enumerate(rows, start=1)]


async def resolve_point_summary(info: strawberry.Info) -> PointSummary:
    """Sum every user's totals; an empty table yields zeros rather than nulls."""
    from ..types.user_summary import PointSummary as PointSummaryType

    stmt = select(
        *[
            func.coalesce(func.sum(getattr(UserSummaries, field)), 0.0).label(field)
            for field in USER_SUMMARY_AMOUNT_FIELDS
        ]
    )

    async with get_database(info).session() as session:
        result = await session.execute(stmt)
        row = result.mappings().one()

    return PointSummaryType(
        **{field: float(row[field] or 0.0) for field in USER_SUMMARY_AMOUNT_FIELDS}
    )


# Mutation resolvers
async def update_user_summary(
    info: strawberry.Info, user_id: str, amounts: dict[str, float]
) -> UserSummary:
    """
    Create or fully replace a user's totals.

    Values are written as given, never added to the stored ones, so repeating
    a call with the same arguments leaves the row unchanged.
    """
    try:
        normalized_user_id = normalize_user_id(user_id)
        validate_amounts(amounts)
    except ValidationError as e:
        logger.info("Rejected updateUserSummary arguments", error=str(e))
        raise

    values = {field: amounts[field] for field in USER_SUMMARY_AMOUNT_FIELDS}

    insert_stmt = pg_insert(UserSummaries).values(user_id=normalized_user_id, **values)
    stmt = insert_stmt.on_conflict_do_update(
        index_elements=[UserSummaries.user_id],
        set_={
            **{field: getattr(insert_stmt.excluded, field) for field in values},
            "last_time": func.now(),
        },
    ).returning(UserSummaries)

    async with get_database(info).session() as session:
        result = await session.execute(stmt, execution_options={"populate_existing": True})
        row = result.scalar_one()

        logger.info("User summary upserted", user_summary_id=row.id, user_id=normalized_user_id)
        return to_user_summary(row)
