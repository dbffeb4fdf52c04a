from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

import strawberry
from sqlalchemy import func, select

from ...dbmodels import DAILY_POINT_AMOUNT_FIELDS, DailyPoints
from ...errors import ValidationError
from ...logging import get_logger
from ...validation import (
    normalize_user_id,
    validate_amounts,
    validate_date_range,
    validate_send_date,
)
from ..context import get_database

if TYPE_CHECKING:
    from ..types.daily_point import DailyPoint, DailyPointSummary

logger = get_logger(__name__)


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


def to_daily_point(row: DailyPoints) -> DailyPoint:
    """Convert a SQLAlchemy row to the GraphQL type."""
    from ..types.daily_point import DailyPoint as DailyPointType

    return DailyPointType(
        id=row.id,
        user_id=row.user_id,
        stake_usd=row.stake_usd,
        debt_usd=row.debt_usd,
        blend_lend=row.blend_lend,
        blend_borrow=row.blend_borrow,
        yuzu_lend=row.yuzu_lend,
        yuzu_borrow=row.yuzu_borrow,
        blend_point=row.blend_point,
        yuzu_point=row.yuzu_point,
        send_date=row.send_date,
        last_time=format_timestamp(row.last_time),
    )


# Query resolvers
async def resolve_daily_points(
    info: strawberry.Info,
    user_id: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[DailyPoint]:
    """
    Resolve a user's point history, newest send date first.

    The inclusive date filter only applies when both bounds are supplied.
    """
    normalized_user_id = normalize_user_id(user_id)
    date_range = validate_date_range(start_date, end_date)

    stmt = select(DailyPoints).where(DailyPoints.user_id == normalized_user_id)
    if date_range is not None:
        start, end = date_range
        stmt = stmt.where(DailyPoints.send_date >= start, DailyPoints.send_date <= end)
    stmt = stmt.order_by(DailyPoints.send_date.desc(), DailyPoints.id.desc())

    async with get_database(info).session() as session:
        result = await session.execute(stmt)
        rows = result.scalars().all()
        return [to_daily_point(row) for row in rows]


async def resolve_last_send_point(
    info: strawberry.Info, user_id: str | None = None
) -> DailyPoint | None:
    """Resolve the most recently written entry, optionally for one user."""
    stmt = select(DailyPoints)
    if user_id is not None:
        stmt = stmt.where(DailyPoints.user_id == normalize_user_id(user_id))
    stmt = stmt.order_by(DailyPoints.last_time.desc(), DailyPoints.id.desc()).limit(1)

    async with get_database(info).session() as session:
        result = await session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return to_daily_point(row)


async def resolve_daily_point_by_date(info: strawberry.Info) -> list[DailyPointSummary]:
    """Aggregate every send date: distinct users plus the sum of each amount."""
    from ..types.daily_point import DailyPointSummary as DailyPointSummaryType

    totals = [
        func.coalesce(func.sum(getattr(DailyPoints, field)), 0.0).label(f"total_{field}")
        for field in DAILY_POINT_AMOUNT_FIELDS
    ]
    stmt = (
        select(
            DailyPoints.send_date,
            func.count(DailyPoints.user_id.distinct()).label("daily_count"),
            *totals,
        )
        .group_by(DailyPoints.send_date)
        .order_by(DailyPoints.send_date.desc())
    )

    async with get_database(info).session() as session:
        result = await session.execute(stmt)
        rows = result.mappings().all()

    return [
        DailyPointSummaryType(
            send_date=row["send_date"],
            daily_count=int(row["daily_count"] or 0),
            **{
                f"total_{field}": float(row[f"total_{field}"] or 0.0)
                for field in DAILY_POINT_AMOUNT_FIELDS
            },
        )
        for row in rows
    ]


# Mutation resolvers
async def create_daily_point(
    info: strawberry.Info,
    user_id: str,
    send_date: str,
    amounts: dict[str, float],
) -> DailyPoint:
    """
    Append a new daily point entry.

    Entries are never merged: writing the same user and date twice yields
    two rows.
    """
    try:
        normalized_user_id = normalize_user_id(user_id)
        send_date = validate_send_date(send_date)
        validate_amounts(amounts)
    except ValidationError as e:
        logger.info("Rejected createDailyPoint arguments", error=str(e))
        raise

    values: dict[str, Any] = {field: amounts[field] for field in DAILY_POINT_AMOUNT_FIELDS}

    async with get_database(info).session() as session:
        row = DailyPoints(user_id=normalized_user_id, send_date=send_date, **values)
        session.add(row)
        await session.flush()
        # Load the server-assigned id and last_time
        await session.refresh(row)

        logger.info(
            "Daily point created",
            daily_point_id=row.id,
            user_id=normalized_user_id,
            send_date=send_date,
        )
        return to_daily_point(row)
