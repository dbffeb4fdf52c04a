"""
Root GraphQL query definitions
"""

from typing import Annotated

import strawberry

from ..types.daily_point import DailyPoint, DailyPointSummary
from ..types.user_summary import PointSummary, UserSummary


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field(name="lastSendPoint")
    async def last_send_point(
        self,
        info: strawberry.Info,
        user_id: Annotated[str | None, strawberry.argument(name="userId")] = None,
    ) -> DailyPoint | None:
        """Get the most recently written daily point, optionally for one user."""
        from ..resolvers.daily_point import resolve_last_send_point

        return await resolve_last_send_point(info, user_id)

    @strawberry.field(name="dailyPoints")
    async def daily_points(
        self,
        info: strawberry.Info,
        user_id: Annotated[str, strawberry.argument(name="userId")],
        start_date: Annotated[str | None, strawberry.argument(name="startDate")] = None,
        end_date: Annotated[str | None, strawberry.argument(name="endDate")] = None,
    ) -> list[DailyPoint]:
        """Get a user's daily points, newest send date first."""
        from ..resolvers.daily_point import resolve_daily_points

        return await resolve_daily_points(info, user_id, start_date, end_date)

    @strawberry.field(name="dailyPointByDate")
    async def daily_point_by_date(self, info: strawberry.Info) -> list[DailyPointSummary]:
        """Get per-date totals across all users."""
        from ..resolvers.daily_point import resolve_daily_point_by_date

        return await resolve_daily_point_by_date(info)

    @strawberry.field(name="userSummary")
    async def user_summary(
        self,
        info: strawberry.Info,
        user_id: Annotated[str, strawberry.argument(name="userId")],
    ) -> UserSummary | None:
        """Get a user's summary by ID (case-insensitive)."""
        from ..resolvers.user_summary import resolve_user_summary

        return await resolve_user_summary(info, user_id)

    @strawberry.field(name="topUsers")
    async def top_users(
        self,
        info: strawberry.Info,
        limit: int,
        order_by: Annotated[str, strawberry.argument(name="orderBy")],
        order_by_direction: Annotated[str, strawberry.argument(name="orderByDirection")],
    ) -> list[UserSummary]:
        """Get the leaderboard ordered by an allowed summary field."""
        from ..resolvers.user_summary import resolve_top_users

        return await resolve_top_users(info, limit, order_by, order_by_direction)

    @strawberry.field(name="pointSummary")
    async def point_summary(self, info: strawberry.Info) -> PointSummary | None:
        """Get global totals across all user summaries."""
        from ..resolvers.user_summary import resolve_point_summary

        return await resolve_point_summary(info)
