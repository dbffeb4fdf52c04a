"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.daily_point import DailyPoint
from ..types.user_summary import UserSummary


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation(name="createDailyPoint")
    async def create_daily_point(
        self,
        info: strawberry.Info,
        user_id: str,
        stake_usd: float,
        debt_usd: float,
        blend_lend: float,
        blend_borrow: float,
        yuzu_lend: float,
        yuzu_borrow: float,
        blend_point: float,
        yuzu_point: float,
        send_date: str,
    ) -> DailyPoint:
        """Append a daily point entry (never merged with existing ones)."""
        from ..resolvers.daily_point import create_daily_point

        return await create_daily_point(
            info,
            user_id=user_id,
            send_date=send_date,
            amounts={
                "stake_usd": stake_usd,
                "debt_usd": debt_usd,
                "blend_lend": blend_lend,
                "blend_borrow": blend_borrow,
                "yuzu_lend": yuzu_lend,
                "yuzu_borrow": yuzu_borrow,
                "blend_point": blend_point,
                "yuzu_point": yuzu_point,
            },
        )

    @strawberry.mutation(name="updateUserSummary")
    async def update_user_summary(
        self,
        info: strawberry.Info,
        user_id: str,
        blend_lend: float,
        blend_borrow: float,
        yuzu_lend: float,
        yuzu_borrow: float,
        blend_point: float,
        yuzu_point: float,
    ) -> UserSummary:
        """Create or replace a user's totals."""
        from ..resolvers.user_summary import update_user_summary

        return await update_user_summary(
            info,
            user_id=user_id,
            amounts={
                "blend_lend": blend_lend,
                "blend_borrow": blend_borrow,
                "yuzu_lend": yuzu_lend,
                "yuzu_borrow": yuzu_borrow,
                "blend_point": blend_point,
                "yuzu_point": yuzu_point,
            },
        )
