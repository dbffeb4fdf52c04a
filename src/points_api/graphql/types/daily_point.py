"""
Daily point GraphQL type definitions
"""

import strawberry


@strawberry.type
class DailyPoint:
    """One point-accrual entry for a user on a send date."""

    id: int
    user_id: str
    stake_usd: float
    debt_usd: float
    blend_lend: float
    blend_borrow: float
    yuzu_lend: float
    yuzu_borrow: float
    blend_point: float
    yuzu_point: float
    send_date: str
    last_time: str


@strawberry.type
class DailyPointSummary:
    """Totals across all users for one send date."""

    send_date: str
    total_blend_point: float
    total_yuzu_point: float
    total_stake_usd: float
    total_debt_usd: float
    total_blend_lend: float
    total_blend_borrow: float
    total_yuzu_lend: float
    total_yuzu_borrow: float
    daily_count: int
