"""
User summary GraphQL type definitions
"""

import strawberry


@strawberry.type
class UserSummary:
    """Running point totals for one user."""

    id: int
    user_id: str
    blend_lend: float
    blend_borrow: float
    yuzu_lend: float
    yuzu_borrow: float
    blend_point: float
    yuzu_point: float
    last_time: str
    rank: int | None = None


@strawberry.type
class PointSummary:
    """Global totals across every user summary."""

    blend_point: float | None
    yuzu_point: float | None
    blend_lend: float | None
    blend_borrow: float | None
    yuzu_lend: float | None
    yuzu_borrow: float | None
