"""
Leaderboard ordering allow-lists.

`topUsers` receives its sort column and direction as free-form strings;
they are mapped onto closed enumerations here so that nothing the caller
sends is ever used as a raw column name.
"""

from enum import Enum

from sqlalchemy import ColumnElement

from ..dbmodels import UserSummaries
from ..errors import ValidationError


class LeaderboardField(Enum):
    """Columns a leaderboard may be ordered by."""

    BLEND_POINT = "blend_point"
    YUZU_POINT = "yuzu_point"
    BLEND_LEND = "blend_lend"
    BLEND_BORROW = "blend_borrow"
    YUZU_LEND = "yuzu_lend"
    YUZU_BORROW = "yuzu_borrow"
    LAST_TIME = "last_time"

    @property
    def column(self) -> ColumnElement:
        return getattr(UserSummaries, self.value)


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


# Short names accepted by older clients
LEGACY_FIELD_ALIASES = {
    "blend": LeaderboardField.BLEND_POINT,
    "yuzu": LeaderboardField.YUZU_POINT,
}


def parse_leaderboard_field(order_by: str) -> LeaderboardField:
    key = order_by.strip().lower()
    if key in LEGACY_FIELD_ALIASES:
        return LEGACY_FIELD_ALIASES[key]
    try:
        return LeaderboardField(key)
    except ValueError:
        allowed = ", ".join(field.value for field in LeaderboardField)
        raise ValidationError(
            f"Invalid orderBy '{order_by}'. Allowed values: {allowed}"
        ) from None


def parse_sort_direction(direction: str) -> SortDirection:
    try:
        return SortDirection(direction.strip().lower())
    except ValueError:
        raise ValidationError(
            f"Invalid orderByDirection '{direction}'. Allowed values: asc, desc"
        ) from None


def order_clause(field: LeaderboardField, direction: SortDirection) -> ColumnElement:
    column = field.column
    return column.asc() if direction is SortDirection.ASC else column.desc()
