"""
Database models for the Points API (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from datetime import datetime

from sqlalchemy import (
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class DailyPoints(Base):
    """Append-only log of per-user, per-date point accruals."""

    __tablename__ = "daily_point"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="daily_point_pkey"),
        Index("idx_daily_point_user_send_date", "user_id", "send_date"),
        Index("idx_daily_point_last_time", "last_time"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    stake_usd: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    debt_usd: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    blend_lend: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    blend_borrow: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    yuzu_lend: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    yuzu_borrow: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    blend_point: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    yuzu_point: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    # ISO YYYY-MM-DD, so string order is date order
    send_date: Mapped[str] = mapped_column(String(10), nullable=False)
    last_time: Mapped[datetime] = mapped_column(
        DateTime(True), nullable=False, server_default=func.now()
    )


class UserSummaries(Base):
    """Running per-user totals, replaced wholesale on every upsert."""

    __tablename__ = "user_summary"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="user_summary_pkey"),
        UniqueConstraint("user_id", name="user_summary_user_id_key"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    blend_lend: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    blend_borrow: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    yuzu_lend: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    yuzu_borrow: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    blend_point: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    yuzu_point: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    last_time: Mapped[datetime] = mapped_column(
        DateTime(True), nullable=False, server_default=func.now()
    )


# Numeric columns, in schema order
DAILY_POINT_AMOUNT_FIELDS = (
    "stake_usd",
    "debt_usd",
    "blend_lend",
    "blend_borrow",
    "yuzu_lend",
    "yuzu_borrow",
    "blend_point",
    "yuzu_point",
)

USER_SUMMARY_AMOUNT_FIELDS = (
    "blend_lend",
    "blend_borrow",
    "yuzu_lend",
    "yuzu_borrow",
    "blend_point",
    "yuzu_point",
)

target_metadata = Base.metadata

__all__ = [
    "Base",
    "DailyPoints",
    "UserSummaries",
    "DAILY_POINT_AMOUNT_FIELDS",
    "USER_SUMMARY_AMOUNT_FIELDS",
    "target_metadata",
]
