from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, DateTime, Text, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
import uuid
from datetime import datetime
from app.core.db import Base


class WardrobeCoverage(Base):
    __tablename__ = "wardrobe_coverage"
    __table_args__ = (
        # NULL scenario/subcategory are part of the key, not wildcards
        Index(
            "uq_wardrobe_coverage_key",
            "user_id",
            "scenario_id",
            "season",
            "category",
            "subcategory",
            unique=True,
            postgresql_nulls_not_distinct=True,
        ),
        Index("ix_wardrobe_coverage_user_priority", "user_id", "priority_level"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    scenario_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    scenario_name: Mapped[str] = mapped_column(Text, nullable=False)
    scenario_frequency: Mapped[str | None] = mapped_column(Text, nullable=True)
    season: Mapped[str] = mapped_column(String(32), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    subcategory: Mapped[str | None] = mapped_column(String(64), nullable=True)
    current_items: Mapped[int] = mapped_column(Integer, default=0)
    needed_items_min: Mapped[int] = mapped_column(Integer, default=0)
    needed_items_ideal: Mapped[int] = mapped_column(Integer, default=0)
    needed_items_max: Mapped[int] = mapped_column(Integer, default=0)
    coverage_percent: Mapped[int] = mapped_column(Integer, default=0)
    gap_count: Mapped[int] = mapped_column(Integer, default=0)
    gap_type: Mapped[str] = mapped_column(String(16), nullable=False)
    priority_level: Mapped[int] = mapped_column(Integer, default=3)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
