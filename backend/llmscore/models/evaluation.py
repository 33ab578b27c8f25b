"""Evaluation model for the latest scored scan of a URL."""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from llmscore.database import Base


class Evaluation(Base):
    """Scores for one (user, url) pair. A rescan overwrites the row."""

    __tablename__ = "evaluations"
    __table_args__ = (
        UniqueConstraint("user_id", "url", name="uq_evaluations_user_url"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    url: Mapped[str] = mapped_column(String(2048))
    domain: Mapped[str] = mapped_column(String(255), index=True)

    # Scores (0-10)
    overall_score: Mapped[int] = mapped_column(Integer, index=True)
    search_visibility_score: Mapped[int] = mapped_column(Integer)
    content_quality_score: Mapped[int] = mapped_column(Integer)
    technical_seo_score: Mapped[int] = mapped_column(Integer)
    ai_optimization_score: Mapped[int] = mapped_column(Integer)

    search_performance: Mapped[dict[str, Any]] = mapped_column(JSON)
    recommendations: Mapped[list[str]] = mapped_column(JSON)

    credits_consumed: Mapped[int] = mapped_column(Integer, default=0)
    scan_type: Mapped[str] = mapped_column(String(50), default="basic")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "domain": self.domain,
            "overall_score": self.overall_score,
            "search_visibility_score": self.search_visibility_score,
            "content_quality_score": self.content_quality_score,
            "technical_seo_score": self.technical_seo_score,
            "ai_optimization_score": self.ai_optimization_score,
            "search_performance": self.search_performance,
            "recommendations": self.recommendations,
            "credits_consumed": self.credits_consumed,
            "scan_type": self.scan_type,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
