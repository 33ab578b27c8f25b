"""UserCredits model holding each user's prepaid credit balance."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from llmscore.database import Base


class UserCredits(Base):
    """Current credit balance for one user (exactly one row per user)."""

    __tablename__ = "user_credits"
    __table_args__ = (
        CheckConstraint("credits >= 0", name="ck_user_credits_non_negative"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    credits: Mapped[int] = mapped_column(Integer, default=0)
    total_purchased: Mapped[int] = mapped_column(Integer, default=0)
    total_consumed: Mapped[int] = mapped_column(Integer, default=0)

    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "credits": self.credits,
            "total_purchased": self.total_purchased,
            "total_consumed": self.total_consumed,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }
