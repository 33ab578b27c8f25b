"""CreditTransaction model: the append-only credit ledger."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from llmscore.database import Base

TRANSACTION_PURCHASE = "purchase"
TRANSACTION_CONSUMPTION = "consumption"


class CreditTransaction(Base):
    """One purchase or consumption of credits. Never updated or deleted."""

    __tablename__ = "credit_transactions"
    __table_args__ = (
        Index("ix_credit_transactions_user_type", "user_id", "type"),
    )

    # Integer key keeps insertion order for rows sharing a timestamp
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)

    type: Mapped[str] = mapped_column(String(20))  # purchase, consumption
    amount: Mapped[int] = mapped_column(Integer)
    credits_before: Mapped[int] = mapped_column(Integer)
    credits_after: Mapped[int] = mapped_column(Integer)
    description: Mapped[str] = mapped_column(Text)

    # Consumption details
    scan_type: Mapped[str | None] = mapped_column(String(50), nullable=True)  # basic, premium
    scan_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    # Purchase details
    package_type: Mapped[str | None] = mapped_column(String(50), nullable=True)  # free, starter, growth, pro
    price_paid: Mapped[int | None] = mapped_column(Integer, nullable=True)  # USD cents

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.type,
            "amount": self.amount,
            "credits_before": self.credits_before,
            "credits_after": self.credits_after,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if self.type == TRANSACTION_CONSUMPTION:
            data["scan_type"] = self.scan_type
            data["scan_url"] = self.scan_url
        else:
            data["package_type"] = self.package_type
            data["price_paid"] = self.price_paid
        return data
