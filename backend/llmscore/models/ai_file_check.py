"""AIFileCheck model for the latest AI discovery file probe of a URL."""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from llmscore.database import Base


class AIFileCheck(Base):
    """Probe results for well-known AI files on one site."""

    __tablename__ = "ai_files"
    __table_args__ = (
        UniqueConstraint("user_id", "url", name="uq_ai_files_user_url"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    url: Mapped[str] = mapped_column(String(2048))
    domain: Mapped[str] = mapped_column(String(255), index=True)

    # List of FileCheck dicts (path, exists, content, error, statusCode, contentType)
    files: Mapped[list[dict[str, Any]]] = mapped_column(JSON)

    credits_consumed: Mapped[int] = mapped_column(Integer, default=0)
    scan_type: Mapped[str] = mapped_column(String(50), default="basic")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
