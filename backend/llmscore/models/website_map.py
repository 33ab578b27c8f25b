"""WebsiteMap model for the latest URL map of a site."""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from llmscore.database import Base


class WebsiteMap(Base):
    """Links discovered for one site plus metadata coverage counts."""

    __tablename__ = "website_maps"
    __table_args__ = (
        UniqueConstraint("user_id", "url", name="uq_website_maps_user_url"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    url: Mapped[str] = mapped_column(String(2048))
    domain: Mapped[str] = mapped_column(String(255), index=True)

    # List of {url, title, description} dicts as returned by the map service
    links: Mapped[list[dict[str, Any]]] = mapped_column(JSON)

    # Coverage counts (HTML pages only)
    total_links: Mapped[int] = mapped_column(Integer, default=0)
    html_pages: Mapped[int] = mapped_column(Integer, default=0)
    missing_titles: Mapped[int] = mapped_column(Integer, default=0)
    missing_descriptions: Mapped[int] = mapped_column(Integer, default=0)

    credits_consumed: Mapped[int] = mapped_column(Integer, default=0)
    scan_type: Mapped[str] = mapped_column(String(50), default="basic")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
