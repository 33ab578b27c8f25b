"""Initial schema - credits ledger and scan results.

Revision ID: 001
Revises:
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # User credits table
    op.create_table(
        "user_credits",
        sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("credits", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_purchased", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_consumed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("credits >= 0", name="ck_user_credits_non_negative"),
    )
    op.create_index("ix_user_credits_user_id", "user_credits", ["user_id"], unique=True)

    # Credit transactions table (append-only)
    op.create_table(
        "credit_transactions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("credits_before", sa.Integer, nullable=False),
        sa.Column("credits_after", sa.Integer, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("scan_type", sa.String(50), nullable=True),
        sa.Column("scan_url", sa.String(2048), nullable=True),
        sa.Column("package_type", sa.String(50), nullable=True),
        sa.Column("price_paid", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_credit_transactions_user_id", "credit_transactions", ["user_id"])
    op.create_index("ix_credit_transactions_user_type", "credit_transactions", ["user_id", "type"])
    op.create_index("ix_credit_transactions_created_at", "credit_transactions", ["created_at"])

    # Evaluations table
    op.create_table(
        "evaluations",
        sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("domain", sa.String(255), nullable=False),
        sa.Column("overall_score", sa.Integer, nullable=False),
        sa.Column("search_visibility_score", sa.Integer, nullable=False),
        sa.Column("content_quality_score", sa.Integer, nullable=False),
        sa.Column("technical_seo_score", sa.Integer, nullable=False),
        sa.Column("ai_optimization_score", sa.Integer, nullable=False),
        sa.Column("search_performance", sa.JSON, nullable=False),
        sa.Column("recommendations", sa.JSON, nullable=False),
        sa.Column("credits_consumed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("scan_type", sa.String(50), nullable=False, server_default="basic"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "url", name="uq_evaluations_user_url"),
    )
    op.create_index("ix_evaluations_user_id", "evaluations", ["user_id"])
    op.create_index("ix_evaluations_domain", "evaluations", ["domain"])
    op.create_index("ix_evaluations_overall_score", "evaluations", ["overall_score"])
    op.create_index("ix_evaluations_created_at", "evaluations", ["created_at"])

    # AI files table
    op.create_table(
        "ai_files",
        sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("domain", sa.String(255), nullable=False),
        sa.Column("files", sa.JSON, nullable=False),
        sa.Column("credits_consumed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("scan_type", sa.String(50), nullable=False, server_default="basic"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "url", name="uq_ai_files_user_url"),
    )
    op.create_index("ix_ai_files_user_id", "ai_files", ["user_id"])
    op.create_index("ix_ai_files_domain", "ai_files", ["domain"])
    op.create_index("ix_ai_files_created_at", "ai_files", ["created_at"])

    # Website maps table
    op.create_table(
        "website_maps",
        sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("domain", sa.String(255), nullable=False),
        sa.Column("links", sa.JSON, nullable=False),
        sa.Column("total_links", sa.Integer, nullable=False, server_default="0"),
        sa.Column("html_pages", sa.Integer, nullable=False, server_default="0"),
        sa.Column("missing_titles", sa.Integer, nullable=False, server_default="0"),
        sa.Column("missing_descriptions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("credits_consumed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("scan_type", sa.String(50), nullable=False, server_default="basic"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "url", name="uq_website_maps_user_url"),
    )
    op.create_index("ix_website_maps_user_id", "website_maps", ["user_id"])
    op.create_index("ix_website_maps_domain", "website_maps", ["domain"])
    op.create_index("ix_website_maps_created_at", "website_maps", ["created_at"])


def downgrade() -> None:
    op.drop_table("website_maps")
    op.drop_table("ai_files")
    op.drop_table("evaluations")
    op.drop_table("credit_transactions")
    op.drop_table("user_credits")
