"""Initial schema: prospects, interactions, follow-ups.

Revision ID: 001
Revises: None
Create Date: 2024-01-01
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Prospects
    op.create_table(
        "prospects",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("initial_data", sa.Text, nullable=False),
        sa.Column("avatar_url", sa.Text, nullable=True),
        sa.Column("current_funnel_stage", sa.String(50), nullable=False),
        sa.Column("follow_up_stage_number", sa.Integer, nullable=False),
        sa.Column("color_code", sa.String(7), nullable=True),
        sa.Column("color_code_reasoning", sa.Text, nullable=True),
        sa.Column("next_follow_up_date", sa.Date, nullable=True),
        sa.Column("last_contacted_date", sa.DateTime, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        sa.CheckConstraint("follow_up_stage_number BETWEEN 1 AND 12", name="ck_prospects_stage_number"),
    )

    op.create_index("ix_prospects_owner_id", "prospects", ["owner_id"])

    # Interactions
    op.create_table(
        "interactions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("prospect_id", sa.String(64), sa.ForeignKey("prospects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("date", sa.DateTime, nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("summary", sa.Text, nullable=False),
        sa.Column("outcome", sa.Text, nullable=True),
    )
    op.create_index("ix_interactions_prospect_id", "interactions", ["prospect_id"])

    # Follow-ups
    op.create_table(
        "follow_ups",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("prospect_id", sa.String(64), sa.ForeignKey("prospects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time", sa.String(5), nullable=False),
        sa.Column("method", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text, server_default=""),
        sa.Column("status", sa.String(20), server_default="Pending"),
        sa.Column("ai_suggested_tone", sa.String(50), nullable=True),
        sa.Column("ai_suggested_content", sa.Text, nullable=True),
        sa.Column("ai_suggested_tool", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_follow_ups_owner_id", "follow_ups", ["owner_id"])
    op.create_index("ix_follow_ups_prospect_id", "follow_ups", ["prospect_id"])
    op.create_index("ix_follow_ups_date", "follow_ups", ["date"])
    op.create_index("ix_follow_ups_status", "follow_ups", ["status"])


def downgrade() -> None:
    op.drop_table("follow_ups")
    op.drop_table("interactions")
    op.drop_table("prospects")
