"""create feedback tables

Revision ID: 0001_create_feedback_tables
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision: str = "0001_create_feedback_tables"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "surveys",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "org_id", sa.String(36), sa.ForeignKey("organizations.id"), nullable=False
        ),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_surveys_org_id", "surveys", ["org_id"])
    op.create_table(
        "questions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("survey_id", sa.String(36), sa.ForeignKey("surveys.id"), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("choices", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_questions_survey_id", "questions", ["survey_id"])
    op.create_table(
        "responses",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "org_id", sa.String(36), sa.ForeignKey("organizations.id"), nullable=False
        ),
        sa.Column("survey_id", sa.String(36), sa.ForeignKey("surveys.id"), nullable=False),
        sa.Column("source", sa.String(16), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("visit_frequency", sa.String(32), nullable=True),
        sa.Column("time_spent_min", sa.Integer(), nullable=True),
        sa.Column("fast_exit_reason", sa.String(32), nullable=True),
        sa.Column("peak_hour_bucket", sa.String(32), nullable=True),
    )
    op.create_index(
        "ix_responses_org_submitted", "responses", ["org_id", "submitted_at"]
    )
    op.create_index(
        "ix_responses_org_survey_submitted",
        "responses",
        ["org_id", "survey_id", "submitted_at"],
    )
    op.create_table(
        "response_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "response_id", sa.String(36), sa.ForeignKey("responses.id"), nullable=False
        ),
        sa.Column(
            "question_id", sa.String(36), sa.ForeignKey("questions.id"), nullable=False
        ),
        sa.Column("value", sa.Text(), nullable=False),
    )
    op.create_index("ix_response_items_response_id", "response_items", ["response_id"])
    op.create_index("ix_response_items_question_id", "response_items", ["question_id"])
    op.create_table(
        "qr_tokens",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "org_id", sa.String(36), sa.ForeignKey("organizations.id"), nullable=False
        ),
        sa.Column("survey_id", sa.String(36), sa.ForeignKey("surveys.id"), nullable=False),
        sa.Column("token", sa.String(64), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("qr_tokens")
    op.drop_table("response_items")
    op.drop_table("responses")
    op.drop_table("questions")
    op.drop_table("surveys")
    op.drop_table("organizations")
