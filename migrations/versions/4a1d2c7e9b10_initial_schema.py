"""initial_schema

Revision ID: 4a1d2c7e9b10
Revises:
Create Date: 2026-10-17 09:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4a1d2c7e9b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

activity_type = sa.Enum(
    "CLIENT_REPLY",
    "APPROVAL",
    "MEETING_SCHEDULED",
    "INFORMATION_REQUEST",
    "ISSUE_FLAGGED",
    name="activitytype",
)
task_priority = sa.Enum("HIGH", "MEDIUM", "NORMAL", "LOW", name="taskpriority")
task_status = sa.Enum(
    "PENDING", "IN_PROGRESS", "SCHEDULED", "COMPLETED", "CANCELLED", name="taskstatus"
)
backlink_status = sa.Enum("ACTIVE", "LOST", "DISAVOWED", "PENDING", name="backlinkstatus")
suggestion_status = sa.Enum("PENDING", "APPLIED", "REJECTED", name="suggestionstatus")
impact = sa.Enum("HIGH", "MEDIUM", "LOW", name="impact")


def upgrade() -> None:
    """Create dashboard and SEO tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255)),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column("avatar", sa.Text()),
        sa.Column("google_sub", sa.String(255), unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("industry", sa.String(255), nullable=False),
        sa.Column("contact_name", sa.String(255), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=False),
        sa.Column("contact_phone", sa.String(50), nullable=False),
        sa.Column("address", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "client_id",
            sa.Integer(),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", activity_type, nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("metadata", postgresql.JSONB()),
    )
    op.create_index("ix_activities_client_id", "activities", ["client_id"])
    op.create_index("ix_activities_timestamp", "activities", ["timestamp"])
    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "client_id",
            sa.Integer(),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assigned_to_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("priority", task_priority, nullable=False),
        sa.Column("status", task_status, nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("completed_at", sa.DateTime()),
        sa.Column("completed_by_id", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_tasks_client_id", "tasks", ["client_id"])
    op.create_index("ix_tasks_due_date", "tasks", ["due_date"])
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "client_id",
            sa.Integer(),
            sa.ForeignKey("clients.id", ondelete="SET NULL"),
        ),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=False),
        sa.Column("resource_id", sa.String(100)),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("ip_address", sa.String(64)),
        sa.Column("user_agent", sa.String(500)),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("metadata", postgresql.JSONB()),
    )
    op.create_index("ix_audit_logs_timestamp", "audit_logs", ["timestamp"])
    op.create_table(
        "settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("value", postgresql.JSONB(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("updated_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.UniqueConstraint("category", "key", name="uq_settings_category_key"),
    )
    op.create_table(
        "compliance_metrics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("target_score", sa.Integer(), nullable=False),
        sa.Column("last_updated", sa.DateTime(), nullable=False),
        sa.Column("updated_by_id", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column("notes", sa.Text()),
    )

    op.create_table(
        "websites",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.String(500), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("seo_score", sa.Integer()),
        sa.Column("last_analyzed_at", sa.DateTime()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    def website_fk() -> sa.Column:
        return sa.Column(
            "website_id",
            sa.Integer(),
            sa.ForeignKey("websites.id", ondelete="CASCADE"),
            nullable=False,
        )

    op.create_table(
        "keywords",
        sa.Column("id", sa.Integer(), primary_key=True),
        website_fk(),
        sa.Column("keyword", sa.String(255), nullable=False),
        sa.Column("search_volume", sa.Integer()),
        sa.Column("difficulty", sa.Integer()),
        sa.Column("cpc", sa.Float()),
        sa.Column("intent", sa.String(50)),
        sa.Column("current_ranking", sa.Integer()),
        sa.Column("previous_ranking", sa.Integer()),
        sa.Column("target_url", sa.String(500)),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "backlinks",
        sa.Column("id", sa.Integer(), primary_key=True),
        website_fk(),
        sa.Column("source_url", sa.String(500), nullable=False),
        sa.Column("target_url", sa.String(500), nullable=False),
        sa.Column("anchor_text", sa.String(500)),
        sa.Column("domain_authority", sa.Integer()),
        sa.Column("toxicity_score", sa.Integer(), nullable=False),
        sa.Column("status", backlink_status, nullable=False),
        sa.Column("first_discovered", sa.DateTime(), nullable=False),
        sa.Column("last_checked", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "content_optimizations",
        sa.Column("id", sa.Integer(), primary_key=True),
        website_fk(),
        sa.Column("page_url", sa.String(500), nullable=False),
        sa.Column("target_keyword", sa.String(255), nullable=False),
        sa.Column("original_content", sa.Text(), nullable=False),
        sa.Column("optimized_content", sa.Text()),
        sa.Column("seo_score", sa.Integer()),
        sa.Column("readability_score", sa.Integer()),
        sa.Column("optimization_date", sa.DateTime(), nullable=False),
        sa.Column("optimization_settings", postgresql.JSONB()),
        sa.Column("ai_generation_prompt", sa.Text()),
    )
    op.create_table(
        "on_page_optimizations",
        sa.Column("id", sa.Integer(), primary_key=True),
        website_fk(),
        sa.Column("page_url", sa.String(500), nullable=False),
        sa.Column("element_type", sa.String(50), nullable=False),
        sa.Column("current_value", sa.Text()),
        sa.Column("suggested_value", sa.Text(), nullable=False),
        sa.Column("impact", impact, nullable=False),
        sa.Column("status", suggestion_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("applied_at", sa.DateTime()),
    )
    op.create_table(
        "seo_audits",
        sa.Column("id", sa.Integer(), primary_key=True),
        website_fk(),
        sa.Column("audit_date", sa.DateTime(), nullable=False),
        sa.Column("overall_score", sa.Integer(), nullable=False),
        sa.Column("technical_score", sa.Integer()),
        sa.Column("content_score", sa.Integer()),
        sa.Column("performance_score", sa.Integer()),
        sa.Column("issues", postgresql.JSONB()),
        sa.Column("recommendations", postgresql.JSONB()),
    )
    for table in (
        "keywords",
        "backlinks",
        "content_optimizations",
        "on_page_optimizations",
        "seo_audits",
    ):
        op.create_index(f"ix_{table}_website_id", table, ["website_id"])


def downgrade() -> None:
    """Drop all tables and enum types."""
    for table in (
        "seo_audits",
        "on_page_optimizations",
        "content_optimizations",
        "backlinks",
        "keywords",
        "websites",
        "compliance_metrics",
        "settings",
        "audit_logs",
        "tasks",
        "activities",
        "clients",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (
        impact,
        suggestion_status,
        backlink_status,
        task_status,
        task_priority,
        activity_type,
    ):
        enum_type.drop(bind, checkfirst=True)
