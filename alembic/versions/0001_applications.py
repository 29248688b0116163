"""Applications table

Revision ID: 0001_applications
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_applications"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("owner_id", sa.String(length=255), nullable=False),
        sa.Column("company", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("url", sa.String(length=2000), nullable=True),
        sa.Column("job_type", sa.String(length=120), nullable=True),
        sa.Column("work_mode", sa.String(length=120), nullable=True),
        sa.Column("seniority", sa.String(length=120), nullable=True),
        sa.Column("salary_min", sa.Float(), nullable=True),
        sa.Column("salary_max", sa.Float(), nullable=True),
        sa.Column("salary_currency", sa.String(length=10), nullable=True),
        sa.Column("salary_period", sa.String(length=40), nullable=True),
        sa.Column("description_summary", sa.Text(), nullable=True),
        sa.Column("key_requirements_json", sa.Text(), nullable=True),
        sa.Column("key_responsibilities_json", sa.Text(), nullable=True),
        sa.Column(
            "stage",
            sa.Enum(
                "APPLIED",
                "INTERVIEW",
                "OFFER",
                "HIRED",
                "REJECTED",
                name="applicationstage",
                native_enum=False,
                length=20,
            ),
            nullable=False,
            server_default="APPLIED",
        ),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("applied_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_applications_owner_id", "applications", ["owner_id"], unique=False)
    op.create_index("ix_applications_owner_url", "applications", ["owner_id", "url"], unique=False)
    op.create_index(
        "ix_applications_owner_stage_sort",
        "applications",
        ["owner_id", "stage", "sort_order"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_applications_owner_stage_sort", table_name="applications")
    op.drop_index("ix_applications_owner_url", table_name="applications")
    op.drop_index("ix_applications_owner_id", table_name="applications")
    op.drop_table("applications")
