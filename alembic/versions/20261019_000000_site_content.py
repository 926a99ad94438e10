"""Site content and settings tables

Revision ID: 20261019_000000
Revises: 20260301_000000
Create Date: 2026-10-19 00:00:00.000000

Adds:
- Projects and team members
- Newsroom posts and their recorded views
- Generic forms and submissions
- Site settings, seeded with the maintenance mode keys

Revision format: YYYYMMDD_HHMMSS_description

"""

from datetime import datetime, timezone
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_000000"
down_revision: Union[str, None] = "20260301_000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the site content tables."""

    # Create projects table
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("slug", sa.String(128), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="PLANNING"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("budget", sa.Float(), nullable=True),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("objectives", sa.Text(), nullable=False, server_default=""),
        sa.Column("outcomes", sa.Text(), nullable=True),
        sa.Column("technologies", sa.JSON(), nullable=False),
        sa.Column("links", sa.JSON(), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"]),
        sa.Index("ix_projects_slug", "slug", unique=True),
        sa.Index("ix_projects_status", "status"),
        sa.Index("ix_projects_published", "published"),
    )

    # Create team_members table
    op.create_table(
        "team_members",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("role", sa.String(128), nullable=False),
        sa.Column("year", sa.String(32), nullable=False),
        sa.Column("major", sa.String(128), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("linkedin_url", sa.String(1024), nullable=True),
        sa.Column("github_url", sa.String(1024), nullable=True),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("join_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_team_members_active", "active"),
    )

    # Create newsroom_posts table
    op.create_table(
        "newsroom_posts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("slug", sa.String(256), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="draft"),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("thumbnail", sa.String(1024), nullable=True),
        sa.Column("media_embed_link", sa.String(1024), nullable=True),
        sa.Column("author", sa.String(256), nullable=False),
        sa.Column("author_email", sa.String(320), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("seo_title", sa.String(256), nullable=True),
        sa.Column("seo_description", sa.Text(), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("unique_views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("date_published", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_newsroom_posts_slug", "slug", unique=True),
        sa.Index("ix_newsroom_posts_type", "type"),
        sa.Index("ix_newsroom_posts_status", "status"),
    )

    # Create newsroom_views table
    op.create_table(
        "newsroom_views",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.String(128), nullable=False),
        sa.Column("referrer", sa.String(1024), nullable=True),
        sa.Column("time_on_page", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("scroll_depth", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ip", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("viewed_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["post_id"], ["newsroom_posts.id"]),
        sa.Index("ix_newsroom_views_post_id", "post_id"),
        sa.Index("ix_newsroom_views_session_id", "session_id"),
    )

    # Create forms table
    op.create_table(
        "forms",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("slug", sa.String(128), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(64), nullable=False, server_default="general"),
        sa.Column("questions", sa.JSON(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("require_auth", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("allow_multiple", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("max_submissions", sa.Integer(), nullable=True),
        sa.Column("is_attendance_form", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("attendance_latitude", sa.Float(), nullable=True),
        sa.Column("attendance_longitude", sa.Float(), nullable=True),
        sa.Column("attendance_radius_meters", sa.Float(), nullable=True),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"]),
        sa.Index("ix_forms_slug", "slug", unique=True),
    )

    # Create form_submissions table
    op.create_table(
        "form_submissions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("form_id", sa.Integer(), nullable=False),
        sa.Column("applicant_name", sa.String(256), nullable=False),
        sa.Column("applicant_email", sa.String(320), nullable=False),
        sa.Column("applicant_phone", sa.String(64), nullable=True),
        sa.Column("responses", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="SUBMITTED"),
        sa.Column("ip", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"]),
        sa.Index("ix_form_submissions_form_id", "form_id"),
        sa.Index("ix_form_submissions_applicant_email", "applicant_email"),
    )

    # Create site_settings table
    site_settings = op.create_table(
        "site_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(128), nullable=False),
        sa.Column("value", sa.Text(), nullable=False, server_default=""),
        sa.Column("type", sa.String(16), nullable=False, server_default="TEXT"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_site_settings_key", "key", unique=True),
    )

    # Seed maintenance mode settings
    now = datetime.now(timezone.utc)
    op.bulk_insert(
        site_settings,
        [
            {
                "key": "maintenance_mode",
                "value": "false",
                "type": "BOOLEAN",
                "description": "Enable maintenance mode to show the maintenance page to non-admin users",
                "created_at": now,
                "updated_at": now,
            },
            {
                "key": "maintenance_message",
                "value": "",
                "type": "TEXT",
                "description": "Custom maintenance message (optional)",
                "created_at": now,
                "updated_at": now,
            },
            {
                "key": "maintenance_exempt_paths",
                "value": "/admin,/api/v1/admin,/auth",
                "type": "TEXT",
                "description": "Comma-separated paths that remain accessible during maintenance",
                "created_at": now,
                "updated_at": now,
            },
        ],
    )


def downgrade() -> None:
    """Drop the site content tables."""
    op.drop_table("site_settings")
    op.drop_table("form_submissions")
    op.drop_table("forms")
    op.drop_table("newsroom_views")
    op.drop_table("newsroom_posts")
    op.drop_table("team_members")
    op.drop_table("projects")
