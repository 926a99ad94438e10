"""Initial schema for abg-site

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

Creates every table of the site:
- Users and the audit log
- Recruitment cycles, recruitment events and RSVPs
- Question sets, applications, slots and bookings
- Review phase configs, reviews, rankings and decisions
- Email logs
- Public events, attendees and newsletter subscribers

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("name", sa.String(256), nullable=True),
        sa.Column("roles", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
    )

    # Create audit_logs table
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("user_email", sa.String(320), nullable=True),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("target_type", sa.String(64), nullable=True),
        sa.Column("target_id", sa.String(128), nullable=True),
        sa.Column("meta", sa.JSON(), nullable=False),
        sa.Column("ip", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_audit_logs_user_id", "user_id"),
        sa.Index("ix_audit_logs_user_email", "user_email"),
        sa.Index("ix_audit_logs_action", "action"),
        sa.Index("ix_audit_logs_target_type", "target_type"),
        sa.Index("ix_audit_logs_timestamp", "timestamp"),
    )

    # Create recruitment_cycles table
    op.create_table(
        "recruitment_cycles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("slug", sa.String(128), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("portal_open_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("portal_close_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("application_due_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_recruitment_cycles_slug", "slug", unique=True),
        sa.Index("ix_recruitment_cycles_is_active", "is_active"),
    )

    # Create recruitment_events table
    op.create_table(
        "recruitment_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(256), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rsvp_enabled", sa.Boolean(), nullable=False),
        sa.Column("rsvp_deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("check_in_enabled", sa.Boolean(), nullable=False),
        sa.Column("check_in_code", sa.String(16), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["cycle_id"], ["recruitment_cycles.id"]),
        sa.Index("ix_recruitment_events_cycle_id", "cycle_id"),
    )

    # Create recruitment_event_rsvps table
    op.create_table(
        "recruitment_event_rsvps",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("user_email", sa.String(320), nullable=False),
        sa.Column("user_name", sa.String(256), nullable=True),
        sa.Column("rsvped_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("attended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("checked_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["event_id"], ["recruitment_events.id"]),
        sa.UniqueConstraint("event_id", "user_id", name="uq_rsvp_event_user"),
        sa.Index("ix_recruitment_event_rsvps_cycle_id", "cycle_id"),
        sa.Index("ix_recruitment_event_rsvps_event_id", "event_id"),
        sa.Index("ix_recruitment_event_rsvps_user_id", "user_id"),
    )

    # Create application_questions table
    op.create_table(
        "application_questions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=False),
        sa.Column("track", sa.String(32), nullable=False),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["cycle_id"], ["recruitment_cycles.id"]),
        sa.UniqueConstraint("cycle_id", "track", name="uq_questions_cycle_track"),
        sa.Index("ix_application_questions_cycle_id", "cycle_id"),
    )

    # Create applications table
    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("user_email", sa.String(320), nullable=False),
        sa.Column("user_name", sa.String(256), nullable=True),
        sa.Column("track", sa.String(32), nullable=False),
        sa.Column("stage", sa.String(32), nullable=False),
        sa.Column("answers", sa.JSON(), nullable=False),
        sa.Column("files", sa.JSON(), nullable=False),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("last_saved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["cycle_id"], ["recruitment_cycles.id"]),
        sa.UniqueConstraint("cycle_id", "user_id", name="uq_application_cycle_user"),
        sa.Index("ix_applications_cycle_id", "cycle_id"),
        sa.Index("ix_applications_user_id", "user_id"),
        sa.Index("ix_applications_user_email", "user_email"),
        sa.Index("ix_applications_track", "track"),
        sa.Index("ix_applications_stage", "stage"),
    )

    # Create slots table
    op.create_table(
        "slots",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=False),
        sa.Column("kind", sa.String(32), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(256), nullable=True),
        sa.Column("meeting_url", sa.String(512), nullable=True),
        sa.Column("host_name", sa.String(256), nullable=True),
        sa.Column("host_email", sa.String(320), nullable=True),
        sa.Column("max_bookings", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("for_track", sa.String(32), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["cycle_id"], ["recruitment_cycles.id"]),
        sa.Index("ix_slots_cycle_id", "cycle_id"),
        sa.Index("ix_slots_kind", "kind"),
        sa.Index("ix_slots_start_time", "start_time"),
    )

    # Create slot_bookings table
    op.create_table(
        "slot_bookings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=False),
        sa.Column("slot_id", sa.Integer(), nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("user_email", sa.String(320), nullable=False),
        sa.Column("user_name", sa.String(256), nullable=True),
        sa.Column("slot_kind", sa.String(32), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["slot_id"], ["slots.id"]),
        sa.Index("ix_slot_bookings_cycle_id", "cycle_id"),
        sa.Index("ix_slot_bookings_slot_id", "slot_id"),
        sa.Index("ix_slot_bookings_application_id", "application_id"),
        sa.Index("ix_slot_bookings_user_id", "user_id"),
        sa.Index("ix_slot_bookings_status", "status"),
    )

    # Create phase_configs table
    op.create_table(
        "phase_configs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=False),
        sa.Column("phase", sa.String(32), nullable=False),
        sa.Column("track", sa.String(32), nullable=True),
        sa.Column("categories", sa.JSON(), nullable=False),
        sa.Column("min_score", sa.Float(), nullable=False),
        sa.Column("max_score", sa.Float(), nullable=False),
        sa.Column("min_reviewers_required", sa.Integer(), nullable=False),
        sa.Column("referral_weight", sa.Float(), nullable=False),
        sa.Column("deferral_weight", sa.Float(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="not_started"),
        sa.Column("finalized_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("finalized_by", sa.String(320), nullable=True),
        sa.Column("cutoff_applied_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cutoff_applied_by", sa.String(320), nullable=True),
        sa.Column("cutoff_criteria", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["cycle_id"], ["recruitment_cycles.id"]),
        sa.UniqueConstraint("cycle_id", "phase", "track", name="uq_phase_config"),
        sa.Index("ix_phase_configs_cycle_id", "cycle_id"),
    )

    # Create phase_reviews table
    op.create_table(
        "phase_reviews",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=False),
        sa.Column("phase", sa.String(32), nullable=False),
        sa.Column("reviewer_email", sa.String(320), nullable=False),
        sa.Column("reviewer_name", sa.String(256), nullable=True),
        sa.Column("scores", sa.JSON(), nullable=False),
        sa.Column("recommendation", sa.String(16), nullable=False),
        sa.Column("referral_signal", sa.String(16), nullable=False, server_default="neutral"),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["application_id"], ["applications.id"]),
        sa.UniqueConstraint("application_id", "reviewer_email", "phase", name="uq_phase_review_reviewer"),
        sa.Index("ix_phase_reviews_application_id", "application_id"),
        sa.Index("ix_phase_reviews_cycle_id", "cycle_id"),
        sa.Index("ix_phase_reviews_phase", "phase"),
        sa.Index("ix_phase_reviews_reviewer_email", "reviewer_email"),
    )

    # Create phase_rankings table
    op.create_table(
        "phase_rankings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=False),
        sa.Column("phase", sa.String(32), nullable=False),
        sa.Column("track", sa.String(32), nullable=True),
        sa.Column("entries", sa.JSON(), nullable=False),
        sa.Column("finalized_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_phase_rankings_cycle_id", "cycle_id"),
        sa.Index("ix_phase_rankings_phase", "phase"),
    )

    # Create phase_decisions table
    op.create_table(
        "phase_decisions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=False),
        sa.Column("phase", sa.String(32), nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("decision", sa.String(16), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("previous_stage", sa.String(32), nullable=False),
        sa.Column("new_stage", sa.String(32), nullable=False),
        sa.Column("performed_by", sa.String(320), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_phase_decisions_cycle_id", "cycle_id"),
        sa.Index("ix_phase_decisions_phase", "phase"),
        sa.Index("ix_phase_decisions_application_id", "application_id"),
    )

    # Create email_logs table
    op.create_table(
        "email_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cycle_id", sa.Integer(), nullable=True),
        sa.Column("application_id", sa.Integer(), nullable=True),
        sa.Column("to_email", sa.String(320), nullable=False),
        sa.Column("subject", sa.String(512), nullable=False),
        sa.Column("template", sa.String(64), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("sent_by", sa.String(320), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_email_logs_cycle_id", "cycle_id"),
        sa.Index("ix_email_logs_application_id", "application_id"),
        sa.Index("ix_email_logs_to_email", "to_email"),
        sa.Index("ix_email_logs_sent_at", "sent_at"),
    )

    # Create events table
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("slug", sa.String(128), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(256), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("attendance_confirm_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("attendance_password", sa.String(128), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("waitlist_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("waitlist_max_size", sa.Integer(), nullable=True),
        sa.Column("waitlist_auto_promote", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("required_roles_any", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_events_slug", "slug", unique=True),
        sa.Index("ix_events_published", "published"),
    )

    # Create event_attendees table
    op.create_table(
        "event_attendees",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("umich_id", sa.String(32), nullable=True),
        sa.Column("major", sa.String(128), nullable=True),
        sa.Column("year", sa.String(32), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("waitlist_position", sa.Integer(), nullable=True),
        sa.Column("check_in_code", sa.String(16), nullable=False),
        sa.Column("checked_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"]),
        sa.Index("ix_event_attendees_event_id", "event_id"),
        sa.Index("ix_event_attendees_email", "email"),
        sa.Index("ix_event_attendees_status", "status"),
        sa.Index("ix_event_attendees_check_in_code", "check_in_code"),
    )

    # Create newsletter_subscribers table
    op.create_table(
        "newsletter_subscribers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("name", sa.String(256), nullable=True),
        sa.Column("source", sa.String(64), nullable=False, server_default="website"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("subscribed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("unsubscribed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_newsletter_subscribers_email", "email", unique=True),
        sa.Index("ix_newsletter_subscribers_is_active", "is_active"),
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("newsletter_subscribers")
    op.drop_table("event_attendees")
    op.drop_table("events")
    op.drop_table("email_logs")
    op.drop_table("phase_decisions")
    op.drop_table("phase_rankings")
    op.drop_table("phase_reviews")
    op.drop_table("phase_configs")
    op.drop_table("slot_bookings")
    op.drop_table("slots")
    op.drop_table("applications")
    op.drop_table("application_questions")
    op.drop_table("recruitment_event_rsvps")
    op.drop_table("recruitment_events")
    op.drop_table("recruitment_cycles")
    op.drop_table("audit_logs")
    op.drop_table("users")
