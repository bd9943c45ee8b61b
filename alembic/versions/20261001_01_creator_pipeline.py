"""
Creator pipeline schema.

- users / audit_logs (identity mirror + audit trail)
- creator_settings singleton, creator_profiles, creator_requests,
  creator_strikes, daily_upload_tracking, creator_notifications
- canonical catalog: movies, series, seasons, episodes
- content_submissions + submission_episodes
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# Revision identifiers, used by Alembic.
revision = "20261001_01_creator_pipeline"
down_revision = None
branch_labels = None
depends_on = None


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # --- Accounts & audit ---
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=16), server_default="USER", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.CheckConstraint("length(trim(email)) > 0", name="ck_users_email_not_blank"),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_audit_logs_user_id_users"), nullable=True),
        sa.Column("request_id", sa.String(length=128), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=1024), nullable=True),
        sa.Column("metadata", _json(), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_audit_logs"),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_request_id", "audit_logs", ["request_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_user_occurred", "audit_logs", ["user_id", "occurred_at"])
    op.create_index("ix_audit_logs_action_status_occurred", "audit_logs", ["action", "status", "occurred_at"])

    # --- Creator program ---
    op.create_table(
        "creator_settings",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("min_account_age_days", sa.Integer(), server_default=sa.text("30"), nullable=False),
        sa.Column("max_account_age_days", sa.Integer(), server_default=sa.text("90"), nullable=False),
        sa.Column("default_daily_upload_limit", sa.Integer(), server_default=sa.text("4"), nullable=False),
        sa.Column("default_daily_storage_limit_gb", sa.Numeric(10, 3), server_default=sa.text("8"), nullable=False),
        sa.Column("max_strikes_before_suspension", sa.Integer(), server_default=sa.text("3"), nullable=False),
        sa.Column("auto_approve_new_creators", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_creator_system_enabled", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_creator_settings"),
        sa.CheckConstraint("id = 1", name="ck_creator_settings_singleton"),
        sa.CheckConstraint("min_account_age_days >= 0", name="ck_creator_settings_min_age_ge_0"),
        sa.CheckConstraint("max_account_age_days >= min_account_age_days", name="ck_creator_settings_age_window_order"),
        sa.CheckConstraint("max_strikes_before_suspension >= 1", name="ck_creator_settings_max_strikes_ge_1"),
    )

    op.create_table(
        "creator_profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_creator_profiles_user_id_users"), nullable=False),
        sa.Column("status", sa.String(length=16), server_default="active", nullable=False),
        sa.Column("suspended_reason", sa.Text(), nullable=True),
        sa.Column("daily_upload_limit", sa.Integer(), server_default=sa.text("4"), nullable=False),
        sa.Column("daily_storage_limit_gb", sa.Numeric(10, 3), server_default=sa.text("8"), nullable=False),
        sa.Column("is_auto_approve_enabled", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("total_uploads", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_views", sa.BigInteger(), server_default=sa.text("0"), nullable=False),
        sa.Column("approved_by", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_creator_profiles_approved_by_users"), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_creator_profiles"),
        sa.UniqueConstraint("user_id", name="uq_creator_profiles_user_id"),
        sa.CheckConstraint("daily_upload_limit >= 0", name="ck_creator_profiles_upload_limit_ge_0"),
        sa.CheckConstraint("daily_storage_limit_gb >= 0", name="ck_creator_profiles_storage_limit_ge_0"),
        sa.CheckConstraint("total_uploads >= 0", name="ck_creator_profiles_total_uploads_ge_0"),
        sa.CheckConstraint("total_views >= 0", name="ck_creator_profiles_total_views_ge_0"),
    )
    op.create_index("ix_creator_profiles_status", "creator_profiles", ["status"])

    op.create_table(
        "creator_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_creator_requests_user_id_users"), nullable=False),
        sa.Column("status", sa.String(length=16), server_default="pending", nullable=False),
        sa.Column("account_age_days", sa.Integer(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_creator_requests_reviewed_by_users"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_creator_requests"),
    )
    op.create_index("ix_creator_requests_user_id", "creator_requests", ["user_id"])
    op.create_index("ix_creator_requests_status_created", "creator_requests", ["status", "created_at"])
    op.create_index(
        "uq_creator_requests_user_pending",
        "creator_requests",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
        sqlite_where=sa.text("status = 'pending'"),
    )

    op.create_table(
        "creator_strikes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("creator_id", sa.Uuid(), sa.ForeignKey("creator_profiles.id", ondelete="CASCADE", name="fk_creator_strikes_creator_id_creator_profiles"), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("issued_by", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_creator_strikes_issued_by_users"), nullable=True),
        sa.Column("issued_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_creator_strikes"),
    )
    op.create_index("ix_creator_strikes_creator_issued", "creator_strikes", ["creator_id", "issued_at"])

    op.create_table(
        "daily_upload_tracking",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("creator_id", sa.Uuid(), sa.ForeignKey("creator_profiles.id", ondelete="CASCADE", name="fk_daily_upload_tracking_creator_id_creator_profiles"), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("uploads_today", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("storage_used_today_gb", sa.Numeric(12, 3), server_default=sa.text("0"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_daily_upload_tracking"),
        sa.UniqueConstraint("creator_id", "day", name="uq_daily_upload_tracking_creator_day"),
        sa.CheckConstraint("uploads_today >= 0", name="ck_daily_upload_tracking_uploads_ge_0"),
        sa.CheckConstraint("storage_used_today_gb >= 0", name="ck_daily_upload_tracking_storage_ge_0"),
    )

    # --- Canonical catalog ---
    op.create_table(
        "movies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=320), nullable=False),
        sa.Column("slug", sa.String(length=320), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("genre", sa.String(length=64), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("poster_url", sa.String(length=2048), nullable=False),
        sa.Column("banner_url", sa.String(length=2048), nullable=True),
        sa.Column("video_url", sa.String(length=2048), nullable=False),
        sa.Column("views", sa.BigInteger(), server_default=sa.text("0"), nullable=False),
        sa.Column("is_featured", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_trending", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("creator_id", sa.Uuid(), sa.ForeignKey("creator_profiles.id", ondelete="SET NULL", name="fk_movies_creator_id_creator_profiles"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_movies"),
        sa.UniqueConstraint("title", name="uq_movies_title"),
        sa.UniqueConstraint("slug", name="uq_movies_slug"),
        sa.CheckConstraint("length(trim(slug)) > 0", name="ck_movies_slug_not_blank"),
        sa.CheckConstraint("views >= 0", name="ck_movies_views_ge_0"),
    )
    op.create_index("ix_movies_creator_id", "movies", ["creator_id"])

    op.create_table(
        "series",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=320), nullable=False),
        sa.Column("slug", sa.String(length=320), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("genre", sa.String(length=64), nullable=False),
        sa.Column("release_year", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=16), server_default="ongoing", nullable=False),
        sa.Column("poster_url", sa.String(length=2048), nullable=False),
        sa.Column("banner_url", sa.String(length=2048), nullable=True),
        sa.Column("total_seasons", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_episodes", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("views", sa.BigInteger(), server_default=sa.text("0"), nullable=False),
        sa.Column("creator_id", sa.Uuid(), sa.ForeignKey("creator_profiles.id", ondelete="SET NULL", name="fk_series_creator_id_creator_profiles"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_series"),
        sa.UniqueConstraint("title", name="uq_series_title"),
        sa.UniqueConstraint("slug", name="uq_series_slug"),
        sa.CheckConstraint("length(trim(slug)) > 0", name="ck_series_slug_not_blank"),
        sa.CheckConstraint("total_seasons >= 0", name="ck_series_total_seasons_ge_0"),
        sa.CheckConstraint("total_episodes >= 0", name="ck_series_total_episodes_ge_0"),
    )
    op.create_index("ix_series_creator_id", "series", ["creator_id"])

    op.create_table(
        "seasons",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("series_id", sa.Uuid(), sa.ForeignKey("series.id", ondelete="CASCADE", name="fk_seasons_series_id_series"), nullable=False),
        sa.Column("season_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("total_episodes", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_seasons"),
        sa.UniqueConstraint("series_id", "season_number", name="uq_seasons_series_num"),
        sa.CheckConstraint("season_number >= 1", name="ck_seasons_num_ge_1"),
        sa.CheckConstraint("total_episodes >= 0", name="ck_seasons_total_episodes_ge_0"),
    )
    op.create_index("ix_seasons_series_id", "seasons", ["series_id"])

    op.create_table(
        "episodes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("season_id", sa.Uuid(), sa.ForeignKey("seasons.id", ondelete="CASCADE", name="fk_episodes_season_id_seasons"), nullable=False),
        sa.Column("series_id", sa.Uuid(), sa.ForeignKey("series.id", ondelete="CASCADE", name="fk_episodes_series_id_series"), nullable=False),
        sa.Column("episode_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("video_url", sa.String(length=2048), nullable=False),
        sa.Column("thumbnail_url", sa.String(length=2048), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), server_default=sa.text("45"), nullable=False),
        sa.Column("views", sa.BigInteger(), server_default=sa.text("0"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_episodes"),
        sa.UniqueConstraint("season_id", "episode_number", name="uq_episodes_season_num"),
        sa.CheckConstraint("episode_number >= 1", name="ck_episodes_num_ge_1"),
        sa.CheckConstraint("duration_minutes >= 0", name="ck_episodes_duration_ge_0"),
    )
    op.create_index("ix_episodes_season_id", "episodes", ["season_id"])
    op.create_index("ix_episodes_series_id", "episodes", ["series_id"])

    # --- Submissions ---
    op.create_table(
        "content_submissions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("creator_id", sa.Uuid(), sa.ForeignKey("creator_profiles.id", ondelete="CASCADE", name="fk_content_submissions_creator_id_creator_profiles"), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("genre", sa.String(length=64), nullable=False),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("thumbnail_url", sa.String(length=2048), nullable=False),
        sa.Column("video_url", sa.String(length=2048), nullable=True),
        sa.Column("banner_url", sa.String(length=2048), nullable=True),
        sa.Column("series_data", _json(), nullable=True),
        sa.Column("file_size_gb", sa.Numeric(12, 3), server_default=sa.text("0"), nullable=False),
        sa.Column("status", sa.String(length=16), server_default="pending", nullable=False),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_content_submissions_reviewed_by_users"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published_movie_id", sa.Uuid(), sa.ForeignKey("movies.id", ondelete="SET NULL", name="fk_content_submissions_published_movie_id_movies"), nullable=True),
        sa.Column("published_series_id", sa.Uuid(), sa.ForeignKey("series.id", ondelete="SET NULL", name="fk_content_submissions_published_series_id_series"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_content_submissions"),
        sa.CheckConstraint("length(trim(title)) > 0", name="ck_content_submissions_title_not_blank"),
        sa.CheckConstraint("(type <> 'movie') OR (video_url IS NOT NULL)", name="ck_content_submissions_movie_has_video"),
        sa.CheckConstraint(
            "(published_movie_id IS NULL) OR (published_series_id IS NULL)",
            name="ck_content_submissions_single_publication",
        ),
        sa.CheckConstraint("file_size_gb >= 0", name="ck_content_submissions_file_size_ge_0"),
    )
    op.create_index("ix_content_submissions_status_created", "content_submissions", ["status", "created_at"])
    op.create_index("ix_content_submissions_creator_created", "content_submissions", ["creator_id", "created_at"])

    op.create_table(
        "submission_episodes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("submission_id", sa.Uuid(), sa.ForeignKey("content_submissions.id", ondelete="CASCADE", name="fk_submission_episodes_submission_id_content_submissions"), nullable=False),
        sa.Column("season_number", sa.Integer(), nullable=False),
        sa.Column("episode_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("video_url", sa.String(length=2048), nullable=False),
        sa.Column("thumbnail_url", sa.String(length=2048), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("file_size_gb", sa.Numeric(12, 3), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_submission_episodes"),
        sa.UniqueConstraint(
            "submission_id", "season_number", "episode_number",
            name="uq_submission_episodes_submission_season_episode",
        ),
        sa.CheckConstraint("season_number >= 1", name="ck_submission_episodes_season_ge_1"),
        sa.CheckConstraint("episode_number >= 1", name="ck_submission_episodes_episode_ge_1"),
    )
    op.create_index("ix_submission_episodes_submission_id", "submission_episodes", ["submission_id"])

    op.create_table(
        "creator_notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_creator_notifications_user_id_users"), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("submission_id", sa.Uuid(), sa.ForeignKey("content_submissions.id", ondelete="SET NULL", name="fk_creator_notifications_submission_id_content_submissions"), nullable=True),
        sa.Column("is_read", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_creator_notifications"),
    )
    op.create_index(
        "ix_creator_notifications_user_read_created",
        "creator_notifications",
        ["user_id", "is_read", "created_at"],
    )


def downgrade() -> None:
    op.drop_table("creator_notifications")
    op.drop_table("submission_episodes")
    op.drop_table("content_submissions")
    op.drop_table("episodes")
    op.drop_table("seasons")
    op.drop_table("series")
    op.drop_table("movies")
    op.drop_table("daily_upload_tracking")
    op.drop_table("creator_strikes")
    op.drop_index("uq_creator_requests_user_pending", table_name="creator_requests")
    op.drop_table("creator_requests")
    op.drop_table("creator_profiles")
    op.drop_table("creator_settings")
    op.drop_table("audit_logs")
    op.drop_table("users")
