"""Initial portfolio schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "20261019_01_initial"
down_revision = None
branch_labels = None
depends_on = None

STRING_LIST = sa.JSON().with_variant(postgresql.ARRAY(sa.String()), "postgresql")


def _owner_column() -> sa.Column:
    return sa.Column(
        "user_id",
        sa.Uuid(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("full_name", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_sign_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "profiles",
        sa.Column(
            "id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("full_name", sa.Text(), nullable=True),
        sa.Column("username", sa.String(30), nullable=True),
        sa.Column("headline", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("github", sa.Text(), nullable=True),
        sa.Column("linkedin", sa.Text(), nullable=True),
        sa.Column("twitter", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("selected_template", sa.String(32), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("username", name="uq_profiles_username"),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner_column(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("project_url", sa.Text(), nullable=True),
        sa.Column("github_url", sa.Text(), nullable=True),
        sa.Column("technologies", STRING_LIST, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_projects_user_created", "projects", ["user_id", "created_at"])

    op.create_table(
        "education",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner_column(),
        sa.Column("institution", sa.Text(), nullable=False),
        sa.Column("degree", sa.Text(), nullable=False),
        sa.Column("field_of_study", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("current_education", sa.Boolean(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_education_user_start", "education", ["user_id", "start_date"])

    op.create_table(
        "experience",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner_column(),
        sa.Column("company", sa.Text(), nullable=False),
        sa.Column("position", sa.Text(), nullable=False),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("current_job", sa.Boolean(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_experience_user_start", "experience", ["user_id", "start_date"])

    op.create_table(
        "blogs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner_column(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("slug", sa.String(256), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_blogs_user_created", "blogs", ["user_id", "created_at"])
    op.create_index("idx_blogs_user_slug", "blogs", ["user_id", "slug"])


def downgrade() -> None:
    op.drop_index("idx_blogs_user_slug", table_name="blogs")
    op.drop_index("idx_blogs_user_created", table_name="blogs")
    op.drop_table("blogs")
    op.drop_index("idx_experience_user_start", table_name="experience")
    op.drop_table("experience")
    op.drop_index("idx_education_user_start", table_name="education")
    op.drop_table("education")
    op.drop_index("idx_projects_user_created", table_name="projects")
    op.drop_table("projects")
    op.drop_table("profiles")
    op.drop_table("users")
