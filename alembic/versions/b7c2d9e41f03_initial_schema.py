"""initial schema

Revision ID: b7c2d9e41f03
Revises:
Create Date: 2026-10-17 09:00:00.000000

This migration creates:
1. The user_role enum and the users table (guardian self-reference,
   partial unique index on lower(email) for independent accounts)
2. Catalogue tables: banners, course_categories, courses, course_classes
3. Venue tables: locations, events
4. The google_reviews cache
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "b7c2d9e41f03"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

USER_ROLES = ("ADMIN", "PARENT", "STUDENT", "STAFF")


def _base_columns() -> list[sa.Column]:
    """Primary key and timestamps (from BaseModel)."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _audit_columns() -> list[sa.Column]:
    """created_by/updated_by (from AuditMixin)."""
    return [
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("updated_by", postgresql.UUID(as_uuid=False), nullable=True),
    ]


def upgrade() -> None:
    """Create all tables."""
    user_role_enum = postgresql.ENUM(*USER_ROLES, name="user_role", create_type=False)
    user_role_enum.create(op.get_bind(), checkfirst=True)

    # Users
    op.create_table(
        "users",
        *_base_columns(),
        *_audit_columns(),
        sa.Column("account_id", sa.String(length=20), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(length=30), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("special_needs", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "specialization",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("photo_path", sa.String(length=500), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("guardian_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["guardian_id"],
            ["users.id"],
            name="fk_users_guardian_id",
            ondelete="RESTRICT",
        ),
    )
    op.create_index(op.f("ix_users_account_id"), "users", ["account_id"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=False)
    op.create_index(op.f("ix_users_guardian_id"), "users", ["guardian_id"], unique=False)
    op.create_index(
        "ix_users_dependent_identity",
        "users",
        ["guardian_id", "first_name", "last_name", "dob"],
        unique=False,
    )
    # Dependents may share their guardian's email
    op.execute(
        """
        CREATE UNIQUE INDEX uq_users_independent_email
        ON users (LOWER(email))
        WHERE guardian_id IS NULL
        """
    )

    # Banners
    op.create_table(
        "banners",
        *_base_columns(),
        *_audit_columns(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("subtitle", sa.Text(), nullable=True),
        sa.Column("media_url", sa.String(length=1000), nullable=False),
        sa.Column("media_type", sa.String(length=100), nullable=False),
        sa.Column("button1_text", sa.String(length=100), nullable=True),
        sa.Column("button1_link", sa.String(length=1000), nullable=True),
        sa.Column("button2_text", sa.String(length=100), nullable=True),
        sa.Column("button2_link", sa.String(length=1000), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )

    # Course categories
    op.create_table(
        "course_categories",
        *_base_columns(),
        *_audit_columns(),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.execute("CREATE UNIQUE INDEX uq_course_categories_name ON course_categories (LOWER(name))")

    # Courses
    op.create_table(
        "courses",
        *_base_columns(),
        *_audit_columns(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("category_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("age_range", sa.String(length=50), nullable=True),
        sa.Column("media_url", sa.String(length=1000), nullable=False),
        sa.Column("media_type", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["course_categories.id"],
            name="fk_courses_category_id",
            ondelete="RESTRICT",
        ),
    )
    op.create_index(op.f("ix_courses_title"), "courses", ["title"], unique=False)
    op.create_index(op.f("ix_courses_category_id"), "courses", ["category_id"], unique=False)

    # Locations
    op.create_table(
        "locations",
        *_base_columns(),
        *_audit_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("address_line1", sa.String(length=255), nullable=False),
        sa.Column("address_line2", sa.String(length=255), nullable=True),
        sa.Column("suburb", sa.String(length=100), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=False),
        sa.Column("state", sa.String(length=100), nullable=False),
        sa.Column("country", sa.String(length=100), nullable=False, server_default="Australia"),
        sa.Column("postcode", sa.String(length=20), nullable=False),
        sa.Column(
            "rooms",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_locations_is_active"), "locations", ["is_active"], unique=False)

    # Course classes
    op.create_table(
        "course_classes",
        *_base_columns(),
        *_audit_columns(),
        sa.Column("course_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("location_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("tutor_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("term", sa.String(length=50), nullable=False),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("room", sa.String(length=100), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("available_seats", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"], name="fk_course_classes_course_id", ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["location_id"],
            ["locations.id"],
            name="fk_course_classes_location_id",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["tutor_id"], ["users.id"], name="fk_course_classes_tutor_id", ondelete="RESTRICT"
        ),
    )
    for column in ("course_id", "location_id", "tutor_id"):
        op.create_index(
            op.f(f"ix_course_classes_{column}"), "course_classes", [column], unique=False
        )

    # Events
    op.create_table(
        "events",
        *_base_columns(),
        *_audit_columns(),
        sa.Column("location_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("category_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("media_url", sa.String(length=1000), nullable=False),
        sa.Column("media_type", sa.String(length=100), nullable=False),
        sa.Column("can_enroll", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column(
            "timezone",
            sa.String(length=64),
            nullable=False,
            server_default="Australia/Melbourne",
        ),
        sa.Column("room", sa.String(length=100), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("available_seats", sa.Integer(), nullable=False),
        sa.Column("fees", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["location_id"], ["locations.id"], name="fk_events_location_id", ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["course_categories.id"],
            name="fk_events_category_id",
            ondelete="RESTRICT",
        ),
    )
    op.create_index(op.f("ix_events_location_id"), "events", ["location_id"], unique=False)
    op.create_index(op.f("ix_events_category_id"), "events", ["category_id"], unique=False)
    op.create_index(op.f("ix_events_start_date"), "events", ["start_date"], unique=False)
    op.create_index(op.f("ix_events_is_active"), "events", ["is_active"], unique=False)

    # Google review cache
    op.create_table(
        "google_reviews",
        *_base_columns(),
        sa.Column("author_name", sa.String(length=255), nullable=True),
        sa.Column("author_uri", sa.String(length=1000), nullable=True),
        sa.Column("author_photo_url", sa.String(length=1000), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("relative_time", sa.String(length=100), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("synced_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Drop all tables and the user_role enum."""
    op.drop_table("google_reviews")

    op.drop_index(op.f("ix_events_is_active"), table_name="events")
    op.drop_index(op.f("ix_events_start_date"), table_name="events")
    op.drop_index(op.f("ix_events_category_id"), table_name="events")
    op.drop_index(op.f("ix_events_location_id"), table_name="events")
    op.drop_table("events")

    for column in ("course_id", "location_id", "tutor_id"):
        op.drop_index(op.f(f"ix_course_classes_{column}"), table_name="course_classes")
    op.drop_table("course_classes")

    op.drop_index(op.f("ix_locations_is_active"), table_name="locations")
    op.drop_table("locations")

    op.drop_index(op.f("ix_courses_category_id"), table_name="courses")
    op.drop_index(op.f("ix_courses_title"), table_name="courses")
    op.drop_table("courses")

    op.execute("DROP INDEX IF EXISTS uq_course_categories_name")
    op.drop_table("course_categories")

    op.drop_table("banners")

    op.execute("DROP INDEX IF EXISTS uq_users_independent_email")
    op.drop_index("ix_users_dependent_identity", table_name="users")
    op.drop_index(op.f("ix_users_guardian_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_account_id"), table_name="users")
    op.drop_table("users")

    user_role_enum = postgresql.ENUM(*USER_ROLES, name="user_role")
    user_role_enum.drop(op.get_bind(), checkfirst=True)
