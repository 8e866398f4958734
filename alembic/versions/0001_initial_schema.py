"""Initial household medication schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def _soft_delete() -> sa.Column:
    return sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default="0")


def upgrade() -> None:
    op.create_table(
        "households",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("timezone", sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_households_slug"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "household_id",
            sa.Integer(),
            sa.ForeignKey("households.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("last_name", sa.String(length=120), nullable=False),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "SUSPENDED", name="userstatus"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_household_id", "users", ["household_id"])

    op.create_table(
        "people",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "household_id",
            sa.Integer(),
            sa.ForeignKey("households.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("first_name", sa.String(length=200), nullable=False),
        sa.Column("last_name", sa.String(length=200), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        _soft_delete(),
        *_timestamps(),
    )
    op.create_index(
        "ix_people_household_name", "people", ["household_id", "last_name", "first_name"]
    )

    op.create_table(
        "medications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "person_id",
            sa.Integer(),
            sa.ForeignKey("people.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("dosage", sa.String(length=120), nullable=False),
        sa.Column("instructions", sa.Text(), nullable=False),
        sa.Column("prescribing_doctor", sa.String(length=200), nullable=False),
        sa.Column("pharmacy", sa.String(length=200), nullable=False),
        sa.Column("prescription_date", sa.Date(), nullable=True),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.Column("refills_authorized", sa.Integer(), nullable=False),
        sa.Column("refills_remaining", sa.Integer(), nullable=False),
        sa.Column("current_supply", sa.Integer(), nullable=False),
        sa.Column("low_supply_threshold", sa.Integer(), nullable=False),
        sa.Column("pills_per_dose", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        _soft_delete(),
        *_timestamps(),
    )
    op.create_index("ix_medications_person_id", "medications", ["person_id"])

    op.create_table(
        "schedule_rules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "medication_id",
            sa.Integer(),
            sa.ForeignKey("medications.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("schedule_type", sa.String(length=32), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("times_of_day", sa.String(length=512), nullable=True),
        sa.Column("interval_amount", sa.Integer(), nullable=True),
        sa.Column("interval_unit", sa.String(length=16), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=False), nullable=True),
        sa.Column("days_of_week", sa.String(length=128), nullable=True),
        sa.Column("time_of_day", sa.Integer(), nullable=True),
        sa.Column("minimum_hours_between_doses", sa.Integer(), nullable=True),
        sa.Column("last_dose_at", sa.DateTime(timezone=False), nullable=True),
        _soft_delete(),
        *_timestamps(),
    )
    op.create_index("ix_schedule_rules_medication_id", "schedule_rules", ["medication_id"])


def downgrade() -> None:
    op.drop_index("ix_schedule_rules_medication_id", table_name="schedule_rules")
    op.drop_table("schedule_rules")
    op.drop_index("ix_medications_person_id", table_name="medications")
    op.drop_table("medications")
    op.drop_index("ix_people_household_name", table_name="people")
    op.drop_table("people")
    op.drop_index("ix_users_household_id", table_name="users")
    op.drop_table("users")
    op.drop_table("households")
    sa.Enum(name="userstatus").drop(op.get_bind(), checkfirst=True)
