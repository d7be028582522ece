"""initial billing schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


revision = "a1b2c3d4e5f6"
down_revision = None
branch_labels = None
depends_on = None


def _base_columns():
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("id_card", sa.String(20), nullable=True),
        sa.Column("emergency_contact", sa.String(255), nullable=True),
        sa.Column("role", sa.String(6), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("room_id", sa.Uuid(), nullable=True),
        sa.Column("move_in_date", sa.DateTime(), nullable=True),
        sa.Column("move_out_date", sa.DateTime(), nullable=True),
        sa.Column("rent_due_day", sa.Integer(), nullable=True),
        sa.Column("deposit_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("notification_preferences", sa.JSON(), nullable=False),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_role"), "users", ["role"], unique=False)
    op.create_index(op.f("ix_users_room_id"), "users", ["room_id"], unique=False)

    op.create_table(
        "rooms",
        sa.Column("room_number", sa.String(10), nullable=False),
        sa.Column("floor", sa.Integer(), nullable=True),
        sa.Column("rent_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("water_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("electricity_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_occupied", sa.Boolean(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=True),
        sa.Column("move_in_date", sa.DateTime(), nullable=True),
        sa.Column("move_out_date", sa.DateTime(), nullable=True),
        sa.Column("rent_due_day", sa.Integer(), nullable=True),
        sa.Column("deposit_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("assignment_notes", sa.Text(), nullable=True),
        *_base_columns(),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_rooms_id"), "rooms", ["id"], unique=False)
    op.create_index(op.f("ix_rooms_room_number"), "rooms", ["room_number"], unique=True)
    op.create_index(op.f("ix_rooms_is_occupied"), "rooms", ["is_occupied"], unique=False)
    op.create_index(op.f("ix_rooms_tenant_id"), "rooms", ["tenant_id"], unique=False)

    op.create_foreign_key(
        "fk_users_room_id", "users", "rooms", ["room_id"], ["id"], ondelete="SET NULL"
    )

    op.create_table(
        "bills",
        sa.Column("room_id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("rent_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("water_units", sa.Numeric(10, 2), nullable=False),
        sa.Column("water_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("electricity_units", sa.Numeric(10, 2), nullable=False),
        sa.Column("electricity_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(8), nullable=False),
        *_base_columns(),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("room_id", "month", "year", name="uq_bills_room_month_year"),
    )
    op.create_index(op.f("ix_bills_id"), "bills", ["id"], unique=False)
    op.create_index(op.f("ix_bills_room_id"), "bills", ["room_id"], unique=False)
    op.create_index(op.f("ix_bills_tenant_id"), "bills", ["tenant_id"], unique=False)
    op.create_index(op.f("ix_bills_due_date"), "bills", ["due_date"], unique=False)
    op.create_index(op.f("ix_bills_status"), "bills", ["status"], unique=False)

    op.create_table(
        "payments",
        sa.Column("bill_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("slip_image_url", sa.String(500), nullable=False),
        sa.Column("ocr_data", sa.JSON(), nullable=False),
        sa.Column("qr_data", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(8), nullable=False),
        sa.Column("verified_by", sa.Uuid(), nullable=True),
        sa.Column("verified_at", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        *_base_columns(),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["verified_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payments_id"), "payments", ["id"], unique=False)
    op.create_index(op.f("ix_payments_bill_id"), "payments", ["bill_id"], unique=False)
    op.create_index(op.f("ix_payments_user_id"), "payments", ["user_id"], unique=False)
    op.create_index(op.f("ix_payments_status"), "payments", ["status"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("bill_id", sa.Uuid(), nullable=True),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("sent_at", sa.DateTime(), nullable=False),
        sa.Column("read_at", sa.DateTime(), nullable=True),
        *_base_columns(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_notifications_id"), "notifications", ["id"], unique=False)
    op.create_index(op.f("ix_notifications_user_id"), "notifications", ["user_id"], unique=False)
    op.create_index(op.f("ix_notifications_bill_id"), "notifications", ["bill_id"], unique=False)
    op.create_index(op.f("ix_notifications_type"), "notifications", ["type"], unique=False)
    op.create_index(op.f("ix_notifications_read"), "notifications", ["read"], unique=False)
    op.create_index(op.f("ix_notifications_sent_at"), "notifications", ["sent_at"], unique=False)

    op.create_table(
        "notification_templates",
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("email_body", sa.Text(), nullable=False),
        sa.Column("in_app_title", sa.String(255), nullable=False),
        sa.Column("in_app_message", sa.Text(), nullable=False),
        sa.Column("variables", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("last_modified_by", sa.Uuid(), nullable=True),
        *_base_columns(),
        sa.ForeignKeyConstraint(["last_modified_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("type"),
    )
    op.create_index(op.f("ix_notification_templates_id"), "notification_templates", ["id"], unique=False)
    op.create_index(
        op.f("ix_notification_templates_is_active"), "notification_templates", ["is_active"], unique=False
    )

    op.create_table(
        "maintenance_requests",
        sa.Column("room_id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=True),
        sa.Column("category", sa.String(16), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(6), nullable=False),
        sa.Column("status", sa.String(11), nullable=False),
        sa.Column("reported_date", sa.DateTime(), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(), nullable=True),
        sa.Column("completed_date", sa.DateTime(), nullable=True),
        sa.Column("cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("assigned_to", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("created_by_id", sa.Uuid(), nullable=True),
        sa.Column("created_by_name", sa.String(255), nullable=False),
        sa.Column("created_by_role", sa.String(6), nullable=False),
        *_base_columns(),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_maintenance_requests_id"), "maintenance_requests", ["id"], unique=False)
    op.create_index(op.f("ix_maintenance_requests_room_id"), "maintenance_requests", ["room_id"], unique=False)
    op.create_index(op.f("ix_maintenance_requests_tenant_id"), "maintenance_requests", ["tenant_id"], unique=False)
    op.create_index(op.f("ix_maintenance_requests_category"), "maintenance_requests", ["category"], unique=False)
    op.create_index(op.f("ix_maintenance_requests_priority"), "maintenance_requests", ["priority"], unique=False)
    op.create_index(op.f("ix_maintenance_requests_status"), "maintenance_requests", ["status"], unique=False)
    op.create_index(
        op.f("ix_maintenance_requests_reported_date"), "maintenance_requests", ["reported_date"], unique=False
    )


def downgrade() -> None:
    op.drop_table("maintenance_requests")
    op.drop_table("notification_templates")
    op.drop_table("notifications")
    op.drop_table("payments")
    op.drop_table("bills")
    op.drop_constraint("fk_users_room_id", "users", type_="foreignkey")
    op.drop_table("rooms")
    op.drop_table("users")
