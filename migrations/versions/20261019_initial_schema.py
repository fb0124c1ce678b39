"""Initial conference registration schema."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

USER_ROLES = (
    "participant", "registration_manager", "event_organizer", "group_leader",
    "regional_admin", "super_admin", "cashier_role",
)
REGIONS = (
    "kanto", "kansai", "chubu", "kyushu", "chugoku", "shikoku", "tohoku", "hokkaido",
)
REGISTRATION_STATUSES = (
    "pending", "report_paid", "confirm_paid", "payment_rejected", "donation",
    "cancel_pending", "cancel_accepted", "cancel_rejected", "cancel_processed",
    "cancelled", "be_cancelled", "confirmed", "temp_confirmed", "checked_in",
    "checked_out",
)
AGE_GROUPS = ("under_12", "12_17", "18_25", "26_35", "36_50", "over_50")


def _uuid(name="id", **kwargs):
    return sa.Column(name, sa.String(36), **kwargs)


def _timestamps(updated=True):
    cols = [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
    ]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False,
                              server_default=sa.func.now()))
    return cols


def upgrade():
    op.create_table(
        "users",
        _uuid(primary_key=True),
        sa.Column("email", sa.String(120), nullable=False, unique=True),
        sa.Column("full_name", sa.String(120)),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum(*USER_ROLES, name="user_role"), nullable=False,
                  server_default="participant"),
        sa.Column("region", sa.Enum(*REGIONS, name="region_type")),
        sa.Column("province", sa.String(100)),
        sa.Column("facebook_url", sa.String(255)),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "event_configs",
        _uuid(primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("start_date", sa.DateTime(timezone=True)),
        sa.Column("end_date", sa.DateTime(timezone=True)),
        sa.Column("base_price", sa.Integer(), nullable=False, server_default="6000"),
        sa.Column("cancellation_deadline", sa.DateTime(timezone=True)),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("total_slots", sa.Integer()),
        *_timestamps(),
    )

    op.create_table(
        "event_roles",
        _uuid(primary_key=True),
        _uuid("event_config_id", nullable=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("team_name", sa.String(100)),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["event_config_id"], ["event_configs.id"]),
    )

    op.create_table(
        "event_teams",
        _uuid(primary_key=True),
        _uuid("event_config_id", nullable=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("capacity", sa.Integer()),
        _uuid("leader_id"),
        _uuid("sub_leader_id"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_config_id"], ["event_configs.id"]),
        sa.ForeignKeyConstraint(["leader_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["sub_leader_id"], ["users.id"]),
    )

    op.create_table(
        "registrations",
        _uuid(primary_key=True),
        _uuid("user_id", nullable=False),
        _uuid("event_config_id", nullable=True),
        sa.Column("invoice_code", sa.String(40), nullable=False, unique=True),
        sa.Column("status", sa.Enum(*REGISTRATION_STATUSES, name="registration_status"),
                  nullable=False, server_default="pending"),
        sa.Column("total_amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("participant_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["event_config_id"], ["event_configs.id"]),
    )

    op.create_table(
        "registrants",
        _uuid(primary_key=True),
        _uuid("registration_id", nullable=False),
        sa.Column("email", sa.String(120)),
        sa.Column("saint_name", sa.String(100)),
        sa.Column("full_name", sa.String(150), nullable=False),
        sa.Column("gender", sa.Enum("male", "female", "other", name="gender_type"),
                  nullable=False),
        sa.Column("age_group", sa.Enum(*AGE_GROUPS, name="age_group_type"), nullable=False),
        sa.Column("province", sa.String(100)),
        sa.Column("diocese", sa.String(100)),
        sa.Column("address", sa.String(255)),
        sa.Column("phone", sa.String(30)),
        sa.Column("facebook_link", sa.String(255)),
        sa.Column("shirt_size", sa.String(10), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("second_day_only", sa.Boolean(), nullable=False, server_default=sa.false()),
        _uuid("event_role_id"),
        _uuid("event_team_id"),
        sa.Column("portrait_url", sa.String(500)),
        sa.Column("notes", sa.Text()),
        sa.Column("is_checked_in", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("checked_in_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.ForeignKeyConstraint(["registration_id"], ["registrations.id"]),
        sa.ForeignKeyConstraint(["event_role_id"], ["event_roles.id"]),
        sa.ForeignKeyConstraint(["event_team_id"], ["event_teams.id"]),
    )
    op.create_index("ix_registrants_registration_id", "registrants", ["registration_id"])
    op.create_index("ix_registrants_event_team_id", "registrants", ["event_team_id"])

    op.create_table(
        "receipts",
        _uuid(primary_key=True),
        _uuid("registration_id", nullable=False),
        sa.Column("file_path", sa.String(500), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("amount", sa.Integer()),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["registration_id"], ["registrations.id"]),
    )

    op.create_table(
        "tickets",
        _uuid(primary_key=True),
        _uuid("registrant_id", nullable=False, unique=True),
        sa.Column("qr_code", sa.String(255), nullable=False, unique=True),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["registrant_id"], ["registrants.id"]),
    )

    op.create_table(
        "cancel_requests",
        _uuid(primary_key=True),
        _uuid("registration_id", nullable=False),
        _uuid("user_id", nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("request_type", sa.Enum("refund", "donation", name="cancel_request_type"),
                  nullable=False, server_default="refund"),
        sa.Column("bank_account_number", sa.String(50)),
        sa.Column("bank_name", sa.String(100)),
        sa.Column("account_holder_name", sa.String(100)),
        sa.Column("refund_amount", sa.Integer()),
        sa.Column("status", sa.Enum("pending", "approved", "rejected", "processed",
                                    name="cancel_request_status"),
                  nullable=False, server_default="pending"),
        sa.Column("admin_notes", sa.Text()),
        _uuid("processed_by"),
        sa.Column("processed_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.ForeignKeyConstraint(["registration_id"], ["registrations.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["processed_by"], ["users.id"]),
    )
    op.create_index("ix_cancel_requests_registration_id", "cancel_requests",
                    ["registration_id"])

    op.create_table(
        "expense_requests",
        _uuid(primary_key=True),
        _uuid("event_config_id", nullable=True),
        _uuid("user_id", nullable=False),
        sa.Column("request_type", sa.Enum("reimbursement", "advance",
                                          name="expense_request_type"), nullable=False),
        sa.Column("purpose", sa.Text(), nullable=False),
        sa.Column("amount_requested", sa.Integer(), nullable=False),
        sa.Column("amount_approved", sa.Integer()),
        sa.Column("bank_account_name", sa.String(100)),
        sa.Column("bank_name", sa.String(100)),
        sa.Column("bank_branch", sa.String(100)),
        sa.Column("account_number", sa.String(50)),
        sa.Column("transfer_fee", sa.Integer(), server_default="0"),
        sa.Column("notes", sa.Text()),
        sa.Column("status", sa.Enum("submitted", "approved", "rejected", "transferred",
                                    "closed", name="expense_status"),
                  nullable=False, server_default="submitted"),
        _uuid("approved_by"),
        sa.Column("approved_at", sa.DateTime(timezone=True)),
        _uuid("processed_by"),
        sa.Column("processed_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_config_id"], ["event_configs.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["approved_by"], ["users.id"]),
        sa.ForeignKeyConstraint(["processed_by"], ["users.id"]),
    )
    op.create_index("ix_expense_requests_user_id", "expense_requests", ["user_id"])

    op.create_table(
        "donations",
        _uuid(primary_key=True),
        _uuid("event_config_id", nullable=True),
        sa.Column("donor_name", sa.String(150), nullable=False),
        sa.Column("contact", sa.String(150)),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("public_identity", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("note", sa.Text()),
        sa.Column("status", sa.Enum("pledged", "received", name="donation_status"),
                  nullable=False, server_default="pledged"),
        sa.Column("received_at", sa.DateTime(timezone=True)),
        _uuid("created_by"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_config_id"], ["event_configs.id"]),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
    )

    op.create_table(
        "income_sources",
        _uuid(primary_key=True),
        _uuid("event_config_id", nullable=True),
        sa.Column("category", sa.Enum("ticket_sales", "merchandise", "food_beverage", "other",
                                      name="income_category"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("expected_amount", sa.Integer()),
        sa.Column("status", sa.Enum("pending", "received", "overdue", name="income_status"),
                  nullable=False, server_default="pending"),
        sa.Column("contact_person", sa.String(150)),
        sa.Column("contact_info", sa.String(150)),
        sa.Column("due_date", sa.Date()),
        sa.Column("received_date", sa.Date()),
        sa.Column("notes", sa.Text()),
        _uuid("created_by"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_config_id"], ["event_configs.id"]),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
    )

    op.create_table(
        "event_logs",
        _uuid(primary_key=True),
        sa.Column("event_type", sa.String(50), nullable=False),
        _uuid("user_id"),
        _uuid("target_id"),
        sa.Column("target_type", sa.String(50)),
        sa.Column("details", sa.JSON()),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("ix_event_logs_event_type", "event_logs", ["event_type"])


def downgrade():
    op.drop_index("ix_event_logs_event_type", table_name="event_logs")
    op.drop_table("event_logs")
    op.drop_table("income_sources")
    op.drop_table("donations")
    op.drop_index("ix_expense_requests_user_id", table_name="expense_requests")
    op.drop_table("expense_requests")
    op.drop_index("ix_cancel_requests_registration_id", table_name="cancel_requests")
    op.drop_table("cancel_requests")
    op.drop_table("tickets")
    op.drop_table("receipts")
    op.drop_index("ix_registrants_event_team_id", table_name="registrants")
    op.drop_index("ix_registrants_registration_id", table_name="registrants")
    op.drop_table("registrants")
    op.drop_table("registrations")
    op.drop_table("event_teams")
    op.drop_table("event_roles")
    op.drop_table("event_configs")
    op.drop_table("users")
