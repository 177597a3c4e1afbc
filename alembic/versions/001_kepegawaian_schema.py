"""Create the personnel tables

Revision ID: 001_kepegawaian_schema
Revises:
Create Date: 2026-10-18

Employees, login accounts, job history (riwayat jabatan), transfer requests
(mutasi) and open positions (posisi tersedia). Job history and transfers
cascade with their employee; accounts are unlinked instead.
"""

from alembic import op
import sqlalchemy as sa

revision = "001_kepegawaian_schema"
down_revision = None
branch_labels = None
depends_on = None

_EDUCATION = ("SD", "SMP", "SMA", "D3", "S1", "S2", "S3")
_BLOOD_TYPE = ("A", "B", "AB", "O")
_ROLE = ("admin", "employee")
_TRANSFER_STATUS = ("pending", "approved", "rejected")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("nip", sa.String(20), nullable=False),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("email", sa.String(100), nullable=True),
        sa.Column("npwp", sa.String(30), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column("education", sa.Enum(*_EDUCATION, name="education_level"), nullable=False),
        sa.Column("blood_type", sa.Enum(*_BLOOD_TYPE, name="blood_type"), nullable=False),
        sa.Column("province_id", sa.String(20), nullable=False),
        sa.Column("province_name", sa.String(100), nullable=False),
        sa.Column("city_id", sa.String(20), nullable=False),
        sa.Column("city_name", sa.String(100), nullable=False),
        sa.Column("district_id", sa.String(20), nullable=False),
        sa.Column("district_name", sa.String(100), nullable=False),
        sa.Column("village_id", sa.String(20), nullable=False),
        sa.Column("village_name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_employees_nip", "employees", ["nip"], unique=True)

    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum(*_ROLE, name="account_role"), nullable=False),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id"),
    )
    op.create_index("ix_accounts_username", "accounts", ["username"], unique=True)

    op.create_table(
        "job_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("institution", sa.String(150), nullable=False),
        sa.Column("unit", sa.String(150), nullable=False),
        sa.Column("position", sa.String(150), nullable=False),
        sa.Column("additional_position", sa.String(150), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("additional_start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_job_history_employee_start", "job_history", ["employee_id", "start_date"])

    op.create_table(
        "transfer_requests",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("origin_institution", sa.String(150), nullable=False),
        sa.Column("origin_unit", sa.String(150), nullable=False),
        sa.Column("origin_position", sa.String(150), nullable=False),
        sa.Column("destination_institution", sa.String(150), nullable=False),
        sa.Column("destination_unit", sa.String(150), nullable=False),
        sa.Column("destination_position", sa.String(150), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*_TRANSFER_STATUS, name="transfer_status"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("submitted_by", sa.Integer(), nullable=True),
        sa.Column("decided_by", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_transfer_requests_employee_id", "transfer_requests", ["employee_id"])
    op.create_index("ix_transfer_requests_status_submitted", "transfer_requests", ["status", "submitted_at"])

    op.create_table(
        "open_positions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("institution", sa.String(150), nullable=False),
        sa.Column("unit", sa.String(150), nullable=False),
        sa.Column("position", sa.String(150), nullable=False),
        sa.Column("quota", sa.Integer(), nullable=False),
        sa.Column("requirements", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("quota >= 0", name="ck_open_positions_quota_non_negative"),
    )
    op.create_index("ix_open_positions_lookup", "open_positions", ["institution", "unit", "position"])


def downgrade() -> None:
    op.drop_index("ix_open_positions_lookup", table_name="open_positions")
    op.drop_table("open_positions")
    op.drop_index("ix_transfer_requests_status_submitted", table_name="transfer_requests")
    op.drop_index("ix_transfer_requests_employee_id", table_name="transfer_requests")
    op.drop_table("transfer_requests")
    op.drop_index("ix_job_history_employee_start", table_name="job_history")
    op.drop_table("job_history")
    op.drop_index("ix_accounts_username", table_name="accounts")
    op.drop_table("accounts")
    op.drop_index("ix_employees_nip", table_name="employees")
    op.drop_table("employees")
    for enum_name in ("transfer_status", "account_role", "blood_type", "education_level"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
