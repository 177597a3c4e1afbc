"""ORM models for the five personnel tables."""

import enum
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Role(str, enum.Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class Education(str, enum.Enum):
    SD = "SD"
    SMP = "SMP"
    SMA = "SMA"
    D3 = "D3"
    S1 = "S1"
    S2 = "S2"
    S3 = "S3"


class BloodType(str, enum.Enum):
    A = "A"
    B = "B"
    AB = "AB"
    O = "O"


class TransferStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


class Employee(TimestampMixin, Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nip: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(100))
    npwp: Mapped[str] = mapped_column(String(30), nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)
    education: Mapped[Education] = mapped_column(
        Enum(Education, name="education_level", values_callable=_values), nullable=False
    )
    blood_type: Mapped[BloodType] = mapped_column(
        Enum(BloodType, name="blood_type", values_callable=_values), nullable=False
    )

    # Address, denormalized from the wilayah.id hierarchy at data-entry time.
    province_id: Mapped[str] = mapped_column(String(20), nullable=False)
    province_name: Mapped[str] = mapped_column(String(100), nullable=False)
    city_id: Mapped[str] = mapped_column(String(20), nullable=False)
    city_name: Mapped[str] = mapped_column(String(100), nullable=False)
    district_id: Mapped[str] = mapped_column(String(20), nullable=False)
    district_name: Mapped[str] = mapped_column(String(100), nullable=False)
    village_id: Mapped[str] = mapped_column(String(20), nullable=False)
    village_name: Mapped[str] = mapped_column(String(100), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Account(TimestampMixin, Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(Enum(Role, name="account_role", values_callable=_values), nullable=False)
    employee_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("employees.id", ondelete="SET NULL"), unique=True
    )


class JobHistoryRecord(TimestampMixin, Base):
    __tablename__ = "job_history"
    __table_args__ = (Index("ix_job_history_employee_start", "employee_id", "start_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    institution: Mapped[str] = mapped_column(String(150), nullable=False)  # satuan kerja
    unit: Mapped[str] = mapped_column(String(150), nullable=False)  # unit kerja
    position: Mapped[str] = mapped_column(String(150), nullable=False)  # jabatan utama
    additional_position: Mapped[Optional[str]] = mapped_column(String(150))
    start_date: Mapped[date] = mapped_column(Date, nullable=False)  # TMT jabatan
    additional_start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
    notes: Mapped[Optional[str]] = mapped_column(Text)


class TransferRequest(TimestampMixin, Base):
    __tablename__ = "transfer_requests"
    __table_args__ = (Index("ix_transfer_requests_status_submitted", "status", "submitted_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Snapshotted as text so old requests stay readable after registry edits.
    origin_institution: Mapped[str] = mapped_column(String(150), nullable=False)
    origin_unit: Mapped[str] = mapped_column(String(150), nullable=False)
    origin_position: Mapped[str] = mapped_column(String(150), nullable=False)
    destination_institution: Mapped[str] = mapped_column(String(150), nullable=False)
    destination_unit: Mapped[str] = mapped_column(String(150), nullable=False)
    destination_position: Mapped[str] = mapped_column(String(150), nullable=False)

    reason: Mapped[str] = mapped_column(Text, nullable=False)
    effective_date: Mapped[Optional[date]] = mapped_column(Date)
    status: Mapped[TransferStatus] = mapped_column(
        Enum(TransferStatus, name="transfer_status", values_callable=_values),
        default=TransferStatus.PENDING,
        nullable=False,
    )
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    decided_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    admin_notes: Mapped[Optional[str]] = mapped_column(Text)
    submitted_by: Mapped[Optional[int]] = mapped_column(Integer)
    decided_by: Mapped[Optional[int]] = mapped_column(Integer)


class OpenPosition(TimestampMixin, Base):
    __tablename__ = "open_positions"
    __table_args__ = (
        CheckConstraint("quota >= 0", name="ck_open_positions_quota_non_negative"),
        Index("ix_open_positions_lookup", "institution", "unit", "position"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    institution: Mapped[str] = mapped_column(String(150), nullable=False)
    unit: Mapped[str] = mapped_column(String(150), nullable=False)
    position: Mapped[str] = mapped_column(String(150), nullable=False)
    quota: Mapped[int] = mapped_column(Integer, nullable=False)  # kuota tersedia
    requirements: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
