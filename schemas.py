"""Request/response contracts for the HTTP API.

Update payloads are patches: a field left out of the JSON body is untouched,
a field sent as ``null`` is cleared (where the column allows it). Services read
them with ``model_dump(exclude_unset=True)`` so the two cases never blur.
"""

from datetime import date, datetime
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from models import BloodType, Education, Role, TransferStatus

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

T = TypeVar("T")


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class Page(BaseModel, Generic[T]):
    items: list[T]
    total: int


class Pagination(BaseModel):
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)


# ── Employees ──


class AddressFields(BaseModel):
    province_id: NonEmptyStr
    province_name: NonEmptyStr
    city_id: NonEmptyStr
    city_name: NonEmptyStr
    district_id: NonEmptyStr
    district_name: NonEmptyStr
    village_id: NonEmptyStr
    village_name: NonEmptyStr


class EmployeeCreate(AddressFields):
    nip: NonEmptyStr
    full_name: NonEmptyStr
    phone: NonEmptyStr
    email: Optional[str] = None
    npwp: NonEmptyStr
    birth_date: date
    education: Education
    blood_type: BloodType
    is_active: bool = True


class EmployeeUpdate(BaseModel):
    nip: Optional[NonEmptyStr] = None
    full_name: Optional[NonEmptyStr] = None
    phone: Optional[NonEmptyStr] = None
    email: Optional[str] = None
    npwp: Optional[NonEmptyStr] = None
    birth_date: Optional[date] = None
    education: Optional[Education] = None
    blood_type: Optional[BloodType] = None
    province_id: Optional[NonEmptyStr] = None
    province_name: Optional[NonEmptyStr] = None
    city_id: Optional[NonEmptyStr] = None
    city_name: Optional[NonEmptyStr] = None
    district_id: Optional[NonEmptyStr] = None
    district_name: Optional[NonEmptyStr] = None
    village_id: Optional[NonEmptyStr] = None
    village_name: Optional[NonEmptyStr] = None
    is_active: Optional[bool] = None


class EmployeeOut(ORMModel):
    id: int
    nip: str
    full_name: str
    phone: str
    email: Optional[str]
    npwp: str
    birth_date: date
    education: Education
    blood_type: BloodType
    province_id: str
    province_name: str
    city_id: str
    city_name: str
    district_id: str
    district_name: str
    village_id: str
    village_name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class EmployeeFilter(Pagination):
    search: Optional[str] = None
    education: Optional[Education] = None
    institution: Optional[str] = None
    unit: Optional[str] = None
    position: Optional[str] = None
    approaching_retirement: Optional[bool] = None
    is_active: Optional[bool] = None


# ── Job history ──


class JobHistoryCreate(BaseModel):
    institution: NonEmptyStr
    unit: NonEmptyStr
    position: NonEmptyStr
    additional_position: Optional[str] = None
    start_date: date
    additional_start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None


class JobHistoryUpdate(BaseModel):
    institution: Optional[NonEmptyStr] = None
    unit: Optional[NonEmptyStr] = None
    position: Optional[NonEmptyStr] = None
    additional_position: Optional[str] = None
    start_date: Optional[date] = None
    additional_start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None


class JobHistoryOut(ORMModel):
    id: int
    employee_id: int
    institution: str
    unit: str
    position: str
    additional_position: Optional[str]
    start_date: date
    additional_start_date: Optional[date]
    end_date: Optional[date]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


# ── Transfers (mutasi) ──


class TransferCreate(BaseModel):
    employee_id: Optional[int] = None  # defaults to the caller's own record
    origin_institution: NonEmptyStr
    origin_unit: NonEmptyStr
    origin_position: NonEmptyStr
    destination_institution: NonEmptyStr
    destination_unit: NonEmptyStr
    destination_position: NonEmptyStr
    reason: NonEmptyStr
    effective_date: Optional[date] = None


class TransferDecision(BaseModel):
    status: TransferStatus
    admin_notes: Optional[str] = None


class TransferFilter(Pagination):
    employee_id: Optional[int] = None
    status: Optional[TransferStatus] = None


class TransferOut(ORMModel):
    id: int
    employee_id: int
    origin_institution: str
    origin_unit: str
    origin_position: str
    destination_institution: str
    destination_unit: str
    destination_position: str
    reason: str
    effective_date: Optional[date]
    status: TransferStatus
    submitted_at: datetime
    decided_at: Optional[datetime]
    admin_notes: Optional[str]
    submitted_by: Optional[int]
    decided_by: Optional[int]


# ── Open positions ──


class PositionCreate(BaseModel):
    institution: NonEmptyStr
    unit: NonEmptyStr
    position: NonEmptyStr
    quota: int = Field(gt=0)
    requirements: NonEmptyStr


class PositionUpdate(BaseModel):
    institution: Optional[NonEmptyStr] = None
    unit: Optional[NonEmptyStr] = None
    position: Optional[NonEmptyStr] = None
    quota: Optional[int] = Field(default=None, ge=0)
    requirements: Optional[NonEmptyStr] = None
    is_active: Optional[bool] = None


class PositionOut(ORMModel):
    id: int
    institution: str
    unit: str
    position: str
    quota: int
    requirements: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ── Accounts & auth ──


class AccountCreate(BaseModel):
    username: NonEmptyStr
    password: str = Field(min_length=8)
    role: Role
    employee_id: Optional[int] = None


class AccountOut(ORMModel):
    id: int
    username: str
    role: Role
    employee_id: Optional[int]
    created_at: datetime
    updated_at: datetime


class LoginRequest(BaseModel):
    username: NonEmptyStr
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    account: AccountOut


class RegisterRequest(BaseModel):
    username: NonEmptyStr
    password: str = Field(min_length=8)
    employee: EmployeeCreate


# ── Geography ──


class WilayahItem(BaseModel):
    id: str
    name: str
