# app/models/schemas.py
from datetime import date, datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.enums import (
    ActivityType,
    Disposition,
    GoalType,
    LeadSource,
    LeadStatus,
    PolicyStatus,
    RecruitStatus,
    Role,
    TaskPriority,
    TaskStatus,
    TransactionType,
    VendorType,
)

EMAIL_PATTERN = r"^[\w\.\+-]+@[\w\.-]+\.\w+$"  # Basic email validation


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _blank_to_none(v):
    # Forms post "" for untouched optional inputs
    if isinstance(v, str) and not v.strip():
        return None
    return v


# ---------- Authentication Schemas ----------
class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=160)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    role: Role
    agency_id: Optional[int] = None
    is_active: bool = True
    created_at: datetime
    last_login: Optional[datetime] = None


class LoginResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse
    landing_page: str


class MeResponse(CamelModel):
    user: UserResponse
    recruit_status: Optional[RecruitStatus] = None
    landing_page: str


# ---------- Lead Schemas ----------
class LeadBase(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=80)
    last_name: str = Field(..., min_length=1, max_length=80)
    phone: str = Field(..., min_length=1, max_length=40)
    email: Optional[str] = Field(None, max_length=160, pattern=EMAIL_PATTERN)
    age: Optional[int] = Field(None, ge=0, le=130)
    state: Optional[str] = Field(None, max_length=40)
    tag: Optional[str] = Field(None, max_length=40)
    notes: Optional[str] = Field(None, max_length=10000)

    @field_validator("email", "age", "state", "tag", "notes", mode="before")
    @classmethod
    def _optional_blank(cls, v):
        return _blank_to_none(v)


class LeadCreate(LeadBase):
    source: LeadSource = LeadSource.MANUAL
    batch_id: Optional[int] = None

    @field_validator("batch_id", mode="before")
    @classmethod
    def _batch_blank(cls, v):
        return _blank_to_none(v)


class LeadUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=80)
    last_name: Optional[str] = Field(None, min_length=1, max_length=80)
    phone: Optional[str] = Field(None, min_length=1, max_length=40)
    email: Optional[str] = Field(None, max_length=160, pattern=EMAIL_PATTERN)
    age: Optional[int] = Field(None, ge=0, le=130)
    state: Optional[str] = Field(None, max_length=40)
    tag: Optional[str] = Field(None, max_length=40)
    notes: Optional[str] = Field(None, max_length=10000)
    source: Optional[LeadSource] = None
    status: Optional[LeadStatus] = None

    @field_validator("email", "age", "state", "tag", "notes", mode="before")
    @classmethod
    def _optional_blank(cls, v):
        return _blank_to_none(v)


class LeadResponse(CamelModel):
    id: int
    owner_id: int
    batch_id: Optional[int] = None
    first_name: str
    last_name: str
    phone: str
    email: Optional[str] = None
    age: Optional[int] = None
    state: Optional[str] = None
    status: LeadStatus
    source: LeadSource
    tag: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class LeadListItem(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: str
    status: LeadStatus
    source: LeadSource
    tag: Optional[str] = None
    created_at: datetime
    last_contact: Optional[datetime] = None


class DialReadyLead(CamelModel):
    """What the dial session needs to show one lead."""

    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: str
    age: Optional[int] = None
    state: Optional[str] = None
    status: LeadStatus
    source: LeadSource
    notes: Optional[str] = None
    tag: Optional[str] = None
    created_at: datetime


class ActivityResponse(CamelModel):
    id: int
    type: ActivityType
    disposition: Optional[Disposition] = None
    description: str
    user_id: int
    user_name: Optional[str] = None
    created_at: datetime


class LeadBatchSummary(CamelModel):
    id: int
    name: str
    vendor: str


class LeadDetail(LeadResponse):
    activities: List[ActivityResponse] = []
    batch: Optional[LeadBatchSummary] = None


class DispositionRequest(CamelModel):
    disposition: Disposition
    notes: Optional[str] = Field(None, max_length=5000)
    callback_date: Optional[datetime] = None
    appointment_date: Optional[datetime] = None

    @field_validator("notes", "callback_date", "appointment_date", mode="before")
    @classmethod
    def _optional_blank(cls, v):
        return _blank_to_none(v)


class CallLogRequest(CamelModel):
    notes: Optional[str] = Field(None, max_length=5000)


# ---------- Lead Batch Schemas ----------
class LeadBatchCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=160)
    cost: float = Field(..., gt=0)
    size: int = Field(..., gt=0)
    vendor_id: Optional[int] = None


class LeadBatchResponse(CamelModel):
    id: int
    name: str
    cost: float
    size: int
    purchase_date: datetime
    vendor: str
    vendor_type: VendorType
    total_leads: int
    contacted_leads: int
    closed_leads: int
    contact_rate: float
    conversion_rate: float
    roi: float


# ---------- Follow-up Schemas ----------
class TaskResponse(CamelModel):
    id: int
    title: str
    description: str
    priority: TaskPriority
    status: TaskStatus
    due_date: Optional[datetime] = None
    lead_id: Optional[int] = None


class AppointmentResponse(CamelModel):
    id: int
    title: str
    start_time: datetime
    end_time: datetime
    lead_id: Optional[int] = None


# ---------- Finance Schemas ----------
class TransactionCreate(CamelModel):
    type: TransactionType
    amount: float = Field(..., gt=0)
    category: str = Field(..., min_length=1, max_length=80)
    description: Optional[str] = Field(None, max_length=2000)
    txn_date: date = Field(..., alias="date")


class TransactionResponse(CamelModel):
    id: int
    type: TransactionType
    amount: float
    category: str
    description: str
    txn_date: date = Field(..., alias="date")


# ---------- Client / Policy Schemas ----------
class ClientCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=80)
    last_name: str = Field(..., min_length=1, max_length=80)
    phone: str = Field(..., min_length=1, max_length=40)
    email: Optional[str] = Field(None, max_length=160, pattern=EMAIL_PATTERN)
    lead_id: Optional[int] = None

    @field_validator("email", "lead_id", mode="before")
    @classmethod
    def _optional_blank(cls, v):
        return _blank_to_none(v)


class PolicyCreate(CamelModel):
    carrier: str = Field(..., min_length=1, max_length=120)
    product_type: str = Field(..., min_length=1, max_length=120)
    face_amount: Optional[float] = Field(None, gt=0)
    premium: float = Field(0, ge=0)
    status: PolicyStatus = PolicyStatus.SUBMITTED
    issue_date: Optional[date] = None


class PolicyResponse(CamelModel):
    id: int
    carrier: str
    product_type: str
    face_amount: Optional[float] = None
    premium: float
    status: PolicyStatus
    issue_date: Optional[date] = None


class ClientResponse(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: str
    lead_id: Optional[int] = None
    policies: List[PolicyResponse] = []
    total_premium: float
    status: Literal["active", "inactive"]
    created_at: datetime


# ---------- Goal Schemas ----------
class GoalCreate(CamelModel):
    type: GoalType
    target: float = Field(..., gt=0)
    deadline: date


class GoalProgressUpdate(CamelModel):
    current: float = Field(..., ge=0)


class GoalResponse(CamelModel):
    id: int
    type: GoalType
    target: float
    current: float
    deadline: date


# ---------- Recruit Schemas ----------
class RecruitProfileUpdate(CamelModel):
    phone: Optional[str] = Field(None, max_length=40)
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=120)
    state: Optional[str] = Field(None, max_length=40)
    zip_code: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date] = None


class RecruitProfileResponse(CamelModel):
    id: int
    status: RecruitStatus
    progress: int
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    date_of_birth: Optional[date] = None
    submitted_at: datetime
    approved_at: Optional[datetime] = None


# ---------- Dashboard Schemas ----------
class DashboardStats(CamelModel):
    total_leads: int
    contacted_leads: int
    set_appointments: int
    closed_deals: int
    weekly_ap: float = Field(..., alias="weeklyAP")
    monthly_ap: float = Field(..., alias="monthlyAP")
    conversion_rate: float
    appointments_today: int
    dials_today: int


class DailyMetrics(CamelModel):
    dials: int
    contacts: int
    appointments_set: int
    appointments_sat: int
    applications: int
    weekly_goal: int
    monthly_goal: int


class TeamMember(CamelModel):
    id: int
    name: str
    email: str
    role: Role
    weekly_ap: float = Field(..., alias="weeklyAP")
    monthly_ap: float = Field(..., alias="monthlyAP")
    total_apps: int
    status: Literal["active", "inactive"]
    last_activity: Optional[datetime] = None


class TeamStats(CamelModel):
    total_members: int
    weekly_ap: float = Field(..., alias="weeklyAP")
    monthly_ap: float = Field(..., alias="monthlyAP")
    total_apps: int
    active_members: int
    drift_alerts: int


class FounderStats(CamelModel):
    total_agencies: int
    total_agents: int
    total_weekly_ap: float = Field(..., alias="totalWeeklyAP")
    total_monthly_ap: float = Field(..., alias="totalMonthlyAP")
    active_recruits: int
    drift_alerts: int


class AgencySummary(CamelModel):
    id: int
    name: str
    total_agents: int
    weekly_ap: float = Field(..., alias="weeklyAP")
    monthly_ap: float = Field(..., alias="monthlyAP")
    status: Literal["active", "inactive"]
