# app/models/orm.py
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from app.core.clock import utcnow
from app.core.db import Base
from app.models.enums import (
    ActivityType,
    Disposition,
    DriftAlertType,
    GoalType,
    LeadSource,
    LeadStatus,
    PolicyStatus,
    RecruitStatus,
    Role,
    Severity,
    TaskPriority,
    TaskStatus,
    TransactionType,
    VendorType,
)


def _enum(enum_cls):
    """String column holding the enum's values (not names); unknown values raise on load."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=32,
        validate_strings=True,
        values_callable=lambda e: [m.value for m in e],
    )


def _money():
    return Numeric(12, 2, asdecimal=False)


# ---------- Agencies (tenants) ----------
class Agency(Base):
    __tablename__ = "agencies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(160), index=True)
    slug: Mapped[str] = mapped_column(String(80), unique=True, index=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    users: Mapped[list["User"]] = relationship("User", back_populates="agency")


# ---------- Users ----------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(160), unique=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    role: Mapped[Role] = mapped_column(_enum(Role), default=Role.AGENT)

    # Platform-level roles (founder, platform owner) may sit outside any agency
    agency_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("agencies.id", ondelete="SET NULL"), index=True, nullable=True
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    agency: Mapped[Optional[Agency]] = relationship("Agency", back_populates="users")
    recruit_profile: Mapped[Optional["RecruitProfile"]] = relationship(
        "RecruitProfile", back_populates="user", uselist=False
    )

    __table_args__ = (
        Index("ix_users_agency_role", "agency_id", "role"),
    )


# ---------- Vendors / Lead batches ----------
class Vendor(Base):
    __tablename__ = "vendors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(160))
    type: Mapped[VendorType] = mapped_column(_enum(VendorType), default=VendorType.THIRD_PARTY)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class LeadBatch(Base):
    __tablename__ = "lead_batches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    vendor_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(160))
    cost: Mapped[float] = mapped_column(_money(), default=0)
    size: Mapped[int] = mapped_column(Integer, default=0)
    purchase_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    vendor: Mapped[Optional[Vendor]] = relationship("Vendor")
    leads: Mapped[list["Lead"]] = relationship("Lead", back_populates="batch")


# ---------- Leads ----------
class Lead(Base):
    __tablename__ = "leads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    batch_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("lead_batches.id", ondelete="SET NULL"), index=True, nullable=True
    )

    first_name: Mapped[str] = mapped_column(String(80), default="")
    last_name: Mapped[str] = mapped_column(String(80), default="")
    phone: Mapped[str] = mapped_column(String(40))
    email: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)

    status: Mapped[LeadStatus] = mapped_column(_enum(LeadStatus), default=LeadStatus.NEW)
    source: Mapped[LeadSource] = mapped_column(_enum(LeadSource), default=LeadSource.MANUAL)
    tag: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    owner: Mapped[User] = relationship("User")
    batch: Mapped[Optional[LeadBatch]] = relationship("LeadBatch", back_populates="leads")
    activities: Mapped[list["LeadActivity"]] = relationship(
        "LeadActivity",
        back_populates="lead",
        order_by=lambda: [LeadActivity.created_at.desc(), LeadActivity.id.desc()],
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    __table_args__ = (
        Index("ix_leads_owner_status", "owner_id", "status"),
    )


# ---------- Lead activity log (append-only) ----------
class LeadActivity(Base):
    __tablename__ = "lead_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    lead_id: Mapped[int] = mapped_column(ForeignKey("leads.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    type: Mapped[ActivityType] = mapped_column(_enum(ActivityType), index=True)
    # Outcome code on status_change rows written by a disposition
    disposition: Mapped[Optional[Disposition]] = mapped_column(_enum(Disposition), nullable=True)
    description: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    lead: Mapped[Lead] = relationship("Lead", back_populates="activities")
    user: Mapped[User] = relationship("User")

    __table_args__ = (
        Index("ix_lead_activities_lead_type_ts", "lead_id", "type", "created_at"),
    )


# ---------- Follow-ups ----------
class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    lead_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("leads.id", ondelete="SET NULL"), index=True, nullable=True
    )
    title: Mapped[str] = mapped_column(String(200))
    start_time: Mapped[datetime] = mapped_column(DateTime, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    priority: Mapped[TaskPriority] = mapped_column(_enum(TaskPriority), default=TaskPriority.MEDIUM)
    status: Mapped[TaskStatus] = mapped_column(_enum(TaskStatus), default=TaskStatus.PENDING)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_by_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    assigned_to_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    lead_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("leads.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


# ---------- Finance ----------
class FinanceTransaction(Base):
    __tablename__ = "finance_transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    type: Mapped[TransactionType] = mapped_column(_enum(TransactionType))
    amount: Mapped[float] = mapped_column(_money())
    category: Mapped[str] = mapped_column(String(80), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    txn_date: Mapped[datetime] = mapped_column("date", DateTime, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    __table_args__ = (
        Index("ix_finance_user_type_date", "user_id", "type", "date"),
    )


# ---------- Clients / Policies ----------
class Client(Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    agent_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    lead_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("leads.id", ondelete="SET NULL"), nullable=True
    )
    first_name: Mapped[str] = mapped_column(String(80))
    last_name: Mapped[str] = mapped_column(String(80))
    email: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    phone: Mapped[str] = mapped_column(String(40))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    policies: Mapped[list["Policy"]] = relationship(
        "Policy",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by=lambda: [Policy.created_at.desc(), Policy.id.desc()],
    )


class Policy(Base):
    __tablename__ = "policies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id", ondelete="CASCADE"), index=True)
    carrier: Mapped[str] = mapped_column(String(120))
    product_type: Mapped[str] = mapped_column(String(120))
    face_amount: Mapped[Optional[float]] = mapped_column(_money(), nullable=True)
    premium: Mapped[float] = mapped_column(_money(), default=0)
    status: Mapped[PolicyStatus] = mapped_column(_enum(PolicyStatus), default=PolicyStatus.SUBMITTED)
    issue_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    client: Mapped[Client] = relationship("Client", back_populates="policies")


# ---------- Goals ----------
class Goal(Base):
    __tablename__ = "goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    type: Mapped[GoalType] = mapped_column(_enum(GoalType))
    target: Mapped[float] = mapped_column(_money())
    current: Mapped[float] = mapped_column(_money(), default=0)
    deadline: Mapped[date] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


# ---------- Recruits ----------
class RecruitProfile(Base):
    __tablename__ = "recruit_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, index=True
    )
    status: Mapped[RecruitStatus] = mapped_column(_enum(RecruitStatus), default=RecruitStatus.NEW)
    phone: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    user: Mapped[User] = relationship("User", back_populates="recruit_profile")


# ---------- Drift alerts ----------
class DriftAlert(Base):
    __tablename__ = "drift_alerts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    type: Mapped[DriftAlertType] = mapped_column(_enum(DriftAlertType))
    severity: Mapped[Severity] = mapped_column(_enum(Severity), default=Severity.MEDIUM)
    description: Mapped[str] = mapped_column(Text, default="")
    resolved: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
