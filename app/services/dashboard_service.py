# app/services/dashboard_service.py
"""
Read-only aggregates for the agent, manager and founder dashboards.

Weekly figures cover the trailing 7 days and monthly figures the trailing
30 days, each queried over its own window. AP is summed from INCOME
finance transactions.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext
from app.core.clock import days_ago, start_of_day, utcnow
from app.core.config import DIAL_GOAL_MONTHLY, DIAL_GOAL_WEEKLY
from app.models.enums import (
    AGENCY_STAFF_ROLES,
    AGENT_ROLES,
    APPOINTMENT_STATUSES,
    ActivityType,
    CONTACTED_STATUSES,
    Disposition,
    LeadStatus,
    RecruitStatus,
    TransactionType,
)
from app.models.orm import (
    Agency,
    Appointment,
    Client,
    DriftAlert,
    FinanceTransaction,
    Lead,
    LeadActivity,
    Policy,
    RecruitProfile,
    User,
)
from app.models.schemas import (
    AgencySummary,
    DailyMetrics,
    DashboardStats,
    FounderStats,
    TeamMember,
    TeamStats,
)

logger = logging.getLogger("nexus.services.dashboard")

WEEK_DAYS = 7
MONTH_DAYS = 30


# -------------------
# Shared aggregates
# -------------------
def _income_since(db: Session, since: datetime, user_ids: Optional[Iterable[int]] = None) -> float:
    stmt = select(func.coalesce(func.sum(FinanceTransaction.amount), 0)).where(
        FinanceTransaction.type == TransactionType.INCOME,
        FinanceTransaction.txn_date >= since,
    )
    if user_ids is not None:
        stmt = stmt.where(FinanceTransaction.user_id.in_(list(user_ids)))
    return float(db.scalar(stmt) or 0)


def _income_by_user(db: Session, since: datetime, user_ids: List[int]) -> Dict[int, float]:
    if not user_ids:
        return {}
    stmt = (
        select(FinanceTransaction.user_id, func.sum(FinanceTransaction.amount))
        .where(
            FinanceTransaction.type == TransactionType.INCOME,
            FinanceTransaction.txn_date >= since,
            FinanceTransaction.user_id.in_(user_ids),
        )
        .group_by(FinanceTransaction.user_id)
    )
    return {uid: float(total or 0) for uid, total in db.execute(stmt).all()}


def _count_by_user(db: Session, stmt) -> Dict[int, int]:
    return {uid: int(n) for uid, n in db.execute(stmt).all()}


def _lead_count(db: Session, owner_id: int, statuses=None) -> int:
    stmt = select(func.count(Lead.id)).where(Lead.owner_id == owner_id)
    if statuses is not None:
        stmt = stmt.where(Lead.status.in_(statuses))
    return int(db.scalar(stmt) or 0)


# -------------------
# Agent dashboard
# -------------------
def agent_stats(db: Session, auth: AuthContext, *, now: Optional[datetime] = None) -> DashboardStats:
    now = now or utcnow()
    today = start_of_day(now)

    total = _lead_count(db, auth.user_id)
    contacted = _lead_count(db, auth.user_id, CONTACTED_STATUSES)
    set_appts = _lead_count(db, auth.user_id, APPOINTMENT_STATUSES)
    closed = _lead_count(db, auth.user_id, (LeadStatus.CLOSED,))

    appointments_today = int(db.scalar(
        select(func.count(Appointment.id)).where(
            Appointment.user_id == auth.user_id,
            Appointment.start_time >= today,
            Appointment.start_time < today + timedelta(days=1),
        )
    ) or 0)
    dials_today = int(db.scalar(
        select(func.count(LeadActivity.id)).where(
            LeadActivity.user_id == auth.user_id,
            LeadActivity.type == ActivityType.CALL,
            LeadActivity.created_at >= today,
        )
    ) or 0)

    conversion = (closed / total) * 100 if total > 0 else 0.0

    return DashboardStats(
        total_leads=total,
        contacted_leads=contacted,
        set_appointments=set_appts,
        closed_deals=closed,
        weekly_ap=_income_since(db, days_ago(now, WEEK_DAYS), [auth.user_id]),
        monthly_ap=_income_since(db, days_ago(now, MONTH_DAYS), [auth.user_id]),
        conversion_rate=round(conversion, 1),
        appointments_today=appointments_today,
        dials_today=dials_today,
    )


def daily_metrics(db: Session, auth: AuthContext, *, now: Optional[datetime] = None) -> DailyMetrics:
    """Counts over the caller's activity log since midnight UTC."""
    now = now or utcnow()
    rows = db.execute(
        select(LeadActivity.type, LeadActivity.disposition).where(
            LeadActivity.user_id == auth.user_id,
            LeadActivity.created_at >= start_of_day(now),
        )
    ).all()

    dials = contacts = appts_set = appts_sat = applications = 0
    for type_, disposition in rows:
        if type_ == ActivityType.CALL:
            dials += 1
        if disposition is not None and disposition != Disposition.NO_ANSWER:
            contacts += 1
        if type_ == ActivityType.APPOINTMENT or disposition == Disposition.SET:
            appts_set += 1
        if disposition == Disposition.SAT:
            appts_sat += 1
        if type_ == ActivityType.APPLICATION or disposition == Disposition.SALE:
            applications += 1

    return DailyMetrics(
        dials=dials,
        contacts=contacts,
        appointments_set=appts_set,
        appointments_sat=appts_sat,
        applications=applications,
        weekly_goal=DIAL_GOAL_WEEKLY,
        monthly_goal=DIAL_GOAL_MONTHLY,
    )


# -------------------
# Manager dashboard
# -------------------
def team_members(db: Session, auth: AuthContext, *, now: Optional[datetime] = None) -> List[TeamMember]:
    """Agents of the caller's agency with their production."""
    now = now or utcnow()
    if auth.agency_id is None:
        return []

    agents = list(db.scalars(
        select(User)
        .where(User.agency_id == auth.agency_id, User.role.in_(AGENT_ROLES))
        .order_by(User.created_at.desc(), User.id.desc())
    ))
    ids = [a.id for a in agents]
    if not ids:
        return []

    weekly = _income_by_user(db, days_ago(now, WEEK_DAYS), ids)
    monthly = _income_by_user(db, days_ago(now, MONTH_DAYS), ids)
    apps = _count_by_user(db, (
        select(Client.agent_id, func.count(Policy.id))
        .join(Policy, Policy.client_id == Client.id)
        .where(Client.agent_id.in_(ids))
        .group_by(Client.agent_id)
    ))
    last_seen = dict(db.execute(
        select(LeadActivity.user_id, func.max(LeadActivity.created_at))
        .where(LeadActivity.user_id.in_(ids))
        .group_by(LeadActivity.user_id)
    ).all())

    return [
        TeamMember(
            id=a.id,
            name=a.name or "Unknown Agent",
            email=a.email,
            role=a.role,
            weekly_ap=weekly.get(a.id, 0.0),
            monthly_ap=monthly.get(a.id, 0.0),
            total_apps=apps.get(a.id, 0),
            status="active" if a.is_active else "inactive",
            last_activity=last_seen.get(a.id),
        )
        for a in agents
    ]


def team_stats(db: Session, auth: AuthContext, *, now: Optional[datetime] = None) -> TeamStats:
    members = team_members(db, auth, now=now)
    ids = [m.id for m in members]
    drift = 0
    if ids:
        drift = int(db.scalar(
            select(func.count(DriftAlert.id)).where(
                DriftAlert.user_id.in_(ids), DriftAlert.resolved.is_(False)
            )
        ) or 0)

    return TeamStats(
        total_members=len(members),
        weekly_ap=sum(m.weekly_ap for m in members),
        monthly_ap=sum(m.monthly_ap for m in members),
        total_apps=sum(m.total_apps for m in members),
        active_members=sum(1 for m in members if m.total_apps > 0),
        drift_alerts=drift,
    )


# -------------------
# Founder dashboard
# -------------------
def founder_stats(db: Session, *, now: Optional[datetime] = None) -> FounderStats:
    now = now or utcnow()
    return FounderStats(
        total_agencies=int(db.scalar(select(func.count(Agency.id))) or 0),
        total_agents=int(db.scalar(
            select(func.count(User.id)).where(User.role.in_(AGENT_ROLES))
        ) or 0),
        total_weekly_ap=_income_since(db, days_ago(now, WEEK_DAYS)),
        total_monthly_ap=_income_since(db, days_ago(now, MONTH_DAYS)),
        active_recruits=int(db.scalar(
            select(func.count(RecruitProfile.id)).where(
                RecruitProfile.status != RecruitStatus.ACTIVATED
            )
        ) or 0),
        drift_alerts=int(db.scalar(
            select(func.count(DriftAlert.id)).where(DriftAlert.resolved.is_(False))
        ) or 0),
    )


def agency_summaries(db: Session, *, now: Optional[datetime] = None) -> List[AgencySummary]:
    now = now or utcnow()
    agencies = list(db.scalars(select(Agency).order_by(Agency.created_at.desc(), Agency.id.desc())))

    staff = db.execute(
        select(User.agency_id, User.id, User.role).where(
            User.agency_id.is_not(None), User.role.in_(AGENCY_STAFF_ROLES)
        )
    ).all()
    staff_ids = [uid for _, uid, _ in staff]
    weekly = _income_by_user(db, days_ago(now, WEEK_DAYS), staff_ids)
    monthly = _income_by_user(db, days_ago(now, MONTH_DAYS), staff_ids)

    out: List[AgencySummary] = []
    for agency in agencies:
        members = [(uid, role) for aid, uid, role in staff if aid == agency.id]
        out.append(AgencySummary(
            id=agency.id,
            name=agency.name,
            total_agents=sum(1 for _, role in members if role in AGENT_ROLES),
            weekly_ap=sum(weekly.get(uid, 0.0) for uid, _ in members),
            monthly_ap=sum(monthly.get(uid, 0.0) for uid, _ in members),
            status="active" if agency.active else "inactive",
        ))
    logger.info("Agency summaries: %d agencies", len(out))
    return out
