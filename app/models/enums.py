# app/models/enums.py
"""
Closed value sets shared by the ORM models, the API schemas and the services.
Stored as their string values; an unknown value read back from the database
raises instead of falling back to a default.
"""
from enum import Enum


class Role(str, Enum):
    RECRUIT = "RECRUIT"
    AGENT = "AGENT"
    SENIOR_AGENT = "SENIOR_AGENT"
    MANAGER = "MANAGER"
    AGENCY_OWNER = "AGENCY_OWNER"
    FOUNDER = "FOUNDER"
    PLATFORM_OWNER = "PLATFORM_OWNER"


AGENT_ROLES = (Role.AGENT, Role.SENIOR_AGENT)
AGENCY_STAFF_ROLES = (Role.AGENT, Role.SENIOR_AGENT, Role.MANAGER, Role.AGENCY_OWNER)


class LeadStatus(str, Enum):
    NEW = "NEW"
    CONTACTED = "CONTACTED"
    SET = "SET"
    SAT = "SAT"
    CLOSED = "CLOSED"
    NO_SHOW = "NO_SHOW"
    DEAD = "DEAD"
    DUPLICATE = "DUPLICATE"


# Statuses the dialer will surface again.
DIALABLE_STATUSES = (LeadStatus.NEW, LeadStatus.CONTACTED)
# Reached at least a conversation.
CONTACTED_STATUSES = (LeadStatus.CONTACTED, LeadStatus.SET, LeadStatus.SAT, LeadStatus.CLOSED)
APPOINTMENT_STATUSES = (LeadStatus.SET, LeadStatus.SAT, LeadStatus.CLOSED)


class LeadSource(str, Enum):
    MANUAL = "MANUAL"
    FFL = "FFL"
    BRONZE = "BRONZE"
    THIRD_PARTY = "THIRD_PARTY"
    NEXUS_NATIVE = "NEXUS_NATIVE"
    REFERRAL = "REFERRAL"
    WALK_IN = "WALK_IN"


class Disposition(str, Enum):
    NO_ANSWER = "NO_ANSWER"
    NOT_INTERESTED = "NOT_INTERESTED"
    CALLBACK = "CALLBACK"
    SET = "SET"
    SAT = "SAT"
    SALE = "SALE"
    DEAD = "DEAD"


class ActivityType(str, Enum):
    CREATED = "created"
    STATUS_CHANGE = "status_change"
    UPDATED = "updated"
    DELETED = "deleted"
    CALL = "call"
    APPOINTMENT = "appointment"
    APPLICATION = "application"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class VendorType(str, Enum):
    FFL = "FFL"
    BRONZE = "BRONZE"
    THIRD_PARTY = "THIRD_PARTY"
    NEXUS_NATIVE = "NEXUS_NATIVE"


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class PolicyStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ISSUED = "ISSUED"
    PAID = "PAID"
    CHARGEBACK_RISK = "CHARGEBACK_RISK"
    CHARGEBACKED = "CHARGEBACKED"


ACTIVE_POLICY_STATUSES = (PolicyStatus.APPROVED, PolicyStatus.ISSUED, PolicyStatus.PAID)


class GoalType(str, Enum):
    DIALS = "dials"
    APPOINTMENTS = "appointments"
    APPLICATIONS = "applications"
    SAVINGS = "savings"


class RecruitStatus(str, Enum):
    NEW = "NEW"
    SUBMITTED_TO_TYLICA = "SUBMITTED_TO_TYLICA"
    AWAITING_FFL_EMAILS = "AWAITING_FFL_EMAILS"
    LICENSED = "LICENSED"
    ACTIVATED = "ACTIVATED"


RECRUIT_PROGRESS = {
    RecruitStatus.NEW: 20,
    RecruitStatus.SUBMITTED_TO_TYLICA: 40,
    RecruitStatus.AWAITING_FFL_EMAILS: 60,
    RecruitStatus.LICENSED: 80,
    RecruitStatus.ACTIVATED: 100,
}
if set(RECRUIT_PROGRESS) != set(RecruitStatus):
    raise RuntimeError("RECRUIT_PROGRESS must cover every RecruitStatus")


class DriftAlertType(str, Enum):
    PRODUCTION_DROP = "production_drop"
    UNDER_DIALING = "under_dialing"
    NO_APPOINTMENTS = "no_appointments"
    LOW_ACTIVITY = "low_activity"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
