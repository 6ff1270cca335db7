# Make `from app.models import Lead, User, LeadActivity` work
from .orm import (  # re-export
    Agency,
    Appointment,
    Client,
    DriftAlert,
    FinanceTransaction,
    Goal,
    Lead,
    LeadActivity,
    LeadBatch,
    Policy,
    RecruitProfile,
    Task,
    User,
    Vendor,
)
