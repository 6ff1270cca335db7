# app/auth/policy.py
"""
Which roles may open which area of the app.

Pure functions over the Role/Resource enums so the table can be tested
without any routing or database.
"""
from enum import Enum
from typing import Optional

from app.models.enums import RecruitStatus, Role


class Resource(str, Enum):
    DASHBOARD = "dashboard"
    CRM = "crm"
    DIAL = "dial"
    CLIENTS = "clients"
    FINANCE = "finance"
    TASKS = "tasks"
    CALENDAR = "calendar"
    MESSAGES = "messages"
    UNIVERSITY = "university"
    MANAGER = "manager"
    FOUNDER = "founder"
    ADMIN = "admin"
    RECRUIT = "recruit"


_ALL_ROLES = frozenset(Role)

# Areas not listed here are open to every authenticated role.
_RESTRICTED = {
    Resource.MANAGER: frozenset(
        {Role.MANAGER, Role.AGENCY_OWNER, Role.FOUNDER, Role.PLATFORM_OWNER}
    ),
    Resource.FOUNDER: frozenset({Role.FOUNDER, Role.PLATFORM_OWNER}),
    Resource.ADMIN: frozenset({Role.PLATFORM_OWNER}),
}


def allowed_roles(resource: Resource) -> frozenset:
    return _RESTRICTED.get(resource, _ALL_ROLES)


def is_allowed(role: Role, resource: Resource) -> bool:
    return role in allowed_roles(resource)


def landing_page(role: Role, recruit_status: Optional[RecruitStatus] = None) -> str:
    """Recruits stay on the onboarding portal until their profile is activated."""
    if role == Role.RECRUIT and recruit_status != RecruitStatus.ACTIVATED:
        return "/recruit"
    return "/dashboard"
