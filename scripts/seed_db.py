#!/usr/bin/env python3
"""
Seed a demo agency for development.

Creates:
- 1 agency (Demo Agency)
- 1 user per role (<role>@nexus.local, e.g. agent@nexus.local)
- 1 vendor, 1 lead batch and a handful of leads owned by the agent
- a recruit profile for the recruit user

All passwords: test123
"""

import sys
from datetime import timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from app.auth.security import hash_password
from app.core.clock import utcnow
from app.core.db import session_scope
from app.models.enums import LeadSource, LeadStatus, RecruitStatus, Role, VendorType
from app.models.orm import Agency, Lead, LeadBatch, RecruitProfile, User, Vendor
from app.services.bootstrap_db import create_all

PASSWORD = "test123"

DEMO_LEADS = [
    ("John", "Smith", "555-0101", "TX"),
    ("Maria", "Garcia", "555-0102", "FL"),
    ("Robert", "Johnson", "555-0103", "GA"),
    ("Linda", "Brown", "555-0104", "OH"),
    ("James", "Davis", "555-0105", "AZ"),
]


def seed():
    """Seed demo agency, users and leads"""
    print("Seeding demo data...")
    create_all()

    with session_scope() as db:
        agency = db.scalars(select(Agency).where(Agency.slug == "demo-agency")).first()
        if agency:
            print(f"  Agency 'Demo Agency' already exists (ID: {agency.id}); skipping.")
            return

        agency = Agency(name="Demo Agency", slug="demo-agency", active=True)
        db.add(agency)
        db.flush()
        print(f"  Created agency: {agency.name} (ID: {agency.id})")

        users = {}
        for role in Role:
            # Platform-level roles sit outside any agency
            platform = role in (Role.FOUNDER, Role.PLATFORM_OWNER)
            user = User(
                email=f"{role.value.lower()}@nexus.local",
                name=role.value.replace("_", " ").title(),
                hashed_password=hash_password(PASSWORD),
                role=role,
                agency_id=None if platform else agency.id,
                is_active=True,
            )
            db.add(user)
            users[role] = user
            print(f"  Created user: {user.email} ({role.value})")
        db.flush()

        db.add(RecruitProfile(user_id=users[Role.RECRUIT].id, status=RecruitStatus.NEW))

        vendor = Vendor(name="Demo Lead Co", type=VendorType.THIRD_PARTY)
        db.add(vendor)
        db.flush()

        agent = users[Role.AGENT]
        batch = LeadBatch(
            owner_id=agent.id,
            vendor_id=vendor.id,
            name="Demo batch",
            cost=250,
            size=len(DEMO_LEADS),
        )
        db.add(batch)
        db.flush()

        now = utcnow()
        for i, (first, last, phone, state) in enumerate(DEMO_LEADS):
            db.add(Lead(
                owner_id=agent.id,
                batch_id=batch.id,
                first_name=first,
                last_name=last,
                phone=phone,
                state=state,
                status=LeadStatus.NEW,
                source=LeadSource.THIRD_PARTY,
                created_at=now - timedelta(days=len(DEMO_LEADS) - i),
            ))
        print(f"  Created {len(DEMO_LEADS)} leads in batch '{batch.name}'")

    print(f"Done. All passwords: {PASSWORD}")


if __name__ == "__main__":
    seed()
