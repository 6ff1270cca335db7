# app/services/calendar_service.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext
from app.models.orm import Appointment, Task


def tasks_for(db: Session, auth: AuthContext) -> List[Task]:
    """Tasks assigned to the caller, soonest due first; undated ones last."""
    stmt = (
        select(Task)
        .where(Task.assigned_to_id == auth.user_id)
        .order_by(Task.due_date.is_(None), Task.due_date.asc(), Task.id.asc())
    )
    return list(db.scalars(stmt))


def appointments_for(db: Session, auth: AuthContext) -> List[Appointment]:
    stmt = (
        select(Appointment)
        .where(Appointment.user_id == auth.user_id)
        .order_by(Appointment.start_time.asc(), Appointment.id.asc())
    )
    return list(db.scalars(stmt))
