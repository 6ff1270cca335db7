# app/services/goal_service.py
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext
from app.core.db import transaction
from app.models.orm import Goal
from app.models.schemas import GoalCreate
from app.services.errors import NotFoundError

logger = logging.getLogger("nexus.services.goals")


def list_goals(db: Session, auth: AuthContext) -> List[Goal]:
    stmt = select(Goal).where(Goal.user_id == auth.user_id).order_by(Goal.deadline.asc(), Goal.id.asc())
    return list(db.scalars(stmt))


def create_goal(db: Session, auth: AuthContext, payload: GoalCreate) -> Goal:
    with transaction(db):
        goal = Goal(
            user_id=auth.user_id,
            type=payload.type,
            target=payload.target,
            current=0,
            deadline=payload.deadline,
        )
        db.add(goal)
    db.refresh(goal)
    logger.info("Goal %s (%s) created for user %s", goal.id, goal.type.value, auth.user_id)
    return goal


def update_progress(db: Session, auth: AuthContext, goal_id: int, current: float) -> Goal:
    with transaction(db):
        goal = db.scalars(
            select(Goal).where(Goal.id == goal_id, Goal.user_id == auth.user_id)
        ).first()
        if goal is None:
            raise NotFoundError(f"Goal {goal_id} not found")
        goal.current = current
    db.refresh(goal)
    return goal
