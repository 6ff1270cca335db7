from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext, get_auth_context
from app.core.db import get_db
from app.models.schemas import GoalCreate, GoalProgressUpdate, GoalResponse
from app.services import goal_service

router = APIRouter()


@router.get("", response_model=List[GoalResponse])
def list_goals(auth: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    return goal_service.list_goals(db, auth)


@router.post("", response_model=GoalResponse, status_code=201)
def create_goal(payload: GoalCreate, auth: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    return goal_service.create_goal(db, auth, payload)


@router.put("/{goal_id}", response_model=GoalResponse)
def update_goal(
    goal_id: int,
    payload: GoalProgressUpdate,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return goal_service.update_progress(db, auth, goal_id, payload.current)
