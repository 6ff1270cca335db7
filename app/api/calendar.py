from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.permissions import AuthContext, require_access
from app.auth.policy import Resource
from app.core.db import get_db
from app.models.schemas import AppointmentResponse, TaskResponse
from app.services import calendar_service

router = APIRouter()


@router.get("/tasks", response_model=List[TaskResponse])
def tasks(auth: AuthContext = Depends(require_access(Resource.TASKS)), db: Session = Depends(get_db)):
    return calendar_service.tasks_for(db, auth)


@router.get("/appointments", response_model=List[AppointmentResponse])
def appointments(auth: AuthContext = Depends(require_access(Resource.CALENDAR)), db: Session = Depends(get_db)):
    return calendar_service.appointments_for(db, auth)
