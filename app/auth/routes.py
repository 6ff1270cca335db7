import logging
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from .permissions import AuthContext, get_auth_context
from .policy import landing_page
from .security import create_token, verify_password
from app.core.clock import utcnow
from app.core.db import get_db
from app.models.orm import User
from app.models.schemas import LoginRequest, LoginResponse, MeResponse, UserResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger("nexus.auth.routes")


def _recruit_status(user: User):
    return user.recruit_profile.status if user.recruit_profile else None


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    user = db.scalars(select(User).where(User.email == email)).first()

    if not user or not user.is_active:
        logger.info("Login failed for '%s' (not found or inactive)", email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not verify_password(payload.password, user.hashed_password):
        logger.info("Login failed for '%s' (invalid password)", email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    user.last_login = utcnow()
    db.commit()
    db.refresh(user)

    token = create_token(
        {
            "sub": user.email,
            "user_id": user.id,
            "role": user.role.value,
            "agency_id": user.agency_id,
        }
    )

    logger.info("Login success for '%s' (role=%s)", user.email, user.role.value)

    return LoginResponse(
        token=token,
        user=UserResponse.model_validate(user),
        landing_page=landing_page(user.role, _recruit_status(user)),
    )


@router.get("/me", response_model=MeResponse)
def me(auth: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    user = db.get(User, auth.user_id)
    status = _recruit_status(user)
    return MeResponse(
        user=UserResponse.model_validate(user),
        recruit_status=status,
        landing_page=landing_page(user.role, status),
    )
