from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
import logging
from app.core.limiter import limiter
from app.database import get_db
from app.routers.auth_deps import get_current_user
from app.schemas.auth import AuthenticatedUser, LoginRequest, Token, UserResponse
from app.services import auth as auth_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

@router.post("/login", response_model=Token)
@limiter.limit("10/minute")
def login(request: Request, login_data: LoginRequest, db: Session = Depends(get_db)):
    # JSON body instead of form-data for frontend compatibility
    user = auth_service.authenticate(db, login_data.email, login_data.password)
    return {
        "access_token": auth_service.token_for_user(user),
        "token_type": "bearer",
        "user": UserResponse.model_validate(user),
    }

@router.get("/me", response_model=AuthenticatedUser)
def read_me(current_user: AuthenticatedUser = Depends(get_current_user)):
    return current_user
