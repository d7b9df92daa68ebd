"""
Authentication service: password checks and access tokens.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.security import decode_token, encode_token, verify_password
from app.models.tenant import Tenant
from app.models.user import User

logger = logging.getLogger(__name__)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    claims = {**data, "type": "access"}
    return encode_token(claims, expires_delta or timedelta(minutes=settings.access_token_expire_minutes))


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Returns the claims, ``{"error": "TOKEN_EXPIRED"}`` for an expired token,
    or None when the token is not valid at all.
    """
    try:
        return decode_token(token)
    except jwt.ExpiredSignatureError:
        return {"error": "TOKEN_EXPIRED"}
    except jwt.InvalidTokenError:
        logger.warning("Rejected access token that failed verification")
        return None


def token_for_user(user: User) -> str:
    return create_access_token(data={
        "sub": user.email,
        "user_id": user.id,
        "tenant_id": user.tenant_id,
        "role": user.role.value,
        "employee_id": user.employee_id,
    })


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        logger.warning("Failed login attempt", extra={"email": email})
        raise AuthenticationError("Incorrect email or password")
    if not user.is_active:
        raise AuthenticationError("User is inactive")

    tenant = db.get(Tenant, user.tenant_id)
    if tenant is None or not tenant.is_active:
        raise AuthenticationError("Company is inactive")

    user.last_login_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"User {user.id} logged in")
    return user
