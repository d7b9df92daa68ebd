"""
RBAC Dependencies.
Resolves the bearer token into an identity and gates endpoints by role.
"""
import logging
from typing import Callable, List

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.core.requester import Requester, requester_from
from app.models.user import UserRole
from app.schemas.auth import AuthenticatedUser
from app.services import auth as auth_service

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_current_user(token: str = Depends(oauth2_scheme)) -> AuthenticatedUser:
    """
    Extracts and validates the current identity from the access token.
    """
    payload = auth_service.decode_access_token(token)

    if payload is None:
        logger.warning("Authentication failed: Invalid token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("error") == "TOKEN_EXPIRED":
        logger.info("Authentication failed: Token expired")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="TOKEN_EXPIRED",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("type") != "access":
        logger.warning("Authentication failed: Invalid token type")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not payload.get("sub") or not payload.get("tenant_id"):
        logger.warning("Authentication failed: Missing subject or tenant in token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing subject in token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthenticatedUser(
        user_id=payload["user_id"],
        email=payload["sub"],
        tenant_id=payload["tenant_id"],
        role=UserRole(payload["role"]),
        employee_id=payload.get("employee_id"),
    )


def require_role(allowed_roles: List[UserRole]) -> Callable:
    """
    Dependency factory that checks if the user has one of the allowed roles.

    Usage:
        @router.get("/admin-only")
        def admin_endpoint(user: AuthenticatedUser = Depends(require_role([UserRole.HR_ADMIN]))):
            ...
    """
    def role_checker(current_user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_user
    return role_checker


def get_requester(current_user: AuthenticatedUser = Depends(get_current_user)) -> Requester:
    return requester_from(current_user.role, current_user.employee_id)


def require_admin():
    """Shorthand for SUPER_ADMIN and HR_ADMIN."""
    return require_role([UserRole.SUPER_ADMIN, UserRole.HR_ADMIN])


def require_manager():
    """Shorthand for admins plus line managers."""
    return require_role([UserRole.SUPER_ADMIN, UserRole.HR_ADMIN, UserRole.MANAGER])
