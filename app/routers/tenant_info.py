from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.routers.auth_deps import get_current_user
from app.schemas.auth import AuthenticatedUser
from app.schemas.company import TenantInfo
from app.services.company_service import get_tenant_info

router = APIRouter(
    prefix="/tenant-info",
    tags=["tenant"]
)


@router.get("", response_model=TenantInfo)
def read_tenant_info(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Branding of the caller's own company, for any signed-in role."""
    return get_tenant_info(db, current_user.tenant_id)
