"""
Admin Router

Dashboard, analytics and OT rule settings.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Union

from app.core.requester import Requester
from app.database import get_db
from app.routers.auth_deps import get_current_user, get_requester, require_admin, require_manager
from app.schemas.admin import (
    AnalyticsResponse, DashboardStats, ManagerDashboardStats,
    OtRuleCreate, OtRuleResponse, OtRuleUpdate,
)
from app.schemas.auth import AuthenticatedUser
from app.services.admin_service import AdminService

router = APIRouter(
    prefix="/admin",
    tags=["admin"]
)


def get_admin_service(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AdminService:
    return AdminService(db, current_user.tenant_id)


@router.get(
    "/dashboard",
    response_model=Union[DashboardStats, ManagerDashboardStats],
    dependencies=[Depends(require_manager())],
)
def get_dashboard(
    service: AdminService = Depends(get_admin_service),
    requester: Requester = Depends(get_requester),
):
    """
    Tenant-wide counters for admins; managers only see their direct reports.
    """
    return service.get_dashboard(requester)


@router.get("/analytics", response_model=AnalyticsResponse, dependencies=[Depends(require_admin())])
def get_analytics(service: AdminService = Depends(get_admin_service)):
    return service.get_analytics()


@router.get("/settings/ot-rules", response_model=List[OtRuleResponse], dependencies=[Depends(require_admin())])
def list_ot_rules(service: AdminService = Depends(get_admin_service)):
    return service.list_ot_rules()


@router.get("/settings/ot-rules/{rule_id}", response_model=OtRuleResponse, dependencies=[Depends(require_admin())])
def get_ot_rule(rule_id: str, service: AdminService = Depends(get_admin_service)):
    return service.get_ot_rule(rule_id)


@router.post("/settings/ot-rules", response_model=OtRuleResponse, dependencies=[Depends(require_admin())])
def create_ot_rule(data: OtRuleCreate, service: AdminService = Depends(get_admin_service)):
    return service.create_ot_rule(data)


@router.put("/settings/ot-rules/{rule_id}", response_model=OtRuleResponse, dependencies=[Depends(require_admin())])
def update_ot_rule(rule_id: str, data: OtRuleUpdate, service: AdminService = Depends(get_admin_service)):
    return service.update_ot_rule(rule_id, data)


@router.delete("/settings/ot-rules/{rule_id}", dependencies=[Depends(require_admin())])
def delete_ot_rule(rule_id: str, service: AdminService = Depends(get_admin_service)):
    return service.delete_ot_rule(rule_id)
