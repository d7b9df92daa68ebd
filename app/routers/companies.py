"""
Companies Router

Platform administration of tenants. Everything except the public logo
endpoint requires SUPER_ADMIN.
"""
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models.user import UserRole
from app.routers.auth_deps import require_role
from app.schemas.company import (
    CompanyCreate, CompanyCreated, CompanyDetail, CompanyListItem,
    CompanyResponse, CompanyStats, CompanyUpdate,
)
from app.services.company_service import CompanyService

router = APIRouter(
    prefix="/companies",
    tags=["companies"]
)

super_admin_only = [Depends(require_role([UserRole.SUPER_ADMIN]))]


def get_company_service(db: Session = Depends(get_db)) -> CompanyService:
    return CompanyService(db)


@router.post("", response_model=CompanyCreated, dependencies=super_admin_only)
def create_company(data: CompanyCreate, service: CompanyService = Depends(get_company_service)):
    """
    Create a company together with its HR admin, default leave types and default OT rule.
    """
    return service.create(data)


@router.get("", response_model=List[CompanyListItem], dependencies=super_admin_only)
def list_companies(
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    service: CompanyService = Depends(get_company_service),
):
    return service.find_all(search=search, is_active=is_active)


@router.get("/stats/summary", response_model=CompanyStats, dependencies=super_admin_only)
def get_company_stats(service: CompanyService = Depends(get_company_service)):
    return service.stats()


@router.get("/{company_id}", response_model=CompanyDetail, dependencies=super_admin_only)
def get_company(company_id: str, service: CompanyService = Depends(get_company_service)):
    return service.find_one(company_id)


@router.put("/{company_id}", response_model=CompanyResponse, dependencies=super_admin_only)
def update_company(company_id: str, data: CompanyUpdate, service: CompanyService = Depends(get_company_service)):
    return service.update(company_id, data)


@router.put("/{company_id}/toggle-status", response_model=CompanyResponse, dependencies=super_admin_only)
def toggle_company_status(company_id: str, service: CompanyService = Depends(get_company_service)):
    return service.toggle_status(company_id)


@router.delete("/{company_id}", dependencies=super_admin_only)
def delete_company(company_id: str, service: CompanyService = Depends(get_company_service)):
    return service.remove(company_id)


@router.post("/{company_id}/logo", dependencies=super_admin_only)
async def upload_company_logo(
    company_id: str,
    logo: UploadFile = File(...),
    service: CompanyService = Depends(get_company_service),
):
    """Upload company logo (max 2MB, images only)."""
    content = await logo.read()
    return service.upload_logo(company_id, content, logo.content_type)


@router.get("/{company_id}/logo")
def get_company_logo(company_id: str, service: CompanyService = Depends(get_company_service)):
    """
    Public: logos are loaded by <img> tags, which cannot send bearer tokens.
    """
    path, media_type = service.logo_file(company_id)
    return FileResponse(path, media_type=media_type, headers={"Cache-Control": "public, max-age=3600"})
