from fastapi import APIRouter
from app.routers import (
    auth, admin, companies, tenant_info, holidays, shifts, reports, payroll
)

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(admin.router, tags=["Administration"])
api_router.include_router(companies.router, tags=["Companies"])
api_router.include_router(tenant_info.router, tags=["Tenant"])
api_router.include_router(holidays.router, tags=["Holidays"])
api_router.include_router(shifts.router, tags=["Shifts"])
api_router.include_router(reports.router, tags=["Reports"])
api_router.include_router(payroll.router, tags=["Payroll"])
