"""
Report download endpoints.
Each returns the generated file as an attachment.
"""
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.core.requester import Requester
from app.database import get_db
from app.routers.auth_deps import get_current_user, get_requester, require_admin, require_manager
from app.schemas.auth import AuthenticatedUser
from app.schemas.report import (
    AttendanceReportRequest, EmployeeReportRequest, LeaveReportRequest, PayrollReportRequest,
)
from app.services.report_export import ReportFile
from app.services.report_service import ReportService

router = APIRouter(
    prefix="/reports",
    tags=["reports"]
)


def get_report_service(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> ReportService:
    return ReportService(db, current_user.tenant_id)


def _download(report: ReportFile) -> Response:
    return Response(
        content=report.content,
        media_type=report.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{report.filename}"',
            "Content-Length": str(len(report.content)),
        },
    )


@router.post("/attendance", dependencies=[Depends(require_manager())])
def attendance_report(
    filters: AttendanceReportRequest,
    requester: Requester = Depends(get_requester),
    service: ReportService = Depends(get_report_service),
):
    return _download(service.generate_attendance_report(filters, requester))


@router.post("/leave", dependencies=[Depends(require_manager())])
def leave_report(
    filters: LeaveReportRequest,
    requester: Requester = Depends(get_requester),
    service: ReportService = Depends(get_report_service),
):
    return _download(service.generate_leave_report(filters, requester))


@router.post("/employees", dependencies=[Depends(require_manager())])
def employee_report(
    filters: EmployeeReportRequest,
    requester: Requester = Depends(get_requester),
    service: ReportService = Depends(get_report_service),
):
    return _download(service.generate_employee_report(filters, requester))


@router.post("/payroll", dependencies=[Depends(require_admin())])
def payroll_report(data: PayrollReportRequest, service: ReportService = Depends(get_report_service)):
    return _download(service.generate_payroll_report(data.run_id, data.format))
