"""
Payroll Router

Handles HTTP endpoints for salary structures, payroll runs and payslips.
All business logic is delegated to the payroll service layer.
"""
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.requester import Requester
from app.database import get_db
from app.models.payroll import PayrollRunStatus
from app.routers.auth_deps import get_current_user, get_requester, require_admin
from app.schemas.auth import AuthenticatedUser
from app.schemas.payroll import (
    AssignSalaryRequest, EmployeeSalaryResponse, PayrollRunCreate, PayrollRunDetail,
    PayrollRunResponse, PayslipPage, PayslipWithRun,
    SalaryStructureCreate, SalaryStructureListItem, SalaryStructureResponse, SalaryStructureUpdate,
)
from app.services.payroll_service import PayrollService
from app.services.salary_service import SalaryService

router = APIRouter(
    prefix="/payroll",
    tags=["payroll"]
)


def get_salary_service(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> SalaryService:
    return SalaryService(db, current_user.tenant_id)


def get_payroll_service(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> PayrollService:
    return PayrollService(db, current_user.tenant_id)


# --- Salary structures ---

@router.get("/salary-structures", response_model=List[SalaryStructureListItem], dependencies=[Depends(require_admin())])
def list_salary_structures(service: SalaryService = Depends(get_salary_service)):
    return service.list_structures()


@router.get("/salary-structures/{structure_id}", response_model=SalaryStructureResponse, dependencies=[Depends(require_admin())])
def get_salary_structure(structure_id: str, service: SalaryService = Depends(get_salary_service)):
    return service.get_structure(structure_id)


@router.post("/salary-structures", response_model=SalaryStructureResponse, dependencies=[Depends(require_admin())])
def create_salary_structure(data: SalaryStructureCreate, service: SalaryService = Depends(get_salary_service)):
    return service.create_structure(data)


@router.put("/salary-structures/{structure_id}", response_model=SalaryStructureResponse, dependencies=[Depends(require_admin())])
def update_salary_structure(
    structure_id: str,
    data: SalaryStructureUpdate,
    service: SalaryService = Depends(get_salary_service),
):
    return service.update_structure(structure_id, data)


@router.delete("/salary-structures/{structure_id}", dependencies=[Depends(require_admin())])
def delete_salary_structure(structure_id: str, service: SalaryService = Depends(get_salary_service)):
    return service.delete_structure(structure_id)


# --- Employee salaries ---

@router.post("/salaries/assign", response_model=EmployeeSalaryResponse, dependencies=[Depends(require_admin())])
def assign_salary(data: AssignSalaryRequest, service: SalaryService = Depends(get_salary_service)):
    return service.assign_salary(data)


@router.get("/employees/{employee_id}/salaries", response_model=List[EmployeeSalaryResponse], dependencies=[Depends(require_admin())])
def get_employee_salaries(employee_id: str, service: SalaryService = Depends(get_salary_service)):
    return service.get_employee_salaries(employee_id)


@router.get("/employees/{employee_id}/payslips", response_model=List[PayslipWithRun], dependencies=[Depends(require_admin())])
def get_employee_payslips(employee_id: str, service: PayrollService = Depends(get_payroll_service)):
    return service.get_employee_payslips(employee_id)


# --- Runs ---

@router.get("/runs", response_model=List[PayrollRunResponse], dependencies=[Depends(require_admin())])
def list_runs(
    year: Optional[int] = None,
    status: Optional[PayrollRunStatus] = None,
    service: PayrollService = Depends(get_payroll_service),
):
    return service.list_runs(year, status)


@router.post("/runs", response_model=PayrollRunResponse, dependencies=[Depends(require_admin())])
def create_run(data: PayrollRunCreate, service: PayrollService = Depends(get_payroll_service)):
    return service.create_run(data)


@router.get("/runs/{run_id}", response_model=PayrollRunDetail, dependencies=[Depends(require_admin())])
def get_run(run_id: str, service: PayrollService = Depends(get_payroll_service)):
    return service.get_run(run_id)


@router.post("/runs/{run_id}/process", response_model=PayrollRunResponse, dependencies=[Depends(require_admin())])
def process_run(run_id: str, service: PayrollService = Depends(get_payroll_service)):
    return service.process_run(run_id)


@router.post("/runs/{run_id}/approve", response_model=PayrollRunResponse, dependencies=[Depends(require_admin())])
def approve_run(run_id: str, service: PayrollService = Depends(get_payroll_service)):
    return service.approve_run(run_id)


@router.post("/runs/{run_id}/pay", response_model=PayrollRunResponse, dependencies=[Depends(require_admin())])
def mark_run_paid(run_id: str, service: PayrollService = Depends(get_payroll_service)):
    return service.mark_paid(run_id)


@router.delete("/runs/{run_id}", dependencies=[Depends(require_admin())])
def delete_run(run_id: str, service: PayrollService = Depends(get_payroll_service)):
    return service.delete_run(run_id)


@router.get("/runs/{run_id}/payslips", response_model=PayslipPage, dependencies=[Depends(require_admin())])
def get_run_payslips(
    run_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    service: PayrollService = Depends(get_payroll_service),
):
    return service.get_run_payslips(run_id, page, limit)


# --- Payslips ---

@router.get("/my-payslips", response_model=List[PayslipWithRun])
def get_my_payslips(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: PayrollService = Depends(get_payroll_service),
):
    return service.get_my_payslips(current_user.employee_id)


@router.get("/payslips/{payslip_id}", response_model=PayslipWithRun)
def get_payslip(
    payslip_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    requester: Requester = Depends(get_requester),
    service: PayrollService = Depends(get_payroll_service),
):
    return service.get_payslip(payslip_id, requester, current_user.employee_id)


@router.get("/payslips/{payslip_id}/download")
def download_payslip(
    payslip_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    requester: Requester = Depends(get_requester),
    service: PayrollService = Depends(get_payroll_service),
):
    payslip = service.get_payslip(payslip_id, requester, current_user.employee_id)
    content = service.render_payslip_html(payslip)
    filename = f"payslip_{payslip.payroll_run.year}_{payslip.payroll_run.month:02d}_{payslip.employee.employee_code}.html"
    return Response(
        content=content,
        media_type="text/html",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
