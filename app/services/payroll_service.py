"""
Payroll Service Layer

Payroll runs, their status machine and the payslips they produce.

Run lifecycle:
    DRAFT -> PROCESSING -> COMPUTED -> APPROVED -> PAID

- Only DRAFT runs may be processed or deleted.
- Processing replaces any previous payslips of the run; a failure part way
  reverts the run to DRAFT.
- Employees see their own payslips once the run is APPROVED or PAID.
"""
import calendar
import html
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload

from app.core.exceptions import AccessDeniedError, BadRequestError, ConflictError
from app.core.requester import Requester, team_scope
from app.models.employee import Employee, EmployeeStatus
from app.models.payroll import PayrollRun, PayrollRunStatus, Payslip
from app.models.tenant import Tenant
from app.schemas.payroll import PayrollRunCreate
from app.services.base import BaseService
from app.services.payroll_calculation import PayrollCalculator

RELEASED_STATUSES = (PayrollRunStatus.APPROVED, PayrollRunStatus.PAID)


class PayrollService(BaseService):

    # ============================================================
    # RUNS
    # ============================================================
    def list_runs(self, year: Optional[int] = None, status: Optional[PayrollRunStatus] = None) -> List[PayrollRun]:
        query = self._scoped(PayrollRun)
        if year:
            query = query.filter(PayrollRun.year == year)
        if status:
            query = query.filter(PayrollRun.status == status)
        return query.order_by(PayrollRun.year.desc(), PayrollRun.month.desc()).all()

    def get_run(self, run_id: str) -> PayrollRun:
        return self._get_or_404(PayrollRun, run_id, "Payroll run not found")

    def create_run(self, data: PayrollRunCreate) -> PayrollRun:
        conflict_message = f"Payroll run for {data.month:02d}/{data.year} already exists"
        existing = self._scoped(PayrollRun).filter(
            PayrollRun.month == data.month,
            PayrollRun.year == data.year,
        ).first()
        if existing:
            raise ConflictError(conflict_message)

        run = PayrollRun(
            tenant_id=self.tenant_id,
            month=data.month,
            year=data.year,
            remarks=data.remarks,
        )
        self.db.add(run)
        self._commit(conflict_message)
        self.db.refresh(run)
        return run

    def process_run(self, run_id: str) -> PayrollRun:
        run = self.get_run(run_id)
        if run.status != PayrollRunStatus.DRAFT:
            raise BadRequestError(f"Only DRAFT payroll runs can be processed (current status: {run.status.value})")

        run.status = PayrollRunStatus.PROCESSING
        self._commit()

        try:
            self._scoped(Payslip).filter(Payslip.payroll_run_id == run.id).delete(synchronize_session="fetch")

            calculator = PayrollCalculator(self.db, self.tenant_id)
            employees = (
                self._scoped(Employee)
                .filter(Employee.status == EmployeeStatus.ACTIVE)
                .order_by(Employee.employee_code.asc())
                .all()
            )

            totals = {"gross": 0.0, "deductions": 0.0, "net": 0.0}
            processed = 0
            for employee in employees:
                figures = calculator.calculate(employee, run.month, run.year)
                if figures is None:
                    continue
                self.db.add(Payslip(tenant_id=self.tenant_id, payroll_run_id=run.id, **figures))
                totals["gross"] += figures["gross_pay"]
                totals["deductions"] += figures["total_deductions"]
                totals["net"] += figures["net_pay"]
                processed += 1

            run.total_gross = round(totals["gross"], 2)
            run.total_deductions = round(totals["deductions"], 2)
            run.total_net = round(totals["net"], 2)
            run.processed_count = processed
            run.processed_at = datetime.now(timezone.utc)
            run.status = PayrollRunStatus.COMPUTED
            self.db.commit()
        except Exception:
            self.db.rollback()
            self._logger.error(f"Payroll run {run_id} failed, reverting to DRAFT", exc_info=True)
            run.status = PayrollRunStatus.DRAFT
            self.db.commit()
            raise

        self.db.refresh(run)
        self._logger.info(f"Payroll run {run.month:02d}/{run.year} processed: {processed} payslips")
        return run

    def approve_run(self, run_id: str) -> PayrollRun:
        run = self.get_run(run_id)
        if run.status != PayrollRunStatus.COMPUTED:
            raise BadRequestError(f"Only COMPUTED payroll runs can be approved (current status: {run.status.value})")
        run.status = PayrollRunStatus.APPROVED
        run.approved_at = datetime.now(timezone.utc)
        self._commit()
        self.db.refresh(run)
        return run

    def mark_paid(self, run_id: str) -> PayrollRun:
        run = self.get_run(run_id)
        if run.status != PayrollRunStatus.APPROVED:
            raise BadRequestError(f"Only APPROVED payroll runs can be marked as paid (current status: {run.status.value})")
        run.status = PayrollRunStatus.PAID
        run.paid_at = datetime.now(timezone.utc)
        self._commit()
        self.db.refresh(run)
        return run

    def delete_run(self, run_id: str) -> Dict[str, str]:
        run = self.get_run(run_id)
        if run.status != PayrollRunStatus.DRAFT:
            raise BadRequestError(f"Only DRAFT payroll runs can be deleted (current status: {run.status.value})")
        self.db.delete(run)
        self._commit()
        return {"message": "Payroll run deleted successfully"}

    # ============================================================
    # PAYSLIPS
    # ============================================================
    def get_run_payslips(self, run_id: str, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        run = self.get_run(run_id)
        query = self._scoped(Payslip).filter(Payslip.payroll_run_id == run.id)
        total = query.count()
        payslips = (
            query.join(Employee, Payslip.employee_id == Employee.id)
            .options(joinedload(Payslip.employee))
            .order_by(Employee.employee_code.asc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {
            "data": payslips,
            "meta": {
                "total": total,
                "page": page,
                "limit": limit,
                "total_pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def get_employee_payslips(self, employee_id: str, released_only: bool = False) -> List[Payslip]:
        query = (
            self._scoped(Payslip)
            .join(PayrollRun, Payslip.payroll_run_id == PayrollRun.id)
            .options(joinedload(Payslip.payroll_run), joinedload(Payslip.employee))
            .filter(Payslip.employee_id == employee_id)
        )
        if released_only:
            query = query.filter(PayrollRun.status.in_(RELEASED_STATUSES))
        return query.order_by(PayrollRun.year.desc(), PayrollRun.month.desc()).all()

    def get_my_payslips(self, employee_id: Optional[str]) -> List[Payslip]:
        if not employee_id:
            raise BadRequestError("No employee profile is linked to this account")
        return self.get_employee_payslips(employee_id, released_only=True)

    def get_payslip(self, payslip_id: str, requester: Requester, employee_id: Optional[str] = None) -> Payslip:
        payslip = self._get_or_404(Payslip, payslip_id, "Payslip not found")
        if team_scope(requester) is not None:
            # Non-admins only ever see their own released payslips.
            if not employee_id or payslip.employee_id != employee_id:
                raise AccessDeniedError("You can only view your own payslips")
            if payslip.payroll_run.status not in RELEASED_STATUSES:
                raise AccessDeniedError("This payslip has not been released yet")
        return payslip

    def render_payslip_html(self, payslip: Payslip) -> bytes:
        """Printable HTML payslip."""
        run = payslip.payroll_run
        employee = payslip.employee
        tenant = self.db.get(Tenant, self.tenant_id)
        company_name = html.escape(tenant.name) if tenant else ""
        currency = tenant.currency if tenant else ""
        month_name = calendar.month_name[run.month]

        def rows(lines: List[Dict[str, Any]], sign: str) -> str:
            return "".join(
                f"<tr><td>{html.escape(str(line['name']))}</td>"
                f"<td style='text-align:right'>{sign} {line['amount']:,.2f}</td></tr>"
                for line in lines
            )

        html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>Payslip - {month_name} {run.year}</title>
        <style>
            body {{ font-family: Arial, sans-serif; margin: 40px; color: #333; }}
            .header {{ text-align: center; margin-bottom: 30px; border-bottom: 2px solid #2563eb; padding-bottom: 20px; }}
            .header h1 {{ color: #2563eb; margin: 0; }}
            .header p {{ color: #666; margin: 5px 0; }}
            .info-grid {{ display: grid; grid-template-columns: 1fr 1fr; gap: 20px; margin-bottom: 30px; }}
            .info-box {{ background: #f8fafc; padding: 15px; border-radius: 8px; }}
            .info-box h3 {{ margin: 0 0 10px 0; color: #1e40af; font-size: 14px; }}
            .info-box p {{ margin: 5px 0; font-size: 13px; }}
            table {{ width: 100%; border-collapse: collapse; margin: 20px 0; }}
            th, td {{ padding: 12px; text-align: left; border-bottom: 1px solid #e2e8f0; }}
            th {{ background: #f1f5f9; color: #1e40af; font-weight: 600; }}
            .total-row {{ background: #2563eb; color: white; font-weight: bold; }}
            .total-row td {{ border: none; }}
            .footer {{ margin-top: 40px; text-align: center; color: #666; font-size: 12px; }}
        </style>
    </head>
    <body>
        <div class="header">
            <h1>{company_name}</h1>
            <p>Payslip for {month_name} {run.year}</p>
        </div>

        <div class="info-grid">
            <div class="info-box">
                <h3>EMPLOYEE DETAILS</h3>
                <p><strong>Name:</strong> {html.escape(employee.full_name)}</p>
                <p><strong>Employee Code:</strong> {html.escape(employee.employee_code)}</p>
                <p><strong>Designation:</strong> {html.escape(employee.designation or '-')}</p>
            </div>
            <div class="info-box">
                <h3>ATTENDANCE</h3>
                <p><strong>Working Days:</strong> {payslip.working_days:g}</p>
                <p><strong>Present Days:</strong> {payslip.present_days:g}</p>
                <p><strong>Paid Leave:</strong> {payslip.leave_days:g} &nbsp; <strong>LOP:</strong> {payslip.lop_days:g}</p>
                <p><strong>OT Hours:</strong> {payslip.ot_hours:g}</p>
            </div>
        </div>

        <table>
            <thead>
                <tr>
                    <th>Description</th>
                    <th style="text-align: right">Amount ({currency})</th>
                </tr>
            </thead>
            <tbody>
                <tr>
                    <td>Base Pay</td>
                    <td style="text-align: right">{payslip.base_pay:,.2f}</td>
                </tr>
                {rows(payslip.earnings, "+")}
                <tr>
                    <td>Overtime</td>
                    <td style="text-align: right">+ {payslip.ot_pay:,.2f}</td>
                </tr>
                <tr>
                    <td><strong>Gross Pay</strong></td>
                    <td style="text-align: right"><strong>{payslip.gross_pay:,.2f}</strong></td>
                </tr>
                {rows(payslip.deductions, "-")}
                <tr class="total-row">
                    <td>NET PAY</td>
                    <td style="text-align: right">{payslip.net_pay:,.2f}</td>
                </tr>
            </tbody>
        </table>

        <div class="footer">
            <p>This is a computer-generated document. No signature required.</p>
            <p>Status: {run.status.value}</p>
        </div>
    </body>
    </html>
    """
        return html_content.encode("utf-8")
