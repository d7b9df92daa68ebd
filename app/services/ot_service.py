"""
Overtime rule lookup.

Daily OT minutes are computed when attendance is captured; payroll only picks
the rule that governs an employee and applies its monthly cap.
"""
from typing import Optional

from app.models.employee import EmploymentType
from app.models.ot_rule import OtRule
from app.services.base import BaseService


def apply_monthly_cap(ot_minutes: float, rule: Optional[OtRule]) -> float:
    if rule is not None and rule.max_ot_per_month_minutes:
        return min(ot_minutes, rule.max_ot_per_month_minutes)
    return ot_minutes


class OtService(BaseService):
    def get_applicable_rule(self, employment_type: EmploymentType) -> Optional[OtRule]:
        """Active rule for the employment type, else the tenant's active default rule."""
        rule = self._scoped(OtRule).filter(
            OtRule.employment_type == employment_type,
            OtRule.is_active.is_(True),
        ).first()
        if rule is None:
            rule = self._scoped(OtRule).filter(
                OtRule.employment_type.is_(None),
                OtRule.is_active.is_(True),
            ).first()
        return rule
