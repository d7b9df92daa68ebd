from datetime import date
from typing import Any, Dict, List, Optional

from app.core.exceptions import AppException, ConflictError
from app.models.holiday import Holiday, HolidayType
from app.schemas.holiday import HolidayCreate, HolidayUpdate
from app.services.base import BaseService


class HolidayService(BaseService):
    def create(self, data: HolidayCreate) -> Holiday:
        conflict_message = f'Holiday "{data.name}" already exists on {data.date.isoformat()}'
        existing = self._scoped(Holiday).filter(
            Holiday.date == data.date,
            Holiday.name == data.name,
        ).first()
        if existing:
            raise ConflictError(conflict_message)

        holiday = Holiday(
            tenant_id=self.tenant_id,
            name=data.name,
            date=data.date,
            type=data.type,
            region=data.region,
            is_optional=bool(data.is_optional),
            description=data.description,
        )
        self.db.add(holiday)
        self._commit(conflict_message)
        self.db.refresh(holiday)
        return holiday

    def bulk_create(self, items: List[HolidayCreate]) -> List[Dict[str, Any]]:
        """Create each holiday independently; failures are reported per item."""
        results = []
        for item in items:
            try:
                results.append({"success": True, "holiday": self.create(item)})
            except AppException as e:
                self._logger.warning(f"Skipped holiday {item.name} on {item.date}: {e.message}")
                results.append({
                    "success": False,
                    "name": item.name,
                    "date": item.date,
                    "error": e.message,
                })
        return results

    def find_all(
        self,
        year: Optional[int] = None,
        holiday_type: Optional[HolidayType] = None,
        is_optional: Optional[bool] = None,
    ) -> List[Holiday]:
        query = self._scoped(Holiday).filter(Holiday.is_active.is_(True))
        if year:
            query = query.filter(Holiday.date >= date(year, 1, 1), Holiday.date <= date(year, 12, 31))
        if holiday_type:
            query = query.filter(Holiday.type == holiday_type)
        if is_optional is not None:
            query = query.filter(Holiday.is_optional.is_(is_optional))
        return query.order_by(Holiday.date.asc()).all()

    def find_upcoming(self, limit: int = 5) -> List[Holiday]:
        return (
            self._scoped(Holiday)
            .filter(Holiday.is_active.is_(True), Holiday.date >= date.today())
            .order_by(Holiday.date.asc())
            .limit(limit)
            .all()
        )

    def find_by_id(self, holiday_id: str) -> Holiday:
        return self._get_or_404(Holiday, holiday_id, "Holiday not found")

    def update(self, holiday_id: str, data: HolidayUpdate) -> Holiday:
        holiday = self.find_by_id(holiday_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(holiday, field, value)
        self._commit(f'Holiday "{holiday.name}" already exists on {holiday.date.isoformat()}')
        self.db.refresh(holiday)
        return holiday

    def delete(self, holiday_id: str) -> Holiday:
        holiday = self.find_by_id(holiday_id)
        holiday.is_active = False
        self._commit()
        self.db.refresh(holiday)
        return holiday

    def get_holidays_between(self, start: date, end: date) -> List[Holiday]:
        """Mandatory active holidays in the inclusive range."""
        return (
            self._scoped(Holiday)
            .filter(
                Holiday.is_active.is_(True),
                Holiday.is_optional.is_(False),
                Holiday.date >= start,
                Holiday.date <= end,
            )
            .order_by(Holiday.date.asc())
            .all()
        )
