from __future__ import annotations

import builtins
from datetime import date

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.logging import get_logger
from app.models.daily_report import DailyReport, OfficialHoliday
from app.schemas.daily_report import DailyReportCreate, HolidayCreate
from app.services.common import coerce_uuid, get_or_404
from app.services.employees import employees
from app.services.performance.periods import DateRange
from app.services.performance.work_calendar import WorkCalendar

logger = get_logger(__name__)


class DailyReports:
    @staticmethod
    def submit(db: Session, employee_id, payload: DailyReportCreate) -> DailyReport:
        employee = employees.get(db, employee_id)
        existing = (
            db.query(DailyReport)
            .filter(DailyReport.employee_id == employee.id, DailyReport.report_date == payload.report_date)
            .first()
        )
        if existing:
            raise HTTPException(status_code=409, detail="A report for this date has already been submitted")
        report = DailyReport(
            employee_id=employee.id,
            report_date=payload.report_date,
            parameter_values=dict(payload.parameter_values),
            notes=payload.notes,
        )
        db.add(report)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise HTTPException(status_code=409, detail="A report for this date has already been submitted") from exc
        db.refresh(report)
        return report

    @staticmethod
    def list_for_employee(
        db: Session,
        employee_id,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> builtins.list[DailyReport]:
        query = db.query(DailyReport).filter(DailyReport.employee_id == coerce_uuid(employee_id))
        if start_date:
            query = query.filter(DailyReport.report_date >= start_date)
        if end_date:
            query = query.filter(DailyReport.report_date <= end_date)
        return query.order_by(DailyReport.report_date.asc()).all()


class Holidays:
    @staticmethod
    def create(db: Session, payload: HolidayCreate) -> OfficialHoliday:
        holiday = OfficialHoliday(name=payload.name, holiday_date=payload.holiday_date)
        db.add(holiday)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise HTTPException(status_code=409, detail="A holiday already exists on this date") from exc
        db.refresh(holiday)
        logger.info("Holiday %s added on %s", holiday.name, holiday.holiday_date)
        return holiday

    @staticmethod
    def list(db: Session, start_date: date | None = None, end_date: date | None = None) -> builtins.list[OfficialHoliday]:
        query = db.query(OfficialHoliday)
        if start_date:
            query = query.filter(OfficialHoliday.holiday_date >= start_date)
        if end_date:
            query = query.filter(OfficialHoliday.holiday_date <= end_date)
        return query.order_by(OfficialHoliday.holiday_date.asc()).all()

    @staticmethod
    def delete(db: Session, holiday_id: str) -> None:
        holiday = get_or_404(db, OfficialHoliday, holiday_id, detail="Holiday not found")
        db.delete(holiday)
        db.commit()

    def work_calendar(self, db: Session, date_range: DateRange) -> WorkCalendar:
        holidays = [holiday.holiday_date for holiday in self.list(db, date_range.start, date_range.end)]
        return WorkCalendar.build(settings.working_days_of_week, holidays)


daily_reports = DailyReports()
holidays = Holidays()
