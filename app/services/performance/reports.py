from __future__ import annotations

from datetime import date

from prometheus_client import Histogram
from sqlalchemy.orm import Session

from app.config import settings
from app.logging import get_logger
from app.models.employee import Employee
from app.schemas.performance import ReportPerformanceFilter
from app.services.daily_reports import daily_reports, holidays
from app.services.employees import employees
from app.services.performance.aggregation import (
    EmployeeReportPerformance,
    MonthlyTarget,
    ProrationBasis,
    ReportInput,
    TargetValue,
    TeamReportPerformance,
    employee_performance,
    team_performance,
)
from app.services.performance.periods import DateRange, ReportPeriod, months_in_range, resolve_range
from app.services.performance.work_calendar import WorkCalendar
from app.services.targets import targets

logger = get_logger(__name__)

REPORT_SECONDS = Histogram(
    "performance_report_seconds",
    "Time spent building target performance reports",
    ["scope"],
)


def _proration_basis() -> ProrationBasis:
    try:
        return ProrationBasis(settings.proration_basis)
    except ValueError:
        logger.warning("Unknown PRORATION_BASIS %r, using working_days", settings.proration_basis)
        return ProrationBasis.working_days


class PerformanceReportsService:
    def resolve_range(self, filters: ReportPerformanceFilter, today: date | None = None) -> DateRange:
        return resolve_range(filters.period, filters.start_date, filters.end_date, today)

    def _monthly_targets(self, db: Session, employee: Employee, date_range: DateRange) -> list[MonthlyTarget]:
        rows = targets.active_for_months(db, employee.id, months_in_range(date_range))
        return [
            MonthlyTarget(
                month=row.target_month,
                parameters=tuple(
                    TargetValue(name=str(item.get("name")), value=float(item.get("value") or 0), unit=item.get("unit"))
                    for item in (row.target_data or [])
                    if isinstance(item, dict) and item.get("name")
                ),
            )
            for row in rows
        ]

    def _reports(self, db: Session, employee: Employee, date_range: DateRange) -> list[ReportInput]:
        rows = daily_reports.list_for_employee(db, employee.id, date_range.start, date_range.end)
        return [
            ReportInput(
                report_date=row.report_date,
                employee_id=str(row.employee_id),
                parameter_values=row.parameter_values or {},
            )
            for row in rows
        ]

    def _build(
        self,
        db: Session,
        employee: Employee,
        period: ReportPeriod,
        date_range: DateRange,
        calendar: WorkCalendar,
        today: date | None = None,
    ) -> EmployeeReportPerformance:
        return employee_performance(
            employee_id=str(employee.id),
            employee_name=employee.full_name,
            role_name=employee.role_name,
            period=period,
            date_range=date_range,
            targets=self._monthly_targets(db, employee, date_range),
            reports=self._reports(db, employee, date_range),
            calendar=calendar,
            basis=_proration_basis(),
            as_of=today or date.today(),
        )

    def employee_performance(
        self,
        db: Session,
        employee_id: str,
        filters: ReportPerformanceFilter,
        today: date | None = None,
    ) -> EmployeeReportPerformance:
        employee = employees.get(db, employee_id)
        date_range = self.resolve_range(filters, today)
        with REPORT_SECONDS.labels(scope="employee").time():
            calendar = holidays.work_calendar(db, date_range)
            return self._build(db, employee, filters.period, date_range, calendar, today)

    def team_performance(
        self,
        db: Session,
        manager_id: str,
        filters: ReportPerformanceFilter,
        today: date | None = None,
    ) -> TeamReportPerformance:
        date_range = self.resolve_range(filters, today)
        with REPORT_SECONDS.labels(scope="team").time():
            calendar = holidays.work_calendar(db, date_range)
            members = employees.direct_reports(db, manager_id)
            results = [self._build(db, member, filters.period, date_range, calendar, today) for member in members]
            return team_performance(results)

    def all_employees_performance(
        self,
        db: Session,
        filters: ReportPerformanceFilter,
        today: date | None = None,
    ) -> TeamReportPerformance:
        date_range = self.resolve_range(filters, today)
        with REPORT_SECONDS.labels(scope="all").time():
            calendar = holidays.work_calendar(db, date_range)
            results = []
            for member in employees.active(db):
                result = self._build(db, member, filters.period, date_range, calendar, today)
                if result.parameters:
                    results.append(result)
            logger.info(
                "Built organisation performance for %d employees (%s to %s)",
                len(results),
                date_range.start,
                date_range.end,
            )
            return team_performance(results)


performance_reports = PerformanceReportsService()
