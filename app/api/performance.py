from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_hr, require_manager
from app.schemas.performance import (
    EmployeeReportPerformanceRead,
    ReportPerformanceFilter,
    TeamReportPerformanceRead,
)
from app.services.performance import InvalidDateRange
from app.services.performance.reports import performance_reports

router = APIRouter(prefix="/performance", tags=["performance"])


@router.get("/my", response_model=EmployeeReportPerformanceRead)
def my_performance(
    filters: ReportPerformanceFilter = Depends(),
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    try:
        return performance_reports.employee_performance(db, auth["employee_id"], filters)
    except InvalidDateRange as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/employee/{employee_id}", response_model=EmployeeReportPerformanceRead)
def employee_performance(
    employee_id: str,
    filters: ReportPerformanceFilter = Depends(),
    db: Session = Depends(get_db),
    auth=Depends(require_manager),
):
    try:
        return performance_reports.employee_performance(db, employee_id, filters)
    except InvalidDateRange as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/team", response_model=TeamReportPerformanceRead)
def team_performance(
    filters: ReportPerformanceFilter = Depends(),
    db: Session = Depends(get_db),
    auth=Depends(require_manager),
):
    try:
        return performance_reports.team_performance(db, auth["employee_id"], filters)
    except InvalidDateRange as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/all", response_model=TeamReportPerformanceRead)
def all_performance(
    filters: ReportPerformanceFilter = Depends(),
    db: Session = Depends(get_db),
    auth=Depends(require_hr),
):
    try:
        return performance_reports.all_employees_performance(db, filters)
    except InvalidDateRange as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
