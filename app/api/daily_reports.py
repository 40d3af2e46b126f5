from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_hr
from app.schemas.daily_report import DailyReportCreate, DailyReportRead, HolidayCreate, HolidayRead
from app.services.daily_reports import daily_reports, holidays

router = APIRouter(tags=["daily-reports"])


@router.post("/daily-reports", response_model=DailyReportRead, status_code=201)
def submit_daily_report(
    payload: DailyReportCreate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return daily_reports.submit(db, auth["employee_id"], payload)


@router.get("/daily-reports/my", response_model=list[DailyReportRead])
def my_daily_reports(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return daily_reports.list_for_employee(db, auth["employee_id"], start_date, end_date)


@router.get("/holidays", response_model=list[HolidayRead])
def list_holidays(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return holidays.list(db, start_date, end_date)


@router.post("/holidays", response_model=HolidayRead, status_code=201)
def create_holiday(payload: HolidayCreate, db: Session = Depends(get_db), auth=Depends(require_hr)):
    return holidays.create(db, payload)


@router.delete("/holidays/{holiday_id}", status_code=204)
def delete_holiday(holiday_id: str, db: Session = Depends(get_db), auth=Depends(require_hr)):
    holidays.delete(db, holiday_id)
    return Response(status_code=204)
