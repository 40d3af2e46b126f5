from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_hr
from app.schemas.feedback import (
    BulkHRFeedbackCreate,
    BulkHRFeedbackResult,
    FeedbackCreate,
    FeedbackPage,
    FeedbackRead,
    FeedbackStatistics,
    HRFeedbackCreate,
)
from app.services.feedback import feedback

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackRead, status_code=201)
def submit_feedback(
    payload: FeedbackCreate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return feedback.create(db, auth["employee_id"], payload)


@router.post("/hr", response_model=FeedbackRead, status_code=201)
def send_hr_feedback(
    payload: HRFeedbackCreate,
    db: Session = Depends(get_db),
    auth=Depends(require_hr),
):
    return feedback.create_hr_feedback(db, auth["employee_id"], payload)


@router.post(
    "/hr/bulk",
    response_model=BulkHRFeedbackResult,
    response_model_exclude_unset=True,
    status_code=201,
)
def send_bulk_hr_feedback(
    payload: BulkHRFeedbackCreate,
    db: Session = Depends(get_db),
    auth=Depends(require_hr),
):
    return feedback.create_bulk_hr_feedback(db, auth["employee_id"], payload)


@router.get("", response_model=FeedbackPage)
def list_feedback(
    subject: str | None = Query(None),
    from_id: UUID | None = Query(None),
    to_id: UUID | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
    auth=Depends(require_hr),
):
    return feedback.list(db, subject=subject, from_id=from_id, to_id=to_id, page=page, limit=limit)


@router.get("/statistics", response_model=FeedbackStatistics)
def feedback_statistics(db: Session = Depends(get_db), auth=Depends(require_hr)):
    return feedback.statistics(db)


@router.get("/my/submitted", response_model=list[FeedbackRead])
def my_submitted_feedback(db: Session = Depends(get_db), auth=Depends(get_current_user)):
    return feedback.submitted_by(db, auth["employee_id"])


@router.get("/my/received", response_model=list[FeedbackRead])
def my_received_feedback(db: Session = Depends(get_db), auth=Depends(get_current_user)):
    return feedback.received_by(db, auth["employee_id"])


@router.get("/subject/{subject}", response_model=list[FeedbackRead])
def feedback_by_subject(subject: str, db: Session = Depends(get_db), auth=Depends(require_hr)):
    return feedback.by_subject(db, subject)


@router.get("/{feedback_id}", response_model=FeedbackRead)
def get_feedback(feedback_id: str, db: Session = Depends(get_db), auth=Depends(require_hr)):
    return feedback.get(db, feedback_id)


@router.delete("/{feedback_id}", status_code=204)
def delete_feedback(feedback_id: str, db: Session = Depends(get_db), auth=Depends(require_hr)):
    feedback.delete(db, feedback_id)
    return Response(status_code=204)
