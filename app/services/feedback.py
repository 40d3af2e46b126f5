from __future__ import annotations

import builtins
import math

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.logging import get_logger
from app.models.feedback import Feedback
from app.schemas.feedback import BulkHRFeedbackCreate, FeedbackCreate, HRFeedbackCreate
from app.services.common import apply_pagination, coerce_uuid, get_or_404, try_coerce_uuid
from app.services.employees import employees

logger = get_logger(__name__)


class FeedbackService:
    def create(self, db: Session, from_id, payload: FeedbackCreate) -> Feedback:
        recipient = employees.get(db, payload.to_id) if payload.to_id else None
        feedback = Feedback(
            from_id=coerce_uuid(from_id),
            to_id=recipient.id if recipient else None,
            subject=payload.subject.value,
            content=payload.content,
            is_confidential=payload.is_confidential,
        )
        db.add(feedback)
        db.commit()
        db.refresh(feedback)
        return feedback

    def create_hr_feedback(self, db: Session, from_id, payload: HRFeedbackCreate) -> Feedback:
        recipient = employees.get(db, payload.to_id)
        feedback = Feedback(
            from_id=coerce_uuid(from_id),
            to_id=recipient.id,
            subject=payload.subject,
            content=payload.content,
            is_confidential=False,
        )
        db.add(feedback)
        db.commit()
        db.refresh(feedback)
        return feedback

    def create_bulk_hr_feedback(self, db: Session, from_id, payload: BulkHRFeedbackCreate) -> dict:
        existing = employees.existing_ids(db, payload.to_ids)
        valid_ids = []
        invalid_ids = []
        for raw_id in payload.to_ids:
            key = try_coerce_uuid(raw_id)
            if key in existing:
                if key not in valid_ids:
                    valid_ids.append(key)
            else:
                invalid_ids.append(raw_id)

        sender_id = coerce_uuid(from_id)
        feedbacks = []
        write_failures = 0
        for to_id in valid_ids:
            feedback = Feedback(
                from_id=sender_id,
                to_id=to_id,
                subject=payload.subject,
                content=payload.content,
                is_confidential=False,
            )
            try:
                db.add(feedback)
                db.commit()
                db.refresh(feedback)
            except SQLAlchemyError as exc:
                db.rollback()
                write_failures += 1
                logger.warning("Bulk HR feedback to employee %s failed: %s", to_id, exc)
                continue
            feedbacks.append(feedback)

        if invalid_ids:
            logger.warning("Bulk HR feedback skipped %d unknown employee ids", len(invalid_ids))
        result = {"sent": len(feedbacks), "failed": len(invalid_ids) + write_failures, "feedbacks": feedbacks}
        if invalid_ids:
            result["invalid_employee_ids"] = invalid_ids
        return result

    def list(
        self,
        db: Session,
        subject: str | None = None,
        from_id: str | None = None,
        to_id: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> dict:
        page = max(1, page)
        limit = max(1, limit or settings.feedback_page_size)
        query = db.query(Feedback)
        if subject:
            query = query.filter(Feedback.subject == subject)
        if from_id:
            query = query.filter(Feedback.from_id == coerce_uuid(from_id))
        if to_id:
            query = query.filter(Feedback.to_id == coerce_uuid(to_id))

        total = query.count()
        records = apply_pagination(query.order_by(Feedback.created_at.desc()), limit, (page - 1) * limit).all()
        return {
            "data": records,
            "meta": {
                "total": total,
                "page": page,
                "limit": limit,
                "total_pages": math.ceil(total / limit),
            },
        }

    def submitted_by(self, db: Session, employee_id) -> builtins.list[Feedback]:
        return (
            db.query(Feedback)
            .filter(Feedback.from_id == coerce_uuid(employee_id))
            .order_by(Feedback.created_at.desc())
            .all()
        )

    def received_by(self, db: Session, employee_id) -> builtins.list[Feedback]:
        return (
            db.query(Feedback)
            .filter(Feedback.to_id == coerce_uuid(employee_id))
            .order_by(Feedback.created_at.desc())
            .all()
        )

    def by_subject(self, db: Session, subject: str) -> builtins.list[Feedback]:
        return db.query(Feedback).filter(Feedback.subject == subject).order_by(Feedback.created_at.desc()).all()

    def get(self, db: Session, feedback_id: str) -> Feedback:
        return get_or_404(db, Feedback, feedback_id, detail="Feedback not found")

    def statistics(self, db: Session) -> dict:
        total = db.query(func.count(Feedback.id)).scalar() or 0
        by_subject = {
            subject: count
            for subject, count in db.query(Feedback.subject, func.count(Feedback.id)).group_by(Feedback.subject).all()
        }
        confidential_count = (
            db.query(func.count(Feedback.id)).filter(Feedback.is_confidential.is_(True)).scalar() or 0
        )
        recent = db.query(Feedback).order_by(Feedback.created_at.desc()).limit(5).all()
        return {
            "total": total,
            "by_subject": by_subject,
            "confidential_count": confidential_count,
            "recent": recent,
        }

    def delete(self, db: Session, feedback_id: str) -> None:
        feedback = self.get(db, feedback_id)
        db.delete(feedback)
        db.commit()
        logger.info("Feedback %s deleted", feedback_id)


feedback = FeedbackService()
