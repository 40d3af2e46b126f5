from __future__ import annotations

import builtins

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.logging import get_logger
from app.models.target import EmployeeTarget, TargetStatus
from app.schemas.target import (
    EmployeeTargetBulkCreate,
    EmployeeTargetCreate,
    EmployeeTargetUpdate,
    TargetParameter,
)
from app.services.common import coerce_uuid, get_or_404
from app.services.employees import employees

logger = get_logger(__name__)

DUPLICATE_TARGET_DETAIL = "Target already exists for this employee and month. Use update instead."


def _serialize_parameters(parameters: builtins.list[TargetParameter]) -> builtins.list[dict]:
    return [parameter.model_dump(exclude_none=True) for parameter in parameters]


class EmployeeTargets:
    def get(self, db: Session, target_id: str) -> EmployeeTarget:
        return get_or_404(db, EmployeeTarget, target_id, detail="Target not found")

    def get_by_employee_and_month(self, db: Session, employee_id, target_month: str) -> EmployeeTarget | None:
        return (
            db.query(EmployeeTarget)
            .filter(
                EmployeeTarget.employee_id == coerce_uuid(employee_id),
                EmployeeTarget.target_month == target_month,
            )
            .first()
        )

    def create(self, db: Session, payload: EmployeeTargetCreate, actor_id) -> EmployeeTarget:
        employees.get(db, payload.employee_id)
        if self.get_by_employee_and_month(db, payload.employee_id, payload.target_month):
            raise HTTPException(status_code=409, detail=DUPLICATE_TARGET_DETAIL)

        target = EmployeeTarget(
            employee_id=coerce_uuid(payload.employee_id),
            target_month=payload.target_month,
            target_data=_serialize_parameters(payload.target_data),
            notes=payload.notes,
            set_by=coerce_uuid(actor_id) if actor_id else None,
        )
        db.add(target)
        try:
            db.commit()
        except IntegrityError as exc:
            # Lost a race against a concurrent create for the same month.
            db.rollback()
            raise HTTPException(status_code=409, detail=DUPLICATE_TARGET_DETAIL) from exc
        db.refresh(target)
        logger.info(
            "Target %s created for employee %s month %s", target.id, target.employee_id, target.target_month
        )
        return target

    def bulk_create(self, db: Session, payload: EmployeeTargetBulkCreate, actor_id) -> dict:
        results: builtins.list[dict] = []
        errors: builtins.list[dict] = []
        target_data = _serialize_parameters(payload.target_data)
        set_by = coerce_uuid(actor_id) if actor_id else None

        for employee_id in payload.employee_ids:
            if employees.find(db, employee_id) is None:
                errors.append({"employee_id": employee_id, "error": "Employee not found"})
                continue
            try:
                existing = self.get_by_employee_and_month(db, employee_id, payload.target_month)
                if existing:
                    existing.target_data = target_data
                    existing.notes = payload.notes
                    existing.status = TargetStatus.active
                    existing.set_by = set_by
                    target, action = existing, "updated"
                else:
                    target = EmployeeTarget(
                        employee_id=coerce_uuid(employee_id),
                        target_month=payload.target_month,
                        target_data=target_data,
                        notes=payload.notes,
                        set_by=set_by,
                    )
                    db.add(target)
                    action = "created"
                db.commit()
                db.refresh(target)
            except SQLAlchemyError as exc:
                db.rollback()
                logger.warning("Bulk target assignment failed for employee %s: %s", employee_id, exc)
                errors.append({"employee_id": employee_id, "error": str(exc.__class__.__name__)})
                continue
            results.append({"employee_id": employee_id, "action": action, "target": target})

        logger.info(
            "Bulk target assignment for %s: %d succeeded, %d failed",
            payload.target_month,
            len(results),
            len(errors),
        )
        return {"results": results, "errors": errors}

    def list(
        self,
        db: Session,
        employee_id: str | None = None,
        target_month: str | None = None,
        manager_id: str | None = None,
    ) -> builtins.list[EmployeeTarget]:
        query = db.query(EmployeeTarget).filter(EmployeeTarget.status == TargetStatus.active)
        if employee_id:
            query = query.filter(EmployeeTarget.employee_id == coerce_uuid(employee_id))
        if target_month:
            query = query.filter(EmployeeTarget.target_month == target_month)
        if manager_id:
            team_ids = [member.id for member in employees.direct_reports(db, manager_id)]
            query = query.filter(EmployeeTarget.employee_id.in_(team_ids))
        return query.order_by(EmployeeTarget.target_month.desc(), EmployeeTarget.created_at.desc()).all()

    def active_for_months(self, db: Session, employee_id, months: builtins.list[str]) -> builtins.list[EmployeeTarget]:
        if not months:
            return []
        return (
            db.query(EmployeeTarget)
            .filter(
                EmployeeTarget.employee_id == coerce_uuid(employee_id),
                EmployeeTarget.target_month.in_(months),
                EmployeeTarget.status == TargetStatus.active,
            )
            .order_by(EmployeeTarget.target_month.asc())
            .all()
        )

    def team_targets(self, db: Session, manager_id: str, target_month: str | None = None) -> builtins.list[dict]:
        team = employees.direct_reports(db, manager_id)
        query = db.query(EmployeeTarget).filter(
            EmployeeTarget.employee_id.in_([member.id for member in team]),
            EmployeeTarget.status == TargetStatus.active,
        )
        if target_month:
            query = query.filter(EmployeeTarget.target_month == target_month)
        targets = query.order_by(EmployeeTarget.target_month.desc()).all()

        rows = []
        for member in team:
            member_targets = [target for target in targets if target.employee_id == member.id]
            current = next((t for t in member_targets if t.target_month == target_month), None)
            rows.append({"employee": member, "targets": member_targets, "current_target": current})
        return rows

    def update(self, db: Session, target_id: str, payload: EmployeeTargetUpdate, actor_id) -> EmployeeTarget:
        target = self.get(db, target_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("target_data") is not None:
            target.target_data = _serialize_parameters(payload.target_data)
        if "notes" in data:
            target.notes = data["notes"]
        if data.get("is_active") is not None:
            target.is_active = data["is_active"]
        target.set_by = coerce_uuid(actor_id) if actor_id else None
        db.commit()
        db.refresh(target)
        logger.info("Target %s updated", target.id)
        return target

    def remove(self, db: Session, target_id: str) -> EmployeeTarget:
        target = self.get(db, target_id)
        target.status = TargetStatus.deleted
        db.commit()
        db.refresh(target)
        logger.info("Target %s soft-deleted", target.id)
        return target

    def hard_delete(self, db: Session, target_id: str) -> None:
        target = self.get(db, target_id)
        db.delete(target)
        db.commit()
        logger.info("Target %s permanently deleted", target_id)

    def team_stats(self, db: Session, manager_id: str, target_month: str) -> dict:
        team_ids = [member.id for member in employees.direct_reports(db, manager_id)]
        with_targets = 0
        if team_ids:
            with_targets = (
                db.query(EmployeeTarget.employee_id)
                .filter(
                    EmployeeTarget.employee_id.in_(team_ids),
                    EmployeeTarget.target_month == target_month,
                    EmployeeTarget.status == TargetStatus.active,
                )
                .distinct()
                .count()
            )
        return {
            "total_team_members": len(team_ids),
            "members_with_targets": with_targets,
            "members_without_targets": len(team_ids) - with_targets,
            "target_month": target_month,
        }


targets = EmployeeTargets()
