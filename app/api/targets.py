from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_hr, require_manager
from app.schemas.target import (
    TARGET_MONTH_PATTERN,
    EmployeeTargetBulkCreate,
    EmployeeTargetCreate,
    EmployeeTargetRead,
    EmployeeTargetUpdate,
    TargetBulkResult,
    TeamMemberTargets,
    TeamTargetStats,
)
from app.services.targets import targets

router = APIRouter(prefix="/targets", tags=["targets"])


@router.post("", response_model=EmployeeTargetRead, status_code=201)
def create_target(
    payload: EmployeeTargetCreate,
    db: Session = Depends(get_db),
    auth=Depends(require_manager),
):
    return targets.create(db, payload, actor_id=auth["employee_id"])


@router.post("/bulk", response_model=TargetBulkResult, status_code=201)
def bulk_create_targets(
    payload: EmployeeTargetBulkCreate,
    db: Session = Depends(get_db),
    auth=Depends(require_manager),
):
    return targets.bulk_create(db, payload, actor_id=auth["employee_id"])


@router.get("", response_model=list[EmployeeTargetRead])
def list_targets(
    employee_id: UUID | None = Query(None),
    target_month: str | None = Query(None, pattern=TARGET_MONTH_PATTERN),
    manager_id: UUID | None = Query(None),
    db: Session = Depends(get_db),
    auth=Depends(require_manager),
):
    return targets.list(db, employee_id=employee_id, target_month=target_month, manager_id=manager_id)


@router.get("/team", response_model=list[TeamMemberTargets])
def team_targets(
    target_month: str | None = Query(None, pattern=TARGET_MONTH_PATTERN),
    db: Session = Depends(get_db),
    auth=Depends(require_manager),
):
    return targets.team_targets(db, auth["employee_id"], target_month)


@router.get("/team/stats", response_model=TeamTargetStats)
def team_target_stats(
    target_month: str = Query(..., pattern=TARGET_MONTH_PATTERN),
    db: Session = Depends(get_db),
    auth=Depends(require_manager),
):
    return targets.team_stats(db, auth["employee_id"], target_month)


@router.get("/employee/{employee_id}", response_model=list[EmployeeTargetRead])
def employee_targets(
    employee_id: UUID,
    target_month: str | None = Query(None, pattern=TARGET_MONTH_PATTERN),
    db: Session = Depends(get_db),
    auth=Depends(require_manager),
):
    if target_month:
        target = targets.get_by_employee_and_month(db, employee_id, target_month)
        return [target] if target and target.is_active else []
    return targets.list(db, employee_id=employee_id)


@router.get("/{target_id}", response_model=EmployeeTargetRead)
def get_target(target_id: str, db: Session = Depends(get_db), auth=Depends(require_manager)):
    return targets.get(db, target_id)


@router.patch("/{target_id}", response_model=EmployeeTargetRead)
def update_target(
    target_id: str,
    payload: EmployeeTargetUpdate,
    db: Session = Depends(get_db),
    auth=Depends(require_manager),
):
    return targets.update(db, target_id, payload, actor_id=auth["employee_id"])


@router.delete("/{target_id}", response_model=EmployeeTargetRead)
def delete_target(target_id: str, db: Session = Depends(get_db), auth=Depends(require_manager)):
    return targets.remove(db, target_id)


@router.delete("/{target_id}/permanent", status_code=204)
def hard_delete_target(target_id: str, db: Session = Depends(get_db), auth=Depends(require_hr)):
    targets.hard_delete(db, target_id)
    return Response(status_code=204)
