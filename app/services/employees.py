from __future__ import annotations

import builtins

from sqlalchemy.orm import Session

from app.models.employee import Employee
from app.services.common import coerce_uuid, get_or_404, try_coerce_uuid


class Employees:
    @staticmethod
    def get(db: Session, employee_id) -> Employee:
        return get_or_404(db, Employee, employee_id, detail="Employee not found")

    @staticmethod
    def find(db: Session, employee_id) -> Employee | None:
        key = try_coerce_uuid(employee_id)
        return db.get(Employee, key) if key else None

    @staticmethod
    def direct_reports(db: Session, manager_id) -> builtins.list[Employee]:
        return (
            db.query(Employee)
            .filter(Employee.manager_id == coerce_uuid(manager_id))
            .order_by(Employee.first_name.asc(), Employee.last_name.asc())
            .all()
        )

    @staticmethod
    def active(db: Session) -> builtins.list[Employee]:
        return (
            db.query(Employee)
            .filter(Employee.is_active.is_(True))
            .order_by(Employee.first_name.asc(), Employee.last_name.asc())
            .all()
        )

    @staticmethod
    def existing_ids(db: Session, employee_ids) -> set:
        keys = [key for key in (try_coerce_uuid(eid) for eid in employee_ids) if key]
        if not keys:
            return set()
        return {row[0] for row in db.query(Employee.id).filter(Employee.id.in_(keys)).all()}


employees = Employees()
