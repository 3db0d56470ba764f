# lms/services/department_service.py
from typing import List

from sqlalchemy.orm import Session, selectinload

from lms.core.exceptions import DepartmentNotFound
from lms.models.department import Department
from lms.schemas.department import DepartmentCreate, DepartmentUpdate


def create_department(db: Session, *, obj_in: DepartmentCreate) -> Department:
    db_obj = Department(**obj_in.model_dump())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def get_department_or_404(db: Session, department_id: int) -> Department:
    dept = (
        db.query(Department)
        .options(selectinload(Department.courses))
        .filter(Department.id == department_id)
        .first()
    )
    if dept is None:
        raise DepartmentNotFound(department_id)
    return dept


def list_departments(db: Session, *, skip: int = 0, limit: int = 100) -> List[Department]:
    return (
        db.query(Department)
        .order_by(Department.id.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def update_department(
    db: Session,
    *,
    db_obj: Department,
    obj_in: DepartmentUpdate,
) -> Department:
    update_data = obj_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_department(db: Session, *, db_obj: Department) -> None:
    # courses go with it; teacher profiles are unassigned
    db.delete(db_obj)
    db.commit()
