# lms/api/endpoints/departments.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.core.security import get_current_admin
from lms.db.session import get_db
from lms.schemas.auth import MessageResponse
from lms.schemas.department import (
    DepartmentCreate,
    DepartmentDetail,
    DepartmentPublic,
    DepartmentUpdate,
)
from lms.services import department_service

router = APIRouter(prefix="/departments", tags=["departments"])


@router.get("", response_model=List[DepartmentPublic])
def list_departments(
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
):
    return department_service.list_departments(db, skip=skip, limit=limit)


@router.get("/{department_id}", response_model=DepartmentDetail)
def get_department(department_id: int, db: Session = Depends(get_db)):
    return department_service.get_department_or_404(db, department_id)


@router.post("", response_model=DepartmentPublic, status_code=status.HTTP_201_CREATED)
def create_department(
    obj_in: DepartmentCreate,
    db: Session = Depends(get_db),
    _admin=Depends(get_current_admin),
):
    return department_service.create_department(db, obj_in=obj_in)


@router.put("/{department_id}", response_model=DepartmentPublic)
def update_department(
    department_id: int,
    obj_in: DepartmentUpdate,
    db: Session = Depends(get_db),
    _admin=Depends(get_current_admin),
):
    dept = department_service.get_department_or_404(db, department_id)
    return department_service.update_department(db, db_obj=dept, obj_in=obj_in)


@router.delete("/{department_id}", response_model=MessageResponse)
def delete_department(
    department_id: int,
    db: Session = Depends(get_db),
    _admin=Depends(get_current_admin),
):
    dept = department_service.get_department_or_404(db, department_id)
    department_service.delete_department(db, db_obj=dept)
    return MessageResponse(message="department deleted successfully")
