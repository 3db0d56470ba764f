# lms/models/department.py
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from lms.db.base import Base


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    courses = relationship(
        "Course",
        back_populates="department",
        cascade="all, delete-orphan",
        order_by="Course.id",
    )
    # deleting a department unassigns its teachers
    teachers = relationship("TeacherProfile", back_populates="department")
