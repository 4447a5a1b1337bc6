"""Assignment and submission database models."""

from sqlalchemy import JSON, Column, Integer, String
from .base import Base


class AssignmentModel(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    assignment_id = Column(String, unique=True, index=True, nullable=False)
    course_id = Column(String, index=True, nullable=False)
    course = Column(JSON, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    due_date = Column(String, nullable=True)
    max_points = Column(Integer, nullable=False, default=100)
    status = Column(String, nullable=False, default="active")
    created_by = Column(JSON, nullable=True)
    attachment = Column(JSON, nullable=True)  # stored file info, if any
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)


class SubmissionModel(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    submission_id = Column(String, unique=True, index=True, nullable=False)
    assignment_id = Column(String, index=True, nullable=False)
    student_id = Column(String, index=True, nullable=False)
    student = Column(JSON, nullable=False)
    file = Column(JSON, nullable=True)
    submitted_at = Column(String, nullable=False)
    status = Column(String, nullable=False, default="submitted")  # 'submitted' or 'graded'
    grade = Column(String, nullable=True)
    remarks = Column(String, nullable=True)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)
