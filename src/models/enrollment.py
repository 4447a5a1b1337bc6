from sqlalchemy import JSON, Column, Float, Integer, String
from .base import Base


class EnrollmentModel(Base):
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_id = Column(String, unique=True, index=True, nullable=False)
    student_id = Column(String, index=True, nullable=False)
    course_id = Column(String, index=True, nullable=False)
    student = Column(JSON, nullable=False)
    course = Column(JSON, nullable=False)
    status = Column(String, nullable=False, default="active")  # 'active', 'completed' or 'dropped'
    progress = Column(Integer, nullable=False, default=0)
    enrollment_date = Column(String, nullable=False)
    grade = Column(String, nullable=True)
    score = Column(Float, nullable=True)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)
