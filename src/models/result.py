from sqlalchemy import JSON, Column, Float, Integer, String
from .base import Base


class ResultModel(Base):
    __tablename__ = "results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    result_id = Column(String, unique=True, index=True, nullable=False)
    student_id = Column(String, index=True, nullable=False)
    course_id = Column(String, index=True, nullable=False)
    student = Column(JSON, nullable=False)
    course = Column(JSON, nullable=False)
    ca_score = Column(Float, nullable=True)
    final_exam_score = Column(Float, nullable=True)
    final_percentage = Column(Integer, nullable=True)
    final_grade = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending")  # 'passed', 'failed' or 'pending'
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)
