from sqlalchemy import JSON, Column, Integer, String
from .base import Base


class CourseModel(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(String, unique=True, index=True, nullable=False)
    title = Column(String, nullable=False)
    code = Column(String, index=True, nullable=False)
    description = Column(String, nullable=False, default="")
    # Denormalized copy of the instructor taken when the course was assigned
    instructor = Column(JSON, nullable=True)
    instructor_id = Column(String, index=True, nullable=True)
    capacity = Column(Integer, nullable=False, default=0)
    enrolled = Column(Integer, nullable=False, default=0)
    duration = Column(String, nullable=True)
    credits = Column(Integer, nullable=False, default=3)
    level = Column(String, nullable=False, default="beginner")
    category = Column(String, nullable=False, default="General")
    status = Column(String, nullable=False, default="active")
    start_date = Column(String, nullable=True)
    end_date = Column(String, nullable=True)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)
