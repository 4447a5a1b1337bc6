from sqlalchemy import JSON, Column, Integer, String
from .base import Base


class MaterialModel(Base):
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, autoincrement=True)
    material_id = Column(String, unique=True, index=True, nullable=False)
    course_id = Column(String, index=True, nullable=False)
    course = Column(JSON, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    file_type = Column(String, nullable=False, default="other")  # pdf, video, docx, image, other
    file_name = Column(String, nullable=True)
    original_name = Column(String, nullable=True)
    mime_type = Column(String, nullable=True)
    size = Column(Integer, nullable=False, default=0)
    file_url = Column(String, nullable=True)
    uploaded_by = Column(JSON, nullable=True)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)
