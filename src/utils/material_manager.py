"""Course material management utilities."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from core.exceptions import CourseNotFoundError, MaterialNotFoundError, ValidationError
from models.course import CourseModel
from models.material import MaterialModel
from models.user import UserModel
from schemas.material import CreateMaterialRequest, Material, UpdateMaterialRequest
from utils.converters import (
    course_snapshot,
    creator_snapshot,
    model_to_material,
    new_id,
    now_iso,
)
from utils.enrollment_manager import EnrollmentManager
from utils.file_storage import FileStorage, UploadedFile, classify_file_type

logger = logging.getLogger(__name__)


class MaterialManager:
    def __init__(self, db: Session, storage: FileStorage):
        self.db = db
        self.storage = storage

    def get_model(self, material_id: str) -> MaterialModel:
        model = (
            self.db.query(MaterialModel)
            .filter(MaterialModel.material_id == material_id)
            .first()
        )
        if not model:
            raise MaterialNotFoundError(material_id)
        return model

    def get_material(self, material_id: str) -> Material:
        return model_to_material(self.get_model(material_id))

    def list_materials(self, course_id: Optional[str] = None) -> List[Material]:
        query = self.db.query(MaterialModel)
        if course_id:
            query = query.filter(MaterialModel.course_id == course_id)
        return [model_to_material(m) for m in query.order_by(MaterialModel.id).all()]

    def list_for_student(self, student_id: str) -> List[Material]:
        course_ids = EnrollmentManager(self.db).list_course_ids_for_student(student_id)
        if not course_ids:
            return []
        models = (
            self.db.query(MaterialModel)
            .filter(MaterialModel.course_id.in_(course_ids))
            .order_by(MaterialModel.id)
            .all()
        )
        return [model_to_material(m) for m in models]

    def create_material(
        self,
        request: CreateMaterialRequest,
        file: Optional[UploadedFile] = None,
        uploader_id: Optional[str] = None,
    ) -> Material:
        """Create a material, storing its file when one was uploaded.

        The file type defaults to a classification of the upload's MIME type
        and extension. File content is not inspected.

        Args:
            request: Material fields.
            file: Optional uploaded file.
            uploader_id: Session user recorded as the uploader.

        Returns:
            The created material.

        Raises:
            ValidationError: If title or course is missing.
            CourseNotFoundError: If the course does not exist.
        """
        if not request.title or not request.course_id:
            raise ValidationError("Material title and course are required")
        course = self.db.query(CourseModel).filter(CourseModel.course_id == request.course_id).first()
        if not course:
            raise CourseNotFoundError(request.course_id)
        uploader = None
        if uploader_id:
            uploader = self.db.query(UserModel).filter(UserModel.user_id == uploader_id).first()

        now = now_iso()
        model = MaterialModel(
            material_id=new_id(),
            course_id=course.course_id,
            course=course_snapshot(course),
            title=request.title,
            description=request.description,
            file_type=request.file_type or "other",
            uploaded_by=creator_snapshot(uploader),
            created_at=now,
            updated_at=now,
        )
        if file is not None:
            self._attach(model, file, explicit_type=request.file_type)
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created material %s (%s) for course %s", model.material_id, model.file_type, course.course_id)
        return model_to_material(model)

    def update_material(
        self,
        material_id: str,
        request: UpdateMaterialRequest,
        file: Optional[UploadedFile] = None,
    ) -> Material:
        model = self.get_model(material_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(model, field, value)
        if file is not None:
            previous = model.file_name
            self._attach(model, file, explicit_type=request.file_type)
            self.storage.delete(previous)
        model.updated_at = now_iso()
        self.db.commit()
        self.db.refresh(model)
        return model_to_material(model)

    def delete_material(self, material_id: str) -> None:
        """Delete a material together with its stored file."""
        model = self.get_model(material_id)
        file_name = model.file_name
        self.db.delete(model)
        self.db.commit()
        self.storage.delete(file_name)
        logger.info("Deleted material %s", material_id)

    def _attach(self, model: MaterialModel, file: UploadedFile, explicit_type: Optional[str]) -> None:
        info = self.storage.save(file)
        model.file_name = info.file_name
        model.original_name = info.original_name
        model.mime_type = info.mime_type
        model.size = info.size
        model.file_url = info.url
        model.file_type = explicit_type or classify_file_type(info.mime_type, info.original_name)
