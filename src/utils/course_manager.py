"""Course management utilities."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.exceptions import CourseNotFoundError, UserNotFoundError, ValidationError
from models.assignment import AssignmentModel, SubmissionModel
from models.course import CourseModel
from models.enrollment import EnrollmentModel
from models.material import MaterialModel
from models.result import ResultModel
from models.user import UserModel
from schemas.common import Pagination
from schemas.course import Course, CreateCourseRequest, UpdateCourseRequest
from utils.converters import instructor_snapshot, model_to_course, new_id, now_iso
from utils.file_storage import FileStorage
from utils.pagination import paginate

logger = logging.getLogger(__name__)


class CourseManager:
    """Manages courses and their dependent records."""

    def __init__(self, db: Session, storage: Optional[FileStorage] = None):
        self.db = db
        self.storage = storage

    def get_model(self, course_id: str) -> CourseModel:
        model = (
            self.db.query(CourseModel)
            .filter(CourseModel.course_id == course_id)
            .first()
        )
        if not model:
            raise CourseNotFoundError(course_id)
        return model

    def get_course(self, course_id: str) -> Course:
        return model_to_course(self.get_model(course_id))

    def list_courses(self, page: int = 1, limit: int = 50) -> Tuple[List[Course], Pagination]:
        models = self.db.query(CourseModel).order_by(CourseModel.id).all()
        page_models, pagination = paginate(models, page, limit)
        return [model_to_course(m) for m in page_models], pagination

    def list_available(self) -> List[Course]:
        models = (
            self.db.query(CourseModel)
            .filter(CourseModel.status == "active")
            .order_by(CourseModel.id)
            .all()
        )
        return [model_to_course(m) for m in models]

    def list_for_instructor(self, instructor_id: str) -> List[Course]:
        models = (
            self.db.query(CourseModel)
            .filter(CourseModel.instructor_id == instructor_id)
            .order_by(CourseModel.id)
            .all()
        )
        return [model_to_course(m) for m in models]

    def _resolve_instructor(self, user_id: str) -> UserModel:
        instructor = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if not instructor:
            raise UserNotFoundError(user_id)
        if instructor.role == "student":
            raise ValidationError("A student cannot be a course instructor")
        return instructor

    def create_course(
        self, request: CreateCourseRequest, current_user_id: Optional[str] = None
    ) -> Course:
        """Create a course.

        The instructor is taken from ``instructor_id``, or from the session user
        when that user is an instructor.

        Args:
            request: Course fields.
            current_user_id: The session user, if any.

        Returns:
            The created course, with ``enrolled`` set to 0.

        Raises:
            ValidationError: If title or code is missing, or no usable
                instructor was given.
            UserNotFoundError: If the instructor does not exist.
        """
        if not request.title or not request.code:
            raise ValidationError("Course title and code are required")

        instructor_id = request.instructor_id
        if not instructor_id and current_user_id:
            current = self.db.query(UserModel).filter(UserModel.user_id == current_user_id).first()
            if current and current.role == "instructor":
                instructor_id = current.user_id
        if not instructor_id:
            raise ValidationError("An instructor is required")
        instructor = self._resolve_instructor(instructor_id)

        now = now_iso()
        model = CourseModel(
            course_id=new_id(),
            title=request.title,
            code=request.code,
            description=request.description,
            instructor=instructor_snapshot(instructor),
            instructor_id=instructor.user_id,
            capacity=request.capacity,
            enrolled=0,
            duration=request.duration,
            credits=request.credits,
            level=request.level,
            category=request.category,
            status=request.status,
            start_date=request.start_date,
            end_date=request.end_date,
            created_at=now,
            updated_at=now,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created course %s (%s)", model.code, model.course_id)
        return model_to_course(model)

    def update_course(self, course_id: str, request: UpdateCourseRequest) -> Course:
        """Merge the supplied fields into a course.

        Raises:
            CourseNotFoundError: If the course does not exist.
            UserNotFoundError: If a new instructor does not exist.
        """
        model = self.get_model(course_id)
        changes = request.model_dump(exclude_unset=True)
        instructor_id = changes.pop("instructor_id", None)
        if instructor_id:
            instructor = self._resolve_instructor(instructor_id)
            model.instructor = instructor_snapshot(instructor)
            model.instructor_id = instructor.user_id
        for field, value in changes.items():
            if value is not None:
                setattr(model, field, value)
        model.updated_at = now_iso()
        self.db.commit()
        self.db.refresh(model)
        return model_to_course(model)

    def delete_course(self, course_id: str) -> None:
        """Delete a course and everything that belongs to it.

        Enrollments, assignments with their submissions, materials and results
        of the course go in the same transaction.

        Raises:
            CourseNotFoundError: If the course does not exist.
        """
        model = self.get_model(course_id)

        assignment_ids = [
            row.assignment_id
            for row in self.db.query(AssignmentModel.assignment_id)
            .filter(AssignmentModel.course_id == course_id)
            .all()
        ]
        stored_files = []
        if assignment_ids:
            submissions = (
                self.db.query(SubmissionModel)
                .filter(SubmissionModel.assignment_id.in_(assignment_ids))
                .all()
            )
            for submission in submissions:
                stored_files.append((submission.file or {}).get("fileName"))
                self.db.delete(submission)
        for assignment in self.db.query(AssignmentModel).filter(AssignmentModel.course_id == course_id).all():
            stored_files.append((assignment.attachment or {}).get("fileName"))
            self.db.delete(assignment)
        for material in self.db.query(MaterialModel).filter(MaterialModel.course_id == course_id).all():
            stored_files.append(material.file_name)
            self.db.delete(material)

        enrollments = (
            self.db.query(EnrollmentModel)
            .filter(EnrollmentModel.course_id == course_id)
            .delete(synchronize_session=False)
        )
        results = (
            self.db.query(ResultModel)
            .filter(ResultModel.course_id == course_id)
            .delete(synchronize_session=False)
        )
        self.db.delete(model)
        self.db.commit()

        if self.storage is not None:
            for file_name in stored_files:
                self.storage.delete(file_name)
        logger.info(
            "Deleted course %s with %d enrollments, %d assignments, %d results",
            course_id,
            enrollments,
            len(assignment_ids),
            results,
        )
