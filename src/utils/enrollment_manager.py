"""Enrollment management utilities.

The ``enrolled`` counter of a course always equals the number of its
non-dropped enrollments; every write below that changes one changes the
other in the same commit.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from core.exceptions import (
    AlreadyEnrolledError,
    CourseFullError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from models.course import CourseModel
from models.enrollment import EnrollmentModel
from models.user import UserModel
from schemas.enrollment import Enrollment, UpdateEnrollmentRequest
from utils.converters import (
    course_snapshot,
    model_to_enrollment,
    new_id,
    now_iso,
    student_snapshot,
)

logger = logging.getLogger(__name__)

ENROLLMENT_STATUSES = ("active", "completed", "dropped")

# Older clients use these names for the same states
STATUS_SYNONYMS = {"enrolled": "active", "graduated": "completed"}


def normalize_status(status: str) -> str:
    """Map a client supplied status onto the enrollment vocabulary.

    Raises:
        ValidationError: If the status is unknown.
    """
    normalized = STATUS_SYNONYMS.get(status.lower(), status.lower())
    if normalized not in ENROLLMENT_STATUSES:
        raise ValidationError(f"Invalid enrollment status: {status}")
    return normalized


class EnrollmentManager:
    """Manages enrollments and the enrolled counter of their courses."""

    def __init__(self, db: Session):
        self.db = db

    def get_model(self, enrollment_id: str) -> EnrollmentModel:
        model = (
            self.db.query(EnrollmentModel)
            .filter(EnrollmentModel.enrollment_id == enrollment_id)
            .first()
        )
        if not model:
            raise EnrollmentNotFoundError(enrollment_id)
        return model

    def get_enrollment(self, enrollment_id: str) -> Enrollment:
        return model_to_enrollment(self.get_model(enrollment_id))

    def list_enrollments(self) -> List[Enrollment]:
        models = self.db.query(EnrollmentModel).order_by(EnrollmentModel.id).all()
        return [model_to_enrollment(m) for m in models]

    def list_for_student(self, student_id: str) -> List[Enrollment]:
        models = (
            self.db.query(EnrollmentModel)
            .filter(EnrollmentModel.student_id == student_id)
            .order_by(EnrollmentModel.id)
            .all()
        )
        return [model_to_enrollment(m) for m in models]

    def list_course_ids_for_student(self, student_id: str) -> List[str]:
        """IDs of the courses a student holds a non-dropped enrollment for."""
        rows = (
            self.db.query(EnrollmentModel.course_id)
            .filter(
                EnrollmentModel.student_id == student_id,
                EnrollmentModel.status != "dropped",
            )
            .order_by(EnrollmentModel.id)
            .all()
        )
        return list(dict.fromkeys(row.course_id for row in rows))

    def _find_live_enrollment(self, student_id: str, course_id: str) -> Optional[EnrollmentModel]:
        return (
            self.db.query(EnrollmentModel)
            .filter(
                EnrollmentModel.student_id == student_id,
                EnrollmentModel.course_id == course_id,
                EnrollmentModel.status != "dropped",
            )
            .first()
        )

    def _get_course(self, course_id: str) -> Optional[CourseModel]:
        return self.db.query(CourseModel).filter(CourseModel.course_id == course_id).first()

    def enroll(self, student_id: str, course_id: str) -> Enrollment:
        """Enroll a student in a course.

        Args:
            student_id: The student's user ID.
            course_id: The course to join.

        Returns:
            The new enrollment, status active with progress 0.

        Raises:
            UserNotFoundError: If the student does not exist.
            CourseNotFoundError: If the course does not exist.
            AlreadyEnrolledError: If a non-dropped enrollment already exists.
            CourseFullError: If the course has no seats left.
        """
        student = self.db.query(UserModel).filter(UserModel.user_id == student_id).first()
        if not student:
            raise UserNotFoundError(student_id)
        course = self._get_course(course_id)
        if not course:
            raise CourseNotFoundError(course_id)
        if self._find_live_enrollment(student_id, course_id):
            logger.warning("Enrollment rejected: %s already in %s", student_id, course_id)
            raise AlreadyEnrolledError(student_id, course_id)
        if course.enrolled >= course.capacity:
            logger.warning("Enrollment rejected: course %s is full", course_id)
            raise CourseFullError(course_id)

        now = now_iso()
        model = EnrollmentModel(
            enrollment_id=new_id(),
            student_id=student.user_id,
            course_id=course.course_id,
            student=student_snapshot(student),
            course=course_snapshot(course),
            status="active",
            progress=0,
            enrollment_date=now,
            created_at=now,
            updated_at=now,
        )
        self.db.add(model)
        course.enrolled += 1
        course.updated_at = now
        self.db.commit()
        self.db.refresh(model)
        logger.info("Enrolled %s in %s (%d/%d)", student_id, course_id, course.enrolled, course.capacity)
        return model_to_enrollment(model)

    def _adjust_course_count(self, course_id: str, delta: int) -> None:
        course = self._get_course(course_id)
        if course is not None:
            course.enrolled = max(course.enrolled + delta, 0)
            course.updated_at = now_iso()

    def update_enrollment(self, enrollment_id: str, request: UpdateEnrollmentRequest) -> Enrollment:
        """Update status, progress, grade or score of an enrollment.

        Any status transition is allowed. Entering ``dropped`` frees a seat,
        leaving it takes one back.

        Raises:
            EnrollmentNotFoundError: If the enrollment does not exist.
            ValidationError: If the status is unknown.
        """
        model = self.get_model(enrollment_id)
        changes = request.model_dump(exclude_unset=True)

        status = changes.pop("status", None)
        if status is not None:
            status = normalize_status(status)
            if status == "dropped" and model.status != "dropped":
                self._adjust_course_count(model.course_id, -1)
            elif status != "dropped" and model.status == "dropped":
                self._adjust_course_count(model.course_id, 1)
            model.status = status

        for field, value in changes.items():
            if field == "progress" and value is None:
                continue
            setattr(model, field, value)
        model.updated_at = now_iso()
        self.db.commit()
        self.db.refresh(model)
        return model_to_enrollment(model)

    def delete_enrollment(self, enrollment_id: str) -> None:
        model = self.get_model(enrollment_id)
        if model.status != "dropped":
            self._adjust_course_count(model.course_id, -1)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted enrollment %s", enrollment_id)
