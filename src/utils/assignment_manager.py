"""Assignment and submission management utilities."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import (
    AssignmentNotFoundError,
    CourseNotFoundError,
    SubmissionNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from models.assignment import AssignmentModel, SubmissionModel
from models.course import CourseModel
from models.user import UserModel
from schemas.assignment import (
    Assignment,
    CreateAssignmentRequest,
    GradeSubmissionRequest,
    Submission,
    UpdateAssignmentRequest,
)
from schemas.common import FileInfo
from utils.converters import (
    course_snapshot,
    creator_snapshot,
    model_to_assignment,
    model_to_submission,
    new_id,
    now_iso,
    student_snapshot,
)
from utils.enrollment_manager import EnrollmentManager
from utils.file_storage import FileStorage, UploadedFile

logger = logging.getLogger(__name__)


class AssignmentManager:
    """Manages assignments and the submissions made against them."""

    def __init__(self, db: Session, storage: FileStorage):
        self.db = db
        self.storage = storage

    def get_model(self, assignment_id: str) -> AssignmentModel:
        model = (
            self.db.query(AssignmentModel)
            .filter(AssignmentModel.assignment_id == assignment_id)
            .first()
        )
        if not model:
            raise AssignmentNotFoundError(assignment_id)
        return model

    def get_assignment(self, assignment_id: str) -> Assignment:
        return model_to_assignment(self.get_model(assignment_id))

    def list_assignments(self, course_id: Optional[str] = None) -> List[Assignment]:
        query = self.db.query(AssignmentModel)
        if course_id:
            query = query.filter(AssignmentModel.course_id == course_id)
        return [model_to_assignment(m) for m in query.order_by(AssignmentModel.id).all()]

    def list_for_student(self, student_id: str) -> List[Assignment]:
        """Assignments of every course the student is actively enrolled in."""
        course_ids = EnrollmentManager(self.db).list_course_ids_for_student(student_id)
        if not course_ids:
            return []
        models = (
            self.db.query(AssignmentModel)
            .filter(AssignmentModel.course_id.in_(course_ids))
            .order_by(AssignmentModel.id)
            .all()
        )
        return [model_to_assignment(m) for m in models]

    def _get_user(self, user_id: Optional[str]) -> Optional[UserModel]:
        if not user_id:
            return None
        return self.db.query(UserModel).filter(UserModel.user_id == user_id).first()

    def create_assignment(
        self,
        request: CreateAssignmentRequest,
        file: Optional[UploadedFile] = None,
        creator_id: Optional[str] = None,
    ) -> Assignment:
        """Create an assignment, optionally with an attached file.

        Args:
            request: Assignment fields.
            file: Optional attachment.
            creator_id: Session user recorded as the creator.

        Returns:
            The created assignment.

        Raises:
            ValidationError: If title or course is missing.
            CourseNotFoundError: If the course does not exist.
        """
        if not request.title or not request.course_id:
            raise ValidationError("Assignment title and course are required")
        course = self.db.query(CourseModel).filter(CourseModel.course_id == request.course_id).first()
        if not course:
            raise CourseNotFoundError(request.course_id)

        now = now_iso()
        model = AssignmentModel(
            assignment_id=new_id(),
            course_id=course.course_id,
            course=course_snapshot(course),
            title=request.title,
            description=request.description,
            due_date=request.due_date,
            max_points=request.max_points,
            status=request.status,
            created_by=creator_snapshot(self._get_user(creator_id)),
            attachment=self._store(file),
            created_at=now,
            updated_at=now,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created assignment %s for course %s", model.assignment_id, course.course_id)
        return model_to_assignment(model)

    def update_assignment(
        self,
        assignment_id: str,
        request: UpdateAssignmentRequest,
        file: Optional[UploadedFile] = None,
    ) -> Assignment:
        """Merge the supplied fields into an assignment.

        A new file replaces the previous attachment.
        """
        model = self.get_model(assignment_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(model, field, value)
        if file is not None:
            previous = (model.attachment or {}).get("fileName")
            model.attachment = self._store(file)
            self.storage.delete(previous)
        model.updated_at = now_iso()
        self.db.commit()
        self.db.refresh(model)
        return model_to_assignment(model)

    def delete_assignment(self, assignment_id: str) -> None:
        model = self.get_model(assignment_id)
        submissions = (
            self.db.query(SubmissionModel)
            .filter(SubmissionModel.assignment_id == assignment_id)
            .all()
        )
        stored_files = [(model.attachment or {}).get("fileName")]
        for submission in submissions:
            stored_files.append((submission.file or {}).get("fileName"))
            self.db.delete(submission)
        self.db.delete(model)
        self.db.commit()
        for file_name in stored_files:
            self.storage.delete(file_name)
        logger.info("Deleted assignment %s and %d submissions", assignment_id, len(submissions))

    def _store(self, file: Optional[UploadedFile]) -> Optional[dict]:
        if file is None:
            return None
        return self.storage.save(file).model_dump(by_alias=True)

    # --- Submissions ---

    def _get_submission_model(self, assignment_id: str, submission_id: str) -> SubmissionModel:
        model = (
            self.db.query(SubmissionModel)
            .filter(
                SubmissionModel.assignment_id == assignment_id,
                SubmissionModel.submission_id == submission_id,
            )
            .first()
        )
        if not model:
            raise SubmissionNotFoundError(submission_id)
        return model

    def list_submissions(self, assignment_id: str) -> List[Submission]:
        self.get_model(assignment_id)
        models = (
            self.db.query(SubmissionModel)
            .filter(SubmissionModel.assignment_id == assignment_id)
            .order_by(SubmissionModel.id)
            .all()
        )
        return [model_to_submission(m) for m in models]

    def list_student_submissions(self, student_id: str) -> List[Submission]:
        models = (
            self.db.query(SubmissionModel)
            .filter(SubmissionModel.student_id == student_id)
            .order_by(SubmissionModel.id)
            .all()
        )
        return [model_to_submission(m) for m in models]

    def submit(self, assignment_id: str, student_id: str, file: Optional[UploadedFile]) -> Submission:
        """Submit a file for an assignment.

        A student holds at most one submission per assignment; submitting
        again replaces the file and resets the status to submitted.

        Raises:
            AssignmentNotFoundError: If the assignment does not exist.
            UserNotFoundError: If the student does not exist.
            ValidationError: If no file was sent.
        """
        self.get_model(assignment_id)
        student = self._get_user(student_id)
        if not student:
            raise UserNotFoundError(student_id)
        if file is None:
            raise ValidationError("A file is required")

        now = now_iso()
        stored = self._store(file)
        model = (
            self.db.query(SubmissionModel)
            .filter(
                SubmissionModel.assignment_id == assignment_id,
                SubmissionModel.student_id == student_id,
            )
            .first()
        )
        previous_file = None
        if model:
            previous_file = (model.file or {}).get("fileName")
            model.file = stored
            model.submitted_at = now
            model.status = "submitted"
            model.grade = None
            model.remarks = None
            model.updated_at = now
        else:
            model = SubmissionModel(
                submission_id=new_id(),
                assignment_id=assignment_id,
                student_id=student.user_id,
                student=student_snapshot(student),
                file=stored,
                submitted_at=now,
                status="submitted",
                created_at=now,
                updated_at=now,
            )
            self.db.add(model)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            # The new file is not referenced by any record
            self.storage.delete(stored["fileName"])
            raise
        self.db.refresh(model)
        self.storage.delete(previous_file)
        logger.info("Submission %s for assignment %s by %s", model.submission_id, assignment_id, student_id)
        return model_to_submission(model)

    def grade_submission(
        self, assignment_id: str, submission_id: str, request: GradeSubmissionRequest
    ) -> Submission:
        model = self._get_submission_model(assignment_id, submission_id)
        changes = request.model_dump(exclude_unset=True)
        if "grade" in changes:
            model.grade = changes["grade"]
        if "remarks" in changes:
            model.remarks = changes["remarks"]
        model.status = "graded"
        model.updated_at = now_iso()
        self.db.commit()
        self.db.refresh(model)
        return model_to_submission(model)

    def get_submission_file(self, assignment_id: str, submission_id: str) -> Tuple[Path, FileInfo]:
        """Locate the stored file of a submission.

        Returns:
            Tuple of (path on disk, file metadata).

        Raises:
            SubmissionNotFoundError: If the submission, or its stored file,
                does not exist.
        """
        model = self._get_submission_model(assignment_id, submission_id)
        if not model.file:
            raise SubmissionNotFoundError(submission_id)
        info = FileInfo.model_validate(model.file)
        path = self.storage.path_for(info.file_name)
        if not path.exists():
            logger.warning("Stored file %s of submission %s is missing", info.file_name, submission_id)
            raise SubmissionNotFoundError(submission_id)
        return path, info

    def delete_submission(self, assignment_id: str, submission_id: str) -> None:
        model = self._get_submission_model(assignment_id, submission_id)
        file_name = (model.file or {}).get("fileName")
        self.db.delete(model)
        self.db.commit()
        self.storage.delete(file_name)
        logger.info("Deleted submission %s", submission_id)
