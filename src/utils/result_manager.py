"""Result management and grade derivation.

A final percentage is 40% continuous assessment plus 60% final exam, rounded
half up. Grades follow fixed breakpoints and a result passes from 60%.
"""

import logging
import math
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.exceptions import (
    CourseNotFoundError,
    InvalidScoreError,
    ResultNotFoundError,
    UserNotFoundError,
)
from models.course import CourseModel
from models.result import ResultModel
from models.user import UserModel
from schemas.result import Result, UpdateResultRequest, UpsertResultRequest
from utils.converters import course_snapshot, model_to_result, new_id, now_iso

logger = logging.getLogger(__name__)

CA_WEIGHT = 0.4
FINAL_EXAM_WEIGHT = 0.6
PASS_MARK = 60

# (lower bound, grade), checked from the top
GRADE_BREAKPOINTS = [
    (90, "A+"),
    (85, "A"),
    (80, "A-"),
    (75, "B+"),
    (70, "B"),
    (65, "B-"),
    (60, "C+"),
    (55, "C"),
    (50, "C-"),
    (45, "D+"),
    (40, "D"),
]
FAILING_GRADE = "F"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def grade_for(percentage: float) -> str:
    for lower_bound, grade in GRADE_BREAKPOINTS:
        if percentage >= lower_bound:
            return grade
    return FAILING_GRADE


def validate_score(field: str, value: Optional[float]) -> None:
    """Reject scores outside [0, 100]. None means not yet recorded."""
    if value is None:
        return
    if math.isnan(value) or value < 0 or value > 100:
        raise InvalidScoreError(field, value)


def compute_result(ca_score: float, final_exam_score: float) -> Tuple[int, str, str]:
    """Derive percentage, grade and status from the two scores.

    Args:
        ca_score: Continuous assessment score, 0-100.
        final_exam_score: Final exam score, 0-100.

    Returns:
        Tuple of (final percentage, grade, "passed" or "failed").

    Raises:
        InvalidScoreError: If either score is outside [0, 100].
    """
    validate_score("caScore", ca_score)
    validate_score("finalExamScore", final_exam_score)
    percentage = round_half_up(ca_score * CA_WEIGHT + final_exam_score * FINAL_EXAM_WEIGHT)
    status = "passed" if percentage >= PASS_MARK else "failed"
    return percentage, grade_for(percentage), status


def result_student_snapshot(user: UserModel) -> dict:
    return {
        "_id": user.user_id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "studentId": user.student_id,
    }


class ResultManager:
    """Manages course results of students."""

    def __init__(self, db: Session):
        self.db = db

    def get_model(self, result_id: str) -> ResultModel:
        model = self.db.query(ResultModel).filter(ResultModel.result_id == result_id).first()
        if not model:
            raise ResultNotFoundError(result_id)
        return model

    def get_result(self, result_id: str) -> Result:
        return model_to_result(self.get_model(result_id))

    def list_results(
        self, student_id: Optional[str] = None, course_id: Optional[str] = None
    ) -> List[Result]:
        query = self.db.query(ResultModel)
        if student_id:
            query = query.filter(ResultModel.student_id == student_id)
        if course_id:
            query = query.filter(ResultModel.course_id == course_id)
        return [model_to_result(m) for m in query.order_by(ResultModel.id).all()]

    def _apply_scores(
        self, model: ResultModel, ca_score: Optional[float], final_exam_score: Optional[float]
    ) -> None:
        validate_score("caScore", ca_score)
        validate_score("finalExamScore", final_exam_score)
        model.ca_score = ca_score
        model.final_exam_score = final_exam_score
        if ca_score is None or final_exam_score is None:
            model.final_percentage = None
            model.final_grade = None
            model.status = "pending"
            return
        percentage, grade, status = compute_result(ca_score, final_exam_score)
        model.final_percentage = percentage
        model.final_grade = grade
        model.status = status

    def upsert_result(self, request: UpsertResultRequest) -> Result:
        """Record scores for a student in a course.

        An existing result for the pair is updated, otherwise one is created.
        With either score missing the result stays pending without a grade.

        Args:
            request: Student, course and the scores.

        Returns:
            The stored result.

        Raises:
            UserNotFoundError: If the student does not exist.
            CourseNotFoundError: If the course does not exist.
            InvalidScoreError: If a score lies outside [0, 100].
        """
        student = self.db.query(UserModel).filter(UserModel.user_id == request.student_id).first()
        if not student:
            raise UserNotFoundError(request.student_id)
        course = self.db.query(CourseModel).filter(CourseModel.course_id == request.course_id).first()
        if not course:
            raise CourseNotFoundError(request.course_id)

        now = now_iso()
        model = (
            self.db.query(ResultModel)
            .filter(
                ResultModel.student_id == student.user_id,
                ResultModel.course_id == course.course_id,
            )
            .first()
        )
        created = model is None
        if created:
            model = ResultModel(
                result_id=new_id(),
                student_id=student.user_id,
                course_id=course.course_id,
                created_at=now,
            )
        model.student = result_student_snapshot(student)
        model.course = course_snapshot(course)
        self._apply_scores(model, request.ca_score, request.final_exam_score)
        model.updated_at = now
        if created:
            self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info(
            "%s result %s for %s in %s: %s",
            "Created" if created else "Updated",
            model.result_id,
            student.user_id,
            course.course_id,
            model.status,
        )
        return model_to_result(model)

    def update_result(self, result_id: str, request: UpdateResultRequest) -> Result:
        """Change the scores of a result and derive its grade again."""
        model = self.get_model(result_id)
        changes = request.model_dump(exclude_unset=True)
        self._apply_scores(
            model,
            changes.get("ca_score", model.ca_score),
            changes.get("final_exam_score", model.final_exam_score),
        )
        model.updated_at = now_iso()
        self.db.commit()
        self.db.refresh(model)
        return model_to_result(model)

    def delete_result(self, result_id: str) -> None:
        model = self.get_model(result_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted result %s", result_id)
