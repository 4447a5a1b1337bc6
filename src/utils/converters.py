"""Conversion between SQLAlchemy models, wire schemas and embedded snapshots.

Snapshots are plain camelCase dicts copied into the owning record at write
time. Later edits of the source user or course do not reach them.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import pytz

from models.assignment import AssignmentModel, SubmissionModel
from models.course import CourseModel
from models.enrollment import EnrollmentModel
from models.material import MaterialModel
from models.result import ResultModel
from models.user import UserModel
from schemas.assignment import Assignment, Submission
from schemas.course import Course
from schemas.enrollment import Enrollment
from schemas.material import Material
from schemas.result import Result
from schemas.user import SessionUser, User


def now_iso() -> str:
    return datetime.now(pytz.utc).isoformat()


def new_id() -> str:
    """Generate an identifier for a new record."""
    return uuid.uuid4().hex


# --- Snapshots ---


def instructor_snapshot(user: UserModel) -> Dict[str, Any]:
    return {
        "_id": user.user_id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "email": user.email,
    }


def student_snapshot(user: UserModel) -> Dict[str, Any]:
    return {
        "_id": user.user_id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "email": user.email,
        "studentId": user.student_id,
    }


def creator_snapshot(user: Optional[UserModel]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {
        "_id": user.user_id,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }


def course_snapshot(course: CourseModel) -> Dict[str, Any]:
    return {"_id": course.course_id, "title": course.title, "code": course.code}


def full_name(snapshot: Optional[Dict[str, Any]]) -> str:
    """Render "First Last" from a user snapshot, or "Unknown" when absent."""
    if not snapshot:
        return "Unknown"
    name = f"{snapshot.get('firstName', '')} {snapshot.get('lastName', '')}".strip()
    return name or "Unknown"


# --- Model to schema ---


def model_to_user(model: UserModel) -> User:
    return User(
        id=model.user_id,
        first_name=model.first_name,
        last_name=model.last_name,
        email=model.email,
        phone=model.phone,
        role=model.role,
        is_active=model.is_active,
        student_id=model.student_id,
        instructor_id=model.instructor_id,
        department=model.department,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_session_user(model: UserModel) -> SessionUser:
    return SessionUser(
        id=model.user_id,
        first_name=model.first_name,
        last_name=model.last_name,
        email=model.email,
        role=model.role,
        student_id=model.student_id,
        instructor_id=model.instructor_id,
    )


def model_to_course(model: CourseModel) -> Course:
    return Course(
        id=model.course_id,
        title=model.title,
        code=model.code,
        description=model.description or "",
        instructor=model.instructor,
        capacity=model.capacity,
        enrolled=model.enrolled,
        duration=model.duration,
        credits=model.credits,
        level=model.level,
        category=model.category,
        status=model.status,
        start_date=model.start_date,
        end_date=model.end_date,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_enrollment(model: EnrollmentModel) -> Enrollment:
    return Enrollment(
        id=model.enrollment_id,
        student=model.student,
        course=model.course,
        status=model.status,
        progress=model.progress,
        enrollment_date=model.enrollment_date,
        grade=model.grade,
        score=model.score,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_assignment(model: AssignmentModel) -> Assignment:
    attachment = model.attachment or {}
    return Assignment(
        id=model.assignment_id,
        course=model.course,
        title=model.title,
        description=model.description or "",
        due_date=model.due_date,
        max_points=model.max_points,
        status=model.status,
        created_by=model.created_by,
        attachment=model.attachment,
        attachment_url=attachment.get("url"),
        attachment_name=attachment.get("originalName"),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_submission(model: SubmissionModel) -> Submission:
    stored = model.file or {}
    return Submission(
        id=model.submission_id,
        assignment=model.assignment_id,
        assignment_id=model.assignment_id,
        student=model.student,
        file=model.file,
        file_url=stored.get("url"),
        file_name=stored.get("fileName"),
        original_name=stored.get("originalName"),
        submitted_at=model.submitted_at,
        status=model.status,
        grade=model.grade,
        remarks=model.remarks,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_material(model: MaterialModel) -> Material:
    return Material(
        id=model.material_id,
        title=model.title,
        description=model.description or "",
        course=model.course,
        file_type=model.file_type,
        file_name=model.file_name,
        original_name=model.original_name,
        mime_type=model.mime_type,
        size=model.size,
        file_url=model.file_url,
        uploaded_by=model.uploaded_by,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_result(model: ResultModel) -> Result:
    return Result(
        id=model.result_id,
        student=model.student,
        course=model.course,
        ca_score=model.ca_score,
        final_exam_score=model.final_exam_score,
        final_percentage=model.final_percentage,
        final_grade=model.final_grade,
        status=model.status,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
