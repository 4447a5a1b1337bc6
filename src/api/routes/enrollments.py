"""Enrollment routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from api.routes.auth import get_current_user_id, get_optional_user_id
from core.dependencies import EnrollmentManagerDep
from core.exceptions import NotAuthenticatedError
from schemas.common import success_envelope
from schemas.enrollment import CreateEnrollmentRequest, UpdateEnrollmentRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/enrollments", tags=["Enrollments"])


@router.get("", summary="List enrollments")
def list_enrollments(enrollment_manager: EnrollmentManagerDep = None) -> dict:
    return success_envelope(enrollment_manager.list_enrollments())


@router.get("/student/me", summary="List the session student's enrollments")
def list_my_enrollments(
    user_id: str = Depends(get_current_user_id),
    enrollment_manager: EnrollmentManagerDep = None,
) -> dict:
    return success_envelope(enrollment_manager.list_for_student(user_id))


@router.get("/{enrollment_id}", summary="Get an enrollment")
def get_enrollment(enrollment_id: str, enrollment_manager: EnrollmentManagerDep = None) -> dict:
    return success_envelope(enrollment_manager.get_enrollment(enrollment_id))


@router.post("", summary="Enroll a student in a course")
def create_enrollment(
    req: CreateEnrollmentRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    enrollment_manager: EnrollmentManagerDep = None,
) -> dict:
    """Enroll ``studentId``, or the session user when it is omitted."""
    student_id = req.student_id or user_id
    if student_id is None:
        raise NotAuthenticatedError()
    enrollment = enrollment_manager.enroll(student_id, req.course_id)
    return success_envelope(enrollment, message="Enrolled successfully")


@router.api_route("/{enrollment_id}", methods=["PUT", "PATCH"], summary="Update an enrollment")
def update_enrollment(
    enrollment_id: str,
    req: UpdateEnrollmentRequest,
    enrollment_manager: EnrollmentManagerDep = None,
) -> dict:
    return success_envelope(enrollment_manager.update_enrollment(enrollment_id, req))


@router.delete("/{enrollment_id}", summary="Delete an enrollment")
def delete_enrollment(enrollment_id: str, enrollment_manager: EnrollmentManagerDep = None) -> dict:
    enrollment_manager.delete_enrollment(enrollment_id)
    return success_envelope(message="Enrollment deleted successfully")
