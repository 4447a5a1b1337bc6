"""Result routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from api.routes.auth import get_current_user_id
from core.dependencies import ResultManagerDep
from schemas.common import success_envelope
from schemas.result import UpdateResultRequest, UpsertResultRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/results", tags=["Results"])


@router.get("", summary="List results")
def list_results(
    student: Optional[str] = None,
    course: Optional[str] = None,
    result_manager: ResultManagerDep = None,
) -> dict:
    return success_envelope(result_manager.list_results(student_id=student, course_id=course))


@router.get("/student/me", summary="The session student's results")
def list_my_results(
    user_id: str = Depends(get_current_user_id),
    result_manager: ResultManagerDep = None,
) -> dict:
    return success_envelope(result_manager.list_results(student_id=user_id))


@router.get("/{result_id}", summary="Get a result")
def get_result(result_id: str, result_manager: ResultManagerDep = None) -> dict:
    return success_envelope(result_manager.get_result(result_id))


@router.post("", summary="Record a student's scores for a course")
def upsert_result(req: UpsertResultRequest, result_manager: ResultManagerDep = None) -> dict:
    """Create the result of a student in a course, or update the existing one."""
    return success_envelope(result_manager.upsert_result(req))


@router.api_route("/{result_id}", methods=["PUT", "PATCH"], summary="Update a result")
def update_result(
    result_id: str, req: UpdateResultRequest, result_manager: ResultManagerDep = None
) -> dict:
    return success_envelope(result_manager.update_result(result_id, req))


@router.delete("/{result_id}", summary="Delete a result")
def delete_result(result_id: str, result_manager: ResultManagerDep = None) -> dict:
    result_manager.delete_result(result_id)
    return success_envelope(message="Result deleted successfully")
