"""Course routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.routes.auth import get_current_user_id, get_optional_user_id
from config import DEFAULT_PAGE_SIZE
from core.dependencies import CourseManagerDep
from schemas.common import success_envelope
from schemas.course import CreateCourseRequest, UpdateCourseRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/courses", tags=["Courses"])


@router.get("", summary="List courses")
def list_courses(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1),
    course_manager: CourseManagerDep = None,
) -> dict:
    courses, pagination = course_manager.list_courses(page=page, limit=limit)
    return success_envelope(courses, pagination=pagination)


@router.get("/available", summary="List active courses")
def list_available_courses(course_manager: CourseManagerDep = None) -> dict:
    return success_envelope(course_manager.list_available())


@router.get("/instructor", summary="List the session instructor's courses")
def list_instructor_courses(
    user_id: str = Depends(get_current_user_id),
    course_manager: CourseManagerDep = None,
) -> dict:
    return success_envelope(course_manager.list_for_instructor(user_id))


@router.get("/{course_id}", summary="Get a course")
def get_course(course_id: str, course_manager: CourseManagerDep = None) -> dict:
    return success_envelope(course_manager.get_course(course_id))


@router.post("", summary="Create a course")
def create_course(
    req: CreateCourseRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    course_manager: CourseManagerDep = None,
) -> dict:
    course = course_manager.create_course(req, current_user_id=user_id)
    return success_envelope(course)


@router.api_route("/{course_id}", methods=["PUT", "PATCH"], summary="Update a course")
def update_course(
    course_id: str,
    req: UpdateCourseRequest,
    course_manager: CourseManagerDep = None,
) -> dict:
    return success_envelope(course_manager.update_course(course_id, req))


@router.delete("/{course_id}", summary="Delete a course and its dependent records")
def delete_course(course_id: str, course_manager: CourseManagerDep = None) -> dict:
    course_manager.delete_course(course_id)
    return success_envelope(message="Course deleted successfully")
