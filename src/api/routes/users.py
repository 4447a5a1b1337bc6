"""User administration routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Query

from config import DEFAULT_PAGE_SIZE
from core.dependencies import UserManagerDep
from schemas.common import success_envelope
from schemas.user import (
    CreateUserRequest,
    InstructorCoursesRequest,
    UpdateUserRequest,
    UserStatusRequest,
)
from utils.pagination import paginate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", summary="List users")
def list_users(
    role: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1),
    user_manager: UserManagerDep = None,
) -> dict:
    users, pagination = paginate(user_manager.list_users(role=role), page, limit)
    return success_envelope(users, pagination=pagination)


@router.get("/students", summary="List students")
def list_students(user_manager: UserManagerDep = None) -> dict:
    return success_envelope(user_manager.list_students())


@router.get("/{user_id}", summary="Get a user")
def get_user(user_id: str, user_manager: UserManagerDep = None) -> dict:
    return success_envelope(user_manager.get_user(user_id))


@router.post("", summary="Create a user")
def create_user(req: CreateUserRequest, user_manager: UserManagerDep = None) -> dict:
    return success_envelope(user_manager.create_user(req))


@router.api_route("/{user_id}", methods=["PUT", "PATCH"], summary="Update a user")
def update_user(
    user_id: str, req: UpdateUserRequest, user_manager: UserManagerDep = None
) -> dict:
    return success_envelope(user_manager.update_user(user_id, req))


@router.delete("/{user_id}", summary="Delete a user")
def delete_user(user_id: str, user_manager: UserManagerDep = None) -> dict:
    user_manager.delete_user(user_id)
    return success_envelope(message="User deleted successfully")


@router.patch("/{user_id}/status", summary="Activate or deactivate a user")
def set_user_status(
    user_id: str, req: UserStatusRequest, user_manager: UserManagerDep = None
) -> dict:
    return success_envelope(user_manager.set_active(user_id, req.is_active))


@router.patch("/{user_id}/instructor-courses", summary="Assign courses to an instructor")
def assign_instructor_courses(
    user_id: str, req: InstructorCoursesRequest, user_manager: UserManagerDep = None
) -> dict:
    courses = user_manager.assign_instructor_courses(user_id, req.course_ids)
    return success_envelope(courses)
