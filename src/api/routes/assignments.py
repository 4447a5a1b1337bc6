"""Assignment and submission routes.

Write endpoints accept JSON or a multipart form whose ``file`` part becomes
the attachment (assignments) or the submitted file (submissions).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse

from api.request_payload import pick_file, read_payload
from api.routes.auth import get_current_user_id, get_optional_user_id
from core.dependencies import AssignmentManagerDep
from schemas.assignment import (
    CreateAssignmentRequest,
    GradeSubmissionRequest,
    UpdateAssignmentRequest,
)
from schemas.common import parse_payload, success_envelope

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assignments", tags=["Assignments"])


@router.get("", summary="List assignments")
def list_assignments(
    course: Optional[str] = None,
    assignment_manager: AssignmentManagerDep = None,
) -> dict:
    return success_envelope(assignment_manager.list_assignments(course_id=course))


@router.get("/enrolled", summary="Assignments of the session student's courses")
def list_enrolled_assignments(
    user_id: str = Depends(get_current_user_id),
    assignment_manager: AssignmentManagerDep = None,
) -> dict:
    return success_envelope(assignment_manager.list_for_student(user_id))


@router.get("/submissions", summary="The session student's submissions")
def list_my_submissions(
    user_id: str = Depends(get_current_user_id),
    assignment_manager: AssignmentManagerDep = None,
) -> dict:
    return success_envelope(assignment_manager.list_student_submissions(user_id))


@router.get("/{assignment_id}", summary="Get an assignment")
def get_assignment(assignment_id: str, assignment_manager: AssignmentManagerDep = None) -> dict:
    return success_envelope(assignment_manager.get_assignment(assignment_id))


@router.post("", summary="Create an assignment")
async def create_assignment(
    request: Request,
    user_id: Optional[str] = Depends(get_optional_user_id),
    assignment_manager: AssignmentManagerDep = None,
) -> dict:
    fields, files = await read_payload(request)
    req = parse_payload(CreateAssignmentRequest, fields)
    assignment = assignment_manager.create_assignment(
        req, file=pick_file(files), creator_id=user_id
    )
    return success_envelope(assignment)


@router.api_route("/{assignment_id}", methods=["PUT", "PATCH"], summary="Update an assignment")
async def update_assignment(
    assignment_id: str,
    request: Request,
    assignment_manager: AssignmentManagerDep = None,
) -> dict:
    fields, files = await read_payload(request)
    req = parse_payload(UpdateAssignmentRequest, fields)
    assignment = assignment_manager.update_assignment(assignment_id, req, file=pick_file(files))
    return success_envelope(assignment)


@router.delete("/{assignment_id}", summary="Delete an assignment and its submissions")
def delete_assignment(assignment_id: str, assignment_manager: AssignmentManagerDep = None) -> dict:
    assignment_manager.delete_assignment(assignment_id)
    return success_envelope(message="Assignment deleted successfully")


@router.get("/{assignment_id}/submissions", summary="List submissions of an assignment")
def list_submissions(assignment_id: str, assignment_manager: AssignmentManagerDep = None) -> dict:
    return success_envelope(assignment_manager.list_submissions(assignment_id))


@router.post("/{assignment_id}/submissions", summary="Submit a file for an assignment")
async def submit_assignment(
    assignment_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    assignment_manager: AssignmentManagerDep = None,
) -> dict:
    _, files = await read_payload(request)
    submission = assignment_manager.submit(assignment_id, user_id, pick_file(files))
    return success_envelope(submission, message="Assignment submitted successfully")


@router.get(
    "/{assignment_id}/submissions/{submission_id}/download",
    summary="Download the file of a submission",
)
def download_submission(
    assignment_id: str,
    submission_id: str,
    assignment_manager: AssignmentManagerDep = None,
) -> FileResponse:
    path, info = assignment_manager.get_submission_file(assignment_id, submission_id)
    return FileResponse(
        path,
        media_type=info.mime_type or "application/octet-stream",
        filename=info.original_name,
    )


@router.patch(
    "/{assignment_id}/submissions/{submission_id}",
    summary="Grade a submission",
)
def grade_submission(
    assignment_id: str,
    submission_id: str,
    req: GradeSubmissionRequest,
    assignment_manager: AssignmentManagerDep = None,
) -> dict:
    submission = assignment_manager.grade_submission(assignment_id, submission_id, req)
    return success_envelope(submission)


@router.delete(
    "/{assignment_id}/submissions/{submission_id}",
    summary="Delete a submission",
)
def delete_submission(
    assignment_id: str,
    submission_id: str,
    assignment_manager: AssignmentManagerDep = None,
) -> dict:
    assignment_manager.delete_submission(assignment_id, submission_id)
    return success_envelope(message="Submission deleted successfully")
