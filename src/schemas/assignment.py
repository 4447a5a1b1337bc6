"""Assignment and submission schemas."""

from typing import Any, Dict, Literal, Optional

from pydantic import AliasChoices, Field

from schemas.common import CamelModel, FileInfo

AssignmentStatus = Literal["active", "closed", "draft"]


class Assignment(CamelModel):
    id: str = Field(alias="_id")
    course: Dict[str, Any]
    title: str
    description: str = ""
    due_date: Optional[str] = None
    max_points: int = 100
    status: AssignmentStatus = "active"
    created_by: Optional[Dict[str, Any]] = None
    attachment: Optional[FileInfo] = None
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = Field(default=None, description="Original name of the attachment")
    created_at: str
    updated_at: str


class CreateAssignmentRequest(CamelModel):
    title: Optional[str] = None
    description: str = ""
    course_id: Optional[str] = None
    due_date: Optional[str] = None
    max_points: int = Field(
        default=100,
        ge=0,
        validation_alias=AliasChoices("maxPoints", "maxScore", "max_points"),
    )
    status: AssignmentStatus = "active"


class UpdateAssignmentRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = None
    max_points: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("maxPoints", "maxScore", "max_points"),
    )
    status: Optional[AssignmentStatus] = None


class Submission(CamelModel):
    id: str = Field(alias="_id")
    assignment: str = Field(description="Id of the assignment")
    assignment_id: str
    student: Dict[str, Any]
    file: Optional[FileInfo] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = Field(default=None, description="Stored file name")
    original_name: Optional[str] = None
    submitted_at: str
    status: Literal["submitted", "graded"] = "submitted"
    grade: Optional[str] = None
    remarks: Optional[str] = None
    created_at: str
    updated_at: str


class GradeSubmissionRequest(CamelModel):
    grade: Optional[str] = None
    remarks: Optional[str] = None
