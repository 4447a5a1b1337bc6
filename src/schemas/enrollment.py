"""Enrollment schemas."""

from typing import Any, Dict, Literal, Optional

from pydantic import Field

from schemas.common import CamelModel

EnrollmentStatus = Literal["active", "completed", "dropped"]


class Enrollment(CamelModel):
    id: str = Field(alias="_id")
    student: Dict[str, Any] = Field(description="Student snapshot")
    course: Dict[str, Any] = Field(description="Course snapshot")
    status: EnrollmentStatus = "active"
    progress: int = Field(default=0, ge=0, le=100)
    enrollment_date: str
    grade: Optional[str] = None
    score: Optional[float] = None
    created_at: str
    updated_at: str


class CreateEnrollmentRequest(CamelModel):
    course_id: str = Field(min_length=1)
    student_id: Optional[str] = Field(
        default=None, description="Defaults to the session user"
    )


class UpdateEnrollmentRequest(CamelModel):
    status: Optional[str] = Field(
        default=None,
        description="active, completed or dropped; 'enrolled' and 'graduated' are accepted as synonyms",
    )
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    grade: Optional[str] = None
    score: Optional[float] = Field(default=None, ge=0, le=100)
