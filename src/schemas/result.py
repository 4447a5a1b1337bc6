"""Result schemas."""

from typing import Any, Dict, Literal, Optional

from pydantic import AliasChoices, Field

from schemas.common import CamelModel

ResultStatus = Literal["passed", "failed", "pending", "incomplete"]


class Result(CamelModel):
    id: str = Field(alias="_id")
    student: Dict[str, Any]
    course: Dict[str, Any]
    ca_score: Optional[float] = Field(default=None, description="Continuous assessment, 0-100")
    final_exam_score: Optional[float] = Field(default=None, description="Final exam, 0-100")
    final_percentage: Optional[int] = None
    final_grade: Optional[str] = None
    status: ResultStatus = "pending"
    created_at: str
    updated_at: str


class UpsertResultRequest(CamelModel):
    student_id: str = Field(
        min_length=1, validation_alias=AliasChoices("student", "studentId", "student_id")
    )
    course_id: str = Field(
        min_length=1, validation_alias=AliasChoices("course", "courseId", "course_id")
    )
    ca_score: Optional[float] = None
    final_exam_score: Optional[float] = None


class UpdateResultRequest(CamelModel):
    ca_score: Optional[float] = None
    final_exam_score: Optional[float] = None
