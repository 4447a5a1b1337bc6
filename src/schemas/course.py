"""Course schemas."""

from typing import Any, Dict, Literal, Optional

from pydantic import AliasChoices, Field

from schemas.common import CamelModel

CourseLevel = Literal["beginner", "intermediate", "advanced"]
CourseStatus = Literal["active", "inactive", "archived"]


class Course(CamelModel):
    id: str = Field(alias="_id")
    title: str
    code: str
    description: str = ""
    instructor: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Snapshot {_id, firstName, lastName, email} taken when the instructor was assigned",
    )
    capacity: int = 0
    enrolled: int = Field(default=0, description="Number of non-dropped enrollments")
    duration: Optional[str] = None
    credits: int = 3
    level: CourseLevel = "beginner"
    category: str = "General"
    status: CourseStatus = "active"
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    created_at: str
    updated_at: str


class CreateCourseRequest(CamelModel):
    # title and code are checked by the manager so both transports report
    # the same ValidationError
    title: Optional[str] = None
    code: Optional[str] = None
    description: str = ""
    instructor_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("instructorId", "instructor", "instructor_id"),
    )
    capacity: int = Field(default=0, ge=0)
    duration: Optional[str] = None
    credits: int = Field(default=3, ge=0)
    level: CourseLevel = "beginner"
    category: str = "General"
    status: CourseStatus = "active"
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class UpdateCourseRequest(CamelModel):
    title: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    instructor_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("instructorId", "instructor", "instructor_id"),
    )
    capacity: Optional[int] = Field(default=None, ge=0)
    duration: Optional[str] = None
    credits: Optional[int] = Field(default=None, ge=0)
    level: Optional[CourseLevel] = None
    category: Optional[str] = None
    status: Optional[CourseStatus] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
