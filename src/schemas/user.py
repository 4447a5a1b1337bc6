"""User and authentication schemas."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from schemas.common import CamelModel

UserRole = Literal["admin", "instructor", "student"]


class User(CamelModel):
    """A user as exposed to clients. The password hash never leaves the store."""

    id: str = Field(alias="_id")
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    is_active: bool = True
    student_id: Optional[str] = None
    instructor_id: Optional[str] = None
    department: Optional[str] = None
    created_at: str
    updated_at: str


class SessionUser(CamelModel):
    """Projection of a user kept in the client session."""

    id: str
    first_name: str
    last_name: str
    email: str
    role: UserRole
    student_id: Optional[str] = None
    instructor_id: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str
    role: UserRole


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    user: SessionUser


class RegisterRequest(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: Optional[str] = None
    password: Optional[str] = None
    department: Optional[str] = None


class SetPasswordRequest(BaseModel):
    email: str
    password: str


class CreateUserRequest(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: Optional[str] = None
    role: UserRole = "student"
    password: Optional[str] = None
    department: Optional[str] = None
    is_active: bool = True


class UpdateUserRequest(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[UserRole] = None
    department: Optional[str] = None
    is_active: Optional[bool] = None


class UserStatusRequest(CamelModel):
    is_active: bool


class InstructorCoursesRequest(CamelModel):
    course_ids: List[str] = Field(default_factory=list)
