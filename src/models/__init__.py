"""SQLAlchemy models for the LMS entity store."""

from .assignment import AssignmentModel, SubmissionModel
from .base import Base
from .course import CourseModel
from .enrollment import EnrollmentModel
from .material import MaterialModel
from .result import ResultModel
from .user import UserModel

__all__ = [
    "AssignmentModel",
    "Base",
    "CourseModel",
    "EnrollmentModel",
    "MaterialModel",
    "ResultModel",
    "SubmissionModel",
    "UserModel",
]
