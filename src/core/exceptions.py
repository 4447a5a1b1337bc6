"""Custom exception classes for the LMS service.

Every failure carries a ``code`` naming its kind and the HTTP ``status_code``
used when it crosses the wire. Handlers raise them, the in-process router
lets them propagate unchanged and the FastAPI app turns them into failure
envelopes.
"""

from typing import Optional


class LMSError(Exception):
    """Base exception for all LMS errors."""

    code = "InternalError"
    status_code = 500

    def __init__(self, message: str):
        """Initialize the exception.

        Args:
            message: Human readable description of the failure.
        """
        self.message = message
        super().__init__(message)


class RouteNotFoundError(LMSError):
    """Raised when no route matches a method and path."""

    code = "NotFound"
    status_code = 404

    def __init__(self, method: str, path: str):
        """Initialize the exception.

        Args:
            method: The HTTP method of the request.
            path: The requested path.
        """
        self.method = method.upper()
        self.path = path
        super().__init__(f"Endpoint not found: {self.method} {path}")


class InvalidCredentialsError(LMSError):
    """Raised when no account matches the login email and role."""

    code = "InvalidCredentials"
    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class InvalidPasswordError(LMSError):
    """Raised when the login password does not match."""

    code = "InvalidPassword"
    status_code = 401

    def __init__(self, message: str = "Invalid password"):
        super().__init__(message)


class NotAuthenticatedError(LMSError):
    """Raised when an operation needs a session and none is present."""

    code = "NotAuthenticated"
    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class EntityNotFoundError(LMSError):
    """Raised when an identifier does not resolve in the store."""

    entity = "Entity"
    status_code = 404

    def __init__(self, entity_id: Optional[str] = None):
        """Initialize the exception.

        Args:
            entity_id: The identifier that was not found.
        """
        self.entity_id = entity_id
        if entity_id:
            message = f"{self.entity} '{entity_id}' not found"
        else:
            message = f"{self.entity} not found"
        super().__init__(message)


class UserNotFoundError(EntityNotFoundError):
    entity = "User"
    code = "UserNotFound"


class CourseNotFoundError(EntityNotFoundError):
    entity = "Course"
    code = "CourseNotFound"


class EnrollmentNotFoundError(EntityNotFoundError):
    entity = "Enrollment"
    code = "EnrollmentNotFound"


class AssignmentNotFoundError(EntityNotFoundError):
    entity = "Assignment"
    code = "AssignmentNotFound"


class SubmissionNotFoundError(EntityNotFoundError):
    entity = "Submission"
    code = "SubmissionNotFound"


class MaterialNotFoundError(EntityNotFoundError):
    entity = "Material"
    code = "MaterialNotFound"


class ResultNotFoundError(EntityNotFoundError):
    entity = "Result"
    code = "ResultNotFound"


class UserAlreadyExistsError(LMSError):
    """Raised when registering an email that is already taken."""

    code = "UserAlreadyExists"
    status_code = 409

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User '{email}' already exists")


class AlreadyEnrolledError(LMSError):
    """Raised when a student already holds a live enrollment for a course."""

    code = "AlreadyEnrolled"
    status_code = 409

    def __init__(self, student_id: str, course_id: str):
        self.student_id = student_id
        self.course_id = course_id
        super().__init__("Already enrolled in this course")


class CourseFullError(LMSError):
    """Raised when a course has no seats left."""

    code = "CourseFull"
    status_code = 409

    def __init__(self, course_id: str):
        self.course_id = course_id
        super().__init__("Course is full")


class InvalidScoreError(LMSError):
    """Raised when a result score lies outside [0, 100]."""

    code = "InvalidScore"
    status_code = 400

    def __init__(self, field: str, value: float):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be a number between 0 and 100, got {value}")


class ValidationError(LMSError):
    """Raised when request data validation fails."""

    code = "Validation"
    status_code = 400


class ApiError(LMSError):
    """Raised by the HTTP client adapter for any failed call."""

    def __init__(self, message: str, status_code: int, code: Optional[str] = None):
        """Initialize the exception.

        Args:
            message: Message extracted from the failure body.
            status_code: HTTP status, or 0 when no response arrived.
            code: Error kind reported by the server, if any.
        """
        super().__init__(message)
        self.status_code = status_code
        self.code = code or "ApiError"
