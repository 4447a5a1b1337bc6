"""In-process request router.

Answers the same paths, methods and envelopes as the HTTP API without a
server: ``fetch`` picks one handler from an ordered route table and runs it
against the entity store in a fresh session. Handler errors propagate
unchanged.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

from sqlalchemy.orm import Session

from config import DEFAULT_PAGE_SIZE, MOCK_LATENCY_MS, RECENT_ENROLLMENTS_LIMIT
from core.database import EntityStore, get_store
from core.exceptions import NotAuthenticatedError, RouteNotFoundError, ValidationError
from core.security import decode_access_token
from schemas.assignment import (
    CreateAssignmentRequest,
    GradeSubmissionRequest,
    UpdateAssignmentRequest,
)
from schemas.common import parse_payload, success_envelope
from schemas.course import CreateCourseRequest, UpdateCourseRequest
from schemas.enrollment import CreateEnrollmentRequest, UpdateEnrollmentRequest
from schemas.material import CreateMaterialRequest, UpdateMaterialRequest
from schemas.result import UpdateResultRequest, UpsertResultRequest
from schemas.user import (
    CreateUserRequest,
    InstructorCoursesRequest,
    LoginRequest,
    RegisterRequest,
    SetPasswordRequest,
    UpdateUserRequest,
    UserStatusRequest,
)
from utils.api_client import Body, LmsClient
from utils.assignment_manager import AssignmentManager
from utils.client_storage import ClientStorage
from utils.converters import model_to_session_user
from utils.course_manager import CourseManager
from utils.dashboard_manager import DashboardManager
from utils.enrollment_manager import EnrollmentManager
from utils.file_storage import FileStorage, UploadedFile
from utils.material_manager import MaterialManager
from utils.pagination import paginate
from utils.result_manager import ResultManager
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


@dataclass
class RouteContext:
    """Everything a handler needs for one call."""

    db: Session
    files_storage: FileStorage
    client_storage: ClientStorage
    params: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)
    files: Dict[str, UploadedFile] = field(default_factory=dict)

    def query_int(self, name: str, default: int, minimum: Optional[int] = None) -> int:
        value = self.query.get(name)
        if value in (None, ""):
            return default
        try:
            number = int(value)
        except ValueError:
            raise ValidationError(
                f"query.{name}: Input should be a valid integer, unable to parse string as an integer"
            )
        if minimum is not None and number < minimum:
            raise ValidationError(f"query.{name}: Input should be greater than or equal to {minimum}")
        return number

    @property
    def file(self) -> Optional[UploadedFile]:
        if "file" in self.files:
            return self.files["file"]
        if len(self.files) == 1:
            return next(iter(self.files.values()))
        return None

    def optional_user_id(self) -> Optional[str]:
        """The session user: from the stored token, else from the stored user."""
        token = self.client_storage.token
        if token:
            return decode_access_token(token)["sub"]
        user = self.client_storage.user
        if user:
            return user.get("id") or user.get("_id")
        return None

    def current_user_id(self) -> str:
        user_id = self.optional_user_id()
        if user_id is None:
            raise NotAuthenticatedError()
        return user_id


Handler = Callable[[RouteContext], Dict[str, Any]]


class Route:
    """One method and path pattern; ``{name}`` segments capture identifiers."""

    def __init__(self, method: str, pattern: str, handler: Handler):
        self.method = method
        self.pattern = pattern
        self.segments = pattern.strip("/").split("/")
        self.handler = handler

    def match(self, method: str, segments: List[str]) -> Optional[Dict[str, str]]:
        if method != self.method or len(segments) != len(self.segments):
            return None
        params = {}
        for expected, actual in zip(self.segments, segments):
            if expected.startswith("{") and expected.endswith("}"):
                if not actual:
                    return None
                params[expected[1:-1]] = actual
            elif expected != actual:
                return None
        return params


# --- Auth ---


def _login(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(LoginRequest, ctx.body)
    return UserManager(ctx.db).login(req.email, req.password, req.role).model_dump(by_alias=True)


def _register(ctx: RouteContext) -> Dict[str, Any]:
    user_manager = UserManager(ctx.db)
    model = user_manager.register(parse_payload(RegisterRequest, ctx.body))
    return {
        "success": True,
        "message": "Registration successful",
        "token": user_manager.issue_token(model),
        "user": model_to_session_user(model).model_dump(by_alias=True),
    }


def _me(ctx: RouteContext) -> Dict[str, Any]:
    user = UserManager(ctx.db).me(ctx.current_user_id())
    return {"user": user.model_dump(by_alias=True)}


def _set_password(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(SetPasswordRequest, ctx.body)
    UserManager(ctx.db).set_password(req.email, req.password)
    return {"success": True, "message": "Password set successfully"}


def _logout(ctx: RouteContext) -> Dict[str, Any]:
    return {"success": True, "message": "Logged out successfully"}


# --- Courses ---


def _course_manager(ctx: RouteContext) -> CourseManager:
    return CourseManager(ctx.db, ctx.files_storage)


def _list_courses(ctx: RouteContext) -> Dict[str, Any]:
    courses, pagination = _course_manager(ctx).list_courses(
        page=ctx.query_int("page", 1, minimum=1),
        limit=ctx.query_int("limit", DEFAULT_PAGE_SIZE, minimum=1),
    )
    return success_envelope(courses, pagination=pagination)


def _available_courses(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(_course_manager(ctx).list_available())


def _instructor_courses(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(_course_manager(ctx).list_for_instructor(ctx.current_user_id()))


def _get_course(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(_course_manager(ctx).get_course(ctx.params["course_id"]))


def _create_course(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(CreateCourseRequest, ctx.body)
    return success_envelope(
        _course_manager(ctx).create_course(req, current_user_id=ctx.optional_user_id())
    )


def _update_course(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(UpdateCourseRequest, ctx.body)
    return success_envelope(_course_manager(ctx).update_course(ctx.params["course_id"], req))


def _delete_course(ctx: RouteContext) -> Dict[str, Any]:
    _course_manager(ctx).delete_course(ctx.params["course_id"])
    return success_envelope(message="Course deleted successfully")


# --- Users ---


def _list_users(ctx: RouteContext) -> Dict[str, Any]:
    users = UserManager(ctx.db).list_users(role=ctx.query.get("role") or None)
    page, pagination = paginate(
        users,
        ctx.query_int("page", 1, minimum=1),
        ctx.query_int("limit", DEFAULT_PAGE_SIZE, minimum=1),
    )
    return success_envelope(page, pagination=pagination)


def _list_students(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(UserManager(ctx.db).list_students())


def _get_user(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(UserManager(ctx.db).get_user(ctx.params["user_id"]))


def _create_user(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(CreateUserRequest, ctx.body)
    return success_envelope(UserManager(ctx.db).create_user(req))


def _update_user(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(UpdateUserRequest, ctx.body)
    return success_envelope(UserManager(ctx.db).update_user(ctx.params["user_id"], req))


def _delete_user(ctx: RouteContext) -> Dict[str, Any]:
    UserManager(ctx.db).delete_user(ctx.params["user_id"])
    return success_envelope(message="User deleted successfully")


def _set_user_status(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(UserStatusRequest, ctx.body)
    return success_envelope(UserManager(ctx.db).set_active(ctx.params["user_id"], req.is_active))


def _assign_instructor_courses(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(InstructorCoursesRequest, ctx.body)
    courses = UserManager(ctx.db).assign_instructor_courses(ctx.params["user_id"], req.course_ids)
    return success_envelope(courses)


# --- Enrollments ---


def _list_enrollments(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(EnrollmentManager(ctx.db).list_enrollments())


def _my_enrollments(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(EnrollmentManager(ctx.db).list_for_student(ctx.current_user_id()))


def _get_enrollment(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(EnrollmentManager(ctx.db).get_enrollment(ctx.params["enrollment_id"]))


def _create_enrollment(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(CreateEnrollmentRequest, ctx.body)
    student_id = req.student_id or ctx.current_user_id()
    enrollment = EnrollmentManager(ctx.db).enroll(student_id, req.course_id)
    return success_envelope(enrollment, message="Enrolled successfully")


def _update_enrollment(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(UpdateEnrollmentRequest, ctx.body)
    return success_envelope(
        EnrollmentManager(ctx.db).update_enrollment(ctx.params["enrollment_id"], req)
    )


def _delete_enrollment(ctx: RouteContext) -> Dict[str, Any]:
    EnrollmentManager(ctx.db).delete_enrollment(ctx.params["enrollment_id"])
    return success_envelope(message="Enrollment deleted successfully")


# --- Assignments and submissions ---


def _assignment_manager(ctx: RouteContext) -> AssignmentManager:
    return AssignmentManager(ctx.db, ctx.files_storage)


def _list_assignments(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(
        _assignment_manager(ctx).list_assignments(course_id=ctx.query.get("course") or None)
    )


def _enrolled_assignments(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(_assignment_manager(ctx).list_for_student(ctx.current_user_id()))


def _my_submissions(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(
        _assignment_manager(ctx).list_student_submissions(ctx.current_user_id())
    )


def _get_assignment(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(_assignment_manager(ctx).get_assignment(ctx.params["assignment_id"]))


def _create_assignment(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(CreateAssignmentRequest, ctx.body)
    assignment = _assignment_manager(ctx).create_assignment(
        req, file=ctx.file, creator_id=ctx.optional_user_id()
    )
    return success_envelope(assignment)


def _update_assignment(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(UpdateAssignmentRequest, ctx.body)
    assignment = _assignment_manager(ctx).update_assignment(
        ctx.params["assignment_id"], req, file=ctx.file
    )
    return success_envelope(assignment)


def _delete_assignment(ctx: RouteContext) -> Dict[str, Any]:
    _assignment_manager(ctx).delete_assignment(ctx.params["assignment_id"])
    return success_envelope(message="Assignment deleted successfully")


def _list_submissions(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(_assignment_manager(ctx).list_submissions(ctx.params["assignment_id"]))


def _submit(ctx: RouteContext) -> Dict[str, Any]:
    submission = _assignment_manager(ctx).submit(
        ctx.params["assignment_id"], ctx.current_user_id(), ctx.file
    )
    return success_envelope(submission, message="Assignment submitted successfully")


def _grade_submission(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(GradeSubmissionRequest, ctx.body)
    submission = _assignment_manager(ctx).grade_submission(
        ctx.params["assignment_id"], ctx.params["submission_id"], req
    )
    return success_envelope(submission)


def _download_submission(ctx: RouteContext) -> Dict[str, Any]:
    """Envelope with the file metadata plus the raw bytes under ``content``."""
    path, info = _assignment_manager(ctx).get_submission_file(
        ctx.params["assignment_id"], ctx.params["submission_id"]
    )
    envelope = success_envelope(info)
    envelope["content"] = path.read_bytes()
    return envelope


def _delete_submission(ctx: RouteContext) -> Dict[str, Any]:
    _assignment_manager(ctx).delete_submission(
        ctx.params["assignment_id"], ctx.params["submission_id"]
    )
    return success_envelope(message="Submission deleted successfully")


# --- Materials ---


def _material_manager(ctx: RouteContext) -> MaterialManager:
    return MaterialManager(ctx.db, ctx.files_storage)


def _list_materials(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(
        _material_manager(ctx).list_materials(course_id=ctx.query.get("course") or None)
    )


def _enrolled_materials(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(_material_manager(ctx).list_for_student(ctx.current_user_id()))


def _get_material(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(_material_manager(ctx).get_material(ctx.params["material_id"]))


def _create_material(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(CreateMaterialRequest, ctx.body)
    material = _material_manager(ctx).create_material(
        req, file=ctx.file, uploader_id=ctx.optional_user_id()
    )
    return success_envelope(material)


def _update_material(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(UpdateMaterialRequest, ctx.body)
    material = _material_manager(ctx).update_material(ctx.params["material_id"], req, file=ctx.file)
    return success_envelope(material)


def _delete_material(ctx: RouteContext) -> Dict[str, Any]:
    _material_manager(ctx).delete_material(ctx.params["material_id"])
    return success_envelope(message="Material deleted successfully")


# --- Results ---


def _list_results(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(
        ResultManager(ctx.db).list_results(
            student_id=ctx.query.get("student") or None,
            course_id=ctx.query.get("course") or None,
        )
    )


def _my_results(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(ResultManager(ctx.db).list_results(student_id=ctx.current_user_id()))


def _get_result(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(ResultManager(ctx.db).get_result(ctx.params["result_id"]))


def _upsert_result(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(UpsertResultRequest, ctx.body)
    return success_envelope(ResultManager(ctx.db).upsert_result(req))


def _update_result(ctx: RouteContext) -> Dict[str, Any]:
    req = parse_payload(UpdateResultRequest, ctx.body)
    return success_envelope(ResultManager(ctx.db).update_result(ctx.params["result_id"], req))


def _delete_result(ctx: RouteContext) -> Dict[str, Any]:
    ResultManager(ctx.db).delete_result(ctx.params["result_id"])
    return success_envelope(message="Result deleted successfully")


# --- Dashboard ---


def _dashboard_stats(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(DashboardManager(ctx.db).get_stats())


def _recent_enrollments(ctx: RouteContext) -> Dict[str, Any]:
    limit = ctx.query_int("limit", RECENT_ENROLLMENTS_LIMIT, minimum=0)
    return success_envelope(DashboardManager(ctx.db).get_recent_enrollments(limit))


def _course_performance(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(DashboardManager(ctx.db).get_course_performance())


def _dashboard_metrics(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(DashboardManager(ctx.db).get_metrics(RECENT_ENROLLMENTS_LIMIT))


def _dashboard_counts(ctx: RouteContext) -> Dict[str, Any]:
    return success_envelope(DashboardManager(ctx.db).get_counts())


def build_routes() -> List[Route]:
    """The route table, in matching order.

    Static paths come first so that ``/api/courses/available`` never reaches
    ``/api/courses/{course_id}``; collections follow, then identifier paths.
    """
    table = [
        # Static paths
        ("POST", "/api/auth/login", _login),
        ("POST", "/api/auth/register", _register),
        ("GET", "/api/auth/me", _me),
        ("POST", "/api/auth/set-password", _set_password),
        ("POST", "/api/auth/logout", _logout),
        ("GET", "/api/courses/available", _available_courses),
        ("GET", "/api/courses/instructor", _instructor_courses),
        ("GET", "/api/users/students", _list_students),
        ("GET", "/api/enrollments/student/me", _my_enrollments),
        ("GET", "/api/assignments/enrolled", _enrolled_assignments),
        ("GET", "/api/assignments/submissions", _my_submissions),
        ("GET", "/api/materials/enrolled", _enrolled_materials),
        ("GET", "/api/results/student/me", _my_results),
        ("GET", "/api/dashboard/stats", _dashboard_stats),
        ("GET", "/api/dashboard/recent-enrollments", _recent_enrollments),
        ("GET", "/api/dashboard/course-performance", _course_performance),
        ("GET", "/api/dashboard/metrics", _dashboard_metrics),
        ("GET", "/api/dashboard/counts", _dashboard_counts),
        # Collections
        ("GET", "/api/courses", _list_courses),
        ("POST", "/api/courses", _create_course),
        ("GET", "/api/users", _list_users),
        ("POST", "/api/users", _create_user),
        ("GET", "/api/enrollments", _list_enrollments),
        ("POST", "/api/enrollments", _create_enrollment),
        ("GET", "/api/assignments", _list_assignments),
        ("POST", "/api/assignments", _create_assignment),
        ("GET", "/api/materials", _list_materials),
        ("POST", "/api/materials", _create_material),
        ("GET", "/api/results", _list_results),
        ("POST", "/api/results", _upsert_result),
        # Identifier paths
        ("GET", "/api/courses/{course_id}", _get_course),
        ("PUT", "/api/courses/{course_id}", _update_course),
        ("PATCH", "/api/courses/{course_id}", _update_course),
        ("DELETE", "/api/courses/{course_id}", _delete_course),
        ("PATCH", "/api/users/{user_id}/status", _set_user_status),
        ("PATCH", "/api/users/{user_id}/instructor-courses", _assign_instructor_courses),
        ("GET", "/api/users/{user_id}", _get_user),
        ("PUT", "/api/users/{user_id}", _update_user),
        ("PATCH", "/api/users/{user_id}", _update_user),
        ("DELETE", "/api/users/{user_id}", _delete_user),
        ("GET", "/api/enrollments/{enrollment_id}", _get_enrollment),
        ("PUT", "/api/enrollments/{enrollment_id}", _update_enrollment),
        ("PATCH", "/api/enrollments/{enrollment_id}", _update_enrollment),
        ("DELETE", "/api/enrollments/{enrollment_id}", _delete_enrollment),
        ("GET", "/api/assignments/{assignment_id}/submissions", _list_submissions),
        ("POST", "/api/assignments/{assignment_id}/submissions", _submit),
        (
            "GET",
            "/api/assignments/{assignment_id}/submissions/{submission_id}/download",
            _download_submission,
        ),
        ("PATCH", "/api/assignments/{assignment_id}/submissions/{submission_id}", _grade_submission),
        ("DELETE", "/api/assignments/{assignment_id}/submissions/{submission_id}", _delete_submission),
        ("GET", "/api/assignments/{assignment_id}", _get_assignment),
        ("PUT", "/api/assignments/{assignment_id}", _update_assignment),
        ("PATCH", "/api/assignments/{assignment_id}", _update_assignment),
        ("DELETE", "/api/assignments/{assignment_id}", _delete_assignment),
        ("GET", "/api/materials/{material_id}", _get_material),
        ("PUT", "/api/materials/{material_id}", _update_material),
        ("PATCH", "/api/materials/{material_id}", _update_material),
        ("DELETE", "/api/materials/{material_id}", _delete_material),
        ("GET", "/api/results/{result_id}", _get_result),
        ("PUT", "/api/results/{result_id}", _update_result),
        ("PATCH", "/api/results/{result_id}", _update_result),
        ("DELETE", "/api/results/{result_id}", _delete_result),
    ]
    return [Route(method, pattern, handler) for method, pattern, handler in table]


class RequestRouter(LmsClient):
    """Serves LMS API calls in-process against an entity store."""

    def __init__(
        self,
        store: Optional[EntityStore] = None,
        storage: Optional[ClientStorage] = None,
        latency_ms: int = MOCK_LATENCY_MS,
    ):
        """Initialize the router.

        Args:
            store: Entity store to serve; defaults to the process-wide store.
            storage: Client storage holding the session token and user.
            latency_ms: Artificial delay before each dispatch, in milliseconds.
        """
        super().__init__(storage)
        self.store = store if store is not None else get_store()
        self.file_storage = FileStorage(self.store.upload_dir)
        self.latency_ms = latency_ms
        self.routes = build_routes()

    def resolve(self, method: str, path: str) -> Tuple[Route, Dict[str, str]]:
        """Find the first route matching a method and path.

        Raises:
            RouteNotFoundError: If no route matches.
        """
        method = method.upper()
        segments = path.strip("/").split("/")
        for route in self.routes:
            params = route.match(method, segments)
            if params is not None:
                return route, params
        raise RouteNotFoundError(method, path)

    def fetch(
        self,
        path: str,
        method: str = "GET",
        body: Body = None,
        files: Optional[Dict[str, UploadedFile]] = None,
    ) -> Dict[str, Any]:
        """Dispatch one call to its handler.

        Args:
            path: Request path, optionally with a query string.
            method: HTTP method.
            body: Field map, or a JSON encoded object.
            files: Uploaded files keyed by form field name.

        Returns:
            The handler's envelope.

        Raises:
            RouteNotFoundError: If no route matches.
            LMSError: Whatever the handler raised.
        """
        parts = urlsplit(path)
        query = dict(parse_qsl(parts.query))
        if isinstance(body, str):
            try:
                body = json.loads(body) if body else {}
            except ValueError:
                raise ValidationError("Request body must be JSON or a multipart form")
        if body is not None and not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")

        if self.latency_ms > 0:
            time.sleep(self.latency_ms / 1000)

        route, params = self.resolve(method, parts.path)
        logger.debug("%s %s -> %s", method.upper(), parts.path, route.pattern)
        with self.store.session() as db:
            ctx = RouteContext(
                db=db,
                files_storage=self.file_storage,
                client_storage=self.storage,
                params=params,
                query=query,
                body=body or {},
                files=files or {},
            )
            return route.handler(ctx)
