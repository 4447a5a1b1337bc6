"""User management utilities.

This module provides user storage, account identifiers, password handling
and the authentication operations (login, register, set password).
"""

import logging
import re
from typing import List, Optional

from sqlalchemy.orm import Session

from config import DEFAULT_PASSWORD, MIN_PASSWORD_LENGTH
from core.exceptions import (
    CourseNotFoundError,
    InvalidCredentialsError,
    InvalidPasswordError,
    UserAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)
from core.security import create_access_token, hash_password, verify_password
from models.course import CourseModel
from models.user import UserModel
from schemas.course import Course
from schemas.user import (
    CreateUserRequest,
    LoginResponse,
    RegisterRequest,
    SessionUser,
    UpdateUserRequest,
    User,
)
from utils.converters import (
    instructor_snapshot,
    model_to_course,
    model_to_session_user,
    model_to_user,
    new_id,
    now_iso,
)

logger = logging.getLogger(__name__)

# Prefix of the human readable account identifier per role
IDENTIFIER_PREFIXES = {"student": "STU", "instructor": "INST"}


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def get_model(self, user_id: str) -> UserModel:
        """Get a user model by user ID.

        Raises:
            UserNotFoundError: If no user has this ID.
        """
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if not model:
            raise UserNotFoundError(user_id)
        return model

    def get_user(self, user_id: str) -> User:
        return model_to_user(self.get_model(user_id))

    def get_model_by_email(self, email: str, role: Optional[str] = None) -> Optional[UserModel]:
        query = self.db.query(UserModel).filter(UserModel.email == email)
        if role:
            query = query.filter(UserModel.role == role)
        return query.order_by(UserModel.id).first()

    def list_users(self, role: Optional[str] = None) -> List[User]:
        """List users in insertion order.

        Args:
            role: Optional role filter.

        Returns:
            List of User objects.
        """
        query = self.db.query(UserModel)
        if role:
            query = query.filter(UserModel.role == role)
        return [model_to_user(m) for m in query.order_by(UserModel.id).all()]

    def list_students(self) -> List[User]:
        return self.list_users(role="student")

    def next_identifier(self, role: str) -> Optional[str]:
        """Compute the next STU/INST identifier for a role.

        The number is one past the highest existing one, zero-padded to three
        digits.

        Args:
            role: Target role. Admins get no identifier.

        Returns:
            The identifier, or None for roles without one.
        """
        prefix = IDENTIFIER_PREFIXES.get(role)
        if prefix is None:
            return None
        column = UserModel.student_id if role == "student" else UserModel.instructor_id
        pattern = re.compile(rf"^{prefix}(\d+)$")
        highest = 0
        for (value,) in self.db.query(column).filter(column.isnot(None)).all():
            match = pattern.match(value)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{prefix}{highest + 1:03d}"

    def create_user(self, request: CreateUserRequest) -> User:
        """Create a user from the admin user form.

        Email uniqueness is not checked here; only registration enforces it.

        Args:
            request: The user fields.

        Returns:
            Created User object.
        """
        now = now_iso()
        identifier = self.next_identifier(request.role)
        model = UserModel(
            user_id=new_id(),
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            phone=request.phone,
            role=request.role,
            is_active=request.is_active,
            student_id=identifier if request.role == "student" else None,
            instructor_id=identifier if request.role == "instructor" else None,
            department=request.department,
            password_hash=hash_password(request.password) if request.password else None,
            created_at=now,
            updated_at=now,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created %s user: %s (%s)", model.role, model.email, model.user_id)
        return model_to_user(model)

    def update_user(self, user_id: str, request: UpdateUserRequest) -> User:
        """Merge the supplied fields into a user.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        model = self.get_model(user_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(model, field, value)
        if model.role == "student" and not model.student_id:
            model.student_id = self.next_identifier("student")
        if model.role == "instructor" and not model.instructor_id:
            model.instructor_id = self.next_identifier("instructor")
        model.updated_at = now_iso()
        self.db.commit()
        self.db.refresh(model)
        return model_to_user(model)

    def delete_user(self, user_id: str) -> None:
        """Hard-delete a user. Snapshots held by other records are kept.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        model = self.get_model(user_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted user: %s", user_id)

    def set_active(self, user_id: str, is_active: bool) -> User:
        model = self.get_model(user_id)
        model.is_active = is_active
        model.updated_at = now_iso()
        self.db.commit()
        self.db.refresh(model)
        logger.info("Set user %s active=%s", user_id, is_active)
        return model_to_user(model)

    def assign_instructor_courses(self, user_id: str, course_ids: List[str]) -> List[Course]:
        """Make an instructor the instructor of exactly the listed courses.

        Listed courses receive a fresh snapshot of the instructor; courses that
        referenced the instructor but are no longer listed lose it.

        Args:
            user_id: The instructor's user ID.
            course_ids: Courses the instructor should teach.

        Returns:
            The courses now taught by the instructor.

        Raises:
            UserNotFoundError: If the user does not exist.
            ValidationError: If the user is not an instructor.
            CourseNotFoundError: If any listed course does not exist.
        """
        instructor = self.get_model(user_id)
        if instructor.role != "instructor":
            raise ValidationError(f"User '{user_id}' is not an instructor")

        wanted = []
        for course_id in dict.fromkeys(course_ids):
            course = self.db.query(CourseModel).filter(CourseModel.course_id == course_id).first()
            if not course:
                raise CourseNotFoundError(course_id)
            wanted.append(course)

        now = now_iso()
        wanted_ids = {course.course_id for course in wanted}
        previous = (
            self.db.query(CourseModel)
            .filter(CourseModel.instructor_id == user_id)
            .all()
        )
        for course in previous:
            if course.course_id not in wanted_ids:
                course.instructor = None
                course.instructor_id = None
                course.updated_at = now
        for course in wanted:
            course.instructor = instructor_snapshot(instructor)
            course.instructor_id = instructor.user_id
            course.updated_at = now
        self.db.commit()
        logger.info("Assigned %d courses to instructor %s", len(wanted), user_id)
        return [model_to_course(course) for course in wanted]

    # --- Authentication ---

    def login(self, email: str, password: str, role: str) -> LoginResponse:
        """Authenticate a user and issue a bearer token.

        Accounts without a stored password hash accept DEFAULT_PASSWORD.

        Args:
            email: Account email, matched exactly.
            password: Plain text password.
            role: Role the user logs in as; must match the account's role.

        Returns:
            LoginResponse holding the token and the session projection.

        Raises:
            InvalidCredentialsError: If no active account matches email and role.
            InvalidPasswordError: If the password does not match.
        """
        model = self.get_model_by_email(email, role=role)
        if not model:
            logger.warning("Login rejected for %s as %s: no such account", email, role)
            raise InvalidCredentialsError()

        if model.password_hash:
            password_ok = verify_password(password, model.password_hash)
        else:
            password_ok = password == DEFAULT_PASSWORD
        if not password_ok:
            logger.warning("Login rejected for %s: wrong password", email)
            raise InvalidPasswordError()

        if not model.is_active:
            logger.warning("Login rejected for %s: account inactive", email)
            raise InvalidCredentialsError("Account is inactive")

        logger.info("User logged in: %s (%s)", email, role)
        return LoginResponse(token=self.issue_token(model), user=model_to_session_user(model))

    def issue_token(self, model: UserModel) -> str:
        return create_access_token(data={"sub": model.user_id, "role": model.role})

    def me(self, user_id: str) -> SessionUser:
        return model_to_session_user(self.get_model(user_id))

    def register(self, request: RegisterRequest) -> UserModel:
        """Self-register a student account.

        Args:
            request: Registration fields.

        Returns:
            The created user model.

        Raises:
            UserAlreadyExistsError: If the email is already taken.
            ValidationError: If a supplied password is too short.
        """
        if self.get_model_by_email(request.email):
            logger.warning("Registration rejected: %s already exists", request.email)
            raise UserAlreadyExistsError(request.email)
        if request.password is not None:
            self._check_password(request.password)

        now = now_iso()
        model = UserModel(
            user_id=new_id(),
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            phone=request.phone,
            role="student",
            is_active=True,
            student_id=self.next_identifier("student"),
            department=request.department,
            password_hash=hash_password(request.password) if request.password else None,
            created_at=now,
            updated_at=now,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Registered student: %s (%s)", model.email, model.student_id)
        return model

    def set_password(self, email: str, password: str) -> None:
        """Store a bcrypt hash for the account with this email.

        Raises:
            UserNotFoundError: If no account has this email.
            ValidationError: If the password is too short.
        """
        model = self.get_model_by_email(email)
        if not model:
            raise UserNotFoundError(email)
        self._check_password(password)
        model.password_hash = hash_password(password)
        model.updated_at = now_iso()
        self.db.commit()
        logger.info("Password set for %s", email)

    def _check_password(self, password: str) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
