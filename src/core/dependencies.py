"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
Tests swap the store by overriding ``get_store``.
"""

from typing import Annotated, Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from core import database
from core.database import EntityStore
from utils import assignment_manager
from utils import course_manager
from utils import dashboard_manager
from utils import enrollment_manager
from utils import material_manager
from utils import result_manager
from utils import user_manager
from utils.file_storage import FileStorage


def get_store() -> EntityStore:
    """Get the EntityStore singleton instance."""
    return database.get_store()


def get_db(store: EntityStore = Depends(get_store)) -> Iterator[Session]:
    """Dependency for getting a request-scoped database session."""
    with store.session() as db:
        yield db


def get_file_storage(store: EntityStore = Depends(get_store)) -> FileStorage:
    return FileStorage(store.upload_dir)


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_course_manager(
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
) -> course_manager.CourseManager:
    """Get CourseManager instance with request-scoped DB session.

    Args:
        db: Database session.
        storage: Upload storage, used to remove files of deleted courses.

    Returns:
        CourseManager instance.
    """
    return course_manager.CourseManager(db, storage)


def get_enrollment_manager(
    db: Session = Depends(get_db),
) -> enrollment_manager.EnrollmentManager:
    """Get EnrollmentManager instance with request-scoped DB session."""
    return enrollment_manager.EnrollmentManager(db)


def get_assignment_manager(
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
) -> assignment_manager.AssignmentManager:
    """Get AssignmentManager instance with request-scoped DB session."""
    return assignment_manager.AssignmentManager(db, storage)


def get_material_manager(
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
) -> material_manager.MaterialManager:
    """Get MaterialManager instance with request-scoped DB session."""
    return material_manager.MaterialManager(db, storage)


def get_result_manager(db: Session = Depends(get_db)) -> result_manager.ResultManager:
    """Get ResultManager instance with request-scoped DB session."""
    return result_manager.ResultManager(db)


def get_dashboard_manager(
    db: Session = Depends(get_db),
) -> dashboard_manager.DashboardManager:
    return dashboard_manager.DashboardManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[user_manager.UserManager, Depends(get_user_manager)]
CourseManagerDep = Annotated[course_manager.CourseManager, Depends(get_course_manager)]
EnrollmentManagerDep = Annotated[
    enrollment_manager.EnrollmentManager, Depends(get_enrollment_manager)
]
AssignmentManagerDep = Annotated[
    assignment_manager.AssignmentManager, Depends(get_assignment_manager)
]
MaterialManagerDep = Annotated[
    material_manager.MaterialManager, Depends(get_material_manager)
]
ResultManagerDep = Annotated[result_manager.ResultManager, Depends(get_result_manager)]
DashboardManagerDep = Annotated[
    dashboard_manager.DashboardManager, Depends(get_dashboard_manager)
]
