"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Boolean, Column, Integer, String
from .base import Base


class UserModel(Base):
    """User database model.

    The integer ``id`` only fixes insertion order; ``user_id`` is the
    identifier exposed to clients.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, index=True, nullable=False)
    phone = Column(String, nullable=True)
    role = Column(String, index=True, nullable=False)  # 'admin', 'instructor' or 'student'
    is_active = Column(Boolean, nullable=False, default=True)
    student_id = Column(String, nullable=True)  # e.g. STU001
    instructor_id = Column(String, nullable=True)  # e.g. INST001
    department = Column(String, nullable=True)
    password_hash = Column(String, nullable=True)  # None until a password is set
    created_at = Column(String, nullable=False)  # ISO format string
    updated_at = Column(String, nullable=False)
