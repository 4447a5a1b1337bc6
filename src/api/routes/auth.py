"""Authentication routes.

This module handles HTTP endpoints for login, registration, the current
session user and password setup.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.dependencies import UserManagerDep
from core.exceptions import NotAuthenticatedError
from core.security import decode_access_token
from schemas.user import LoginRequest, RegisterRequest, SetPasswordRequest
from utils.converters import model_to_session_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# HTTP Bearer token security; a missing header is reported as NotAuthenticated
security = HTTPBearer(auto_error=False)


def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Read the user ID from the bearer token, if one was sent.

    Raises:
        NotAuthenticatedError: If a token was sent but is invalid or expired.
    """
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)["sub"]


def get_current_user_id(user_id: Optional[str] = Depends(get_optional_user_id)) -> str:
    """Require a bearer token and return its user ID.

    Raises:
        NotAuthenticatedError: If no valid token was sent.
    """
    if user_id is None:
        raise NotAuthenticatedError()
    return user_id


@router.post("/login", summary="Log in")
def login(req: LoginRequest, user_manager: UserManagerDep = None) -> dict:
    """Authenticate and return ``{success, token, user}``."""
    response = user_manager.login(req.email, req.password, req.role)
    return response.model_dump(by_alias=True)


@router.post("/register", summary="Register a student account")
def register(req: RegisterRequest, user_manager: UserManagerDep = None) -> dict:
    """Register a new student.

    Args:
        req: Registration fields.
        user_manager: Injected UserManager instance.

    Returns:
        Dictionary with success flag, message, token and the session user.
    """
    model = user_manager.register(req)
    return {
        "success": True,
        "message": "Registration successful",
        "token": user_manager.issue_token(model),
        "user": model_to_session_user(model).model_dump(by_alias=True),
    }


@router.get("/me", summary="Current session user")
def me(
    user_id: str = Depends(get_current_user_id),
    user_manager: UserManagerDep = None,
) -> dict:
    return {"user": user_manager.me(user_id).model_dump(by_alias=True)}


@router.post("/set-password", summary="Set an account password")
def set_password(req: SetPasswordRequest, user_manager: UserManagerDep = None) -> dict:
    user_manager.set_password(req.email, req.password)
    return {"success": True, "message": "Password set successfully"}


@router.post("/logout", summary="Log out")
def logout() -> dict:
    """Tokens are stateless; clients drop them from their storage."""
    return {"success": True, "message": "Logged out successfully"}
