"""Configuration module for the University LMS service.

This module provides centralized configuration management, including directory
paths, API server settings, authentication settings and client defaults.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / DATA_DIR_NAME)))

# Uploaded materials, assignment attachments and submissions
UPLOAD_DIR_NAME = "uploads"
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(DATA_DIR / UPLOAD_DIR_NAME)))

# URL prefix under which stored uploads are served back
UPLOAD_URL_PREFIX = "/uploads"

# --- Store Configuration ---

# Default is a private in-memory SQLite database, rebuilt on every start.
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://")

# Load the demo users, courses, enrollments... into a fresh store
SEED_DATA: bool = os.getenv("SEED_DATA", "true").lower() == "true"

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:8080,"
    "http://127.0.0.1:8080,http://localhost:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))  # 7 days
)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Placeholder password accepted for accounts that never set one.
# Known-insecure: it only exists so the demo accounts can log in.
DEFAULT_PASSWORD: str = os.getenv("DEFAULT_PASSWORD", "password123")

MIN_PASSWORD_LENGTH: int = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))

# --- Listing Configuration ---

DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "50"))
RECENT_ENROLLMENTS_LIMIT: int = int(os.getenv("RECENT_ENROLLMENTS_LIMIT", "5"))

# --- Client Configuration ---

# Base origin used by the HTTP client adapter
API_BASE_URL: str = os.getenv("API_BASE_URL", f"http://127.0.0.1:{API_PORT}")
API_TIMEOUT_SECONDS: float = float(os.getenv("API_TIMEOUT_SECONDS", "30"))

# Simulated network latency for the in-process router, in milliseconds
MOCK_LATENCY_MS: int = int(os.getenv("MOCK_LATENCY_MS", "0"))

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE: Optional[str] = os.getenv("LOG_FILE")
