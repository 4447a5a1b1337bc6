"""Declarative base shared by all LMS models."""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
