"""Pydantic schemas for the LMS wire format."""
