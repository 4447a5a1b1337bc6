"""Managers and helpers behind the LMS routes and the in-process router."""
