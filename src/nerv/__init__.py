"""Nerv — personal academic organizer backend.

REST API for courses, assignments, and notes. Every record belongs to
exactly one user, and every query is scoped to the caller's identity.
"""

__version__ = "0.1.0"
