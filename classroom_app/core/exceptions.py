# classroom_app/core/exceptions.py
"""Custom exceptions for the classroom application.

Services raise these; the request layer turns them into HTTP responses
(see ``error_handlers``). ``status_code`` is the externally visible category.
"""
from typing import Optional


class ClassroomError(Exception):
    """Base exception for classroom operations."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ClassroomError):
    """Malformed or missing input."""
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class NotFoundError(ClassroomError):
    """Referenced entity does not exist."""
    status_code = 404

    def __init__(self, resource: str, id: Optional[object] = None):
        message = f"{resource} not found"
        if id is not None:
            message += f" with id: {id}"
        self.resource = resource
        super().__init__(message)


class ForbiddenError(ClassroomError):
    """Principal lacks the role or membership the operation requires."""
    status_code = 403

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


class ConflictError(ClassroomError):
    """Request clashes with the current state of the resource."""
    status_code = 409


class SelfJoinError(ConflictError):
    def __init__(self):
        super().__init__("Teacher cannot join their own classroom")


class AlreadyMemberError(ConflictError):
    def __init__(self):
        super().__init__("Already joined this classroom")


class DueDatePassedError(ConflictError):
    def __init__(self):
        super().__init__("Assignment submission period has ended")


class CodeGenerationExhausted(ClassroomError):
    """No free join code found within the attempt budget. Safe to retry the call."""
    status_code = 500

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not allocate a unique classroom code after {attempts} attempts")
