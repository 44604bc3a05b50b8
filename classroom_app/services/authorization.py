# classroom_app/services/authorization.py
"""Classroom-scoped role checks.

Authority inside a classroom comes only from the classroom itself: its
``teacher_id`` and its student memberships. The account-level ``User.role``
is never consulted here.
"""
import enum
import logging
from uuid import UUID

from ..core.exceptions import ForbiddenError
from ..models.classroom import Classroom

logger = logging.getLogger(__name__)


class ClassroomRole(str, enum.Enum):
    TEACHER = "teacher"
    STUDENT = "student"
    NONE = "none"


def role_of(classroom: Classroom, user_id: UUID) -> ClassroomRole:
    """Role of ``user_id`` in ``classroom``. Teacher wins if both somehow apply."""
    if classroom.teacher_id == user_id:
        return ClassroomRole.TEACHER
    if classroom.has_student(user_id):
        return ClassroomRole.STUDENT
    return ClassroomRole.NONE


def _deny(classroom: Classroom, user_id: UUID, message: str):
    logger.warning(f"Denied user {user_id} on classroom {classroom.id}: {message}")
    raise ForbiddenError(message)


def require_member(classroom: Classroom, user_id: UUID, action: str = "access this classroom") -> ClassroomRole:
    role = role_of(classroom, user_id)
    if role is ClassroomRole.NONE:
        _deny(classroom, user_id, f"Not authorized to {action}")
    return role


def require_teacher(classroom: Classroom, user_id: UUID, action: str = "manage this classroom") -> ClassroomRole:
    role = role_of(classroom, user_id)
    if role is not ClassroomRole.TEACHER:
        _deny(classroom, user_id, f"Must be the teacher of this classroom to {action}")
    return role


def require_student(classroom: Classroom, user_id: UUID, action: str = "do this") -> ClassroomRole:
    role = role_of(classroom, user_id)
    if role is not ClassroomRole.STUDENT:
        _deny(classroom, user_id, f"Must be a student in this classroom to {action}")
    return role
