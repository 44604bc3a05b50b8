# classroom_app/models/__init__.py
"""Import all models here, if needed for Alembic migration."""
from .base import Base
from .user import User
from .classroom import Classroom, ClassroomMembership
from .assignment import Assignment, Submission
from .announcement import Announcement
from .comment import Comment, CommentSubject

__all__ = [
    "Base",
    "User",
    "Classroom",
    "ClassroomMembership",
    "Assignment",
    "Submission",
    "Announcement",
    "Comment",
    "CommentSubject",
]
