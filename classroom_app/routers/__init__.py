from . import health, users, classrooms, assignments, announcements, comments

__all__ = [
    "health",
    "users",
    "classrooms",
    "assignments",
    "announcements",
    "comments",
]
