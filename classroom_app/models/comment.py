# classroom_app/models/comment.py
import enum
from sqlalchemy import Column, String, Text, ForeignKey, Uuid, Index
from .base import Base


class CommentSubject(str, enum.Enum):
    """Kind of item a comment is attached to."""
    ANNOUNCEMENT = "announcement"
    ASSIGNMENT = "assignment"


class Comment(Base):
    __tablename__ = "comments"

    classroom_id = Column(Uuid, ForeignKey("classrooms.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)

    # Tagged subject: exactly one (kind, id) pair per comment
    subject_type = Column(String(20), nullable=False)
    subject_id = Column(Uuid, nullable=False)

    # Replies are the rows pointing at their parent; the thread is read back by parent_id
    parent_id = Column(Uuid, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)

    __table_args__ = (
        Index("idx_comment_subject_time", "classroom_id", "subject_type", "subject_id", "created_at"),
    )

    @property
    def subject(self) -> CommentSubject:
        return CommentSubject(self.subject_type)
