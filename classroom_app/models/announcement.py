from sqlalchemy import Column, String, Text, ForeignKey, Uuid, JSON
from .base import Base


class Announcement(Base):
    __tablename__ = "announcements"

    classroom_id = Column(Uuid, ForeignKey("classrooms.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False)

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    file_refs = Column(JSON, nullable=False, default=list)
