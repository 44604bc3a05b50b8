# classroom_app/models/classroom.py
from typing import List
from uuid import UUID as PyUUID
from sqlalchemy import Column, String, Text, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base


class Classroom(Base):
    __tablename__ = "classrooms"

    name = Column(String(200), nullable=False)
    subject = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    code = Column(String(16), nullable=False, unique=True, index=True)

    teacher_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    memberships = relationship(
        "ClassroomMembership",
        back_populates="classroom",
        order_by="ClassroomMembership.created_at",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def student_ids(self) -> List[PyUUID]:
        """Student ids in join order."""
        return [membership.student_id for membership in self.memberships]

    def has_student(self, user_id: PyUUID) -> bool:
        return any(membership.student_id == user_id for membership in self.memberships)


class ClassroomMembership(Base):
    __tablename__ = "classroom_students"

    classroom_id = Column(Uuid, ForeignKey("classrooms.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # A student appears at most once per classroom, even under racing joins
    __table_args__ = (
        UniqueConstraint("classroom_id", "student_id", name="uq_classroom_student"),
    )

    classroom = relationship("Classroom", back_populates="memberships")
