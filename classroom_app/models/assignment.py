# classroom_app/models/assignment.py
from sqlalchemy import Column, String, Text, Float, ForeignKey, Uuid, JSON, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from .base import Base, UTCDateTime


class Assignment(Base):
    __tablename__ = "assignments"

    classroom_id = Column(Uuid, ForeignKey("classrooms.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    due_date = Column(UTCDateTime, nullable=False)
    points = Column(Float, nullable=False, default=100)

    submissions = relationship(
        "Submission",
        back_populates="assignment",
        order_by="Submission.created_at",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_assignment_classroom_due", "classroom_id", "due_date"),
    )

    def submission_for(self, student_id):
        for submission in self.submissions:
            if submission.student_id == student_id:
                return submission
        return None


class Submission(Base):
    __tablename__ = "submissions"

    assignment_id = Column(Uuid, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    file_refs = Column(JSON, nullable=False, default=list)
    submitted_at = Column(UTCDateTime, nullable=False)
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )

    assignment = relationship("Assignment", back_populates="submissions")
