# classroom_app/services/assignment_service.py
import logging
import math
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from .base_service import BaseService
from .classroom_service import ClassroomService
from .authorization import require_member, require_student, require_teacher
from ..core.config import settings
from ..core.exceptions import ConflictError, DueDatePassedError, NotFoundError, ValidationError
from ..models.assignment import Assignment, Submission
from ..models.base import utc_now

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AssignmentService(BaseService[Assignment]):
    resource_name = "Assignment"

    def __init__(
        self,
        db: AsyncSession,
        now: Callable[[], datetime] = utc_now,
        grade_min: Optional[float] = None,
        grade_max: Optional[float] = None,
    ):
        super().__init__(Assignment, db)
        self.now = now
        self.classrooms = ClassroomService(db)
        self.grade_min = settings.grade_min if grade_min is None else grade_min
        self.grade_max = settings.grade_max if grade_max is None else grade_max

    async def create_assignment(
        self,
        classroom_id: UUID,
        teacher_id: UUID,
        title: Optional[str],
        description: Optional[str],
        due_date: Optional[datetime],
        points: Optional[float],
    ) -> Assignment:
        classroom = await self.classrooms.get_classroom(classroom_id)
        require_teacher(classroom, teacher_id, "create assignments")

        title = (title or "").strip()
        if not title or due_date is None or points is None:
            raise ValidationError("Please provide title, due date, and points for the assignment")
        if math.isnan(points) or points < 0:
            raise ValidationError("Points must be a non-negative number", field="points")
        due_date = as_utc(due_date)
        if due_date <= self.now():
            raise ValidationError("Due date must be in the future", field="due_date")

        assignment = Assignment(
            classroom_id=classroom.id,
            created_by=teacher_id,
            title=title,
            description=description or "",
            due_date=due_date,
            points=points,
            submissions=[],
        )
        self.db.add(assignment)
        await self.db.commit()
        logger.info(f"Assignment {assignment.id} created in classroom {classroom.id}")
        return assignment

    async def get_assignment(self, assignment_id: UUID, caller_id: UUID) -> Assignment:
        assignment = await self.get_or_404(assignment_id)
        classroom = await self.classrooms.get_classroom(assignment.classroom_id)
        require_member(classroom, caller_id, "view this assignment")
        return assignment

    async def list_for_classroom(self, classroom_id: UUID, caller_id: UUID) -> List[Assignment]:
        """Assignments of a classroom, newest first"""
        classroom = await self.classrooms.get_classroom(classroom_id)
        require_member(classroom, caller_id, "view assignments in this classroom")

        stmt = select(Assignment).where(
            Assignment.classroom_id == classroom.id,
            Assignment.is_deleted == False
        ).order_by(Assignment.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _open_for(self, assignment: Assignment, student_id: UUID) -> datetime:
        classroom = await self.classrooms.get_classroom(assignment.classroom_id)
        require_student(classroom, student_id, "submit to this assignment")

        now = self.now()
        if now >= assignment.due_date:
            raise DueDatePassedError()
        return now

    async def ensure_can_submit(self, assignment_id: UUID, student_id: UUID) -> Assignment:
        """Run the submission checks that do not depend on the files.

        The upload route calls this before it writes anything to storage.
        """
        assignment = await self.get_or_404(assignment_id)
        await self._open_for(assignment, student_id)
        return assignment

    async def submit(self, assignment_id: UUID, student_id: UUID, files: Sequence[str]) -> Submission:
        """Create or replace the student's submission.

        A student owns at most one submission per assignment; resubmitting
        overwrites its files and timestamp. The assignment row stays locked
        until commit so concurrent submits by the same student serialize.
        """
        assignment = await self.get_or_404(assignment_id, for_update=True)
        now = await self._open_for(assignment, student_id)

        file_refs = [ref for ref in (files or []) if ref]
        if not file_refs:
            raise ValidationError("Please upload at least one file", field="files")

        submission = assignment.submission_for(student_id)
        if submission is not None:
            submission.file_refs = file_refs
            submission.submitted_at = now
        else:
            submission = Submission(
                student_id=student_id,
                file_refs=file_refs,
                submitted_at=now,
                grade=None,
                feedback=None,
            )
            assignment.submissions.append(submission)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self._submission_id(assignment_id, student_id) is None:
                raise
            logger.warning(f"Concurrent submission for assignment {assignment_id} by {student_id}")
            raise ConflictError("Submission was modified concurrently, please retry")

        logger.info(f"Submission {submission.id} stored for assignment {assignment_id} by {student_id}")
        return submission

    async def _submission_id(self, assignment_id: UUID, student_id: UUID) -> Optional[UUID]:
        stmt = select(Submission.id).where(
            Submission.assignment_id == assignment_id,
            Submission.student_id == student_id
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def grade(
        self,
        assignment_id: UUID,
        submission_id: UUID,
        teacher_id: UUID,
        grade: Optional[float],
        feedback: Optional[str] = None,
    ) -> Submission:
        """Set grade and feedback on a submission; allowed after the due date and repeatable"""
        assignment = await self.get_or_404(assignment_id, for_update=True)
        classroom = await self.classrooms.get_classroom(assignment.classroom_id)
        require_teacher(classroom, teacher_id, "grade submissions")

        if grade is None or math.isnan(grade) or not (self.grade_min <= grade <= self.grade_max):
            raise ValidationError(
                f"Please provide a valid grade between {self.grade_min:g} and {self.grade_max:g}",
                field="grade",
            )

        submission = next((s for s in assignment.submissions if s.id == submission_id), None)
        if submission is None:
            raise NotFoundError("Submission", submission_id)

        submission.grade = grade
        submission.feedback = feedback
        await self.db.commit()
        logger.info(f"Submission {submission_id} graded {grade:g} by {teacher_id}")
        return submission
