# classroom_app/services/classroom_service.py
import logging
import secrets
import string
from typing import Callable, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError

from .base_service import BaseService
from .authorization import require_member
from .user_service import UserService
from ..core.config import settings
from ..core.exceptions import (
    AlreadyMemberError,
    CodeGenerationExhausted,
    NotFoundError,
    SelfJoinError,
    ValidationError,
)
from ..models.classroom import Classroom, ClassroomMembership

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_join_code(length: int) -> str:
    """Random uppercase alphanumeric join code."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class ClassroomService(BaseService[Classroom]):
    resource_name = "Classroom"

    def __init__(
        self,
        db: AsyncSession,
        code_length: Optional[int] = None,
        max_code_attempts: Optional[int] = None,
        code_generator: Optional[Callable[[int], str]] = None,
    ):
        super().__init__(Classroom, db)
        self.users = UserService(db)
        self.code_length = code_length or settings.join_code_length
        self.max_code_attempts = max_code_attempts or settings.join_code_max_attempts
        self.code_generator = code_generator or generate_join_code

    async def get_by_code(self, code: str, for_update: bool = False) -> Optional[Classroom]:
        stmt = select(Classroom).where(
            Classroom.code == normalize_code(code),
            Classroom.is_deleted == False
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def allocate_code(self) -> str:
        """Draw join codes until one is unused; give up after ``max_code_attempts``"""
        for attempt in range(1, self.max_code_attempts + 1):
            candidate = normalize_code(self.code_generator(self.code_length))
            if await self.get_by_code(candidate) is None:
                return candidate
            logger.info(f"Join code collision on attempt {attempt}")
        logger.error(f"Join code allocation exhausted after {self.max_code_attempts} attempts")
        raise CodeGenerationExhausted(self.max_code_attempts)

    async def create_classroom(
        self,
        name: str,
        subject: str,
        teacher_id: UUID,
        description: Optional[str] = None,
    ) -> Classroom:
        """Create a classroom owned by ``teacher_id`` with a fresh join code"""
        await self.users.get_user(teacher_id)

        name = (name or "").strip()
        subject = (subject or "").strip()
        if not name or not subject:
            raise ValidationError("Please provide both name and subject for the classroom")

        code = await self.allocate_code()
        classroom = Classroom(
            name=name,
            subject=subject,
            description=(description or "").strip() or None,
            code=code,
            teacher_id=teacher_id,
            memberships=[],
        )
        self.db.add(classroom)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self.get_by_code(code) is None:
                raise
            # Another request took the same code between probe and insert
            logger.error(f"Join code {code} was claimed concurrently")
            raise CodeGenerationExhausted(self.max_code_attempts)

        logger.info(f"Classroom {classroom.id} created by {teacher_id} with code {code}")
        return classroom

    async def add_student(self, classroom: Classroom, user_id: UUID) -> ClassroomMembership:
        """Append ``user_id`` to the roster. Caller commits.

        ``classroom`` must have been loaded with ``for_update=True`` so the
        membership checks run against the freshest roster.
        """
        classroom_id = classroom.id
        if classroom.teacher_id == user_id:
            raise SelfJoinError()
        if classroom.has_student(user_id):
            raise AlreadyMemberError()

        membership = ClassroomMembership(student_id=user_id)
        classroom.memberships.append(membership)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            if not await self.is_enrolled(classroom_id, user_id):
                raise
            # Lost a race with a concurrent join; the unique constraint kept the roster clean
            raise AlreadyMemberError()
        return membership

    async def join_classroom(self, code: str, user_id: UUID) -> Classroom:
        """Enroll ``user_id`` as a student using the classroom's join code"""
        if not normalize_code(code):
            raise ValidationError("Join code is required", field="code")
        await self.users.get_user(user_id)

        classroom = await self.get_by_code(code, for_update=True)
        if classroom is None:
            raise NotFoundError("Classroom")

        await self.add_student(classroom, user_id)
        await self.db.commit()
        logger.info(f"User {user_id} joined classroom {classroom.id}")
        return classroom

    async def is_enrolled(self, classroom_id: UUID, user_id: UUID) -> bool:
        stmt = select(ClassroomMembership.id).where(
            ClassroomMembership.classroom_id == classroom_id,
            ClassroomMembership.student_id == user_id
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_classroom(self, classroom_id: UUID, for_update: bool = False) -> Classroom:
        return await self.get_or_404(classroom_id, for_update=for_update)

    async def get_accessible_classroom(self, classroom_id: UUID, user_id: UUID) -> Classroom:
        """The classroom, if ``user_id`` is its teacher or one of its students"""
        classroom = await self.get_classroom(classroom_id)
        require_member(classroom, user_id)
        return classroom

    async def list_for_user(self, user_id: UUID) -> List[Classroom]:
        """Classrooms the user teaches or attends, newest first"""
        enrolled = select(ClassroomMembership.classroom_id).where(
            ClassroomMembership.student_id == user_id
        )
        stmt = select(Classroom).where(
            or_(Classroom.teacher_id == user_id, Classroom.id.in_(enrolled)),
            Classroom.is_deleted == False
        ).order_by(Classroom.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
