# classroom_app/services/announcement_service.py
import logging
from typing import List, Optional, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from .base_service import BaseService
from .classroom_service import ClassroomService
from .authorization import require_member, require_teacher
from ..core.exceptions import ForbiddenError, ValidationError
from ..models.announcement import Announcement
from ..models.comment import Comment, CommentSubject

logger = logging.getLogger(__name__)


class AnnouncementService(BaseService[Announcement]):
    resource_name = "Announcement"

    def __init__(self, db: AsyncSession):
        super().__init__(Announcement, db)
        self.classrooms = ClassroomService(db)

    async def ensure_can_post(self, classroom_id: UUID, teacher_id: UUID, title: str, content: str):
        """Checks for a new announcement, run before any attachment is stored"""
        classroom = await self.classrooms.get_classroom(classroom_id)
        require_teacher(classroom, teacher_id, "post announcements")

        title = (title or "").strip()
        content = (content or "").strip()
        if not title or not content:
            raise ValidationError("Title and content are required")
        return classroom, title, content

    async def create_announcement(
        self,
        classroom_id: UUID,
        teacher_id: UUID,
        title: str,
        content: str,
        files: Optional[Sequence[str]] = None,
    ) -> Announcement:
        classroom, title, content = await self.ensure_can_post(classroom_id, teacher_id, title, content)

        announcement = Announcement(
            classroom_id=classroom.id,
            created_by=teacher_id,
            title=title,
            content=content,
            file_refs=list(files or []),
        )
        self.db.add(announcement)
        await self.db.commit()
        logger.info(f"Announcement {announcement.id} posted in classroom {classroom.id}")
        return announcement

    async def list_for_classroom(self, classroom_id: UUID, caller_id: UUID) -> List[Announcement]:
        classroom = await self.classrooms.get_classroom(classroom_id)
        require_member(classroom, caller_id, "view announcements in this classroom")

        stmt = select(Announcement).where(
            Announcement.classroom_id == classroom.id,
            Announcement.is_deleted == False
        ).order_by(Announcement.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def update_announcement(
        self,
        announcement_id: UUID,
        caller_id: UUID,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Announcement:
        announcement = await self.get_or_404(announcement_id)
        if announcement.created_by != caller_id:
            raise ForbiddenError("Not authorized to update this announcement")

        if title is not None:
            if not title.strip():
                raise ValidationError("Title cannot be empty", field="title")
            announcement.title = title.strip()
        if content is not None:
            if not content.strip():
                raise ValidationError("Content cannot be empty", field="content")
            announcement.content = content.strip()

        await self.db.commit()
        return announcement

    async def delete_announcement(self, announcement_id: UUID, caller_id: UUID) -> None:
        """Delete an announcement together with its discussion"""
        announcement = await self.get_or_404(announcement_id)
        if announcement.created_by != caller_id:
            raise ForbiddenError("Not authorized to delete this announcement")

        # Replies first so no row is left pointing at a deleted parent
        subject_filter = (
            Comment.subject_type == CommentSubject.ANNOUNCEMENT.value,
            Comment.subject_id == announcement.id,
        )
        await self.db.execute(delete(Comment).where(*subject_filter, Comment.parent_id.is_not(None)))
        await self.db.execute(delete(Comment).where(*subject_filter))
        await self.db.delete(announcement)
        await self.db.commit()
        logger.info(f"Announcement {announcement_id} deleted by {caller_id}")
