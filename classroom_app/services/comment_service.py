# classroom_app/services/comment_service.py
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from .base_service import BaseService
from .classroom_service import ClassroomService
from .authorization import ClassroomRole, require_member, role_of
from ..core.exceptions import ForbiddenError, NotFoundError, ValidationError
from ..models.announcement import Announcement
from ..models.assignment import Assignment
from ..models.comment import Comment, CommentSubject

logger = logging.getLogger(__name__)

SUBJECT_MODELS = {
    CommentSubject.ANNOUNCEMENT: Announcement,
    CommentSubject.ASSIGNMENT: Assignment,
}


def parse_subject(item_type: str) -> CommentSubject:
    try:
        return CommentSubject((item_type or "").strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown item type '{item_type}', expected 'announcement' or 'assignment'",
            field="item_type",
        )


@dataclass
class CommentThread:
    comment: Comment
    replies: List[Comment] = field(default_factory=list)


class CommentService(BaseService[Comment]):
    resource_name = "Comment"

    def __init__(self, db: AsyncSession):
        super().__init__(Comment, db)
        self.classrooms = ClassroomService(db)

    async def _ensure_subject_exists(self, classroom_id: UUID, subject: CommentSubject, item_id: UUID):
        model = SUBJECT_MODELS[subject]
        stmt = select(model.id).where(
            model.id == item_id,
            model.classroom_id == classroom_id,
            model.is_deleted == False
        )
        result = await self.db.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise NotFoundError(subject.value.capitalize(), item_id)

    async def create_comment(
        self,
        classroom_id: UUID,
        author_id: UUID,
        item_type: str,
        item_id: UUID,
        content: str,
        parent_comment_id: Optional[UUID] = None,
    ) -> Comment:
        classroom = await self.classrooms.get_classroom(classroom_id)
        require_member(classroom, author_id, "comment in this classroom")

        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment content is required", field="content")
        subject = parse_subject(item_type)

        await self._ensure_subject_exists(classroom.id, subject, item_id)

        if parent_comment_id is not None:
            parent = await self.get(parent_comment_id)
            if parent is None or parent.classroom_id != classroom.id:
                raise NotFoundError("Parent comment", parent_comment_id)
            if parent.subject_type != subject.value or parent.subject_id != item_id:
                raise ValidationError("Reply must be attached to the same item as its parent")

        comment = Comment(
            classroom_id=classroom.id,
            author_id=author_id,
            content=content,
            subject_type=subject.value,
            subject_id=item_id,
            parent_id=parent_comment_id,
        )
        self.db.add(comment)
        await self.db.commit()
        logger.info(f"Comment {comment.id} created on {subject.value} {item_id}")
        return comment

    async def reply_ids(self, comment_id: UUID) -> List[UUID]:
        """Ids of the direct replies of a comment, oldest first"""
        stmt = select(Comment.id).where(
            Comment.parent_id == comment_id,
            Comment.is_deleted == False
        ).order_by(Comment.created_at.asc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_top_level_for_item(
        self,
        classroom_id: UUID,
        item_type: str,
        item_id: UUID,
        caller_id: UUID,
    ) -> List[CommentThread]:
        """Top-level comments newest first, each with its direct replies oldest first"""
        classroom = await self.classrooms.get_classroom(classroom_id)
        require_member(classroom, caller_id, "view comments in this classroom")
        subject = parse_subject(item_type)

        stmt = select(Comment).where(
            Comment.classroom_id == classroom.id,
            Comment.subject_type == subject.value,
            Comment.subject_id == item_id,
            Comment.parent_id.is_(None),
            Comment.is_deleted == False
        ).order_by(Comment.created_at.desc())
        result = await self.db.execute(stmt)
        threads = [CommentThread(comment=comment) for comment in result.scalars().all()]
        if not threads:
            return threads

        by_id: Dict[UUID, CommentThread] = {thread.comment.id: thread for thread in threads}
        replies_stmt = select(Comment).where(
            Comment.parent_id.in_(list(by_id)),
            Comment.is_deleted == False
        ).order_by(Comment.created_at.asc())
        replies = await self.db.execute(replies_stmt)
        for reply in replies.scalars().all():
            by_id[reply.parent_id].replies.append(reply)
        return threads

    async def update_comment(self, comment_id: UUID, caller_id: UUID, content: str) -> Comment:
        comment = await self.get_or_404(comment_id)
        if comment.author_id != caller_id:
            raise ForbiddenError("Not authorized to update this comment")

        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment content is required", field="content")

        comment.content = content
        await self.db.commit()
        return comment

    async def _descendant_ids(self, comment_id: UUID) -> List[UUID]:
        """Every reply below ``comment_id``, deepest level first"""
        levels: List[List[UUID]] = []
        frontier = [comment_id]
        while frontier:
            result = await self.db.execute(select(Comment.id).where(Comment.parent_id.in_(frontier)))
            frontier = list(result.scalars().all())
            if frontier:
                levels.append(frontier)
        return [cid for level in reversed(levels) for cid in level]

    async def delete_comment(self, comment_id: UUID, caller_id: UUID) -> List[UUID]:
        """Delete a comment and all of its replies.

        Only the author or the classroom teacher may delete. Returns the ids
        of every removed comment.
        """
        comment = await self.get_or_404(comment_id)
        if comment.author_id != caller_id:
            classroom = await self.classrooms.get_classroom(comment.classroom_id)
            if role_of(classroom, caller_id) is not ClassroomRole.TEACHER:
                raise ForbiddenError("Not authorized to delete this comment")

        descendants = await self._descendant_ids(comment.id)
        if descendants:
            await self.db.execute(delete(Comment).where(Comment.id.in_(descendants)))
        await self.db.delete(comment)
        await self.db.commit()

        logger.info(f"Comment {comment_id} deleted by {caller_id} with {len(descendants)} replies")
        return descendants + [comment_id]
