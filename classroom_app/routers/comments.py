# classroom_app/routers/comments.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import Principal, get_current_principal
from ..schemas.comment_schemas import Comment, CommentCreate, CommentThread, CommentUpdate
from ..services.comment_service import CommentService

router = APIRouter(prefix="/api/v1", tags=["Comments"])

@router.post("/classrooms/{classroom_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def create_comment(
    classroom_id: UUID,
    payload: CommentCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = CommentService(db)
    return await service.create_comment(
        classroom_id=classroom_id,
        author_id=principal.user_id,
        item_type=payload.item_type,
        item_id=payload.item_id,
        content=payload.content,
        parent_comment_id=payload.parent_comment_id,
    )

@router.get("/classrooms/{classroom_id}/comments", response_model=List[CommentThread])
async def list_comments(
    classroom_id: UUID,
    item_type: str = Query(...),
    item_id: UUID = Query(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Top-level comments on an item, newest first, with their replies"""
    service = CommentService(db)
    threads = await service.list_top_level_for_item(classroom_id, item_type, item_id, principal.user_id)
    return [
        CommentThread(
            **Comment.model_validate(thread.comment).model_dump(),
            reply_ids=[reply.id for reply in thread.replies],
            replies=[Comment.model_validate(reply) for reply in thread.replies],
        )
        for thread in threads
    ]

@router.put("/comments/{comment_id}", response_model=Comment)
async def update_comment(
    comment_id: UUID,
    payload: CommentUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = CommentService(db)
    return await service.update_comment(comment_id, principal.user_id, payload.content)

@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = CommentService(db)
    deleted = await service.delete_comment(comment_id, principal.user_id)
    return {
        "message": "Comment deleted successfully",
        "deleted_ids": [str(comment_id) for comment_id in deleted],
    }
