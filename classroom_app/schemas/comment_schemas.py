# classroom_app/schemas/comment_schemas.py
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

class CommentCreate(BaseModel):
    item_type: str = Field(..., description="'announcement' or 'assignment'")
    item_id: UUID
    content: str
    parent_comment_id: Optional[UUID] = Field(default=None, description="Set when replying")

class CommentUpdate(BaseModel):
    content: str

class Comment(BaseModel):
    id: UUID
    classroom_id: UUID
    author_id: UUID
    content: str
    subject_type: str
    subject_id: UUID
    parent_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class CommentThread(Comment):
    """Top-level comment with its direct replies (oldest first)."""
    reply_ids: List[UUID] = []
    replies: List[Comment] = []
