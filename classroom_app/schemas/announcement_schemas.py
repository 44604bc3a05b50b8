from typing import List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None)

class Announcement(BaseModel):
    id: UUID
    classroom_id: UUID
    created_by: UUID
    title: str
    content: str
    file_refs: List[str] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
