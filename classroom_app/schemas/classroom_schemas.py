# classroom_app/schemas/classroom_schemas.py
"""Pydantic schemas for Classroom entity."""
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

class ClassroomCreate(BaseModel):
    name: str = Field(..., max_length=200, description="Classroom name")
    subject: str = Field(..., max_length=200, description="Subject taught")
    description: Optional[str] = Field(default=None, description="Optional description")

class ClassroomJoin(BaseModel):
    code: str = Field(..., max_length=16, description="Join code shared by the teacher")

class Classroom(BaseModel):
    id: UUID
    name: str
    subject: str
    description: Optional[str] = None
    code: str
    teacher_id: UUID
    student_ids: List[UUID] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
