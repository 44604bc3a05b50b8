# classroom_app/schemas/assignment_schemas.py
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

class AssignmentCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default="")
    due_date: Optional[datetime] = Field(default=None, description="Submission deadline (exclusive)")
    points: Optional[float] = Field(default=None, description="Maximum points, non-negative")

class GradeSubmission(BaseModel):
    grade: Optional[float] = Field(default=None, description="Grade on the configured scale")
    feedback: Optional[str] = Field(default=None)

class Submission(BaseModel):
    id: UUID
    assignment_id: UUID
    student_id: UUID
    file_refs: List[str]
    submitted_at: datetime
    grade: Optional[float] = None
    feedback: Optional[str] = None

    class Config:
        from_attributes = True

class Assignment(BaseModel):
    id: UUID
    classroom_id: UUID
    created_by: UUID
    title: str
    description: str
    due_date: datetime
    points: float
    created_at: datetime
    updated_at: datetime
    submissions: List[Submission] = []

    class Config:
        from_attributes = True
