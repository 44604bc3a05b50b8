from typing import List
from pydantic import BaseModel, Field

class InvitationRequest(BaseModel):
    emails: List[str] = Field(default_factory=list)
    role: str = Field(default="student", description="'student' or 'teacher'")

class InvitationResult(BaseModel):
    """Per-email outcome of an invitation batch. Each email lands in exactly one list."""
    success: List[str] = []
    not_found: List[str] = []
    already_member: List[str] = []
    conflict_role: List[str] = []
