from typing import List
from uuid import UUID
from pydantic import BaseModel, Field

class UserBatchRequest(BaseModel):
    ids: List[UUID] = Field(default_factory=list, description="Account ids to resolve")

class User(BaseModel):
    id: UUID
    full_name: str
    email: str
    role: str

    class Config:
        from_attributes = True
