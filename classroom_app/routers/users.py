# classroom_app/routers/users.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import Principal, get_current_principal
from ..schemas.user_schemas import User, UserBatchRequest
from ..services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["Users"])

@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = UserService(db)
    return await service.get_user(user_id)

@router.post("/batch", response_model=List[User])
async def get_users_batch(
    payload: UserBatchRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Resolve a roster of ids (e.g. a classroom's ``student_ids``) to names and emails"""
    service = UserService(db)
    return await service.find_by_ids(payload.ids)
