# classroom_app/routers/classrooms.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import Principal, get_current_principal
from ..schemas.classroom_schemas import Classroom, ClassroomCreate, ClassroomJoin
from ..schemas.invitation_schemas import InvitationRequest, InvitationResult
from ..services.classroom_service import ClassroomService
from ..services.invitation_service import InvitationService

router = APIRouter(prefix="/api/v1/classrooms", tags=["Classrooms"])

@router.post("/", response_model=Classroom, status_code=status.HTTP_201_CREATED)
async def create_classroom(
    payload: ClassroomCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Create a classroom; the caller becomes its teacher"""
    service = ClassroomService(db)
    return await service.create_classroom(
        name=payload.name,
        subject=payload.subject,
        description=payload.description,
        teacher_id=principal.user_id,
    )

@router.get("/my", response_model=List[Classroom])
async def get_my_classrooms(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = ClassroomService(db)
    return await service.list_for_user(principal.user_id)

@router.post("/join", response_model=Classroom)
async def join_classroom(
    payload: ClassroomJoin,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = ClassroomService(db)
    return await service.join_classroom(payload.code, principal.user_id)

@router.get("/{classroom_id}", response_model=Classroom)
async def get_classroom(
    classroom_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = ClassroomService(db)
    return await service.get_accessible_classroom(classroom_id, principal.user_id)

@router.post("/{classroom_id}/invitations", response_model=InvitationResult)
async def invite_members(
    classroom_id: UUID,
    payload: InvitationRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Invite existing accounts by email; each address is reported in exactly one bucket"""
    service = InvitationService(db)
    return await service.invite(classroom_id, principal.user_id, payload.emails, payload.role)
