# classroom_app/routers/announcements.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.database import get_db
from ..core.dependencies import Principal, get_current_principal, get_file_storage
from ..schemas.announcement_schemas import Announcement, AnnouncementUpdate
from ..services.announcement_service import AnnouncementService
from ..services.file_storage import FileStorage, store_uploads

router = APIRouter(prefix="/api/v1", tags=["Announcements"])

@router.post("/classrooms/{classroom_id}/announcements", response_model=Announcement, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    classroom_id: UUID,
    title: str = Form(..., max_length=255),
    content: str = Form(...),
    files: List[UploadFile] = File(default=[]),
    principal: Principal = Depends(get_current_principal),
    storage: FileStorage = Depends(get_file_storage),
    db: AsyncSession = Depends(get_db)
):
    """Post an announcement (multipart form) with optional attachments"""
    service = AnnouncementService(db)
    await service.ensure_can_post(classroom_id, principal.user_id, title, content)
    references = await store_uploads(storage, files, settings.max_upload_size)
    return await service.create_announcement(classroom_id, principal.user_id, title, content, references)

@router.get("/classrooms/{classroom_id}/announcements", response_model=List[Announcement])
async def list_announcements(
    classroom_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = AnnouncementService(db)
    return await service.list_for_classroom(classroom_id, principal.user_id)

@router.put("/announcements/{announcement_id}", response_model=Announcement)
async def update_announcement(
    announcement_id: UUID,
    payload: AnnouncementUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = AnnouncementService(db)
    return await service.update_announcement(
        announcement_id, principal.user_id, title=payload.title, content=payload.content
    )

@router.delete("/announcements/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(
    announcement_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = AnnouncementService(db)
    await service.delete_announcement(announcement_id, principal.user_id)
