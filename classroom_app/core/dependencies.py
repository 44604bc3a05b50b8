# classroom_app/core/dependencies.py
"""Request-scoped dependencies shared by the routers."""
from typing import Optional
from uuid import UUID
from fastapi import Header, HTTPException, status
from pydantic import BaseModel

from .config import settings
from ..services.file_storage import FileStorage, LocalFileStorage


class Principal(BaseModel):
    """Authenticated caller as asserted by the upstream identity provider."""
    user_id: UUID
    role: Optional[str] = None


async def get_current_principal(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Principal:
    # Credentials are verified upstream; this layer only reads the asserted identity
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user identity")
    return Principal(user_id=user_id, role=x_user_role)


def get_file_storage() -> FileStorage:
    return LocalFileStorage(settings.upload_dir)
