# classroom_app/services/user_service.py
from typing import Dict, Iterable, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from .base_service import BaseService
from ..core.exceptions import ValidationError
from ..models.user import User

ACCOUNT_ROLES = ("teacher", "student")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserService(BaseService[User]):
    """Read access to accounts owned by the external identity system."""
    resource_name = "User"

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, full_name: str, email: str, role: str = "student") -> User:
        """Register an account (seeding and tests; real accounts come from the identity provider)"""
        full_name = (full_name or "").strip()
        email = normalize_email(email)
        if not full_name:
            raise ValidationError("Full name is required", field="full_name")
        if not email:
            raise ValidationError("Email is required", field="email")
        if role not in ACCOUNT_ROLES:
            raise ValidationError(f"Role must be one of {', '.join(ACCOUNT_ROLES)}", field="role")

        existing = await self.db.execute(select(User).where(User.email == email))
        if existing.scalar_one_or_none():
            raise ValidationError("An account with this email already exists", field="email")

        user = User(full_name=full_name, email=email, role=role)
        self.db.add(user)
        await self.db.commit()
        return user

    async def get_user(self, user_id: UUID) -> User:
        return await self.get_or_404(user_id)

    async def find_by_emails(self, emails: Iterable[str]) -> Dict[str, User]:
        """Map normalized email -> User for every address that has an account"""
        normalized = {normalize_email(email) for email in emails if normalize_email(email)}
        if not normalized:
            return {}
        stmt = select(User).where(
            User.email.in_(normalized),
            User.is_deleted == False
        )
        result = await self.db.execute(stmt)
        return {user.email: user for user in result.scalars().all()}

    async def find_by_ids(self, user_ids: Iterable[UUID]) -> List[User]:
        """Accounts for the given ids in request order; unknown ids are skipped"""
        ordered = list(dict.fromkeys(user_ids))
        if not ordered:
            return []
        stmt = select(User).where(
            User.id.in_(ordered),
            User.is_deleted == False
        )
        result = await self.db.execute(stmt)
        by_id = {user.id: user for user in result.scalars().all()}
        return [by_id[user_id] for user_id in ordered if user_id in by_id]
