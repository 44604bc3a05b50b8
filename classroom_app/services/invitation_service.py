# classroom_app/services/invitation_service.py
import logging
from typing import List, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from .classroom_service import ClassroomService
from .user_service import UserService, normalize_email
from .authorization import require_teacher
from ..core.exceptions import AlreadyMemberError, ValidationError
from ..schemas.invitation_schemas import InvitationResult

logger = logging.getLogger(__name__)

INVITE_ROLES = ("teacher", "student")


class InvitationService:
    """Adds existing accounts to a classroom roster by email.

    Every address is classified on its own and each enrollment commits on
    its own, so a bad address never fails the batch. Classrooms have exactly
    one teacher, so teacher invitations are always reported as role
    conflicts.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.classrooms = ClassroomService(db)
        self.users = UserService(db)

    async def invite(
        self,
        classroom_id: UUID,
        inviter_id: UUID,
        emails: Sequence[str],
        role: str,
    ) -> InvitationResult:
        classroom = await self.classrooms.get_classroom(classroom_id, for_update=True)
        require_teacher(classroom, inviter_id, "invite members")

        if not emails:
            raise ValidationError("Please provide at least one email address", field="emails")
        role = (role or "").strip().lower()
        if role not in INVITE_ROLES:
            raise ValidationError("Role must be 'teacher' or 'student'", field="role")

        # One outcome per distinct address, in request order
        addresses: List[str] = []
        for email in emails:
            address = normalize_email(email)
            if address and address not in addresses:
                addresses.append(address)

        result = InvitationResult()
        if role == "teacher":
            result.conflict_role.extend(addresses)
            logger.info(f"Teacher invitations to classroom {classroom.id} rejected: single-teacher classroom")
            return result

        accounts = await self.users.find_by_emails(addresses)
        account_ids = {address: user.id for address, user in accounts.items()}
        for address in addresses:
            user_id = account_ids.get(address)
            if user_id is None:
                result.not_found.append(address)
            elif user_id == classroom.teacher_id:
                result.conflict_role.append(address)
            elif classroom.has_student(user_id):
                result.already_member.append(address)
            else:
                try:
                    await self.classrooms.add_student(classroom, user_id)
                    await self.db.commit()
                    result.success.append(address)
                except AlreadyMemberError:
                    # Joined concurrently; the session was rolled back
                    result.already_member.append(address)
                classroom = await self.classrooms.get_classroom(classroom_id, for_update=True)

        logger.info(
            f"Invitations to classroom {classroom_id}: {len(result.success)} added, "
            f"{len(result.not_found)} not found, {len(result.already_member)} already members, "
            f"{len(result.conflict_role)} role conflicts"
        )
        return result
