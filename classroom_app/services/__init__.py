from .base_service import BaseService
from .user_service import UserService
from .classroom_service import ClassroomService
from .assignment_service import AssignmentService
from .announcement_service import AnnouncementService
from .comment_service import CommentService
from .invitation_service import InvitationService
