# classroom_app/routers/assignments.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.database import get_db
from ..core.dependencies import Principal, get_current_principal, get_file_storage
from ..models.assignment import Assignment as AssignmentModel
from ..schemas.assignment_schemas import Assignment, AssignmentCreate, GradeSubmission, Submission
from ..services.assignment_service import AssignmentService
from ..services.authorization import ClassroomRole, role_of
from ..services.classroom_service import ClassroomService
from ..services.file_storage import FileStorage, store_uploads

router = APIRouter(prefix="/api/v1", tags=["Assignments"])

async def _visible_to(db: AsyncSession, assignments: List[AssignmentModel], user_id: UUID) -> List[Assignment]:
    """Teachers see every submission, students only their own"""
    if not assignments:
        return []
    classroom = await ClassroomService(db).get_classroom(assignments[0].classroom_id)
    is_teacher = role_of(classroom, user_id) is ClassroomRole.TEACHER

    visible = []
    for assignment in assignments:
        data = Assignment.model_validate(assignment)
        if not is_teacher:
            data.submissions = [s for s in data.submissions if s.student_id == user_id]
        visible.append(data)
    return visible

@router.post("/classrooms/{classroom_id}/assignments", response_model=Assignment, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    classroom_id: UUID,
    payload: AssignmentCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = AssignmentService(db)
    return await service.create_assignment(
        classroom_id=classroom_id,
        teacher_id=principal.user_id,
        title=payload.title,
        description=payload.description,
        due_date=payload.due_date,
        points=payload.points,
    )

@router.get("/classrooms/{classroom_id}/assignments", response_model=List[Assignment])
async def list_classroom_assignments(
    classroom_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Assignments of a classroom, newest first"""
    service = AssignmentService(db)
    assignments = await service.list_for_classroom(classroom_id, principal.user_id)
    return await _visible_to(db, assignments, principal.user_id)

@router.get("/assignments/{assignment_id}", response_model=Assignment)
async def get_assignment(
    assignment_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = AssignmentService(db)
    assignment = await service.get_assignment(assignment_id, principal.user_id)
    visible = await _visible_to(db, [assignment], principal.user_id)
    return visible[0]

@router.post("/assignments/{assignment_id}/submissions", response_model=Submission)
async def submit_assignment(
    assignment_id: UUID,
    files: List[UploadFile] = File(...),
    principal: Principal = Depends(get_current_principal),
    storage: FileStorage = Depends(get_file_storage),
    db: AsyncSession = Depends(get_db)
):
    """Submit (or resubmit) work; a resubmission replaces the earlier files"""
    service = AssignmentService(db)
    # Nothing reaches storage unless the caller may submit right now
    await service.ensure_can_submit(assignment_id, principal.user_id)
    references = await store_uploads(storage, files, settings.max_upload_size)
    return await service.submit(assignment_id, principal.user_id, references)

@router.post("/assignments/{assignment_id}/submissions/{submission_id}/grade", response_model=Submission)
async def grade_submission(
    assignment_id: UUID,
    submission_id: UUID,
    payload: GradeSubmission,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    service = AssignmentService(db)
    return await service.grade(
        assignment_id=assignment_id,
        submission_id=submission_id,
        teacher_id=principal.user_id,
        grade=payload.grade,
        feedback=payload.feedback,
    )
