from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy import select

from classroom_app.core.exceptions import (
    ConflictError,
    DueDatePassedError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from classroom_app.models import Submission
from classroom_app.services.assignment_service import AssignmentService
from classroom_app.services.classroom_service import ClassroomService


@pytest_asyncio.fixture
async def classroom(db, teacher, student):
    service = ClassroomService(db)
    classroom = await service.create_classroom("Algebra", "Math", teacher.id)
    await service.join_classroom(classroom.code, student.id)
    return classroom


@pytest.fixture
def ledger(db, clock):
    return AssignmentService(db, now=clock)


@pytest_asyncio.fixture
async def assignment(ledger, classroom, teacher, clock):
    return await ledger.create_assignment(
        classroom.id, teacher.id, "Homework 1", "Chapter 2", clock() + timedelta(hours=1), 50
    )


async def test_create_assignment(assignment, classroom, teacher):
    assert assignment.classroom_id == classroom.id
    assert assignment.created_by == teacher.id
    assert assignment.points == 50
    assert assignment.submissions == []


async def test_create_assignment_validation(ledger, classroom, teacher, clock):
    due = clock() + timedelta(days=1)
    with pytest.raises(ValidationError):
        await ledger.create_assignment(classroom.id, teacher.id, "", "", due, 10)
    with pytest.raises(ValidationError):
        await ledger.create_assignment(classroom.id, teacher.id, "HW", "", None, 10)
    with pytest.raises(ValidationError):
        await ledger.create_assignment(classroom.id, teacher.id, "HW", "", due, None)
    with pytest.raises(ValidationError):
        await ledger.create_assignment(classroom.id, teacher.id, "HW", "", due, -1)
    with pytest.raises(ValidationError):
        await ledger.create_assignment(classroom.id, teacher.id, "HW", "", clock(), 10)

    zero_points = await ledger.create_assignment(classroom.id, teacher.id, "Practice", "", due, 0)
    assert zero_points.points == 0


async def test_only_teacher_creates_assignments(ledger, classroom, student, outsider, clock):
    due = clock() + timedelta(days=1)
    with pytest.raises(ForbiddenError):
        await ledger.create_assignment(classroom.id, student.id, "HW", "", due, 10)
    with pytest.raises(ForbiddenError):
        await ledger.create_assignment(classroom.id, outsider.id, "HW", "", due, 10)


async def test_submission_scenario(ledger, assignment, student, clock):
    first = await ledger.submit(assignment.id, student.id, ["ref-1"])
    assert first.file_refs == ["ref-1"]
    assert first.submitted_at == clock()

    clock.advance(minutes=10)
    second = await ledger.submit(assignment.id, student.id, ["ref-2", "ref-3"])

    assert second.id == first.id
    assert second.file_refs == ["ref-2", "ref-3"]
    assert second.submitted_at == clock()
    assert len(assignment.submissions) == 1

    clock.advance(hours=1)
    with pytest.raises(DueDatePassedError):
        await ledger.submit(assignment.id, student.id, ["ref-4"])
    assert assignment.submissions[0].file_refs == ["ref-2", "ref-3"]


async def test_due_date_boundary_is_exclusive(ledger, assignment, student, clock):
    clock.set(assignment.due_date - timedelta(microseconds=1))
    await ledger.submit(assignment.id, student.id, ["ref-1"])

    clock.set(assignment.due_date)
    with pytest.raises(DueDatePassedError):
        await ledger.submit(assignment.id, student.id, ["ref-2"])


async def test_submit_checks(ledger, assignment, teacher, outsider, student):
    with pytest.raises(ForbiddenError):
        await ledger.submit(assignment.id, outsider.id, ["ref"])
    with pytest.raises(ForbiddenError):
        await ledger.submit(assignment.id, teacher.id, ["ref"])
    with pytest.raises(ValidationError):
        await ledger.submit(assignment.id, student.id, [])
    with pytest.raises(NotFoundError):
        await ledger.submit(outsider.id, student.id, ["ref"])


async def test_grading(ledger, assignment, teacher, student, outsider, clock):
    submission = await ledger.submit(assignment.id, student.id, ["ref-1"])

    graded = await ledger.grade(assignment.id, submission.id, teacher.id, 85, "Good work")
    assert graded.grade == 85
    assert graded.feedback == "Good work"

    with pytest.raises(ForbiddenError):
        await ledger.grade(assignment.id, submission.id, outsider.id, 90)
    with pytest.raises(ForbiddenError):
        await ledger.grade(assignment.id, submission.id, student.id, 100)

    # Grading is allowed after the deadline and overwrites the previous grade
    clock.advance(days=2)
    regraded = await ledger.grade(assignment.id, submission.id, teacher.id, 90, None)
    assert regraded.grade == 90
    assert regraded.feedback is None


async def test_grade_bounds(ledger, assignment, teacher, student):
    submission = await ledger.submit(assignment.id, student.id, ["ref-1"])

    for bad in (-1, 101, None):
        with pytest.raises(ValidationError):
            await ledger.grade(assignment.id, submission.id, teacher.id, bad)

    assert (await ledger.grade(assignment.id, submission.id, teacher.id, 0)).grade == 0
    assert (await ledger.grade(assignment.id, submission.id, teacher.id, 100)).grade == 100


async def test_grade_unknown_submission(ledger, assignment, teacher):
    with pytest.raises(NotFoundError):
        await ledger.grade(assignment.id, teacher.id, teacher.id, 50)


async def test_list_for_classroom_newest_first(ledger, classroom, teacher, student, outsider, clock):
    due = clock() + timedelta(days=1)
    older = await ledger.create_assignment(classroom.id, teacher.id, "First", "", due, 10)
    newer = await ledger.create_assignment(classroom.id, teacher.id, "Second", "", due, 10)

    for caller in (teacher, student):
        listed = await ledger.list_for_classroom(classroom.id, caller.id)
        assert [a.id for a in listed] == [newer.id, older.id]

    with pytest.raises(ForbiddenError):
        await ledger.list_for_classroom(classroom.id, outsider.id)


async def test_racing_submissions_keep_one_record(session_factory, assignment, student, clock):
    assignment_id, student_id = assignment.id, student.id

    async with session_factory() as loser_session:
        loser = AssignmentService(loser_session, now=clock)
        load_classroom = loser.classrooms.get_classroom

        async def classroom_after_concurrent_submit(classroom_id, for_update=False):
            # The other request commits after this one has read the assignment
            async with session_factory() as winner_session:
                await AssignmentService(winner_session, now=clock).submit(assignment_id, student_id, ["winner"])
            return await load_classroom(classroom_id, for_update=for_update)

        loser.classrooms.get_classroom = classroom_after_concurrent_submit
        with pytest.raises(ConflictError):
            await loser.submit(assignment_id, student_id, ["loser"])

    async with session_factory() as check_session:
        stmt = select(Submission).where(
            Submission.assignment_id == assignment_id,
            Submission.student_id == student_id
        )
        rows = (await check_session.execute(stmt)).scalars().all()
        assert len(rows) == 1
        assert rows[0].file_refs == ["winner"]
