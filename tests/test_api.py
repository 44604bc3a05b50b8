import uuid
from datetime import datetime, timedelta, timezone

from classroom_app.core.config import settings
from conftest import auth


async def create_classroom(client, teacher):
    response = await client.post(
        "/api/v1/classrooms/",
        json={"name": "Algebra", "subject": "Math", "description": "Period 1"},
        headers=auth(teacher),
    )
    assert response.status_code == 201
    return response.json()


async def test_requires_identity(client):
    response = await client.get("/api/v1/classrooms/my")
    assert response.status_code == 401

    response = await client.get("/api/v1/classrooms/my", headers={"X-User-Id": "not-a-uuid"})
    assert response.status_code == 401


async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "active"


async def test_classroom_flow(client, teacher, student):
    classroom = await create_classroom(client, teacher)
    assert classroom["teacher_id"] == str(teacher.id)
    assert classroom["student_ids"] == []
    assert len(classroom["code"]) == 6

    response = await client.post(
        "/api/v1/classrooms/join", json={"code": classroom["code"].lower()}, headers=auth(student)
    )
    assert response.status_code == 200
    assert response.json()["student_ids"] == [str(student.id)]

    response = await client.post("/api/v1/classrooms/join", json={"code": classroom["code"]}, headers=auth(student))
    assert response.status_code == 409
    assert response.json()["type"] == "AlreadyMemberError"

    response = await client.post("/api/v1/classrooms/join", json={"code": classroom["code"]}, headers=auth(teacher))
    assert response.status_code == 409
    assert response.json()["type"] == "SelfJoinError"

    response = await client.post("/api/v1/classrooms/join", json={"code": "ZZZZZZ"}, headers=auth(student))
    assert response.status_code == 404

    response = await client.get("/api/v1/classrooms/my", headers=auth(student))
    assert [c["id"] for c in response.json()] == [classroom["id"]]


async def test_classroom_visibility(client, teacher, outsider):
    classroom = await create_classroom(client, teacher)

    response = await client.get(f"/api/v1/classrooms/{classroom['id']}", headers=auth(outsider))
    assert response.status_code == 403

    response = await client.get(f"/api/v1/classrooms/{classroom['id']}", headers=auth(teacher))
    assert response.status_code == 200


async def test_create_classroom_validation(client, teacher):
    response = await client.post(
        "/api/v1/classrooms/", json={"name": " ", "subject": "Math"}, headers=auth(teacher)
    )
    assert response.status_code == 422
    assert response.json()["type"] == "ValidationError"


async def test_invitations(client, teacher, student):
    classroom = await create_classroom(client, teacher)

    response = await client.post(
        f"/api/v1/classrooms/{classroom['id']}/invitations",
        json={"emails": ["sam@example.com", "nobody@example.com"], "role": "student"},
        headers=auth(teacher),
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": ["sam@example.com"],
        "not_found": ["nobody@example.com"],
        "already_member": [],
        "conflict_role": [],
    }

    response = await client.post(
        f"/api/v1/classrooms/{classroom['id']}/invitations",
        json={"emails": ["tina@example.com"]},
        headers=auth(student),
    )
    assert response.status_code == 403


async def test_assignment_flow(client, teacher, student, outsider):
    classroom = await create_classroom(client, teacher)
    await client.post("/api/v1/classrooms/join", json={"code": classroom["code"]}, headers=auth(student))

    due = datetime.now(timezone.utc) + timedelta(hours=1)
    response = await client.post(
        f"/api/v1/classrooms/{classroom['id']}/assignments",
        json={"title": "Homework 1", "description": "Chapter 2", "due_date": due.isoformat(), "points": 50},
        headers=auth(teacher),
    )
    assert response.status_code == 201
    assignment = response.json()

    response = await client.post(
        f"/api/v1/classrooms/{classroom['id']}/assignments",
        json={"title": "Homework 2", "due_date": due.isoformat(), "points": 50},
        headers=auth(student),
    )
    assert response.status_code == 403

    response = await client.post(
        f"/api/v1/assignments/{assignment['id']}/submissions",
        files=[("files", ("essay.txt", b"my essay", "text/plain"))],
        headers=auth(student),
    )
    assert response.status_code == 200
    submission = response.json()
    assert len(submission["file_refs"]) == 1

    response = await client.post(
        f"/api/v1/assignments/{assignment['id']}/submissions",
        files=[
            ("files", ("essay.txt", b"my essay v2", "text/plain")),
            ("files", ("notes.txt", b"sources", "text/plain")),
        ],
        headers=auth(student),
    )
    assert response.json()["id"] == submission["id"]
    assert len(response.json()["file_refs"]) == 2

    grade_url = f"/api/v1/assignments/{assignment['id']}/submissions/{submission['id']}/grade"
    response = await client.post(grade_url, json={"grade": 101}, headers=auth(teacher))
    assert response.status_code == 422

    response = await client.post(grade_url, json={"grade": 95, "feedback": "Well argued"}, headers=auth(student))
    assert response.status_code == 403

    response = await client.post(grade_url, json={"grade": 95, "feedback": "Well argued"}, headers=auth(teacher))
    assert response.status_code == 200
    assert response.json()["grade"] == 95

    response = await client.get(f"/api/v1/assignments/{assignment['id']}", headers=auth(student))
    assert [s["id"] for s in response.json()["submissions"]] == [submission["id"]]

    response = await client.get(f"/api/v1/classrooms/{classroom['id']}/assignments", headers=auth(outsider))
    assert response.status_code == 403


async def test_comment_flow(client, teacher, student):
    classroom = await create_classroom(client, teacher)
    await client.post("/api/v1/classrooms/join", json={"code": classroom["code"]}, headers=auth(student))

    response = await client.post(
        f"/api/v1/classrooms/{classroom['id']}/announcements",
        data={"title": "Welcome", "content": "Hello class"},
        headers=auth(teacher),
    )
    assert response.status_code == 201
    announcement = response.json()

    comments_url = f"/api/v1/classrooms/{classroom['id']}/comments"
    response = await client.post(
        comments_url,
        json={"item_type": "announcement", "item_id": announcement["id"], "content": "Question?"},
        headers=auth(student),
    )
    assert response.status_code == 201
    top = response.json()

    response = await client.post(
        comments_url,
        json={
            "item_type": "announcement",
            "item_id": announcement["id"],
            "content": "Answer",
            "parent_comment_id": top["id"],
        },
        headers=auth(teacher),
    )
    reply = response.json()

    response = await client.get(
        comments_url,
        params={"item_type": "announcement", "item_id": announcement["id"]},
        headers=auth(student),
    )
    threads = response.json()
    assert [t["id"] for t in threads] == [top["id"]]
    assert threads[0]["reply_ids"] == [reply["id"]]

    response = await client.delete(f"/api/v1/comments/{top['id']}", headers=auth(teacher))
    assert response.status_code == 200
    assert set(response.json()["deleted_ids"]) == {top["id"], reply["id"]}

    response = await client.delete(f"/api/v1/announcements/{announcement['id']}", headers=auth(teacher))
    assert response.status_code == 204

    response = await client.get(f"/api/v1/classrooms/{classroom['id']}/announcements", headers=auth(student))
    assert response.json() == []


def stored_files(storage):
    if not storage.root.exists():
        return []
    return list(storage.root.iterdir())


async def create_assignment(client, teacher, classroom):
    due = datetime.now(timezone.utc) + timedelta(hours=1)
    response = await client.post(
        f"/api/v1/classrooms/{classroom['id']}/assignments",
        json={"title": "Homework 1", "due_date": due.isoformat(), "points": 50},
        headers=auth(teacher),
    )
    assert response.status_code == 201
    return response.json()


async def test_rejected_submissions_store_nothing(client, storage, teacher, outsider):
    classroom = await create_classroom(client, teacher)
    assignment = await create_assignment(client, teacher, classroom)
    upload = [("files", ("essay.txt", b"my essay", "text/plain"))]

    response = await client.post(
        f"/api/v1/assignments/{assignment['id']}/submissions", files=upload, headers=auth(outsider)
    )
    assert response.status_code == 403

    response = await client.post(
        f"/api/v1/assignments/{uuid.uuid4()}/submissions", files=upload, headers=auth(outsider)
    )
    assert response.status_code == 404

    assert stored_files(storage) == []


async def test_oversize_upload_is_rejected(client, storage, monkeypatch, teacher, student):
    classroom = await create_classroom(client, teacher)
    await client.post("/api/v1/classrooms/join", json={"code": classroom["code"]}, headers=auth(student))
    assignment = await create_assignment(client, teacher, classroom)
    monkeypatch.setattr(settings, "max_upload_size", 8)

    response = await client.post(
        f"/api/v1/assignments/{assignment['id']}/submissions",
        files=[
            ("files", ("small.txt", b"ok", "text/plain")),
            ("files", ("large.txt", b"far too many bytes", "text/plain")),
        ],
        headers=auth(student),
    )

    assert response.status_code == 422
    assert response.json()["field"] == "files"
    assert stored_files(storage) == []


async def test_announcement_attachments(client, storage, teacher, student):
    classroom = await create_classroom(client, teacher)
    await client.post("/api/v1/classrooms/join", json={"code": classroom["code"]}, headers=auth(student))
    url = f"/api/v1/classrooms/{classroom['id']}/announcements"
    attachment = [("files", ("syllabus.pdf", b"%PDF-1.4 syllabus", "application/pdf"))]

    response = await client.post(
        url, data={"title": "Welcome", "content": "Read the syllabus"}, files=attachment, headers=auth(student)
    )
    assert response.status_code == 403
    assert stored_files(storage) == []

    response = await client.post(
        url, data={"title": "Welcome", "content": "Read the syllabus"}, files=attachment, headers=auth(teacher)
    )
    assert response.status_code == 201
    refs = response.json()["file_refs"]
    assert len(refs) == 1
    assert await storage.fetch(refs[0]) == b"%PDF-1.4 syllabus"

    response = await client.get(url, headers=auth(student))
    assert response.json()[0]["file_refs"] == refs


async def test_user_lookup(client, teacher, student):
    response = await client.get(f"/api/v1/users/{student.id}", headers=auth(teacher))
    assert response.status_code == 200
    assert response.json()["full_name"] == "Sam Student"
    assert response.json()["email"] == "sam@example.com"

    response = await client.get(f"/api/v1/users/{uuid.uuid4()}", headers=auth(teacher))
    assert response.status_code == 404

    response = await client.post(
        "/api/v1/users/batch",
        json={"ids": [str(teacher.id), str(uuid.uuid4()), str(student.id)]},
        headers=auth(student),
    )
    assert [u["email"] for u in response.json()] == ["tina@example.com", "sam@example.com"]


async def test_unknown_principal_cannot_create_classroom(client):
    response = await client.post(
        "/api/v1/classrooms/",
        json={"name": "Algebra", "subject": "Math"},
        headers={"X-User-Id": str(uuid.uuid4())},
    )
    assert response.status_code == 404
    assert response.json()["type"] == "NotFoundError"
