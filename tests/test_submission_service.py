from datetime import timedelta

import pytest

from lms.assignments.assignment_models import AssignmentStatus
from lms.errors import BadRequestError, ForbiddenError, NotFoundError
from lms.submissions.submission_service import SubmissionService


@pytest.fixture
async def course(seed):
    """An enrolled student and a batch with one open published assignment"""
    student = await seed.user()
    vertical = await seed.vertical()
    batch = await seed.batch(vertical["vertical_id"])
    await seed.enrollment(student["user_id"], batch["batch_id"])
    assignment = await seed.assignment(batch["batch_id"], max_score=50)
    return {"student": student, "batch": batch, "assignment": assignment}


def _text(assignment_id, content="my answer"):
    return {"assignment_id": assignment_id, "type": "TEXT", "content": content}


async def test_create_text_submission(db, course):
    user_id = course["student"]["user_id"]
    assignment_id = course["assignment"]["assignment_id"]

    submission = await SubmissionService(db).create(user_id, _text(assignment_id))

    assert submission["submission_id"].startswith("SUB_")
    assert submission["is_active"] is True
    assert submission["score"] is None
    assert submission["assignment"]["assignment_id"] == assignment_id


async def test_create_after_deadline(db, seed, course):
    late = await seed.assignment(course["batch"]["batch_id"], due_in=timedelta(days=-1))

    with pytest.raises(BadRequestError) as exc:
        await SubmissionService(db).create(course["student"]["user_id"], _text(late["assignment_id"]))

    assert exc.value.detail == "Assignment submission deadline has passed"


async def test_create_requires_enrollment(db, seed, course):
    outsider = await seed.user()

    with pytest.raises(ForbiddenError):
        await SubmissionService(db).create(outsider["user_id"], _text(course["assignment"]["assignment_id"]))


async def test_create_requires_published_assignment(db, seed, course):
    draft = await seed.assignment(course["batch"]["batch_id"], status=AssignmentStatus.DRAFT)

    with pytest.raises(NotFoundError) as exc:
        await SubmissionService(db).create(course["student"]["user_id"], _text(draft["assignment_id"]))

    assert exc.value.detail == "Assignment not found or not published"


async def test_link_submission_needs_url(db, course):
    data = {"assignment_id": course["assignment"]["assignment_id"], "type": "LINK", "link_title": "repo"}

    with pytest.raises(BadRequestError):
        await SubmissionService(db).create(course["student"]["user_id"], data)


async def test_second_submission_rejected(db, course):
    service = SubmissionService(db)
    user_id = course["student"]["user_id"]
    assignment_id = course["assignment"]["assignment_id"]
    await service.create(user_id, _text(assignment_id))

    with pytest.raises(BadRequestError) as exc:
        await service.create(user_id, _text(assignment_id, "again"))

    assert exc.value.detail == "You have already submitted this assignment"


async def test_resubmit_after_delete_reuses_row(db, course):
    service = SubmissionService(db)
    user_id = course["student"]["user_id"]
    assignment_id = course["assignment"]["assignment_id"]

    first = await service.create(user_id, _text(assignment_id, "draft"))
    await service.grade(first["submission_id"], 40, "almost")
    await service.delete(user_id, first["submission_id"])

    assert await service.get_my_submissions(user_id) == []

    second = await service.create(user_id, {
        "assignment_id": assignment_id,
        "type": "LINK",
        "link_url": "https://github.com/example/repo",
    })

    assert second["submission_id"] == first["submission_id"]
    assert second["is_active"] is True
    assert second["type"] == "LINK"
    assert second["score"] is None
    assert second["feedback"] is None
    assert second["graded_at"] is None
    assert await db.submissions.count_documents({"user_id": user_id}) == 1


async def test_update_and_delete_closed_after_deadline(db, course):
    service = SubmissionService(db)
    user_id = course["student"]["user_id"]
    assignment_id = course["assignment"]["assignment_id"]
    submission = await service.create(user_id, _text(assignment_id))

    updated = await service.update(user_id, submission["submission_id"], {"content": "edited"})
    assert updated["content"] == "edited"

    await db.assignments.update_one(
        {"assignment_id": assignment_id},
        {"$set": {"due_date": course["assignment"]["due_date"] - timedelta(days=10)}}
    )

    with pytest.raises(BadRequestError) as exc:
        await service.update(user_id, submission["submission_id"], {"content": "too late"})
    assert exc.value.detail == "Cannot edit submission after assignment deadline"

    with pytest.raises(BadRequestError) as exc:
        await service.delete(user_id, submission["submission_id"])
    assert exc.value.detail == "Cannot delete submission after assignment deadline"


async def test_other_students_cannot_touch_a_submission(db, seed, course):
    service = SubmissionService(db)
    submission = await service.create(course["student"]["user_id"], _text(course["assignment"]["assignment_id"]))
    other = await seed.user()

    with pytest.raises(NotFoundError):
        await service.get_submission(other["user_id"], submission["submission_id"])
    with pytest.raises(NotFoundError):
        await service.delete(other["user_id"], submission["submission_id"])


async def test_grade_checks_max_score(db, course):
    service = SubmissionService(db)
    submission = await service.create(course["student"]["user_id"], _text(course["assignment"]["assignment_id"]))

    with pytest.raises(BadRequestError):
        await service.grade(submission["submission_id"], 51)

    graded = await service.grade(submission["submission_id"], 45, "good work")
    assert graded["score"] == 45
    assert graded["feedback"] == "good work"
    assert graded["graded_at"] is not None

    with pytest.raises(NotFoundError):
        await service.grade("SUB_MISSING", 10)


async def test_concurrent_submit_hits_unique_index(db, course, stale_reads):
    user_id = course["student"]["user_id"]
    assignment_id = course["assignment"]["assignment_id"]
    await SubmissionService(db).create(user_id, _text(assignment_id))

    with pytest.raises(BadRequestError) as exc:
        await SubmissionService(stale_reads("submissions")).create(user_id, _text(assignment_id, "again"))

    assert exc.value.detail == "You have already submitted this assignment"
    assert await db.submissions.count_documents({"user_id": user_id}) == 1


async def test_switching_to_link_requires_url(db, course):
    service = SubmissionService(db)
    user_id = course["student"]["user_id"]
    submission = await service.create(user_id, _text(course["assignment"]["assignment_id"]))

    with pytest.raises(BadRequestError) as exc:
        await service.update(user_id, submission["submission_id"], {"type": "LINK"})
    assert exc.value.detail == "Link URL is required for link submissions"

    stored = await db.submissions.find_one({"submission_id": submission["submission_id"]})
    assert stored["type"] == "TEXT"

    updated = await service.update(user_id, submission["submission_id"], {
        "type": "LINK",
        "link_url": "https://github.com/student/solution",
    })
    assert updated["type"] == "LINK"
