from datetime import datetime, timedelta

from lms.enrollments.progress import AssignmentProgressCalculator, calculate_progress
from lms.enrollments.enrollment_models import EnrollmentStatus
from lms.assignments.assignment_models import AssignmentStatus

NOW = datetime(2025, 3, 10, 12, 0, 0)


def _submission(score=None):
    return {
        "submission_id": "SUB_1",
        "submitted_at": NOW - timedelta(days=2),
        "score": score,
        "feedback": "nice" if score is not None else None,
    }


def test_overdue_without_submission():
    progress = calculate_progress({"due_date": NOW - timedelta(days=1)}, None, NOW)

    assert progress["progress_status"] == "overdue"
    assert progress["is_overdue"] is True
    assert progress["days_until_due"] == -1
    assert progress["submission"] is None


def test_graded_submission_past_due():
    progress = calculate_progress({"due_date": NOW - timedelta(days=1)}, _submission(score=90), NOW)

    assert progress["progress_status"] == "graded"
    assert progress["is_overdue"] is True
    assert progress["days_until_due"] == -1
    assert progress["submission"]["score"] == 90


def test_submitted_without_score():
    progress = calculate_progress({"due_date": NOW + timedelta(days=2)}, _submission(), NOW)

    assert progress["progress_status"] == "submitted"
    assert progress["is_overdue"] is False
    assert progress["days_until_due"] == 2


def test_pending_rounds_partial_days_up():
    progress = calculate_progress({"due_date": NOW + timedelta(hours=30)}, None, NOW)

    assert progress["progress_status"] == "pending"
    assert progress["days_until_due"] == 2


def test_no_due_date():
    progress = calculate_progress({"due_date": None}, None, NOW)

    assert progress["progress_status"] == "pending"
    assert progress["is_overdue"] is False
    assert progress["days_until_due"] is None


async def test_for_student_without_enrollments(db):
    assert await AssignmentProgressCalculator(db).for_student("USR_NOBODY") == []


async def test_for_student_lists_published_assignments_of_approved_batches(db, seed):
    student = await seed.user()
    vertical = await seed.vertical()
    batch = await seed.batch(vertical["vertical_id"])
    other_batch = await seed.batch(vertical["vertical_id"], name="Batch 2")
    pending_batch = await seed.batch(vertical["vertical_id"], name="Batch 3")

    await seed.enrollment(student["user_id"], batch["batch_id"])
    await seed.enrollment(student["user_id"], other_batch["batch_id"])
    await seed.enrollment(student["user_id"], pending_batch["batch_id"], status=EnrollmentStatus.PENDING)

    later = await seed.assignment(batch["batch_id"], due_in=timedelta(days=5), title="Later")
    sooner = await seed.assignment(other_batch["batch_id"], due_in=timedelta(days=1), title="Sooner")
    await seed.assignment(batch["batch_id"], status=AssignmentStatus.DRAFT, title="Draft")
    await seed.assignment(pending_batch["batch_id"], title="Hidden")

    await db.submissions.insert_one({
        "submission_id": "SUB_LATER",
        "user_id": student["user_id"],
        "assignment_id": later["assignment_id"],
        "type": "TEXT",
        "content": "done",
        "submitted_at": NOW,
        "score": None,
        "is_active": True,
    })

    results = await AssignmentProgressCalculator(db).for_student(student["user_id"])

    assert [a["assignment_id"] for a in results] == [sooner["assignment_id"], later["assignment_id"]]
    assert results[0]["progress_status"] == "pending"
    assert results[1]["progress_status"] == "submitted"
    assert results[1]["submission"]["submission_id"] == "SUB_LATER"
    assert results[1]["batch"]["vertical"]["vertical_id"] == vertical["vertical_id"]

    narrowed = await AssignmentProgressCalculator(db).for_student(student["user_id"], batch_id=batch["batch_id"])
    assert [a["title"] for a in narrowed] == ["Later"]


async def test_for_student_ignores_withdrawn_submissions(db, seed):
    student = await seed.user()
    vertical = await seed.vertical()
    batch = await seed.batch(vertical["vertical_id"])
    await seed.enrollment(student["user_id"], batch["batch_id"])
    assignment = await seed.assignment(batch["batch_id"])

    await db.submissions.insert_one({
        "submission_id": "SUB_GONE",
        "user_id": student["user_id"],
        "assignment_id": assignment["assignment_id"],
        "type": "TEXT",
        "submitted_at": NOW,
        "score": 50,
        "is_active": False,
    })

    [result] = await AssignmentProgressCalculator(db).for_student(student["user_id"])
    assert result["submission"] is None
    assert result["progress_status"] == "pending"


async def test_for_student_skips_inactive_assignments(db, seed):
    student = await seed.user()
    vertical = await seed.vertical()
    batch = await seed.batch(vertical["vertical_id"])
    await seed.enrollment(student["user_id"], batch["batch_id"])
    visible = await seed.assignment(batch["batch_id"], title="Visible")
    await seed.assignment(batch["batch_id"], title="Retired", is_active=False)

    results = await AssignmentProgressCalculator(db).for_student(student["user_id"])

    assert [a["assignment_id"] for a in results] == [visible["assignment_id"]]
