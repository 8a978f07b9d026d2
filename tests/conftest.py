import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from lms import main
from lms.assignments.assignment_models import Assignment, AssignmentStatus, AssignmentType
from lms.auth.auth_models import User, UserRole
from lms.auth.auth_utils import hash_password
from lms.database import create_indexes, generate_id, get_db, utc_now
from lms.enrollments.enrollment_models import Enrollment, EnrollmentStatus
from lms.hierarchy.hierarchy_models import Vertical, VerticalType, Batch, Module, Week, Lecture


class Seeder:
    """Inserts fixture documents straight into the collections"""

    def __init__(self, db):
        self.db = db

    async def _insert(self, collection, model):
        doc = model.dict()
        await self.db[collection].insert_one(doc)
        doc.pop("_id", None)
        return doc

    async def user(self, role=UserRole.STUDENT, email=None):
        user_id = generate_id("USR")
        return await self._insert("users", User(
            user_id=user_id,
            email=email or f"{user_id.lower()}@example.com",
            password_hash=hash_password("secret123"),
            first_name="Test",
            last_name="User",
            role=role,
        ))

    async def vertical(self, **fields):
        return await self._insert("verticals", Vertical(
            vertical_id=generate_id("VRT"),
            name=fields.pop("name", "Fullstack"),
            type=fields.pop("type", VerticalType.FULLSTACK),
            **fields
        ))

    async def batch(self, vertical_id, **fields):
        now = utc_now()
        return await self._insert("batches", Batch(
            batch_id=generate_id("BAT"),
            vertical_id=vertical_id,
            name=fields.pop("name", "Batch 1"),
            start_date=fields.pop("start_date", now - timedelta(days=7)),
            end_date=fields.pop("end_date", now + timedelta(days=90)),
            **fields
        ))

    async def module(self, batch_id, module_order=1, **fields):
        return await self._insert("modules", Module(
            module_id=generate_id("MOD"),
            batch_id=batch_id,
            name=fields.pop("name", f"Module {module_order}"),
            module_order=module_order,
            **fields
        ))

    async def week(self, module_id, week_number=1, **fields):
        return await self._insert("weeks", Week(
            week_id=generate_id("WEK"),
            module_id=module_id,
            name=fields.pop("name", f"Week {week_number}"),
            week_number=week_number,
            **fields
        ))

    async def lecture(self, week_id, lecture_number=1, **fields):
        return await self._insert("lectures", Lecture(
            lecture_id=generate_id("LEC"),
            week_id=week_id,
            title=fields.pop("title", f"Lecture {lecture_number}"),
            lecture_number=lecture_number,
            **fields
        ))

    async def assignment(self, batch_id, due_in=timedelta(days=3), status=AssignmentStatus.PUBLISHED, **fields):
        return await self._insert("assignments", Assignment(
            assignment_id=generate_id("ASG"),
            batch_id=batch_id,
            title=fields.pop("title", "Build a REST API"),
            type=fields.pop("type", AssignmentType.PROJECT),
            status=status,
            due_date=utc_now() + due_in,
            **fields
        ))

    async def enrollment(self, user_id, batch_id, status=EnrollmentStatus.APPROVED, **fields):
        return await self._insert("enrollments", Enrollment(
            enrollment_id=generate_id("ENR"),
            user_id=user_id,
            batch_id=batch_id,
            status=status,
            **fields
        ))

    async def hierarchy(self):
        """One full Vertical -> Batch -> Module -> Week -> Lecture chain"""
        vertical = await self.vertical()
        batch = await self.batch(vertical["vertical_id"])
        module = await self.module(batch["batch_id"])
        week = await self.week(module["module_id"])
        lecture = await self.lecture(week["week_id"])
        return {
            "vertical_id": vertical["vertical_id"],
            "batch_id": batch["batch_id"],
            "module_id": module["module_id"],
            "week_id": week["week_id"],
            "lecture_id": lecture["lecture_id"],
        }


@pytest.fixture
async def db():
    database = AsyncMongoMockClient()[f"lms_test_{uuid.uuid4().hex[:8]}"]
    await create_indexes(database)
    return database


@pytest.fixture
def seed(db):
    return Seeder(db)


# ==================== HTTP ====================

@pytest.fixture
def client(monkeypatch):
    """
    TestClient against a fresh in-memory database
    Startup runs create_indexes on it
    """
    database = AsyncMongoMockClient()[f"lms_api_{uuid.uuid4().hex[:8]}"]

    async def override_get_db():
        return database

    monkeypatch.setattr(main, "db", database)
    main.app.dependency_overrides[get_db] = override_get_db

    with TestClient(main.app) as test_client:
        yield test_client

    main.app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register through the API and return (auth headers, public user)"""

    def _register(email, role="STUDENT", password="secret123"):
        response = client.post("/auth/register", json={
            "email": email,
            "password": password,
            "first_name": "Test",
            "last_name": "User",
            "role": role,
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]

    return _register


# ==================== CONCURRENCY ====================

class _MissingFindOne:
    """Collection whose find_one never sees a row, as if written concurrently"""

    def __init__(self, collection):
        self._collection = collection

    async def find_one(self, *args, **kwargs):
        return None

    def __getattr__(self, name):
        return getattr(self._collection, name)


class _StaleReadDatabase:
    def __init__(self, db, collection_name):
        self._db = db
        self._collection_name = collection_name

    def __getattr__(self, name):
        collection = getattr(self._db, name)
        if name == self._collection_name:
            return _MissingFindOne(collection)
        return collection

    def __getitem__(self, name):
        return self.__getattr__(name)


@pytest.fixture
def stale_reads(db):
    """Database view where one collection's existence checks always miss"""

    def _stale(collection_name):
        return _StaleReadDatabase(db, collection_name)

    return _stale
