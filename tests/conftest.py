"""
Shared fixtures.

Services are bound to mongomock collections; the FastAPI app gets the same
services through dependency overrides, so route tests and direct database
assertions see one store.
"""

from datetime import timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from careerhub.api import deps
from careerhub.core.auth import Principal, create_access_token
from careerhub.db.mongodb import init_mongo_indexes
from careerhub.main import app
from careerhub.services.deadlines import utc_now
from careerhub.services.mongo_service import JOB, TEST, WEBINAR, PostingService, ProfileService

STUDENT_EMAIL = "asha.verma@college.edu"
OTHER_EMAIL = "rohan.das@college.edu"
ADMIN_EMAIL = "placements@college.edu"


@pytest.fixture
def db():
    """A fresh in-memory database with the production indexes."""
    database = mongomock.MongoClient()["careerhub_test"]
    init_mongo_indexes(database)
    return database


@pytest.fixture
def profiles(db):
    return ProfileService(db["users"])


@pytest.fixture
def jobs(db):
    return PostingService(JOB, db["jobs"])


@pytest.fixture
def placement_tests(db):
    return PostingService(TEST, db["tests"])


@pytest.fixture
def webinars(db):
    return PostingService(WEBINAR, db["webinars"])


@pytest.fixture
def student():
    return Principal(email=STUDENT_EMAIL, name="Asha Verma")


@pytest.fixture
def make_student(profiles):
    """Insert a profile with an admission batch."""

    def _make(email=STUDENT_EMAIL, name="Asha Verma", batch_start=2021, batch_end=2025):
        profiles.create(name=name, college_email=email)
        return profiles.update_fields(email, {"batchStart": batch_start, "batchEnd": batch_end})

    return _make


@pytest.fixture
def make_job(jobs):
    """Insert a job open for the 2021-2025 batch, closing in five days."""

    def _make(**overrides):
        data = {
            "title": "Backend Engineer Intern",
            "company": "TechCorp India",
            "deadline": utc_now() + timedelta(days=5),
            "eligibility": ["2021-2025"],
            "inputFields": [
                {"fieldName": "Why this role?", "type": "textarea", "required": True, "options": []},
                {"fieldName": "Portfolio", "type": "url", "required": False, "options": []},
            ],
        }
        data.update(overrides)
        return jobs.create(data)

    return _make


@pytest.fixture
def make_test(placement_tests):
    def _make(**overrides):
        data = {
            "title": "Aptitude Round 1",
            "date": utc_now() + timedelta(days=2),
            "deadline": utc_now() + timedelta(days=1),
        }
        data.update(overrides)
        return placement_tests.create(data)

    return _make


@pytest.fixture
def make_webinar(webinars):
    def _make(**overrides):
        data = {
            "title": "Cracking System Design",
            "speaker": "R. Iyer",
            "date": utc_now() + timedelta(days=10),
        }
        data.update(overrides)
        return webinars.create(data)

    return _make


@pytest.fixture
def auth_header():
    """Build an Authorization header for a token carrying `email`."""

    def _header(email=STUDENT_EMAIL, name="Asha Verma", role="student"):
        token = create_access_token({"sub": email, "email": email, "name": name, "role": role})
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
def admin_header(auth_header):
    return auth_header(ADMIN_EMAIL, name="Placement Cell", role="admin")


@pytest.fixture
def client(profiles, jobs, placement_tests, webinars):
    app.dependency_overrides[deps.get_profiles] = lambda: profiles
    app.dependency_overrides[deps.get_jobs] = lambda: jobs
    app.dependency_overrides[deps.get_tests] = lambda: placement_tests
    app.dependency_overrides[deps.get_webinars] = lambda: webinars
    yield TestClient(app)
    app.dependency_overrides.clear()
