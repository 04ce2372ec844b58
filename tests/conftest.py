"""Shared fixtures: an in-memory MongoDB and factories for users, profiles and jobs."""

import os
from datetime import datetime

import mongomock
import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-min-32-chars-long-for-security")
os.environ.setdefault("MONGODB_DB", "job_portal_test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from jobportal.core.auth import create_access_token  # noqa: E402
from jobportal.core.permissions import EmployerActor, JobSeekerActor  # noqa: E402
from jobportal.db.mongodb import init_mongo_indexes, set_mongo_client, get_mongo_db  # noqa: E402
from jobportal.schemas.schemas import JobCreate  # noqa: E402
from jobportal.services.job_service import JobService  # noqa: E402
from jobportal.services.mongo_service import EmployerStore, JobSeekerStore, UserStore  # noqa: E402


@pytest.fixture(autouse=True)
def mongo_db():
    """Fresh mongomock database with the production indexes for every test."""
    set_mongo_client(mongomock.MongoClient())
    init_mongo_indexes()
    yield get_mongo_db()
    set_mongo_client(None)


@pytest.fixture
def client():
    from jobportal.main import app
    return TestClient(app)


def _make_user(role: str, email: str) -> dict:
    user = {
        "email": email,
        "password_hash": "not-used",
        "role": role,
        "is_active": True,
        "created_at": datetime.utcnow(),
    }
    UserStore().insert(user)
    return user


@pytest.fixture
def make_employer():
    """Create an employer user + profile; returns (user, actor)."""
    counter = {"n": 0}

    def factory(company_name: str = None):
        counter["n"] += 1
        n = counter["n"]
        user = _make_user("employer", f"employer{n}@example.com")
        profile = {
            "user_id": user["_id"],
            "company_name": company_name or f"Company {n}",
            "industry": "Information Technology",
            "company_size": "51-200",
            "company_description": "We build things",
            "inclusivity_programs": [],
        }
        EmployerStore().insert(profile)
        return user, EmployerActor(user_id=user["_id"], profile_id=profile["_id"])

    return factory


@pytest.fixture
def make_jobseeker():
    """Create a job seeker user + profile; returns (user, actor)."""
    counter = {"n": 0}

    def factory(skills=None):
        counter["n"] += 1
        n = counter["n"]
        user = _make_user("jobseeker", f"seeker{n}@example.com")
        profile = {
            "user_id": user["_id"],
            "category": "regular",
            "skills": skills or ["Python"],
        }
        JobSeekerStore().insert(profile)
        return user, JobSeekerActor(user_id=user["_id"], profile_id=profile["_id"])

    return factory


@pytest.fixture
def make_job():
    """Create a job owned by the given employer actor."""

    def factory(employer: EmployerActor, **overrides):
        data = {
            "title": "Backend Engineer",
            "description": "Build APIs with Python and MongoDB",
            "requirements": {"skills": ["Python", "MongoDB"]},
            "employment_type": "full-time",
            "workplace_type": "remote",
            "location": {"city": "Berlin", "country": "Germany"},
            "salary": {"min": 60000, "max": 90000},
            "status": "published",
        }
        data.update(overrides)
        return JobService().create(employer, JobCreate(**data))

    return factory


@pytest.fixture
def auth_headers():
    """Bearer headers for a user document."""

    def factory(user: dict) -> dict:
        token = create_access_token({"sub": str(user["_id"]), "role": user["role"]})
        return {"Authorization": f"Bearer {token}"}

    return factory
