"""Tests for job postings: publishing, search, ownership and cascade delete."""

from datetime import datetime

import pytest

from jobportal.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from jobportal.schemas.schemas import JobUpdate
from jobportal.services.application_service import ApplicationService
from jobportal.services.job_service import JobService, build_search_query
from jobportal.services.mongo_service import JobStore


@pytest.fixture
def service():
    return JobService()


def test_draft_has_no_published_at(service, make_employer, make_job):
    _, employer = make_employer()
    job = make_job(employer, status="draft")
    assert job["published_at"] is None
    assert job["applications_count"] == 0
    assert job["company_name"] == "Company 1"


def test_publishing_stamps_published_at(service, make_employer, make_job):
    _, employer = make_employer()
    job = make_job(employer, status="draft")

    updated = service.update(employer, job["_id"], JobUpdate(status="published"))
    assert updated["status"] == "published"
    assert updated["published_at"] is not None

    first_published = updated["published_at"]
    again = service.update(employer, job["_id"], JobUpdate(status="published", title="Senior Backend Engineer"))
    assert again["published_at"] == first_published
    assert again["title"] == "Senior Backend Engineer"


def test_update_requires_fields(service, make_employer, make_job):
    _, employer = make_employer()
    job = make_job(employer)
    with pytest.raises(ValidationError):
        service.update(employer, job["_id"], JobUpdate())


def test_only_owner_can_update_or_delete(service, make_employer, make_jobseeker, make_job):
    _, owner = make_employer()
    _, intruder = make_employer()
    _, seeker = make_jobseeker()
    job = make_job(owner)

    with pytest.raises(ForbiddenError):
        service.update(intruder, job["_id"], JobUpdate(title="Hijacked"))
    with pytest.raises(ForbiddenError):
        service.delete(intruder, job["_id"])
    with pytest.raises(ForbiddenError):
        service.delete(seeker, job["_id"])
    assert service.get(job["_id"])["title"] == "Backend Engineer"


def test_delete_cascades_to_applications(service, make_employer, make_jobseeker, make_job, mongo_db):
    _, employer = make_employer()
    job = make_job(employer)
    keep = make_job(employer, title="Other")
    applications = ApplicationService()
    for _ in range(3):
        applications.submit(make_jobseeker()[1], job["_id"])
    applications.submit(make_jobseeker()[1], keep["_id"])

    assert service.delete(employer, job["_id"]) == 3

    with pytest.raises(NotFoundError):
        service.get(job["_id"])
    assert mongo_db["applications"].count_documents({"job_id": job["_id"]}) == 0
    assert mongo_db["applications"].count_documents({"job_id": keep["_id"]}) == 1


def test_get_unknown_or_malformed_id(service):
    with pytest.raises(NotFoundError):
        service.get("123")
    with pytest.raises(NotFoundError):
        service.get("5f1d7f3c2b4e8a0012345678")


class TestSearch:

    @pytest.fixture(autouse=True)
    def jobs(self, make_employer, make_job):
        _, employer = make_employer()
        make_job(employer, title="Python Developer", location={"city": "Berlin"},
                 salary={"min": 70000}, flexible_schedule=True)
        make_job(employer, title="Frontend Engineer", description="React work",
                 requirements={"skills": ["React"]}, workplace_type="hybrid",
                 location={"city": "Munich"}, salary={"min": 50000},
                 accommodations={"available": True})
        make_job(employer, title="Contract Data Analyst", employment_type="contract",
                 location={"city": "berlin"}, salary={"min": 40000})
        make_job(employer, title="Hidden Python Draft", status="draft")

    def _titles(self, **filters):
        jobs, total = JobService().search(**filters)
        assert total == len(jobs)
        return sorted(j["title"] for j in jobs)

    def test_only_published(self):
        assert "Hidden Python Draft" not in self._titles()
        assert len(self._titles()) == 3

    def test_keyword_matches_title_description_and_skills(self):
        # the analyst role matches through its default description and skills
        assert self._titles(keyword="python") == ["Contract Data Analyst", "Python Developer"]
        assert self._titles(keyword="react") == ["Frontend Engineer"]
        assert self._titles(keyword="mongodb") == ["Contract Data Analyst", "Python Developer"]

    def test_keyword_is_literal(self):
        assert self._titles(keyword="Python.*") == []

    def test_location_is_case_insensitive(self):
        assert self._titles(location="BERLIN") == ["Contract Data Analyst", "Python Developer"]

    def test_type_filters(self):
        assert self._titles(employment_type="contract") == ["Contract Data Analyst"]
        assert len(self._titles(employment_type="all")) == 3
        assert self._titles(workplace_type="hybrid") == ["Frontend Engineer"]

    def test_flags_and_salary(self):
        assert self._titles(accommodations=True) == ["Frontend Engineer"]
        assert self._titles(flexible_schedule=True) == ["Python Developer"]
        assert self._titles(salary_min=50000) == ["Frontend Engineer", "Python Developer"]

    def test_pagination(self):
        jobs, total = JobService().search(page=2, page_size=2)
        assert total == 3
        assert len(jobs) == 1


def test_build_search_query_defaults():
    assert build_search_query() == {"status": "published"}


def test_list_mine_filters_by_status(service, make_employer, make_job):
    _, employer = make_employer()
    _, other = make_employer()
    make_job(employer)
    make_job(employer, status="draft", title="Draft role")
    make_job(other)

    assert len(service.list_mine(employer)) == 2
    assert [j["title"] for j in service.list_mine(employer, status="draft")] == ["Draft role"]


def test_application_racing_delete_is_swept(service, make_employer, make_jobseeker, make_job, mongo_db, monkeypatch):
    _, employer = make_employer()
    _, seeker = make_jobseeker()
    job = make_job(employer)
    remove_job = JobStore.delete

    def submit_then_remove(store, job_id):
        ApplicationService().submit(seeker, job_id)
        return remove_job(store, job_id)

    monkeypatch.setattr(JobStore, "delete", submit_then_remove)
    assert service.delete(employer, job["_id"]) == 1
    assert mongo_db["applications"].count_documents({"job_id": job["_id"]}) == 0


def test_submit_after_delete_is_not_found(service, make_employer, make_jobseeker, make_job, mongo_db):
    _, employer = make_employer()
    _, seeker = make_jobseeker()
    job = make_job(employer)
    service.delete(employer, job["_id"])

    with pytest.raises(NotFoundError):
        ApplicationService().submit(seeker, job["_id"])
    assert mongo_db["applications"].count_documents({}) == 0


class TestClearingFields:

    def test_optional_field_can_be_cleared(self, service, make_employer, make_job):
        _, employer = make_employer()
        job = make_job(employer, application_deadline=datetime(2030, 6, 1), benefits=["Gym"])

        updated = service.update(employer, job["_id"], JobUpdate(application_deadline=None))

        assert updated["application_deadline"] is None
        assert updated["benefits"] == ["Gym"]

    @pytest.mark.parametrize("field", ["title", "employment_type", "status", "benefits"])
    def test_required_field_cannot_be_cleared(self, service, make_employer, make_job, field):
        _, employer = make_employer()
        job = make_job(employer)

        with pytest.raises(ValidationError):
            service.update(employer, job["_id"], JobUpdate(**{field: None}))
        assert service.get(job["_id"])[field] is not None
