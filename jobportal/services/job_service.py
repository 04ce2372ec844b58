"""
Job Service - postings owned by employers.

applications_count is attached on every read: the number of applications
for the job that have not been withdrawn. Nothing keeps a stored counter in
step with the applications collection, so there is nothing to drift.
"""

import logging
import re
from datetime import datetime
from typing import Any, List, Optional, Tuple

from pymongo import DESCENDING

from jobportal.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from jobportal.core.permissions import Actor, EmployerActor, require_job_owner
from jobportal.schemas.schemas import JobCreate, JobUpdate, clearable_fields
from jobportal.services.application_service import WITHDRAWN
from jobportal.services.mongo_service import (
    NEWEST_FIRST, ApplicationStore, EmployerStore, JobStore,
)

logger = logging.getLogger(__name__)

PUBLISHED = "published"
CLEARABLE_JOB_FIELDS = clearable_fields(JobCreate)


def build_search_query(
    keyword: Optional[str] = None,
    location: Optional[str] = None,
    employment_type: Optional[str] = None,
    workplace_type: Optional[str] = None,
    accommodations: bool = False,
    flexible_schedule: bool = False,
    salary_min: Optional[float] = None,
) -> dict:
    """Translate public search filters into a MongoDB query over published jobs."""
    query: dict = {"status": PUBLISHED}

    # Search by keyword in title, description, and required skills
    if keyword:
        pattern = {"$regex": re.escape(keyword), "$options": "i"}
        query["$or"] = [
            {"title": pattern},
            {"description": pattern},
            {"requirements.skills": pattern},
        ]
    if location:
        query["location.city"] = {"$regex": re.escape(location), "$options": "i"}
    if employment_type and employment_type != "all":
        query["employment_type"] = employment_type
    if workplace_type and workplace_type != "all":
        query["workplace_type"] = workplace_type
    if accommodations:
        query["accommodations.available"] = True
    if flexible_schedule:
        query["flexible_schedule"] = True
    if salary_min is not None:
        query["salary.min"] = {"$gte": salary_min}
    return query


class JobService:

    def __init__(self):
        self.jobs = JobStore()
        self.applications = ApplicationStore()
        self.employers = EmployerStore()

    def create(self, actor: Actor, data: JobCreate) -> dict:
        if not isinstance(actor, EmployerActor):
            raise ForbiddenError("Only employers can post jobs")
        doc = data.model_dump()
        doc["employer_id"] = actor.profile_id
        doc["published_at"] = datetime.utcnow() if doc["status"] == PUBLISHED else None
        self.jobs.insert(doc)
        logger.info("Job %s created by employer %s (%s)", doc["_id"], actor.profile_id, doc["status"])
        return self._decorate([doc])[0]

    def search(self, page: int = 1, page_size: int = 20, **filters) -> Tuple[List[dict], int]:
        """Published jobs matching filters, newest publication first."""
        query = build_search_query(**filters)
        total = self.jobs.count(query)
        jobs = self.jobs.find(
            query,
            sort=[("published_at", DESCENDING), ("_id", DESCENDING)],
            skip=(page - 1) * page_size,
            limit=page_size,
        )
        return self._decorate(jobs), total

    def get(self, job_id: Any) -> dict:
        return self._decorate([self._load(job_id)])[0]

    def update(self, actor: Actor, job_id: Any, data: JobUpdate) -> dict:
        job = self._load(job_id)
        require_job_owner(actor, job)

        # null clears an optional field; required ones cannot be blanked
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            raise ValidationError("No fields to update")
        blanked = sorted(k for k, v in fields.items() if v is None and k not in CLEARABLE_JOB_FIELDS)
        if blanked:
            raise ValidationError(f"Cannot clear required field(s): {', '.join(blanked)}")

        # Moving into published stamps the publication time
        if fields.get("status") == PUBLISHED and job.get("status") != PUBLISHED:
            fields["published_at"] = datetime.utcnow()

        updated = self.jobs.update(job["_id"], fields)
        if updated is None:
            raise NotFoundError("Job not found")
        logger.info("Job %s updated: %s", job["_id"], ", ".join(sorted(fields)))
        return self._decorate([updated])[0]

    def delete(self, actor: Actor, job_id: Any) -> int:
        """Delete the job and every application on it. Returns applications removed."""
        job = self._load(job_id)
        require_job_owner(actor, job)

        # Job goes first so a concurrent submit sees NotFound instead of
        # landing an application after the sweep
        self.jobs.delete(job["_id"])
        removed = self.applications.delete_for_job(job["_id"])
        logger.info("Job %s deleted with %d applications", job["_id"], removed)
        return removed

    def list_mine(self, actor: Actor, status: Optional[str] = None) -> List[dict]:
        if not isinstance(actor, EmployerActor):
            raise ForbiddenError("Access denied. Employer access only.")
        query: dict = {"employer_id": actor.profile_id}
        if status:
            query["status"] = status
        return self._decorate(self.jobs.find(query, sort=NEWEST_FIRST))

    def applications_count(self, job_id: Any) -> int:
        job = self._load(job_id)
        return self.applications.count_active_for_job(job["_id"], WITHDRAWN)

    def _load(self, job_id: Any) -> dict:
        job = self.jobs.find_by_id(job_id)
        if not job:
            raise NotFoundError("Job not found")
        return job

    def _decorate(self, jobs: List[dict]) -> List[dict]:
        """Attach applications_count and company_name to each job."""
        if not jobs:
            return jobs
        counts = self.applications.active_counts_by_job([job["_id"] for job in jobs], WITHDRAWN)
        employer_ids = list({job["employer_id"] for job in jobs})
        companies = {
            emp["_id"]: emp.get("company_name")
            for emp in self.employers.find({"_id": {"$in": employer_ids}})
        }
        for job in jobs:
            job["applications_count"] = counts.get(job["_id"], 0)
            job["company_name"] = companies.get(job["employer_id"])
        return jobs
