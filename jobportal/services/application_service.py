"""
Application Lifecycle Service

Status lifecycle of an application:

    pending -> reviewed -> shortlisted -> hired | rejected
    any non-terminal state -> withdrawn   (job seeker only)

Terminal states (hired, rejected, withdrawn) accept no further changes.
Employers may set any of pending/reviewed/shortlisted/rejected/hired on a
non-terminal application; the order above is not enforced beyond that.

Every status change appends {status, updated_by, reason, updated_at} to
status_history. The number of live applications on a job is never stored:
JobService derives it from the non-withdrawn applications on read.

Duplicate applications are rejected by the unique (job_id, job_seeker_id)
index; submit() does not look for an existing application first.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo.errors import DuplicateKeyError

from jobportal.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from jobportal.core.permissions import (
    EMPLOYER, JOBSEEKER, Actor, EmployerActor, JobSeekerActor,
    can_act_on_application, require_application_access, require_job_owner,
)
from jobportal.schemas.schemas import InterviewStatus
from jobportal.services.mongo_service import (
    NEWEST_FIRST, ApplicationStore, EmployerStore, JobStore,
)

logger = logging.getLogger(__name__)

PENDING = "pending"
REVIEWED = "reviewed"
SHORTLISTED = "shortlisted"
REJECTED = "rejected"
HIRED = "hired"
WITHDRAWN = "withdrawn"

ALL_STATUSES = (PENDING, REVIEWED, SHORTLISTED, REJECTED, HIRED, WITHDRAWN)
TERMINAL_STATUSES = frozenset({REJECTED, HIRED, WITHDRAWN})
EMPLOYER_SETTABLE_STATUSES = (PENDING, REVIEWED, SHORTLISTED, REJECTED, HIRED)

INTERVIEW_SCHEDULED = InterviewStatus.scheduled.value
RECENT_LIMIT = 5


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def history_entry(status: str, actor: Actor, reason: Optional[str] = None) -> dict:
    return {
        "status": status,
        "updated_by": actor.user_id,
        "reason": reason,
        "updated_at": datetime.utcnow(),
    }


class ApplicationService:
    """Submit, transition and read applications on behalf of an actor."""

    def __init__(self):
        self.applications = ApplicationStore()
        self.jobs = JobStore()
        self.employers = EmployerStore()

    # ------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------

    def submit(
        self,
        actor: Actor,
        job_id: Any,
        cover_letter: Optional[str] = None,
        answers: Optional[List[dict]] = None,
    ) -> dict:
        """
        Create a pending application for (job, actor).

        Raises:
            ForbiddenError: actor is not a job seeker
            NotFoundError: job does not exist
            ConflictError: job is not published, or actor already applied
        """
        if not isinstance(actor, JobSeekerActor):
            raise ForbiddenError("Only job seekers can apply to jobs")

        job = self.jobs.find_by_id(job_id)
        if not job:
            raise NotFoundError("Job not found")
        if job.get("status") != "published":
            raise ConflictError("Job is not accepting applications")

        doc = {
            "job_id": job["_id"],
            "job_seeker_id": actor.profile_id,
            "status": PENDING,
            "status_history": [],
            "cover_letter": cover_letter,
            "answers": answers or [],
            "notes": [],
            "interview_schedule": [],
            "withdrawn_by": None,
            "withdrawn_reason": None,
        }
        try:
            self.applications.insert(doc)
        except DuplicateKeyError:
            logger.warning(
                "Duplicate application rejected: job=%s job_seeker=%s", job["_id"], actor.profile_id
            )
            raise ConflictError("Already applied to this job")

        logger.info(
            "Application %s submitted: job=%s job_seeker=%s", doc["_id"], job["_id"], actor.profile_id
        )
        return doc

    def update_status(
        self,
        actor: Actor,
        application_id: Any,
        new_status: str,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> dict:
        """
        Employer moves an application to new_status.

        Raises:
            NotFoundError: application does not exist
            ForbiddenError: actor does not own the application's job
            ConflictError: application is already terminal
            ValidationError: new_status is not employer-settable
        """
        new_status = getattr(new_status, "value", new_status)
        application = self._load(application_id)
        job = self.jobs.find_by_id(application["job_id"])
        self._guard(actor, application, EMPLOYER, job)

        if is_terminal(application["status"]):
            raise ConflictError(f"Application is already {application['status']}")
        if new_status not in EMPLOYER_SETTABLE_STATUSES:
            raise ValidationError(
                f"Invalid status '{new_status}'. Allowed: {', '.join(EMPLOYER_SETTABLE_STATUSES)}"
            )

        push: Dict[str, Any] = {"status_history": history_entry(new_status, actor, reason)}
        if notes:
            push["notes"] = {"content": notes, "author": actor.user_id, "created_at": datetime.utcnow()}

        updated = self.applications.update_unless_status(
            application["_id"], TERMINAL_STATUSES, {"status": new_status}, push
        )
        if updated is None:
            raise ConflictError("Application was closed by another update")

        logger.info(
            "Application %s: %s -> %s by employer %s",
            application["_id"], application["status"], new_status, actor.profile_id,
        )
        return updated

    def withdraw(self, actor: Actor, application_id: Any, reason: Optional[str] = None) -> dict:
        """
        Job seeker withdraws their own non-terminal application.

        Raises:
            NotFoundError: application does not exist
            ForbiddenError: actor is not the applicant
            ConflictError: application is hired, rejected or already withdrawn
        """
        application = self._load(application_id)
        self._guard(actor, application, JOBSEEKER)

        if is_terminal(application["status"]):
            raise ConflictError(f"Cannot withdraw an application that is {application['status']}")

        updated = self.applications.update_unless_status(
            application["_id"],
            TERMINAL_STATUSES,
            {"status": WITHDRAWN, "withdrawn_by": JOBSEEKER, "withdrawn_reason": reason},
            {"status_history": history_entry(WITHDRAWN, actor, reason)},
        )
        if updated is None:
            raise ConflictError("Application was closed by another update")

        logger.info("Application %s withdrawn by job seeker %s", application["_id"], actor.profile_id)
        return updated

    def schedule_interview(
        self,
        actor: Actor,
        application_id: Any,
        round: int,
        date_time: datetime,
        type: str,
    ) -> dict:
        """
        Employer adds an interview round; the application becomes shortlisted.

        Terminal applications are refused with ConflictError rather than
        being pulled back to shortlisted.
        """
        application = self._load(application_id)
        job = self.jobs.find_by_id(application["job_id"])
        self._guard(actor, application, EMPLOYER, job)

        if is_terminal(application["status"]):
            raise ConflictError(
                f"Cannot schedule an interview for an application that is {application['status']}"
            )

        push: Dict[str, Any] = {
            "interview_schedule": {
                "round": round,
                "date_time": date_time,
                "type": getattr(type, "value", type),
                "status": INTERVIEW_SCHEDULED,
                "feedback": None,
            }
        }
        if application["status"] != SHORTLISTED:
            push["status_history"] = history_entry(
                SHORTLISTED, actor, f"Interview round {round} scheduled"
            )

        updated = self.applications.update_unless_status(
            application["_id"], TERMINAL_STATUSES, {"status": SHORTLISTED}, push
        )
        if updated is None:
            raise ConflictError("Application was closed by another update")

        logger.info("Interview round %s scheduled for application %s", round, application["_id"])
        return updated

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def get(self, actor: Actor, application_id: Any) -> dict:
        """Either side of the application (applicant or job owner) may read it."""
        application = self._load(application_id)
        job = self.jobs.find_by_id(application["job_id"])
        if not can_act_on_application(actor, application, actor.role, job):
            raise ForbiddenError("Not authorized to view this application")
        return self._with_jobs([application])[0]

    def list_for_job(self, actor: Actor, job_id: Any) -> List[dict]:
        job = self.jobs.find_by_id(job_id)
        if not job:
            raise NotFoundError("Job not found")
        require_job_owner(actor, job)
        return self.applications.find({"job_id": job["_id"]}, sort=NEWEST_FIRST)

    def list_mine(self, actor: Actor, limit: int = 0) -> List[dict]:
        if not isinstance(actor, JobSeekerActor):
            raise ForbiddenError("Access denied. Job seeker access only.")
        applications = self.applications.find(
            {"job_seeker_id": actor.profile_id}, sort=NEWEST_FIRST, limit=limit
        )
        return self._with_jobs(applications)

    def list_recent(self, actor: Actor) -> List[dict]:
        return self.list_mine(actor, limit=RECENT_LIMIT)

    def list_received(self, actor: Actor) -> List[dict]:
        if not isinstance(actor, EmployerActor):
            raise ForbiddenError("Access denied. Employer access only.")
        job_ids = self.jobs.ids_for_employer(actor.profile_id)
        return self._with_jobs(self.applications.find_for_jobs(job_ids))

    def dashboard(self, actor: Actor) -> dict:
        """Totals, recent applications and per-status counts for either role."""
        data: Dict[str, Any] = {"role": actor.role}
        if isinstance(actor, EmployerActor):
            job_ids = self.jobs.ids_for_employer(actor.profile_id)
            query = {"job_id": {"$in": job_ids}}
            data["total_jobs"] = len(job_ids)
            data["active_jobs"] = self.jobs.count(
                {"employer_id": actor.profile_id, "status": "published"}
            )
        else:
            query = {"job_seeker_id": actor.profile_id}

        stats = {status: 0 for status in ALL_STATUSES}
        stats.update(self.applications.status_counts(query))
        data["application_stats"] = stats
        data["total_applications"] = sum(stats.values())
        data["recent_applications"] = self._with_jobs(
            self.applications.find(query, sort=NEWEST_FIRST, limit=RECENT_LIMIT)
        )
        return data

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    def _load(self, application_id: Any) -> dict:
        application = self.applications.find_by_id(application_id)
        if not application:
            raise NotFoundError("Application not found")
        return application

    def _guard(self, actor: Actor, application: dict, role: str, job: Optional[dict] = None) -> None:
        try:
            require_application_access(actor, application, role, job)
        except ForbiddenError:
            logger.warning(
                "Forbidden: %s %s tried to act as %s on application %s",
                actor.role, actor.profile_id, role, application["_id"],
            )
            raise

    def _with_jobs(self, applications: List[dict]) -> List[dict]:
        """Attach a job summary (title, status, company name) to each application."""
        job_ids = list({app["job_id"] for app in applications})
        if not job_ids:
            return applications
        jobs = {job["_id"]: job for job in self.jobs.find({"_id": {"$in": job_ids}})}
        employer_ids = list({job["employer_id"] for job in jobs.values()})
        companies = {
            emp["_id"]: emp.get("company_name")
            for emp in self.employers.find({"_id": {"$in": employer_ids}})
        }
        for app in applications:
            job = jobs.get(app["job_id"])
            if job is None:
                continue
            app["job"] = {
                "id": job["_id"],
                "title": job["title"],
                "status": job["status"],
                "company_name": companies.get(job["employer_id"]),
                "location": job.get("location"),
                "employment_type": job.get("employment_type"),
            }
        return applications
