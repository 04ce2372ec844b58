"""
Authorization Guard.

The role claim on a token is resolved exactly once, at the HTTP boundary,
into one of two actor types. Everything below the routes works with these
instead of re-checking role strings.

Ownership rules:
- an employer acts on a job iff job.employer_id is the employer's profile id
- a job seeker acts on an application iff application.job_seeker_id is theirs
- an employer acts on an application iff they own the application's job
"""

from dataclasses import dataclass
from typing import Optional, Union

from bson import ObjectId

from jobportal.core.exceptions import ForbiddenError

EMPLOYER = "employer"
JOBSEEKER = "jobseeker"


@dataclass(frozen=True)
class EmployerActor:
    user_id: ObjectId
    profile_id: ObjectId
    role: str = EMPLOYER


@dataclass(frozen=True)
class JobSeekerActor:
    user_id: ObjectId
    profile_id: ObjectId
    role: str = JOBSEEKER


Actor = Union[EmployerActor, JobSeekerActor]


def can_act_on_job(actor: Actor, job: dict) -> bool:
    """True iff the actor is the employer that owns the job."""
    return isinstance(actor, EmployerActor) and job.get("employer_id") == actor.profile_id


def can_act_on_application(
    actor: Actor, application: dict, role: str, job: Optional[dict] = None
) -> bool:
    """
    Check whether actor may act on application in the given role.

    For role=employer the parent job must be supplied; an application whose
    job is gone is owned by nobody.
    """
    if role == JOBSEEKER:
        return (
            isinstance(actor, JobSeekerActor)
            and application.get("job_seeker_id") == actor.profile_id
        )
    if role == EMPLOYER:
        if job is None or job.get("_id") != application.get("job_id"):
            return False
        return can_act_on_job(actor, job)
    return False


def require_job_owner(actor: Actor, job: dict) -> None:
    if not can_act_on_job(actor, job):
        raise ForbiddenError("Not authorized to modify this job")


def require_application_access(
    actor: Actor, application: dict, role: str, job: Optional[dict] = None
) -> None:
    if not can_act_on_application(actor, application, role, job):
        raise ForbiddenError("Not authorized to act on this application")
