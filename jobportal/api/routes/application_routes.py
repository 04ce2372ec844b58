"""
Application Routes

POST /applications - Apply to a job (job seeker only)
GET /applications/me - All of my applications (job seeker only)
GET /applications/my-applications - My five most recent applications (job seeker only)
PUT /applications/{id}/withdraw - Withdraw my application (job seeker only)
GET /applications/job/{job_id} - Applications for one of my jobs (employer only)
GET /applications/received - Applications across all my jobs (employer only)
PUT /applications/{id} - Update application status (employer only)
POST /applications/{id}/interview - Schedule an interview (employer only)
GET /applications/dashboard - Dashboard stats for either role
GET /applications/{id} - Application details (applicant or job owner)
"""

from fastapi import APIRouter, Depends
from typing import List

from jobportal.core.auth import get_current_actor, get_current_employer, get_current_jobseeker
from jobportal.core.permissions import Actor, EmployerActor, JobSeekerActor
from jobportal.services.application_service import ApplicationService
from jobportal.services.mongo_service import public_doc
from jobportal.schemas.schemas import (
    ApplicationCreate, ApplicationStatusUpdate, ApplicationResponse, DashboardResponse,
    InterviewCreate, WithdrawRequest,
)

router = APIRouter(prefix="/applications", tags=["Applications"])


def _response(application: dict) -> ApplicationResponse:
    return ApplicationResponse(**public_doc(application))


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(data: ApplicationCreate, seeker: JobSeekerActor = Depends(get_current_jobseeker)):
    """Apply to a job. Job seekers only. Cannot apply twice to same job."""
    application = ApplicationService().submit(
        seeker,
        data.job_id,
        cover_letter=data.cover_letter,
        answers=[a.model_dump() for a in data.answers],
    )
    return _response(application)


@router.get("/me", response_model=List[ApplicationResponse])
async def get_my_applications(seeker: JobSeekerActor = Depends(get_current_jobseeker)):
    """All applications submitted by the current job seeker, newest first."""
    return [_response(a) for a in ApplicationService().list_mine(seeker)]


@router.get("/my-applications", response_model=List[ApplicationResponse])
async def get_my_recent_applications(seeker: JobSeekerActor = Depends(get_current_jobseeker)):
    """The current job seeker's most recent applications."""
    return [_response(a) for a in ApplicationService().list_recent(seeker)]


@router.put("/{application_id}/withdraw", response_model=ApplicationResponse)
async def withdraw_application(
    application_id: str,
    data: WithdrawRequest,
    seeker: JobSeekerActor = Depends(get_current_jobseeker),
):
    """Withdraw an application that is not yet hired, rejected or withdrawn."""
    return _response(ApplicationService().withdraw(seeker, application_id, reason=data.reason))


@router.get("/job/{job_id}", response_model=List[ApplicationResponse])
async def get_job_applications(job_id: str, employer: EmployerActor = Depends(get_current_employer)):
    """All applications for one of the employer's jobs."""
    return [_response(a) for a in ApplicationService().list_for_job(employer, job_id)]


@router.get("/received", response_model=List[ApplicationResponse])
async def get_received_applications(employer: EmployerActor = Depends(get_current_employer)):
    """Applications received across all of the employer's jobs."""
    return [_response(a) for a in ApplicationService().list_received(employer)]


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(actor: Actor = Depends(get_current_actor)):
    """Totals, recent applications and status breakdown for the current user."""
    data = ApplicationService().dashboard(actor)
    data["recent_applications"] = [_response(a) for a in data["recent_applications"]]
    return DashboardResponse(**data)


@router.put("/{application_id}", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    employer: EmployerActor = Depends(get_current_employer),
):
    """Update status of a job application."""
    application = ApplicationService().update_status(
        employer, application_id, update.status, reason=update.reason, notes=update.notes
    )
    return _response(application)


@router.post("/{application_id}/interview", response_model=ApplicationResponse)
async def schedule_interview(
    application_id: str,
    data: InterviewCreate,
    employer: EmployerActor = Depends(get_current_employer),
):
    """Schedule an interview round; the application becomes shortlisted."""
    application = ApplicationService().schedule_interview(
        employer, application_id, round=data.round, date_time=data.date_time, type=data.type
    )
    return _response(application)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(application_id: str, actor: Actor = Depends(get_current_actor)):
    """Application details, visible to the applicant and the job's employer."""
    return _response(ApplicationService().get(actor, application_id))
