"""
Job Routes

GET /jobs - List published jobs with filters (public)
GET /jobs/my-jobs - Get employer's own jobs
GET /jobs/{job_id} - Get job details (public)
POST /jobs - Create job posting (employer only)
PUT /jobs/{job_id} - Update job (owner only)
DELETE /jobs/{job_id} - Delete job and its applications (owner only)
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from jobportal.core.auth import get_current_employer
from jobportal.core.config import get_settings
from jobportal.core.permissions import EmployerActor
from jobportal.services.job_service import JobService
from jobportal.services.mongo_service import public_doc
from jobportal.schemas.schemas import (
    JobCreate, JobUpdate, JobResponse, JobListResponse, JobStatus, MessageResponse
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=JobListResponse)
async def list_jobs(
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    keyword: Optional[str] = Query(None, description="Search in title, description and skills"),
    location: Optional[str] = Query(None, description="City"),
    employment_type: Optional[str] = Query(None, description="Employment type or 'all'"),
    workplace_type: Optional[str] = Query(None, description="Workplace type or 'all'"),
    accommodations: bool = Query(False),
    flexible_schedule: bool = Query(False),
    salary_min: Optional[float] = Query(None, ge=0),
):
    """List published job postings with filters and pagination."""
    settings = get_settings()
    page_size = min(page_size or settings.default_page_size, settings.max_page_size)

    jobs, total = JobService().search(
        page=page,
        page_size=page_size,
        keyword=keyword,
        location=location,
        employment_type=employment_type,
        workplace_type=workplace_type,
        accommodations=accommodations,
        flexible_schedule=flexible_schedule,
        salary_min=salary_min,
    )
    return JobListResponse(
        jobs=[JobResponse(**public_doc(j)) for j in jobs], total=total, page=page, page_size=page_size
    )


@router.get("/my-jobs", response_model=List[JobResponse])
async def get_my_jobs(
    status: Optional[JobStatus] = Query(None),
    employer: EmployerActor = Depends(get_current_employer),
):
    """Get all jobs posted by this employer, with live application counts."""
    jobs = JobService().list_mine(employer, status=status.value if status else None)
    return [JobResponse(**public_doc(j)) for j in jobs]


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str):
    """Get details of a specific job."""
    return JobResponse(**public_doc(JobService().get(job_id)))


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(job: JobCreate, employer: EmployerActor = Depends(get_current_employer)):
    """Create a new job posting. Only employers can create jobs."""
    return JobResponse(**public_doc(JobService().create(employer, job)))


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(job_id: str, update: JobUpdate, employer: EmployerActor = Depends(get_current_employer)):
    """Update a job posting. Only the owning employer can update."""
    return JobResponse(**public_doc(JobService().update(employer, job_id, update)))


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: str, employer: EmployerActor = Depends(get_current_employer)):
    """Delete a job posting. Cascades to applications."""
    removed = JobService().delete(employer, job_id)
    return MessageResponse(message=f"Job removed along with {removed} application(s)")
