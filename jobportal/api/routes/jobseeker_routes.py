"""
Job Seeker Routes

POST /jobseekers - Create job seeker profile
GET /jobseekers/profile - Get own profile
PUT /jobseekers/profile - Update profile
GET /jobseekers - Browse job seekers (employer only)
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from jobportal.core.auth import require_role, get_current_employer
from jobportal.core.permissions import JOBSEEKER, EmployerActor
from jobportal.services.mongo_service import public_doc
from jobportal.services.profile_service import JobSeekerProfileService
from jobportal.schemas.schemas import (
    JobSeekerCategory, JobSeekerCreate, JobSeekerUpdate, JobSeekerResponse
)

router = APIRouter(prefix="/jobseekers", tags=["Job Seekers"])


@router.post("", response_model=JobSeekerResponse, status_code=201)
async def create_profile(data: JobSeekerCreate, user: dict = Depends(require_role(JOBSEEKER))):
    """Create job seeker profile. One per account."""
    return JobSeekerResponse(**public_doc(JobSeekerProfileService().create(user, data)))


@router.get("/profile", response_model=JobSeekerResponse)
async def get_profile(user: dict = Depends(require_role(JOBSEEKER))):
    """Get current job seeker's profile."""
    return JobSeekerResponse(**public_doc(JobSeekerProfileService().get(user)))


@router.put("/profile", response_model=JobSeekerResponse)
async def update_profile(data: JobSeekerUpdate, user: dict = Depends(require_role(JOBSEEKER))):
    """Update job seeker profile. Only provided fields are updated."""
    return JobSeekerResponse(**public_doc(JobSeekerProfileService().update(user, data)))


@router.get("", response_model=List[JobSeekerResponse])
async def list_jobseekers(
    skills: Optional[str] = Query(None, description="Comma separated, matches any"),
    category: Optional[JobSeekerCategory] = Query(None),
    availability: Optional[bool] = Query(None, description="Immediately available"),
    preferred_locations: Optional[str] = Query(None, description="Comma separated, matches any"),
    remote_work: Optional[bool] = Query(None),
    employer: EmployerActor = Depends(get_current_employer),
):
    """Browse job seeker profiles. Resume links are not included."""
    profiles = JobSeekerProfileService().search(
        skills=skills.split(",") if skills else None,
        category=category.value if category else None,
        availability=availability,
        preferred_locations=preferred_locations.split(",") if preferred_locations else None,
        remote_work=remote_work,
    )
    return [JobSeekerResponse(**public_doc(p)) for p in profiles]
