"""
Employer Routes

GET /employers - List employers with filters (public)
POST /employers - Create employer profile
GET /employers/profile - Get own profile
PUT /employers/profile - Update profile
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from jobportal.core.auth import require_role
from jobportal.core.permissions import EMPLOYER
from jobportal.services.mongo_service import public_doc
from jobportal.services.profile_service import EmployerProfileService
from jobportal.schemas.schemas import (
    CompanySize, EmployerCreate, EmployerUpdate, EmployerResponse, RemoteWorkPolicy
)

router = APIRouter(prefix="/employers", tags=["Employers"])


@router.get("", response_model=List[EmployerResponse])
async def list_employers(
    industry: Optional[str] = Query(None),
    company_size: Optional[CompanySize] = Query(None),
    inclusivity_programs: Optional[str] = Query(None, description="Comma separated, matches any"),
    workplace_type: Optional[RemoteWorkPolicy] = Query(None),
):
    """List employer profiles. Social media links are not included."""
    profiles = EmployerProfileService().search(
        industry=industry,
        company_size=company_size.value if company_size else None,
        inclusivity_programs=inclusivity_programs.split(",") if inclusivity_programs else None,
        workplace_type=workplace_type.value if workplace_type else None,
    )
    return [EmployerResponse(**public_doc(p)) for p in profiles]


@router.post("", response_model=EmployerResponse, status_code=201)
async def create_profile(data: EmployerCreate, user: dict = Depends(require_role(EMPLOYER))):
    """Create employer profile. One per account."""
    return EmployerResponse(**public_doc(EmployerProfileService().create(user, data)))


@router.get("/profile", response_model=EmployerResponse)
async def get_profile(user: dict = Depends(require_role(EMPLOYER))):
    """Get current employer's profile."""
    return EmployerResponse(**public_doc(EmployerProfileService().get(user)))


@router.put("/profile", response_model=EmployerResponse)
async def update_profile(data: EmployerUpdate, user: dict = Depends(require_role(EMPLOYER))):
    """Update employer profile. Only provided fields are updated."""
    return EmployerResponse(**public_doc(EmployerProfileService().update(user, data)))
