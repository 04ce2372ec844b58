"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum


class Schema(BaseModel):
    # model_dump() feeds MongoDB directly; store enum members as plain strings
    model_config = ConfigDict(use_enum_values=True)


def clearable_fields(create_model: type) -> frozenset:
    """Optional fields of a create schema that default to None (a partial update may null them)."""
    return frozenset(
        name for name, field in create_model.model_fields.items()
        if not field.is_required() and field.default is None
    )


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    employer = "employer"
    jobseeker = "jobseeker"


class EmploymentType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    contract = "contract"
    temporary = "temporary"
    internship = "internship"


class WorkplaceType(str, Enum):
    remote = "remote"
    on_site = "on-site"
    hybrid = "hybrid"


class JobStatus(str, Enum):
    draft = "draft"
    published = "published"
    closed = "closed"
    paused = "paused"


class ApplicationStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    shortlisted = "shortlisted"
    rejected = "rejected"
    hired = "hired"
    withdrawn = "withdrawn"


class InterviewType(str, Enum):
    phone = "phone"
    video = "video"
    in_person = "in-person"


class InterviewStatus(str, Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"
    rescheduled = "rescheduled"


class CompanySize(str, Enum):
    tiny = "1-10"
    small = "11-50"
    medium = "51-200"
    large = "201-500"
    very_large = "501-1000"
    enterprise = "1000+"


class InclusivityProgram(str, Enum):
    disability_friendly = "disability-friendly"
    veteran_program = "veteran-program"
    return_to_work = "return-to-work"
    retirement_transition = "retirement-transition"


class RemoteWorkPolicy(str, Enum):
    remote_only = "remote-only"
    hybrid = "hybrid"
    flexible = "flexible"
    on_site = "on-site"


class JobSeekerCategory(str, Enum):
    regular = "regular"
    career_break_returner = "career-break-returner"
    disabled = "disabled"
    veteran = "veteran"
    retiree = "retiree"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(Schema):
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class LoginRequest(Schema):
    email: EmailStr
    password: str

class TokenResponse(Schema):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str

class UserResponse(Schema):
    id: str
    email: str
    role: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool
    created_at: datetime


# ============================================================
# SHARED NESTED SCHEMAS
# ============================================================

class Address(Schema):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None

class MoneyRange(Schema):
    min: Optional[float] = Field(None, ge=0)
    max: Optional[float] = Field(None, ge=0)
    currency: str = "USD"

class ResumeLink(Schema):
    url: Optional[str] = None
    updated_at: Optional[datetime] = None


# ============================================================
# EMPLOYER SCHEMAS
# ============================================================

class SocialMedia(Schema):
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None

class WorkplaceFeatures(Schema):
    remote_work_policy: Optional[RemoteWorkPolicy] = None
    flexible_hours: Optional[bool] = None
    accessibility_features: List[str] = []

class EmployerCreate(Schema):
    company_name: str = Field(..., min_length=1, max_length=200)
    industry: str
    company_size: CompanySize
    company_description: str
    website: Optional[str] = None
    location: Optional[Address] = None
    social_media: Optional[SocialMedia] = None
    inclusivity_programs: List[InclusivityProgram] = []
    workplace_features: Optional[WorkplaceFeatures] = None

class EmployerUpdate(Schema):
    company_name: Optional[str] = Field(None, min_length=1, max_length=200)
    industry: Optional[str] = None
    company_size: Optional[CompanySize] = None
    company_description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[Address] = None
    social_media: Optional[SocialMedia] = None
    inclusivity_programs: Optional[List[InclusivityProgram]] = None
    workplace_features: Optional[WorkplaceFeatures] = None

class EmployerResponse(Schema):
    id: str
    user_id: str
    company_name: str
    industry: str
    company_size: str
    company_description: str
    website: Optional[str] = None
    location: Optional[Address] = None
    social_media: Optional[SocialMedia] = None
    inclusivity_programs: List[str] = []
    workplace_features: Optional[WorkplaceFeatures] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# ============================================================
# JOB SEEKER SCHEMAS
# ============================================================

class WorkExperience(Schema):
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    description: Optional[str] = None
    is_current_role: bool = False

class EducationEntry(Schema):
    degree: Optional[str] = None
    institution: Optional[str] = None
    field: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1900, le=2100)

class SeekerPreferences(Schema):
    remote_work: bool = False
    flexible_schedule: bool = False
    preferred_locations: List[str] = []
    expected_salary: Optional[MoneyRange] = None

class Accessibility(Schema):
    requirements: Optional[str] = None
    accommodations_needed: List[str] = []

class Availability(Schema):
    immediate: Optional[bool] = None
    notice_period: Optional[int] = Field(None, ge=0)

class JobSeekerCreate(Schema):
    category: JobSeekerCategory
    skills: List[str] = Field(..., min_length=1)
    experience: List[WorkExperience] = []
    education: List[EducationEntry] = []
    resume: Optional[ResumeLink] = None
    preferences: Optional[SeekerPreferences] = None
    accessibility: Optional[Accessibility] = None
    availability: Optional[Availability] = None

class JobSeekerUpdate(Schema):
    category: Optional[JobSeekerCategory] = None
    skills: Optional[List[str]] = None
    experience: Optional[List[WorkExperience]] = None
    education: Optional[List[EducationEntry]] = None
    resume: Optional[ResumeLink] = None
    preferences: Optional[SeekerPreferences] = None
    accessibility: Optional[Accessibility] = None
    availability: Optional[Availability] = None

class JobSeekerResponse(Schema):
    id: str
    user_id: str
    category: str
    skills: List[str] = []
    experience: List[WorkExperience] = []
    education: List[EducationEntry] = []
    resume: Optional[ResumeLink] = None
    preferences: Optional[SeekerPreferences] = None
    accessibility: Optional[Accessibility] = None
    availability: Optional[Availability] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class ExperienceRange(Schema):
    minimum: Optional[int] = Field(None, ge=0)
    preferred: Optional[int] = Field(None, ge=0)

class EducationRequirement(Schema):
    level: Optional[str] = None
    field: Optional[str] = None

class Requirements(Schema):
    skills: List[str] = []
    experience: Optional[ExperienceRange] = None
    education: Optional[EducationRequirement] = None

class JobLocation(Schema):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    remote: Optional[bool] = None

class Salary(MoneyRange):
    is_negotiable: Optional[bool] = None

class Accommodations(Schema):
    available: bool = False
    description: Optional[str] = None

class JobCreate(Schema):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=1)
    requirements: Requirements = Requirements()
    employment_type: EmploymentType
    workplace_type: WorkplaceType
    location: Optional[JobLocation] = None
    salary: Optional[Salary] = None
    benefits: List[str] = []
    flexible_schedule: bool = False
    accommodations: Optional[Accommodations] = None
    status: JobStatus = JobStatus.draft
    application_deadline: Optional[datetime] = None

class JobUpdate(Schema):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None
    requirements: Optional[Requirements] = None
    employment_type: Optional[EmploymentType] = None
    workplace_type: Optional[WorkplaceType] = None
    location: Optional[JobLocation] = None
    salary: Optional[Salary] = None
    benefits: Optional[List[str]] = None
    flexible_schedule: Optional[bool] = None
    accommodations: Optional[Accommodations] = None
    status: Optional[JobStatus] = None
    application_deadline: Optional[datetime] = None

class JobResponse(Schema):
    id: str
    employer_id: str
    company_name: Optional[str] = None
    title: str
    description: str
    requirements: Requirements = Requirements()
    employment_type: str
    workplace_type: str
    location: Optional[JobLocation] = None
    salary: Optional[Salary] = None
    benefits: List[str] = []
    flexible_schedule: bool = False
    accommodations: Optional[Accommodations] = None
    status: str
    application_deadline: Optional[datetime] = None
    published_at: Optional[datetime] = None
    applications_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

class JobListResponse(Schema):
    jobs: List[JobResponse]
    total: int
    page: int
    page_size: int


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class Answer(Schema):
    question: str
    answer: Optional[str] = None

class ApplicationCreate(Schema):
    job_id: str
    cover_letter: Optional[str] = None
    answers: List[Answer] = []

class ApplicationStatusUpdate(Schema):
    status: ApplicationStatus
    reason: Optional[str] = None
    notes: Optional[str] = None

class WithdrawRequest(Schema):
    reason: Optional[str] = None

class InterviewCreate(Schema):
    round: int = Field(..., ge=1)
    date_time: datetime
    type: InterviewType

class StatusHistoryEntry(Schema):
    status: str
    updated_by: Optional[str] = None
    reason: Optional[str] = None
    updated_at: datetime

class Note(Schema):
    content: str
    author: Optional[str] = None
    created_at: datetime

class InterviewEntry(Schema):
    round: int
    date_time: datetime
    type: str
    status: InterviewStatus
    feedback: Optional[str] = None

class JobSummary(Schema):
    id: str
    title: str
    status: str
    company_name: Optional[str] = None
    location: Optional[JobLocation] = None
    employment_type: Optional[str] = None

class ApplicationResponse(Schema):
    id: str
    job_id: str
    job_seeker_id: str
    status: str
    status_history: List[StatusHistoryEntry] = []
    cover_letter: Optional[str] = None
    answers: List[Answer] = []
    notes: List[Note] = []
    interview_schedule: List[InterviewEntry] = []
    withdrawn_by: Optional[str] = None
    withdrawn_reason: Optional[str] = None
    job: Optional[JobSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class DashboardResponse(Schema):
    role: str
    total_applications: int
    recent_applications: List[ApplicationResponse]
    application_stats: Dict[str, int]
    total_jobs: Optional[int] = None
    active_jobs: Optional[int] = None


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(Schema):
    message: str
    success: bool = True

class ErrorResponse(Schema):
    detail: str
    error: Optional[str] = None
