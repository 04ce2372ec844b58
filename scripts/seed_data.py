#!/usr/bin/env python3
"""
Seed Script

Clears the portal collections and loads one job seeker, one employer and
one published job. Both demo accounts use the password "password123".

Usage: python scripts/seed_data.py
"""
from datetime import datetime

from jobportal.core.auth import hash_password
from jobportal.core.permissions import EmployerActor
from jobportal.db.mongodb import COLLECTIONS, get_mongo_db, init_mongo_indexes
from jobportal.schemas.schemas import EmployerCreate, JobCreate, JobSeekerCreate
from jobportal.services.job_service import JobService
from jobportal.services.mongo_service import UserStore
from jobportal.services.profile_service import EmployerProfileService, JobSeekerProfileService

PASSWORD = "password123"

USERS = [
    {"email": "jobseeker1@example.com", "first_name": "John", "last_name": "Doe", "role": "jobseeker"},
    {"email": "employer1@techcorp.com", "first_name": "Jane", "last_name": "Smith", "role": "employer"},
]

JOB_SEEKER = {
    "category": "regular",
    "skills": ["JavaScript", "React", "Node.js", "MongoDB"],
    "experience": [{
        "title": "Frontend Developer",
        "company": "Web Solutions Inc",
        "location": "New York",
        "start_date": "2020-01-01T00:00:00",
        "end_date": "2022-12-31T00:00:00",
        "description": "Developed responsive web applications using React",
        "is_current_role": False,
    }],
    "education": [{
        "degree": "Bachelor of Science",
        "institution": "Tech University",
        "field": "Computer Science",
        "graduation_year": 2020,
    }],
    "preferences": {
        "remote_work": True,
        "flexible_schedule": True,
        "preferred_locations": ["New York", "Remote"],
        "expected_salary": {"min": 80000, "max": 120000, "currency": "USD"},
    },
}

EMPLOYER = {
    "company_name": "Tech Corp Solutions",
    "industry": "Information Technology",
    "company_size": "51-200",
    "company_description": "Leading tech company specializing in innovative solutions",
    "website": "https://techcorp.example.com",
    "location": {
        "address": "123 Tech Street",
        "city": "San Francisco",
        "state": "CA",
        "country": "USA",
        "zip_code": "94105",
    },
    "social_media": {"linkedin": "https://linkedin.com/company/techcorp", "twitter": "@techcorp"},
    "inclusivity_programs": ["disability-friendly", "veteran-program"],
    "workplace_features": {
        "remote_work_policy": "hybrid",
        "flexible_hours": True,
        "accessibility_features": ["wheelchair-accessible", "screen-reader-support"],
    },
}

JOB = {
    "title": "Senior Full Stack Developer",
    "description": "Looking for an experienced developer to join our team",
    "requirements": {
        "skills": ["JavaScript", "React", "Node.js", "MongoDB", "AWS"],
        "experience": {"minimum": 5, "preferred": 7},
        "education": {"level": "Bachelor's Degree", "field": "Computer Science"},
    },
    "employment_type": "full-time",
    "workplace_type": "hybrid",
    "location": {"city": "San Francisco", "state": "CA", "country": "USA", "remote": True},
    "salary": {"min": 120000, "max": 180000, "currency": "USD", "is_negotiable": True},
    "benefits": ["Health Insurance", "401(k)", "Stock Options", "Flexible Hours"],
    "flexible_schedule": True,
    "accommodations": {
        "available": True,
        "description": "We provide reasonable accommodations for qualified individuals with disabilities",
    },
    "status": "published",
}


def main():
    db = get_mongo_db()
    for name in COLLECTIONS.values():
        db[name].delete_many({})
    init_mongo_indexes()
    print("Cleared existing data")

    users = {}
    for user in USERS:
        doc = dict(user, password_hash=hash_password(PASSWORD), is_active=True, created_at=datetime.utcnow())
        UserStore().insert(doc)
        users[user["role"]] = doc
    print("Users created")

    JobSeekerProfileService().create(users["jobseeker"], JobSeekerCreate(**JOB_SEEKER))
    print("JobSeeker profile created")

    employer = EmployerProfileService().create(users["employer"], EmployerCreate(**EMPLOYER))
    actor = EmployerActor(user_id=users["employer"]["_id"], profile_id=employer["_id"])
    job = JobService().create(actor, JobCreate(**JOB))
    print(f"Employer profile and job {job['_id']} created")

    print("Data seeding completed!")


if __name__ == "__main__":
    main()
