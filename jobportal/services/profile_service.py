"""
Profile Service - employer and job seeker profiles.

Each user owns at most one profile of their role's kind. The unique index
on user_id turns a second create into ConflictError.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError

from jobportal.core.exceptions import ConflictError, NotFoundError, ValidationError
from jobportal.schemas.schemas import EmployerCreate, JobSeekerCreate, clearable_fields
from jobportal.services.mongo_service import EmployerStore, JobSeekerStore

logger = logging.getLogger(__name__)


class _ProfileService:
    store_class = None
    label = "Profile"
    clearable: frozenset = frozenset()
    # Fields left out of the public/employer-facing listing
    hidden_in_listing: tuple = ()

    def __init__(self):
        self.store = self.store_class()

    def create(self, user: dict, data: BaseModel) -> dict:
        doc = data.model_dump()
        doc["user_id"] = user["_id"]
        try:
            self.store.insert(doc)
        except DuplicateKeyError:
            raise ConflictError("Profile already exists")
        logger.info("%s profile %s created for user %s", self.label, doc["_id"], user["_id"])
        return doc

    def get(self, user: dict) -> dict:
        profile = self.store.find_by_user(user["_id"])
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def update(self, user: dict, data: BaseModel) -> dict:
        """Partial update: only fields present in the request are written; null clears optional ones."""
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            raise ValidationError("No fields to update")
        blanked = sorted(k for k, v in fields.items() if v is None and k not in self.clearable)
        if blanked:
            raise ValidationError(f"Cannot clear required field(s): {', '.join(blanked)}")
        profile = self.store.update_by_user(user["_id"], fields)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def _listing(self, query: dict) -> List[dict]:
        profiles = self.store.find(query)
        for profile in profiles:
            for field in self.hidden_in_listing:
                profile.pop(field, None)
        return profiles


class EmployerProfileService(_ProfileService):
    store_class = EmployerStore
    label = "Employer"
    clearable = clearable_fields(EmployerCreate)
    hidden_in_listing = ("social_media",)

    def search(
        self,
        industry: Optional[str] = None,
        company_size: Optional[str] = None,
        inclusivity_programs: Optional[List[str]] = None,
        workplace_type: Optional[str] = None,
    ) -> List[dict]:
        query: dict = {}
        if industry:
            query["industry"] = industry
        if company_size:
            query["company_size"] = company_size
        if inclusivity_programs:
            query["inclusivity_programs"] = {"$in": inclusivity_programs}
        if workplace_type:
            query["workplace_features.remote_work_policy"] = workplace_type
        return self._listing(query)


class JobSeekerProfileService(_ProfileService):
    store_class = JobSeekerStore
    label = "Job seeker"
    clearable = clearable_fields(JobSeekerCreate)
    hidden_in_listing = ("resume",)

    def search(
        self,
        skills: Optional[List[str]] = None,
        category: Optional[str] = None,
        availability: Optional[bool] = None,
        preferred_locations: Optional[List[str]] = None,
        remote_work: Optional[bool] = None,
    ) -> List[dict]:
        query: dict = {}
        if skills:
            query["skills"] = {"$in": skills}
        if category:
            query["category"] = category
        if availability is not None:
            query["availability.immediate"] = availability
        if preferred_locations:
            query["preferences.preferred_locations"] = {"$in": preferred_locations}
        if remote_work is not None:
            query["preferences.remote_work"] = remote_work
        return self._listing(query)
