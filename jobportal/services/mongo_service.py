"""
MongoDB Service - per-collection stores.

Collections in this database:
1. users       - Login identities (email, password hash, role)
2. employers   - Employer profiles, one per user
3. jobseekers  - Job seeker profiles, one per user
4. jobs        - Job postings owned by an employer profile
5. applications - Candidacies, unique per (job_id, job_seeker_id)

These stores are the only code that talks to pymongo. Services above them
hold the business rules and resolve references (application -> job ->
employer) through explicit lookups here, never through embedded copies.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any, Iterable
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from jobportal.db.mongodb import get_collection, COLLECTIONS

# created_at has millisecond precision in BSON; _id breaks ties
NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


# ============================================================
# HELPERS: ObjectId handling for JSON serialization and lookups
# ============================================================

def to_object_id(value: Any) -> Optional[ObjectId]:
    """Coerce a path/body id to ObjectId; None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def serialize_doc(doc: Any) -> Any:
    """Convert MongoDB document (ObjectIds at any depth) to JSON-serializable form."""
    if doc is None:
        return None
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, dict):
        return {key: serialize_doc(value) for key, value in doc.items()}
    if isinstance(doc, list):
        return [serialize_doc(item) for item in doc]
    return doc


def public_doc(doc: dict) -> dict:
    """Serialize a document for a response schema (`_id` exposed as `id`)."""
    data = serialize_doc(doc)
    data["id"] = data.pop("_id")
    return data


# ============================================================
# BASE STORE
# ============================================================

class _Store:
    collection_key: str = ""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS[self.collection_key])

    def find_by_id(self, doc_id: Any) -> Optional[dict]:
        """Fetch by id; malformed ids behave like missing documents."""
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def insert(self, doc: dict) -> ObjectId:
        now = datetime.utcnow()
        doc.setdefault("created_at", now)
        doc.setdefault("updated_at", now)
        result = self.collection.insert_one(doc)
        return result.inserted_id

    def find(
        self,
        query: dict,
        sort: Optional[List[tuple]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[dict]:
        cursor = self.collection.find(query)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def count(self, query: dict) -> int:
        return self.collection.count_documents(query)


# ============================================================
# USERS
# ============================================================

class UserStore(_Store):
    collection_key = "users"

    def find_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email.lower()})


# ============================================================
# PROFILES
# ============================================================

class _ProfileStore(_Store):
    """Profiles are keyed 1:1 by user_id (unique index)."""

    def find_by_user(self, user_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"user_id": user_id})

    def update_by_user(self, user_id: ObjectId, fields: dict) -> Optional[dict]:
        fields = dict(fields, updated_at=datetime.utcnow())
        return self.collection.find_one_and_update(
            {"user_id": user_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )


class EmployerStore(_ProfileStore):
    collection_key = "employers"


class JobSeekerStore(_ProfileStore):
    collection_key = "jobseekers"


# ============================================================
# JOBS
# ============================================================

class JobStore(_Store):
    collection_key = "jobs"

    def update(self, job_id: ObjectId, fields: dict) -> Optional[dict]:
        fields = dict(fields, updated_at=datetime.utcnow())
        return self.collection.find_one_and_update(
            {"_id": job_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, job_id: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": job_id})
        return result.deleted_count > 0

    def ids_for_employer(self, employer_id: ObjectId) -> List[ObjectId]:
        return [doc["_id"] for doc in self.collection.find({"employer_id": employer_id}, {"_id": 1})]


# ============================================================
# APPLICATIONS
# ============================================================

class ApplicationStore(_Store):
    collection_key = "applications"

    def find_for_jobs(self, job_ids: List[ObjectId], limit: int = 0) -> List[dict]:
        return self.find({"job_id": {"$in": job_ids}}, sort=NEWEST_FIRST, limit=limit)

    def update_unless_status(
        self,
        application_id: ObjectId,
        blocked_statuses: Iterable[str],
        set_fields: dict,
        push_fields: Optional[Dict[str, Any]] = None,
    ) -> Optional[dict]:
        """
        Apply $set/$push only while status is not one of blocked_statuses.

        The status condition lives in the update filter, so a concurrent
        transition into a blocked state makes this return None instead of
        being overwritten.
        """
        update = {"$set": dict(set_fields, updated_at=datetime.utcnow())}
        if push_fields:
            update["$push"] = push_fields
        return self.collection.find_one_and_update(
            {"_id": application_id, "status": {"$nin": list(blocked_statuses)}},
            update,
            return_document=ReturnDocument.AFTER,
        )

    def count_active_for_job(self, job_id: ObjectId, excluded_status: str) -> int:
        return self.collection.count_documents({"job_id": job_id, "status": {"$ne": excluded_status}})

    def active_counts_by_job(self, job_ids: List[ObjectId], excluded_status: str) -> Dict[ObjectId, int]:
        """One aggregate round-trip for a page of jobs."""
        if not job_ids:
            return {}
        pipeline = [
            {"$match": {"job_id": {"$in": job_ids}, "status": {"$ne": excluded_status}}},
            {"$group": {"_id": "$job_id", "count": {"$sum": 1}}},
        ]
        return {row["_id"]: row["count"] for row in self.collection.aggregate(pipeline)}

    def status_counts(self, query: dict) -> Dict[str, int]:
        pipeline = [
            {"$match": query},
            {"$group": {"_id": "$status", "count": {"$sum": 1}}},
        ]
        return {row["_id"]: row["count"] for row in self.collection.aggregate(pipeline)}

    def delete_for_job(self, job_id: ObjectId) -> int:
        result = self.collection.delete_many({"job_id": job_id})
        return result.deleted_count
