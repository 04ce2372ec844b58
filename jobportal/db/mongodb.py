"""
MongoDB Connection Utility

MongoDB stores every entity of the portal:
- users: login identities with a role claim
- employers / jobseekers: one profile document per identity
- jobs: postings owned by an employer profile
- applications: one job seeker's candidacy for one job

References between documents are plain ObjectId fields (job_id,
employer_id, job_seeker_id) resolved by explicit lookups.
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from jobportal.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def set_mongo_client(client: MongoClient = None) -> None:
    """
    Replace the global client (e.g. with mongomock in tests).
    Passing None drops the current client so the next call reconnects.
    """
    global _client, _db
    _client = client
    _db = None


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection by name (see COLLECTIONS)."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "employers": "employers",
    "jobseekers": "jobseekers",
    "jobs": "jobs",
    "applications": "applications",
}


def init_mongo_indexes():
    """
    Create indexes. Call this once during app startup.

    The (job_id, job_seeker_id) index is what rejects a second application
    for the same pair; submission never checks for an existing document first.
    """
    db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)

    # Exactly one profile per identity
    db[COLLECTIONS["employers"]].create_index("user_id", unique=True)
    db[COLLECTIONS["jobseekers"]].create_index("user_id", unique=True)

    db[COLLECTIONS["jobs"]].create_index("employer_id")
    db[COLLECTIONS["jobs"]].create_index([("status", ASCENDING), ("published_at", DESCENDING)])

    db[COLLECTIONS["applications"]].create_index(
        [("job_id", ASCENDING), ("job_seeker_id", ASCENDING)],
        unique=True,
        name="job_seeker_per_job_unique",
    )
    db[COLLECTIONS["applications"]].create_index("job_seeker_id")

    logger.info("MongoDB indexes created successfully")
