"""
MongoDB Connection Utility

MongoDB stores:
- User profiles (academic attributes + membership lists)
- Job postings with embedded structured applications
- Test and webinar postings with embedded registrant emails

WHY MongoDB for these?
- Postings are self-contained documents with embedded applicant lists
- Job application forms have a per-posting dynamic schema (inputFields)
- Per-document atomic updates cover every single-side lifecycle write
"""
import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from careerhub.core.config import get_settings

logger = logging.getLogger(__name__)

# Collection names, shared by the services and the index setup
COLLECTIONS = {
    "users": "users",
    "jobs": "jobs",
    "tests": "tests",
    "webinars": "webinars"
}

# One client per process; pymongo pools connections internally
_client: Optional[MongoClient] = None


def get_mongo_client() -> MongoClient:
    global _client
    if _client is None:
        settings = get_settings()
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=settings.mongodb_timeout_ms)
        logger.info(f"MongoDB client created for database '{settings.mongodb_db}'")
    return _client


def get_mongo_db() -> Database:
    return get_mongo_client()[get_settings().mongodb_db]


def get_collection(name: str) -> Collection:
    """Look up one of COLLECTIONS in the portal database."""
    return get_mongo_db()[name]


def close_mongo_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


def test_mongo_connection() -> bool:
    """Ping the server. False (and an error log) when unreachable."""
    try:
        get_mongo_client().admin.command("ping")
        return True
    except PyMongoError as e:
        logger.error(f"MongoDB connection failed: {e}")
        return False


def init_mongo_indexes(db: Optional[Database] = None) -> None:
    """
    Create the indexes the portal relies on. Idempotent; run at startup.
    """
    db = db if db is not None else get_mongo_db()

    # collegeEmail is the immutable profile key
    db[COLLECTIONS["users"]].create_index("collegeEmail", unique=True)

    # Newest-first listings
    for kind in ("jobs", "tests", "webinars"):
        db[COLLECTIONS[kind]].create_index([("createdAt", -1)])

    # Applicant lookups (duplicate checks, admin status updates)
    db[COLLECTIONS["jobs"]].create_index("studentsApplied.email")
    db[COLLECTIONS["tests"]].create_index("studentsApplied")
    db[COLLECTIONS["webinars"]].create_index("studentsApplied")

    logger.info("MongoDB indexes created")
