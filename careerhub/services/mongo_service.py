"""
MongoDB Service - CRUD operations for the portal collections.

Collections in this database:
1. users     - Student/admin profiles keyed by collegeEmail, with the
               membership lists jobs[], tests[], webinars[]
2. jobs      - Job postings; studentsApplied holds structured applications
3. tests     - Test postings; studentsApplied holds plain emails
4. webinars  - Webinar postings; studentsApplied holds plain emails

Every applicant-list write is a single conditional update so that the store,
not a read-then-write check, decides whether an email is already present.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Iterable
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from careerhub.db.mongodb import get_collection, COLLECTIONS
from careerhub.core.errors import ConflictError, InvalidObjectIdError

logger = logging.getLogger(__name__)


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc):
    """Convert MongoDB document to JSON-serializable dict (recursively)."""
    if doc is None:
        return None
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, dict):
        return {key: serialize_doc(value) for key, value in doc.items()}
    if isinstance(doc, list):
        return [serialize_doc(item) for item in doc]
    return doc


def serialize_profile(doc: dict) -> Optional[dict]:
    """Serialize a profile without its password hash."""
    if doc is None:
        return None
    doc = {k: v for k, v in doc.items() if k != "passwordHash"}
    return serialize_doc(doc)


def parse_object_id(value: str, kind: str) -> ObjectId:
    """Parse a path/body ID, raising a 400 for anything that is not an ObjectId."""
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidObjectIdError(kind)
    return ObjectId(value)


def valid_object_ids(values: Iterable) -> List[ObjectId]:
    """Keep only well formed 24-hex ids, dropping the rest silently."""
    return [ObjectId(v) for v in values if isinstance(v, str) and len(v) == 24 and ObjectId.is_valid(v)]


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# POSTING KINDS
# Job, Test and Webinar share one lifecycle, parameterized here
# ============================================================

@dataclass(frozen=True)
class PostingKind:
    """
    Describes one posting collection and its profile-side membership list.

    Attributes:
        name: 'job', 'test' or 'webinar' (used in messages and ID errors)
        collection: Mongo collection holding the postings
        membership_field: profile list recording the user's postings
        id_field: key of the posting id inside a membership entry
        structured: True when studentsApplied holds application records
                    ({email, responses, ...}) rather than plain emails
    """

    name: str
    collection: str
    membership_field: str
    id_field: str
    structured: bool = False

    @property
    def label(self) -> str:
        return self.name.capitalize()


JOB = PostingKind("job", COLLECTIONS["jobs"], "jobs", "jobId", structured=True)
TEST = PostingKind("test", COLLECTIONS["tests"], "tests", "testId")
WEBINAR = PostingKind("webinar", COLLECTIONS["webinars"], "webinars", "webinarId")

POSTING_KINDS: Dict[str, PostingKind] = {"jobs": JOB, "tests": TEST, "webinars": WEBINAR}


# ============================================================
# USERS COLLECTION
# Profiles and their membership lists
# ============================================================

class ProfileService:
    """
    Handles user profile storage.
    collegeEmail is the immutable key used by every other collection.
    """

    def __init__(self, collection: Collection = None):
        self.collection: Collection = collection if collection is not None else get_collection(COLLECTIONS["users"])

    def get_by_email(self, email: str) -> Optional[dict]:
        """Fetch a profile by collegeEmail (raw document)."""
        return self.collection.find_one({"collegeEmail": email})

    def find_by_emails(self, emails: List[str]) -> List[dict]:
        """Profiles whose college or personal email is in `emails`."""
        if not emails:
            return []
        cursor = self.collection.find({
            "$or": [
                {"collegeEmail": {"$in": emails}},
                {"personalEmail": {"$in": emails}},
            ]
        })
        return list(cursor)

    def create(self, name: str, college_email: str, password_hash: Optional[str] = None) -> dict:
        """
        Insert a new profile with empty membership lists.

        Raises:
            ConflictError: if the collegeEmail is already registered
        """
        doc = {
            "name": name,
            "collegeEmail": college_email,
            "passwordHash": password_hash,
            "jobs": [],
            "tests": [],
            "webinars": [],
            "createdAt": _now(),
        }
        if self.get_by_email(college_email):
            raise ConflictError("Email already registered", error_code="ALREADY_REGISTERED")
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Email already registered", error_code="ALREADY_REGISTERED")
        doc["_id"] = result.inserted_id
        return doc

    def update_fields(self, email: str, updates: Dict[str, Any]) -> Optional[dict]:
        """Set profile fields, returning the updated document (None if missing)."""
        updates = dict(updates)
        updates["updatedAt"] = _now()
        return self.collection.find_one_and_update(
            {"collegeEmail": email},
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )

    def has_membership(self, profile: dict, kind: PostingKind, posting_id: ObjectId) -> bool:
        return any(entry.get(kind.id_field) == posting_id for entry in profile.get(kind.membership_field) or [])

    def add_membership(self, email: str, kind: PostingKind, posting_id: ObjectId, applied_at: datetime = None) -> bool:
        """
        Append {<kind>Id, appliedAt} unless the posting is already listed.

        Returns:
            True if an entry was added
        """
        result = self.collection.update_one(
            {"collegeEmail": email, f"{kind.membership_field}.{kind.id_field}": {"$ne": posting_id}},
            {"$push": {kind.membership_field: {kind.id_field: posting_id, "appliedAt": applied_at or _now()}}}
        )
        return result.modified_count > 0

    def remove_membership(self, email: str, kind: PostingKind, posting_id: ObjectId) -> bool:
        result = self.collection.update_one(
            {"collegeEmail": email},
            {"$pull": {kind.membership_field: {kind.id_field: posting_id}}}
        )
        return result.modified_count > 0

    def purge_posting(self, kind: PostingKind, posting_id: ObjectId) -> int:
        """Drop a deleted posting from every profile's membership list."""
        result = self.collection.update_many(
            {f"{kind.membership_field}.{kind.id_field}": posting_id},
            {"$pull": {kind.membership_field: {kind.id_field: posting_id}}}
        )
        return result.modified_count


# ============================================================
# POSTING COLLECTIONS (jobs, tests, webinars)
# ============================================================

class PostingService:
    """
    Handles one posting collection and its embedded applicant list.
    """

    def __init__(self, kind: PostingKind, collection: Collection = None):
        self.kind = kind
        self.collection: Collection = collection if collection is not None else get_collection(kind.collection)

    # ---------- reads ----------

    def list_all(self) -> List[dict]:
        """All postings, newest first."""
        return list(self.collection.find().sort("createdAt", -1))

    def get(self, posting_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": posting_id})

    def get_many(self, ids: Iterable) -> List[dict]:
        """Fetch postings by id list; malformed ids are dropped."""
        object_ids = valid_object_ids(ids)
        if not object_ids:
            return []
        return list(self.collection.find({"_id": {"$in": object_ids}}).sort("createdAt", -1))

    def applicant_count(self, posting_id: ObjectId) -> int:
        doc = self.collection.find_one({"_id": posting_id}, {"studentsApplied": 1})
        return len((doc or {}).get("studentsApplied") or [])

    def applicant_emails(self, posting: dict) -> List[str]:
        applied = posting.get("studentsApplied") or []
        if self.kind.structured:
            return [entry.get("email") for entry in applied]
        return list(applied)

    def has_applicant(self, posting: dict, email: str) -> bool:
        return email in self.applicant_emails(posting)

    # ---------- admin writes ----------

    def create(self, data: Dict[str, Any]) -> dict:
        doc = dict(data)
        doc.setdefault("studentsApplied", [])
        if self.kind.structured:
            doc.setdefault("studentsNotInterested", [])
        doc["createdAt"] = _now()
        doc["updatedAt"] = doc["createdAt"]
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"Created {self.kind.name} {result.inserted_id}")
        return doc

    def update(self, posting_id: ObjectId, updates: Dict[str, Any]) -> Optional[dict]:
        updates = dict(updates)
        updates["updatedAt"] = _now()
        return self.collection.find_one_and_update(
            {"_id": posting_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )

    def delete(self, posting_id: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": posting_id})
        return result.deleted_count > 0

    # ---------- applicant list ----------

    def _absent_filter(self, posting_id: ObjectId, email: str) -> dict:
        if self.kind.structured:
            return {"_id": posting_id, "studentsApplied.email": {"$ne": email}}
        return {"_id": posting_id, "studentsApplied": {"$ne": email}}

    def push_applicant(self, posting_id: ObjectId, email: str, entry=None) -> bool:
        """
        Append an applicant unless the email is already listed.

        Args:
            entry: the application record for structured postings; plain
                   postings store the email itself

        Returns:
            True if appended, False if the posting is missing or the email
            was already present
        """
        value = entry if self.kind.structured else email
        result = self.collection.update_one(
            self._absent_filter(posting_id, email),
            {"$push": {"studentsApplied": value}}
        )
        return result.modified_count > 0

    def pull_applicant(self, posting_id: ObjectId, email: str) -> Optional[dict]:
        """
        Remove an applicant.

        Returns:
            The posting as it was BEFORE the pull, or None if it does not exist
        """
        target = {"email": email} if self.kind.structured else email
        return self.collection.find_one_and_update(
            {"_id": posting_id},
            {"$pull": {"studentsApplied": target}},
            return_document=ReturnDocument.BEFORE
        )

    def find_applicant_entry(self, posting: dict, email: str):
        for entry in posting.get("studentsApplied") or []:
            if (entry.get("email") if self.kind.structured else entry) == email:
                return entry
        return None

    def set_application_status(self, posting_id: ObjectId, email: str, status: str) -> bool:
        """Set studentsApplied.$.status for one applicant (structured postings)."""
        result = self.collection.update_one(
            {"_id": posting_id, "studentsApplied.email": email},
            {"$set": {"studentsApplied.$.status": status, "updatedAt": _now()}}
        )
        return result.matched_count > 0

    def add_not_interested(self, posting_id: ObjectId, email: str) -> bool:
        result = self.collection.update_one(
            {"_id": posting_id, "studentsNotInterested": {"$ne": email}},
            {"$push": {"studentsNotInterested": email}}
        )
        return result.modified_count > 0


# ============================================================
# CONVENIENCE FUNCTION: Get all services
# ============================================================

def get_mongo_services() -> dict:
    """
    Get all MongoDB service instances.

    Usage:
        services = get_mongo_services()
        services['jobs'].list_all()
    """
    return {
        "users": ProfileService(),
        "jobs": PostingService(JOB),
        "tests": PostingService(TEST),
        "webinars": PostingService(WEBINAR)
    }
