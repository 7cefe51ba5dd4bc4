"""
Store-level tests: conditional applicant-list updates and membership lists.
"""

import pytest
from bson import ObjectId

from careerhub.core.errors import ConflictError, InvalidObjectIdError
from careerhub.services.mongo_service import (
    JOB,
    WEBINAR,
    parse_object_id,
    serialize_doc,
    serialize_profile,
    valid_object_ids,
)

from conftest import STUDENT_EMAIL


class TestHelpers:

    def test_parse_object_id_rejects_garbage(self):
        with pytest.raises(InvalidObjectIdError) as exc:
            parse_object_id("not-an-id", "job")
        assert exc.value.message == "Invalid job ID"
        assert exc.value.status_code == 400

    def test_valid_object_ids_drops_malformed(self):
        good = str(ObjectId())
        assert valid_object_ids([good, "xyz", 42, None, "g" * 24]) == [ObjectId(good)]

    def test_serialize_doc_is_recursive(self):
        oid = ObjectId()
        doc = {"_id": oid, "jobs": [{"jobId": oid}]}
        assert serialize_doc(doc) == {"_id": str(oid), "jobs": [{"jobId": str(oid)}]}

    def test_serialize_profile_hides_password_hash(self):
        assert "passwordHash" not in serialize_profile({"collegeEmail": STUDENT_EMAIL, "passwordHash": "x"})


class TestProfileService:

    def test_create_starts_with_empty_membership_lists(self, profiles):
        doc = profiles.create("Asha Verma", STUDENT_EMAIL)
        assert doc["jobs"] == [] and doc["tests"] == [] and doc["webinars"] == []

    def test_create_duplicate_email(self, profiles):
        profiles.create("Asha Verma", STUDENT_EMAIL)
        with pytest.raises(ConflictError):
            profiles.create("Asha Again", STUDENT_EMAIL)

    def test_add_membership_at_most_once(self, profiles):
        profiles.create("Asha Verma", STUDENT_EMAIL)
        oid = ObjectId()
        assert profiles.add_membership(STUDENT_EMAIL, WEBINAR, oid) is True
        assert profiles.add_membership(STUDENT_EMAIL, WEBINAR, oid) is False
        assert len(profiles.get_by_email(STUDENT_EMAIL)["webinars"]) == 1

    def test_remove_membership(self, profiles):
        profiles.create("Asha Verma", STUDENT_EMAIL)
        oid = ObjectId()
        profiles.add_membership(STUDENT_EMAIL, JOB, oid)
        assert profiles.remove_membership(STUDENT_EMAIL, JOB, oid) is True
        assert profiles.get_by_email(STUDENT_EMAIL)["jobs"] == []

    def test_find_by_emails_matches_personal_email(self, profiles):
        profiles.create("Asha Verma", STUDENT_EMAIL)
        profiles.update_fields(STUDENT_EMAIL, {"personalEmail": "asha@gmail.com"})
        found = profiles.find_by_emails(["asha@gmail.com"])
        assert [p["collegeEmail"] for p in found] == [STUDENT_EMAIL]


class TestPostingService:

    def test_push_applicant_rejects_duplicate_email(self, webinars, make_webinar):
        oid = make_webinar()["_id"]
        assert webinars.push_applicant(oid, STUDENT_EMAIL) is True
        assert webinars.push_applicant(oid, STUDENT_EMAIL) is False
        assert webinars.applicant_count(oid) == 1

    def test_push_structured_applicant_rejects_duplicate_email(self, jobs, make_job):
        oid = make_job()["_id"]
        record = {"email": STUDENT_EMAIL, "responses": [], "status": "pending"}
        assert jobs.push_applicant(oid, STUDENT_EMAIL, record) is True
        assert jobs.push_applicant(oid, STUDENT_EMAIL, dict(record)) is False
        assert jobs.applicant_count(oid) == 1

    def test_push_to_missing_posting(self, webinars):
        assert webinars.push_applicant(ObjectId(), STUDENT_EMAIL) is False

    def test_pull_applicant_returns_previous_document(self, jobs, make_job):
        oid = make_job()["_id"]
        jobs.push_applicant(oid, STUDENT_EMAIL, {"email": STUDENT_EMAIL, "status": "pending"})
        before = jobs.pull_applicant(oid, STUDENT_EMAIL)
        assert jobs.find_applicant_entry(before, STUDENT_EMAIL)["status"] == "pending"
        assert jobs.applicant_count(oid) == 0

    def test_pull_applicant_missing_posting(self, jobs):
        assert jobs.pull_applicant(ObjectId(), STUDENT_EMAIL) is None

    def test_set_application_status(self, jobs, make_job):
        oid = make_job()["_id"]
        jobs.push_applicant(oid, STUDENT_EMAIL, {"email": STUDENT_EMAIL, "status": "pending"})
        assert jobs.set_application_status(oid, STUDENT_EMAIL, "accepted") is True
        assert jobs.get(oid)["studentsApplied"][0]["status"] == "accepted"

    def test_list_all_newest_first(self, webinars, make_webinar):
        first = make_webinar(title="First")
        second = make_webinar(title="Second")
        webinars.collection.update_one({"_id": first["_id"]}, {"$set": {"createdAt": second["createdAt"].replace(year=2000)}})
        assert [w["title"] for w in webinars.list_all()] == ["Second", "First"]

    def test_get_many_skips_malformed_ids(self, webinars, make_webinar):
        oid = make_webinar()["_id"]
        assert [w["_id"] for w in webinars.get_many([str(oid), "bad"])] == [oid]
