#!/usr/bin/env python3
"""
Seed Script

Inserts a sample student plus one job, test and webinar, then walks the
student through apply / register / withdraw so the collections can be
inspected by hand.
Run: python scripts/seed_data.py
"""
import sys
sys.path.insert(0, '.')

from datetime import timedelta

from careerhub.core.auth import Principal, hash_password
from careerhub.core.errors import ConflictError
from careerhub.db.mongodb import init_mongo_indexes, test_mongo_connection
from careerhub.schemas.schemas import FieldResponse
from careerhub.services import lifecycle
from careerhub.services.deadlines import utc_now
from careerhub.services.mongo_service import get_mongo_services

STUDENT_EMAIL = "asha.verma@college.edu"


def seed_student(users):
    print("\n[1] Seeding student profile...")
    try:
        users.create("Asha Verma", STUDENT_EMAIL, hash_password("password123"))
        print(f"    ✅ Created {STUDENT_EMAIL}")
    except ConflictError:
        print(f"    ⚠️  {STUDENT_EMAIL} already exists")
    users.update_fields(STUDENT_EMAIL, {"batchStart": 2021, "batchEnd": 2025, "department": "CSE"})


def seed_postings(services):
    print("\n[2] Seeding postings...")
    now = utc_now()
    job = services["jobs"].create({
        "title": "Backend Engineer Intern",
        "company": "TechCorp India",
        "location": "Bangalore",
        "mode": "hybrid",
        "deadline": now + timedelta(days=5),
        "eligibility": ["2021–2025"],
        "inputFields": [
            {"fieldName": "Why this role?", "type": "textarea", "required": True, "options": []},
        ],
    })
    test = services["tests"].create({
        "title": "Aptitude Round 1",
        "date": now + timedelta(days=2),
        "deadline": now + timedelta(days=1),
    })
    webinar = services["webinars"].create({
        "title": "Cracking System Design",
        "speaker": "R. Iyer",
        "date": now + timedelta(days=10),
    })
    print(f"    ✅ Job {job['_id']}, Test {test['_id']}, Webinar {webinar['_id']}")
    return job, test, webinar


def walk_lifecycle(services, job, test, webinar):
    print("\n[3] Running the application lifecycle...")
    student = Principal(email=STUDENT_EMAIL, name="Asha Verma")
    users = services["users"]

    result = lifecycle.apply_to_job(
        services["jobs"], users, student, str(job["_id"]), STUDENT_EMAIL,
        responses=[FieldResponse(field_name="Why this role?", value="I enjoy building APIs")],
        applied_at=utc_now(),
    )
    print(f"    ✅ Job: {result}")

    result = lifecycle.register_for_posting(services["tests"], users, student, str(test["_id"]), STUDENT_EMAIL)
    print(f"    ✅ Test: {result}")

    result = lifecycle.register_for_posting(services["webinars"], users, student, str(webinar["_id"]), STUDENT_EMAIL)
    print(f"    ✅ Webinar: {result}")

    result = lifecycle.withdraw_from_posting(services["webinars"], users, student, str(webinar["_id"]), STUDENT_EMAIL)
    print(f"    ✅ Webinar withdraw: {result}")


def main():
    print("=" * 50)
    print("CAREERHUB - SEED DATA")
    print("=" * 50)

    if not test_mongo_connection():
        print("❌ MongoDB not reachable")
        sys.exit(1)

    init_mongo_indexes()
    services = get_mongo_services()

    seed_student(services["users"])
    job, test, webinar = seed_postings(services)
    walk_lifecycle(services, job, test, webinar)

    print("\n" + "=" * 50)
    print("Seeding complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
