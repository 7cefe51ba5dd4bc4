"""
Admin Routes (administrators only)

POST /admin/jobs | /admin/tests | /admin/webinars - Create posting
PATCH /admin/jobs/{id} | tests/{id} | webinars/{id} - Update posting content
DELETE /admin/{kind}/{id} - Delete posting
GET /admin/jobs/{id}/applicants - Structured applications
GET /admin/jobs/{id}/not-interested - Profiles of students who declined
GET /admin/tests/{id}/students - Profiles of test applicants
GET /admin/webinars/{id}/students - Profiles of webinar registrants
"""

import logging

from fastapi import APIRouter, Depends

from careerhub.api.deps import get_jobs, get_profiles, get_tests, get_webinars
from careerhub.core.auth import Principal, get_current_admin
from careerhub.core.errors import NotFoundError, ValidationError
from careerhub.schemas.schemas import (
    JobCreate,
    JobUpdate,
    PlacementTestCreate,
    PlacementTestUpdate,
    WebinarCreate,
    WebinarUpdate,
)
from careerhub.services.mongo_service import (
    POSTING_KINDS,
    PostingService,
    ProfileService,
    parse_object_id,
    serialize_doc,
    serialize_profile,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(get_current_admin)])


def _create(postings: PostingService, data: dict) -> dict:
    doc = postings.create(data)
    return {"message": f"{postings.kind.label} created successfully", postings.kind.name: serialize_doc(doc)}


def _update(postings: PostingService, posting_id: str, updates: dict) -> dict:
    oid = parse_object_id(posting_id, postings.kind.name)
    if not updates:
        raise ValidationError("No updates provided")

    doc = postings.update(oid, updates)
    if not doc:
        raise NotFoundError(f"{postings.kind.label} not found")

    logger.info(f"Updated {postings.kind.name} {oid}: {', '.join(sorted(updates))}")
    return {"message": f"{postings.kind.label} updated successfully", postings.kind.name: serialize_doc(doc)}


def _students(profiles: ProfileService, emails: list) -> dict:
    """One entry per listed email, in list order; unknown emails stay as {"email": ...}."""
    by_email = {}
    for profile in profiles.find_by_emails(emails):
        for key in ("collegeEmail", "personalEmail"):
            if profile.get(key):
                by_email.setdefault(profile[key], profile)

    students = [serialize_profile(by_email[e]) if e in by_email else {"email": e} for e in emails]
    return {"students": students, "count": len(students)}


def _load(postings: PostingService, posting_id: str) -> dict:
    doc = postings.get(parse_object_id(posting_id, postings.kind.name))
    if not doc:
        raise NotFoundError(f"{postings.kind.label} not found")
    return doc


# ============================================================
# CREATE
# ============================================================

@router.post("/jobs", status_code=201)
async def create_job(job: JobCreate, jobs: PostingService = Depends(get_jobs)):
    """Create a job posting with its eligibility list and application form."""
    return _create(jobs, job.to_document())


@router.post("/tests", status_code=201)
async def create_test(test: PlacementTestCreate, tests: PostingService = Depends(get_tests)):
    return _create(tests, test.to_document())


@router.post("/webinars", status_code=201)
async def create_webinar(webinar: WebinarCreate, webinars: PostingService = Depends(get_webinars)):
    return _create(webinars, webinar.to_document())


# ============================================================
# UPDATE (content only; applicant lists are owned by the lifecycle)
# ============================================================

@router.patch("/jobs/{job_id}")
async def update_job(job_id: str, job: JobUpdate, jobs: PostingService = Depends(get_jobs)):
    return _update(jobs, job_id, job.to_updates())


@router.patch("/tests/{test_id}")
async def update_test(test_id: str, test: PlacementTestUpdate, tests: PostingService = Depends(get_tests)):
    return _update(tests, test_id, test.to_updates())


@router.patch("/webinars/{webinar_id}")
async def update_webinar(webinar_id: str, webinar: WebinarUpdate, webinars: PostingService = Depends(get_webinars)):
    return _update(webinars, webinar_id, webinar.to_updates())


# ============================================================
# DELETE
# ============================================================

@router.delete("/{kind}/{posting_id}")
async def delete_posting(
    kind: str,
    posting_id: str,
    admin: Principal = Depends(get_current_admin),
    profiles: ProfileService = Depends(get_profiles),
    jobs: PostingService = Depends(get_jobs),
    tests: PostingService = Depends(get_tests),
    webinars: PostingService = Depends(get_webinars),
):
    """
    Delete a posting and drop it from every profile's membership list.
    """
    if kind not in POSTING_KINDS:
        raise NotFoundError(f"Unknown posting kind '{kind}'")

    postings = {"jobs": jobs, "tests": tests, "webinars": webinars}[kind]
    oid = parse_object_id(posting_id, postings.kind.name)

    if not postings.delete(oid):
        raise NotFoundError(f"{postings.kind.label} not found")

    cleaned = profiles.purge_posting(postings.kind, oid)
    logger.info(f"{admin.email} deleted {postings.kind.name} {oid} ({cleaned} profiles cleaned)")
    return {"message": f"{postings.kind.label} deleted successfully"}


# ============================================================
# APPLICANT LISTINGS
# ============================================================

@router.get("/jobs/{job_id}/applicants")
async def job_applicants(job_id: str, jobs: PostingService = Depends(get_jobs)):
    """Structured applications, with answers and review status."""
    job = _load(jobs, job_id)
    applicants = serialize_doc(job.get("studentsApplied") or [])
    return {"applicants": applicants, "count": len(applicants)}


@router.get("/jobs/{job_id}/not-interested")
async def job_not_interested(
    job_id: str,
    jobs: PostingService = Depends(get_jobs),
    profiles: ProfileService = Depends(get_profiles),
):
    job = _load(jobs, job_id)
    return _students(profiles, job.get("studentsNotInterested") or [])


@router.get("/tests/{test_id}/students")
async def list_test_students(
    test_id: str,
    tests: PostingService = Depends(get_tests),
    profiles: ProfileService = Depends(get_profiles),
):
    test = _load(tests, test_id)
    return _students(profiles, tests.applicant_emails(test))


@router.get("/webinars/{webinar_id}/students")
async def webinar_students(
    webinar_id: str,
    webinars: PostingService = Depends(get_webinars),
    profiles: ProfileService = Depends(get_profiles),
):
    webinar = _load(webinars, webinar_id)
    return _students(profiles, webinars.applicant_emails(webinar))
