"""
Job Routes

GET /jobs - List all jobs, newest first
POST /jobs/details - Fetch many jobs by id
GET /jobs/{job_id} - Get job details
GET /jobs/{job_id}/eligibility - Can the caller apply?
PATCH /jobs/{job_id} - Apply to job (student)
DELETE /jobs/{job_id}?email= - Withdraw application (student)
PUT /jobs/{job_id} - Update an application's status (admin)
PATCH /jobs/notInterested/{job_id} - Decline a job (student)
"""

from fastapi import APIRouter, Depends, Query

from careerhub.api.deps import get_jobs, get_profiles
from careerhub.core.auth import Principal, get_current_admin, get_current_user
from careerhub.core.errors import NotFoundError, ValidationError
from careerhub.schemas.schemas import (
    EligibilityResponse,
    IdListRequest,
    JobApplicationRequest,
    NotInterestedRequest,
    StatusUpdateRequest,
)
from careerhub.services import lifecycle
from careerhub.services.deadlines import classify_job_deadline
from careerhub.services.eligibility import batch_label, is_eligible, normalize_labels
from careerhub.services.mongo_service import (
    PostingService,
    ProfileService,
    parse_object_id,
    serialize_doc,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def present_job(doc: dict) -> dict:
    """Serialize a job and attach its deadline badge."""
    job = serialize_doc(doc)
    job["deadlineStatus"] = classify_job_deadline(doc.get("deadline"))
    return job


@router.get("")
async def list_jobs(user: Principal = Depends(get_current_user), jobs: PostingService = Depends(get_jobs)):
    """List all job postings, newest first."""
    return {"jobs": [present_job(doc) for doc in jobs.list_all()]}


@router.post("/details")
async def job_details(
    request: IdListRequest,
    user: Principal = Depends(get_current_user),
    jobs: PostingService = Depends(get_jobs),
):
    """Fetch the jobs in jobIds. Malformed ids are skipped."""
    ids = request.ids("job_ids")
    if not ids:
        raise ValidationError("jobIds must be a non-empty array")
    return {"jobs": [present_job(doc) for doc in jobs.get_many(ids)]}


@router.patch("/notInterested/{job_id}")
async def not_interested(
    job_id: str,
    request: NotInterestedRequest,
    user: Principal = Depends(get_current_user),
    jobs: PostingService = Depends(get_jobs),
    profiles: ProfileService = Depends(get_profiles),
):
    """Record that the caller is not interested in a job."""
    return lifecycle.mark_not_interested(
        jobs, profiles, user, job_id, request.email, not_interested=request.not_interested
    )


@router.get("/{job_id}")
async def get_job(job_id: str, user: Principal = Depends(get_current_user), jobs: PostingService = Depends(get_jobs)):
    """Get job details by ID."""
    doc = jobs.get(parse_object_id(job_id, "job"))
    if not doc:
        raise NotFoundError("Job not found")
    return {"job": present_job(doc)}


@router.get("/{job_id}/eligibility", response_model=EligibilityResponse)
async def job_eligibility(
    job_id: str,
    user: Principal = Depends(get_current_user),
    jobs: PostingService = Depends(get_jobs),
    profiles: ProfileService = Depends(get_profiles),
):
    """Whether the caller's batch is in the job's eligibility list."""
    doc = jobs.get(parse_object_id(job_id, "job"))
    if not doc:
        raise NotFoundError("Job not found")

    profile = profiles.get_by_email(user.email)
    if not profile:
        raise NotFoundError("User not found")

    start, end = profile.get("batchStart"), profile.get("batchEnd")
    return EligibilityResponse(
        eligible=is_eligible(start, end, doc.get("eligibility")),
        batch=batch_label(start, end),
        eligibility=normalize_labels(doc.get("eligibility")),
    )


@router.patch("/{job_id}")
async def apply_to_job(
    job_id: str,
    request: JobApplicationRequest,
    user: Principal = Depends(get_current_user),
    jobs: PostingService = Depends(get_jobs),
    profiles: ProfileService = Depends(get_profiles),
):
    """
    Apply to a job with answers to its application form.

    Body: {email, responses: [{fieldName, value}], appliedAt}
    """
    return lifecycle.apply_to_job(
        jobs, profiles, user, job_id,
        email=request.email,
        responses=request.responses,
        applied_at=request.applied_at,
    )


@router.delete("/{job_id}")
async def withdraw_application(
    job_id: str,
    email: str = Query(...),
    user: Principal = Depends(get_current_user),
    jobs: PostingService = Depends(get_jobs),
    profiles: ProfileService = Depends(get_profiles),
):
    """Withdraw the caller's application."""
    return lifecycle.withdraw_from_posting(jobs, profiles, user, job_id, email)


@router.put("/{job_id}")
async def update_application_status(
    job_id: str,
    request: StatusUpdateRequest,
    admin: Principal = Depends(get_current_admin),
    jobs: PostingService = Depends(get_jobs),
):
    """Move an application to pending / reviewed / accepted / rejected."""
    return lifecycle.update_application_status(jobs, job_id, request.application_email, request.new_status)
