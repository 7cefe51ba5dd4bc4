"""
Application Lifecycle Service

Governs a student's relationship to one posting:

    NONE --apply/register--> APPLIED --withdraw--> NONE
    NONE --not interested--> NOT_INTERESTED            (jobs only)

and the admin-side status of a job application:

    pending -> reviewed | accepted | rejected

Every transition writes two documents: the posting's applicant list and the
profile's membership list. The pair is run as a small saga:
1. conditional update on the posting (the store rejects a duplicate email)
2. update on the profile
3. if step 2 raises, step 1 is undone and the error propagates

Check order for every student action:
    body email == caller (403) -> posting id (400) -> posting exists (404)
    -> duplicate (409) -> deadline (400) -> profile exists (404)
    -> eligibility, jobs only (403) -> required form fields, jobs only (400)
"""

import logging
from datetime import datetime
from typing import List, Optional

from careerhub.core.auth import Principal, ensure_same_identity
from careerhub.core.config import get_settings
from careerhub.core.errors import (
    ConflictError,
    DeadlinePassedError,
    InvalidStatusError,
    NotEligibleError,
    NotFoundError,
    ValidationError,
)
from careerhub.schemas.schemas import ApplicationStatus, FieldResponse
from careerhub.services.deadlines import is_deadline_passed, utc_now
from careerhub.services.eligibility import check_profile_eligibility
from careerhub.services.mongo_service import (
    JOB,
    PostingService,
    ProfileService,
    parse_object_id,
)

logger = logging.getLogger(__name__)

VALID_STATUSES = [s.value for s in ApplicationStatus]


def _load_posting(postings: PostingService, posting_id: str):
    oid = parse_object_id(posting_id, postings.kind.name)
    posting = postings.get(oid)
    if not posting:
        raise NotFoundError(f"{postings.kind.label} not found")
    return oid, posting


def _load_profile(profiles: ProfileService, email: str) -> dict:
    profile = profiles.get_by_email(email)
    if not profile:
        raise NotFoundError("User not found")
    return profile


def missing_required_fields(input_fields: Optional[List[dict]], responses: List[FieldResponse]) -> List[str]:
    """
    Names of required form fields with no usable answer.

    A value counts as missing when it is None, empty, or a blank string.
    """
    answers = {r.field_name: r.value for r in responses}
    missing = []
    for field in input_fields or []:
        if not field.get("required"):
            continue
        value = answers.get(field.get("fieldName"))
        if value is None or value == "" or value == [] or (isinstance(value, str) and not value.strip()):
            missing.append(field.get("fieldName"))
    return missing


def _record_membership(profiles: ProfileService, postings: PostingService, oid, email: str, now: datetime) -> None:
    """
    Step 2 of the saga; on failure the posting-side entry is pulled back.

    A write that matches nothing counts as a failure unless the profile
    already lists the posting.
    """
    try:
        added = profiles.add_membership(email, postings.kind, oid, applied_at=now)
    except Exception:
        logger.exception(
            f"Profile update failed for {email} on {postings.kind.name} {oid}; rolling back applicant entry"
        )
        postings.pull_applicant(oid, email)
        raise

    if added:
        return
    profile = profiles.get_by_email(email)
    if profile and profiles.has_membership(profile, postings.kind, oid):
        return

    logger.error(f"Profile {email} vanished while recording {postings.kind.name} {oid}; rolling back applicant entry")
    postings.pull_applicant(oid, email)
    raise NotFoundError("User not found")


# ============================================================
# APPLY (structured job application)
# ============================================================

def apply_to_job(
    jobs: PostingService,
    profiles: ProfileService,
    principal: Principal,
    job_id: str,
    email: str,
    responses: List[FieldResponse],
    applied_at: datetime,
    now: Optional[datetime] = None,
) -> dict:
    """
    Submit a structured application to a job.

    Returns:
        {"message": ..., "applicantCount": int}
    """
    now = now or utc_now()
    ensure_same_identity(principal, email, "Cannot apply on behalf of another user")

    oid, job = _load_posting(jobs, job_id)

    if jobs.has_applicant(job, email):
        raise ConflictError("You have already applied for this job", error_code="ALREADY_APPLIED")

    if is_deadline_passed(job.get("deadline"), now):
        raise DeadlinePassedError()

    _load_profile(profiles, email)

    if get_settings().enforce_eligibility and not check_profile_eligibility(profiles, email, job):
        raise NotEligibleError()

    missing = missing_required_fields(job.get("inputFields"), responses)
    if missing:
        raise ValidationError(f"{missing[0]} is required", error_code="MISSING_FIELD")

    record = {
        "email": email,
        "responses": [{"fieldName": r.field_name, "value": r.value} for r in responses],
        "appliedAt": applied_at,
        "applicantName": principal.display_name,
        "status": ApplicationStatus.pending.value,
    }
    if not jobs.push_applicant(oid, email, record):
        # Lost a race with a concurrent apply for the same email
        raise ConflictError("You have already applied for this job", error_code="ALREADY_APPLIED")

    _record_membership(profiles, jobs, oid, email, now)

    logger.info(f"{email} applied to job {oid}")
    return {
        "message": "Application submitted successfully",
        "applicantCount": jobs.applicant_count(oid),
    }


# ============================================================
# REGISTER (plain test / webinar registration)
# ============================================================

def register_for_posting(
    postings: PostingService,
    profiles: ProfileService,
    principal: Principal,
    posting_id: str,
    email: str,
    now: Optional[datetime] = None,
) -> dict:
    """
    Register the caller for a test or webinar.

    Returns:
        {"message": ..., "totalApplicants": int} for tests,
        {"message": ..., "registrantCount": int} for webinars
    """
    now = now or utc_now()
    kind = postings.kind
    verb = "apply" if kind.name == "test" else "register"
    ensure_same_identity(principal, email, f"Cannot {verb} on behalf of another user")

    oid, posting = _load_posting(postings, posting_id)

    duplicate = "Already applied for this test" if kind.name == "test" else f"Already registered for this {kind.name}"
    if postings.has_applicant(posting, email):
        raise ConflictError(duplicate, error_code="ALREADY_APPLIED")

    if is_deadline_passed(posting.get("deadline"), now):
        raise DeadlinePassedError()

    profile = _load_profile(profiles, email)
    if profiles.has_membership(profile, kind, oid):
        raise ConflictError(f"{kind.label} already exists in user record", error_code="ALREADY_APPLIED")

    if not postings.push_applicant(oid, email):
        raise ConflictError(duplicate, error_code="ALREADY_APPLIED")

    _record_membership(profiles, postings, oid, email, now)

    count = postings.applicant_count(oid)
    logger.info(f"{email} registered for {kind.name} {oid}")
    if kind.name == "test":
        return {"message": "Applied successfully", "totalApplicants": count}
    return {"message": f"Successfully registered for {kind.name}", "registrantCount": count}


# ============================================================
# WITHDRAW
# ============================================================

def withdraw_from_posting(
    postings: PostingService,
    profiles: ProfileService,
    principal: Principal,
    posting_id: str,
    email: Optional[str],
) -> dict:
    """
    Remove the caller from a posting's applicant list and the posting from
    the caller's membership list.

    A membership entry left behind without its applicant entry is still
    removed. Withdrawing when neither side lists the caller is a conflict.
    """
    kind = postings.kind
    ensure_same_identity(principal, email, "Cannot withdraw on behalf of another user")
    oid = parse_object_id(posting_id, kind.name)

    before = postings.pull_applicant(oid, email)
    if before is None:
        raise NotFoundError(f"{kind.label} not found")

    removed = postings.find_applicant_entry(before, email)
    if removed is None:
        if not profiles.remove_membership(email, kind, oid):
            raise ConflictError(f"Not registered for this {kind.name}", error_code="NOT_REGISTERED")
        logger.warning(f"Removed orphaned {kind.name} {oid} membership from {email}")
    else:
        _remove_membership(profiles, postings, oid, email, removed)

    remaining = postings.applicant_count(oid)
    logger.info(f"{email} withdrew from {kind.name} {oid}")
    if kind.structured:
        return {"message": "Application withdrawn successfully", "remainingApplicants": remaining}
    if kind.name == "test":
        return {"message": "Withdrawn successfully", "remainingApplicants": remaining}
    return {"message": "Registration withdrawn successfully", "remainingRegistrants": remaining}


def _remove_membership(profiles: ProfileService, postings: PostingService, oid, email: str, removed) -> None:
    """Profile side of a withdraw; on failure the applicant entry is restored."""
    kind = postings.kind
    try:
        profiles.remove_membership(email, kind, oid)
    except Exception:
        logger.exception(f"Profile update failed for {email} on {kind.name} {oid}; restoring applicant entry")
        postings.push_applicant(oid, email, removed)
        raise


# ============================================================
# NOT INTERESTED (jobs)
# ============================================================

def mark_not_interested(
    jobs: PostingService,
    profiles: ProfileService,
    principal: Principal,
    job_id: str,
    email: str,
    not_interested: bool = True,
) -> dict:
    """
    Record that the caller declined a job.

    Applying and declining are not made mutually exclusive here.
    """
    ensure_same_identity(principal, email, "Cannot respond on behalf of another user")
    if not_interested is not True:
        raise ValidationError("notInterested must be true")

    oid, job = _load_posting(jobs, job_id)

    if email in (job.get("studentsNotInterested") or []):
        raise ConflictError("Already marked as not interested", error_code="ALREADY_DECLINED")

    _load_profile(profiles, email)

    if get_settings().enforce_eligibility and not check_profile_eligibility(profiles, email, job):
        raise NotEligibleError()

    if not jobs.add_not_interested(oid, email):
        raise ConflictError("Already marked as not interested", error_code="ALREADY_DECLINED")

    job = jobs.get(oid)
    logger.info(f"{email} marked job {oid} as not interested")
    return {
        "message": "Marked as not interested",
        "notInterestedCount": len(job.get("studentsNotInterested") or []),
    }


# ============================================================
# ADMIN STATUS TRANSITION (jobs)
# ============================================================

def update_application_status(
    jobs: PostingService,
    job_id: str,
    application_email: str,
    new_status: str,
) -> dict:
    if new_status not in VALID_STATUSES:
        raise InvalidStatusError(VALID_STATUSES)

    oid = parse_object_id(job_id, JOB.name)

    if not jobs.set_application_status(oid, application_email, new_status):
        raise NotFoundError("Job or application not found")

    logger.info(f"Application of {application_email} on job {oid} set to {new_status}")
    return {"message": "Application status updated successfully", "newStatus": new_status}
