"""
Test Routes

GET /tests - List placement tests
POST /tests/details - Fetch many tests by id
GET /tests/{test_id} - Get test details
PATCH /tests/{test_id} - Apply for a test
DELETE /tests/{test_id}?email= - Withdraw from a test
"""

from fastapi import APIRouter, Depends, Query

from careerhub.api.deps import get_profiles, get_tests
from careerhub.core.auth import Principal, get_current_user
from careerhub.core.errors import NotFoundError, ValidationError
from careerhub.schemas.schemas import IdListRequest, RegistrationRequest
from careerhub.services import lifecycle
from careerhub.services.deadlines import classify_test_date, classify_test_deadline
from careerhub.services.mongo_service import (
    PostingService,
    ProfileService,
    parse_object_id,
    serialize_doc,
)

router = APIRouter(prefix="/tests", tags=["Tests"])


def present_test(doc: dict) -> dict:
    test = serialize_doc(doc)
    test["deadlineStatus"] = classify_test_deadline(doc.get("deadline"))
    test["dateStatus"] = classify_test_date(doc.get("date"))
    return test


@router.get("")
async def list_tests(user: Principal = Depends(get_current_user), tests: PostingService = Depends(get_tests)):
    return {"tests": [present_test(doc) for doc in tests.list_all()]}


@router.post("/details")
async def tests_details(
    request: IdListRequest,
    user: Principal = Depends(get_current_user),
    tests: PostingService = Depends(get_tests),
):
    ids = request.ids("test_ids")
    if not ids:
        raise ValidationError("testIds must be a non-empty array")
    return {"tests": [present_test(doc) for doc in tests.get_many(ids)]}


@router.get("/{test_id}")
async def get_test(test_id: str, user: Principal = Depends(get_current_user), tests: PostingService = Depends(get_tests)):
    doc = tests.get(parse_object_id(test_id, "test"))
    if not doc:
        raise NotFoundError("Test not found")
    return {"test": present_test(doc)}


@router.patch("/{test_id}")
async def apply_for_test(
    test_id: str,
    request: RegistrationRequest,
    user: Principal = Depends(get_current_user),
    tests: PostingService = Depends(get_tests),
    profiles: ProfileService = Depends(get_profiles),
):
    """Apply for a test. Rejected once the test's deadline has passed."""
    return lifecycle.register_for_posting(tests, profiles, user, test_id, request.email)


@router.delete("/{test_id}")
async def withdraw_from_test(
    test_id: str,
    email: str = Query(...),
    user: Principal = Depends(get_current_user),
    tests: PostingService = Depends(get_tests),
    profiles: ProfileService = Depends(get_profiles),
):
    return lifecycle.withdraw_from_posting(tests, profiles, user, test_id, email)
