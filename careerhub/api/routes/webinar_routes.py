"""
Webinar Routes

GET /webinar - List webinars
POST /webinar/details - Fetch many webinars by id
GET /webinar/{webinar_id} - Get webinar details
PATCH /webinar/{webinar_id} - Register for a webinar
DELETE /webinar/{webinar_id}?email= - Withdraw registration
"""

from fastapi import APIRouter, Depends, Query

from careerhub.api.deps import get_profiles, get_webinars
from careerhub.core.auth import Principal, get_current_user
from careerhub.core.errors import NotFoundError, ValidationError
from careerhub.schemas.schemas import IdListRequest, RegistrationRequest
from careerhub.services import lifecycle
from careerhub.services.deadlines import classify_webinar_date
from careerhub.services.mongo_service import (
    PostingService,
    ProfileService,
    parse_object_id,
    serialize_doc,
)

router = APIRouter(prefix="/webinar", tags=["Webinars"])


def present_webinar(doc: dict) -> dict:
    webinar = serialize_doc(doc)
    webinar["dateStatus"] = classify_webinar_date(doc.get("date"))
    return webinar


@router.get("")
async def list_webinars(user: Principal = Depends(get_current_user), webinars: PostingService = Depends(get_webinars)):
    return {"webinars": [present_webinar(doc) for doc in webinars.list_all()]}


@router.post("/details")
async def webinar_details(
    request: IdListRequest,
    user: Principal = Depends(get_current_user),
    webinars: PostingService = Depends(get_webinars),
):
    ids = request.ids("webinar_ids")
    if not ids:
        raise ValidationError("webinarIds must be a non-empty array")
    return {"webinars": [present_webinar(doc) for doc in webinars.get_many(ids)]}


@router.get("/{webinar_id}")
async def get_webinar(
    webinar_id: str,
    user: Principal = Depends(get_current_user),
    webinars: PostingService = Depends(get_webinars),
):
    doc = webinars.get(parse_object_id(webinar_id, "webinar"))
    if not doc:
        raise NotFoundError("Webinar not found")
    return {"webinar": present_webinar(doc)}


@router.patch("/{webinar_id}")
async def register_for_webinar(
    webinar_id: str,
    request: RegistrationRequest,
    user: Principal = Depends(get_current_user),
    webinars: PostingService = Depends(get_webinars),
    profiles: ProfileService = Depends(get_profiles),
):
    """Register the caller. Body: {email}"""
    return lifecycle.register_for_posting(webinars, profiles, user, webinar_id, request.email)


@router.delete("/{webinar_id}")
async def withdraw_registration(
    webinar_id: str,
    email: str = Query(...),
    user: Principal = Depends(get_current_user),
    webinars: PostingService = Depends(get_webinars),
    profiles: ProfileService = Depends(get_profiles),
):
    """
    Withdraw the caller's registration.

    Removes the email from the webinar and the webinar from the profile.
    """
    return lifecycle.withdraw_from_posting(webinars, profiles, user, webinar_id, email)
