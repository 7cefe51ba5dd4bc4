"""
User Routes

GET /user?email= - Get a profile (own, or any for admins)
PATCH /user - Update own profile fields
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from careerhub.api.deps import get_profiles
from careerhub.core.auth import Principal, ensure_same_identity, get_current_user
from careerhub.core.errors import ForbiddenError, NotFoundError, ValidationError
from careerhub.schemas.schemas import ProfileUpdateRequest
from careerhub.services.mongo_service import ProfileService, serialize_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Users"])


@router.get("")
async def get_user(
    email: Optional[str] = Query(None, description="Defaults to the caller"),
    user: Principal = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profiles),
):
    """Get a profile. Students may only read their own."""
    email = email or user.email
    if email != user.email and not user.is_admin:
        raise ForbiddenError("Cannot view another user's profile")

    profile = profiles.get_by_email(email)
    if not profile:
        raise NotFoundError("User not found")

    return {"user": serialize_profile(profile)}


@router.patch("")
async def update_user(
    request: ProfileUpdateRequest,
    user: Principal = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profiles),
):
    """
    Update profile fields.

    collegeEmail and the jobs/tests/webinars lists cannot be changed here;
    batchEnd must stay after batchStart once merged with the stored values.
    """
    ensure_same_identity(user, request.email, "Cannot update another user's profile")

    updates = request.updates.to_updates()
    if not updates:
        raise ValidationError("No updates provided")

    profile = profiles.get_by_email(request.email)
    if not profile:
        raise NotFoundError("User not found")

    start = updates.get("batchStart", profile.get("batchStart"))
    end = updates.get("batchEnd", profile.get("batchEnd"))
    if start is not None and end is not None and end <= start:
        raise ValidationError("batchEnd must be after batchStart")

    updated = profiles.update_fields(request.email, updates)
    logger.info(f"Profile {request.email} updated: {', '.join(sorted(updates))}")

    return {"message": "Profile updated successfully", "user": serialize_profile(updated)}
