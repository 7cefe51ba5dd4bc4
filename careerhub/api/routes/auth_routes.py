"""
Authentication Routes

POST /auth/register - Register a student profile
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

import logging

from fastapi import APIRouter, Depends

from careerhub.api.deps import get_profiles
from careerhub.core.auth import (
    Principal,
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from careerhub.core.config import get_settings
from careerhub.core.errors import AuthenticationError
from careerhub.schemas.schemas import (
    LoginRequest,
    MessageResponse,
    PrincipalResponse,
    RegisterRequest,
    TokenResponse,
)
from careerhub.services.mongo_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest, profiles: ProfileService = Depends(get_profiles)):
    """
    Register a new student account.

    The college email becomes the permanent key of the profile.
    """
    profiles.create(
        name=request.name,
        college_email=request.college_email,
        password_hash=hash_password(request.password),
    )
    logger.info(f"Registered profile {request.college_email}")
    return MessageResponse(message="Registered successfully. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, profiles: ProfileService = Depends(get_profiles)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    profile = profiles.get_by_email(request.email)

    if not profile or not profile.get("passwordHash"):
        raise AuthenticationError("Invalid email or password", error_code="INVALID_CREDENTIALS")

    if not verify_password(request.password, profile["passwordHash"]):
        logger.warning(f"Failed login for {request.email}")
        raise AuthenticationError("Invalid email or password", error_code="INVALID_CREDENTIALS")

    email = profile["collegeEmail"]
    role = "admin" if email.lower() in get_settings().admin_email_list else profile.get("role", "student")
    token = create_access_token(data={"sub": email, "email": email, "name": profile.get("name"), "role": role})

    return TokenResponse(access_token=token, email=email, role=role)


@router.get("/me", response_model=PrincipalResponse)
async def get_me(user: Principal = Depends(get_current_user)):
    """Get the caller as resolved from the bearer token."""
    return PrincipalResponse(email=user.email, name=user.name, role=user.role, is_admin=user.is_admin)
