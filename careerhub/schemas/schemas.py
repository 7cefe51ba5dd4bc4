"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Wire names are camelCase (as stored in MongoDB); Python attributes are
snake_case.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Any, Dict
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

    def to_document(self) -> dict:
        """Dump with wire (camelCase) names, skipping empty optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_updates(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)


# ============================================================
# ENUMS
# ============================================================

class ApplicationStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    accepted = "accepted"
    rejected = "rejected"


class InputFieldType(str, Enum):
    text = "text"
    number = "number"
    email = "email"
    textarea = "textarea"
    select = "select"
    checkbox = "checkbox"
    date = "date"
    url = "url"


class PostingMode(str, Enum):
    online = "online"
    offline = "offline"
    hybrid = "hybrid"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    college_email: EmailStr
    password: str = Field(..., min_length=8)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    email: str
    role: str


class PrincipalResponse(BaseModel):
    email: str
    name: Optional[str] = None
    role: str
    is_admin: bool


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileUpdate(CamelModel):
    """
    Editable profile fields. collegeEmail and the membership lists are not
    editable; unknown keys are rejected.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True, extra="forbid")

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    username: Optional[str] = None
    enrollment_number: Optional[str] = None
    personal_email: Optional[EmailStr] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    tenth_percentage: Optional[float] = Field(None, ge=0, le=100)
    twelfth_percentage: Optional[float] = Field(None, ge=0, le=100)
    college_gpa: Optional[float] = Field(None, ge=0, le=10, alias="collegeGPA")
    batch_start: Optional[int] = Field(None, ge=1900, le=2100)
    batch_end: Optional[int] = Field(None, ge=1900, le=2100)
    linkedin: Optional[str] = None
    github: Optional[str] = None
    leetcode: Optional[str] = None
    status: Optional[str] = None
    resume: Optional[str] = None

    @model_validator(mode="after")
    def check_batch_order(self):
        if self.batch_start is not None and self.batch_end is not None and self.batch_end <= self.batch_start:
            raise ValueError("batchEnd must be after batchStart")
        return self


class ProfileUpdateRequest(BaseModel):
    email: EmailStr
    updates: ProfileUpdate


# ============================================================
# POSTING SCHEMAS
# ============================================================

class InputField(CamelModel):
    """One field of a job's dynamic application form."""
    field_name: str = Field(..., min_length=1)
    type: InputFieldType = InputFieldType.text
    required: bool = False
    options: List[str] = []
    placeholder: Optional[str] = None


class JobCreate(CamelModel):
    title: str = Field(..., min_length=2, max_length=200)
    company: Optional[str] = None
    role: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    mode: Optional[PostingMode] = None
    package: Optional[str] = None
    deadline: Optional[datetime] = None
    link_to_apply: Optional[str] = None
    pdf_links: List[str] = []
    extra_fields: Dict[str, Any] = {}
    eligibility: List[str] = []
    input_fields: List[InputField] = []

    @field_validator("input_fields")
    @classmethod
    def unique_field_names(cls, fields):
        names = [f.field_name for f in fields]
        if len(names) != len(set(names)):
            raise ValueError("inputFields must have unique fieldName values")
        return fields


class JobUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=2, max_length=200)
    company: Optional[str] = None
    role: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    mode: Optional[PostingMode] = None
    package: Optional[str] = None
    deadline: Optional[datetime] = None
    link_to_apply: Optional[str] = None
    pdf_links: Optional[List[str]] = None
    extra_fields: Optional[Dict[str, Any]] = None
    eligibility: Optional[List[str]] = None
    input_fields: Optional[List[InputField]] = None


class PlacementTestCreate(CamelModel):
    title: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    mode: Optional[PostingMode] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    duration: Optional[str] = None
    deadline: Optional[datetime] = None
    link: Optional[str] = None
    pdf_links: List[str] = []
    extra_fields: Dict[str, Any] = {}


class PlacementTestUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    mode: Optional[PostingMode] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    duration: Optional[str] = None
    deadline: Optional[datetime] = None
    link: Optional[str] = None
    pdf_links: Optional[List[str]] = None
    extra_fields: Optional[Dict[str, Any]] = None


class WebinarCreate(CamelModel):
    title: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = None
    speaker: Optional[str] = None
    location: Optional[str] = None
    mode: Optional[PostingMode] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    duration: Optional[str] = None
    link: Optional[str] = None
    pdf_links: List[str] = []
    extra_fields: Dict[str, Any] = {}


class WebinarUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = None
    speaker: Optional[str] = None
    location: Optional[str] = None
    mode: Optional[PostingMode] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    duration: Optional[str] = None
    link: Optional[str] = None
    pdf_links: Optional[List[str]] = None
    extra_fields: Optional[Dict[str, Any]] = None


class IdListRequest(CamelModel):
    """Bulk detail fetch body: {"jobIds": [...]} / {"testIds": ...} / {"webinarIds": ...}."""
    job_ids: Optional[List[Any]] = None
    test_ids: Optional[List[Any]] = None
    webinar_ids: Optional[List[Any]] = None

    def ids(self, key: str) -> List[Any]:
        return getattr(self, key) or []


# ============================================================
# LIFECYCLE SCHEMAS
# ============================================================

class FieldResponse(CamelModel):
    field_name: str = Field(..., min_length=1)
    value: Any = Field(...)


class JobApplicationRequest(CamelModel):
    email: str = Field(..., min_length=1)
    responses: List[FieldResponse]
    applied_at: datetime


class RegistrationRequest(BaseModel):
    email: str = Field(..., min_length=1)


class NotInterestedRequest(CamelModel):
    email: str = Field(..., min_length=1)
    not_interested: bool = True


class StatusUpdateRequest(CamelModel):
    application_email: str = Field(..., min_length=1)
    new_status: str


# ============================================================
# MEDIA SCHEMAS
# ============================================================

class UploadSignatureRequest(BaseModel):
    folder: str = "resumes"


class UploadSignatureResponse(CamelModel):
    signature: str
    timestamp: int
    api_key: str
    folder: str
    cloud_name: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================


class EligibilityResponse(BaseModel):
    eligible: bool
    batch: Optional[str] = None
    eligibility: List[str] = []


class MessageResponse(BaseModel):
    message: str
    success: bool = True
