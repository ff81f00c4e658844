"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Applicant and email payloads use camelCase on the wire (what the frontend
sends and what is stored in MongoDB); Python code uses snake_case attributes.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    hr_manager = "hr_manager"
    admin = "admin"
    viewer = "viewer"


class ApplicantStatus(str, Enum):
    pending = "Pending"
    shortlisted = "Shortlisted"
    approved = "Approved"
    rejected = "Rejected"


class Term(str, Enum):
    summer = "Summer"
    winter = "Winter"


class QuotaCategory(str, Enum):
    general = "General"
    reserved = "Reserved"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=2, max_length=100)
    role: UserRole = UserRole.hr_manager
    department: str = "Human Resources"
    employee_id: str = Field(..., min_length=1, max_length=50)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8)

class UserResponse(BaseModel):
    user_id: int
    email: str
    name: str
    role: str
    department: Optional[str] = None
    employee_id: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# ============================================================
# APPLICANT SCHEMAS
# ============================================================

class ApplicantFields(CamelModel):
    """Every editable ApplicantRecord field, all optional."""
    submission_timestamp: Optional[datetime] = None
    email: Optional[EmailStr] = None
    instruction_acknowledged: Optional[str] = None
    training_acknowledgement: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[str] = None
    category: Optional[str] = None
    address: Optional[str] = None
    mobile_no: Optional[str] = None
    email2: Optional[str] = None
    father_mother_name: Optional[str] = None
    father_mother_occupation: Optional[str] = None
    present_institute: Optional[str] = None
    areas_of_training: Optional[str] = None
    present_semester: Optional[str] = None
    last_semester_sgpa: Optional[float] = Field(None, alias="lastSemesterSGPA")
    percentage_in_10_plus_2: Optional[float] = Field(None, alias="percentageIn10Plus2")
    declaration_01: Optional[str] = Field(None, alias="declaration01")
    declaration_02: Optional[str] = Field(None, alias="declaration02")
    declaration_03: Optional[str] = Field(None, alias="declaration03")
    designation: Optional[str] = None
    cpf: Optional[str] = None
    section: Optional[str] = None
    location: Optional[str] = None
    mentor_mobile_no: Optional[str] = None
    mentor_details_available: Optional[str] = None
    guardian_occupation_details: Optional[str] = None
    mentor_cpf: Optional[str] = Field(None, alias="mentorCPF")
    mentor_name: Optional[str] = None
    mentor_designation: Optional[str] = None
    mentor_section: Optional[str] = None
    mentor_location: Optional[str] = None
    mentor_email: Optional[str] = None
    preference_criteria: Optional[str] = None
    referred_by: Optional[str] = None
    late_application: Optional[bool] = None

class ApplicantCreate(ApplicantFields):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    cpf: str = Field(..., min_length=1)

class ApplicantUpdate(ApplicantFields):
    pass

class ApplicantResponse(ApplicantFields):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    email: str
    name: str
    status: ApplicantStatus = ApplicantStatus.pending
    registration_number: Optional[str] = None
    term: Optional[Term] = None
    quota_category: Optional[QuotaCategory] = None
    late_application: bool = False
    upload_date: Optional[datetime] = None
    processed_by: Optional[str] = None
    status_updated_at: Optional[datetime] = None

class ApplicantListResponse(CamelModel):
    applicants: List[ApplicantResponse]
    total: int
    page: int
    page_size: int

class StatusUpdateRequest(CamelModel):
    status: ApplicantStatus

class ApplicantStatsResponse(CamelModel):
    total: int
    by_status: Dict[str, int]

class ImportRowIssue(CamelModel):
    row: int
    reason: str

class ApplicantImportResponse(CamelModel):
    success: bool = True
    message: str
    inserted: int
    skipped: List[ImportRowIssue] = []


# ============================================================
# EMAIL SCHEMAS
# ============================================================

class EmailRequest(CamelModel):
    to: EmailStr
    subject: str = Field(..., min_length=1)
    html: Optional[str] = None
    text: Optional[str] = None
    attach_template: bool = False
    applicant_data: Optional[Dict[str, Any]] = None
    registration_number: Optional[str] = None

    @model_validator(mode="after")
    def require_body(self) -> "EmailRequest":
        if not self.html and not self.text:
            raise ValueError("Missing required fields: to, subject, and html/text content")
        return self

class BulkEmailRequest(CamelModel):
    emails: List[EmailRequest] = Field(..., min_length=1)

class SmtpTestRequest(CamelModel):
    to: EmailStr
    subject: str = Field(..., min_length=1)
    html: str = Field(..., min_length=1)

class EmailSendResponse(CamelModel):
    success: bool = True
    message: str
    message_id: Optional[str] = None
    attachment: Optional[str] = None

class RecipientResult(CamelModel):
    to: str
    success: bool
    message_id: Optional[str] = None
    attachment: Optional[str] = None
    error: Optional[str] = None

class BulkSummary(CamelModel):
    total: int
    sent: int
    failed: int
    batches: int

class BulkEmailResponse(CamelModel):
    success: bool = True
    message: str
    results: List[RecipientResult]
    summary: BulkSummary


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
