"""
Applicant Routes

POST /applicants - Register an applicant
POST /applicants/upload - Import applicants from CSV/XLSX
GET /applicants - List applicants (status, search, pagination)
GET /applicants/stats - Counts per status
GET /applicants/shortlisted - Shortlisted applicants
GET /applicants/approved - Approved applicants
GET /applicants/{id} - Get one applicant
PUT /applicants/{id} - Edit applicant fields
PATCH /applicants/{id}/status - Move through the status workflow
GET /applicants/{id}/form - Download the filled application form (PDF)

Reads are open to every role; writes need hr_manager or admin.
"""

import asyncio
import logging
import os
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse, Response
from pydantic import ValidationError

from ats.api.deps import get_applicant_repository
from ats.core.auth import STAFF_ROLES, get_current_user, require_roles
from ats.core.config import get_settings
from ats.core.exceptions import AtsError, DuplicateApplicantError, InvalidStatusTransition
from ats.schemas.schemas import (
    ApplicantCreate, ApplicantImportResponse, ApplicantListResponse, ApplicantResponse,
    ApplicantStatsResponse, ApplicantStatus, ApplicantUpdate, ImportRowIssue, StatusUpdateRequest
)
from ats.services.applicant_repository import ApplicantRepository
from ats.services.applicant_service import change_status, prepare_update, register_applicant
from ats.services.email_service import FILLED_FORM_FILENAME, TEMPLATE_FILENAME
from ats.services.pdf_generator import create_application_form
from ats.utils.file_upload import parse_applicant_rows, read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applicants", tags=["Applicants"])


def _get_or_404(repo: ApplicantRepository, applicant_id: str) -> dict:
    applicant = repo.get(applicant_id)
    if applicant is None:
        raise HTTPException(status_code=404, detail="Applicant not found")
    return applicant


def _list_response(repo: ApplicantRepository, status: Optional[str], search: Optional[str],
                   page: int, page_size: int) -> ApplicantListResponse:
    items, total = repo.list(status=status, search=search, skip=(page - 1) * page_size, limit=page_size)
    return ApplicantListResponse(
        applicants=[ApplicantResponse.model_validate(a) for a in items],
        total=total, page=page, page_size=page_size
    )


@router.post("", response_model=ApplicantResponse, status_code=201)
async def create_applicant(
    data: ApplicantCreate,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    repo: ApplicantRepository = Depends(get_applicant_repository),
):
    """Register a new applicant. Status starts as Pending."""
    try:
        created = register_applicant(repo, data.model_dump(by_alias=True, exclude_none=True))
    except DuplicateApplicantError:
        raise HTTPException(status_code=400, detail="Applicant with this email already exists")
    return ApplicantResponse.model_validate(created)


@router.post("/upload", response_model=ApplicantImportResponse)
async def upload_applicants(
    file: UploadFile = File(..., description="Applicant sheet (CSV or XLSX)"),
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    repo: ApplicantRepository = Depends(get_applicant_repository),
):
    """
    Import applicants from a spreadsheet.

    Each row is validated on its own; invalid rows and already-registered
    emails are reported back and skipped.
    """
    content, ext = await read_upload(file)
    rows = parse_applicant_rows(content, ext)

    inserted = 0
    skipped: List[ImportRowIssue] = []
    # Row numbers match the spreadsheet (header is row 1)
    for row_number, row in enumerate(rows, start=2):
        try:
            data = ApplicantCreate.model_validate(row)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            skipped.append(ImportRowIssue(row=row_number, reason=problems))
            continue
        try:
            register_applicant(repo, data.model_dump(by_alias=True, exclude_none=True))
            inserted += 1
        except DuplicateApplicantError:
            skipped.append(ImportRowIssue(row=row_number, reason=f"Duplicate email {data.email}"))

    logger.info(f"📥 {user['email']} imported {inserted} applicants from {file.filename} ({len(skipped)} skipped)")
    return ApplicantImportResponse(
        message=f"Imported {inserted} applicants, skipped {len(skipped)}.",
        inserted=inserted,
        skipped=skipped,
    )


@router.get("", response_model=ApplicantListResponse)
async def list_applicants(
    status: Optional[ApplicantStatus] = Query(None),
    search: Optional[str] = Query(None, min_length=1),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    user: dict = Depends(get_current_user),
    repo: ApplicantRepository = Depends(get_applicant_repository),
):
    """List applicants, newest first."""
    return _list_response(repo, status.value if status else None, search, page, page_size)


@router.get("/stats", response_model=ApplicantStatsResponse)
async def applicant_stats(
    user: dict = Depends(get_current_user),
    repo: ApplicantRepository = Depends(get_applicant_repository),
):
    """Count applicants per status."""
    counts = repo.count_by_status()
    by_status = {s.value: counts.get(s.value, 0) for s in ApplicantStatus}
    return ApplicantStatsResponse(total=sum(counts.values()), by_status=by_status)


@router.get("/shortlisted", response_model=ApplicantListResponse)
async def shortlisted_applicants(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    user: dict = Depends(get_current_user),
    repo: ApplicantRepository = Depends(get_applicant_repository),
):
    return _list_response(repo, ApplicantStatus.shortlisted.value, None, page, page_size)


@router.get("/approved", response_model=ApplicantListResponse)
async def approved_applicants(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    user: dict = Depends(get_current_user),
    repo: ApplicantRepository = Depends(get_applicant_repository),
):
    return _list_response(repo, ApplicantStatus.approved.value, None, page, page_size)


@router.get("/{applicant_id}", response_model=ApplicantResponse)
async def get_applicant(
    applicant_id: str,
    user: dict = Depends(get_current_user),
    repo: ApplicantRepository = Depends(get_applicant_repository),
):
    return ApplicantResponse.model_validate(_get_or_404(repo, applicant_id))


@router.put("/{applicant_id}", response_model=ApplicantResponse)
async def update_applicant(
    applicant_id: str,
    data: ApplicantUpdate,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    repo: ApplicantRepository = Depends(get_applicant_repository),
):
    """Edit applicant fields. Only provided fields are updated; status has its own endpoint."""
    fields = data.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    _get_or_404(repo, applicant_id)
    try:
        updated = repo.update(applicant_id, prepare_update(fields))
    except DuplicateApplicantError:
        raise HTTPException(status_code=400, detail="Applicant with this email already exists")
    if updated is None:
        raise HTTPException(status_code=404, detail="Applicant not found")
    return ApplicantResponse.model_validate(updated)


@router.patch("/{applicant_id}/status", response_model=ApplicantResponse)
async def update_applicant_status(
    applicant_id: str,
    update: StatusUpdateRequest,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    repo: ApplicantRepository = Depends(get_applicant_repository),
):
    """Move an applicant through Pending → Shortlisted → Approved (or Rejected)."""
    try:
        updated = change_status(repo, applicant_id, update.status, user["email"])
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="Applicant not found")
    return ApplicantResponse.model_validate(updated)


@router.get("/{applicant_id}/form")
async def download_application_form(
    applicant_id: str,
    user: dict = Depends(get_current_user),
    repo: ApplicantRepository = Depends(get_applicant_repository),
):
    """
    Download the applicant's pre-filled form.
    Falls back to the blank template if the form cannot be rendered.
    """
    applicant = _get_or_404(repo, applicant_id)

    try:
        pdf_bytes = await asyncio.to_thread(
            create_application_form, applicant, applicant.get("registrationNumber", "")
        )
    except AtsError as e:
        logger.error(f"Form render failed for {applicant_id}: {e}")
        pdf_bytes = None

    if pdf_bytes:
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{FILLED_FORM_FILENAME}"'},
        )

    template_path = get_settings().form_template_path
    if os.path.isfile(template_path):
        return FileResponse(template_path, media_type="application/pdf", filename=TEMPLATE_FILENAME)
    raise HTTPException(status_code=503, detail="Application form is currently unavailable")
