"""
Applicant Service - intake rules and status workflow.

Computed on intake:
- registrationNumber: SAIL-<year>-<NNNN>
- term: Summer for submissions in January-June, Winter otherwise
- quotaCategory: General for GEN/GENERAL (or no category), Reserved otherwise
"""

import logging
from datetime import datetime
from typing import Dict, Optional, Set

from ats.core.exceptions import DuplicateApplicantError, InvalidStatusTransition
from ats.schemas.schemas import ApplicantStatus, QuotaCategory, Term
from ats.services.applicant_repository import ApplicantRepository

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[ApplicantStatus, Set[ApplicantStatus]] = {
    ApplicantStatus.pending: {ApplicantStatus.shortlisted, ApplicantStatus.rejected},
    ApplicantStatus.shortlisted: {ApplicantStatus.approved, ApplicantStatus.rejected, ApplicantStatus.pending},
    ApplicantStatus.approved: {ApplicantStatus.shortlisted},
    ApplicantStatus.rejected: {ApplicantStatus.pending},
}

GENERAL_CATEGORIES = {"", "GEN", "GENERAL"}


def term_for(moment: datetime) -> Term:
    return Term.summer if moment.month <= 6 else Term.winter


def quota_for(category: Optional[str]) -> QuotaCategory:
    key = str(category or "").strip().upper()
    return QuotaCategory.general if key in GENERAL_CATEGORIES else QuotaCategory.reserved


def can_transition(current: str, target: str) -> bool:
    try:
        return ApplicantStatus(target) in ALLOWED_TRANSITIONS[ApplicantStatus(current)]
    except ValueError:
        return False


def build_applicant_record(data: dict, registration_number: str, now: Optional[datetime] = None) -> dict:
    """
    Complete a submitted record (camelCase keys) with computed fields.
    The input dict is not modified.
    """
    now = now or datetime.utcnow()
    record = {k: v for k, v in data.items() if v is not None}
    record["email"] = str(record["email"]).strip().lower()
    record.setdefault("submissionTimestamp", now)
    record["status"] = ApplicantStatus.pending.value
    record["registrationNumber"] = registration_number
    record["term"] = term_for(record["submissionTimestamp"]).value
    record["quotaCategory"] = quota_for(record.get("category")).value
    record.setdefault("lateApplication", False)
    record["uploadDate"] = now
    return record


def prepare_update(fields: dict) -> dict:
    """Normalise edited fields and refresh the values computed from them."""
    fields = dict(fields)
    if "email" in fields:
        fields["email"] = str(fields["email"]).strip().lower()
    if "category" in fields:
        fields["quotaCategory"] = quota_for(fields["category"]).value
    if "submissionTimestamp" in fields:
        fields["term"] = term_for(fields["submissionTimestamp"]).value
    return fields


def register_applicant(repo: ApplicantRepository, data: dict, now: Optional[datetime] = None) -> dict:
    """Allocate a registration number and store the new applicant."""
    now = now or datetime.utcnow()
    email = str(data["email"]).strip().lower()
    if repo.get_by_email(email):
        raise DuplicateApplicantError(email)
    registration_number = repo.next_registration_number(now.year)
    created = repo.create(build_applicant_record(data, registration_number, now))
    logger.info(f"👤 Applicant registered: {created['registrationNumber']} ({created['email']})")
    return created


def change_status(repo: ApplicantRepository, applicant_id: str, target: ApplicantStatus,
                  processed_by: str) -> Optional[dict]:
    """
    Move an applicant to target status.

    Returns:
        Updated record, or None if the applicant does not exist

    Raises:
        InvalidStatusTransition if the workflow does not allow the move
        (also when another user changed the status concurrently)
    """
    applicant = repo.get(applicant_id)
    if applicant is None:
        return None

    current = applicant.get("status", ApplicantStatus.pending.value)
    if not can_transition(current, target.value):
        raise InvalidStatusTransition(current, target.value)

    updated = repo.set_status(applicant_id, target.value, processed_by, expected_current=current)
    if updated is None:
        latest = repo.get(applicant_id)
        raise InvalidStatusTransition(latest.get("status", current) if latest else current, target.value)

    logger.info(f"🔄 {applicant_id}: {current} → {target.value} by {processed_by}")
    return updated
