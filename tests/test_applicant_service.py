"""Tests for intake rules and the status workflow."""

from datetime import datetime

import pytest

from ats.core.exceptions import DuplicateApplicantError, InvalidStatusTransition
from ats.schemas.schemas import ApplicantStatus
from ats.services.applicant_service import (
    build_applicant_record, can_transition, change_status, prepare_update, quota_for,
    register_applicant, term_for
)


@pytest.mark.parametrize("month, term", [(1, "Summer"), (6, "Summer"), (7, "Winter"), (12, "Winter")])
def test_term_for(month, term):
    assert term_for(datetime(2025, month, 15)).value == term


@pytest.mark.parametrize("category, quota", [
    (None, "General"), ("", "General"), ("gen", "General"), ("General", "General"),
    ("OBC", "Reserved"), ("SC", "Reserved"), ("EWS", "Reserved"),
])
def test_quota_for(category, quota):
    assert quota_for(category).value == quota


@pytest.mark.parametrize("current, target, allowed", [
    ("Pending", "Shortlisted", True),
    ("Pending", "Approved", False),
    ("Shortlisted", "Approved", True),
    ("Approved", "Rejected", False),
    ("Rejected", "Pending", True),
    ("Unknown", "Pending", False),
])
def test_can_transition(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_build_applicant_record():
    now = datetime(2025, 9, 1, 12, 0)
    data = {"email": " Riya@Example.com ", "name": "Riya", "cpf": "1", "category": None}
    record = build_applicant_record(data, "SAIL-2025-0001", now)

    assert record["email"] == "riya@example.com"
    assert "category" not in record
    assert record["submissionTimestamp"] == now
    assert record["term"] == "Winter"
    assert record["quotaCategory"] == "General"
    assert record["status"] == "Pending"
    assert record["uploadDate"] == now
    assert data["email"] == " Riya@Example.com "


def test_prepare_update_recomputes_derived_fields():
    fields = prepare_update({"category": "ST", "submissionTimestamp": datetime(2025, 2, 1)})
    assert fields["quotaCategory"] == "Reserved"
    assert fields["term"] == "Summer"
    assert prepare_update({"cpf": "9"}) == {"cpf": "9"}


def test_register_and_change_status(applicant_repo):
    created = register_applicant(
        applicant_repo, {"email": "a@example.com", "name": "A", "cpf": "1"}, now=datetime(2026, 1, 5)
    )
    assert created["registrationNumber"] == "SAIL-2026-0001"

    updated = change_status(applicant_repo, created["id"], ApplicantStatus.shortlisted, "hr@ongc.co.in")
    assert updated["status"] == "Shortlisted"
    assert updated["processedBy"] == "hr@ongc.co.in"

    with pytest.raises(InvalidStatusTransition) as exc:
        change_status(applicant_repo, created["id"], ApplicantStatus.shortlisted, "hr@ongc.co.in")
    assert exc.value.current == "Shortlisted"

    assert change_status(applicant_repo, "missing", ApplicantStatus.approved, "hr@ongc.co.in") is None


def test_change_status_detects_concurrent_update(applicant_repo, monkeypatch):
    created = register_applicant(applicant_repo, {"email": "b@example.com", "name": "B", "cpf": "2"})
    original_get = applicant_repo.get

    def stale_then_fresh(applicant_id):
        doc = original_get(applicant_id)
        # someone else rejects the applicant right after we read it
        applicant_repo.docs[applicant_id]["status"] = "Rejected"
        return doc

    monkeypatch.setattr(applicant_repo, "get", stale_then_fresh)
    with pytest.raises(InvalidStatusTransition) as exc:
        change_status(applicant_repo, created["id"], ApplicantStatus.shortlisted, "hr@ongc.co.in")
    assert exc.value.current == "Rejected"


def test_duplicate_email_does_not_use_a_number(applicant_repo):
    register_applicant(applicant_repo, {"email": "c@example.com", "name": "C", "cpf": "3"}, now=datetime(2025, 1, 1))
    with pytest.raises(DuplicateApplicantError):
        register_applicant(applicant_repo, {"email": "C@Example.com", "name": "C", "cpf": "3"}, now=datetime(2025, 1, 1))
    assert applicant_repo.counters[2025] == 1
