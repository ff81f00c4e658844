"""Tests for MongoApplicantRepository against an in-process mongomock database."""

from datetime import datetime, timedelta

import mongomock
import pytest

from ats.core.exceptions import DuplicateApplicantError
from ats.services.applicant_repository import MongoApplicantRepository


@pytest.fixture
def repo():
    db = mongomock.MongoClient()["ongc-internship-test"]
    db["applicants"].create_index("email", unique=True)
    db["applicants"].create_index("registrationNumber", unique=True, sparse=True)
    return MongoApplicantRepository(collection=db["applicants"], counters=db["counters"])


def _record(email, name="Riya Sharma", status="Pending", minutes=0, **extra):
    record = {
        "email": email,
        "name": name,
        "cpf": "123",
        "status": status,
        "uploadDate": datetime(2025, 3, 1) + timedelta(minutes=minutes),
    }
    record.update(extra)
    return record


def test_create_returns_string_id(repo):
    created = repo.create(_record("riya@example.com"))
    assert isinstance(created["id"], str)
    assert "_id" not in created
    assert repo.get(created["id"])["email"] == "riya@example.com"


def test_get_with_malformed_id(repo):
    assert repo.get("not-an-object-id") is None
    assert repo.update("not-an-object-id", {"cpf": "9"}) is None
    assert repo.set_status("not-an-object-id", "Shortlisted", "hr@ongc.co.in") is None


def test_duplicate_email_raises(repo):
    repo.create(_record("riya@example.com"))
    with pytest.raises(DuplicateApplicantError) as exc:
        repo.create(_record("riya@example.com", name="Another"))
    assert exc.value.email == "riya@example.com"


def test_update_to_taken_email_raises(repo):
    repo.create(_record("riya@example.com"))
    other = repo.create(_record("asha@example.com"))
    with pytest.raises(DuplicateApplicantError):
        repo.update(other["id"], {"email": "riya@example.com"})


def test_get_by_email_is_case_insensitive_on_input(repo):
    repo.create(_record("riya@example.com"))
    assert repo.get_by_email("Riya@Example.com")["name"] == "Riya Sharma"


def test_search_is_case_insensitive_and_escaped(repo):
    repo.create(_record("riya@example.com", name="Riya Sharma", presentInstitute="IIT (ISM) Dhanbad", minutes=1))
    repo.create(_record("asha@example.com", name="Asha Rawat", presentInstitute="DIT University", minutes=2))

    items, total = repo.list(search="SHARMA")
    assert total == 1
    assert items[0]["email"] == "riya@example.com"

    # regex metacharacters are matched literally
    items, total = repo.list(search="(ISM)")
    assert [i["name"] for i in items] == ["Riya Sharma"]
    assert repo.list(search=".*")[1] == 0


def test_list_filters_sorts_and_paginates(repo):
    for i in range(5):
        repo.create(_record(f"s{i}@example.com", name=f"Student {i}", minutes=i,
                            status="Shortlisted" if i % 2 else "Pending"))

    items, total = repo.list(skip=1, limit=2)
    assert total == 5
    assert [i["name"] for i in items] == ["Student 3", "Student 2"]

    items, total = repo.list(status="Shortlisted")
    assert total == 2
    assert [i["name"] for i in items] == ["Student 3", "Student 1"]


def test_set_status_records_who_and_when(repo):
    created = repo.create(_record("riya@example.com"))
    updated = repo.set_status(created["id"], "Shortlisted", "hr@ongc.co.in")

    assert updated["status"] == "Shortlisted"
    assert updated["processedBy"] == "hr@ongc.co.in"
    assert isinstance(updated["statusUpdatedAt"], datetime)


def test_set_status_guard_rejects_stale_status(repo):
    created = repo.create(_record("riya@example.com", status="Rejected"))

    assert repo.set_status(created["id"], "Shortlisted", "hr@ongc.co.in", expected_current="Pending") is None
    assert repo.get(created["id"])["status"] == "Rejected"

    moved = repo.set_status(created["id"], "Pending", "hr@ongc.co.in", expected_current="Rejected")
    assert moved["status"] == "Pending"


def test_count_by_status(repo):
    repo.create(_record("a@example.com"))
    repo.create(_record("b@example.com"))
    repo.create(_record("c@example.com", status="Approved"))
    assert repo.count_by_status() == {"Pending": 2, "Approved": 1}


def test_registration_numbers_count_per_year(repo):
    assert repo.next_registration_number(2025) == "SAIL-2025-0001"
    assert repo.next_registration_number(2025) == "SAIL-2025-0002"
    assert repo.next_registration_number(2026) == "SAIL-2026-0001"
    assert repo.counters.find_one({"_id": "registration-2025"})["seq"] == 2
