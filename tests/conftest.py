"""Shared test fixtures: environment, in-memory fakes and an authenticated client."""

import os
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# Settings are read at import time; keep tests off real files and services.
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("EMAIL_USER", "")
os.environ.setdefault("EMAIL_PASS", "")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import reportlab
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from ats.api.deps import get_applicant_repository, get_email_service, get_user_repository
from ats.core.auth import create_access_token, hash_password
from ats.core.config import Settings
from ats.core.exceptions import DuplicateApplicantError
from ats.db.sql import create_db_engine, init_sql_schema
from ats.main import app
from ats.services.applicant_repository import SEARCH_FIELDS, ApplicantRepository
from ats.services.email_service import EmailService
from ats.services.user_repository import SqlUserRepository

VERA_FONT = os.path.join(os.path.dirname(reportlab.__file__), "fonts", "Vera.ttf")


# ---------- Fakes ----------
class InMemoryApplicantRepository(ApplicantRepository):
    """Dict-backed stand-in for MongoApplicantRepository."""

    def __init__(self):
        self.docs: Dict[str, dict] = {}
        self.counters: Dict[int, int] = {}

    def create(self, record: dict) -> dict:
        if self.get_by_email(record["email"]):
            raise DuplicateApplicantError(record["email"])
        doc = dict(record, id=uuid.uuid4().hex)
        self.docs[doc["id"]] = doc
        return dict(doc)

    def get(self, applicant_id: str) -> Optional[dict]:
        doc = self.docs.get(applicant_id)
        return dict(doc) if doc else None

    def get_by_email(self, email: str) -> Optional[dict]:
        for doc in self.docs.values():
            if doc["email"] == email.lower():
                return dict(doc)
        return None

    def list(self, status=None, search=None, skip=0, limit=50) -> Tuple[List[dict], int]:
        docs = list(self.docs.values())
        if status:
            docs = [d for d in docs if d.get("status") == status]
        if search:
            needle = search.strip().lower()
            docs = [d for d in docs if any(needle in str(d.get(f, "")).lower() for f in SEARCH_FIELDS)]
        docs.sort(key=lambda d: d["uploadDate"], reverse=True)
        return [dict(d) for d in docs[skip:skip + limit]], len(docs)

    def update(self, applicant_id: str, fields: dict) -> Optional[dict]:
        if applicant_id not in self.docs:
            return None
        self.docs[applicant_id].update(fields)
        return self.get(applicant_id)

    def set_status(self, applicant_id, status, processed_by, expected_current=None):
        doc = self.docs.get(applicant_id)
        if doc is None:
            return None
        if expected_current is not None and doc.get("status") != expected_current:
            return None
        doc.update(status=status, processedBy=processed_by, statusUpdatedAt=datetime.utcnow())
        return dict(doc)

    def count_by_status(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for doc in self.docs.values():
            counts[doc["status"]] = counts.get(doc["status"], 0) + 1
        return counts

    def next_registration_number(self, year: int) -> str:
        self.counters[year] = self.counters.get(year, 0) + 1
        return f"SAIL-{year}-{self.counters[year]:04d}"


class FakeSender:
    """Records messages instead of talking to an SMTP server."""

    def __init__(self, fail_for=(), verify_error: Exception = None):
        self.sent = []
        self.fail_for = set(fail_for)
        self.verify_error = verify_error

    async def verify(self) -> None:
        if self.verify_error:
            raise self.verify_error

    async def send(self, message) -> str:
        if message["To"] in self.fail_for:
            raise ConnectionRefusedError("connection refused")
        self.sent.append(message)
        return message["Message-ID"]


# ---------- Fixtures ----------
@pytest.fixture
def user_repo(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'users.sqlite'}")
    init_sql_schema(engine)
    return SqlUserRepository(sessionmaker(bind=engine))


@pytest.fixture
def applicant_repo():
    return InMemoryApplicantRepository()


@pytest.fixture
def template_pdf(tmp_path):
    path = tmp_path / "template.pdf"
    path.write_bytes(b"%PDF-1.4 blank template")
    return str(path)


@pytest.fixture
def email_settings(template_pdf):
    return Settings(
        email_user="sail@ongc.co.in",
        email_pass="app-password",
        email_batch_size=5,
        email_batch_delay_seconds=0,
        form_template_path=template_pdf,
        environment="test",
        log_file="",
    )


@pytest.fixture
def fake_sender():
    return FakeSender()


@pytest.fixture
def email_service(email_settings, fake_sender):
    return EmailService(email_settings, fake_sender, form_builder=lambda data, reg: b"%PDF-filled")


@pytest.fixture
def client(user_repo, applicant_repo, email_service):
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_applicant_repository] = lambda: applicant_repo
    app.dependency_overrides[get_email_service] = lambda: email_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(repo, email, role, employee_id, password="password123"):
    user = repo.create(email, hash_password(password), email.split("@")[0], role, "Human Resources", employee_id)
    token = create_access_token({"sub": str(user["user_id"]), "role": role, "email": user["email"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def hr_headers(user_repo):
    return _make_user(user_repo, "hr@ongc.co.in", "hr_manager", "HR001")


@pytest.fixture
def admin_headers(user_repo):
    return _make_user(user_repo, "admin@ongc.co.in", "admin", "IT001", password="admin123")


@pytest.fixture
def viewer_headers(user_repo):
    return _make_user(user_repo, "viewer@ongc.co.in", "viewer", "VW001")


@pytest.fixture
def applicant_payload():
    return {
        "email": "Riya.Sharma@example.com",
        "name": "Riya Sharma",
        "cpf": "123456",
        "age": 21,
        "gender": "female",
        "category": "OBC",
        "mobileNo": "9876543210",
        "presentInstitute": "Graphic Era University",
        "areasOfTraining": "B.Tech Petroleum",
        "lastSemesterSGPA": 8.7,
        "submissionTimestamp": "2025-03-14T10:30:00",
    }
