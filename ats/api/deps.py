"""
FastAPI dependency providers.

Tests swap these out with app.dependency_overrides.
"""

from ats.core.config import get_settings
from ats.services.applicant_repository import ApplicantRepository, MongoApplicantRepository
from ats.services.email_service import EmailService, SmtpSender
from ats.services.user_repository import SqlUserRepository, UserRepository


def get_user_repository() -> UserRepository:
    return SqlUserRepository()


def get_applicant_repository() -> ApplicantRepository:
    return MongoApplicantRepository()


def get_email_service() -> EmailService:
    settings = get_settings()
    return EmailService(settings, SmtpSender(settings))
