"""
Email Routes

POST /send-email - Send one email, optionally with the application form
POST /send-bulk-emails - Send many emails in batches
POST /test-email - Check SMTP settings by sending a test message

Failures come back as {"success": false, "message": ..., "error": ...};
the raw error is only included outside production.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ats.api.deps import get_email_service
from ats.core.auth import STAFF_ROLES, require_roles
from ats.core.exceptions import EmailConfigError, EmailServiceError
from ats.schemas.schemas import (
    BulkEmailRequest, BulkEmailResponse, BulkSummary, EmailRequest, EmailSendResponse, SmtpTestRequest
)
from ats.services.email_service import EmailService, describe_delivery_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Email"])

SMTP_CONFIG_ERROR = "Email service configuration error. Please check your email credentials."


def _failure(service: EmailService, status_code: int, message: str, error: Optional[Exception] = None):
    body = {"success": False, "message": message}
    if error is not None and not service.settings.is_production:
        body["error"] = str(error)
    return JSONResponse(status_code=status_code, content=body)


@router.post("/send-email", response_model=EmailSendResponse)
async def send_email(
    request: EmailRequest,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    service: EmailService = Depends(get_email_service),
):
    """
    Send an email to one recipient.

    With attachTemplate the applicant's filled form is attached; if it cannot
    be rendered the blank template is attached instead.
    """
    try:
        await service.verify()
    except EmailConfigError as e:
        return _failure(service, 500, str(e))
    except EmailServiceError as e:
        return _failure(service, 500, SMTP_CONFIG_ERROR, e)

    try:
        outcome = await service.send(request)
    except Exception as e:
        logger.error(f"Error sending email to {request.to}: {e}")
        return _failure(service, 500, describe_delivery_error(e), e)

    return EmailSendResponse(
        message="Email sent successfully",
        message_id=outcome.message_id,
        attachment=outcome.attachment,
    )


@router.post("/send-bulk-emails", response_model=BulkEmailResponse)
async def send_bulk_emails(
    request: BulkEmailRequest,
    user: dict = Depends(require_roles(*STAFF_ROLES)),
    service: EmailService = Depends(get_email_service),
):
    """Send each email in the list; per-recipient failures are reported, not raised."""
    try:
        await service.verify()
    except EmailConfigError as e:
        return _failure(service, 500, str(e))
    except EmailServiceError as e:
        return _failure(service, 500, SMTP_CONFIG_ERROR, e)

    logger.info(f"📨 {user['email']} started bulk send of {len(request.emails)} emails")
    result = await service.send_bulk(request.emails)

    return BulkEmailResponse(
        message=f"Bulk email completed: {result.sent} sent, {result.failed} failed",
        results=result.results,
        summary=BulkSummary(
            total=result.total, sent=result.sent, failed=result.failed, batches=result.batches
        ),
    )


@router.post("/test-email", response_model=EmailSendResponse)
async def test_email(
    request: SmtpTestRequest,
    service: EmailService = Depends(get_email_service),
):
    """Verify the SMTP connection and send one test message."""
    try:
        await service.verify()
        message_id = await service.send_test(request.to, request.subject, request.html)
    except EmailConfigError as e:
        return _failure(service, 500, str(e))
    except EmailServiceError as e:
        return _failure(service, 500, "Email server connection failed", e)
    except Exception as e:
        logger.error(f"Test email to {request.to} failed: {e}")
        return _failure(service, 500, describe_delivery_error(e), e)

    return EmailSendResponse(message="Test email sent successfully", message_id=message_id)
