"""
Email Service - applicant notifications over SMTP (aiosmtplib).

Features:
- Single, test and bulk sends from the configured account
- Optional application form attachment: filled PDF when applicant data is
  available, the static blank template when rendering fails
- Bulk sends go out in batches (default 5 concurrent) with a short pause
  between batches; one recipient's failure never stops the others
"""

import asyncio
import logging
import os
import re
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid
from typing import Callable, List, Optional, Sequence

import aiosmtplib

from ats.core.config import Settings
from ats.core.exceptions import EmailConfigError, EmailServiceError
from ats.schemas.schemas import EmailRequest, RecipientResult
from ats.services.pdf_generator import create_application_form

logger = logging.getLogger(__name__)

REGISTRATION_PATTERN = re.compile(r"SAIL-\d{4}-\d{4}")
TAG_PATTERN = re.compile(r"<[^>]*>")

FILLED_FORM_FILENAME = "ONGC_Internship_Application_Form_Filled.pdf"
TEMPLATE_FILENAME = "ONGC_Internship_Application_Form.pdf"

# Attachment kinds reported back to the caller
ATTACHMENT_FILLED = "filled"
ATTACHMENT_TEMPLATE = "template"


@dataclass
class Attachment:
    filename: str
    content: bytes
    kind: str


@dataclass
class SendOutcome:
    message_id: str
    attachment: Optional[str] = None


@dataclass
class BulkSendResult:
    results: List[RecipientResult] = field(default_factory=list)
    batches: int = 0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def sent(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)


def strip_html(html: str) -> str:
    return TAG_PATTERN.sub("", html or "")


def extract_registration_number(request: EmailRequest) -> str:
    """Explicit registrationNumber, else the first SAIL-YYYY-NNNN in the HTML body."""
    if request.registration_number:
        return request.registration_number
    match = REGISTRATION_PATTERN.search(request.html or "")
    return match.group(0) if match else ""


def describe_delivery_error(exc: Exception) -> str:
    """User-facing message for an SMTP failure."""
    if isinstance(exc, aiosmtplib.SMTPAuthenticationError):
        return "Email authentication failed. Please check your email credentials."
    if isinstance(exc, aiosmtplib.SMTPRecipientsRefused):
        return "Email rejected by recipient server. Please check the recipient email address."
    if isinstance(exc, aiosmtplib.SMTPResponseException) and exc.code == 550:
        return "Email rejected by recipient server. Please check the recipient email address."
    if isinstance(exc, (aiosmtplib.SMTPConnectError, aiosmtplib.SMTPServerDisconnected,
                        aiosmtplib.SMTPTimeoutError, OSError)):
        return "Failed to connect to email server. Please check your network connection."
    return "Failed to send email"


class SmtpSender:
    """Thin wrapper over aiosmtplib using the configured account."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _connection_kwargs(self) -> dict:
        implicit_tls = self.settings.email_port == 465
        return {
            "hostname": self.settings.email_host,
            "port": self.settings.email_port,
            "username": self.settings.email_user,
            "password": self.settings.email_pass,
            "use_tls": implicit_tls,
            "start_tls": self.settings.email_start_tls and not implicit_tls,
            "validate_certs": self.settings.email_validate_certs,
            "timeout": self.settings.email_timeout_seconds,
        }

    async def verify(self) -> None:
        """Connect and authenticate once, raising EmailServiceError on failure."""
        smtp = aiosmtplib.SMTP(**self._connection_kwargs())
        try:
            await smtp.connect()
            await smtp.quit()
        except (aiosmtplib.SMTPException, OSError) as e:
            raise EmailServiceError(describe_delivery_error(e)) from e

    async def send(self, message: EmailMessage) -> str:
        """Send message and return its Message-ID."""
        await aiosmtplib.send(message, **self._connection_kwargs())
        return message["Message-ID"]


class EmailService:

    def __init__(self, settings: Settings, sender, form_builder: Callable[..., bytes] = None):
        self.settings = settings
        self.sender = sender
        self.form_builder = form_builder or create_application_form
        self.batch_size = max(1, settings.email_batch_size)
        self.batch_delay = settings.email_batch_delay_seconds

    # ----------------------------------------------------------
    # Configuration
    # ----------------------------------------------------------

    def ensure_configured(self) -> None:
        if not self.settings.email_configured:
            raise EmailConfigError(
                "Email configuration not found. Please configure EMAIL_USER and EMAIL_PASS in environment variables."
            )

    async def verify(self) -> None:
        self.ensure_configured()
        logger.info(f"🔍 Verifying SMTP {self.settings.email_host}:{self.settings.email_port}")
        await self.sender.verify()

    # ----------------------------------------------------------
    # Message building
    # ----------------------------------------------------------

    def _template_attachment(self, to: str) -> Optional[Attachment]:
        path = self.settings.form_template_path
        if not os.path.isfile(path):
            logger.warning(f"Template PDF not found at {path}; sending to {to} without attachment")
            return None
        with open(path, "rb") as f:
            return Attachment(TEMPLATE_FILENAME, f.read(), ATTACHMENT_TEMPLATE)

    async def build_attachment(self, request: EmailRequest) -> Optional[Attachment]:
        """
        Filled form when applicant data renders, else the blank template.
        Render failures are logged and never abort the send.
        """
        if not request.attach_template:
            return None

        if request.applicant_data:
            registration_number = extract_registration_number(request)
            try:
                pdf_bytes = await asyncio.to_thread(
                    self.form_builder, request.applicant_data, registration_number
                )
                if pdf_bytes:
                    return Attachment(FILLED_FORM_FILENAME, pdf_bytes, ATTACHMENT_FILLED)
                logger.warning(f"Form renderer returned no bytes for {request.to}")
            except Exception:
                logger.exception(f"Error creating filled PDF for {request.to}; using blank template")

        return self._template_attachment(request.to)

    def build_message(self, to: str, subject: str, html: Optional[str], text: Optional[str],
                      attachment: Optional[Attachment] = None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((self.settings.email_from_name, self.settings.email_user))
        message["To"] = to
        message["Subject"] = subject
        message["Date"] = formatdate(localtime=True)
        domain = self.settings.email_user.partition("@")[2] or None
        message["Message-ID"] = make_msgid(domain=domain)

        message.set_content(text or strip_html(html))
        if html:
            message.add_alternative(html, subtype="html")
        if attachment:
            message.add_attachment(
                attachment.content, maintype="application", subtype="pdf", filename=attachment.filename
            )
        return message

    # ----------------------------------------------------------
    # Sending
    # ----------------------------------------------------------

    async def send(self, request: EmailRequest) -> SendOutcome:
        """Send one email. SMTP errors propagate to the caller."""
        attachment = await self.build_attachment(request)
        message = self.build_message(request.to, request.subject, request.html, request.text, attachment)
        message_id = await self.sender.send(message)
        logger.info(f"📧 Email sent to {request.to} ({message_id})")
        return SendOutcome(message_id, attachment.kind if attachment else None)

    async def send_test(self, to: str, subject: str, html: str) -> str:
        message = self.build_message(to, subject, html, None)
        message_id = await self.sender.send(message)
        logger.info(f"✅ Test email sent to {to} ({message_id})")
        return message_id

    async def _send_recipient(self, request: EmailRequest) -> RecipientResult:
        try:
            outcome = await self.send(request)
            return RecipientResult(
                to=request.to, success=True, message_id=outcome.message_id, attachment=outcome.attachment
            )
        except Exception as e:
            logger.error(f"Failed to send email to {request.to}: {e}")
            return RecipientResult(to=request.to, success=False, error=str(e) or describe_delivery_error(e))

    async def send_bulk(self, requests: Sequence[EmailRequest]) -> BulkSendResult:
        """
        Send in batches of batch_size, pausing batch_delay seconds between
        batches. Failures are recorded per recipient.
        """
        result = BulkSendResult()
        for start in range(0, len(requests), self.batch_size):
            batch = requests[start:start + self.batch_size]
            result.batches += 1
            batch_results = await asyncio.gather(*(self._send_recipient(r) for r in batch))
            result.results.extend(batch_results)

            if start + self.batch_size < len(requests) and self.batch_delay > 0:
                await asyncio.sleep(self.batch_delay)

        logger.info(f"📬 Bulk send finished: {result.sent} sent, {result.failed} failed, {result.batches} batches")
        return result
