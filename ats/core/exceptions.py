"""
Domain exceptions.

Routes translate these into HTTP errors; services raise them.
"""


class AtsError(Exception):
    """Base class for application errors."""


# PDF form
class FontAssetError(AtsError):
    """The multilingual font file needed for the form is missing."""


class LayoutError(AtsError):
    """A layout coordinate falls outside the page."""


class FormRenderError(AtsError):
    """Assembling or serialising the application form failed."""


# Email
class EmailConfigError(AtsError):
    """SMTP credentials are not configured."""


class EmailServiceError(AtsError):
    """The SMTP server could not be reached or rejected our credentials."""


# Users
class DuplicateUserError(AtsError):
    """Email or employee ID already registered."""


# Applicants
class InvalidStatusTransition(AtsError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change status from '{current}' to '{target}'")


class DuplicateApplicantError(AtsError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Applicant with email '{email}' already exists")
