"""
SAIL Applicant Tracking
Internship applicant tracking for the ONGC Dehradun SAIL programme.

Architecture:
- SQL: HR portal users (SQLite by default, PostgreSQL optional)
- MongoDB: Applicant records and registration counters
- ReportLab: Bilingual application form PDFs
- aiosmtplib: Applicant notifications
"""

__version__ = "1.0.0"
