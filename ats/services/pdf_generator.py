"""
ONGC Application Form PDF Generator.

Creates the complete application form from scratch (no template):
1. Check the multilingual font exists (fail fast)
2. Register it with ReportLab
3. Normalise + bilingual-format the applicant data
4. Draw structure, then data, on one A4 page
5. Return the PDF bytes

Callers that cannot use the result (missing font, render error) fall back
to the static blank template.
"""

import io
import logging
import os
import zlib
from functools import lru_cache
from typing import Any, Mapping, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen.canvas import Canvas

from ats.core.config import get_settings
from ats.core.exceptions import FontAssetError, FormRenderError
from ats.services.form_renderer import render_form
from ats.utils.bilingual_formatter import format_applicant_data
from ats.utils.form_layout import PAGE_HEIGHT, PAGE_WIDTH, build_layout

logger = logging.getLogger(__name__)

# Older clients send these keys; map them onto the record's field names.
LEGACY_FIELD_ALIASES = {
    "mobile": "mobileNo",
    "father": "fatherMotherName",
    "father_occupation": "fatherMotherOccupation",
    "college": "presentInstitute",
    "course": "areasOfTraining",
    "semester": "presentSemester",
    "cgpa": "lastSemesterSGPA",
    "percentage": "percentageIn10Plus2",
}


def normalize_form_data(applicant_data: Optional[Mapping[str, Any]]) -> dict:
    """Copy applicant_data, filling canonical keys from legacy aliases when missing."""
    data = dict(applicant_data or {})
    for alias, canonical in LEGACY_FIELD_ALIASES.items():
        if not data.get(canonical) and data.get(alias):
            data[canonical] = data[alias]
    return data


def resolve_font_path(font_path: Optional[str] = None) -> str:
    """Return the font path to use, raising FontAssetError if it does not exist."""
    path = font_path or get_settings().form_font_path
    if not os.path.isfile(path):
        raise FontAssetError(f"Font file not found: {path}")
    return path


@lru_cache()
def register_font(font_path: str) -> str:
    """Register a TrueType font once per path and return its ReportLab name."""
    stem = os.path.splitext(os.path.basename(font_path))[0]
    font_name = f"Form-{stem}-{zlib.crc32(font_path.encode()):08x}"
    pdfmetrics.registerFont(TTFont(font_name, font_path))
    logger.info(f"📁 Font registered: {font_name} ({os.path.getsize(font_path)} bytes)")
    return font_name


def create_application_form(
    applicant_data: Optional[Mapping[str, Any]],
    registration_number: Optional[str] = "",
    font_path: Optional[str] = None,
) -> bytes:
    """
    Create the filled application form.

    Args:
        applicant_data: ApplicantRecord-shaped mapping (missing fields stay blank)
        registration_number: e.g. SAIL-2025-0001, drawn in the Personal block
        font_path: override of Settings.form_font_path

    Returns:
        PDF bytes (single A4 page)

    Raises:
        FontAssetError: font file missing (nothing has been drawn)
        FormRenderError: ReportLab failed while building the document
    """
    path = resolve_font_path(font_path)

    try:
        font_name = register_font(path)
    except Exception as e:
        raise FormRenderError(f"Could not load font {path}: {e}") from e

    formatted = format_applicant_data(normalize_form_data(applicant_data))

    buffer = io.BytesIO()
    try:
        canvas = Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
        canvas.setTitle("ONGC Internship Application Form")
        drawn = render_form(
            canvas, font_name, formatted, registration_number, build_layout(PAGE_WIDTH, PAGE_HEIGHT)
        )
        canvas.showPage()
        canvas.save()
    except Exception as e:
        raise FormRenderError(f"Could not render application form: {e}") from e

    pdf_bytes = buffer.getvalue()
    logger.info(f"✅ Application form created ({drawn} values, {len(pdf_bytes)} bytes)")
    return pdf_bytes
